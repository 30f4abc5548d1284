"""co2flux: air-sea CO2 flux diagnostics for ocean carbon models.

Copyright (C), 2020 Ulrich G. Wortmann

This program is free software: you can redistribute it and/or modify
it under the terms of the GNU General Public License as published by
the Free Software Foundation, either version 3 of the License, or (at
your option) any later version.

This program is distributed in the hope that it will be useful, but
WITHOUT ANY WARRANTY; without even the implied warranty of
MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the GNU
General Public License for more details.

You should have received a copy of the GNU General Public License
along with this program.  If not, see <https://www.gnu.org/licenses/>.
"""

from __future__ import annotations

import typing as tp

import numpy as np
import numpy.typing as npt

from .co2flux_base import co2fluxBase

# declare numpy types
NDArrayFloat = npt.NDArray[np.float64]


class FieldError(Exception):
    """Custom Error Class for field shape and grid errors."""

    def __init__(self, message):
        """Initialize Error Instance with formatted message."""
        message = f"\n\n{message}\n"
        super().__init__(message)


class RectilinearGrid(co2fluxBase):
    """A rectilinear grid with uniform vertical spacing.

    Example::

        grid = RectilinearGrid(
            size=64,  # number of vertical levels for a single column
            z=(-256, 0),  # bottom and top in m
        )

        grid = RectilinearGrid(size=(4, 2, 64), z=(-256, 0), x=(0, 1e5))

    Index k = 0 is the bottom cell, k = Nz - 1 the surface cell.
    """

    def __init__(self, **kwargs) -> None:
        self.defaults: dict[str, list[any, tuple]] = {
            "name": ["grid", (str)],
            "size": ["None", (int, tuple, list)],
            "z": [(-1.0, 0.0), (tuple, list)],
            "x": [(0.0, 1.0), (tuple, list)],
            "y": [(0.0, 1.0), (tuple, list)],
        }
        self.lrk: list = ["size"]
        self.__initialize_keyword_variables__(kwargs)

        if isinstance(self.size, int):
            self.size = (1, 1, self.size)
        if len(self.size) != 3 or min(self.size) < 1:
            raise FieldError(f"size must be Nz or (Nx, Ny, Nz) with Nx, Ny, Nz > 0, not {self.size}")

        self.Nx, self.Ny, self.Nz = (int(n) for n in self.size)
        bottom, top = (float(v) for v in self.z)
        if top <= bottom:
            raise FieldError(f"z = {self.z} must be given as (bottom, top)")

        self.Lz: float = top - bottom
        self.dz: float = self.Lz / self.Nz
        self.z_faces: NDArrayFloat = np.linspace(bottom, top, self.Nz + 1)
        self.z_nodes: NDArrayFloat = 0.5 * (self.z_faces[:-1] + self.z_faces[1:])
        self.x_nodes: NDArrayFloat = self._centres(self.x, self.Nx)
        self.y_nodes: NDArrayFloat = self._centres(self.y, self.Ny)
        self.__register_name__()

    def _centres(self, extent, n) -> NDArrayFloat:
        faces = np.linspace(float(extent[0]), float(extent[1]), n + 1)
        return 0.5 * (faces[:-1] + faces[1:])

    @property
    def shape(self) -> tuple[int, int, int]:
        return (self.Nx, self.Ny, self.Nz)

    @property
    def surface_shape(self) -> tuple[int, int]:
        return (self.Nx, self.Ny)


class Field(co2fluxBase):
    """Gridded data with index access.

    Example::

        T = Field(grid=grid, name="T")
        T.set(lambda z: 20 + 0.01 * z)
        T[0, 0, grid.Nz - 1]  # surface value

        flux = Field(grid=grid, name="co2_flux", surface=True)
        flux[0, 0] = 1e-8

    Volume fields have the shape (Nx, Ny, Nz), surface fields
    (Nx, Ny). Data are float64 numpy arrays and are changed in place.
    """

    def __init__(self, **kwargs) -> None:
        self.defaults: dict[str, list[any, tuple]] = {
            "name": ["field", (str)],
            "grid": ["None", (RectilinearGrid)],
            "surface": [False, (bool)],
            "units": ["", (str)],
        }
        self.lrk: list = ["grid"]
        self.__initialize_keyword_variables__(kwargs)

        shape = self.grid.surface_shape if self.surface else self.grid.shape
        self.data: NDArrayFloat = np.zeros(shape, dtype=np.float64)
        self.__register_name__()

    def __getitem__(self, index):
        return self.data[index]

    def __setitem__(self, index, value) -> None:
        self.data[index] = value

    @property
    def shape(self) -> tuple:
        return self.data.shape

    def set(self, value: float | NDArrayFloat | tp.Callable) -> Field:
        """Set the field values.

        value can be a number, an array that broadcasts to the field
        shape, or for volume fields a function of z evaluated at the
        cell centres.
        """
        if callable(value):
            if self.surface:
                raise FieldError(f"{self.full_name}: surface fields cannot be set from a function of z")
            column = np.array([value(z) for z in self.grid.z_nodes], dtype=np.float64)
            self.data[...] = column[np.newaxis, np.newaxis, :]
        else:
            try:
                self.data[...] = np.broadcast_to(np.asarray(value, dtype=np.float64), self.data.shape)
            except ValueError as err:
                raise FieldError(
                    f"{self.full_name}: cannot set data of shape {np.shape(value)} "
                    f"on a field of shape {self.data.shape}"
                ) from err
        return self

    def surface_values(self) -> NDArrayFloat:
        """Return a view on the top layer (Nx, Ny)."""
        if self.surface:
            return self.data
        return self.data[:, :, -1]

    def interior(self, i: int = 0, j: int = 0) -> NDArrayFloat:
        """Return the column at (i, j) for volume fields, or the value
        at (i, j) for surface fields."""
        return self.data[i, j]

    def copy(self) -> NDArrayFloat:
        return self.data.copy()
