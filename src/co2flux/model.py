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

import logging
import typing as tp

import numpy as np
import numpy.typing as npt

from .co2flux_base import co2fluxBase
from .fields import Field, RectilinearGrid

# declare numpy types
NDArrayFloat = npt.NDArray[np.float64]


class ModelError(Exception):
    """Custom Error Class for Model-related errors."""

    def __init__(self, message):
        """Initialize Error Instance with formatted message."""
        message = f"\n\n{message}\n"
        super().__init__(message)


class FluxBoundaryCondition:
    """Prescribed flux through the top of a tracer column.

    The condition can be a surface Field, a number, or a function of
    time in seconds. Fluxes are positive upwards, i.e., a positive flux
    removes tracer from the top cell.
    """

    def __init__(self, condition: Field | float | tp.Callable[[float], float]):
        if isinstance(condition, Field):
            if not condition.surface:
                raise ModelError(f"{condition.full_name} must be a surface field")
        elif not (callable(condition) or isinstance(condition, int | float)):
            raise ModelError(
                f"flux condition must be a surface Field, number or function, "
                f"not {type(condition)}"
            )
        self.condition = condition

    def value(self, time: float, shape: tuple[int, int]) -> NDArrayFloat:
        """Return the flux at time for every surface point."""
        if isinstance(self.condition, Field):
            return self.condition.data
        if callable(self.condition):
            return np.full(shape, float(self.condition(time)))
        return np.full(shape, float(self.condition))


class ColumnModel(co2fluxBase):
    """Tracer state of an ocean column (or a horizontal array of columns).

    Example::

        model = ColumnModel(
            grid=grid,
            tracers=("T", "S", "DIC", "ALK", "PO4"),  # optional
            boundary_conditions={"T": FluxBoundaryCondition(Q_T)},  # optional
        )
        model.set(T=lambda z: 20 + 0.01 * z, S=35, DIC=2.1)
        model.tracers["DIC"][0, 0, grid.Nz - 1]

    The model only applies the boundary fluxes to the surface cell,
    see time_step(). Interior physics are outside the scope of this
    class.
    """

    def __init__(self, **kwargs) -> None:
        self.defaults: dict[str, list[any, tuple]] = {
            "name": ["model", (str)],
            "grid": ["None", (RectilinearGrid)],
            "tracers": [
                ("T", "S", "DIC", "ALK", "PO4", "NO3", "DOP", "POP", "Fe"),
                (tuple, list),
            ],
            "boundary_conditions": [{}, (dict)],
        }
        self.lrk: list = ["grid"]
        self.__initialize_keyword_variables__(kwargs)
        self.__register_name__()

        self.tracers: dict[str, Field] = {
            n: Field(grid=self.grid, name=n) for n in self.tracers
        }
        self.top_bcs: dict[str, FluxBoundaryCondition] = {}
        for tracer, bc in self.boundary_conditions.items():
            self.set_boundary_condition(tracer, bc)

        self.time: float = 0.0  # seconds
        self.iteration: int = 0
        self.previous_dt: float = 0.0

    def __check_tracer__(self, name: str) -> None:
        if name not in self.tracers:
            raise ModelError(f"{name} is not a tracer of {self.full_name}: {list(self.tracers)}")

    def set(self, **kwargs) -> None:
        """Set initial conditions, e.g., set(DIC=2.1, T=lambda z: 20 + 0.01 * z)."""
        for name, value in kwargs.items():
            self.__check_tracer__(name)
            self.tracers[name].set(value)

    def set_boundary_condition(self, tracer: str, bc) -> None:
        """Register a top flux boundary condition for tracer."""
        self.__check_tracer__(tracer)
        if not isinstance(bc, FluxBoundaryCondition):
            bc = FluxBoundaryCondition(bc)
        if isinstance(bc.condition, Field) and bc.condition.grid is not self.grid:
            raise ModelError(f"{bc.condition.full_name} is not defined on {self.grid.full_name}")
        self.top_bcs[tracer] = bc
        logging.info(f"{self.full_name}: top flux boundary condition for {tracer}")

    def surface_values(self, name: str, i: int, j: int) -> float:
        """Return the value of tracer name in the surface cell at (i, j)."""
        self.__check_tracer__(name)
        return float(self.tracers[name][i, j, self.grid.Nz - 1])

    def time_step(self, dt: float) -> None:
        """Advance the model by dt seconds.

        All top fluxes are evaluated at the current time before any
        tracer is changed. A flux F (positive upwards) changes the top
        cell by -F * dt / dz.
        """
        shape = self.grid.surface_shape
        fluxes = {n: bc.value(self.time, shape).copy() for n, bc in self.top_bcs.items()}

        for name, flux in fluxes.items():
            self.tracers[name].data[:, :, -1] -= flux * dt / self.grid.dz

        self.time += dt
        self.iteration += 1
        self.previous_dt = dt
