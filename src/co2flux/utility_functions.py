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

if tp.TYPE_CHECKING:
    from co2flux import Q_

# declare numpy types
NDArrayFloat = npt.NDArray[np.float64]

# 1 cm/hr = 1 / 3.6e5 m/s
CMHR_PER_MS: float = 1 / 3.6e5


def phc(c: float) -> float:
    """Calculate concentration as pH.

    c can be a number or numpy array

    Parameters
    ----------
    c : float
        H+ concentration

    Returns
    -------
    float
        pH value

    """
    pH: float = -np.log10(c)
    return pH


def check_for_quantity(quantity, unit):
    r"""Check if keyword is quantity or string an convert as necessary.

    - If input is a string, convert string into a quantity
    - If input is a quantity, do nothing
    - if input is a number, convert to default quantity

    Parameters
    ----------
    quantity : str | quantity | float | int
        e.g., "12 m/s", or 12,
    unit : str
        desired unit for keyword, e.g., "m/s"

    Returns
    -------
    Q\_
        Returns a Quantity

    Raises
    ------
    ValueError
        if keywword is neither number, str or quantity

    """
    from co2flux import Q_

    if isinstance(quantity, str):
        quantity = Q_(quantity)
    elif isinstance(quantity, float | int):
        quantity = Q_(quantity, unit)
    elif not isinstance(quantity, Q_):
        raise ValueError("kw must be string, number or Quantity")

    return quantity


def map_units(value: str | float | Q_, unit: str) -> float:
    """Return the magnitude of value expressed in unit.

    Numbers are assumed to be in unit already, strings and quantities
    are converted.

    Raises
    ------
    pint.DimensionalityError
        if value cannot be expressed in unit
    """
    return float(check_for_quantity(value, unit).to(unit).magnitude)


def to_mol_per_kg(c: float | NDArrayFloat, reference_density: float):
    """Convert a concentration from mol/m**3 to mol/kg.

    Parameters
    ----------
    c : float | NDArrayFloat
        concentration in mol/m**3
    reference_density : float
        seawater density in kg/m**3
    """
    return c / reference_density


def to_mol_per_m3(c: float | NDArrayFloat, reference_density: float):
    """Convert a concentration from mol/kg to mol/m**3."""
    return c * reference_density


def cmhr_to_ms(k: float) -> float:
    """Convert a transfer velocity from cm/hr to m/s."""
    return k * CMHR_PER_MS
