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

from pint import DimensionalityError, UndefinedUnitError

from .co2flux_base import InputError, co2fluxBase
from .initialize_unit_registry import Q_
from .utility_functions import map_units


class FluxParametersError(Exception):
    """Custom Error Class for attempts to modify FluxParameters."""

    def __init__(self, message):
        """Initialize Error Instance with formatted message."""
        message = f"\n\n{message}\n"
        super().__init__(message)


class FluxParameters(co2fluxBase):
    """Parameters of the air-sea CO2 flux calculation.

    The instance is created once and is read-only afterwards. Any of
    the defaults can be overridden at construction::

        p = FluxParameters(
            surface_wind_speed="7 m/s",  # or 7, or Q_(7, "m/s")
            atmospheric_pco2=400e-6,  # atm
        )

    Physical quantities accept numbers (in the units listed below),
    strings with units, or pint quantities. They are stored as floats
    in the listed units:

    - surface_wind_speed: 10 m/s
    - applied_pressure: 0 atm, surface pressure anomaly relative to 1 atm
    - atmospheric_pco2: 280e-6 atm
    - exchange_coefficient: 0.337 cm/hr, after Wanninkhof (1992)
    - silicate_conc: 15e-6 mol/kg
    - initial_ph_guess: 8.0
    - reference_density: 1024.5 kg/m**3
    - schmidt_dic_coeff0 ... schmidt_dic_coeff4: coefficients of the
      CO2 Schmidt number polynomial, Wanninkhof (2014)
    - schmidt_dic_coeff5: 660, the Schmidt number the exchange
      coefficient refers to

    Use replace() to derive a modified copy.
    """

    # canonical units of the dimensional parameters
    units: dict[str, str] = {
        "surface_wind_speed": "m/s",
        "applied_pressure": "atm",
        "atmospheric_pco2": "atm",
        "exchange_coefficient": "cm/hr",
        "silicate_conc": "mol/kg",
        "reference_density": "kg/m**3",
    }

    def __init__(self, **kwargs) -> None:
        qt = (int, float, str, Q_)
        self.defaults: dict[str, list[any, tuple]] = {
            "name": ["flux_parameters", (str)],
            "surface_wind_speed": [10.0, qt],
            "applied_pressure": [0.0, qt],
            "atmospheric_pco2": [280e-6, qt],
            "exchange_coefficient": [0.337, qt],
            "silicate_conc": [15e-6, qt],
            "initial_ph_guess": [8.0, (int, float)],
            "reference_density": [1024.5, qt],
            "schmidt_dic_coeff0": [2116.8, (int, float)],
            "schmidt_dic_coeff1": [136.25, (int, float)],
            "schmidt_dic_coeff2": [4.7353, (int, float)],
            "schmidt_dic_coeff3": [9.2307e-2, (int, float)],
            "schmidt_dic_coeff4": [7.555e-4, (int, float)],
            "schmidt_dic_coeff5": [660.0, (int, float)],
        }
        self.lrk: list = []
        self.__initialize_keyword_variables__(kwargs)

        for key, unit in self.units.items():
            setattr(self, key, self._to_unit(key, getattr(self, key), unit))

        for key in self.defaults:
            if key.startswith("schmidt") or key == "initial_ph_guess":
                setattr(self, key, float(getattr(self, key)))

        self.__register_name__()
        logging.debug(f"created {self.full_name}: {self.as_dict()}")
        self._frozen = True

    def _to_unit(self, key: str, value, unit: str) -> float:
        """Convert value to a float in unit and validate the result."""
        try:
            magnitude = map_units(value, unit)
        except (DimensionalityError, UndefinedUnitError) as err:
            raise InputError(f"'{value}' for '{key}' cannot be expressed in {unit}") from err
        try:
            self._validate_value(key, magnitude, (float,))
        except ValueError as err:
            raise InputError(f"Validation failed for '{key}': {str(err)}") from err
        return magnitude

    def __setattr__(self, key, value) -> None:
        if getattr(self, "_frozen", False):
            raise FluxParametersError(
                f"{self.full_name} is read-only, cannot set '{key}'. "
                f"Use replace({key}=...) to create a modified copy"
            )
        super().__setattr__(key, value)

    def __delattr__(self, key) -> None:
        raise FluxParametersError(f"{self.full_name} is read-only, cannot delete '{key}'")

    def __eq__(self, other) -> bool:
        if not isinstance(other, FluxParameters):
            return NotImplemented
        return self.as_dict() == other.as_dict()

    def __hash__(self) -> int:
        return hash(tuple(self.as_dict().items()))

    @property
    def schmidt_coefficients(self) -> tuple[float, ...]:
        """Return (a0, a1, a2, a3, a4, a5)."""
        return tuple(getattr(self, f"schmidt_dic_coeff{i}") for i in range(6))

    def as_dict(self) -> dict[str, float]:
        """Return all parameters (except the name) as floats."""
        return {k: getattr(self, k) for k in self.defaults if k != "name"}

    def replace(self, **kwargs) -> FluxParameters:
        """Return a new instance with some parameters changed."""
        values = {"name": self.name, **self.as_dict()}
        values.update(kwargs)
        return FluxParameters(**values)
