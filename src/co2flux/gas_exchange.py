"""co2flux: air-sea CO2 flux diagnostics for ocean carbon models.

Copyright(C), 2020-2021 Ulrich G. Wortmann

This program is free software: you can redistribute it and/or
modify it under the terms of the GNU General Public License as
published by the Free Software Foundation, either version 3 of
the License, or (at your option) any later version.

This program is distributed in the hope that it will be useful,
but WITHOUT ANY WARRANTY; without even the implied warranty of
MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the GNU
General Public License for more details.

You should have received a copy of the GNU General Public License
along with this program.  If not, see
<https://www.gnu.org/licenses/>.
"""

from __future__ import annotations

from math import sqrt

from .utility_functions import cmhr_to_ms


def schmidt_number(temperature: float, p: tuple) -> float:
    """Calculate the Schmidt number of CO2 in seawater.

    Parameters
    ----------
    temperature : float
        temperature in C, the fit is valid between -2 and 40 C
    p : tuple
        a tuple with the polynomial coefficients a0 ... a4 and the
        normalization constant a5

    Returns
    -------
    float
        the Schmidt number divided by a5

    Explanation
    -----------
    Sc = (a0 - a1 * T + a2 * T**2 - a3 * T**3 + a4 * T**4) / a5

    after Wanninkhof (2014), doi:10.4319/lom.2014.12.351. With the
    default a5 = 660 this is the ratio between the Schmidt number and
    the reference Schmidt number of the exchange coefficient.
    """
    a0, a1, a2, a3, a4, a5 = p
    t = temperature

    return (a0 - a1 * t + a2 * t**2 - a3 * t**3 + a4 * t**4) / a5


def piston_velocity(sc: float, wind_speed: float, exchange_coefficient: float) -> float:
    """Calculate the gas transfer (piston) velocity.

    Parameters
    ----------
    sc : float
        normalized Schmidt number, see schmidt_number()
    wind_speed : float
        wind speed at 10 m above the sea surface in m/s
    exchange_coefficient : float
        gas exchange coefficient in cm/hr

    Returns
    -------
    float
        piston velocity in m/s

    Kw = k * U10**2 / sqrt(Sc), Wanninkhof (1992). A non-positive
    Schmidt number raises ValueError.
    """
    return cmhr_to_ms(exchange_coefficient) * wind_speed**2 / sqrt(sc)


def gas_exchange_flux(
    pco2_atmosphere: float,
    k_sol_atmosphere: float,
    pco2_ocean: float,
    k_sol_ocean: float,
    kw: float,
    reference_density: float,
) -> float:
    """Calculate the CO2 flux across the air sea interface.

    Parameters
    ----------
    pco2_atmosphere : float
        atmospheric pCO2 in atm
    k_sol_atmosphere : float
        solubility on the atmosphere side in mol/(kg atm)
    pco2_ocean : float
        oceanic pCO2 in atm
    k_sol_ocean : float
        solubility on the ocean side in mol/(kg atm)
    kw : float
        piston velocity in m/s
    reference_density : float
        seawater density in kg/m**3

    Returns
    -------
    float
        flux in mol/(m**2 s), positive upwards (outgassing), negative
        for ocean uptake.
    """
    return (
        -kw
        * (pco2_atmosphere * k_sol_atmosphere - pco2_ocean * k_sol_ocean)
        * reference_density
    )
