"""co2flux: air-sea CO2 flux diagnostics for ocean carbon models.

Copyright (C), 2020-2021 Ulrich G. Wortmann

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

import functools
import logging
import typing as tp
from math import isfinite, sqrt

from .co2flux_base import co2fluxBase
from .seawater import SeawaterConstants
from .utility_functions import phc


class SolverError(Exception):
    """Custom Error Class for solver-related errors."""

    def __init__(self, message):
        """Initialize Error Instance with formatted message."""
        message = f"\n\n{message}\n"
        super().__init__(message)


class CarbonateSolverResult(tp.NamedTuple):
    """Result of a carbonate system solve.

    pco2_ocean is in atm, the solubility coefficients are in
    mol/(kg atm).
    """

    pco2_ocean: float
    k_sol_atmosphere: float
    k_sol_ocean: float
    ph: float
    iterations: int


def get_hplus(dic, ta, h0, boron, pt, sit, K1, K1K2, KW, KB, K1P, K2P, K3P, KSi) -> float:
    """Calculate H+ concentration based on a previous estimate
    [H+]. After Follows et al. 2006,
    doi:10.1016/j.ocemod.2005.05.004

    The non-carbonate alkalinity includes borate, water, phosphate and
    silicate.

    :param dic: DIC in mol/kg
    :param ta: TA in mol/kg
    :param h0: initial guess for H+ mol/kg
    :param boron: boron concentration
    :param pt: total phosphate in mol/kg
    :param sit: total silicate in mol/kg
    :param K1: Ksp1
    :param K1K2: Ksp1 * Ksp2
    :param KW: K_water
    :param KB: K_boron
    :param K1P: first dissociation constant of phosphoric acid
    :param K2P: second dissociation constant of phosphoric acid
    :param K3P: third dissociation constant of phosphoric acid
    :param KSi: dissociation constant of silicic acid

    :returns H: new H+ concentration in mol/kg
    """
    oh = KW / h0
    boh4 = boron * KB / (h0 + KB)

    # phosphate speciation
    den = h0**3 + K1P * h0**2 + K1P * K2P * h0 + K1P * K2P * K3P
    h3po4 = pt * h0**3 / den
    hpo4 = pt * K1P * K2P * h0 / den
    po4 = pt * K1P * K2P * K3P / den

    siooh3 = sit * KSi / (KSi + h0)

    fg = h0 - boh4 - oh - hpo4 - 2 * po4 + h3po4 - siooh3
    cag = ta + fg
    gamm = dic / cag
    dummy = (1 - gamm) ** 2 * K1**2 - 4.0 * K1K2 * (1.0 - 2.0 * gamm)

    return 0.5 * ((gamm - 1.0) * K1 + sqrt(dummy))


class CarbonSystemSolver(co2fluxBase):
    """Solve the carbonate system for oceanic pCO2.

    Equilibrium constants are taken from PyCO2SYS, [H+] is iterated with
    get_hplus() starting from the pH guess until the relative change is
    smaller than rtol.

    Example::

        solver = CarbonSystemSolver(opt_k_carbonic=10, rtol=1e-10)
        r = solver(
            15.0,  # temperature in C
            35.0,  # salinity
            0.0,  # applied pressure anomaly in atm
            2.05e-3,  # DIC in mol/kg
            2.29e-3,  # TA in mol/kg
            2.4e-6,  # PO4 in mol/kg
            15e-6,  # silicate in mol/kg
            8.0,  # pH guess
            280e-6,  # atmospheric pCO2 in atm
        )
        r.pco2_ocean, r.k_sol_atmosphere, r.k_sol_ocean

    The solubility coefficients convert a partial pressure into the
    dissolved CO2 concentration [CO2*]. The atmosphere side uses the
    fugacity factor at 1 atm, the ocean side at 1 atm plus the applied
    pressure anomaly. pco2_ocean * k_sol_ocean is [CO2*] of the
    surface water.

    Raises SolverError if DIC or TA are not positive, or if the
    iteration does not converge within max_iterations.
    """

    def __init__(self, **kwargs) -> None:
        self.defaults: dict[str, list[any, tuple]] = {
            "name": ["carbon_system_solver", (str)],
            "opt_k_carbonic": [10, (int)],
            "opt_pH_scale": [1, (int)],  # 1: total scale
            "rtol": [1.0e-10, (float)],
            "max_iterations": [100, (int)],
        }
        self.lrk: list = []
        self.__initialize_keyword_variables__(kwargs)
        self.__register_name__()

    def __call__(
        self,
        temperature: float,
        salinity: float,
        applied_pressure: float,
        dic: float,
        ta: float,
        po4: float,
        sit: float,
        ph_guess: float,
        pco2_atmosphere: float,
    ) -> CarbonateSolverResult:
        """Return oceanic pCO2 and the solubility coefficients."""
        for key, value in (("DIC", dic), ("TA", ta)):
            if not isfinite(value) or value <= 0:
                raise SolverError(f"{key} must be positive, got {value} mol/kg")

        swc = self.equilibrium_constants(temperature, salinity)
        hplus, iterations = self.solve_hplus(swc, dic, ta, po4, sit, 10**-ph_guess)

        co2aq = dic / (1 + swc.K1 / hplus + swc.K1K2 / hplus**2)
        p_atm = 1.0
        p_ocean = p_atm + applied_pressure
        k_sol_atmosphere = swc.K0 * swc.fugacity_factor(p_atm, pco2_atmosphere / p_atm)
        k_sol_ocean = swc.K0 * swc.fugacity_factor(p_ocean, pco2_atmosphere / p_ocean)

        return CarbonateSolverResult(
            pco2_ocean=co2aq / k_sol_ocean,
            k_sol_atmosphere=k_sol_atmosphere,
            k_sol_ocean=k_sol_ocean,
            ph=float(phc(hplus)),
            iterations=iterations,
        )

    def equilibrium_constants(self, temperature, salinity) -> SeawaterConstants:
        """Return the SeawaterConstants for the surface at T and S.

        Results are cached, so columns and steps with the same T and S
        share one PyCO2SYS call.
        """
        return _surface_constants(
            float(temperature),
            float(salinity),
            self.opt_k_carbonic,
            self.opt_pH_scale,
        )

    def solve_hplus(self, swc, dic, ta, po4, sit, h0) -> tuple[float, int]:
        """Iterate get_hplus() until it converges.

        :returns: (H+ in mol/kg, number of iterations)
        """
        hplus = h0
        for i in range(1, self.max_iterations + 1):
            try:
                h_new = get_hplus(
                    dic,
                    ta,
                    hplus,
                    swc.boron,
                    po4,
                    sit,
                    swc.K1,
                    swc.K1K2,
                    swc.KW,
                    swc.KB,
                    swc.K1P,
                    swc.K2P,
                    swc.K3P,
                    swc.KSi,
                )
            except (ValueError, ZeroDivisionError) as err:
                raise SolverError(
                    f"[H+] iteration failed at step {i} for DIC = {dic:.4e}, "
                    f"TA = {ta:.4e}: {err}"
                ) from err

            if not isfinite(h_new) or h_new <= 0:
                raise SolverError(f"[H+] iteration diverged at step {i}, H+ = {h_new}")

            if abs(h_new - hplus) <= self.rtol * h_new:
                logging.debug(f"{self.full_name}: H+ = {h_new:.4e} after {i} iterations")
                return h_new, i

            hplus = h_new

        raise SolverError(
            f"[H+] did not converge within {self.max_iterations} iterations "
            f"(DIC = {dic:.4e}, TA = {ta:.4e}, last H+ = {hplus:.4e})"
        )


@functools.cache
def default_solver() -> CarbonSystemSolver:
    """Return the shared CarbonSystemSolver with default options."""
    return CarbonSystemSolver()


def solve_carbonate_system(*args) -> CarbonateSolverResult:
    """Solve the carbonate system with the default CarbonSystemSolver.

    Takes the same positional arguments as CarbonSystemSolver.__call__
    """
    return default_solver()(*args)


@functools.lru_cache(maxsize=4096)
def _surface_constants(
    temperature: float,
    salinity: float,
    opt_k_carbonic: int,
    opt_pH_scale: int,
) -> SeawaterConstants:
    """Equilibrium constants at the sea surface (P = 0 bar)."""
    return SeawaterConstants(
        name="surface_constants",
        temperature=temperature,
        salinity=salinity,
        opt_k_carbonic=opt_k_carbonic,
        opt_pH_scale=opt_pH_scale,
        constants_only=True,
    )
