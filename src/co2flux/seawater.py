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

import warnings
from math import exp, log10

import PyCO2SYS as pyco2

from .co2flux_base import co2fluxBase

# gas constant in cm**3 bar / (mol K)
R_GAS: float = 83.14462618
# 1 atm in bar
BAR_PER_ATM: float = 1.01325


class SeawaterConstants(co2fluxBase):
    """Provide basic seawater properties as a function of T, P and Salinity.

    Example::

        SeawaterConstants(
            temperature=15.0,  # optional in C, defaults to 25,
            salinity=35.0,  # optional in psu, defaults to 35,
            pressure=0,  # optional, hydrostatic pressure in bar, defaults to 0
            dic=2.05e-3,  # optional, mol/kg
            ta=2.29e-3,  # optional, mol/kg
            po4=2.4e-6,  # optional, mol/kg
            sio4=15e-6,  # optional, mol/kg
        )

    Results are always in mol/kg

    This class provides "K0", "K1", "K2", "KW", "KB", "KS", "KF", "K1P",
    "K2P", "K3P", "KSi" and their corresponding pK values, the total
    boron concentration, the density for the given P/T/S conditions, and
    the PyCO2SYS estimates of pH and pCO2 for the given DIC and TA.

    If DIC or TA are not given, the equilibrium constants are computed
    with the composition of standard seawater. Use constants_only=True
    to skip the carbonate system calculation altogether. The constants
    only depend on T, S and P.

    useful methods:

    SW.show() will list values

    Since this class is just a frontend to PyCO2SYS, it is easy to add
    parameters that are supported in PyCO2SYS. See the update_parameters()
    method.
    """

    def __init__(self, **kwargs) -> None:
        self.defaults: dict[str, list[any, tuple]] = {
            "name": ["swc", (str)],
            "salinity": [35.0, (int, float)],
            "temperature": [25.0, (int, float)],
            "pressure": [0, (int, float)],
            "dic": ["None", (str, float)],
            "ta": ["None", (str, float)],
            "po4": [0.0, (int, float)],
            "sio4": [0.0, (int, float)],
            "opt_k_carbonic": [10, (int)],
            "opt_pH_scale": [1, (int)],
            "constants_only": [False, (bool)],
        }

        self.lrk: list = []
        self.__initialize_keyword_variables__(kwargs)
        self.parent = "None"

        self.constants: list = [
            "K0",
            "K1",
            "K2",
            "KW",
            "KB",
            "KS",
            "KF",
            "K1P",
            "K2P",
            "K3P",
            "KSi",
        ]

        if self.constants_only:
            self.dic = self.ta = "None"
        elif self.dic == "None" or self.ta == "None":
            self.__init_std_seawater__()
            warnings.warn(f"Initializing {self.name} with default seawater", stacklevel=2)

        self.update_parameters()
        self.__register_name__()

    def update_parameters(self) -> None:
        """Update the equilibrium constants from PyCO2SYS.

        With constants_only = True, PyCO2SYS is called without a
        carbonate system parameter pair. It then only computes the
        equilibrium constants and total salt contents, and pH, pCO2
        and fCO2 are not available.
        """
        kwargs = dict(
            salinity=self.salinity,
            temperature=self.temperature,
            pressure=self.pressure * 10,  # in deci bar!
            total_phosphate=self.po4 * 1e6,
            total_silicate=self.sio4 * 1e6,
            opt_k_carbonic=self.opt_k_carbonic,
            opt_pH_scale=self.opt_pH_scale,
        )
        if not self.constants_only:
            kwargs.update(
                par1_type=1,  # "1" =  "alkalinity"
                par1=self.ta * 1e6,
                par2_type=2,  # "2" = dic
                par2=self.dic * 1e6,
                opt_buffers_mode=0,  # skip the buffer factors
            )

        results = pyco2.sys(**kwargs)
        self.density = self.get_density(self.salinity, self.temperature, self.pressure)

        self.K0 = float(results["k_CO2"])
        self.K1 = float(results["k_carbonic_1"])
        self.K2 = float(results["k_carbonic_2"])
        self.KW = float(results["k_water"])
        self.KB = float(results["k_borate"])
        self.KS = float(results["k_bisulfate"])
        self.KF = float(results["k_fluoride"])
        self.K1P = float(results["k_phosphoric_1"])
        self.K2P = float(results["k_phosphoric_2"])
        self.K3P = float(results["k_phosphoric_3"])
        self.KSi = float(results["k_silicate"])
        self.K1K2 = self.K1 * self.K2
        self.boron = float(results["total_borate"]) * 1e-6

        if self.constants_only:
            self.pH = self.hplus = self.pCO2 = self.fCO2 = "None"
        else:
            self.pH = float(results["pH"])
            self.hplus = 10**-self.pH
            self.pCO2 = float(results["pCO2"]) * 1e-6  # atm
            self.fCO2 = float(results["fCO2"]) * 1e-6  # atm

    def show(self) -> None:
        """Printout constants. Units are mol/kg or
        (mol**2/kg for doubly charged ions"""

        print(f"\nSeawater constants for {self.full_name}")
        print(f"T = {self.temperature} [C]")
        print(f"P = {self.pressure} [bar]")
        print(f"S = {self.salinity} [PSU]")
        print(f"density = {self.density:.4f} [kg/m**3]\n")
        if not self.constants_only:
            print(f"dic = {self.dic:.5e} mol/kg")
            print(f"ta = {self.ta:.5e} mol/kg")
            print(f"pH = {self.pH:.4f}")
            print(f"pCO2 = {self.pCO2 * 1e6:.2f} uatm")
        print(f"boron = {self.boron:.5e} mol/kg\n")

        for n in self.constants:
            K = getattr(self, n)  # get K value
            pk = f"p{n.lower()}"  # get K name
            print(f"{n} = {K:.2e}, {pk} = {-log10(K):.4f}")

        print()

    def get_density(self, S, TC, P) -> float:
        """Calculate seawater density as function of
        temperature, salinity and pressure

        :param S: salinity in PSU
        :param TC:  temp in C
        :param P: pressure in bar

        :returns rho: in kg/m**3
        """

        # density of pure water
        rhow = (
            999.842594
            + 6.793952e-2 * TC
            - 9.095290e-3 * TC**2
            + 1.001685e-4 * TC**3
            - 1.120083e-6 * TC**4
            + 6.536332e-9 * TC**5
        )

        # density of of seawater at 1 atm, P=0
        A = (
            8.24493e-1
            - 4.0899e-3 * TC
            + 7.6438e-5 * TC**2
            - 8.2467e-7 * TC**3
            + 5.3875e-9 * TC**4
        )
        B = -5.72466e-3 + 1.0227e-4 * TC - 1.6546e-6 * TC**2
        C = 4.8314e-4
        rho0 = rhow + A * S + B * S ** (3 / 2) + C * S**2

        # Secant bulk modulus of pure water
        Ksbmw = (
            19652.21
            + 148.4206 * TC
            - 2.327105 * TC**2
            + 1.360477e-2 * TC**3
            - 5.155288e-5 * TC**4
        )
        # Secant bulk modulus of seawater at 1 atm
        Ksbm0 = (
            Ksbmw
            + S * (54.6746 - 0.603459 * TC + 1.09987e-2 * TC**2 - 6.1670e-5 * TC**3)
            + S ** (3 / 2) * (7.944e-2 + 1.6483e-2 * TC - 5.3009e-4 * TC**2)
        )
        # Secant modulus of seawater at S,T,P
        Ksbm = (
            Ksbm0
            + P
            * (3.239908 + 1.43713e-3 * TC + 1.16092e-4 * TC**2 - 5.77905e-7 * TC**3)
            + P * S * (2.2838e-3 - 1.0981e-5 * TC - 1.6078e-6 * TC**2)
            + P * S ** (3 / 2) * 1.91075e-4
            + P * P * (8.50935e-5 - 6.12293e-6 * TC + 5.2787e-8 * TC**2)
            + P**2 * S * (-9.9348e-7 + 2.0816e-8 * TC + 9.1697e-10 * TC**2)
        )
        # Density of seawater at S,T,P in kg/m^3
        return rho0 / (1.0 - P / Ksbm)

    def fugacity_factor(self, pressure: float = 1.0, xco2: float = 0.0) -> float:
        """Calculate the ratio of CO2 fugacity to CO2 partial pressure.

        Virial coefficients after Weiss 1974,
        doi:10.1016/0304-4203(74)90015-2

        :param pressure: total gas pressure in atm
        :param xco2: mole fraction of CO2 in the gas phase

        :returns: fugacity factor, dimensionless
        """
        TK = self.temperature + 273.15
        B = -1636.75 + 12.0408 * TK - 0.0327957 * TK**2 + 3.16528e-5 * TK**3
        delta = 57.7 - 0.118 * TK
        P = pressure * BAR_PER_ATM

        return exp((B + 2 * (1 - xco2) ** 2 * delta) * P / (R_GAS * TK))

    def __init_std_seawater__(self) -> None:
        """Provide values for standard seawater. Data after Zeebe and Gladrow
        all values in mol/kg. All values after Zeebe and Gladrow 2001

        This only used so that we can call pyco2SYS in order to get the
        equilibrium constants.
        """
        co2aq = 0.00001
        hco3 = 0.00177
        co3 = 0.00026
        self.dic = co2aq + hco3 + co3
        self.ta = hco3 + 2 * co3  # estimate
