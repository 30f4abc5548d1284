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
import warnings
from collections.abc import Callable

from .carbonate_chemistry import CarbonateSolverResult, CarbonSystemSolver
from .co2flux_base import co2fluxBase
from .fields import Field
from .gas_exchange import gas_exchange_flux, piston_velocity, schmidt_number
from .model import ColumnModel, FluxBoundaryCondition
from .parameters import FluxParameters
from .utility_functions import to_mol_per_kg

if tp.TYPE_CHECKING:
    from .simulation import Simulation

Solver = Callable[..., CarbonateSolverResult]


class SurfaceState(tp.NamedTuple):
    """Surface water properties of one column.

    temperature in C, salinity in psu, dic, alk and po4 in mol/kg
    """

    temperature: float
    salinity: float
    dic: float
    alk: float
    po4: float

    @classmethod
    def from_concentrations(cls, temperature, salinity, dic, alk, po4, reference_density):
        """Create a SurfaceState from concentrations in mol/m**3."""
        return cls(
            float(temperature),
            float(salinity),
            to_mol_per_kg(float(dic), reference_density),
            to_mol_per_kg(float(alk), reference_density),
            to_mol_per_kg(float(po4), reference_density),
        )


class FluxResult(tp.NamedTuple):
    """co2_flux in mol/(m**2 s), positive upwards. pCO2 values in atm."""

    co2_flux: float
    pco2_ocean: float
    pco2_atmosphere: float


def compute_flux(
    state: SurfaceState,
    p: FluxParameters,
    solver: Solver,
) -> FluxResult:
    """Calculate the air-sea CO2 flux for one surface point.

    Parameters
    ----------
    state : SurfaceState
        surface temperature, salinity and concentrations in mol/kg
    p : FluxParameters
        flux parameters
    solver : callable
        carbonate system solver, see CarbonSystemSolver

    Returns
    -------
    FluxResult

    Solver errors are not caught.
    """
    r = solver(
        state.temperature,
        state.salinity,
        p.applied_pressure,
        state.dic,
        state.alk,
        state.po4,
        p.silicate_conc,
        p.initial_ph_guess,
        p.atmospheric_pco2,
    )
    sc = schmidt_number(state.temperature, p.schmidt_coefficients)
    kw = piston_velocity(sc, p.surface_wind_speed, p.exchange_coefficient)
    f = gas_exchange_flux(
        p.atmospheric_pco2,
        r.k_sol_atmosphere,
        r.pco2_ocean,
        r.k_sol_ocean,
        kw,
        p.reference_density,
    )

    return FluxResult(f, r.pco2_ocean, p.atmospheric_pco2)


class CO2FluxDiagnostic(co2fluxBase):
    """Compute the air-sea CO2 flux for every surface point of a model.

    Example::

        co2_flux = Field(grid=grid, name="co2_flux", surface=True)
        model = ColumnModel(grid=grid, boundary_conditions={"DIC": co2_flux})
        diagnostic = CO2FluxDiagnostic(
            model=model,
            parameters=FluxParameters(),  # optional
            solver=CarbonSystemSolver(),  # optional
        )
        simulation.add_callback(diagnostic, name="co2_flux")

    If the DIC tracer has a top boundary condition defined by a surface
    Field, the diagnostic writes the flux into this field. Otherwise a new
    field is created and registered as the DIC top boundary condition.

    The results are available as diagnostic.co2_flux, diagnostic.ocean_co2
    and diagnostic.atmos_co2 (surface fields, see outputs). They are
    overwritten on every call.
    """

    def __init__(self, **kwargs) -> None:
        self.defaults: dict[str, list[any, tuple]] = {
            "name": ["co2_flux_diagnostic", (str)],
            "model": ["None", (ColumnModel)],
            "parameters": ["None", (FluxParameters)],
            "solver": ["None", (Callable)],
            "tracer_names": [
                {"T": "T", "S": "S", "DIC": "DIC", "ALK": "ALK", "PO4": "PO4"},
                (dict),
            ],
        }
        self.lrk: list = ["model"]
        self.__initialize_keyword_variables__(kwargs)

        if self.parameters == "None":
            self.parameters = FluxParameters()
        if self.solver == "None":
            self.solver = CarbonSystemSolver()

        grid = self.model.grid
        self.co2_flux: Field = self.__get_flux_field__()
        self.ocean_co2 = Field(grid=grid, name="ocean_co2", surface=True, units="atm")
        self.atmos_co2 = Field(grid=grid, name="atmos_co2", surface=True, units="atm")
        self.__register_name__()

    def __get_flux_field__(self) -> Field:
        """Return the field that holds the DIC top boundary flux."""
        dic = self.tracer_names["DIC"]
        bc = self.model.top_bcs.get(dic)

        if bc is not None and isinstance(bc.condition, Field):
            return bc.condition

        if bc is not None:
            warnings.warn(
                f"\nReplacing the top boundary condition of {dic} in "
                f"{self.model.full_name} with the computed CO2 flux\n",
                stacklevel=3,
            )
        flux = Field(grid=self.model.grid, name="co2_flux", surface=True, units="mol/(m**2 s)")
        self.model.set_boundary_condition(dic, FluxBoundaryCondition(flux))
        return flux

    @property
    def outputs(self) -> dict[str, Field]:
        """Return the result fields by name."""
        return {
            "co2_flux": self.co2_flux,
            "ocean_co2": self.ocean_co2,
            "atmos_co2": self.atmos_co2,
        }

    def __call__(self, simulation: Simulation) -> None:
        """Callback interface, see compute()."""
        self.compute(simulation.model)

    def surface_state(self, model: ColumnModel, i: int, j: int) -> SurfaceState:
        """Read the surface cell at (i, j) and convert to mol/kg."""
        n = self.tracer_names
        return SurfaceState.from_concentrations(
            model.surface_values(n["T"], i, j),
            model.surface_values(n["S"], i, j),
            model.surface_values(n["DIC"], i, j),
            model.surface_values(n["ALK"], i, j),
            model.surface_values(n["PO4"], i, j),
            self.parameters.reference_density,
        )

    def compute(self, model: ColumnModel | None = None) -> None:
        """Update the flux and pCO2 fields for every surface point."""
        model = self.model if model is None else model
        grid = model.grid

        for i in range(grid.Nx):
            for j in range(grid.Ny):
                state = self.surface_state(model, i, j)
                r = compute_flux(state, self.parameters, self.solver)
                self.co2_flux[i, j] = r.co2_flux
                self.ocean_co2[i, j] = r.pco2_ocean
                self.atmos_co2[i, j] = r.pco2_atmosphere

        logging.debug(
            f"{self.full_name}: iteration {model.iteration}, "
            f"mean CO2 flux = {self.co2_flux.data.mean():.4e} mol/(m**2 s)"
        )


class TendencyMonitor:
    """Report surface tracer tendencies and the air-sea CO2 flux.

    Register as a callback, e.g., every 10 iterations::

        monitor = TendencyMonitor(flux=diagnostic.co2_flux)
        simulation.add_callback(monitor, IterationInterval(10), name="progress")

    The tendency is the change of the surface concentration since the
    previous report, divided by the elapsed time. The first call only
    records the reference values. The reference values are kept in
    self.previous, self.previous_time.
    """

    def __init__(
        self,
        tracers: tuple[str, ...] = ("DIC", "ALK"),
        flux: Field | None = None,
        i: int = 0,
        j: int = 0,
        scale: float = 1e7,
    ) -> None:
        self.tracers = tracers
        self.flux = flux
        self.i = i
        self.j = j
        self.scale = scale
        self.previous: dict[str, float] = {}
        self.previous_time: float | None = None
        self.tendencies: dict[str, float] = {}

    def __call__(self, simulation: Simulation) -> None:
        model = simulation.model
        print(f"Iteration: {model.iteration}, time: {simulation.pretty_time()}")

        current = {n: model.surface_values(n, self.i, self.j) for n in self.tracers}

        if self.previous_time is not None and model.time > self.previous_time:
            elapsed = model.time - self.previous_time
            for n in self.tracers:
                self.tendencies[n] = (current[n] - self.previous[n]) / elapsed
                print(
                    f"Surface {n} (x10^{-7} mol m^-3 s^-1): "
                    f"{self.tendencies[n] * self.scale:.12f}"
                )
            if self.flux is not None:
                print(
                    f"Surface CO2 flux (x10^{-7} mol m^-2 s^-1): "
                    f"{self.flux[self.i, self.j] * self.scale:.12f}"
                )

        self.previous = current
        self.previous_time = model.time
