"""co2flux: air-sea CO2 flux diagnostics for ocean carbon models.

Copyright (C), 2020 Ulrich G.  Wortmann

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


from .initialize_unit_registry import Q_ as Q_, ureg as ureg
from .version import get_version as get_version
from .utility_functions import (
    check_for_quantity as check_for_quantity,
    cmhr_to_ms as cmhr_to_ms,
    map_units as map_units,
    phc as phc,
    to_mol_per_kg as to_mol_per_kg,
    to_mol_per_m3 as to_mol_per_m3,
)
from .co2flux_base import (
    co2fluxBase as co2fluxBase,
    InputError as InputError,
    KeywordError as KeywordError,
    MissingKeywordError as MissingKeywordError,
)
from .parameters import (
    FluxParameters as FluxParameters,
    FluxParametersError as FluxParametersError,
)
from .seawater import SeawaterConstants as SeawaterConstants
from .carbonate_chemistry import (
    CarbonateSolverResult as CarbonateSolverResult,
    CarbonSystemSolver as CarbonSystemSolver,
    SolverError as SolverError,
    get_hplus as get_hplus,
    solve_carbonate_system as solve_carbonate_system,
)
from .gas_exchange import (
    gas_exchange_flux as gas_exchange_flux,
    piston_velocity as piston_velocity,
    schmidt_number as schmidt_number,
)
from .fields import (
    Field as Field,
    FieldError as FieldError,
    RectilinearGrid as RectilinearGrid,
)
from .model import (
    ColumnModel as ColumnModel,
    FluxBoundaryCondition as FluxBoundaryCondition,
    ModelError as ModelError,
)
from .simulation import (
    Callback as Callback,
    IterationInterval as IterationInterval,
    Simulation as Simulation,
    TimeInterval as TimeInterval,
)
from .output import OutputWriter as OutputWriter, read_output as read_output
from .diagnostics import (
    CO2FluxDiagnostic as CO2FluxDiagnostic,
    FluxResult as FluxResult,
    SurfaceState as SurfaceState,
    TendencyMonitor as TendencyMonitor,
    compute_flux as compute_flux,
)
