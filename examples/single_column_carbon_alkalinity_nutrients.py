"""Air-sea CO2 fluxes in a single column.

This example sets up a 256 m deep column with carbon, alkalinity and
nutrient tracers, computes the air-sea CO2 flux every time step, and
uses it as the surface boundary flux of DIC. The surface is cooled
by 400 W/m**2 during the first 5 days.

Output is written to ./data, and the flux and pCO2 time series are
plotted at the end.
"""

import matplotlib.pyplot as plt

from co2flux import (
    CO2FluxDiagnostic,
    ColumnModel,
    Field,
    FluxBoundaryCondition,
    FluxParameters,
    IterationInterval,
    OutputWriter,
    RectilinearGrid,
    Simulation,
    TendencyMonitor,
    TimeInterval,
)

grid = RectilinearGrid(size=64, z=(-256, 0))

# surface temperature flux
Qh = 400.0  # W m-2, surface heat flux
rho_o = 1026.0  # kg m-3, average density at the surface of the world ocean
cp = 3991.0  # J K-1 kg-1, typical heat capacity for seawater
days = 86400.0


def Q_T(t):
    """Temperature flux in K m/s, positive upwards (cooling)."""
    return Qh / (rho_o * cp) if t < 5 * days else 0.0


dTdz = 0.01  # K m-1

# filled by the CO2 flux diagnostic
co2_flux = Field(grid=grid, name="co2_flux", surface=True)

model = ColumnModel(
    grid=grid,
    tracers=("T", "S", "DIC", "ALK", "PO4", "NO3", "DOP", "POP", "Fe"),
    boundary_conditions={
        "T": FluxBoundaryCondition(Q_T),
        "DIC": FluxBoundaryCondition(co2_flux),
    },
)

# initial conditions, concentrations in mol/m**3
model.set(
    T=lambda z: 20 + dTdz * z,
    S=35,
    DIC=2.1,
    ALK=2.35,
    PO4=2.5e-3,
    NO3=36e-3,
    DOP=0.0,
    POP=0.0,
    Fe=1e-6,
)

diagnostic = CO2FluxDiagnostic(
    model=model,
    parameters=FluxParameters(surface_wind_speed="10 m/s", atmospheric_pco2="280e-6 atm"),
)

simulation = Simulation(
    name="single_column_carbon_alkalinity_nutrients",
    model=model,
    dt="10 minutes",
    stop_time="30 days",
)
simulation.add_callback(diagnostic, name="co2_flux")
simulation.add_callback(
    TendencyMonitor(flux=diagnostic.co2_flux),
    IterationInterval(10),
    name="progress",
)

simulation.output_writers["fields"] = OutputWriter(
    name="single_column_carbon_alkalinity_nutrients",
    outputs=model.tracers,
    schedule=TimeInterval("20 minutes"),
)
simulation.output_writers["co2flux"] = OutputWriter(
    name="single_column_carbon_alkalinity_nutrients_co2flux",
    outputs=diagnostic.outputs,
    schedule=TimeInterval("20 minutes"),
)

simulation.run()

for writer in simulation.output_writers.values():
    writer.save_data("./data")

# plot the flux and pCO2 time series
writer = simulation.output_writers["co2flux"]
t = [ti / days for ti in writer.times]
flux = writer.time_series("co2_flux")[:, 0, 0]
pco2_ocean = writer.time_series("ocean_co2")[:, 0, 0]
pco2_atmos = writer.time_series("atmos_co2")[:, 0, 0]

fig, ax = plt.subplots(figsize=(10, 5))
ax.plot(t, flux * 1e7, color="black", label="CO2 flux")
ax.set_xlabel("Time (days)")
ax.set_ylabel("Air-sea CO2 flux (x1e7 mol m-2 s-1)")
ax2 = ax.twinx()
ax2.plot(t, pco2_ocean * 1e6, color="blue", label="ocean pCO2")
ax2.plot(t, pco2_atmos * 1e6, color="red", label="atmos pCO2")
ax2.set_ylabel("pCO2 (uatm)")
ax2.legend(loc="upper right")
fig.tight_layout()
fig.savefig("carbon_alkalinity_nutrients.png")
plt.show()
