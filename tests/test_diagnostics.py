import numpy as np
import pytest

from co2flux import (
    CarbonateSolverResult,
    CO2FluxDiagnostic,
    ColumnModel,
    Field,
    FluxBoundaryCondition,
    FluxParameters,
    InputError,
    RectilinearGrid,
    SolverError,
    SurfaceState,
    compute_flux,
    gas_exchange_flux,
    piston_velocity,
    schmidt_number,
)


def test_surface_state_conversion():
    s = SurfaceState.from_concentrations(20, 35, 2.1, 2.35, 2.5e-3, 1024.5)
    assert s.dic == pytest.approx(2.1 / 1024.5)
    assert s.alk == pytest.approx(2.35 / 1024.5)
    assert s.po4 == pytest.approx(2.5e-3 / 1024.5)
    assert isinstance(s.temperature, float)


def test_compute_flux(fake_solver):
    p = FluxParameters()
    s = SurfaceState(15.0, 35.0, 2.1e-3, 2.3e-3, 2e-6)
    r = compute_flux(s, p, fake_solver)

    sc = schmidt_number(15.0, p.schmidt_coefficients)
    kw = piston_velocity(sc, 10.0, 0.337)
    expected = gas_exchange_flux(280e-6, 0.03, 2.1e-3 * 0.14, 0.03, kw, 1024.5)
    assert r.co2_flux == pytest.approx(expected)
    assert r.pco2_ocean == pytest.approx(2.1e-3 * 0.14)
    assert r.pco2_atmosphere == 280e-6
    # 294 uatm in the ocean, 280 uatm in the atmosphere
    assert r.co2_flux > 0


def test_solver_arguments(model):
    """The solver receives surface values in mol/kg and the parameters."""
    calls = []

    def solver(*args):
        calls.append(args)
        return CarbonateSolverResult(3e-4, 0.03, 0.03, 8.0, 1)

    p = FluxParameters(applied_pressure=0.1, silicate_conc=2e-6, initial_ph_guess=7.9)
    d = CO2FluxDiagnostic(model=model, parameters=p, solver=solver)
    d.compute()

    T, S, dp, dic, ta, po4, sit, ph, pco2 = calls[0]
    assert (T, S, dp, sit, ph, pco2) == (20.0, 35.0, 0.1, 2e-6, 7.9, 280e-6)
    assert dic == pytest.approx(2.1 / 1024.5)
    assert ta == pytest.approx(2.35 / 1024.5)
    assert po4 == pytest.approx(2.5e-3 / 1024.5)


def test_writes_all_fields(model, fake_solver):
    d = CO2FluxDiagnostic(model=model, solver=fake_solver)
    d.compute()
    assert d.co2_flux[0, 0] != 0.0
    assert d.ocean_co2[0, 0] == pytest.approx(2.1 / 1024.5 * 0.14)
    assert d.atmos_co2[0, 0] == 280e-6
    assert set(d.outputs) == {"co2_flux", "ocean_co2", "atmos_co2"}


def test_every_column(fake_solver):
    grid = RectilinearGrid(size=(2, 3, 4), z=(-4, 0))
    model = ColumnModel(grid=grid, tracers=("T", "S", "DIC", "ALK", "PO4"))
    model.set(T=15, S=35, DIC=2.1, ALK=2.35, PO4=0)
    model.tracers["DIC"][1, 2, :] = 2.5

    d = CO2FluxDiagnostic(model=model, solver=fake_solver)
    d.compute()

    assert d.co2_flux.shape == (2, 3)
    assert d.co2_flux[1, 2] > d.co2_flux[0, 0]
    assert d.co2_flux[0, 1] == d.co2_flux[0, 0]
    assert d.ocean_co2[1, 2] == pytest.approx(2.5 / 1024.5 * 0.14)


def test_reuses_boundary_field(grid, fake_solver):
    flux = Field(grid=grid, name="co2_flux", surface=True)
    model = ColumnModel(
        grid=grid,
        tracers=("T", "S", "DIC", "ALK", "PO4"),
        boundary_conditions={"DIC": FluxBoundaryCondition(flux)},
    )
    model.set(T=20, S=35, DIC=2.1, ALK=2.35, PO4=0)

    d = CO2FluxDiagnostic(model=model, solver=fake_solver)
    assert d.co2_flux is flux
    d.compute()
    assert flux[0, 0] == d.co2_flux[0, 0] != 0.0


def test_creates_boundary_field(model, fake_solver):
    assert "DIC" not in model.top_bcs
    d = CO2FluxDiagnostic(model=model, solver=fake_solver)
    assert model.top_bcs["DIC"].condition is d.co2_flux


def test_replaces_constant_boundary_condition(model, fake_solver):
    model.set_boundary_condition("DIC", 1e-3)
    with pytest.warns(UserWarning):
        d = CO2FluxDiagnostic(model=model, solver=fake_solver)
    assert model.top_bcs["DIC"].condition is d.co2_flux


def test_custom_tracer_names(grid, fake_solver):
    model = ColumnModel(grid=grid, tracers=("temp", "salt", "C", "A", "P"))
    model.set(temp=20, salt=35, C=2.1, A=2.35, P=0)
    d = CO2FluxDiagnostic(
        model=model,
        solver=fake_solver,
        tracer_names={"T": "temp", "S": "salt", "DIC": "C", "ALK": "A", "PO4": "P"},
    )
    d.compute()
    assert "C" in model.top_bcs
    assert d.ocean_co2[0, 0] == pytest.approx(2.1 / 1024.5 * 0.14)


def test_solver_error_propagates(model):
    def failing_solver(*args):
        raise SolverError("no convergence")

    d = CO2FluxDiagnostic(model=model, solver=failing_solver)
    with pytest.raises(SolverError):
        d.compute()


def test_default_solver(model):
    """Surface water of the single column example."""
    d = CO2FluxDiagnostic(model=model)
    d.compute()
    assert 100e-6 < d.ocean_co2[0, 0] < 1000e-6
    assert np.isfinite(d.co2_flux[0, 0])
    assert np.sign(d.co2_flux[0, 0]) == np.sign(d.ocean_co2[0, 0] - d.atmos_co2[0, 0])


@pytest.mark.parametrize(
    "kwargs",
    [
        {"parameters": "x"},
        {"parameters": {"surface_wind_speed": 7}},
        {"solver": "x"},
        {"solver": 1.0},
    ],
)
def test_invalid_parameters_or_solver(model, kwargs):
    with pytest.raises(InputError):
        CO2FluxDiagnostic(model=model, **kwargs)
    assert "DIC" not in model.top_bcs
