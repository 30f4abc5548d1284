import pytest

from co2flux import CarbonateSolverResult, ColumnModel, RectilinearGrid


def linear_solver(T, S, dp, dic, ta, po4, sit, ph_guess, pco2_atm):
    """Stand-in for the carbonate solver, pCO2 scales with DIC."""
    return CarbonateSolverResult(
        pco2_ocean=dic * 0.14,
        k_sol_atmosphere=0.03,
        k_sol_ocean=0.03,
        ph=8.0,
        iterations=1,
    )


@pytest.fixture
def fake_solver():
    return linear_solver


@pytest.fixture
def grid():
    return RectilinearGrid(size=4, z=(-4, 0))


@pytest.fixture
def model(grid):
    m = ColumnModel(grid=grid, tracers=("T", "S", "DIC", "ALK", "PO4"))
    m.set(T=20, S=35, DIC=2.1, ALK=2.35, PO4=2.5e-3)
    return m


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    """Simulations write their log file into the working directory."""
    monkeypatch.chdir(tmp_path)
    return tmp_path
