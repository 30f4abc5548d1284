import numpy as np
import pytest

from co2flux import (
    ColumnModel,
    Field,
    FieldError,
    FluxBoundaryCondition,
    ModelError,
    RectilinearGrid,
)


def test_single_column_grid():
    grid = RectilinearGrid(size=64, z=(-256, 0))
    assert grid.shape == (1, 1, 64)
    assert grid.surface_shape == (1, 1)
    assert grid.dz == 4.0
    assert grid.z_nodes[0] == -254.0
    assert grid.z_nodes[-1] == -2.0
    assert len(grid.z_faces) == 65


def test_horizontal_grid():
    grid = RectilinearGrid(size=(3, 2, 8), z=(-16, 0), x=(0, 3))
    assert grid.shape == (3, 2, 8)
    assert np.allclose(grid.x_nodes, [0.5, 1.5, 2.5])


@pytest.mark.parametrize(
    "kwargs",
    [
        {"size": (0, 1, 4)},
        {"size": (1, 4)},
        {"size": 4, "z": (0, -4)},
    ],
)
def test_invalid_grid(kwargs):
    with pytest.raises(FieldError):
        RectilinearGrid(**kwargs)


def test_field_set(grid):
    T = Field(grid=grid, name="T")
    T.set(lambda z: 20 + 0.01 * z)
    assert T.shape == (1, 1, 4)
    assert T[0, 0, grid.Nz - 1] == pytest.approx(20 - 0.005)
    assert T[0, 0, 0] == pytest.approx(20 - 0.035)

    T.set(5)
    assert np.all(T.data == 5.0)


def test_surface_field(grid):
    flux = Field(grid=grid, name="co2_flux", surface=True)
    assert flux.shape == (1, 1)
    flux[0, 0] = 1e-8
    assert flux.surface_values()[0, 0] == 1e-8

    with pytest.raises(FieldError):
        flux.set(lambda z: z)


def test_field_shape_mismatch(grid):
    T = Field(grid=grid, name="T")
    with pytest.raises(FieldError):
        T.set(np.ones(3))


def test_field_copy_is_independent(grid):
    T = Field(grid=grid, name="T").set(1.0)
    c = T.copy()
    T[0, 0, 0] = 2.0
    assert c[0, 0, 0] == 1.0


def test_model_set(model, grid):
    assert model.surface_values("DIC", 0, 0) == 2.1
    with pytest.raises(ModelError):
        model.set(O2=0.2)


@pytest.mark.parametrize("condition", ["1e-3", [1e-3]])
def test_invalid_boundary_condition(condition):
    with pytest.raises(ModelError):
        FluxBoundaryCondition(condition)


def test_volume_field_is_no_boundary_condition(grid):
    with pytest.raises(ModelError):
        FluxBoundaryCondition(Field(grid=grid, name="T"))


def test_boundary_field_on_other_grid(model):
    other = RectilinearGrid(size=4, z=(-4, 0))
    flux = Field(grid=other, name="co2_flux", surface=True)
    with pytest.raises(ModelError):
        model.set_boundary_condition("DIC", flux)


def test_time_step(model, grid):
    """A positive (upward) flux removes tracer from the top cell only."""
    model.set_boundary_condition("DIC", 1e-3)
    model.set_boundary_condition("T", lambda t: 0.0 if t > 0 else 2e-3)

    model.time_step(10.0)
    assert model.time == 10.0
    assert model.iteration == 1
    assert model.tracers["DIC"][0, 0, -1] == pytest.approx(2.1 - 1e-3 * 10 / grid.dz)
    assert model.tracers["DIC"][0, 0, 0] == 2.1
    assert model.tracers["T"][0, 0, -1] == pytest.approx(20 - 2e-3 * 10 / grid.dz)

    model.time_step(10.0)
    assert model.tracers["T"][0, 0, -1] == pytest.approx(20 - 2e-3 * 10 / grid.dz)
    assert model.previous_dt == 10.0


def test_boundary_conditions_at_construction(grid):
    flux = Field(grid=grid, name="co2_flux", surface=True)
    model = ColumnModel(
        grid=grid,
        tracers=("T", "DIC"),
        boundary_conditions={
            "DIC": flux,
            "T": FluxBoundaryCondition(lambda t: 1e-3),
        },
    )
    assert model.full_name == "model"
    assert model.top_bcs["DIC"].condition is flux
    assert model.top_bcs["T"].value(0.0, grid.surface_shape)[0, 0] == 1e-3

    with pytest.raises(ModelError):
        ColumnModel(grid=grid, tracers=("T",), boundary_conditions={"DIC": 1e-3})
