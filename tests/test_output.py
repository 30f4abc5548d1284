import numpy as np
import pytest

from co2flux import (
    CO2FluxDiagnostic,
    IterationInterval,
    OutputWriter,
    Simulation,
    TimeInterval,
    read_output,
)


@pytest.fixture
def simulation(workdir, model, fake_solver):
    d = CO2FluxDiagnostic(model=model, solver=fake_solver)
    sim = Simulation(model=model, dt=600, stop_time=3600)
    sim.add_callback(d, name="co2_flux")
    sim.output_writers["fields"] = OutputWriter(
        name="fields",
        outputs=model.tracers,
        schedule=IterationInterval(2),
    )
    sim.output_writers["co2flux"] = OutputWriter(
        name="co2flux",
        outputs=d.outputs,
        schedule=TimeInterval("20 minutes"),
    )
    return sim


def test_sampling(simulation):
    simulation.run()
    w = simulation.output_writers["fields"]
    assert w.iterations == [0, 2, 4, 6]
    assert w.times == pytest.approx([0, 1200, 2400, 3600])
    assert w.time_series("DIC").shape == (4, 1, 1, 4)

    w = simulation.output_writers["co2flux"]
    assert w.times == pytest.approx([0, 1200, 2400, 3600])
    assert w.time_series("co2_flux").shape == (4, 1, 1)


def test_snapshots_are_copies(simulation):
    simulation.run()
    dic = simulation.output_writers["fields"].time_series("DIC")[:, 0, 0, -1]
    assert np.all(np.diff(dic) < 0)
    assert dic[0] == 2.1


def test_unknown_output(simulation):
    with pytest.raises(KeyError):
        simulation.output_writers["fields"].time_series("O2")


def test_csv_round_trip(simulation, workdir):
    simulation.run()
    w = simulation.output_writers["co2flux"]
    fn = w.save_data(workdir / "data")
    assert fn == workdir / "data" / "co2flux.csv"

    df = read_output(fn)
    assert list(df.columns) == [
        "time [s]",
        "iteration",
        "co2_flux[0,0]",
        "ocean_co2[0,0]",
        "atmos_co2[0,0]",
    ]
    assert np.allclose(df["co2_flux[0,0]"], w.time_series("co2_flux")[:, 0, 0])

    df = read_output(simulation.output_writers["fields"].save_data(workdir / "data"))
    assert "DIC[0,0,3]" in df.columns
    assert len(df) == 4


def test_no_overwrite(simulation, workdir):
    w = simulation.output_writers["co2flux"]
    w.overwrite_existing = False
    w.save_data(workdir)
    with pytest.raises(FileExistsError):
        w.save_data(workdir)


def test_outputs_must_be_fields(model):
    with pytest.raises(TypeError):
        OutputWriter(outputs={"DIC": model.tracers["DIC"].data}, schedule=IterationInterval(1))
