import pytest

from co2flux import (
    FluxParameters,
    FluxParametersError,
    InputError,
    KeywordError,
    Q_,
)


def test_defaults():
    p = FluxParameters()
    assert p.surface_wind_speed == 10.0
    assert p.applied_pressure == 0.0
    assert p.atmospheric_pco2 == 280e-6
    assert p.exchange_coefficient == 0.337
    assert p.silicate_conc == 15e-6
    assert p.initial_ph_guess == 8.0
    assert p.reference_density == 1024.5
    assert p.schmidt_coefficients == (2116.8, 136.25, 4.7353, 9.2307e-2, 7.555e-4, 660.0)


@pytest.mark.parametrize(
    "value", [10, 10.0, "10 m/s", "36 km/hr", Q_(10, "m/s")]
)
def test_wind_speed_input(value):
    p = FluxParameters(surface_wind_speed=value)
    assert p.surface_wind_speed == pytest.approx(10.0)
    assert isinstance(p.surface_wind_speed, float)


def test_pco2_in_uatm():
    p = FluxParameters(atmospheric_pco2="400e-6 atm")
    assert p.atmospheric_pco2 == pytest.approx(400e-6)


def test_read_only():
    p = FluxParameters()
    with pytest.raises(FluxParametersError):
        p.surface_wind_speed = 5.0
    with pytest.raises(FluxParametersError):
        del p.surface_wind_speed
    assert p.surface_wind_speed == 10.0


def test_replace():
    p = FluxParameters()
    q = p.replace(surface_wind_speed="5 m/s")
    assert q.surface_wind_speed == 5.0
    assert p.surface_wind_speed == 10.0
    assert q.atmospheric_pco2 == p.atmospheric_pco2


def test_equality():
    assert FluxParameters() == FluxParameters()
    assert FluxParameters() != FluxParameters(surface_wind_speed=7)
    assert len({FluxParameters(), FluxParameters()}) == 1


def test_unknown_keyword():
    with pytest.raises(KeywordError):
        FluxParameters(wind=10)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"surface_wind_speed": "10 kg"},
        {"surface_wind_speed": "10 furlongs_per_fortnight"},
        {"surface_wind_speed": -1},
        {"surface_wind_speed": True},
        {"surface_wind_speed": [10]},
        {"reference_density": 0},
        {"initial_ph_guess": 15},
        {"schmidt_dic_coeff5": 0},
    ],
)
def test_invalid_input(kwargs):
    with pytest.raises(InputError):
        FluxParameters(**kwargs)
