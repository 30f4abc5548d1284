import pytest

from co2flux import (
    CarbonSystemSolver,
    CO2FluxDiagnostic,
    Field,
    FluxParameters,
    InputError,
    KeywordError,
    MissingKeywordError,
    RectilinearGrid,
    get_version,
)


def test_mandatory_keyword():
    with pytest.raises(MissingKeywordError):
        Field(name="T")
    with pytest.raises(MissingKeywordError):
        CO2FluxDiagnostic()


def test_unknown_keyword(grid):
    with pytest.raises(KeywordError):
        Field(grid=grid, nme="T")


def test_wrong_type():
    with pytest.raises(InputError):
        RectilinearGrid(size=4.5)
    with pytest.raises(InputError):
        CarbonSystemSolver(max_iterations="100")


def test_empty_name(grid):
    with pytest.raises(InputError):
        Field(grid=grid, name=" ")


def test_full_name(grid):
    assert Field(grid=grid, name="DIC").full_name == "DIC"


def test_info_and_help(capsys):
    p = FluxParameters(surface_wind_speed=7)
    p.info()
    p.help()
    out = capsys.readouterr().out
    assert "surface_wind_speed = 7.0" in out
    assert "surface_wind_speed defaults to" in out


def test_interior(grid):
    T = Field(grid=grid, name="T").set(lambda z: z)
    assert list(T.interior()) == pytest.approx([-3.5, -2.5, -1.5, -0.5])


def test_version():
    assert isinstance(get_version(), str)


def test_mandatory_keyword_is_none():
    with pytest.raises(MissingKeywordError):
        Field(grid=None)
