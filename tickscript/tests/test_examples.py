import math

import pytest

from tickscript.src.engine import TickScriptEngine
from tickscript.src.examples import EXAMPLES, example_names, get_example


@pytest.mark.parametrize("name", example_names())
def test_example_validates(name):
    assert TickScriptEngine().validate(EXAMPLES[name]).is_valid


@pytest.mark.parametrize("name", example_names())
def test_example_runs(name, trending_bars):
    result = TickScriptEngine().execute_script(EXAMPLES[name], trending_bars)
    assert result.ok, result.error
    assert len(result.series) == len(trending_bars)
    assert not math.isnan(result.series.iloc[-1])
    assert result.title == name


def test_example_parameters_override_defaults(trending_bars):
    engine = TickScriptEngine()
    short = engine.execute_script(get_example("Simple Moving Average"), trending_bars, {"Length": 5})
    assert short.series.iloc[:4].isna().all()
    assert not math.isnan(short.series.iloc[4])


def test_unknown_example():
    with pytest.raises(KeyError, match="Unknown example"):
        get_example("Nope")


RANGE_DIVIDING = ["Stochastic Oscillator", "Williams %R", "Commodity Channel Index"]


@pytest.mark.parametrize("name", RANGE_DIVIDING)
def test_oscillators_report_flat_prices_as_division_by_zero(name, bars_factory):
    flat = bars_factory([50.0] * 30, spread=0.0)
    result = TickScriptEngine().execute_script(EXAMPLES[name], flat)
    assert result.error.kind == "DivisionByZero"


@pytest.mark.parametrize("name", [n for n in example_names() if n not in RANGE_DIVIDING])
def test_other_examples_run_on_flat_prices(name, bars_factory):
    flat = bars_factory([50.0] * 60, spread=0.0)
    result = TickScriptEngine().execute_script(EXAMPLES[name], flat)
    assert result.ok, result.error
