# tickscript/tests/test_engine.py

import pandas as pd
import pytest

from tickscript.src.ast_nodes import StudyDeclaration
from tickscript.src.config import EngineSettings
from tickscript.src.engine import TickScriptEngine, execute_script, validate_script
from tickscript.src.errors import DivisionByZeroError, DSLSyntaxError


def test_validate_valid_script():
    result = validate_script('study("X")\nplot(close())')
    assert result.is_valid
    assert result.error is None


def test_validate_reports_syntax_error():
    result = validate_script("study(")
    assert not result.is_valid
    assert "Syntax error" in result.error
    assert "')'" in result.error
    assert result.line == 1


def test_validation_does_not_evaluate():
    # well-formed but references a name that only fails at run time
    assert validate_script("plot(undefined_name)").is_valid
    assert validate_script("plot(1/0)").is_valid


def test_compiled_script_is_reusable(bars_factory):
    engine = TickScriptEngine()
    script = engine.compile('study("Mid", overlay=true)\nplot(hl2())')
    assert script.study == StudyDeclaration(title="Mid", short_title="", overlay=True)
    first = engine.execute(script, bars_factory([1.0, 2.0]))
    second = engine.execute(script, bars_factory([5.0, 6.0, 7.0]))
    assert first.values == [1.0, 2.0]
    assert second.values == [5.0, 6.0, 7.0]
    assert second.overlay is True


def test_compile_raises_on_bad_source():
    with pytest.raises(DSLSyntaxError):
        TickScriptEngine().compile("plot(")


def test_execute_script_wraps_syntax_errors(five_bars):
    result = execute_script("x = = 1", five_bars)
    assert not result.ok
    assert result.error.kind == "SyntaxError"
    assert result.values == []


def test_run_script_raises_runtime_errors(five_bars):
    with pytest.raises(DivisionByZeroError):
        TickScriptEngine().run_script("plot(close() / 0)", five_bars)


def test_run_script_returns_series(five_bars):
    series = TickScriptEngine().run_script("plot(rsi(close(), 2))", five_bars)
    assert isinstance(series, pd.Series)
    assert len(series) == 5
    assert series.iloc[2:].tolist() == [100.0, 100.0, 100.0]


def test_nesting_limit_comes_from_settings():
    engine = TickScriptEngine(EngineSettings(max_nesting_depth=3))
    assert engine.validate("x = ((1))").is_valid
    assert not engine.validate("x = (((((1)))))").is_valid


def test_long_operator_chain_is_reported_not_raised(five_bars):
    engine = TickScriptEngine()
    source = "plot(close()" + " + close()" * 3000 + ")"
    assert not engine.validate(source).is_valid
    result = engine.execute_script(source, five_bars)
    assert result.error.kind == "SyntaxError"
    assert result.values == []
