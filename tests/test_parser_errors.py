import pytest

from tickscript.src.engine import validate_script
from tickscript.src.errors import DSLSyntaxError
from tickscript.src.parser import parse_script


def test_parser_error_message_shape():
    bad = 'study("X")\nbasis = sma(close(), 20\nplot(basis)'
    with pytest.raises(DSLSyntaxError) as ei:
        parse_script(bad)
    msg = str(ei.value)
    assert msg.startswith("Syntax error:")
    assert "Expected ')' after arguments" in msg
    assert "line 2" in msg


@pytest.mark.parametrize(
    "source",
    [
        "study(",
        "plot close()",
        "x = 1 +",
        "x = (1",
        "x = s[1",
        "x = 1 & 2",
        'study("unterminated)',
        "x = #",
        "= 5",
    ],
)
def test_malformed_scripts_fail_validation(source):
    result = validate_script(source)
    assert not result.is_valid
    assert result.error.startswith("Syntax error")


def test_first_error_aborts():
    # two problems; only the first is reported
    result = validate_script("x = (1\ny = )")
    assert result.line == 1
    assert "Expected ')' after expression" in result.error
