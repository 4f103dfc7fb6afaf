import sys
from pathlib import Path

import pandas as pd
import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "scripts"))
from run_script import main  # noqa: E402


@pytest.fixture
def csv_path(tmp_path):
    df = pd.DataFrame({
        "Date": pd.date_range("2024-01-01", periods=30, freq="D").strftime("%Y-%m-%d"),
        "Open": range(100, 130),
        "High": range(101, 131),
        "Low": range(99, 129),
        "Close": range(100, 130),
        "Volume": [1000] * 30,
    })
    path = tmp_path / "bars.csv"
    df.to_csv(path, index=False)
    return path


def test_run_example_and_export(csv_path, tmp_path, capsys):
    out = tmp_path / "out.csv"
    code = main(["--csv", str(csv_path), "--example", "Simple Moving Average", "--param", "Length=5", "--export", str(out)])
    assert code == 0
    exported = pd.read_csv(out)
    assert len(exported) == 30
    assert exported["value"].iloc[4] == pytest.approx(102.0)
    assert "Simple Moving Average" in capsys.readouterr().out


def test_validate_only(capsys):
    assert main(["--source", "plot(close())", "--validate-only"]) == 0
    assert "valid" in capsys.readouterr().out


def test_invalid_script_exit_code(capsys):
    assert main(["--source", "study(", "--validate-only"]) == 2
    assert "Syntax error" in capsys.readouterr().out


def test_runtime_error_exit_code(csv_path, capsys):
    assert main(["--csv", str(csv_path), "--source", "plot(missing)"]) == 2
    assert "UndefinedVariable" in capsys.readouterr().out


def test_list_examples(capsys):
    assert main(["--list-examples"]) == 0
    assert "MACD" in capsys.readouterr().out
