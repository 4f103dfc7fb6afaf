import math

import pandas as pd
import pytest

from tickscript.src.context import Bar


def make_bars(closes, spread=1.0):
    """Build Bar objects from close prices with a fixed high/low spread."""
    bars = []
    for i, close in enumerate(closes):
        bars.append(Bar(
            timestamp=pd.Timestamp("2024-01-01") + pd.Timedelta(days=i),
            open=closes[i - 1] if i else close,
            high=close + spread,
            low=close - spread,
            close=close,
            volume=1000 + (i % 7) * 100,
        ))
    return bars


@pytest.fixture
def trending_bars():
    # 60 bars of a noisy uptrend; enough history for every bundled example
    closes = [100 + 0.5 * i + 5 * math.sin(i / 3) for i in range(60)]
    return make_bars(closes)


@pytest.fixture
def five_bars():
    return make_bars([1.0, 2.0, 3.0, 4.0, 5.0])


@pytest.fixture
def ohlcv_frame():
    data = [
        ("2023-01-01", 100, 105, 99, 103, 900000),
        ("2023-01-02", 103, 108, 101, 107, 1200000),
        ("2023-01-03", 107, 110, 106, 109, 1300000),
        ("2023-01-04", 109, 112, 108, 111, 900000),
        ("2023-01-05", 111, 115, 110, 114, 1500000),
    ]
    df = pd.DataFrame(data, columns=["date", "Open", "High", "Low", "Close", "Volume"])
    df["date"] = pd.to_datetime(df["date"])
    return df.set_index("date")


@pytest.fixture
def bars_factory():
    return make_bars
