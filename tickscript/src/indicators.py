"""
Indicator implementations backing the TickScript built-in series functions.

Currently supported:
- SMA (Simple Moving Average)
- EMA (Exponential Moving Average)
- RSI (Relative Strength Index, Wilder-style)
- MACD (Moving Average Convergence Divergence)
- Bollinger Bands
- Rolling standard deviation, highest and lowest

Every function returns a series of the same length as its input. Positions
without enough history are NaN.
"""

from __future__ import annotations

import numpy as np
import pandas as pd

__all__ = [
    "sma",
    "ema",
    "rsi",
    "stdev",
    "highest",
    "lowest",
    "macd",
    "macd_line",
    "macd_signal",
    "macd_histogram",
    "bbands",
    "bb_upper",
    "bb_middle",
    "bb_lower",
    "hl2",
    "hlc3",
    "ohlc4",
    "MACD_SIGNAL_LENGTH",
]

MACD_SIGNAL_LENGTH = 9


def _rolling(series: pd.Series, window: int):
    # a window longer than the series only ever yields NaN
    window = min(window, len(series) + 1)
    return series.rolling(window=window, min_periods=window)


def sma(series: pd.Series, window: int) -> pd.Series:
    """Trailing arithmetic mean; bars before ``window`` values are available stay NaN."""
    return _rolling(series, window).mean()


def ema(series: pd.Series, window: int) -> pd.Series:
    """
    Exponential moving average with smoothing factor ``2 / (window + 1)``.

    There is no warm-up: the first defined value of ``series`` seeds the
    average, so ``ema(s, n)[0] == s[0]`` whenever ``s`` starts defined. Leading
    NaN in the input (e.g. an ``sma`` fed into ``ema``) stays NaN.
    """
    return series.ewm(span=window, adjust=False).mean()


def _rsi_value(avg_gain: float, avg_loss: float) -> float:
    if avg_loss == 0:
        return 100.0
    return 100.0 - 100.0 / (1.0 + avg_gain / avg_loss)


def rsi(series: pd.Series, window: int = 14) -> pd.Series:
    """
    Relative Strength Index (RSI), Wilder's smoothing version.

    The first average gain/loss is the simple mean of the first ``window``
    price changes and produces the value at bar ``window``. Later averages are
    smoothed with ``(prev * (window - 1) + current) / window``.

    Parameters
    ----------
    series : pd.Series
        Input price series (typically close).
    window : int, default 14
        Lookback window length.

    Returns
    -------
    pd.Series
        RSI values in the range [0, 100]. The first ``window`` values are NaN.
    """
    out = pd.Series(np.nan, index=series.index, dtype=float)
    start = series.first_valid_index()
    if start is None:
        return out

    offset = series.index.get_loc(start)
    values = series.iloc[offset:].to_numpy(dtype=float)
    if len(values) <= window:
        return out

    delta = np.diff(values)
    gains = np.clip(delta, 0, None)
    losses = np.clip(-delta, 0, None)

    avg_gain = gains[:window].mean()
    avg_loss = losses[:window].mean()

    result = np.full(len(values), np.nan)
    result[window] = _rsi_value(avg_gain, avg_loss)
    for i in range(window, len(delta)):
        avg_gain = (avg_gain * (window - 1) + gains[i]) / window
        avg_loss = (avg_loss * (window - 1) + losses[i]) / window
        result[i + 1] = _rsi_value(avg_gain, avg_loss)

    out.iloc[offset:] = result
    return out


def stdev(series: pd.Series, window: int) -> pd.Series:
    """Population standard deviation over the trailing window."""
    return _rolling(series, window).std(ddof=0)


def highest(series: pd.Series, window: int) -> pd.Series:
    """Rolling maximum over the trailing window."""
    return _rolling(series, window).max()


def lowest(series: pd.Series, window: int) -> pd.Series:
    """Rolling minimum over the trailing window."""
    return _rolling(series, window).min()


def macd(series: pd.Series, fast: int = 12, slow: int = 26, signal: int = MACD_SIGNAL_LENGTH) -> tuple[pd.Series, pd.Series, pd.Series]:
    """
    MACD line, signal line and histogram, in that order.

    The line is ``ema(fast) - ema(slow)``, so like ``ema`` it is defined from
    the first bar. Script calls cannot choose the signal length; ``macd_signal``
    and ``macd_histogram`` always smooth the line with a 9-bar ``ema``.
    """
    line = ema(series, fast) - ema(series, slow)
    signal_line = ema(line, signal)
    return line, signal_line, line - signal_line


def macd_line(series: pd.Series, fast: int = 12, slow: int = 26) -> pd.Series:
    return macd(series, fast, slow)[0]


def macd_signal(series: pd.Series, fast: int = 12, slow: int = 26) -> pd.Series:
    return macd(series, fast, slow)[1]


def macd_histogram(series: pd.Series, fast: int = 12, slow: int = 26) -> pd.Series:
    return macd(series, fast, slow)[2]


def bbands(series: pd.Series, length: int = 20, mult: float = 2.0) -> tuple[pd.Series, pd.Series, pd.Series]:
    """
    Upper, middle and lower Bollinger band.

    The middle band is ``sma(series, length)``; the outer bands sit
    ``mult`` population standard deviations away from it. All three are NaN
    for the first ``length - 1`` bars.
    """
    basis = sma(series, length)
    width = stdev(series, length) * mult
    return basis + width, basis, basis - width


def bb_upper(series: pd.Series, length: int = 20, mult: float = 2.0) -> pd.Series:
    return bbands(series, length, mult)[0]


def bb_middle(series: pd.Series, length: int = 20, mult: float = 2.0) -> pd.Series:
    return bbands(series, length, mult)[1]


def bb_lower(series: pd.Series, length: int = 20, mult: float = 2.0) -> pd.Series:
    return bbands(series, length, mult)[2]


def hl2(data: pd.DataFrame) -> pd.Series:
    return (data["high"] + data["low"]) / 2


def hlc3(data: pd.DataFrame) -> pd.Series:
    return (data["high"] + data["low"] + data["close"]) / 3


def ohlc4(data: pd.DataFrame) -> pd.Series:
    return (data["open"] + data["high"] + data["low"] + data["close"]) / 4
