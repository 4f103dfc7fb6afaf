"""
Bundled example TickScript indicators.

Every example validates. Parameters are read with ``input(title, default)``
so callers can override them by title, e.g. ``{"Length": 50}``.

The oscillators that divide by a range or a deviation (Stochastic,
Williams %R, CCI, Volume Oscillator) fail with ``DivisionByZeroError`` when
that divisor is 0 on any bar, e.g. a window of bars with identical high and
low, constant typical price, or zero volume. VWAP fails the same way on
twenty bars of zero volume.
"""

from __future__ import annotations

from textwrap import dedent
from typing import Dict, List

SIMPLE_MOVING_AVERAGE = dedent("""\
    study("Simple Moving Average", shorttitle="SMA", overlay=true)
    length = input("Length", 20)
    sma_line = sma(close(), length)
    plot(sma_line)
""")

EXPONENTIAL_MOVING_AVERAGE = dedent("""\
    study("Exponential Moving Average", shorttitle="EMA", overlay=true)
    length = input("Length", 21)
    ema_line = ema(close(), length)
    plot(ema_line)
""")

RELATIVE_STRENGTH_INDEX = dedent("""\
    study("Relative Strength Index", shorttitle="RSI", overlay=false)
    length = input("Length", 14)
    rsi_value = rsi(close(), length)
    plot(rsi_value)
""")

BOLLINGER_BANDS = dedent("""\
    study("Bollinger Bands", shorttitle="BB", overlay=true)
    length = input("Length", 20)
    mult = input("Multiplier", 2.0)
    basis = sma(close(), length)
    dev = stdev(close(), length)
    upper = basis + dev * mult
    lower = basis - dev * mult
    plot(upper)
    plot(basis)
    plot(lower)
""")

MACD = dedent("""\
    study("MACD", shorttitle="MACD", overlay=false)
    fast_length = input("Fast Length", 12)
    slow_length = input("Slow Length", 26)
    signal_length = input("Signal Length", 9)
    macd_line = macd(close(), fast_length, slow_length)
    signal_line = ema(macd_line, signal_length)
    histogram = macd_line - signal_line
    plot(macd_line)
    plot(signal_line)
    plot(histogram)
""")

STOCHASTIC_OSCILLATOR = dedent("""\
    study("Stochastic Oscillator", shorttitle="Stoch", overlay=false)
    k_period = input("K Period", 14)
    d_period = input("D Period", 3)
    highest_high = highest(high(), k_period)
    lowest_low = lowest(low(), k_period)
    k_percent = (close() - lowest_low) / (highest_high - lowest_low) * 100
    d_percent = sma(k_percent, d_period)
    plot(k_percent)
    plot(d_percent)
""")

ICHIMOKU_CLOUD = dedent("""\
    study("Ichimoku Cloud", shorttitle="Ichimoku", overlay=true)
    conversion_periods = input("Conversion Line Periods", 9)
    base_periods = input("Base Line Periods", 26)
    lagging_span_periods = input("Lagging Span Periods", 52)

    conversion_line = (highest(high(), conversion_periods) + lowest(low(), conversion_periods)) / 2
    base_line = (highest(high(), base_periods) + lowest(low(), base_periods)) / 2
    lead_line_a = (conversion_line + base_line) / 2
    lead_line_b = (highest(high(), lagging_span_periods) + lowest(low(), lagging_span_periods)) / 2

    plot(conversion_line)
    plot(base_line)
    plot(lead_line_a)
    plot(lead_line_b)
""")

VOLUME_WEIGHTED_AVERAGE_PRICE = dedent("""\
    study("Volume Weighted Average Price", shorttitle="VWAP", overlay=true)
    typical_price = hlc3()
    volume_price = typical_price * volume()
    cumulative_volume_price = sma(volume_price, 20)
    cumulative_volume = sma(volume(), 20)
    vwap_value = cumulative_volume_price / cumulative_volume
    plot(vwap_value)
""")

AVERAGE_TRUE_RANGE = dedent("""\
    study("Average True Range", shorttitle="ATR", overlay=false)
    length = input("Length", 14)
    tr1 = high() - low()
    tr2 = abs(high() - close())
    tr3 = abs(low() - close())
    true_range = max(tr1, max(tr2, tr3))
    atr_value = ema(true_range, length)
    plot(atr_value)
""")

WILLIAMS_R = dedent("""\
    study("Williams %R", shorttitle="%R", overlay=false)
    length = input("Length", 14)
    highest_high = highest(high(), length)
    lowest_low = lowest(low(), length)
    williams_r = (highest_high - close()) / (highest_high - lowest_low) * -100
    plot(williams_r)
""")

COMMODITY_CHANNEL_INDEX = dedent("""\
    study("Commodity Channel Index", shorttitle="CCI", overlay=false)
    length = input("Length", 20)
    typical_price = hlc3()
    sma_tp = sma(typical_price, length)
    mean_deviation = stdev(typical_price, length)
    cci_value = (typical_price - sma_tp) / (0.015 * mean_deviation)
    plot(cci_value)
""")

PIVOT_POINTS = dedent("""\
    study("Pivot Points", shorttitle="PP", overlay=true)
    pivot = (high() + low() + close()) / 3
    r1 = 2 * pivot - low()
    s1 = 2 * pivot - high()
    r2 = pivot + (high() - low())
    s2 = pivot - (high() - low())
    plot(pivot)
    plot(r1)
    plot(s1)
    plot(r2)
    plot(s2)
""")

DONCHIAN_CHANNELS = dedent("""\
    study("Donchian Channels", shorttitle="DC", overlay=true)
    length = input("Length", 20)
    upper_channel = highest(high(), length)
    lower_channel = lowest(low(), length)
    middle_channel = (upper_channel + lower_channel) / 2
    plot(upper_channel)
    plot(lower_channel)
    plot(middle_channel)
""")

VOLUME_OSCILLATOR = dedent("""\
    study("Volume Oscillator", shorttitle="VO", overlay=false)
    short_period = input("Short Period", 5)
    long_period = input("Long Period", 10)
    short_volume_ma = sma(volume(), short_period)
    long_volume_ma = sma(volume(), long_period)
    volume_oscillator = (short_volume_ma - long_volume_ma) / long_volume_ma * 100
    plot(volume_oscillator)
""")

EXAMPLES: Dict[str, str] = {
    "Simple Moving Average": SIMPLE_MOVING_AVERAGE,
    "Exponential Moving Average": EXPONENTIAL_MOVING_AVERAGE,
    "Relative Strength Index": RELATIVE_STRENGTH_INDEX,
    "Bollinger Bands": BOLLINGER_BANDS,
    "MACD": MACD,
    "Stochastic Oscillator": STOCHASTIC_OSCILLATOR,
    "Ichimoku Cloud": ICHIMOKU_CLOUD,
    "Volume Weighted Average Price": VOLUME_WEIGHTED_AVERAGE_PRICE,
    "Average True Range": AVERAGE_TRUE_RANGE,
    "Williams %R": WILLIAMS_R,
    "Commodity Channel Index": COMMODITY_CHANNEL_INDEX,
    "Pivot Points": PIVOT_POINTS,
    "Donchian Channels": DONCHIAN_CHANNELS,
    "Volume Oscillator": VOLUME_OSCILLATOR,
}


def example_names() -> List[str]:
    return list(EXAMPLES)


def get_example(name: str) -> str:
    """Return the source of the example called ``name``; raises KeyError if unknown."""
    try:
        return EXAMPLES[name]
    except KeyError:
        raise KeyError(f"Unknown example {name!r}. Available: {', '.join(EXAMPLES)}") from None
