"""
The built-in function table.

This is the single authority for every function a script can call: its
parameter kinds, whether it produces a series or a scalar, and its
implementation. Kind inference and the evaluator both read from here, so
adding a function means adding one entry to BUILTINS.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional, Tuple

import numpy as np

from . import indicators
from .errors import UndefinedVariableError


class Param(Enum):
    SERIES = "series"   # evaluated as a series; numeric scalars are broadcast
    LENGTH = "length"   # whole number >= 1
    NUMBER = "number"
    STRING = "string"
    ANY = "any"


class ResultKind(Enum):
    SERIES = "series"
    SCALAR = "scalar"
    ELEMENTWISE = "elementwise"  # series when any argument is a series


@dataclass(frozen=True)
class Builtin:
    name: str
    params: Tuple[Param, ...]
    result: ResultKind
    func: Callable[..., Any]
    required: Optional[int] = None

    @property
    def min_args(self) -> int:
        return len(self.params) if self.required is None else self.required

    def accepts(self, argc: int) -> bool:
        return self.min_args <= argc <= len(self.params)


def _price(column: str) -> Callable[..., Any]:
    return lambda ctx: ctx.price(column)


def _composite(func: Callable[..., Any]) -> Callable[..., Any]:
    return lambda ctx: func(ctx.data)


def _windowed(func: Callable[..., Any]) -> Callable[..., Any]:
    return lambda _ctx, *args: func(*args)


def _input(ctx, title: str, default: Any = None) -> Any:
    if title in ctx.parameters:
        return ctx.parameters[title]
    if default is None:
        raise UndefinedVariableError(title)
    return default


def _abs(_ctx, value):
    return np.abs(value)


def _max(_ctx, left, right):
    return np.maximum(left, right)


def _min(_ctx, left, right):
    return np.minimum(left, right)


_S, _L, _N = Param.SERIES, Param.LENGTH, Param.NUMBER

_ENTRIES = [
    # Price accessors
    Builtin("close", (), ResultKind.SERIES, _price("close")),
    Builtin("open", (), ResultKind.SERIES, _price("open")),
    Builtin("high", (), ResultKind.SERIES, _price("high")),
    Builtin("low", (), ResultKind.SERIES, _price("low")),
    Builtin("volume", (), ResultKind.SERIES, _price("volume")),
    Builtin("hl2", (), ResultKind.SERIES, _composite(indicators.hl2)),
    Builtin("hlc3", (), ResultKind.SERIES, _composite(indicators.hlc3)),
    Builtin("ohlc4", (), ResultKind.SERIES, _composite(indicators.ohlc4)),
    # Moving averages and oscillators
    Builtin("sma", (_S, _L), ResultKind.SERIES, _windowed(indicators.sma)),
    Builtin("ema", (_S, _L), ResultKind.SERIES, _windowed(indicators.ema)),
    Builtin("rsi", (_S, _L), ResultKind.SERIES, _windowed(indicators.rsi)),
    Builtin("stdev", (_S, _L), ResultKind.SERIES, _windowed(indicators.stdev)),
    Builtin("highest", (_S, _L), ResultKind.SERIES, _windowed(indicators.highest)),
    Builtin("lowest", (_S, _L), ResultKind.SERIES, _windowed(indicators.lowest)),
    Builtin("macd", (_S, _L, _L), ResultKind.SERIES, _windowed(indicators.macd_line)),
    Builtin("macd_line", (_S, _L, _L), ResultKind.SERIES, _windowed(indicators.macd_line)),
    Builtin("macd_signal", (_S, _L, _L), ResultKind.SERIES, _windowed(indicators.macd_signal)),
    Builtin("macd_histogram", (_S, _L, _L), ResultKind.SERIES, _windowed(indicators.macd_histogram)),
    Builtin("bb_upper", (_S, _L, _N), ResultKind.SERIES, _windowed(indicators.bb_upper)),
    Builtin("bb_middle", (_S, _L, _N), ResultKind.SERIES, _windowed(indicators.bb_middle)),
    Builtin("bb_lower", (_S, _L, _N), ResultKind.SERIES, _windowed(indicators.bb_lower)),
    # Scalar helpers
    Builtin("abs", (_N,), ResultKind.ELEMENTWISE, _abs),
    Builtin("max", (_N, _N), ResultKind.ELEMENTWISE, _max),
    Builtin("min", (_N, _N), ResultKind.ELEMENTWISE, _min),
    Builtin("input", (Param.STRING, Param.ANY), ResultKind.SCALAR, _input, required=1),
]

BUILTINS: Dict[str, Builtin] = {entry.name: entry for entry in _ENTRIES}


def lookup(name: str) -> Optional[Builtin]:
    """Return the built-in named ``name`` (case-sensitive), or None."""
    return BUILTINS.get(name)
