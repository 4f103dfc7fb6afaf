"""
Input bars and the per-run evaluation context.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterable, Mapping, Optional, Union

import pandas as pd

OHLCV_COLUMNS = ("open", "high", "low", "close", "volume")


@dataclass(frozen=True)
class Bar:
    """One period of OHLCV price data."""
    timestamp: Any
    open: float
    high: float
    low: float
    close: float
    volume: float = 0.0


BarsLike = Union[pd.DataFrame, Iterable[Bar]]


def bars_to_frame(bars: BarsLike) -> pd.DataFrame:
    """
    Normalise input bars into a float OHLCV DataFrame with a 0..n-1 index.

    Accepts either a sequence of Bar objects or a DataFrame with columns
    open, high, low, close, volume (case-insensitive). A 'timestamp' column is
    kept when present; otherwise the DataFrame index is used as the timestamp.
    """
    if isinstance(bars, pd.DataFrame):
        df = bars.rename(columns=lambda c: str(c).lower())
        missing = [c for c in OHLCV_COLUMNS if c not in df.columns]
        if missing:
            raise ValueError(f"Missing required columns: {missing}")
        timestamps = df["timestamp"].to_numpy() if "timestamp" in df.columns else df.index.to_numpy()
        frame = df.loc[:, list(OHLCV_COLUMNS)].astype(float).reset_index(drop=True)
        frame.insert(0, "timestamp", timestamps)
        return frame

    rows = [asdict(bar) for bar in bars]
    frame = pd.DataFrame(rows, columns=["timestamp", *OHLCV_COLUMNS])
    frame[list(OHLCV_COLUMNS)] = frame[list(OHLCV_COLUMNS)].astype(float)
    return frame


@dataclass
class EvaluationContext:
    """
    Mutable state for exactly one script execution.

    Holds the input bars, caller parameters, declared scalar variables,
    declared series and the descriptive study metadata. Names are flat: a
    later declaration overwrites the earlier binding.
    """
    data: pd.DataFrame
    parameters: Dict[str, Any] = field(default_factory=dict)
    variables: Dict[str, Any] = field(default_factory=dict)
    series: Dict[str, pd.Series] = field(default_factory=dict)
    study_title: str = ""
    study_short_title: str = ""
    overlay: bool = False

    @classmethod
    def create(cls, bars: BarsLike, parameters: Optional[Mapping[str, Any]] = None) -> "EvaluationContext":
        return cls(data=bars_to_frame(bars), parameters=dict(parameters or {}))

    @property
    def bar_count(self) -> int:
        return len(self.data)

    def price(self, column: str) -> pd.Series:
        return self.data[column].astype(float)
