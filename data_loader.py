"""
Data loader — reads OHLCV bars from CSV into a normalized DataFrame.
"""

import logging
from pathlib import Path
from typing import Iterator, Union

import numpy as np
import pandas as pd

from signal_engine import Bar

logger = logging.getLogger(__name__)

OHLCV_COLUMNS = ["open", "high", "low", "close", "volume"]


def normalize_frame(df: pd.DataFrame) -> pd.DataFrame:
    """
    Normalize a raw OHLCV frame.
    Returns a DataFrame indexed by UTC timestamp with float columns:
        open, high, low, close, volume
    Epoch values are read as milliseconds. Rows keep their original order.
    """
    df = df.rename(columns=lambda c: str(c).strip().lower())
    missing = [c for c in ["timestamp", *OHLCV_COLUMNS] if c not in df.columns]
    if missing:
        raise ValueError(f"Missing column(s): {', '.join(missing)}")

    if pd.api.types.is_numeric_dtype(df["timestamp"]):
        df["timestamp"] = pd.to_datetime(df["timestamp"], unit="ms", utc=True)
    else:
        df["timestamp"] = pd.to_datetime(df["timestamp"], utc=True, errors="coerce")
    df = df.set_index("timestamp")

    # Ensure numeric types; garbage and ±inf become NaN so the engine rejects them
    for col in OHLCV_COLUMNS:
        df[col] = pd.to_numeric(df[col], errors="coerce").astype(float)
    df[OHLCV_COLUMNS] = df[OHLCV_COLUMNS].replace([np.inf, -np.inf], np.nan)

    return df[OHLCV_COLUMNS]


def load_bars(path: Union[str, Path]) -> pd.DataFrame:
    """Load a CSV of bars (timestamp, open, high, low, close, volume)."""
    raw = pd.read_csv(path)
    df = normalize_frame(raw)
    logger.info(f"Loaded {len(df)} bars from {path}")
    return df


def iter_bars(df: pd.DataFrame) -> Iterator[Bar]:
    """Yield one Bar per row, in frame order."""
    for row in df.itertuples():
        ts = row.Index
        yield Bar(
            timestamp=None if pd.isna(ts) else ts.to_pydatetime(),
            open=float(row.open),
            high=float(row.high),
            low=float(row.low),
            close=float(row.close),
            volume=float(row.volume),
        )
