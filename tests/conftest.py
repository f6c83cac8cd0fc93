from datetime import datetime, timedelta, timezone

import pytest

from signal_engine import Bar

START = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _bars(closes, volumes=None, start=START, step=timedelta(hours=1), spread=0.5):
    volumes = volumes if volumes is not None else [1000.0] * len(closes)
    bars = []
    prev = closes[0]
    for i, (close, volume) in enumerate(zip(closes, volumes)):
        bars.append(Bar(
            timestamp=start + i * step,
            open=prev,
            high=max(prev, close) + spread,
            low=min(prev, close) - spread,
            close=close,
            volume=volume,
        ))
        prev = close
    return bars


@pytest.fixture
def make_bars():
    """Factory: closes (+ optional volumes) -> hourly Bars starting 2024-01-01 UTC."""
    return _bars


@pytest.fixture
def v_shape():
    """100 bars falling 1/bar to a low at bar 50, then rising; 3x volume at bar 50."""
    closes = [150.0 - i for i in range(51)] + [100.0 + (i - 50) for i in range(51, 100)]
    volumes = [1000.0] * 100
    volumes[50] = 3000.0
    return _bars(closes, volumes)
