from datetime import datetime, timezone

import pytest

from alert_state import (
    AlertPayload,
    AlertStateMachine,
    AlertType,
    SignalId,
    alert_style,
)


def test_pivots_inside_cooldown_are_suppressed():
    machine = AlertStateMachine(cooldown_bars=3)
    active = [i for i in range(12) if machine.update(i, long_pivot=True, short_pivot=False).long_pivot_active]
    # lastLongSignalBar starts at 0, so the first eligible bar is 3
    assert active == [3, 6, 9]


@pytest.mark.parametrize("cooldown", [0, 1, 3, 5])
def test_cooldown_spacing_invariant(cooldown):
    machine = AlertStateMachine(cooldown_bars=cooldown)
    pattern = [True, False, True, True, False, False, True, True, True, False] * 5
    active = [i for i, pivot in enumerate(pattern)
              if machine.update(i, long_pivot=pivot, short_pivot=False).long_pivot_active]
    assert active
    assert all(j - i >= cooldown for i, j in zip(active, active[1:]))


def test_directions_have_independent_cooldowns():
    machine = AlertStateMachine(cooldown_bars=3)
    assert machine.update(5, long_pivot=True, short_pivot=False).long_pivot_active
    assert machine.update(6, long_pivot=False, short_pivot=True).short_pivot_active
    assert not machine.update(7, long_pivot=True, short_pivot=False).long_pivot_active
    assert machine.update(8, long_pivot=True, short_pivot=False).long_pivot_active


def test_last_alert_summary_and_bars_since():
    machine = AlertStateMachine(cooldown_bars=3)
    fired = machine.update(10, long_pivot=True, short_pivot=False)
    assert fired.fired
    assert fired.last_alert_type == AlertType.LONG_PIVOT
    assert fired.bars_since_last_alert == 1

    later = machine.update(14, long_pivot=False, short_pivot=False)
    assert not later.fired
    assert later.last_alert_type == AlertType.LONG_PIVOT
    assert later.last_alert_bar_index == 10
    assert later.bars_since_last_alert == 4


def test_filtered_pivot_records_trend_pivot():
    machine = AlertStateMachine(cooldown_bars=3)
    snap = machine.update(4, long_pivot=False, short_pivot=True, filtered_short=True)
    assert snap.last_alert_type == AlertType.SHORT_TREND_PIVOT
    assert snap.short_trend_pivot_active
    assert not snap.long_trend_pivot_active


def test_long_wins_when_both_active():
    machine = AlertStateMachine(cooldown_bars=3)
    snap = machine.update(5, long_pivot=True, short_pivot=True)
    assert snap.long_pivot_active and snap.short_pivot_active
    assert snap.last_alert_type == AlertType.LONG_PIVOT


def test_preview_leaves_state_untouched():
    machine = AlertStateMachine(cooldown_bars=3)
    before = machine.state
    preview = machine.update(5, long_pivot=True, short_pivot=False, commit=False)
    assert preview.long_pivot_active
    assert machine.state == before
    assert machine.update(5, long_pivot=True, short_pivot=False).long_pivot_active


def test_every_signal_id_has_a_style():
    for signal_id in SignalId:
        style = alert_style(signal_id)
        assert style.label
        assert style.color.startswith("#")


def test_payload_message_and_dict():
    ts = datetime(2024, 1, 2, 3, tzinfo=timezone.utc)
    payload = AlertPayload(SignalId.TPIV_LONG, ts, 101.5, 42)
    assert payload.message == "TPIV_LONG @ 2024-01-02T03:00:00+00:00 close=101.5"
    assert payload.to_dict() == {
        "signal": "TPIV_LONG",
        "timestamp": "2024-01-02T03:00:00+00:00",
        "close": 101.5,
        "bar_index": 42,
    }
