from __future__ import annotations

from typing import Any

import pytest

from task_sequence.core import forecast_plan
from task_sequence.io import ConfigLoader
from task_sequence.model import WaitStatus


def _spec(**overrides: Any):
    payload: dict[str, Any] = {
        "version": "0.1",
        "constraints": {"drain_battery": False},
        "initial_state": {"time": 0.0},
        "events": [
            {"id": "e1", "initial_wait_duration": 5.0, "timeout_duration": 20.0},
            {"id": "e2", "initial_wait_duration": 3.0, "timeout_duration": 30.0},
        ],
        "sim": {"duration": 100.0},
    }
    payload.update(overrides)
    return ConfigLoader().load_data(payload)


def test_forecast_without_confirmation_stops_at_first_timeout() -> None:
    rows = forecast_plan(_spec())

    assert {row.event_id for row in rows} == {"e1"}
    assert [row.status for row in rows] == [WaitStatus.WAITING] * 5 + [WaitStatus.TIMED_OUT]
    assert rows[-1].state_time is None


def test_forecast_with_assumed_confirmation_chains_events() -> None:
    rows = forecast_plan(_spec(), assume_confirmed_after=2)

    e1 = [row for row in rows if row.event_id == "e1"]
    e2 = [row for row in rows if row.event_id == "e2"]
    assert [row.status for row in e1] == [WaitStatus.WAITING, WaitStatus.WAITING, WaitStatus.CONFIRMED]
    assert e1[-1].wait_until == 10.0
    assert e2[0].state_time == 13.0
    assert e2[-1].status == WaitStatus.CONFIRMED
    assert e2[-1].wait_until == 16.0


def test_forecast_immediate_confirmation() -> None:
    rows = forecast_plan(_spec(), assume_confirmed_after=0)

    assert [row.status for row in rows] == [WaitStatus.CONFIRMED, WaitStatus.CONFIRMED]
    assert rows[-1].wait_until == 0.0


def test_forecast_respects_poll_limit() -> None:
    rows = forecast_plan(_spec(), max_polls=2)

    assert len(rows) == 2
    assert rows[-1].status == WaitStatus.WAITING


def test_forecast_argument_validation() -> None:
    with pytest.raises(ValueError, match="max_polls"):
        forecast_plan(_spec(), max_polls=0)
    with pytest.raises(ValueError, match="assume_confirmed_after"):
        forecast_plan(_spec(), assume_confirmed_after=-1)
