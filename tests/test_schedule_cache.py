from __future__ import annotations

import pytest

from household_attendance.core.exceptions import NotConfigured
from household_attendance.schedules.cache import CachedScheduleRepository
from household_attendance.schedules.model import parse_work_days
from household_attendance.schedules.service import ScheduleService


class Ticker:
    def __init__(self):
        self.value = 0.0

    def __call__(self):
        return self.value


def test_cache_serves_within_ttl_and_refreshes_after(schedules, make_schedule):
    ticker = Ticker()
    cache = CachedScheduleRepository(schedules, ttl_seconds=60, monotonic=ticker)

    assert cache.get_for_employee("ana") == make_schedule("ana")
    cache.get_for_employee("ana")
    assert schedules.reads == 1

    ticker.value = 61
    cache.get_for_employee("ana")
    assert schedules.reads == 2


def test_invalidate_forces_reload(schedules, make_schedule):
    cache = CachedScheduleRepository(schedules, ttl_seconds=60, monotonic=Ticker())
    cache.get_for_employee("ana")

    schedules.schedules["ana"] = make_schedule("ana", flexible=True)
    assert not cache.get_for_employee("ana").flexible

    cache.invalidate("ana")
    assert cache.get_for_employee("ana").flexible


def test_service_raises_not_configured(schedules):
    service = ScheduleService(schedules)
    with pytest.raises(NotConfigured) as exc:
        service.get_schedule("carla")
    assert exc.value.employee_id == "carla"


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("1,2,3,4,5", {1, 2, 3, 4, 5}),
        (" 6, 7 ", {6, 7}),
        ("0,8,x,3", {3}),
        ("", set()),
        (None, set()),
    ],
)
def test_parse_work_days(raw, expected):
    assert parse_work_days(raw) == frozenset(expected)
