from datetime import datetime
from types import SimpleNamespace

import pytest

from hrms.core.errors import ValidationFailed
from hrms.domains.attendance.rules import (
    apply_attendance_rule,
    compute_working_hours,
    derive_status,
    is_late,
    total_break_minutes,
)


def at(hour, minute=0, second=0, microsecond=0):
    return datetime(2024, 3, 4, hour, minute, second, microsecond)


def record(check_in, check_out, breaks=None, status="present", manually_marked=False):
    return SimpleNamespace(
        check_in=check_in,
        check_out=check_out,
        breaks=breaks or [],
        status=status,
        manually_marked=manually_marked,
        working_hours=0.0,
        overtime_hours=0.0,
    )


@pytest.mark.parametrize("check_in, check_out", [(None, None), (at(9), None), (None, at(17))])
def test_missing_timestamp_means_zero_hours(check_in, check_out):
    assert compute_working_hours(check_in, check_out, [{"duration": 30}]) == 0


def test_breaks_are_subtracted():
    breaks = [{"duration": 30}, {"duration": 15}, {"duration": None}]
    assert total_break_minutes(breaks) == 45
    assert compute_working_hours(at(9), at(17, 45), breaks) == pytest.approx(8.0)


def test_breaks_longer_than_shift_floor_at_zero():
    assert compute_working_hours(at(9), at(9, 30), [{"duration": 60}]) == 0


def test_nine_sharp_is_on_time():
    assert is_late(at(9)) is False
    assert is_late(at(9, 0, 0, 1000)) is True
    assert is_late(at(8, 59)) is False
    assert is_late(None) is False


def test_full_day_with_overtime_is_present():
    target = apply_attendance_rule(record(at(9), at(17, 30)))

    assert target.working_hours == pytest.approx(8.5)
    assert target.overtime_hours == pytest.approx(0.5)
    assert target.status == "present"


def test_late_arrival_dominates_hours():
    target = apply_attendance_rule(record(at(9, 15), at(17)))

    assert target.working_hours == pytest.approx(7.75)
    assert target.overtime_hours == 0
    assert target.status == "late"


def test_short_day_is_half_day():
    target = apply_attendance_rule(record(at(9), at(12, 30)))

    assert target.working_hours == pytest.approx(3.5)
    assert target.status == "half-day"


def test_late_short_day_is_still_late():
    assert derive_status(at(10), 2.0) == "late"


def test_open_record_has_zero_hours_and_keeps_status():
    stale = record(at(9, 30), None, status="present")
    stale.working_hours = 9.5
    stale.overtime_hours = 1.5

    target = apply_attendance_rule(stale)

    assert target.working_hours == 0
    assert target.overtime_hours == 0
    assert target.status == "present"


def test_shift_over_a_day_is_rejected():
    with pytest.raises(ValidationFailed):
        apply_attendance_rule(record(at(9), datetime(2024, 3, 5, 10, 0)))


def test_manual_status_preserved_by_default_policy():
    target = apply_attendance_rule(
        record(at(9), at(17), status="leave", manually_marked=True), policy="preserve_manual"
    )

    assert target.status == "leave"
    assert target.working_hours == pytest.approx(8.0)


def test_always_policy_overwrites_manual_status():
    target = apply_attendance_rule(record(at(9), at(17), status="leave", manually_marked=True), policy="always")

    assert target.status == "present"
