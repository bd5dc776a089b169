import logging
from dataclasses import replace
from datetime import date

import pytest

from school_attendance.calendar.model import AcademicCycle, AcademicWeek, Bimester
from school_attendance.calendar.service import CalendarService
from school_attendance.core.exceptions import CalendarGapError, NotFoundError, ValidationError

TODAY = date(2025, 3, 7)


def test_valid_registration_date_returns_context(calendar_service):
    ctx = calendar_service.validate_registration_date("2025-03-03", today=TODAY)
    assert ctx.date == date(2025, 3, 3)
    assert ctx.cycle.cycle_id == 1
    assert ctx.bimester.number == 1
    assert ctx.academic_week.number == 9
    assert ctx.holiday is None


def test_future_and_too_old_dates_are_rejected(calendar_service):
    with pytest.raises(ValidationError, match="future"):
        calendar_service.validate_registration_date(date(2025, 3, 10), today=TODAY)
    with pytest.raises(ValidationError, match="30 days"):
        calendar_service.validate_registration_date(date(2025, 2, 3), today=TODAY)


def test_holidays_block_registration_unless_recovered(calendar_service):
    with pytest.raises(ValidationError, match="holiday"):
        calendar_service.validate_registration_date(date(2025, 3, 5), today=TODAY)

    ctx = calendar_service.validate_registration_date(date(2025, 3, 6), today=TODAY)
    assert ctx.holiday.is_recovered


def test_day_outside_every_week_is_a_calendar_gap(calendar_service):
    with pytest.raises(CalendarGapError):
        calendar_service.validate_registration_date(date(2025, 3, 1), today=TODAY)


def test_break_week_is_rejected(calendar_service):
    with pytest.raises(ValidationError, match="break"):
        calendar_service.validate_registration_date(date(2025, 3, 11), today=date(2025, 3, 14))


def test_gap_between_bimesters_and_inactive_bimester(calendar_service):
    with pytest.raises(CalendarGapError):
        calendar_service.validate_registration_date(date(2025, 3, 15), today=date(2025, 3, 20))
    with pytest.raises(CalendarGapError, match="active bimester"):
        calendar_service.validate_registration_date(date(2025, 3, 18), today=date(2025, 3, 20))


def test_closed_or_missing_cycle_is_rejected(calendar_repo, calendar_service):
    calendar_repo.cycles[0] = replace(calendar_repo.cycles[0], is_closed=True)
    with pytest.raises(ValidationError, match="closed"):
        calendar_service.validate_registration_date(date(2025, 3, 3), today=TODAY)

    calendar_repo.cycles[0] = replace(calendar_repo.cycles[0], is_active=False)
    with pytest.raises(CalendarGapError):
        calendar_service.validate_registration_date(date(2025, 3, 3), today=TODAY)


def test_more_than_one_active_cycle_is_logged(calendar_repo, calendar_service, caplog):
    calendar_repo.cycles.append(AcademicCycle(2, "2026", date(2026, 1, 5), date(2026, 10, 30)))
    with caplog.at_level(logging.WARNING):
        cycle = calendar_service.active_cycle_for(date(2025, 3, 3))
    assert cycle.cycle_id == 1
    assert "More than one active academic cycle" in caplog.text


def test_lookups_by_bimester(calendar_service):
    assert calendar_service.resolve_bimester(1, date(2025, 4, 1)).number == 2
    assert calendar_service.resolve_academic_week(1, date(2025, 2, 26)).number == 8
    assert calendar_service.get_holiday(1, "2025-03-05T00:00:00Z").description == "Founders' day"
    assert calendar_service.is_holiday(1, date(2025, 3, 6))
    assert not calendar_service.is_holiday(404, date(2025, 3, 6))
    assert calendar_service.is_allowed_date(1, date(2025, 3, 3))
    assert calendar_service.describe(1, date(2025, 3, 3)).is_school_day


def test_unknown_ids_raise_not_found(calendar_service):
    with pytest.raises(NotFoundError):
        calendar_service.get_bimester(404)
    with pytest.raises(NotFoundError):
        calendar_service.get_week(404)
    with pytest.raises(NotFoundError):
        calendar_service.check_week_layout(404)


def test_week_layout_check(calendar_repo, calendar_service):
    assert calendar_service.check_week_layout(1) == []

    calendar_repo.weeks.append(AcademicWeek(50, 1, 11, date(2025, 3, 12), date(2025, 3, 18)))
    problems = calendar_service.check_week_layout(1)
    assert "Week 11 is outside Bimester 1" in problems
    assert "Weeks 10 and 11 overlap" in problems


def test_injected_clock_supplies_today(calendar_repo):
    svc = CalendarService(calendar_repo, clock=lambda: date(2025, 3, 4))
    assert svc.validate_registration_date(date(2025, 3, 4)).academic_week.number == 9
    with pytest.raises(ValidationError, match="future"):
        svc.validate_registration_date(date(2025, 3, 5))


def test_bimester_range_must_be_ordered():
    with pytest.raises(ValidationError):
        Bimester(9, 1, 4, date(2025, 10, 31), date(2025, 8, 4))
