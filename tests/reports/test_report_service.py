from datetime import date

import pytest

from school_attendance.core.enums import RiskLevel
from school_attendance.core.exceptions import NotFoundError, ValidationError
from school_attendance.core.policy import AttendancePolicy
from school_attendance.reports.service import AttendanceReportService, classify_risk


@pytest.fixture
def week_nine(attendance_repo):
    """Ana misses one class on Monday; Bruno drifts into a run of absences."""

    attendance_repo.add(1, date(2025, 3, 3), "I", schedule_id=1)
    attendance_repo.add(1, date(2025, 3, 3), "P", schedule_id=2)
    attendance_repo.add(1, date(2025, 3, 4), "P")
    attendance_repo.add(2, date(2025, 3, 4), "T")
    attendance_repo.add(1, date(2025, 3, 6), "P")
    attendance_repo.add(2, date(2025, 3, 6), "I")
    attendance_repo.add(1, date(2025, 3, 7), "P")
    return attendance_repo


def test_daily_report_folds_missing_students_into_absent(report_service, attendance_repo):
    attendance_repo.add(1, date(2025, 3, 3), "I", schedule_id=1)
    attendance_repo.add(1, date(2025, 3, 3), "P", schedule_id=2)

    report = report_service.daily_report(section_id=7, cycle_id=1, on_date="2025-03-03")

    assert report.total_enrolled == 2
    assert report.counts.absent == 1
    assert report.counts.without_record == 1
    assert report.actual_absent == 2
    assert report.attendance_rate == 0.0
    assert [e.enrollment_id for e in report.students_without_record] == [2]
    assert report.context.bimester.number == 1
    assert report.context.academic_week.number == 9


def test_daily_report_rate(report_service, attendance_repo):
    attendance_repo.add(1, date(2025, 3, 4), "P")
    attendance_repo.add(2, date(2025, 3, 4), "T")

    report = report_service.daily_report(section_id=7, cycle_id=1, on_date=date(2025, 3, 4))

    assert report.attendance_rate == 100.0
    assert report.actual_absent == 0


def test_period_report_totals_and_averages(report_service, week_nine):
    report = report_service.period_report(
        section_id=7, cycle_id=1, start_date=date(2025, 3, 3), end_date=date(2025, 3, 7)
    )

    assert report.distinct_dates == 4
    assert [d.date for d in report.by_day] == [date(2025, 3, 3), date(2025, 3, 4), date(2025, 3, 6), date(2025, 3, 7)]
    # 4 attended / (2 enrolled x 4 observed dates)
    assert report.attendance_rate == 50.0
    assert report.averages == {"present": 1, "absent": 1, "tardy": 0, "excused": 0}
    assert report.statistics.total == 6
    assert (report.statistics.present, report.statistics.absent, report.statistics.late) == (3, 2, 1)
    assert report.statistics.attendance_rate_label == "50.0"


def test_period_report_student_summaries(report_service, week_nine):
    report = report_service.period_report(
        section_id=7, cycle_id=1, start_date=date(2025, 3, 3), end_date=date(2025, 3, 7)
    )
    ana, bruno = report.by_student

    assert ana.student_name == "Ana López"
    assert (ana.present, ana.absent, ana.without_record) == (3, 1, 0)
    assert ana.attendance_rate == 75.0
    assert ana.consecutive_absences == 0
    assert ana.last_absent_date == date(2025, 3, 3)
    assert ana.risk_level == RiskLevel.MEDIUM

    assert (bruno.tardy, bruno.absent, bruno.without_record) == (1, 1, 2)
    assert bruno.attendance_rate == 25.0
    assert bruno.consecutive_absences == 2
    assert bruno.last_absent_date == date(2025, 3, 7)
    assert bruno.risk_level == RiskLevel.CRITICAL

    assert [s.enrollment_id for s in report.at_risk] == [1, 2]


def test_period_without_records(report_service):
    report = report_service.period_report(section_id=7, cycle_id=1, start_date="2025-03-03", end_date="2025-03-07")

    assert report.attendance_rate == 0.0
    assert report.distinct_dates == 0
    assert report.averages == {"present": 0, "absent": 0, "tardy": 0, "excused": 0}
    assert all(s.risk_level == RiskLevel.LOW and not s.is_at_risk for s in report.by_student)
    assert report.at_risk == ()


def test_period_must_be_ordered(report_service):
    with pytest.raises(ValidationError):
        report_service.period_report(section_id=7, cycle_id=1, start_date="2025-03-07", end_date="2025-03-03")


def test_weekly_and_bimester_reports_resolve_their_range(report_service, week_nine):
    weekly = report_service.weekly_report(section_id=7, week_id=9)
    assert (weekly.start_date, weekly.end_date) == (date(2025, 3, 3), date(2025, 3, 7))
    assert weekly.label == "Bimester 1 - week 9"
    assert weekly.attendance_rate == 50.0

    bimester = report_service.bimester_report(section_id=7, bimester_id=1)
    assert (bimester.start_date, bimester.end_date) == (date(2025, 1, 6), date(2025, 3, 14))
    assert bimester.label == "Bimester 1"
    assert bimester.distinct_dates == 4

    with pytest.raises(NotFoundError):
        report_service.weekly_report(section_id=7, week_id=404)
    with pytest.raises(NotFoundError):
        report_service.bimester_report(section_id=7, bimester_id=404)


@pytest.mark.parametrize(
    "rate, consecutive, expected",
    [
        (100.0, 0, RiskLevel.LOW),
        (80.0, 0, RiskLevel.LOW),
        (95.0, 3, RiskLevel.MEDIUM),
        (79.9, 0, RiskLevel.MEDIUM),
        (70.0, 0, RiskLevel.MEDIUM),
        (65.0, 5, RiskLevel.HIGH),
        (59.9, 0, RiskLevel.CRITICAL),
    ],
)
def test_classify_risk(rate, consecutive, expected):
    assert classify_risk(rate, consecutive, AttendancePolicy()) == expected


def test_consecutive_absences_alone_flag_a_student(enrollments_repo, attendance_repo, statuses_repo, calendar_service):
    policy = AttendancePolicy(risk_threshold_percentage=50.0, consecutive_absence_alert=2)
    svc = AttendanceReportService(enrollments_repo, attendance_repo, statuses_repo, calendar_service, policy=policy)
    for day in (date(2025, 3, 3), date(2025, 3, 4), date(2025, 3, 6)):
        attendance_repo.add(1, day, "P")
    attendance_repo.add(2, date(2025, 3, 3), "P")
    attendance_repo.add(2, date(2025, 3, 4), "P")

    report = svc.period_report(section_id=7, cycle_id=1, start_date="2025-03-03", end_date="2025-03-07")
    bruno = report.by_student[1]

    assert bruno.attendance_rate == 66.7
    assert bruno.consecutive_absences == 1
    assert not bruno.is_at_risk

    attendance_repo.add(2, date(2025, 3, 7), "I")
    attendance_repo.add(1, date(2025, 3, 7), "P")
    bruno = svc.period_report(section_id=7, cycle_id=1, start_date="2025-03-03", end_date="2025-03-07").by_student[1]

    assert bruno.consecutive_absences == 2
    assert bruno.is_at_risk
    assert bruno.risk_level == RiskLevel.MEDIUM
    assert bruno.absent == 1
