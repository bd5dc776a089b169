"""Example: use the service layer directly to print a section's day.

Run with a configured database (see .env / APP_ENV):
    python examples/daily_report.py 7 1 2025-03-03
"""

import sys

from school_attendance.main import create_container


def main():
    section_id, cycle_id, on_date = int(sys.argv[1]), int(sys.argv[2]), sys.argv[3]
    container = create_container()
    report = container.report_service.daily_report(section_id=section_id, cycle_id=cycle_id, on_date=on_date)

    ctx = report.context
    print(f"{ctx.date} {ctx.bimester.label if ctx.bimester else '-'} holiday={ctx.is_holiday}")
    for student in report.section_day.students:
        print(f"  {student.student_name:<30} {student.day_status.value}")
    for enrollment in report.students_without_record:
        print(f"  {enrollment.student_name:<30} (no record)")
    print(f"rate={report.attendance_rate:.1f}% absent={report.actual_absent}/{report.total_enrolled}")


if __name__ == "__main__":
    main()
