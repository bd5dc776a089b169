from __future__ import annotations

from enum import Enum


class StatusRole(str, Enum):
    """Day-level attendance label, also the precedence role of a status code."""

    ABSENT = "ABSENT"
    TARDY = "TARDY"
    EXCUSED = "EXCUSED"
    PRESENT = "PRESENT"


class WeekType(str, Enum):
    """Kind of academic week; BREAK weeks accept no attendance."""

    REGULAR = "REGULAR"
    EVALUATION = "EVALUATION"
    REVIEW = "REVIEW"
    BREAK = "BREAK"


class EnrollmentStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    GRADUATED = "GRADUATED"
    TRANSFERRED = "TRANSFERRED"


class RiskLevel(str, Enum):
    """Attendance risk band used by period reports."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class PermissionAction(str, Enum):
    VIEW = "VIEW"
    CREATE = "CREATE"
    MODIFY = "MODIFY"
    DELETE = "DELETE"
