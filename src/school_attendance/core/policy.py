from __future__ import annotations

from dataclasses import dataclass

from .constants import (
    DEFAULT_CONSECUTIVE_ABSENCE_ALERT,
    DEFAULT_MAX_PAST_DAYS,
    DEFAULT_RISK_THRESHOLD_PERCENTAGE,
    DEFAULT_TIMEZONE,
    MAX_NAVIGATION_ATTEMPTS,
)


@dataclass(frozen=True)
class AttendancePolicy:
    """Institution-level attendance parameters (built from settings)."""

    risk_threshold_percentage: float = DEFAULT_RISK_THRESHOLD_PERCENTAGE
    consecutive_absence_alert: int = DEFAULT_CONSECUTIVE_ABSENCE_ALERT
    max_past_days: int = DEFAULT_MAX_PAST_DAYS
    max_navigation_attempts: int = MAX_NAVIGATION_ATTEMPTS
    timezone: str = DEFAULT_TIMEZONE

    @classmethod
    def from_settings(cls, settings) -> "AttendancePolicy":
        return cls(
            risk_threshold_percentage=float(
                getattr(settings, "RISK_THRESHOLD_PERCENTAGE", DEFAULT_RISK_THRESHOLD_PERCENTAGE)
            ),
            consecutive_absence_alert=int(
                getattr(settings, "CONSECUTIVE_ABSENCE_ALERT", DEFAULT_CONSECUTIVE_ABSENCE_ALERT)
            ),
            max_past_days=int(getattr(settings, "MAX_PAST_DAYS", DEFAULT_MAX_PAST_DAYS)),
            max_navigation_attempts=int(getattr(settings, "MAX_NAVIGATION_ATTEMPTS", MAX_NAVIGATION_ATTEMPTS)),
            timezone=str(getattr(settings, "TIMEZONE", DEFAULT_TIMEZONE)),
        )
