"""Attendance aggregation over a pay period."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import time
from decimal import Decimal

from motorph_payroll.calculators.types import (
    ZERO,
    AttendancePunch,
    AttendanceSummary,
    minutes_between,
)
from motorph_payroll.config import Settings


class AttendanceAggregator:
    """Reduces daily punches into days worked, hours, lateness and undertime.

    Rules per punch:
    - Counts as a day worked iff time-in is present
    - Worked hours = time-out - time-in (0 when time-out is missing)
    - Overtime = hours beyond the standard day
    - Late iff time-in is strictly after the late threshold; minutes are
      measured from the standard start, not from the threshold
    - Undertime iff time-out is strictly before the standard end
    """

    def __init__(
        self,
        standard_start: time = time(8, 0),
        late_threshold: time = time(8, 15),
        standard_end: time = time(17, 0),
        hours_per_day: Decimal = Decimal("8"),
    ):
        self.standard_start = standard_start
        self.late_threshold = late_threshold
        self.standard_end = standard_end
        self.hours_per_day = hours_per_day

    @classmethod
    def from_settings(cls, settings: Settings) -> AttendanceAggregator:
        return cls(
            standard_start=settings.standard_start,
            late_threshold=settings.late_threshold,
            standard_end=settings.standard_end,
            hours_per_day=settings.hours_per_day,
        )

    def aggregate(self, punches: Iterable[AttendancePunch]) -> AttendanceSummary:
        """Aggregate punches (any order) into an AttendanceSummary."""
        days_worked = 0
        total_hours = ZERO
        overtime_hours = ZERO
        late_minutes = ZERO
        undertime_minutes = ZERO

        for punch in punches:
            if punch.time_in is not None:
                days_worked += 1
                hours = punch.worked_hours
                total_hours += hours
                if hours > self.hours_per_day:
                    overtime_hours += hours - self.hours_per_day
                late_minutes += self.late_minutes(punch.time_in)

            if punch.time_out is not None:
                undertime_minutes += self.undertime_minutes(punch.time_out)

        return AttendanceSummary(
            days_worked=days_worked,
            total_hours=total_hours,
            overtime_hours=overtime_hours,
            late_minutes=late_minutes,
            undertime_minutes=undertime_minutes,
        )

    def late_minutes(self, time_in: time) -> Decimal:
        """Minutes late for a single time-in, zero within the grace period."""
        if time_in <= self.late_threshold:
            return ZERO
        return minutes_between(self.standard_start, time_in)

    def undertime_minutes(self, time_out: time) -> Decimal:
        """Minutes short of the standard end for a single time-out."""
        if time_out >= self.standard_end:
            return ZERO
        return minutes_between(time_out, self.standard_end)
