from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Optional

from ..attendance.service import AttendanceService
from ..common.datetime_utils import now_local, range_cutoff
from ..core.exceptions import ValidationError
from ..sessions import first_clock_ins, pair_sessions, summarize_days
from ..users.service import UserService
from .calculator.base import PayrollCalculator
from .calculator.hourly_calculator import HourlyRateCalculator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateResult:
    user_id: int
    start: date
    end: date
    hourly_rate: Decimal
    total_seconds: float
    total_hours: float
    total_pay: Decimal
    working_days: int

    def to_dict(self) -> dict:
        return {
            "userId": self.user_id,
            "startDate": self.start.isoformat(),
            "endDate": self.end.isoformat(),
            "hourlyRate": str(self.hourly_rate),
            "totalSeconds": self.total_seconds,
            "totalHours": self.total_hours,
            "totalPay": str(self.total_pay),
            "workingDays": self.working_days,
        }


def parse_rate(value) -> Decimal:
    try:
        rate = Decimal(str(value).strip())
    except (InvalidOperation, AttributeError):
        raise ValidationError("Hourly rate must be a number")
    if not rate.is_finite() or rate <= 0:
        raise ValidationError("Hourly rate must be greater than zero")
    return rate


class RateCalculatorService:
    """Use case: pay for one employee over a date range at an hourly rate."""

    def __init__(
        self,
        attendance: AttendanceService,
        users: UserService,
        *,
        calculator: Optional[PayrollCalculator] = None,
    ):
        self._attendance = attendance
        self._users = users
        self._calculator = calculator or HourlyRateCalculator()

    def calculate(
        self,
        *,
        user_id: int,
        start: date,
        end: date,
        hourly_rate,
        now: Optional[datetime] = None,
    ) -> RateResult:
        rate = parse_rate(hourly_rate)
        if end < start:
            raise ValidationError("End date must be on or after start date")
        now = now or now_local()
        user = self._users.get_user(user_id)

        events = self._attendance.events_for_user(user.user_id, start=start, end=end)
        # a clock-in never closed inside the range stops counting at the range end
        sessions = pair_sessions(events, range_cutoff(end, now))
        days = summarize_days(sessions, start=start, end=end, arrivals=first_clock_ins(events))
        summary = self._calculator.summarize(days, rate)

        logger.info(
            "Rate calculation for user %s %s..%s: %.2fh over %d days",
            user.user_id, start, end, summary.total_hours, summary.working_days_count,
        )
        return RateResult(
            user_id=user.user_id,
            start=start,
            end=end,
            hourly_rate=rate,
            total_seconds=summary.total_duration_seconds,
            total_hours=round(summary.total_hours, 2),
            total_pay=summary.total_pay,
            working_days=summary.working_days_count,
        )
