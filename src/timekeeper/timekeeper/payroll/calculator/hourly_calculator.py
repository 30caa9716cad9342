from __future__ import annotations

from typing import Sequence

from .base import PayrollCalculator
from ...sessions import DaySummary, RangeSummary, summarize_range


class HourlyRateCalculator(PayrollCalculator):
    """Flat rule: every paired second is paid at the hourly rate."""

    def summarize(self, days: Sequence[DaySummary], hourly_rate) -> RangeSummary:
        return summarize_range(days, hourly_rate=hourly_rate)
