from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from ...sessions import DaySummary, RangeSummary


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def summarize(self, days: Sequence[DaySummary], hourly_rate) -> RangeSummary:
        raise NotImplementedError
