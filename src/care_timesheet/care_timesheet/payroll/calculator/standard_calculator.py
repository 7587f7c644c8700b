from __future__ import annotations

from .base import PayCalculator


class LinearPayCalculator(PayCalculator):
    """Standard rule: (whole hours + minutes / 60) * hourly rate, rounded to cents."""

    def estimate_pay(self, total_minutes: int, hourly_rate: float) -> float:
        total_minutes = max(int(total_minutes), 0)
        whole_hours, minutes = divmod(total_minutes, 60)
        return round((whole_hours + minutes / 60) * float(hourly_rate), 2)
