from __future__ import annotations

from abc import ABC, abstractmethod


class PayCalculator(ABC):
    """Calculator interface (Strategy Pattern for pay estimates)."""

    @abstractmethod
    def estimate_pay(self, total_minutes: int, hourly_rate: float) -> float:
        raise NotImplementedError
