from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional


@dataclass(frozen=True)
class WeeklySummary:
    """Running total of submitted work minutes for one user in one pay cycle."""

    user_id: str
    user_name: str
    start_date: date
    end_date: date
    total_minutes: int
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "userId": self.user_id,
            "userName": self.user_name,
            "startDate": self.start_date.isoformat(),
            "endDate": self.end_date.isoformat(),
            "totalMinutes": self.total_minutes,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
