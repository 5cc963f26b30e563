from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_HALF_DOWN, ROUND_HALF_UP, Decimal
from typing import Optional

from ..core.enums import PresenceType


def percentage(part: int, whole: int) -> float:
    """part/whole*100, with an empty denominator reading as 0%."""
    return (part / whole) * 100 if whole > 0 else 0.0


def round_rate(value: float) -> float:
    """Round to 2 decimals for display, with ties going toward +infinity."""
    rounding = ROUND_HALF_UP if value >= 0 else ROUND_HALF_DOWN
    return float(Decimal(repr(value)).quantize(Decimal("0.01"), rounding=rounding))


@dataclass
class Tally:
    """Mutable present/absent counter used while grouping."""

    present: int = 0
    absent: int = 0

    def add(self, present: bool) -> None:
        if present:
            self.present += 1
        else:
            self.absent += 1

    @property
    def total(self) -> int:
        return self.present + self.absent

    @property
    def percentage(self) -> float:
        return percentage(self.present, self.total)


@dataclass(frozen=True)
class Overview:
    present_count: int
    absent_count: int
    total_records: int
    attendance_rate: float


@dataclass(frozen=True)
class DateTypeStat:
    date: str
    session_type: str
    present: int
    absent: int
    total: int
    percentage: float

    def to_dict(self) -> dict:
        return {
            "date": self.date,
            "attendance_type": self.session_type,
            "present": self.present,
            "absent": self.absent,
            "total": self.total,
            "percentage": self.percentage,
        }


@dataclass(frozen=True)
class TypeStat:
    type: str
    present: int
    absent: int
    total: int
    percentage: float

    def to_dict(self) -> dict:
        return {
            "type": self.type,
            "present": self.present,
            "absent": self.absent,
            "total": self.total,
            "percentage": self.percentage,
        }


@dataclass(frozen=True)
class TrendPoint:
    """One date of the category trend; `categories` maps display category -> rate."""

    date: str
    categories: dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {"date": self.date, **self.categories}


@dataclass(frozen=True)
class TopAttendee:
    id: str
    first_name: str
    last_name: str
    member_number: Optional[str]
    photo_url: Optional[str]
    attendance_rate: float
    total_sessions: int
    present_count: int

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "member_number": self.member_number,
            "photo_url": self.photo_url,
            "attendance_rate": self.attendance_rate,
            "total_sessions": self.total_sessions,
            "present_count": self.present_count,
        }


@dataclass(frozen=True)
class Streak:
    current: int = 0
    longest: int = 0
    type: PresenceType = PresenceType.PRESENT

    def to_dict(self) -> dict:
        return {"current": self.current, "longest": self.longest, "type": self.type.value}


@dataclass(frozen=True)
class MonthlyStat:
    month: str
    total: int
    present: int
    rate: float

    def to_dict(self) -> dict:
        return {"month": self.month, "total": self.total, "present": self.present, "rate": self.rate}


@dataclass(frozen=True)
class MemberSummary:
    member_id: str
    total_sessions: int
    present_count: int
    absent_count: int
    attendance_rate: float
    streak: Streak
    monthly_stats: list[MonthlyStat]

    def to_dict(self) -> dict:
        return {
            "member_id": self.member_id,
            "total_sessions": self.total_sessions,
            "present_count": self.present_count,
            "absent_count": self.absent_count,
            "attendance_rate": round_rate(self.attendance_rate),
            "streak": self.streak.to_dict(),
            "monthly_stats": [m.to_dict() for m in self.monthly_stats],
        }
