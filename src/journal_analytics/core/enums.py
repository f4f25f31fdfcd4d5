"""Enumerations used across the analytics engine."""

from enum import Enum, IntEnum


class StreakType(str, Enum):
    WIN = "W"
    LOSS = "L"


class PeriodKind(str, Enum):
    ALL = "all"
    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"


class Lookback(str, Enum):
    ALL = "all"
    DAYS_7 = "7d"
    DAYS_30 = "30d"
    DAYS_90 = "90d"
    YTD = "ytd"


class Weekday(IntEnum):
    """Python ``datetime.weekday()`` numbering (0=Monday)."""

    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6

    @property
    def label(self) -> str:
        return self.name.lower()


TRADING_WEEKDAYS: tuple[Weekday, ...] = (
    Weekday.MONDAY,
    Weekday.TUESDAY,
    Weekday.WEDNESDAY,
    Weekday.THURSDAY,
    Weekday.FRIDAY,
)
