"""Trade record — the input data model.

A TradeRecord is one closed trade/operation as supplied by the host
application: the instant it closed and its signed monetary result.
Records are immutable; every analytic produces fresh structures from
the slice it was given.

Hosts that store the calendar date and the time-of-day separately
build records with :meth:`TradeRecord.from_parts` so both halves are
combined the same way everywhere.
"""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Any, Iterable, Mapping

from ..core.errors import InvalidRecordError


@dataclass(frozen=True)
class TradeRecord:
    """A single closed trade.

    Parameters
    ----------
    timestamp : datetime
        Instant the trade closed.  Bucketed by its own wall-clock
        fields; aware datetimes are never converted.
    result : float
        Signed result: profit positive, loss negative, zero break-even.
    strategy : str | None
        Optional strategy label, used by the per-strategy breakdown.
    """

    timestamp: datetime
    result: float
    strategy: str | None = None

    @classmethod
    def from_parts(
        cls,
        trade_date: date | str,
        trade_time: time | str,
        result: float,
        strategy: str | None = None,
    ) -> TradeRecord:
        """Combine a calendar date and a time-of-day into one record.

        Accepts ``date``/``time`` objects or ISO strings
        (``YYYY-MM-DD`` and ``HH:MM`` or ``HH:MM:SS``).
        """
        if isinstance(trade_date, str):
            trade_date = date.fromisoformat(trade_date)
        if isinstance(trade_time, str):
            trade_time = time.fromisoformat(trade_time)
        return cls(
            timestamp=datetime.combine(trade_date, trade_time),
            result=result,
            strategy=strategy,
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> TradeRecord:
        """Build a record from a plain mapping.

        Either ``timestamp`` (ISO string or datetime) or the
        ``date`` + ``time`` pair must be present.
        """
        strategy = data.get("strategy")
        if "timestamp" in data and data["timestamp"] is not None:
            ts = data["timestamp"]
            if isinstance(ts, str):
                ts = datetime.fromisoformat(ts)
            return cls(timestamp=ts, result=data.get("result"), strategy=strategy)
        if data.get("date") is not None:
            return cls.from_parts(
                data["date"], data.get("time") or "00:00", data.get("result"), strategy
            )
        raise InvalidRecordError("timestamp", reason="neither timestamp nor date given")

    @property
    def trade_date(self) -> date:
        return self.timestamp.date()

    @property
    def wall_clock(self) -> datetime:
        """Timestamp with any tzinfo dropped, for ordering and cutoffs."""
        return self.timestamp.replace(tzinfo=None)

    @property
    def hour(self) -> int:
        return self.timestamp.hour

    @property
    def weekday(self) -> int:
        """0=Monday ... 6=Sunday."""
        return self.timestamp.weekday()

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp.isoformat(),
            "result": self.result,
            "strategy": self.strategy,
        }


def validate_records(records: Iterable[Any]) -> list[TradeRecord]:
    """Reject malformed records before they reach the analytics.

    The analytics assume well-typed input and never coerce or drop
    records themselves.  Hosts that want a defensive check call this
    first; the first offending record raises.

    Raises
    ------
    InvalidRecordError
        Naming the field (``timestamp`` or ``result``) and the index.
    """
    checked: list[TradeRecord] = []
    for idx, record in enumerate(records):
        ts = getattr(record, "timestamp", None)
        if not isinstance(ts, datetime):
            raise InvalidRecordError("timestamp", idx, f"expected datetime, got {type(ts).__name__}")
        value = getattr(record, "result", None)
        if isinstance(value, bool) or not isinstance(value, numbers.Real):
            raise InvalidRecordError("result", idx, f"expected number, got {type(value).__name__}")
        if not math.isfinite(value):
            raise InvalidRecordError("result", idx, f"non-finite value {value!r}")
        checked.append(record)
    return checked
