"""Tests for TradeRecord construction and validation."""

import dataclasses
from datetime import date, datetime, time, timedelta, timezone

import pytest

from journal_analytics.core.errors import InvalidRecordError, RecordError
from journal_analytics.journal.record import TradeRecord, validate_records


class TestTradeRecord:
    def test_is_immutable(self, make_record):
        record = make_record(10)
        with pytest.raises(dataclasses.FrozenInstanceError):
            record.result = 20

    def test_calendar_accessors(self):
        record = TradeRecord(timestamp=datetime(2024, 1, 3, 14, 30), result=1)
        assert record.trade_date == date(2024, 1, 3)
        assert record.hour == 14
        assert record.weekday == 2

    def test_aware_timestamp_not_converted(self):
        record = TradeRecord(timestamp=datetime(2024, 1, 5, 23, 30, tzinfo=timezone.utc), result=1)
        assert record.hour == 23
        assert record.weekday == 4

    def test_wall_clock_drops_tzinfo(self):
        offset = timezone(timedelta(hours=-5))
        record = TradeRecord(timestamp=datetime(2024, 1, 5, 23, 30, tzinfo=offset), result=1)
        assert record.wall_clock == datetime(2024, 1, 5, 23, 30)
        assert record.wall_clock.tzinfo is None

    def test_from_parts_strings(self):
        record = TradeRecord.from_parts("2024-01-02", "09:05:30", -12.5, strategy="scalp")
        assert record.timestamp == datetime(2024, 1, 2, 9, 5, 30)
        assert record.result == -12.5
        assert record.strategy == "scalp"

    def test_from_parts_objects(self):
        record = TradeRecord.from_parts(date(2024, 1, 2), time(16, 0), 3)
        assert record.timestamp == datetime(2024, 1, 2, 16, 0)

    def test_from_dict_timestamp(self):
        record = TradeRecord.from_dict({"timestamp": "2024-01-02T10:15:00", "result": 5})
        assert record.timestamp == datetime(2024, 1, 2, 10, 15)
        assert record.strategy is None

    def test_from_dict_parts(self):
        record = TradeRecord.from_dict({"date": "2024-01-02", "time": "11:00", "result": -1})
        assert record.timestamp == datetime(2024, 1, 2, 11, 0)

    def test_from_dict_missing_timestamp(self):
        with pytest.raises(InvalidRecordError) as exc_info:
            TradeRecord.from_dict({"result": 5})
        assert exc_info.value.field == "timestamp"

    def test_to_dict(self):
        record = TradeRecord(timestamp=datetime(2024, 1, 2, 10), result=5, strategy="x")
        assert record.to_dict() == {
            "timestamp": "2024-01-02T10:00:00",
            "result": 5,
            "strategy": "x",
        }


class TestValidateRecords:
    def test_valid_records_pass_through(self, sequence):
        records = sequence([1, -2.5, 0])
        assert validate_records(records) == records

    def test_missing_timestamp(self):
        with pytest.raises(InvalidRecordError) as exc_info:
            validate_records([TradeRecord(timestamp=None, result=1)])
        assert exc_info.value.field == "timestamp"
        assert exc_info.value.index == 0

    def test_non_numeric_result(self, make_record):
        bad = TradeRecord(timestamp=datetime(2024, 1, 1), result="10")
        with pytest.raises(InvalidRecordError, match=r"#1 field \[result\]"):
            validate_records([make_record(1), bad])

    def test_bool_is_not_a_result(self):
        with pytest.raises(InvalidRecordError):
            validate_records([TradeRecord(timestamp=datetime(2024, 1, 1), result=True)])

    def test_nan_rejected(self):
        with pytest.raises(InvalidRecordError, match="non-finite"):
            validate_records([TradeRecord(timestamp=datetime(2024, 1, 1), result=float("nan"))])

    def test_error_hierarchy(self):
        assert issubclass(InvalidRecordError, RecordError)
