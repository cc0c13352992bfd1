"""
Unit tests for the bounded newest-first HistoryLog.
"""

import pytest

from examtex.core.models import HistoryOptions, HistoryRecord
from examtex.history import HISTORY_CAPACITY, HistoryLog


def _entry(n: int) -> HistoryRecord:
    return HistoryRecord(id=f"h{n}", timestamp=n, title=f"paper {n}",
                         options=HistoryOptions())


class TestHistoryLog:

    def test_record_when_added_then_newest_first(self):
        log = HistoryLog()
        for n in range(3):
            log.record(_entry(n))

        assert [e.id for e in log.entries] == ["h2", "h1", "h0"]

    def test_record_when_over_capacity_then_oldest_evicted(self):
        log = HistoryLog()
        for n in range(HISTORY_CAPACITY + 1):
            log.record(_entry(n))

        assert len(log) == 50
        assert log.entries[0].id == "h50"
        assert log.get("h0") is None
        assert log.entries[-1].id == "h1"

    def test_init_when_too_many_records_then_newest_kept(self):
        records = [_entry(n) for n in range(5, 0, -1)]

        log = HistoryLog(records, capacity=3)

        assert [e.id for e in log.entries] == ["h5", "h4", "h3"]

    def test_remove_when_present_then_true_and_order_kept(self):
        log = HistoryLog([_entry(3), _entry(2), _entry(1)])

        assert log.remove("h2") is True
        assert [e.id for e in log.entries] == ["h3", "h1"]

    def test_remove_when_absent_then_false(self):
        log = HistoryLog([_entry(1)])
        assert log.remove("nope") is False
        assert len(log) == 1

    def test_clear_when_called_then_empty(self):
        log = HistoryLog([_entry(1), _entry(2)])
        log.clear()
        assert log.entries == ()

    def test_init_when_capacity_not_positive_then_value_error(self):
        with pytest.raises(ValueError):
            HistoryLog(capacity=0)
