"""
Unit tests for QuestionStore.
"""

import pytest

from conftest import make_question
from examtex.builder.store import AppendMode, QuestionStore, clamp_range, parse_leading_int
from examtex.core.models import QuestionType


@pytest.fixture
def store(sample_questions) -> QuestionStore:
    return QuestionStore(sample_questions)


class TestUpdateField:

    def test_update_when_id_exists_then_replaces_field_in_place(self, store):
        # Act
        updated = store.update_field("q-3", "content", "new body")

        # Assert
        assert updated is True
        assert store.records[2].content == "new body"
        assert store.records[2].id == "q-3"
        assert [q.id for q in store] == ["q-1", "q-2", "q-3", "q-4", "q-5"]

    def test_update_when_id_unknown_then_silent_noop(self, store):
        before = store.records
        version = store.version

        assert store.update_field("nope", "content", "x") is False
        assert store.records == before
        assert store.version == version

    def test_update_when_field_not_editable_then_raises(self, store):
        with pytest.raises(ValueError):
            store.update_field("q-1", "id", "q-99")


class TestBatchUpdate:

    def test_batch_ids_when_some_missing_then_skipped(self, store):
        count = store.batch_update_field({"q-5", "q-1", "ghost"}, "source", "X")

        assert count == 2
        assert [q.source for q in store] == ["X", "Exam A", "Exam A", "Exam A", "X"]

    def test_batch_range_when_inside_then_only_positions_updated(self, store):
        """Range [2,4] touches positions 2, 3 and 4 only."""
        count = store.batch_update_range(2, 4, "source", "X")

        assert count == 3
        assert [q.source for q in store] == ["Exam A", "X", "X", "X", "Exam A"]

    def test_batch_range_when_inverted_then_same_as_ordered(self, sample_questions):
        a, b = QuestionStore(sample_questions), QuestionStore(sample_questions)

        a.batch_update_range(2, 4, "source", "X")
        b.batch_update_range(4, 2, "source", "X")

        assert a.records == b.records

    def test_batch_range_when_out_of_bounds_then_clamped(self, store):
        count = store.batch_update_range(-10, 100, "type", QuestionType.SOLUTION)

        assert count == 5
        assert all(q.is_solution for q in store)

    def test_batch_range_when_store_empty_then_noop(self):
        assert QuestionStore().batch_update_range(1, 3, "source", "X") == 0


class TestAppend:

    def test_append_when_replace_then_discards_existing(self, store):
        new = [make_question(10), make_question(11)]

        store.append(new, AppendMode.REPLACE)

        assert [q.id for q in store] == ["q-10", "q-11"]

    def test_append_when_append_then_concatenates_in_order(self, store):
        store.append([make_question(10, number="1")], AppendMode.APPEND)

        assert len(store) == 6
        assert store.records[-1].number == "1"

    def test_append_when_renumber_then_continues_from_last_number(self, store):
        incoming = [make_question(10, number="1"), make_question(11, number="2")]

        added = store.append(incoming, AppendMode.APPEND, renumber=True)

        assert [q.number for q in added] == ["6", "7"]
        assert [q.number for q in store.records[-2:]] == ["6", "7"]

    def test_append_when_last_number_has_suffix_then_leading_int_used(self):
        store = QuestionStore([make_question(1, number="12.")])

        added = store.append([make_question(2, number="1")], renumber=True)

        assert added[0].number == "13"

    def test_append_when_last_number_not_numeric_then_numbers_untouched(self):
        store = QuestionStore([make_question(1, number="附加题")])

        added = store.append([make_question(2, number="1"), make_question(3, number="2")],
                             renumber=True)

        assert [q.number for q in added] == ["1", "2"]

    def test_append_when_store_empty_then_numbers_from_one(self):
        store = QuestionStore()

        added = store.append([make_question(7, number="7"), make_question(8, number="8")],
                             renumber=True)

        assert [q.number for q in added] == ["1", "2"]


class TestAdd:

    def test_add_when_no_record_then_blank_choice_row_numbered_next(self, store):
        record = store.add()

        assert record.number == "6"
        assert record.type == QuestionType.CHOICE
        assert record.content == ""
        assert store.records[-1] is record

    def test_add_when_called_then_version_bumped(self):
        store = QuestionStore()
        store.add()
        store.add()
        assert store.version == 2


class TestHelpers:

    @pytest.mark.parametrize("value,expected", [
        ("12", 12), (" 3.", 3), ("7(a)", 7), ("", None), ("附加题", None), ("-2", -2),
    ])
    def test_parse_leading_int(self, value, expected):
        assert parse_leading_int(value) == expected

    @pytest.mark.parametrize("start,end,count,expected", [
        (2, 4, 5, (2, 4)),
        (4, 2, 5, (2, 4)),
        (0, 9, 5, (1, 5)),
        (7, 9, 5, (5, 5)),
        (1, 1, 0, None),
    ])
    def test_clamp_range(self, start, end, count, expected):
        assert clamp_range(start, end, count) == expected
