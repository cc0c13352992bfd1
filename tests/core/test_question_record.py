"""
Unit Tests for QuestionRecord

Tests for the immutable question row and its wire format.
"""

import pytest

from examtex.core.models import QuestionRecord, QuestionType, new_question_id


class TestQuestionRecord:
    """Tests for QuestionRecord dataclass."""

    def test_init_when_empty_id_then_raises_error(self):
        """An empty id should be rejected."""
        with pytest.raises(ValueError, match="id must be"):
            QuestionRecord(id="")

    def test_with_field_when_editable_then_returns_copy_with_same_id(self):
        """Editing keeps the id and leaves the original untouched."""
        # Arrange
        q = QuestionRecord(id="q-1", number="1", source="old")

        # Act
        edited = q.with_field("source", "new")

        # Assert
        assert edited.id == "q-1"
        assert edited.source == "new"
        assert q.source == "old"

    @pytest.mark.parametrize("field_name", ["id", "unknown", "knowledgePoint"])
    def test_with_field_when_not_editable_then_raises_error(self, field_name):
        """id and unknown names are not editable fields."""
        q = QuestionRecord(id="q-1")
        with pytest.raises(ValueError, match="not editable"):
            q.with_field(field_name, "x")

    def test_is_solution_when_solution_type_then_true(self):
        assert QuestionRecord(id="a", type=QuestionType.SOLUTION).is_solution is True
        assert QuestionRecord(id="b", type=QuestionType.FILL_IN).is_solution is False
        assert QuestionRecord(id="c", type="判断题").is_solution is False

    def test_to_dict_when_called_then_uses_camel_case_keys(self):
        """Wire format uses knowledgePoint."""
        q = QuestionRecord(id="q-1", number="3", content="c", knowledge_point="导数",
                           source="s", type=QuestionType.SOLUTION)

        assert q.to_dict() == {
            "id": "q-1",
            "number": "3",
            "content": "c",
            "knowledgePoint": "导数",
            "source": "s",
            "type": "解答题",
        }

    def test_from_dict_when_fields_missing_then_defaults_applied(self):
        """Missing id is generated, missing type becomes 其他."""
        q = QuestionRecord.from_dict({"number": 7, "content": "x"})

        assert q.id.startswith("q-")
        assert q.number == "7"
        assert q.knowledge_point == ""
        assert q.type == QuestionType.OTHER

    def test_from_dict_when_round_tripped_then_equal(self):
        q = QuestionRecord(id="q-9", number="9", content="$x$", knowledge_point="kp",
                           source="src", type="填空题")
        assert QuestionRecord.from_dict(q.to_dict()) == q

    def test_from_dict_when_number_is_zero_then_kept(self):
        q = QuestionRecord.from_dict({"id": "q-0", "number": 0, "content": None})

        assert q.number == "0"
        assert q.content == ""


def test_new_question_id_when_called_twice_then_unique():
    """Ids are unique and carry the prefix."""
    a, b = new_question_id("imported"), new_question_id("imported")
    assert a != b
    assert a.startswith("imported-")
