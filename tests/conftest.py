import datetime as dt
import sys
from pathlib import Path

import pytest

# Add src to sys.path so we can import examtex
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from examtex.core.models import QuestionRecord, QuestionType  # noqa: E402


FIXED_DAY = dt.date(2026, 3, 5)


def make_question(
    n: int,
    *,
    type: str = QuestionType.CHOICE,
    source: str = "",
    knowledge_point: str = "",
    content: str = "",
    number: str | None = None,
) -> QuestionRecord:
    """Build a question with predictable id/number/content."""
    return QuestionRecord(
        id=f"q-{n}",
        number=str(n) if number is None else number,
        content=content or f"Question body {n}",
        knowledge_point=knowledge_point,
        source=source,
        type=type,
    )


# Common test fixtures
@pytest.fixture
def fixed_day() -> dt.date:
    """A pinned 'today' for title derivation."""
    return FIXED_DAY


@pytest.fixture
def sample_questions() -> list[QuestionRecord]:
    """Mixed-type questions in a typical paper order."""
    return [
        make_question(1, type=QuestionType.CHOICE, knowledge_point="集合", source="Exam A"),
        make_question(2, type=QuestionType.CHOICE, knowledge_point="复数", source="Exam A"),
        make_question(3, type=QuestionType.FILL_IN, knowledge_point="数列", source="Exam A"),
        make_question(4, type=QuestionType.SOLUTION, knowledge_point="导数", source="Exam A"),
        make_question(5, type=QuestionType.FILL_IN, knowledge_point="概率", source="Exam A"),
    ]
