"""
Module: builder.store

Purpose:
    Ordered, id-addressed collection of QuestionRecord rows. All edits made
    in the question table go through this store; the renderer only reads
    snapshots of it.

Key Classes:
    - QuestionStore: The collection and its edit operations
    - AppendMode: How a batch of incoming questions is merged

Dependencies:
    - examtex.core.models: QuestionRecord

Used By:
    - builder.controller.ExamSession
"""

from __future__ import annotations

import logging
import re
from enum import Enum
from typing import Iterable, Iterator, List, Optional

from examtex.core.models import QuestionRecord, QuestionType, new_question_id

logger = logging.getLogger(__name__)

_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


class AppendMode(str, Enum):
    """How incoming questions are merged into the store."""
    APPEND = "append"
    REPLACE = "replace"


def parse_leading_int(value: str) -> Optional[int]:
    """
    Parse the leading integer of a question number.

    Example:
        >>> parse_leading_int("12.")
        12
        >>> parse_leading_int("附加题") is None
        True
    """
    match = _LEADING_INT_RE.match(value or "")
    return int(match.group(1)) if match else None


def clamp_range(start: int, end: int, count: int) -> Optional[tuple[int, int]]:
    """
    Normalise a 1-based inclusive position range.

    Inverted ranges are swapped, then both ends are clamped to [1, count].
    Returns None when there is nothing to address (count == 0).

    Example:
        >>> clamp_range(4, 2, 5)
        (2, 4)
        >>> clamp_range(-3, 99, 5)
        (1, 5)
    """
    if count <= 0:
        return None
    if start > end:
        start, end = end, start
    start = min(max(start, 1), count)
    end = min(max(end, 1), count)
    return start, end


class QuestionStore:
    """
    Ordered collection of questions.

    Records are immutable; an edit swaps in a new record with the same id at
    the same position. Every mutation bumps ``version`` so callers can tell
    whether a re-render is needed.

    Example:
        >>> store = QuestionStore()
        >>> q = store.add()
        >>> store.update_field(q.id, "content", "$x^2$")
        True
        >>> store.get(q.id).content
        '$x^2$'
    """

    def __init__(self, records: Iterable[QuestionRecord] = ()) -> None:
        self._records: List[QuestionRecord] = list(records)
        self._version = 0

    # ─────────────────────────────────────────────────────────────────────────
    # Read access
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def records(self) -> tuple[QuestionRecord, ...]:
        """Snapshot of the current ordered records."""
        return tuple(self._records)

    @property
    def version(self) -> int:
        return self._version

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[QuestionRecord]:
        return iter(tuple(self._records))

    def get(self, question_id: str) -> Optional[QuestionRecord]:
        for record in self._records:
            if record.id == question_id:
                return record
        return None

    def index_of(self, question_id: str) -> Optional[int]:
        for i, record in enumerate(self._records):
            if record.id == question_id:
                return i
        return None

    # ─────────────────────────────────────────────────────────────────────────
    # Field edits
    # ─────────────────────────────────────────────────────────────────────────

    def update_field(self, question_id: str, field_name: str, value: str) -> bool:
        """
        Replace one field of the record with the given id.

        Unknown ids are ignored.

        Returns:
            True if a record was updated

        Raises:
            ValueError: If field_name is not an editable field
        """
        index = self.index_of(question_id)
        if index is None:
            logger.debug(f"update_field: no question with id {question_id!r}")
            return False
        self._records[index] = self._records[index].with_field(field_name, value)
        self._touch()
        return True

    def batch_update_field(self, question_ids: Iterable[str], field_name: str, value: str) -> int:
        """
        Apply the same field update to every record whose id is in the set.

        Ids not present are skipped.

        Returns:
            Number of records updated
        """
        wanted = set(question_ids)
        updated = 0
        for i, record in enumerate(self._records):
            if record.id in wanted:
                self._records[i] = record.with_field(field_name, value)
                updated += 1
        if updated:
            self._touch()
        return updated

    def batch_update_range(self, start: int, end: int, field_name: str, value: str) -> int:
        """
        Apply a field update to the 1-based inclusive position range.

        The range is swapped if inverted and clamped to the store size.

        Returns:
            Number of records updated
        """
        bounds = clamp_range(start, end, len(self._records))
        if bounds is None:
            return 0
        lo, hi = bounds
        ids = [r.id for r in self._records[lo - 1:hi]]
        return self.batch_update_field(ids, field_name, value)

    # ─────────────────────────────────────────────────────────────────────────
    # Bulk changes
    # ─────────────────────────────────────────────────────────────────────────

    def append(
        self,
        incoming: Iterable[QuestionRecord],
        mode: AppendMode = AppendMode.APPEND,
        *,
        renumber: bool = False,
    ) -> tuple[QuestionRecord, ...]:
        """
        Merge a batch of questions in one step.

        Args:
            incoming: New records in order
            mode: APPEND concatenates, REPLACE discards existing records
            renumber: (APPEND only) continue numbering from the leading
                integer of the last existing number; when that number has no
                leading integer the incoming numbers are kept as they are

        Returns:
            The records actually added (after renumbering)
        """
        new_records = list(incoming)
        if mode is AppendMode.REPLACE:
            self._records = new_records
            self._touch()
            return tuple(new_records)

        if renumber:
            last = parse_leading_int(self._records[-1].number) if self._records else 0
            if last is not None:
                new_records = [
                    r.with_field("number", str(last + i + 1))
                    for i, r in enumerate(new_records)
                ]
            else:
                logger.debug("append: last number is not numeric, keeping incoming numbers")

        self._records = self._records + new_records
        self._touch()
        return tuple(new_records)

    def replace_all(self, records: Iterable[QuestionRecord]) -> None:
        self.append(records, AppendMode.REPLACE)

    def add(self, record: Optional[QuestionRecord] = None) -> QuestionRecord:
        """Append one record; with no argument a blank 选择题 row is created."""
        if record is None:
            record = QuestionRecord(
                id=new_question_id("manual"),
                number=str(len(self._records) + 1),
                type=QuestionType.CHOICE,
            )
        self._records.append(record)
        self._touch()
        return record

    def clear(self) -> None:
        self.replace_all(())

    def _touch(self) -> None:
        self._version += 1
