"""
Module: builder.controller

Purpose:
    Orchestrate one editing session: question store, style, options,
    collaborators and history. Rendering is pull-based; callers mutate the
    session and then call ``render()``, which recomputes from scratch.

    Pipeline for a generation:
    Load files → Extract → Normalize → Merge into store → Render → Record

Key Classes:
    - ExamSession: The session object used by the CLI and by front-ends
    - GenerationResult: What a generation/import produced
    - ExamSessionError: Base class for session failures

Dependencies:
    - builder.store / builder.config / builder.title
    - builder.output.renderer: Assembly engine
    - extraction: Collaborator ports and normalisation
    - history: Persistent history log

Used By:
    - examtex.cli
"""

from __future__ import annotations

import datetime as dt
import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Sequence, Union

from examtex.core.models import HistoryOptions, HistoryRecord, QuestionRecord
from examtex.extraction import (
    ExtractionError,
    Extractor,
    FilePayload,
    LatexParser,
    load_payload,
    normalize_extracted,
    normalize_imported,
)
from examtex.history import HistoryLog, PersistentHistory

from .config import AssemblyOptions, StyleConfig
from .output.renderer import render_exam
from .store import AppendMode, QuestionStore
from .title import refresh_auto_title

logger = logging.getLogger(__name__)

GENERATE_FAILED_MESSAGE = "分析试卷时发生错误。"
IMPORT_FAILED_MESSAGE = "无法解析 LaTeX 代码。"
HISTORY_SAVE_FAILED_MESSAGE = "历史记录保存失败："


class ExamSessionError(Exception):
    """Error raised by session operations."""
    pass


@dataclass(frozen=True)
class GenerationResult:
    """
    Outcome of a generation or import (immutable).

    Attributes:
        added: Records that were merged into the store
        latex: Document rendered right after the merge
        history_record: Entry committed to history (generation only)
    """
    added: tuple[QuestionRecord, ...]
    latex: str
    history_record: Optional[HistoryRecord] = None


class ExamSession:
    """
    One editing session.

    Example:
        >>> session = ExamSession(extractor=my_extractor)
        >>> session.generate_from_files([Path("page1.jpg"), Path("page2.pdf")])
        >>> session.update_field(session.store.records[0].id, "source", "2024 期中")
        >>> latex = session.render()
    """

    def __init__(
        self,
        *,
        extractor: Optional[Extractor] = None,
        latex_parser: Optional[LatexParser] = None,
        history: Union[HistoryLog, PersistentHistory, None] = None,
        style: Optional[StyleConfig] = None,
        options: Optional[AssemblyOptions] = None,
        clock: Callable[[], dt.date] = dt.date.today,
    ) -> None:
        self.extractor = extractor
        self.latex_parser = latex_parser
        self.history = history if history is not None else HistoryLog()
        self.store = QuestionStore()
        self.style = style or StyleConfig()
        self.options = options or AssemblyOptions()
        self.clock = clock
        self.last_error: Optional[str] = None

    # ─────────────────────────────────────────────────────────────────────────
    # Rendering
    # ─────────────────────────────────────────────────────────────────────────

    def render(self) -> str:
        """Assemble the document from the current store, style and options."""
        return render_exam(self.store.records, self.style, self.options, today=self.clock())

    def set_options(self, **changes: bool) -> AssemblyOptions:
        self.options = replace(self.options, **changes)
        return self.options

    def set_header_title(self, value: str) -> None:
        """Manual title edit; an emptied title goes back to being derived."""
        self.style.set_header_title(value)
        if not value:
            self.questions_changed()

    def questions_changed(self) -> None:
        """Re-apply the auto title policy after the question set changed."""
        if refresh_auto_title(self.style, self.store.records, self.clock()):
            logger.debug(f"Header title derived: {self.style.header_title!r}")

    # ─────────────────────────────────────────────────────────────────────────
    # Table edits
    # ─────────────────────────────────────────────────────────────────────────

    def update_field(self, question_id: str, field_name: str, value: str) -> bool:
        updated = self.store.update_field(question_id, field_name, value)
        if updated:
            self.questions_changed()
        return updated

    def batch_update_field(self, question_ids: Iterable[str], field_name: str, value: str) -> int:
        count = self.store.batch_update_field(question_ids, field_name, value)
        if count:
            self.questions_changed()
        return count

    def batch_update_range(self, start: int, end: int, field_name: str, value: str) -> int:
        """1-based inclusive range; inverted/out-of-range bounds are clamped."""
        count = self.store.batch_update_range(start, end, field_name, value)
        if count:
            self.questions_changed()
        return count

    def add_question(self, record: Optional[QuestionRecord] = None) -> QuestionRecord:
        record = self.store.add(record)
        self.questions_changed()
        return record

    def replace_questions(self, records: Iterable[QuestionRecord]) -> None:
        self.store.replace_all(records)
        self.questions_changed()

    # ─────────────────────────────────────────────────────────────────────────
    # Collaborator-driven changes
    # ─────────────────────────────────────────────────────────────────────────

    def generate_from_files(
        self,
        files: Sequence[Union[Path, FilePayload]],
        mode: AppendMode = AppendMode.REPLACE,
    ) -> GenerationResult:
        """
        Extract questions from files and merge them into the store.

        In APPEND mode the new questions are renumbered to continue from the
        last existing number. The result is committed to history; a failed
        history write is reported through ``last_error`` and keeps the merge.

        Raises:
            ExtractionError: If loading or extraction fails; the store is
                left untouched
        """
        if self.extractor is None:
            raise ExamSessionError("No extractor configured")
        if not files:
            raise ExamSessionError("No files to analyse")

        payloads = [f if isinstance(f, FilePayload) else load_payload(Path(f)) for f in files]

        logger.info(f"Extracting questions from {len(payloads)} files")
        try:
            raw = self.extractor.extract(payloads)
        except ExtractionError:
            raise
        except Exception as e:
            logger.warning(f"Extractor failed: {e}")
            raise ExtractionError(str(e) or GENERATE_FAILED_MESSAGE) from e

        records = normalize_extracted(raw, self.clock())
        added = self.store.append(records, mode, renumber=mode is AppendMode.APPEND)
        self.questions_changed()
        latex = self.render()

        entry = HistoryRecord.create(
            title=f"{len(payloads)} 个文件生成的试卷",
            file_names=[p.name for p in payloads],
            questions=self.store.records,
            latex=latex,
            options=HistoryOptions(
                group_by_type=self.options.group_by_type,
                preserve_original_numbering=self.options.preserve_original_numbering,
                style=self.style.to_dict(),
            ),
        )
        try:
            self.history.record(entry)
        except OSError as e:
            # The questions are already merged; only persistence failed
            self.last_error = f"{HISTORY_SAVE_FAILED_MESSAGE}{e}"
            logger.error(self.last_error)
        logger.info(f"Generated {len(added)} questions ({len(self.store)} total)")
        return GenerationResult(added=added, latex=latex, history_record=entry)

    def import_latex(self, latex: str, mode: AppendMode = AppendMode.REPLACE) -> GenerationResult:
        """
        Re-import previously generated LaTeX through the parser collaborator.

        Imported numbers are kept as parsed. Blank input is a no-op.

        Raises:
            ExtractionError: If parsing fails; the store is left untouched
        """
        if not latex.strip():
            return GenerationResult(added=(), latex=self.render())
        if self.latex_parser is None:
            raise ExamSessionError("No LaTeX parser configured")

        try:
            raw = self.latex_parser.parse(latex)
        except ExtractionError:
            raise
        except Exception as e:
            logger.warning(f"LaTeX parser failed: {e}")
            raise ExtractionError(IMPORT_FAILED_MESSAGE) from e

        records = normalize_imported(raw, self.clock())
        added = self.store.append(records, mode)
        self.questions_changed()
        logger.info(f"Imported {len(added)} questions ({len(self.store)} total)")
        return GenerationResult(added=added, latex=self.render())

    def try_generate_from_files(
        self,
        files: Sequence[Union[Path, FilePayload]],
        mode: AppendMode = AppendMode.REPLACE,
    ) -> Optional[GenerationResult]:
        """generate_from_files() that records failures in ``last_error``."""
        self.last_error = None
        try:
            return self.generate_from_files(files, mode)
        except (ExtractionError, ExamSessionError) as e:
            self.last_error = str(e) or GENERATE_FAILED_MESSAGE
            logger.error(self.last_error)
            return None

    def try_import_latex(
        self,
        latex: str,
        mode: AppendMode = AppendMode.REPLACE,
    ) -> Optional[GenerationResult]:
        """import_latex() that records failures in ``last_error``."""
        self.last_error = None
        try:
            return self.import_latex(latex, mode)
        except (ExtractionError, ExamSessionError) as e:
            self.last_error = str(e) or IMPORT_FAILED_MESSAGE
            logger.error(self.last_error)
            return None

    # ─────────────────────────────────────────────────────────────────────────
    # History
    # ─────────────────────────────────────────────────────────────────────────

    def restore(self, record_id: str) -> HistoryRecord:
        """
        Load a history entry's questions (and options) into the session.

        Raises:
            ExamSessionError: If no entry has that id
        """
        entry = self.history.get(record_id)
        if entry is None:
            raise ExamSessionError(f"No history record {record_id!r}")
        self.store.replace_all(entry.questions)
        self.options = AssemblyOptions(
            group_by_type=entry.options.group_by_type,
            preserve_original_numbering=entry.options.preserve_original_numbering,
        )
        if entry.options.style is not None:
            self.style = StyleConfig.from_dict(entry.options.style)
        self.questions_changed()
        return entry

    def history_entries(self) -> List[HistoryRecord]:
        return list(self.history.entries)
