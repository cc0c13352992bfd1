"""
Unit tests for ExamSession.

Extractor and LaTeX parser collaborators are replaced by small fakes.
"""

import pytest

from conftest import FIXED_DAY, make_question
from examtex.builder import AppendMode, ExamSession, ExamSessionError, StyleConfig
from examtex.builder.controller import (
    GENERATE_FAILED_MESSAGE,
    HISTORY_SAVE_FAILED_MESSAGE,
    IMPORT_FAILED_MESSAGE,
)
from examtex.core.models import QuestionType
from examtex.extraction import ExtractionError, FilePayload
from examtex.history import HistoryLog, HistoryStorage, PersistentHistory


class FakeExtractor:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def extract(self, payloads):
        self.calls.append(list(payloads))
        if self.error is not None:
            raise self.error
        return self.response


class FakeParser:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error

    def parse(self, latex):
        if self.error is not None:
            raise self.error
        return self.response


def _payload(name="page1.jpg"):
    return FilePayload(name=name, data=b"\xff\xd8", mime_type="image/jpeg")


def _rows(*numbers, qtype=QuestionType.CHOICE):
    return {"questions": [
        {"number": n, "content": f"body {n}", "knowledgePoint": "函数", "type": qtype}
        for n in numbers
    ]}


@pytest.fixture
def session():
    return ExamSession(clock=lambda: FIXED_DAY)


class TestGenerate:

    def test_generate_when_replace_then_store_holds_extracted(self):
        session = ExamSession(extractor=FakeExtractor(_rows("1", "2")), clock=lambda: FIXED_DAY)

        result = session.generate_from_files([_payload()])

        assert [q.number for q in session.store] == ["1", "2"]
        assert all(q.source == "2026-03-05" for q in session.store)
        assert result.latex == session.render()
        assert len(result.added) == 2

    def test_generate_when_append_then_numbering_continues(self):
        session = ExamSession(extractor=FakeExtractor(_rows("1", "2")), clock=lambda: FIXED_DAY)
        session.replace_questions([make_question(1), make_question(2), make_question(3)])

        result = session.generate_from_files([_payload()], AppendMode.APPEND)

        assert [q.number for q in result.added] == ["4", "5"]
        assert [q.number for q in session.store] == ["1", "2", "3", "4", "5"]

    def test_generate_when_succeeds_then_history_recorded(self):
        history = HistoryLog()
        session = ExamSession(extractor=FakeExtractor(_rows("1")), history=history,
                              clock=lambda: FIXED_DAY)

        result = session.generate_from_files([_payload("a.jpg"), _payload("b.pdf")])

        assert history.entries == (result.history_record,)
        entry = history.entries[0]
        assert entry.title == "2 个文件生成的试卷"
        assert entry.file_names == ("a.jpg", "b.pdf")
        assert entry.latex == result.latex
        assert entry.questions == session.store.records

    def test_generate_when_extractor_raises_then_store_untouched(self):
        session = ExamSession(extractor=FakeExtractor(error=RuntimeError("quota")),
                              clock=lambda: FIXED_DAY)
        session.replace_questions([make_question(1)])
        before = session.store.records

        with pytest.raises(ExtractionError, match="quota"):
            session.generate_from_files([_payload()])

        assert session.store.records == before
        assert len(session.history_entries()) == 0

    def test_generate_when_response_malformed_then_extraction_error(self):
        session = ExamSession(extractor=FakeExtractor({"items": []}), clock=lambda: FIXED_DAY)

        with pytest.raises(ExtractionError):
            session.generate_from_files([_payload()])

        assert len(session.store) == 0

    def test_generate_when_no_extractor_then_session_error(self, session):
        with pytest.raises(ExamSessionError):
            session.generate_from_files([_payload()])

    def test_generate_when_no_files_then_session_error(self):
        session = ExamSession(extractor=FakeExtractor(_rows("1")))
        with pytest.raises(ExamSessionError):
            session.generate_from_files([])

    def test_try_generate_when_fails_then_last_error_set(self):
        session = ExamSession(extractor=FakeExtractor(error=RuntimeError("")),
                              clock=lambda: FIXED_DAY)

        assert session.try_generate_from_files([_payload()]) is None
        assert session.last_error == GENERATE_FAILED_MESSAGE

    def test_try_generate_when_succeeds_then_last_error_cleared(self):
        session = ExamSession(extractor=FakeExtractor(_rows("1")), clock=lambda: FIXED_DAY)
        session.last_error = "old"

        assert session.try_generate_from_files([_payload()]) is not None
        assert session.last_error is None

    def test_try_generate_when_history_unwritable_then_merge_kept_and_error_reported(
        self, tmp_path
    ):
        unwritable = tmp_path / "history_dir"
        unwritable.mkdir()
        session = ExamSession(
            extractor=FakeExtractor(_rows("1", "2")),
            history=PersistentHistory(HistoryStorage(unwritable)),
            clock=lambda: FIXED_DAY,
        )

        result = session.try_generate_from_files([_payload()])

        assert result is not None
        assert [q.number for q in session.store] == ["1", "2"]
        assert session.last_error.startswith(HISTORY_SAVE_FAILED_MESSAGE)


class TestImportLatex:

    def test_import_when_replace_then_numbers_kept(self):
        rows = {"questions": [
            {"number": "7", "content": "x", "source": "期中", "type": "解答题"},
            {"number": "9", "content": "y", "type": "填空题"},
        ]}
        session = ExamSession(latex_parser=FakeParser(rows), clock=lambda: FIXED_DAY)

        session.import_latex("\\item x")

        assert [q.number for q in session.store] == ["7", "9"]
        assert [q.source for q in session.store] == ["期中", "2026-03-05"]

    def test_import_when_append_then_not_renumbered(self):
        session = ExamSession(latex_parser=FakeParser(_rows("1")), clock=lambda: FIXED_DAY)
        session.replace_questions([make_question(1), make_question(2)])

        session.import_latex("\\item x", AppendMode.APPEND)

        assert [q.number for q in session.store] == ["1", "2", "1"]

    def test_import_when_blank_then_noop(self, session):
        session.replace_questions([make_question(1)])
        result = session.import_latex("   ")
        assert result.added == ()
        assert len(session.store) == 1

    def test_import_when_parser_fails_then_generic_message(self):
        session = ExamSession(latex_parser=FakeParser(error=ValueError("bad json")))
        session.replace_questions([make_question(1)])

        assert session.try_import_latex("\\item x") is None
        assert session.last_error == IMPORT_FAILED_MESSAGE
        assert len(session.store) == 1

    def test_import_when_succeeds_then_no_history(self):
        history = HistoryLog()
        session = ExamSession(latex_parser=FakeParser(_rows("1")), history=history)

        session.import_latex("\\item x")

        assert len(history) == 0


class TestTitlePolicy:

    def test_title_when_single_source_then_derived(self, session):
        session.replace_questions([make_question(1, source="2024 期中")])

        assert session.style.header_title == "2024 期中"
        assert session.style.title_is_auto_derived is True

    def test_title_when_sources_edited_then_rederived(self, session):
        session.replace_questions([make_question(1, source="A"), make_question(2, source="A")])

        session.update_field("q-2", "source", "B")

        assert session.style.header_title == "2026年3月5日试卷"

    def test_title_when_manual_then_never_replaced(self, session):
        session.set_header_title("模拟卷")

        session.replace_questions([make_question(1, source="A")])

        assert session.style.header_title == "模拟卷"
        assert "\\fancyhead[C]{模拟卷}" in session.render()

    def test_title_when_manual_contains_suffix_then_still_kept(self, session):
        session.set_header_title("我的试卷")

        session.replace_questions([make_question(1, source="A")])

        assert session.style.header_title == "我的试卷"

    def test_title_when_cleared_then_derived_again(self, session):
        session.replace_questions([make_question(1, source="A")])
        session.set_header_title("模拟卷")

        session.set_header_title("")

        assert session.style.header_title == "A"


class TestEditsAndRestore:

    def test_edits_when_applied_then_render_reflects_them(self, session):
        session.replace_questions([make_question(1, knowledge_point="集合")])
        session.batch_update_range(1, 1, "knowledge_point", "复数")

        assert "(复数" in session.render()

    def test_add_question_when_called_then_blank_choice_row(self, session):
        record = session.add_question()

        assert record.type == QuestionType.CHOICE
        assert record.number == "1"
        assert session.store.records == (record,)

    def test_set_options_when_called_then_render_grouped(self, session, sample_questions):
        session.replace_questions(sample_questions)

        session.set_options(group_by_type=True)

        assert session.render().count("\\section*") == 3

    def test_restore_when_entry_exists_then_questions_and_options_loaded(self):
        extractor = FakeExtractor(_rows("1", "2"))
        session = ExamSession(extractor=extractor, clock=lambda: FIXED_DAY)
        session.set_options(group_by_type=True)
        entry = session.generate_from_files([_payload()]).history_record
        session.replace_questions([])
        session.set_options(group_by_type=False)
        session.style = StyleConfig(choice_gap="9cm")

        session.restore(entry.id)

        assert session.store.records == entry.questions
        assert session.options.group_by_type is True
        assert session.style.choice_gap == "2cm"
        assert session.render() == entry.latex

    def test_restore_when_unknown_then_session_error(self, session):
        with pytest.raises(ExamSessionError):
            session.restore("missing")
