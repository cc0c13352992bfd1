"""
Command line front-end for examtex.

    python -m examtex render questions.json -o exam.tex --group-by-type
    python -m examtex history list
    python -m examtex kp 导数
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from examtex import __version__
from examtex.builder import AppendMode, AssemblyOptions, ExamSession, StyleConfig
from examtex.builder.output import SinkError, copy_to_clipboard, open_in_overleaf, write_tex
from examtex.common.knowledge import suggest_knowledge_points
from examtex.common.paths import get_history_path, get_output_dir
from examtex.core.models import HistoryOptions, HistoryRecord
from examtex.core.schemas import ValidationError
from examtex.core.utils import load_questions_json
from examtex.history import HistoryStorage, PersistentHistory

logger = logging.getLogger("examtex")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="examtex",
        description="Assemble exam questions into a XeLaTeX paper",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--history-file", type=Path, default=None,
                        help="History JSON file (default: app data dir)")
    sub = parser.add_subparsers(dest="command", required=True)

    render = sub.add_parser("render", help="Render question JSON files to LaTeX")
    render.add_argument("inputs", nargs="+", type=Path,
                        help="Question JSON files, appended in order")
    render.add_argument("-o", "--output", type=Path, default=None,
                        help="Write .tex here (default: stdout)")
    render.add_argument("--renumber", action="store_true",
                        help="Continue numbering across appended files")
    render.add_argument("--group-by-type", action="store_true")
    render.add_argument("--keep-numbers", action="store_true",
                        help="Emit stored question numbers as item labels")
    render.add_argument("--title", default="", help="Page header title")
    render.add_argument("--no-header-footer", action="store_true")
    render.add_argument("--hide-knowledge-point", action="store_true")
    render.add_argument("--hide-source", action="store_true")
    render.add_argument("--choice-gap", default="2cm")
    render.add_argument("--solution-gap", default="6cm")
    render.add_argument("--line-spacing", type=float, default=1.5)
    render.add_argument("--set-source", nargs=3, metavar=("START", "END", "SOURCE"),
                        help="Set the source of questions START..END (1-based)")
    render.add_argument("--copy", action="store_true", help="Copy result to clipboard")
    render.add_argument("--overleaf", action="store_true", help="Open result in Overleaf")
    render.add_argument("--record-history", action="store_true",
                        help="Save this result to the history log")

    history = sub.add_parser("history", help="Inspect the generation history")
    history_sub = history.add_subparsers(dest="action", required=True)
    history_sub.add_parser("list", help="List entries, newest first")
    show = history_sub.add_parser("show", help="Print an entry's LaTeX")
    show.add_argument("record_id")
    remove = history_sub.add_parser("remove", help="Delete one entry")
    remove.add_argument("record_id")
    history_sub.add_parser("clear", help="Delete all entries")

    kp = sub.add_parser("kp", help="List knowledge point suggestions")
    kp.add_argument("query", nargs="?", default="")

    return parser


def _open_history(args: argparse.Namespace) -> PersistentHistory:
    path = args.history_file or get_history_path()
    return PersistentHistory(HistoryStorage(path))


def _cmd_render(args: argparse.Namespace) -> int:
    style = StyleConfig(
        show_header_footer=not args.no_header_footer,
        show_knowledge_point=not args.hide_knowledge_point,
        show_source=not args.hide_source,
        choice_gap=args.choice_gap,
        solution_gap=args.solution_gap,
        line_spacing=args.line_spacing,
    )
    options = AssemblyOptions(
        group_by_type=args.group_by_type,
        preserve_original_numbering=args.keep_numbers,
    )
    history = _open_history(args) if args.record_history else None
    session = ExamSession(style=style, options=options, history=history)

    for i, path in enumerate(args.inputs):
        records = load_questions_json(path)
        mode = AppendMode.REPLACE if i == 0 else AppendMode.APPEND
        session.store.append(records, mode, renumber=args.renumber)
        logger.info(f"Loaded {len(records)} questions from {path.name}")
    session.questions_changed()

    if args.set_source:
        start, end, source = args.set_source
        count = session.batch_update_range(int(start), int(end), "source", source)
        logger.info(f"Set source of {count} questions to {source!r}")

    if args.title:
        session.set_header_title(args.title)

    latex = session.render()
    if not latex:
        print("No questions to render", file=sys.stderr)
        return 1

    if args.output:
        write_tex(latex, args.output.parent, args.output.name)
    elif not (args.copy or args.overleaf):
        sys.stdout.write(latex + "\n")

    if args.copy:
        copy_to_clipboard(latex)
    if args.overleaf:
        open_in_overleaf(latex, get_output_dir())

    if history is not None:
        entry = HistoryRecord.create(
            title=session.style.header_title or args.inputs[0].stem,
            file_names=[p.name for p in args.inputs],
            questions=session.store.records,
            latex=latex,
            options=HistoryOptions(
                group_by_type=options.group_by_type,
                preserve_original_numbering=options.preserve_original_numbering,
                style=session.style.to_dict(),
            ),
        )
        history.record(entry)
        logger.info(f"Recorded history entry {entry.id}")
    return 0


def _cmd_history(args: argparse.Namespace) -> int:
    history = _open_history(args)

    if args.action == "list":
        for entry in history.entries:
            print(f"{entry.id}\t{entry.timestamp}\t{entry.question_count}\t{entry.title}")
        return 0

    if args.action == "show":
        entry = history.get(args.record_id)
        if entry is None:
            print(f"No history entry {args.record_id}", file=sys.stderr)
            return 1
        sys.stdout.write(entry.latex + "\n")
        return 0

    if args.action == "remove":
        if not history.remove(args.record_id):
            print(f"No history entry {args.record_id}", file=sys.stderr)
            return 1
        return 0

    history.clear()
    return 0


def _cmd_kp(args: argparse.Namespace) -> int:
    for kp in suggest_knowledge_points(args.query):
        print(kp)
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s",
    )

    handlers = {
        "render": _cmd_render,
        "history": _cmd_history,
        "kp": _cmd_kp,
    }
    try:
        return handlers[args.command](args)
    except (ValidationError, SinkError, OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
