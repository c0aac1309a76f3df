"""
Module: cli

Purpose:
    Command line front end.

Commands:
    variants   List registered exam variants and their blueprints
    generate   Build a session and write it as JSON
    score      Score a session JSON against an answers JSON
    extract    Turn an objectives PDF into objectives.json
    trends     Per-objective accuracy from an attempt history

Example:
    $ exam-toolkit generate 220-1201 --pbq 5 --out session.json
    $ exam-toolkit score session.json answers.json --history history.json
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from exam_toolkit.analytics import AttemptHistory, build_attempt, compute_objective_trends
from exam_toolkit.builder import BuildError, build_session, create_session, load_exam_resources
from exam_toolkit.common.identifiers import iso_utc_millis
from exam_toolkit.core.models import SessionConfig
from exam_toolkit.core.schemas.validator import ValidationError
from exam_toolkit.core.utils.serialization import (
    load_answers_json,
    load_session_json,
    save_result_json,
    save_session_json,
    serialize_session,
)
from exam_toolkit.extractor import ExtractionConfig, ExtractionError, extract_objectives_pdf, write_objectives_json
from exam_toolkit.plugins import (
    MissingResourcesError,
    default_exam_code,
    get_initialization_error,
    list_exam_plugins,
)
from exam_toolkit.scoring import count_unanswered, score

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_PATH = Path("attempt_history.json")


def _cmd_variants(args: argparse.Namespace) -> int:
    default = default_exam_code()
    plugins = sorted(list_exam_plugins(), key=lambda p: p.code)
    if not plugins:
        logger.error(get_initialization_error() or "No exam variants registered")
        return 1
    for plugin in plugins:
        marker = " (default)" if plugin.code == default else ""
        print(f"{plugin.code}  {plugin.name}{marker}")
        for row in plugin.blueprint:
            print(f"    {row.domain_id} {row.label}: weight {row.weight}")
    return 0


def _cmd_generate(args: argparse.Namespace) -> int:
    exam = args.exam or default_exam_code()
    config = SessionConfig(pbq_count=args.pbq, show_objective_hints=args.hints)
    resources = load_exam_resources(exam)

    if args.session_id:
        session = build_session(
            args.session_id,
            resources.exam,
            config,
            resources=resources,
            created_at=iso_utc_millis(),
        )
    else:
        session = create_session(resources.exam, config, resources=resources)

    if args.out:
        save_session_json(session, args.out)
        logger.info(f"Wrote session {session.session_id} to {args.out}")
    else:
        print(json.dumps(serialize_session(session), indent=2, ensure_ascii=False))
    return 0


def _cmd_score(args: argparse.Namespace) -> int:
    session = load_session_json(args.session)
    answers, pbq_state = load_answers_json(args.answers)

    unanswered = count_unanswered(session, answers, pbq_state)
    if unanswered:
        logger.warning(f"{unanswered} of {session.question_count} questions unanswered")

    result = score(session, answers, pbq_state)
    print(f"Score: {result.percent}% ({result.correct_count}/{result.total})")
    for domain in result.by_domain:
        print(f"    {domain.domain}: {domain.correct}/{domain.total}")

    if args.out:
        save_result_json(result, args.out)
        logger.info(f"Wrote result to {args.out}")

    if args.history:
        AttemptHistory(args.history).record(build_attempt(session, result))
    return 0


def _cmd_extract(args: argparse.Namespace) -> int:
    config = ExtractionConfig(header_ratio=args.header_ratio, footer_ratio=args.footer_ratio)
    objectives = extract_objectives_pdf(args.pdf, config)
    if not objectives:
        logger.error(f"No objectives found in {args.pdf}")
        return 1
    write_objectives_json(objectives, args.out)
    return 0


def _cmd_trends(args: argparse.Namespace) -> int:
    exam = args.exam or default_exam_code()
    trends = compute_objective_trends(AttemptHistory(args.history).load(), exam)
    if not trends:
        print(f"No attempts recorded for {exam}")
        return 0
    for trend in trends[: args.limit]:
        history = ", ".join(f"{a}" for a in trend.trend)
        print(
            f"{trend.objective_id:>5}  {trend.accuracy:5.1f}%  "
            f"({trend.correct}/{trend.questions} over {trend.attempts} attempts)  "
            f"{trend.title}  [{history}]"
        )
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="exam-toolkit",
        description="Generate and score domain-weighted practice exams",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("variants", help="List registered exam variants")
    p.set_defaults(func=_cmd_variants)

    p = sub.add_parser("generate", help="Build a session")
    p.add_argument("exam", nargs="?", help="Exam variant id (default: the default plugin)")
    p.add_argument("--pbq", type=int, default=0, help="Requested PBQ count (clamped to 0-12)")
    p.add_argument("--hints", action="store_true", help="Show objective hints during review")
    p.add_argument("--session-id", help="Rebuild the session for this id")
    p.add_argument("--out", type=Path, help="Session JSON path (default: stdout)")
    p.set_defaults(func=_cmd_generate)

    p = sub.add_parser("score", help="Score a session")
    p.add_argument("session", type=Path, help="Session JSON")
    p.add_argument("answers", type=Path, help="Answers JSON with 'answers' and 'pbq_state'")
    p.add_argument("--out", type=Path, help="Write result JSON here")
    p.add_argument("--history", type=Path, help="Record the attempt in this history file")
    p.set_defaults(func=_cmd_score)

    p = sub.add_parser("extract", help="Extract objectives from a PDF")
    p.add_argument("pdf", type=Path, help="Exam objectives PDF")
    p.add_argument("--out", type=Path, required=True, help="objectives.json to write")
    p.add_argument("--header-ratio", type=float, default=0.0, help="Page fraction skipped at the top")
    p.add_argument("--footer-ratio", type=float, default=0.0, help="Page fraction skipped at the bottom")
    p.set_defaults(func=_cmd_extract)

    p = sub.add_parser("trends", help="Weakest objectives from attempt history")
    p.add_argument("exam", nargs="?", help="Exam variant id (default: the default plugin)")
    p.add_argument("--history", type=Path, default=DEFAULT_HISTORY_PATH, help="History JSON")
    p.add_argument("--limit", type=int, default=10, help="Number of objectives to show")
    p.set_defaults(func=_cmd_trends)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s",
    )
    try:
        return args.func(args)
    except (
        BuildError,
        ExtractionError,
        MissingResourcesError,
        ValidationError,
        FileNotFoundError,
        ValueError,
    ) as e:
        logger.error(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
