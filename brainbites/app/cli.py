from __future__ import annotations

"""CLI for poking at the quiz core: list categories, draw questions, reset usage."""

import argparse
import json
import sys
from typing import Any, Dict

from .. import __version__
from ..config.config import load_config, validate_config
from ..quiz.service import QuizService
from ..util.logging import setup_logger
from .explain import EVENTS as EXPLAIN_EVENTS, enable as enable_explain


def _format_question(payload: Dict[str, Any]) -> str:
    lines = [f"[{payload['id']}] {payload['question']}"]
    for letter, text in payload["options"].items():
        lines.append(f"  {letter}) {text}")
    lines.append(f"Answer: {payload['correctAnswer']} - {payload['explanation']}")
    return "\n".join(lines)


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="brainbites")
    p.add_argument("--config", default=None, help="Path to YAML config")
    p.add_argument("--explain", action="store_true", help="Trace milestones as one-line JSON")
    p.add_argument(
        "--explain-only",
        action="append",
        choices=EXPLAIN_EVENTS,
        default=None,
        help="Trace only this milestone (repeatable; implies --explain)",
    )
    p.add_argument("--version", action="version", version=f"brainbites {__version__}")
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("categories")

    ap = sub.add_parser("ask")
    ap.add_argument("--category", default=None)
    ap.add_argument("--count", type=int, default=1)
    ap.add_argument("--json", dest="as_json", action="store_true")

    rp = sub.add_parser("reset")
    rp.add_argument("--category", default=None, help="Only clear tracking for this category")

    sub.add_parser("stats")
    return p


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    cfg = validate_config(load_config(args.config))
    setup_logger("brainbites", cfg["logging"]["level"])
    if args.explain or args.explain_only:
        enable_explain(True, args.explain_only)

    with QuizService(cfg) as service:
        if args.cmd == "categories":
            for name in service.get_categories():
                print(name)
        elif args.cmd == "ask":
            for _ in range(max(1, args.count)):
                payload = service.get_random_question(args.category)
                if args.as_json:
                    print(json.dumps(payload, ensure_ascii=False))
                else:
                    print(_format_question(payload))
                    print()
        elif args.cmd == "reset":
            if args.category:
                removed = service.reset_category(args.category)
                print(f"Cleared {removed} tracked question(s) for {args.category}.")
            else:
                service.reset_used_questions()
                print("Cleared all tracked questions.")
        elif args.cmd == "stats":
            print(json.dumps(service.stats(), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
