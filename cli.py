import argparse
import json
import logging
import random
import sys
from pathlib import Path
from typing import Any

from core.logging_setup import setup_console_logging
from grading import build_answer_key, grade_submission
from serialization import (
    answer_key_to_payload,
    config_from_settings,
    field_grade_to_dict,
    fields_from_payload,
    shuffle_result_from_dict,
    shuffle_result_to_dict,
)
from shuffler import build_shuffle_result

logger = logging.getLogger("cli")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Shuffle and grade assessments offline")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    commands = parser.add_subparsers(dest="command", required=True)

    shuffle = commands.add_parser("shuffle", help="Print a shuffle result for an assessment")
    shuffle.add_argument("assessment", type=Path, help="Path to assessment.json")
    shuffle.add_argument("--seed", type=int, default=None, help="Random seed")
    shuffle.add_argument(
        "--fields",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Randomize field order (default: assessment setting)",
    )
    shuffle.add_argument(
        "--options",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Shuffle option order (default: assessment setting)",
    )

    grade = commands.add_parser("grade", help="Grade display-space responses")
    grade.add_argument("assessment", type=Path, help="Path to assessment.json")
    grade.add_argument("responses", type=Path, help="JSON object of field id -> response")
    grade.add_argument("--shuffle", type=Path, default=None, help="Shuffle result JSON")
    return parser.parse_args(argv)


def _read_json(path: Path) -> object:
    return json.loads(path.read_text(encoding="utf-8"))


def _read_json_object(path: Path) -> dict[str, Any]:
    payload = _read_json(path)
    if not isinstance(payload, dict):
        raise ValueError(f"{path.name} does not hold a JSON object")
    return payload


def _settings(payload: dict[str, Any]) -> dict[str, Any]:
    settings = payload.get("settings")
    return settings if isinstance(settings, dict) else {}


def run_shuffle(args: argparse.Namespace) -> dict[str, object]:
    payload = _read_json_object(args.assessment)
    fields = fields_from_payload(payload)
    config = config_from_settings(_settings(payload))
    if args.fields is not None:
        config.randomize_fields = args.fields
    if args.options is not None:
        config.shuffle_options = args.options

    rng = random.Random(args.seed)
    result = build_shuffle_result(fields, config, rng)
    logger.info(
        "Shuffled %d fields, %d option lists",
        len(result.field_display_order),
        len(result.option_permutation),
    )
    return shuffle_result_to_dict(result)


def run_grade(args: argparse.Namespace) -> dict[str, object]:
    payload = _read_json_object(args.assessment)
    fields = fields_from_payload(payload)
    responses = _read_json_object(args.responses)
    result = shuffle_result_from_dict(_read_json(args.shuffle)) if args.shuffle else None

    passing_score = _settings(payload).get("passingScore")
    if isinstance(passing_score, bool) or not isinstance(passing_score, (int, float)):
        passing_score = None
    grade = grade_submission(fields, responses, result, passing_score)
    return {
        "score": grade.score,
        "maxScore": grade.max_score,
        "percentage": grade.percentage,
        "passed": grade.passed,
        "grades": [field_grade_to_dict(item) for item in grade.grades],
        "answerKey": answer_key_to_payload(build_answer_key(fields, responses, result)),
    }


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    setup_console_logging(logging.DEBUG if args.verbose else logging.WARNING)
    try:
        if args.command == "shuffle":
            output = run_shuffle(args)
        else:
            output = run_grade(args)
    except (OSError, ValueError) as exc:
        logger.error("%s", exc)
        return 1

    print(json.dumps(output, ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
