"""Analyze a JSON lab submission from the command line.

Reads a Submission JSON file (the same shape POST /api/analyze accepts),
runs the analysis engine, and prints the AnalysisResult as JSON.

Usage:
    python -m lablens.scripts.analyze_submission submission.json
    python -m lablens.scripts.analyze_submission - < submission.json
    lablens-analyze submission.json --bullets

Exit codes:
    0 on success, 1 if the file cannot be read or fails validation.
"""

import argparse
import json
import sys
from pathlib import Path

from pydantic import ValidationError

from lablens.schemas import Submission
from lablens.services.analyzer import analyze_submission


def _read_source(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the script."""
    parser = argparse.ArgumentParser(
        description="Classify lab markers and summarize a JSON submission"
    )
    parser.add_argument(
        "source",
        help="Path to a submission JSON file, or '-' for stdin",
    )
    parser.add_argument(
        "--indent",
        type=int,
        default=2,
        help="JSON indent for output (default: 2)",
    )
    parser.add_argument(
        "--bullets",
        action="store_true",
        help="Print only the summary bullets, one per line",
    )
    args = parser.parse_args(argv)

    try:
        raw = _read_source(args.source)
    except OSError as e:
        print(f"Error: cannot read {args.source}: {e}", file=sys.stderr)
        return 1

    try:
        submission = Submission.model_validate_json(raw)
    except ValidationError as e:
        print("Error: submission failed validation", file=sys.stderr)
        print(json.dumps(e.errors(include_url=False), indent=2, default=str), file=sys.stderr)
        return 1

    result = analyze_submission(submission)

    if args.bullets:
        for line in result.summary_bullets:
            print(line)
    else:
        print(result.model_dump_json(by_alias=True, indent=args.indent))
    return 0


if __name__ == "__main__":
    sys.exit(main())
