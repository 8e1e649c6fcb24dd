#!/usr/bin/env python3
"""
Batch scoring from the command line.

Reads JSON-lines telemetry (one event per line) from files or stdin and
prints one verdict per event.

Usage:
    python -m threatscore events.jsonl
    cat events.jsonl | python -m threatscore --min-level 4 --json
"""

import argparse
import json
import sys
from typing import Iterator, List, Optional, Sequence

from .engine import ThreatDetector
from .log_writer import LogWriter, configure_logging
from .settings import Settings


def _read_lines(paths: Sequence[str]) -> Iterator[bytes]:
    # raw bytes: the decoder decides which lines are valid UTF-8 JSON
    if not paths:
        yield from sys.stdin.buffer
        return
    for path in paths:
        with open(path, "rb") as f:
            yield from f


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="threatscore",
        description="Score JSON-lines security telemetry events.",
    )
    parser.add_argument("files", nargs="*",
                        help="JSON-lines files to score (default: stdin)")
    parser.add_argument("--workers", type=int, default=1,
                        help="number of scoring threads (default: 1)")
    parser.add_argument("--min-level", type=int, default=None,
                        help="only print events scoring at least this level")
    parser.add_argument("--json", action="store_true",
                        help="print verdicts as JSON lines")
    parser.add_argument("--log", action="store_true",
                        help="also record verdicts in the detection log")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    log_writer = None
    if args.log:
        settings = Settings()
        configure_logging(settings.log_dir, settings.logging_level)
        log_writer = LogWriter(settings.detection_log)
    detector = ThreatDetector(log_writer)

    try:
        lines = [line.strip() for line in _read_lines(args.files)]
    except OSError as e:
        print(f"threatscore: {e}", file=sys.stderr)
        return 2
    lines = [line for line in lines if line]

    verdicts = detector.score_many(lines, workers=args.workers)
    if log_writer is not None:
        for verdict in verdicts:
            log_writer.write(verdict)

    for verdict in verdicts:
        if args.min_level is not None and verdict.threat_level < args.min_level:
            continue
        if args.json:
            print(json.dumps(verdict.to_dict()))
        else:
            print(f"{verdict.threat_level}\t{verdict.severity}\t{verdict.event_id or '-'}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
