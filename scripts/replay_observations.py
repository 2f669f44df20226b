"""
Replay recorded detector observations through the decision engine.

Reads one JSON object per line (the fields of an Observation), evaluates
each one and prints the decision as JSON, one per line. Useful for tuning
thresholds against recorded sessions without a camera.

Usage:
    python scripts/replay_observations.py observations.jsonl
    python scripts/replay_observations.py observations.jsonl --summary
    cat observations.jsonl | python scripts/replay_observations.py -
"""

import argparse
import json
import logging
import sys
from collections import Counter
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from capture_gate.config import get_config, setup_logging
from capture_gate.decision import DecisionEngine
from capture_gate.signals import Observation
from capture_gate.sinks import LoggingSink

logger = logging.getLogger("replay_observations")


ANGLE_FIELDS = ("head_angle_x", "head_angle_y", "head_angle_z")


def iter_observations(stream):
    """
    Yield (line_number, Observation) for each non-empty line.

    Lines that are not valid JSON, carry unknown fields, or report a face
    without all three head angles are logged and skipped.
    """
    for line_no, line in enumerate(stream, start=1):
        line = line.strip()
        if not line:
            continue
        try:
            observation = Observation(**json.loads(line))
        except (json.JSONDecodeError, TypeError) as e:
            logger.warning(f"Skipping line {line_no}: {e}")
            continue

        missing = [name for name in ANGLE_FIELDS if getattr(observation, name) is None]
        if observation.face_count > 0 and missing:
            logger.warning(f"Skipping line {line_no}: face present but missing {missing}")
            continue

        yield line_no, observation


def main():
    parser = argparse.ArgumentParser(description="Replay observations through the decision engine")
    parser.add_argument("input", help="JSONL file of observations, or '-' for stdin")
    parser.add_argument("--summary", action="store_true", help="Print failure counts at the end")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log every notification")
    args = parser.parse_args()

    setup_logging("DEBUG" if args.verbose else None)

    engine = DecisionEngine(get_config())
    sink = LoggingSink()
    failures = Counter()
    total = ready = 0

    stream = sys.stdin if args.input == "-" else open(args.input, "r", encoding="utf-8")
    try:
        for line_no, observation in iter_observations(stream):
            decision = engine.process(observation, sink)
            total += 1
            ready += decision.requirements_met
            failures.update(decision.failed_checks)
            print(json.dumps({"line": line_no, **decision.to_dict()}))
    finally:
        if stream is not sys.stdin:
            stream.close()

    if args.summary:
        logger.info(f"{total} frames, {ready} capture-ready")
        for check, count in failures.most_common():
            logger.info(f"  {check}: failed {count} times")


if __name__ == "__main__":
    main()
