#!/usr/bin/env python3
"""Generate greenhouse advice for a weather snapshot file."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
import sys

# Ensure project root on the Python path when executed directly
ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from greenhouse_engine.advice import generate_comprehensive_advice
from greenhouse_engine.utils import load_data


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        description="Show disease, irrigation, ventilation and pest advice for a snapshot"
    )
    parser.add_argument("snapshot", type=Path, help="JSON or YAML weather snapshot")
    parser.add_argument(
        "--stress", action="store_true", help="Include the plant stress assessment"
    )
    parser.add_argument("--output", type=Path, help="Optional output path")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        payload = load_data(args.snapshot)
        advice = generate_comprehensive_advice(payload, include_stress=args.stress)
    except (FileNotFoundError, ValueError) as exc:
        parser.exit(2, f"error: {exc}\n")

    text = json.dumps(advice.as_dict(), indent=2)
    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(text)
    else:
        print(text)


if __name__ == "__main__":  # pragma: no cover
    main()
