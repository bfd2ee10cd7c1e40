"""Print a 90-day practice plan for an ad-hoc learner profile."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import date
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from bass_coach.curriculum_sequencer import generate_schedule
from bass_coach.learner_profile import WEEKDAYS, LearnerProfile
from bass_coach.plan_views import schedule_summary

logger = logging.getLogger("export_schedule")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate a bass practice plan and print it as JSON.")
    parser.add_argument("--start-date", type=date.fromisoformat, default=date.today())
    parser.add_argument("--minutes", type=int, default=60, help="Daily practice budget in minutes.")
    parser.add_argument("--bass-type", choices=["4", "5", "6"], default="4")
    parser.add_argument(
        "--rest-day",
        action="append",
        default=None,
        choices=WEEKDAYS,
        help="Weekday without practice (repeatable). Defaults to Sunday.",
    )
    parser.add_argument("--known-skill", action="append", default=[], help="Skill key already mastered (repeatable).")
    parser.add_argument("--output", type=Path, default=None, help="Write JSON here instead of stdout.")
    parser.add_argument("--summary", action="store_true", help="Print only aggregate counts.")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    args = parse_args(argv)
    rest_days = set(args.rest_day or ["Sunday"])
    try:
        profile = LearnerProfile(
            start_date=args.start_date,
            daily_minutes=args.minutes,
            bass_type=args.bass_type,
            weekly_availability={day: day not in rest_days for day in WEEKDAYS},
            known_skills={skill: True for skill in args.known_skill},
        )
    except ValidationError as exc:
        logger.error("Invalid profile: %s", exc)
        return 2

    schedule = generate_schedule(profile)
    summary = schedule_summary(schedule)
    payload = summary if args.summary else schedule.model_dump(mode="json")
    text = json.dumps(payload, indent=2, ensure_ascii=False)
    if args.output is not None:
        args.output.write_text(text + "\n", encoding="utf-8")
        logger.info("Wrote %d days to %s", summary["day_count"], args.output)
    else:
        sys.stdout.write(text + "\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
