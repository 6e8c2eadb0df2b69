#!/usr/bin/env python3
"""
Print the completeness recap for every class (or one class) for a semester.

Usage:
    python scripts/completeness_report.py --period 2
    python scripts/completeness_report.py --period 2 --class "VII A" --json
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, Dict

from enrollment import database
from enrollment.config import configure_logging, get_settings
from enrollment.grouping import class_recap, group_by_class

logger = logging.getLogger(__name__)


def render_recap(class_name: str, recap: Dict[str, Any]) -> str:
    lines = [
        f"== {class_name or '(no class)'} | semester {recap['period']} | "
        f"{recap['complete_count']}/{recap['student_count']} complete",
        f"{'NISN':<12} {'Name':<30} {'All':>4} {'Bio':>4} {'Nil':>4} {'Dok':>4} {'Rap':>4}",
    ]
    for row in recap["rows"]:
        lines.append(
            f"{row['nisn']:<12} {row['full_name'][:30]:<30} "
            f"{row['overall']:>3}% {row['bio']:>3}% {row['grades']:>3}% "
            f"{row['documents']:>3}% {row['report']:>3}%"
        )
    avg = recap["averages"]
    lines.append(
        f"{'':<12} {'Average':<30} {avg['overall']:>3}% {avg['bio']:>3}% "
        f"{avg['grades']:>3}% {avg['documents']:>3}% {avg['report']:>3}%"
    )
    return "\n".join(lines)


def main() -> int:
    parser = argparse.ArgumentParser(description="Student record completeness recap")
    parser.add_argument("--period", type=int, required=True, help="Semester number")
    parser.add_argument("--class", dest="class_name", default=None, help="Only this class")
    parser.add_argument("--db", default=None, help="SQLite file (default: ENROLLMENT_DB_PATH)")
    parser.add_argument("--json", action="store_true", help="Print JSON instead of a table")
    args = parser.parse_args()

    settings = get_settings()
    configure_logging(settings)
    if not 1 <= args.period <= settings.period_count:
        parser.error(f"--period must be between 1 and {settings.period_count}")
    if args.db:
        database.DB_PATH = args.db

    records = database.get_records(class_name=args.class_name)
    if not records:
        logger.warning("No student records found")
        return 1

    recaps = {
        name: class_recap(members, args.period, settings)
        for name, members in group_by_class(records).items()
    }
    if args.json:
        print(json.dumps(recaps, indent=2))
    else:
        print("\n\n".join(render_recap(name, recap) for name, recap in recaps.items()))
    return 0


if __name__ == "__main__":
    sys.exit(main())
