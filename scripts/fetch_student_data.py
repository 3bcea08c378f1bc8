"""Fetch one StudentVUE resource and print it as JSON.

Standalone CLI script. Logs in with the credentials from the environment
(or .env), fetches the requested resource and writes it to stdout.

Run with: python scripts/fetch_student_data.py schedule
Term:     python scripts/fetch_student_data.py schedule --term 1
Grades:   python scripts/fetch_student_data.py gradebook --period 0
Calendar: python scripts/fetch_student_data.py calendar --start 2023-01-15 --end 2023-03-10
District: python scripts/fetch_student_data.py districts --zip 85719

Environment:
  STUDENTVUE_DISTRICT_URL, STUDENTVUE_USER, STUDENTVUE_PASS,
  CALENDAR_CONCURRENCY, REQUEST_TIMEOUT_SECONDS, LOG_JSON, LOG_LEVEL

Exit codes:
  0 = success (JSON on stdout)
  1 = error (message on stderr)
"""

import argparse
import asyncio
import json
import sys
from datetime import date

from dotenv import load_dotenv

from studentvue import StudentVueError, find_districts, login
from studentvue.config import get_config
from studentvue.logging import get_logger, setup_logging

load_dotenv()

RESOURCES = (
    "schedule",
    "attendance",
    "gradebook",
    "student-info",
    "calendar",
    "messages",
    "districts",
)


def _parse_args() -> argparse.Namespace:
    """Parse CLI arguments using argparse."""
    parser = argparse.ArgumentParser(
        description="Fetch a StudentVUE resource as JSON.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("resource", choices=RESOURCES, help="Resource to fetch.")
    parser.add_argument(
        "--term", type=int, default=None, help="Term index for schedule."
    )
    parser.add_argument(
        "--period",
        type=int,
        default=None,
        help="Reporting period index for gradebook.",
    )
    parser.add_argument(
        "--start",
        type=date.fromisoformat,
        default=None,
        help="Calendar window start, YYYY-MM-DD (default: today).",
    )
    parser.add_argument(
        "--end",
        type=date.fromisoformat,
        default=None,
        help="Calendar window end, YYYY-MM-DD (default: --start).",
    )
    parser.add_argument("--zip", type=str, default="", help="Zip code for districts.")
    return parser.parse_args()


async def _fetch(args: argparse.Namespace) -> object:
    config = get_config()
    if args.resource == "districts":
        return await find_districts(args.zip)

    client, info = await login(
        config.studentvue_district_url,
        config.studentvue_user,
        config.studentvue_pass,
        timeout=config.request_timeout_seconds,
    )
    try:
        if args.resource == "student-info":
            return info
        if args.resource == "schedule":
            return await client.schedule(args.term)
        if args.resource == "attendance":
            return await client.attendance()
        if args.resource == "gradebook":
            return await client.gradebook(args.period)
        if args.resource == "messages":
            return await client.messages()
        start = args.start or date.today()
        return await client.calendar(
            start, args.end or start, concurrency=config.calendar_concurrency
        )
    finally:
        await client.processor.aclose()


def _to_jsonable(result: object) -> object:
    if isinstance(result, list):
        return [item.model_dump(mode="json") for item in result]
    return result.model_dump(mode="json")


def main() -> int:
    args = _parse_args()
    config = get_config()
    setup_logging(json_output=config.log_json, log_level=config.log_level)
    log = get_logger("fetch_student_data")

    try:
        result = asyncio.run(_fetch(args))
    except (StudentVueError, ValueError) as e:
        log.error("fetch_failed", resource=args.resource, error=str(e), type=type(e).__name__)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    json.dump(_to_jsonable(result), sys.stdout, indent=2, ensure_ascii=False)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
