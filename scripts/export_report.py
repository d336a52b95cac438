#!/usr/bin/env python
"""Export an analytics report as CSV without going through the API.

Usage:
    # Monthly repairs report to stdout
    uv run python scripts/export_report.py repairs

    # Custom window written to a file
    uv run python scripts/export_report.py financial --period custom \
        --start 2024-01-01 --end 2024-03-31 --output q1-financial.csv

    # Flat metric=value rows instead of the CSV layout
    uv run python scripts/export_report.py comprehensive --rows
"""

import argparse
import asyncio
import sys
from datetime import UTC, datetime
from pathlib import Path

from sqlalchemy.exc import SQLAlchemyError

from app.core.database import get_engine
from app.core.logging import configure_logging
from app.features.analytics.period import AnalyticsPeriod
from app.features.reports import ReportService, ReportType


def parse_datetime(value: str) -> datetime:
    """Parse an ISO date or datetime, assuming UTC when no offset is given.

    Raises:
        argparse.ArgumentTypeError: If the value is not ISO-8601.
    """
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(
            f"Invalid date: {value}. Use YYYY-MM-DD or an ISO datetime"
        ) from e
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI."""
    parser = argparse.ArgumentParser(
        description="RepairDesk report exporter",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  export_report.py repairs
  export_report.py locations --period yearly --output locations.csv
  export_report.py sales --period custom --start 2024-01-01 --end 2024-01-31
        """,
    )
    parser.add_argument(
        "report_type",
        choices=[t.value for t in ReportType],
        help="Report to generate",
    )
    parser.add_argument(
        "--period",
        default=AnalyticsPeriod.MONTHLY.value,
        choices=[p.value for p in AnalyticsPeriod],
        help="Reporting window (default: monthly)",
    )
    parser.add_argument("--start", type=parse_datetime, help="Custom window start")
    parser.add_argument("--end", type=parse_datetime, help="Custom window end (default: now)")
    parser.add_argument(
        "--rows",
        action="store_true",
        help="Print flattened metric=value rows instead of the CSV layout",
    )
    parser.add_argument("--output", type=Path, help="Write to this file instead of stdout")
    return parser


async def export(args: argparse.Namespace) -> str:
    service = ReportService()
    report_type = ReportType(args.report_type)
    try:
        if args.rows:
            rows = await service.generate_rows(report_type, args.period, args.start, args.end)
            return "".join(f"{row.metric}={row.value}\n" for row in rows)
        return await service.generate_csv_report(report_type, args.period, args.start, args.end)
    finally:
        await get_engine().dispose()


def main() -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args()

    if args.start and args.end and args.end < args.start:
        parser.error("--end must not be before --start")

    configure_logging(stream=sys.stderr)

    try:
        content = asyncio.run(export(args))
    except SQLAlchemyError as e:
        print(f"ERROR: database query failed: {e}", file=sys.stderr)
        print("Check DATABASE_URL and run scripts/check_db.py", file=sys.stderr)
        return 1

    if args.output:
        args.output.write_text(content, encoding="utf-8")
        print(f"Wrote {args.report_type} report to {args.output}", file=sys.stderr)
    else:
        sys.stdout.write(content)
    return 0


if __name__ == "__main__":
    sys.exit(main())
