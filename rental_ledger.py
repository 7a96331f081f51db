"""
RentalSplitLedger
- Price car rentals with a decreasing day rate and split the money between
  driver, owner, insurance, roadside assistance and the platform.
- Re-split amended rentals and report what each party now owes or receives.

Run:
  python rental_ledger.py --data data.json --output output.json --level modifications

Dependencies:
  pip install openpyxl python-dotenv
"""
from __future__ import annotations
import argparse
import logging
import sys
from typing import List, Optional

from config import Config, load_batch, setup_logging, write_report
from csv_handler import export_actions_to_csv
from excel_export import export_excel
from reports import ReportLevel, build_report

logger = logging.getLogger("rental_ledger")

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def build_parser() -> argparse.ArgumentParser:
    """Command line options; defaults come from Config"""
    parser = argparse.ArgumentParser(description="Price rentals and split the money between parties.")
    parser.add_argument("--data", default=Config.DATA_FILE, help="input JSON file (cars, rentals, modifications)")
    parser.add_argument("--output", default=Config.OUTPUT_FILE, help="JSON report path")
    parser.add_argument(
        "--level",
        default=Config.REPORT_LEVEL,
        choices=[lvl.value for lvl in ReportLevel],
        help="report feature level",
    )
    parser.add_argument("--csv", help="also export every action to this CSV file")
    parser.add_argument("--excel", help="also export an Excel workbook to this path")
    parser.add_argument(
        "--log-level",
        default=Config.LOG_LEVEL.upper(),
        type=str.upper,
        choices=LOG_LEVELS,
        help="logging level (default: %(default)s)",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the application"""
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    try:
        batch = load_batch(args.data)
    except (OSError, ValueError) as e:
        logger.error("cannot load %s: %s", args.data, e)
        return 1

    report = build_report(batch, args.level)
    write_report(report, args.output)
    logger.info("wrote %s report to %s", args.level, args.output)

    if args.csv:
        export_actions_to_csv(batch, args.csv)
        logger.info("wrote actions CSV to %s", args.csv)
    if args.excel:
        export_excel(batch, args.excel)
        logger.info("wrote Excel workbook to %s", args.excel)
    return 0


if __name__ == "__main__":
    sys.exit(main())
