#!/usr/bin/env python3
"""
Export the payroll timesheet CSV for an inclusive date range.

Usage:
    python scripts/export_report.py --start 2024-01-01 --end 2024-01-31
    python scripts/export_report.py --start 2024-01-01 --end 2024-01-31 --output /tmp
    python scripts/export_report.py --start 2024-01-01 --end 2024-01-31 --stdout
"""
import argparse
import logging
import os
import sys

# Add parent directory to path to import bundy
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from bundy.config import Settings
from bundy.data.database import EmployeeDirectory, EventStore, initialize_db, close_db
from bundy.services.report_service import ReportService
from bundy.utils.errors import BundyError
from bundy.utils.timezone import parse_date


def main():
    parser = argparse.ArgumentParser(
        description='Export clock-in/clock-out pairs as a CSV grid',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s --start 2024-01-01 --end 2024-01-31
  %(prog)s --start 2024-01-01 --end 2024-01-31 --output /media/usb
        """
    )
    parser.add_argument('--start', '-s', required=True, help='First date, YYYY-MM-DD')
    parser.add_argument('--end', '-e', required=True, help='Last date, YYYY-MM-DD')
    parser.add_argument('--output', '-o', help='Output directory (default: BUNDY_EXPORT_PATH, USB, ./exports)')
    parser.add_argument('--stdout', action='store_true', help='Print the CSV instead of writing a file')
    args = parser.parse_args()

    logging.basicConfig(level=logging.WARNING)

    try:
        start_date = parse_date(args.start)
        end_date = parse_date(args.end)
    except ValueError:
        print("❌ Dates must be in YYYY-MM-DD format")
        sys.exit(1)

    try:
        settings = Settings.from_env()
        initialize_db(settings.db_file, settings.db_passphrase)
        service = ReportService(
            EmployeeDirectory(settings.org_id), EventStore(), settings.tz,
            export_path=settings.export_path,
            export_passphrase=settings.export_passphrase,
        )
        if args.stdout:
            print(service.generate(start_date, end_date).to_csv(), end='')
        else:
            path = service.export(start_date, end_date, output_dir=args.output)
            print(f"✅ Export written to {path}")
    except BundyError as e:
        print(f"❌ Failed to export CSV: {e}")
        sys.exit(1)
    finally:
        close_db()


if __name__ == '__main__':
    main()
