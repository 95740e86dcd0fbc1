#!/usr/bin/env python3
"""
List every active employee with their derived clock status.

Usage:
    python scripts/list_statuses.py
    python scripts/list_statuses.py --search ann
"""
import argparse
import logging
import os
import sys

# Add parent directory to path to import bundy
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from bundy.config import Settings
from bundy.data.database import EmployeeDirectory, EventStore, initialize_db, close_db
from bundy.services.board_service import filter_employees, search_summary
from bundy.services.status_service import load_statuses
from bundy.utils.errors import BundyError
from bundy.utils.timezone import format_last_action, utcnow


def main():
    parser = argparse.ArgumentParser(description='Show who is clocked in')
    parser.add_argument('--search', '-s', default='', help='Only names containing this text')
    args = parser.parse_args()

    logging.basicConfig(level=logging.WARNING)

    try:
        settings = Settings.from_env()
        initialize_db(settings.db_file, settings.db_passphrase)
        directory = EmployeeDirectory(settings.org_id)
        employees = directory.list_employees(active_only=True)
        statuses = load_statuses(directory, EventStore(), employees)
    except BundyError as e:
        print(f"❌ {e}")
        sys.exit(1)
    finally:
        close_db()

    visible = filter_employees(employees, args.search)
    now = utcnow()
    print(f"\n{'='*70}")
    print(f"{'ID':<6} {'Name':<30} {'Status':<8} {'Last action'}")
    print(f"{'-'*70}")
    for employee in visible:
        status = statuses[employee.id]
        print(f"{employee.id:<6} {employee.name:<30} {status.status.upper():<8} "
              f"{format_last_action(status.last_entry_at, now, settings.tz)}")
    print(f"{'='*70}")
    summary = search_summary(len(visible), len(employees), args.search)
    if summary:
        print(summary)


if __name__ == '__main__':
    main()
