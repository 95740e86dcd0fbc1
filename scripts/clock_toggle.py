#!/usr/bin/env python3
"""
Clock an employee in or out from the command line.

The direction is the opposite of the employee's current derived status.

Usage:
    python scripts/clock_toggle.py --employee "John Doe"
    python scripts/clock_toggle.py --id 12
"""
import argparse
import logging
import os
import sys

# Add parent directory to path to import bundy
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from bundy.config import Settings
from bundy.data.database import EmployeeDirectory, EventStore, initialize_db, close_db
from bundy.services.clock_service import ClockService
from bundy.utils.errors import BundyError


def find_employee(directory, employee_name=None, employee_id=None):
    """Find an active employee by id or (partial) name"""
    if employee_id is not None:
        employee = directory.get_employee(employee_id)
        if not employee or not employee.active or employee.is_deleted:
            print(f"❌ No active employee with id {employee_id}")
            return None
        return employee

    employees = directory.list_employees(active_only=True)
    for emp in employees:
        if emp.name.lower() == employee_name.lower():
            return emp

    matches = [emp for emp in employees if employee_name.lower() in emp.name.lower()]
    if len(matches) == 1:
        return matches[0]
    if matches:
        print(f"❌ Multiple employees match '{employee_name}':")
        for emp in matches:
            print(f"   - {emp.name} ({emp.id})")
    else:
        print(f"❌ No employee found with name: {employee_name}")
    return None


def main():
    parser = argparse.ArgumentParser(description='Toggle an employee between clocked in and out')
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument('--employee', '-e', type=str, help='Employee name (partial match supported)')
    group.add_argument('--id', '-i', type=int, help='Employee id')
    args = parser.parse_args()

    logging.basicConfig(level=logging.WARNING)

    try:
        settings = Settings.from_env()
        initialize_db(settings.db_file, settings.db_passphrase)
        directory = EmployeeDirectory(settings.org_id)
        employee = find_employee(directory, employee_name=args.employee, employee_id=args.id)
        if not employee:
            sys.exit(1)

        result = ClockService(EventStore()).clock_in_out(employee)
        if not result.success:
            print(f"❌ {result.error}")
            sys.exit(1)
        print(f"✅ Clocked {result.action.upper()} - {employee.name} @ {result.entry.created_at.astimezone(settings.tz):%Y-%m-%d %H:%M:%S}")
    except BundyError as e:
        print(f"❌ {e}")
        sys.exit(1)
    finally:
        close_db()


if __name__ == '__main__':
    main()
