#!/usr/bin/env python3
"""
Single auto clock-out check, for cron or systemd timers.

Without --force this only fires inside the configured fire window, so a
cron entry matching the fire minute (e.g. `0 23 * * *`) is enough. The
once-per-day guard shared with the kiosk always applies.

Usage:
    python scripts/run_auto_clockout.py
    python scripts/run_auto_clockout.py --force
"""
import argparse
import logging
import os
import sys

# Add parent directory to path to import bundy
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from bundy.config import Settings
from bundy.data.database import EmployeeDirectory, EventStore, FlagStore, initialize_db, close_db
from bundy.services.auto_clockout_service import AutoClockoutScheduler
from bundy.utils.errors import BundyError

logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(description='Clock out everyone still clocked in')
    parser.add_argument('--force', action='store_true',
                        help='Run now even outside the fire window (still once per day)')
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )

    try:
        settings = Settings.from_env()
        initialize_db(settings.db_file, settings.db_passphrase)
        scheduler = AutoClockoutScheduler(
            EmployeeDirectory(settings.org_id), EventStore(), FlagStore(), settings.tz,
            fire_time=settings.fire_time,
            # A cron run is the coarsest possible poll
            poll_seconds=3600,
            deployment_key=settings.org_id,
        )
        result = scheduler.run_once(force=args.force)
    except BundyError as e:
        logger.error(f"Auto clock-out job failed: {e}")
        sys.exit(1)
    finally:
        close_db()

    if result is None:
        logger.info("Auto clock-out did not run")
    elif result.failed or not result.flag_persisted:
        sys.exit(2)


if __name__ == '__main__':
    main()
