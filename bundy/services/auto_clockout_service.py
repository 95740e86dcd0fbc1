"""
Daily automatic clock-out.

Once per calendar day in the configured zone, at the configured fire time,
everyone whose derived status is 'in' gets a synthetic 'out' entry. A durable
"last fired date" flag is the only guard against firing twice in a day.
"""
import datetime
import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from .status_service import load_statuses
from ..data.records import DIRECTION_OUT
from ..utils.errors import TransientStoreError
from ..utils.timezone import date_key, to_local, utcnow

logger = logging.getLogger(__name__)

LAST_FIRED_FLAG = 'auto_clockout.last_fired_date'
MIN_WINDOW_SECONDS = 60
WINDOW_MARGIN_SECONDS = 60

IDLE = 'idle'
FIRING = 'firing'


@dataclass
class SweepResult:
    """Outcome of one sweep"""
    date_key: str
    clocked_out: List[int] = field(default_factory=list)
    failed: List[int] = field(default_factory=list)
    flag_persisted: bool = True


class AutoClockoutScheduler:
    """Fires the end-of-day sweep at most once per local calendar day"""

    def __init__(self, directory, store, flag_store, tz,
                 fire_time: datetime.time = datetime.time(23, 0),
                 poll_seconds: float = 1.0,
                 deployment_key: Optional[str] = None,
                 now: Callable[[], datetime.datetime] = utcnow,
                 on_sweep: Optional[Callable[[SweepResult], None]] = None):
        """
        Args:
            directory: employee directory (list_employees)
            store: event store (query/insert)
            flag_store: durable flag store (get/set)
            tz: pytz zone the fire time and date keys are evaluated in
            fire_time: local wall-clock time of the sweep
            poll_seconds: interval the caller ticks at; the trigger window stays
                open for at least one interval after the fire time
            deployment_key: suffix that scopes the flag to one deployment
            now: clock returning the current aware instant
            on_sweep: called after a sweep that clocked someone out
        """
        self.directory = directory
        self.store = store
        self.flag_store = flag_store
        self.tz = tz
        self.fire_time = fire_time
        self.poll_seconds = poll_seconds
        self.flag_key = f"{LAST_FIRED_FLAG}:{deployment_key}" if deployment_key else LAST_FIRED_FLAG
        self.now = now
        self.on_sweep = on_sweep
        self.phase = IDLE
        self._last_fired_key: Optional[str] = None

    @property
    def window_seconds(self) -> float:
        """How long the trigger window stays open after the fire time"""
        return max(self.poll_seconds, MIN_WINDOW_SECONDS) + WINDOW_MARGIN_SECONDS

    def fire_day(self, local_now: datetime.datetime) -> Optional[datetime.date]:
        """
        Calendar day whose sweep is due at local_now, or None outside the window.

        The window opens at the fire time and lasts window_seconds, so every
        poll interval lands in it at least once. It may run past midnight; the
        sweep then still belongs to the day it opened on.
        """
        wall_now = local_now.replace(tzinfo=None)
        opened = datetime.datetime.combine(wall_now.date(), self.fire_time)
        if wall_now < opened:
            opened -= datetime.timedelta(days=1)
        if (wall_now - opened).total_seconds() < self.window_seconds:
            return opened.date()
        return None

    def already_fired(self, today_key: str) -> bool:
        """True when today's date key is recorded (in memory or durably)."""
        if self._last_fired_key == today_key:
            return True
        return self.flag_store.get(self.flag_key) == today_key

    def tick(self, now: Optional[datetime.datetime] = None) -> Optional[SweepResult]:
        """
        Timer callback. Runs a sweep when the fire window is open and today's
        sweep has not run yet.

        Returns:
            SweepResult when a sweep ran, otherwise None.
        """
        if self.phase == FIRING:
            return None
        now = now or self.now()
        day = self.fire_day(to_local(now, self.tz))
        if day is None:
            return None

        today_key = date_key(day)
        try:
            if self.already_fired(today_key):
                logger.debug(f"Auto clock-out already ran for {today_key}")
                return None
        except TransientStoreError as e:
            logger.error(f"Could not read auto clock-out flag, skipping tick: {e}")
            return None

        return self.sweep(now, today_key)

    def run_once(self, force: bool = False, now: Optional[datetime.datetime] = None) -> Optional[SweepResult]:
        """
        Single check for cron-style invocation.

        With force the fire window is ignored, but the once-per-day guard still holds.
        """
        if not force:
            return self.tick(now)
        now = now or self.now()
        today_key = date_key(to_local(now, self.tz).date())
        if self.already_fired(today_key):
            logger.info(f"Auto clock-out already ran for {today_key}")
            return None
        return self.sweep(now, today_key)

    def sweep(self, now: datetime.datetime, today_key: str) -> Optional[SweepResult]:
        """
        Clock out everyone currently 'in', then record today's date key.

        Per-employee write failures are logged and skipped. If the status
        snapshot itself cannot be read nothing is written and the flag is left
        alone, so a later tick in the window can try again.
        """
        self.phase = FIRING
        try:
            logger.info(f"Running auto clock-out for {today_key}")
            try:
                statuses = load_statuses(self.directory, self.store)
            except TransientStoreError as e:
                logger.error(f"Auto clock-out could not load statuses: {e}")
                return None

            result = SweepResult(date_key=today_key)
            for employee_id, status in statuses.items():
                if not status.is_in:
                    continue
                try:
                    self.store.insert(employee_id, DIRECTION_OUT, now)
                    result.clocked_out.append(employee_id)
                except TransientStoreError as e:
                    logger.warning(f"Auto clock-out failed for employee {employee_id}: {e}")
                    result.failed.append(employee_id)

            self._last_fired_key = today_key
            try:
                self.flag_store.set(self.flag_key, today_key)
            except TransientStoreError as e:
                result.flag_persisted = False
                logger.error(f"Could not persist auto clock-out date {today_key}: {e}")

            logger.info(
                f"Auto clock-out for {today_key}: {len(result.clocked_out)} clocked out, "
                f"{len(result.failed)} failed"
            )
            if result.clocked_out and self.on_sweep:
                self.on_sweep(result)
            return result
        finally:
            self.phase = IDLE
