"""
Bundy kiosk application entry point.

One Kivy interval drives both the on-screen clock and the auto clock-out
check; clock taps and exports run on the UI thread.
"""
import logging
import sys

# IMPORTANT: Config must be set BEFORE importing Kivy modules
from kivy.config import Config

Config.set('kivy', 'keyboard_mode', 'systemanddock')
Config.set('kivy', 'keyboard_layout', 'qwerty')

from kivy.app import App
from kivy.clock import Clock
from kivy.core.window import Window
from kivy.uix.screenmanager import ScreenManager

from .config import Settings
from .data.database import EmployeeDirectory, EventStore, FlagStore, initialize_db, close_db
from .data.records import DIRECTION_IN
from .presentation.screens import KioskScreen, ExportScreen
from .services.auto_clockout_service import AutoClockoutScheduler
from .services.clock_service import ClockResult, ClockService
from .services.popup_service import PopupService
from .services.report_service import ReportService
from .services.state_service import StateService
from .services.status_service import load_statuses
from .utils.errors import ConfigurationError, ExportError, TransientStoreError
from .utils.timezone import utcnow

logger = logging.getLogger(__name__)

REFRESH_DELAY_SECONDS = 1


class BundyApp(App):
    """Kiosk application"""

    def __init__(self, settings: Settings, **kwargs):
        super().__init__(**kwargs)
        self.settings = settings
        self.now = utcnow
        self.directory = EmployeeDirectory(settings.org_id)
        self.store = EventStore()
        self.flag_store = FlagStore()
        self.state_service = StateService(cooldown_seconds=settings.cooldown_seconds)
        self.clock_service = ClockService(self.store, self.state_service, now=self.now)
        self.popup_service = PopupService()
        self.report_service = ReportService(
            self.directory, self.store, settings.tz,
            export_path=settings.export_path,
            export_passphrase=settings.export_passphrase,
        )
        self.scheduler = AutoClockoutScheduler(
            self.directory, self.store, self.flag_store, settings.tz,
            fire_time=settings.fire_time,
            poll_seconds=settings.poll_seconds,
            deployment_key=settings.org_id,
            now=self.now,
            on_sweep=lambda result: self.schedule_refresh(),
        )
        self.kiosk_screen = None

    def build(self):
        initialize_db(self.settings.db_file, self.settings.db_passphrase)
        Window.fullscreen = 'auto'

        manager = ScreenManager()
        self.kiosk_screen = KioskScreen(self)
        manager.add_widget(self.kiosk_screen)
        manager.add_widget(ExportScreen(self))

        Clock.schedule_interval(self.on_tick, self.settings.poll_seconds)
        self.load_employees()
        return manager

    def on_tick(self, dt):
        now = self.now()
        self.kiosk_screen.update_clock(now, self.settings.tz)
        self.scheduler.tick(now)

    def show_screen(self, name):
        self.root.current = name

    def load_employees(self, *args):
        """Re-fetch employees and statuses from the store"""
        try:
            employees = self.directory.list_employees(active_only=True)
            statuses = load_statuses(self.directory, self.store, employees)
        except TransientStoreError as e:
            logger.error(f"Error loading employees: {e}")
            return
        self.state_service.refresh(statuses)
        self.kiosk_screen.set_employees(employees)

    def schedule_refresh(self, delay=REFRESH_DELAY_SECONDS):
        Clock.schedule_once(self.load_employees, delay)

    def perform_clock_action(self, employee):
        """Card tap: show the optimistic status now, write on the next frame"""
        started = self.clock_service.begin(employee)
        if isinstance(started, ClockResult):
            self._show_clock_result(employee, started)
            return
        self.kiosk_screen.refresh_board()
        Clock.schedule_once(lambda dt: self._finish_clock_action(employee, started), 0)

    def _finish_clock_action(self, employee, action):
        result = self.clock_service.finish(employee, action)
        self.kiosk_screen.refresh_board()
        self._show_clock_result(employee, result)

    def _show_clock_result(self, employee, result):
        if result.success:
            self.popup_service.show_success(
                employee.name, 'Clocked In!' if result.action == DIRECTION_IN else 'Clocked Out!'
            )
            self.kiosk_screen.update_status(f"Clocked {result.action.upper()} - {employee.name}")
            self.schedule_refresh()
            Clock.schedule_once(self.kiosk_screen.refresh_board, self.settings.cooldown_seconds)
        elif result.retryable:
            self.popup_service.show_error("Error", result.error)

    def export_report(self, start_date, end_date):
        try:
            path = self.report_service.export(start_date, end_date)
        except ExportError as e:
            logger.error(f"Error exporting CSV: {e}")
            self.popup_service.show_error("Export", "Failed to export CSV")
            return None
        self.popup_service.show_info("Export", f"Exported to\n{path}")
        return path

    def on_stop(self):
        close_db()


def main():
    logging.basicConfig(level=logging.INFO)
    try:
        settings = Settings.from_env()
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(1)
    BundyApp(settings).run()


if __name__ == '__main__':
    main()
