"""
Service layer for the Bundy kiosk.
"""

from .status_service import EmployeeStatus, derive_statuses, load_statuses
from .clock_service import ClockService, ClockResult
from .state_service import StateService
from .auto_clockout_service import AutoClockoutScheduler, SweepResult
from .report_service import Report, ReportService, build_report

__all__ = [
    'EmployeeStatus',
    'derive_statuses',
    'load_statuses',
    'ClockService',
    'ClockResult',
    'StateService',
    'AutoClockoutScheduler',
    'SweepResult',
    'Report',
    'ReportService',
    'build_report',
]
