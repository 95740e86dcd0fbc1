"""
Screen controllers for the Bundy kiosk.
"""

from .kiosk_screen import KioskScreen
from .export_screen import ExportScreen

__all__ = ['KioskScreen', 'ExportScreen']
