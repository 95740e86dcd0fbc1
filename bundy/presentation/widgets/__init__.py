"""
Custom widgets for the Bundy kiosk.
"""

from .debounced_button import DebouncedButton
from .employee_card import EmployeeCard

__all__ = ['DebouncedButton', 'EmployeeCard']
