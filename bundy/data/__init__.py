"""
Data layer for the Bundy kiosk.

Contains the peewee models, the store adapters and the plain records they return.
"""

from .records import EmployeeRecord, TimeEntryRecord, DIRECTION_IN, DIRECTION_OUT

__all__ = ['EmployeeRecord', 'TimeEntryRecord', 'DIRECTION_IN', 'DIRECTION_OUT']
