"""
Error handling utilities for the Bundy kiosk.
"""


class BundyError(Exception):
    """Base exception for the Bundy kiosk"""
    pass


class TransientStoreError(BundyError):
    """Raised when a read or write against the event store fails"""
    pass


class ConfigurationError(BundyError):
    """Raised when required settings are missing or invalid"""
    pass


class ExportError(BundyError):
    """Raised when a report export cannot be built or written"""
    pass


class ValidationError(BundyError):
    """Raised when validation fails"""
    pass


class CooldownActiveError(BundyError):
    """Raised when a toggle is attempted inside the cooldown window"""
    pass
