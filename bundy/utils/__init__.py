"""
Utilities for the Bundy kiosk.
"""

from .errors import (
    BundyError,
    TransientStoreError,
    ConfigurationError,
    ExportError,
    ValidationError,
    CooldownActiveError,
)
from .export_utils import (
    get_export_directory,
    write_file,
    find_usb_mounts,
)

__all__ = [
    'BundyError',
    'TransientStoreError',
    'ConfigurationError',
    'ExportError',
    'ValidationError',
    'CooldownActiveError',
    'get_export_directory',
    'write_file',
    'find_usb_mounts',
]
