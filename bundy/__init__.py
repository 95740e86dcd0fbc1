"""
Bundy: employee clock-in/clock-out kiosk.
"""

__version__ = "1.0.0"
