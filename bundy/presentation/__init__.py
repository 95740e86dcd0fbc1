"""
Kivy presentation layer for the Bundy kiosk.
"""
