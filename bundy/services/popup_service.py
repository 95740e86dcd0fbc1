"""
Popup service for the kiosk's transient messages.
"""
import logging
from kivy.uix.popup import Popup
from kivy.uix.label import Label
from kivy.clock import Clock

logger = logging.getLogger(__name__)

ERROR_COLOR = (1, 0.2, 0.2, 1)
SUCCESS_COLOR = (0.2, 0.8, 0.2, 1)


class PopupService:
    """Centralized popup management"""

    def _show(self, title: str, message: str, duration: float, color=None):
        label = Label(text=message, halign='center')
        if color:
            label.color = color
        popup = Popup(title=title, content=label, size_hint=(None, None), size=(420, 220))
        popup.open()
        Clock.schedule_once(lambda dt: popup.dismiss(), duration)
        return popup

    def show_info(self, title: str, message: str, duration: float = 3.0):
        return self._show(title, message, duration)

    def show_error(self, title: str, message: str, duration: float = 5.0):
        logger.debug(f"Error popup: {title}: {message}")
        return self._show(title, message, duration, ERROR_COLOR)

    def show_success(self, title: str, message: str, duration: float = 2.0):
        """Shown after a successful clock action, e.g. 'Clocked In!'"""
        return self._show(title, message, duration, SUCCESS_COLOR)
