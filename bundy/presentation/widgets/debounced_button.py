"""
Debounced button widget to prevent double-taps.
"""
import time
from kivy.uix.button import Button

DEBOUNCE_SECONDS = 0.3


class DebouncedButton(Button):
    """Button that swallows a second touch within DEBOUNCE_SECONDS"""

    _last_touch_time = 0.0

    def on_touch_down(self, touch):
        if not self.collide_point(*touch.pos):
            return super().on_touch_down(touch)

        now = time.monotonic()
        if now - self._last_touch_time < DEBOUNCE_SECONDS:
            return True  # Consume the event without action
        self._last_touch_time = now

        return super().on_touch_down(touch)
