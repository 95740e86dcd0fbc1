"""
Employee card: name, clocked in/out badge, last action and the clock button.
"""
from kivy.uix.boxlayout import BoxLayout
from kivy.uix.label import Label

from .debounced_button import DebouncedButton
from ...data.records import DIRECTION_IN

IN_COLOR = (0.86, 0.2, 0.2, 1)
OUT_COLOR = (0.2, 0.7, 0.3, 1)


class EmployeeCard(BoxLayout):
    """Card for one employee; on_clock is called with the employee on tap"""

    def __init__(self, employee, on_clock, **kwargs):
        super().__init__(orientation='vertical', padding=12, spacing=6,
                         size_hint_y=None, height=180, **kwargs)
        self.employee = employee
        self._on_clock = on_clock

        self.name_label = Label(text=employee.name, font_size='20sp', bold=True)
        self.status_label = Label(font_size='14sp')
        self.last_action_label = Label(font_size='12sp', color=(0.5, 0.5, 0.5, 1))
        self.button = DebouncedButton(font_size='18sp')
        self.button.bind(on_release=lambda *_: self._on_clock(self.employee))

        for widget in (self.name_label, self.status_label, self.last_action_label, self.button):
            self.add_widget(widget)

    def update(self, row):
        """Apply a BoardRow"""
        self.status_label.text = row.status_label
        self.last_action_label.text = row.last_action
        self.button.text = row.button_label
        self.button.disabled = row.busy or row.cooling_down
        self.button.background_color = IN_COLOR if row.status == DIRECTION_IN else OUT_COLOR
