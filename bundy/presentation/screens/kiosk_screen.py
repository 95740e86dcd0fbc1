"""
Kiosk main screen: live clock, name search and the employee cards.
"""
import logging

from kivy.clock import Clock
from kivy.properties import StringProperty
from kivy.uix.boxlayout import BoxLayout
from kivy.uix.button import Button
from kivy.uix.gridlayout import GridLayout
from kivy.uix.label import Label
from kivy.uix.screenmanager import Screen
from kivy.uix.scrollview import ScrollView
from kivy.uix.textinput import TextInput

from ..widgets import EmployeeCard
from ...services.board_service import LocalDayTracker, build_board, filter_employees, search_summary
from ...utils.timezone import to_local

logger = logging.getLogger(__name__)


class KioskScreen(Screen):
    status_message = StringProperty("Ready")

    def __init__(self, app, **kwargs):
        super().__init__(name='kiosk', **kwargs)
        self.app = app
        self._employees = []
        self._cards = {}
        self._day = LocalDayTracker()

        root = BoxLayout(orientation='vertical', padding=16, spacing=10)

        header = BoxLayout(size_hint_y=None, height=80)
        titles = BoxLayout(orientation='vertical')
        titles.add_widget(Label(text='WSLR Bundy Kiosk', font_size='26sp', bold=True))
        self.date_label = Label(font_size='14sp')
        titles.add_widget(self.date_label)
        header.add_widget(titles)
        clock_box = BoxLayout(orientation='vertical', size_hint_x=0.4)
        self.time_label = Label(font_size='30sp', bold=True)
        admin_button = Button(text='Admin Panel', size_hint_y=0.4)
        admin_button.bind(on_release=lambda *_: self.app.show_screen('export'))
        clock_box.add_widget(self.time_label)
        clock_box.add_widget(admin_button)
        header.add_widget(clock_box)
        root.add_widget(header)

        self.search_input = TextInput(hint_text='Search for your name...', multiline=False,
                                      size_hint_y=None, height=50, font_size='18sp')
        self.search_input.bind(text=lambda *_: self.refresh_board())
        root.add_widget(self.search_input)

        self.summary_label = Label(size_hint_y=None, height=24, font_size='13sp')
        root.add_widget(self.summary_label)

        self.grid = GridLayout(cols=3, spacing=12, size_hint_y=None)
        self.grid.bind(minimum_height=self.grid.setter('height'))
        scroll = ScrollView()
        scroll.add_widget(self.grid)
        root.add_widget(scroll)

        self.message_label = Label(text=self.status_message, size_hint_y=None, height=30)
        self.bind(status_message=lambda _, value: setattr(self.message_label, 'text', value))
        root.add_widget(self.message_label)

        self.add_widget(root)

    def update_clock(self, now, tz):
        local = to_local(now, tz)
        hour = local.hour % 12 or 12
        suffix = 'am' if local.hour < 12 else 'pm'
        self.time_label.text = f"{hour}:{local.minute:02d}:{local.second:02d} {suffix}"
        self.date_label.text = local.strftime('%A, %d %B %Y')
        if self._day.changed(now, tz):
            logger.info(f"Local date is now {local.date()}, refreshing board")
            self.refresh_board()

    def set_employees(self, employees):
        self._employees = list(employees)
        self.refresh_board()

    def refresh_board(self, *args):
        search = self.search_input.text
        visible = filter_employees(self._employees, search)
        self.summary_label.text = search_summary(len(visible), len(self._employees), search)
        if not self._employees:
            self.summary_label.text = "No active employees"
        elif not visible:
            self.summary_label.text = "No employees found"

        self.grid.clear_widgets()
        rows = build_board(visible, self.app.state_service, self.app.settings.tz, self.app.now())
        for row in rows:
            card = self._cards.get(row.employee.id)
            if card is None or card.employee != row.employee:
                card = EmployeeCard(row.employee, self.app.perform_clock_action)
                self._cards[row.employee.id] = card
            card.update(row)
            self.grid.add_widget(card)

    def update_status(self, message):
        self.status_message = message
        Clock.schedule_once(lambda dt: self.set_default_status(), 3)

    def set_default_status(self):
        self.status_message = "Ready"
