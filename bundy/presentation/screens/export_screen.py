"""
Admin export screen: pick an inclusive date range and write the CSV.
"""
import datetime
import logging

from kivy.uix.boxlayout import BoxLayout
from kivy.uix.button import Button
from kivy.uix.label import Label
from kivy.uix.screenmanager import Screen
from kivy.uix.textinput import TextInput

from ...utils.errors import ValidationError
from ...utils.timezone import date_key, parse_date

logger = logging.getLogger(__name__)


class ExportScreen(Screen):

    def __init__(self, app, **kwargs):
        super().__init__(name='export', **kwargs)
        self.app = app

        root = BoxLayout(orientation='vertical', padding=24, spacing=12)
        root.add_widget(Label(text='Export Timesheet', font_size='24sp', bold=True,
                              size_hint_y=None, height=50))

        self.start_input = TextInput(hint_text='Start date (YYYY-MM-DD)', multiline=False,
                                     size_hint_y=None, height=50)
        self.end_input = TextInput(hint_text='End date (YYYY-MM-DD)', multiline=False,
                                   size_hint_y=None, height=50)
        root.add_widget(self.start_input)
        root.add_widget(self.end_input)

        buttons = BoxLayout(size_hint_y=None, height=60, spacing=12)
        export_button = Button(text='Export CSV')
        export_button.bind(on_release=lambda *_: self.export())
        back_button = Button(text='Back to Kiosk')
        back_button.bind(on_release=lambda *_: self.app.show_screen('kiosk'))
        buttons.add_widget(export_button)
        buttons.add_widget(back_button)
        root.add_widget(buttons)

        self.result_label = Label()
        root.add_widget(self.result_label)
        self.add_widget(root)

    def on_enter(self, *args):
        today = datetime.datetime.now(self.app.settings.tz).date()
        if not self.start_input.text:
            self.start_input.text = date_key(today.replace(day=1))
        if not self.end_input.text:
            self.end_input.text = date_key(today)

    def export(self):
        if not self.start_input.text or not self.end_input.text:
            self.app.popup_service.show_error("Export", "Please select start and end dates")
            return
        try:
            start_date = parse_date(self.start_input.text.strip())
            end_date = parse_date(self.end_input.text.strip())
        except ValueError:
            self.app.popup_service.show_error("Export", "Dates must be in YYYY-MM-DD format")
            return
        try:
            path = self.app.export_report(start_date, end_date)
        except ValidationError as e:
            self.app.popup_service.show_error("Export", str(e))
            return
        if path:
            self.result_label.text = f"Saved to {path}"
