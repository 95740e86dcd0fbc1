"""
Payroll export report.

Pairs each employee's entries into shifts, buckets the shifts by the local
date they started on and lays them out as a fixed-width grid: one row per
employee, (In, Out) column pairs per date, as many pairs per date as the
busiest employee needs.
"""
import csv
import datetime
import io
import logging
import os
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from ..data.records import DIRECTION_IN, DIRECTION_OUT
from ..utils.errors import ExportError, TransientStoreError, ValidationError
from ..utils.export_utils import get_export_directory, write_file
from ..utils.timezone import (
    date_key, ensure_utc, format_date_label, format_hhmm, local_date, local_day_bounds
)

logger = logging.getLogger(__name__)

NAME_HEADER = 'employee_name'
IN_LABEL = 'In'
OUT_LABEL = 'Out'

ShiftPair = Tuple[str, str]


@dataclass
class Report:
    """Two header rows plus one row per employee, every row the same width"""
    header: List[List[str]] = field(default_factory=list)
    rows: List[List[str]] = field(default_factory=list)

    @property
    def width(self) -> int:
        return len(self.header[0]) if self.header else 0

    def to_csv(self) -> str:
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator='\n')
        writer.writerows(self.header)
        writer.writerows(self.rows)
        return buffer.getvalue()


def export_filename(start_date: datetime.date, end_date: datetime.date) -> str:
    return f"bundy-export-{date_key(start_date)}-to-{date_key(end_date)}.csv"


def pair_entries(entries, tz, employee_name: str = '') -> Dict[datetime.date, List[ShiftPair]]:
    """
    Pair one employee's ascending entries by position: (0, 1), (2, 3), ...

    A pair starts only on an 'in' entry; an 'out' at an even position is
    skipped. The finish is filled only when the next entry is an 'out', so a
    trailing 'in' yields an empty finish. Each pair belongs to the local date
    of its start, even when it crosses midnight.
    """
    pairs_by_date = defaultdict(list)
    for i in range(0, len(entries), 2):
        start = entries[i]
        if start.direction != DIRECTION_IN:
            logger.warning(
                f"Skipping misaligned '{start.direction}' entry {start.id} for {employee_name or start.employee_id}"
            )
            continue
        finish = entries[i + 1] if i + 1 < len(entries) else None
        finish_str = ''
        if finish is not None and finish.direction == DIRECTION_OUT:
            finish_str = format_hhmm(finish.created_at, tz)
        pairs_by_date[local_date(start.created_at, tz)].append((format_hhmm(start.created_at, tz), finish_str))
    return dict(pairs_by_date)


def build_report(employees, entries, start: datetime.datetime, end: datetime.datetime, tz) -> Report:
    """
    Build the export grid for [start, end] (inclusive instants).

    Args:
        employees: records with id, name, active and deleted_at
        entries: time entry records for any employees and any range
        start: first instant to include
        end: last instant to include
        tz: zone used for HHMM times and date grouping
    """
    start, end = ensure_utc(start), ensure_utc(end)
    staff = sorted(
        (e for e in employees if e.active and e.deleted_at is None),
        key=lambda e: e.name.casefold(),
    )

    entries_by_employee = defaultdict(list)
    for entry in entries:
        if start <= ensure_utc(entry.created_at) <= end:
            entries_by_employee[entry.employee_id].append(entry)

    employee_pairs = []
    for employee in staff:
        own = sorted(entries_by_employee.get(employee.id, []), key=lambda e: (e.created_at, e.id))
        employee_pairs.append((employee, pair_entries(own, tz, employee.name)))

    all_dates = sorted({day for _, pairs in employee_pairs for day in pairs})
    max_pairs = {
        day: max((len(pairs.get(day, [])) for _, pairs in employee_pairs), default=0)
        for day in all_dates
    }

    date_header = [NAME_HEADER]
    in_out_header = ['']
    for day in all_dates:
        label = format_date_label(day)
        for _ in range(max_pairs[day]):
            date_header.extend([label, ''])
            in_out_header.extend([IN_LABEL, OUT_LABEL])

    rows = []
    for employee, pairs in employee_pairs:
        row = [employee.name]
        for day in all_dates:
            day_pairs = pairs.get(day, [])
            for start_str, finish_str in day_pairs:
                row.extend([start_str, finish_str])
            row.extend([''] * (2 * (max_pairs[day] - len(day_pairs))))
        rows.append(row)

    return Report(header=[date_header, in_out_header], rows=rows)


class ReportService:
    """Fetches employees and entries and produces CSV exports"""

    def __init__(self, directory, store, tz, export_path: Optional[str] = None,
                 export_passphrase: Optional[str] = None):
        self.directory = directory
        self.store = store
        self.tz = tz
        self.export_path = export_path
        self.export_passphrase = export_passphrase

    def generate(self, start_date: datetime.date, end_date: datetime.date) -> Report:
        """
        Build the report for inclusive local calendar dates.

        Raises:
            ValidationError: end_date before start_date
            ExportError: any fetch failed; no partial report is returned
        """
        if end_date < start_date:
            raise ValidationError(f"End date {end_date} is before start date {start_date}")
        start, end = local_day_bounds(start_date, end_date, self.tz)
        try:
            employees = self.directory.list_employees(active_only=True)
            entries = self.store.query(
                employee_ids=[e.id for e in employees], start=start, end=end, order='asc'
            )
        except TransientStoreError as e:
            logger.error(f"Error exporting CSV for {start_date} to {end_date}: {e}")
            raise ExportError("Failed to export CSV") from e
        report = build_report(employees, entries, start, end, self.tz)
        logger.info(
            f"Report {start_date} to {end_date}: {len(report.rows)} employees, {report.width} columns"
        )
        return report

    def export(self, start_date: datetime.date, end_date: datetime.date,
               output_dir: Optional[str] = None) -> str:
        """
        Write bundy-export-<start>-to-<end>.csv and return its path.
        Encrypted when an export passphrase is configured.
        """
        report = self.generate(start_date, end_date)
        directory = output_dir or get_export_directory(self.export_path)
        target = os.path.join(directory, export_filename(start_date, end_date))
        return write_file(report.to_csv().encode('utf-8'), target, passphrase=self.export_passphrase)
