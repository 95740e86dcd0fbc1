"""
Database module for the Bundy kiosk.

peewee models for employees, the append-only time entry log and the durable
scheduler flags, plus the adapters the services talk to. Uses SQLCipher for
encryption at rest when a passphrase is configured.
"""
import datetime
import functools
import logging
from typing import Iterable, List, Optional

import pytz
from peewee import (
    Model, CharField, BooleanField, DateTimeField, ForeignKeyField,
    DatabaseProxy, SqliteDatabase, PeeweeException
)

from .records import DIRECTIONS, EmployeeRecord, TimeEntryRecord
from ..utils.errors import ConfigurationError, TransientStoreError, ValidationError
from ..utils.timezone import ensure_utc, utcnow

logger = logging.getLogger(__name__)

db = DatabaseProxy()


def _get_database(path: str, passphrase: Optional[str] = None):
    """
    Create the database for path.
    Uses SQLCipher when a passphrase is given, otherwise plain SQLite.
    """
    if passphrase:
        try:
            from playhouse.sqlcipher_ext import SqlCipherDatabase
        except ImportError:
            raise ConfigurationError(
                "A database passphrase is set but SQLCipher is not available. "
                "Install with: pip install sqlcipher3-binary"
            )
        logger.info("SQLCipher encryption enabled")
        return SqlCipherDatabase(
            path,
            passphrase=passphrase,
            pragmas={
                'kdf_iter': 256000,
                'cipher_page_size': 4096,
                'cipher_use_hmac': True,
            }
        )

    logger.warning("No database passphrase set. Running with UNENCRYPTED database!")
    return SqliteDatabase(path, pragmas={'foreign_keys': 1})


class UTCDateTimeField(DateTimeField):
    """Stores instants as naive UTC and hands them back as aware UTC."""

    def db_value(self, value):
        # One fixed format so range filters compare correctly as text
        if isinstance(value, datetime.datetime):
            return ensure_utc(value).strftime('%Y-%m-%d %H:%M:%S.%f')
        return super().db_value(value)

    def python_value(self, value):
        value = super().python_value(value)
        if isinstance(value, datetime.datetime):
            return value.replace(tzinfo=pytz.UTC)
        return value


class BaseModel(Model):
    class Meta:
        database = db


class Employee(BaseModel):
    name = CharField(max_length=100, null=False)
    org_id = CharField(max_length=64, null=False, index=True)
    active = BooleanField(default=True, null=False)
    deleted_at = UTCDateTimeField(null=True)
    created_at = UTCDateTimeField(default=utcnow, null=False)

    def __str__(self):
        return f"{self.name} ({self.id})"

    def to_record(self) -> EmployeeRecord:
        return EmployeeRecord(
            id=self.id,
            name=self.name,
            active=self.active,
            deleted_at=self.deleted_at,
            org_id=self.org_id,
        )


class TimeEntry(BaseModel):
    employee = ForeignKeyField(Employee, backref='time_entries', on_delete='CASCADE', null=False)
    direction = CharField(max_length=3, null=False)  # 'in' or 'out'
    created_at = UTCDateTimeField(default=utcnow, null=False, index=True)

    class Meta:
        indexes = (
            (('employee', 'created_at'), False),
        )

    def __str__(self):
        return f"{self.employee_id} - {self.direction.upper()} @ {self.created_at}"

    def to_record(self) -> TimeEntryRecord:
        return TimeEntryRecord(
            id=self.id,
            employee_id=self.employee_id,
            direction=self.direction,
            created_at=self.created_at,
        )


class SchedulerFlag(BaseModel):
    """Durable key/value row, e.g. the auto clock-out 'last fired date'."""
    key = CharField(max_length=100, primary_key=True)
    value = CharField(max_length=100, null=False)
    updated_at = UTCDateTimeField(default=utcnow, null=False)


MODELS = [Employee, TimeEntry, SchedulerFlag]


def _store_call(func):
    """Re-raise peewee failures as TransientStoreError."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            ensure_db_connection()
            return func(*args, **kwargs)
        except PeeweeException as e:
            logger.error(f"Store operation {func.__name__} failed: {e}")
            raise TransientStoreError(str(e)) from e
    return wrapper


def ensure_db_connection():
    """Ensure database connection is open"""
    if db.is_closed():
        db.connect(reuse_if_open=True)
        logger.debug("Database connection opened")


def initialize_db(path: str = "bundy.db", passphrase: Optional[str] = None):
    """Bind the database, open the connection and create tables"""
    db.initialize(_get_database(path, passphrase))
    try:
        ensure_db_connection()
        db.create_tables(MODELS, safe=True)
        logger.info(f"Database initialized successfully ({path})")
    except PeeweeException as e:
        logger.error(f"Database initialization failed: {e}")
        raise TransientStoreError(str(e)) from e


def close_db():
    """Close database connection, ensuring all data is committed"""
    if db.obj is None or db.is_closed():
        return
    try:
        db.commit()
    finally:
        db.close()
        logger.info("Database connection closed")


class EventStore:
    """Append-only access to the time entry log"""

    @_store_call
    def insert(self, employee_id: int, direction: str,
               created_at: Optional[datetime.datetime] = None) -> TimeEntryRecord:
        if direction not in DIRECTIONS:
            raise ValidationError(f"Invalid direction: {direction}. Must be 'in' or 'out'")
        created_at = ensure_utc(created_at) if created_at else utcnow()
        with db.atomic():
            entry = TimeEntry.create(employee=employee_id, direction=direction, created_at=created_at)
        logger.info(f"Time entry created: employee {employee_id} - {direction.upper()} @ {created_at}")
        return entry.to_record()

    @_store_call
    def query(self, employee_ids: Optional[Iterable[int]] = None,
              start: Optional[datetime.datetime] = None,
              end: Optional[datetime.datetime] = None,
              order: str = 'desc') -> List[TimeEntryRecord]:
        """
        Entries filtered by employee set and inclusive [start, end] range.

        Ordered by created_at, ties broken by insertion id in the same direction.
        """
        query = TimeEntry.select()
        if employee_ids is not None:
            employee_ids = list(employee_ids)
            if not employee_ids:
                return []
            query = query.where(TimeEntry.employee.in_(employee_ids))
        if start is not None:
            query = query.where(TimeEntry.created_at >= start)
        if end is not None:
            query = query.where(TimeEntry.created_at <= end)
        if order == 'asc':
            query = query.order_by(TimeEntry.created_at.asc(), TimeEntry.id.asc())
        elif order == 'desc':
            query = query.order_by(TimeEntry.created_at.desc(), TimeEntry.id.desc())
        else:
            raise ValidationError(f"Invalid order: {order}. Must be 'asc' or 'desc'")
        return [entry.to_record() for entry in query]


class EmployeeDirectory:
    """Read-only view of the employees in one organization"""

    def __init__(self, org_id: str):
        self.org_id = org_id

    @_store_call
    def list_employees(self, active_only: bool = True) -> List[EmployeeRecord]:
        query = Employee.select().where(Employee.org_id == self.org_id)
        if active_only:
            query = query.where(Employee.active == True, Employee.deleted_at.is_null())
        return [employee.to_record() for employee in query.order_by(Employee.name, Employee.id)]

    @_store_call
    def get_employee(self, employee_id: int) -> Optional[EmployeeRecord]:
        employee = Employee.get_or_none(Employee.id == employee_id, Employee.org_id == self.org_id)
        return employee.to_record() if employee else None


class FlagStore:
    """Durable string flags that survive process restarts"""

    @_store_call
    def get(self, key: str) -> Optional[str]:
        flag = SchedulerFlag.get_or_none(SchedulerFlag.key == key)
        return flag.value if flag else None

    @_store_call
    def set(self, key: str, value: str) -> None:
        with db.atomic():
            (SchedulerFlag
             .insert(key=key, value=value, updated_at=utcnow())
             .on_conflict_replace()
             .execute())
        logger.debug(f"Flag {key} set to {value}")
