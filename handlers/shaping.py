"""Helpers shared by every handler family: clocks, ISO shaping, ownership."""

from datetime import datetime, timezone, timedelta

from models import db
from errors import NotFoundError, ForbiddenError

DAY_MS = 24 * 60 * 60 * 1000


def now_ms():
    return int(datetime.now(timezone.utc).timestamp() * 1000)


def to_ms(value):
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return int(value.timestamp() * 1000)


def iso(ms):
    # Same shape as JavaScript's toISOString(): millisecond precision, Z suffix
    if ms is None:
        return None
    dt = datetime.fromtimestamp(ms / 1000, tz=timezone.utc)
    return dt.isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def day_start_ms(ms):
    dt = datetime.fromtimestamp(ms / 1000, tz=timezone.utc)
    midnight = datetime(dt.year, dt.month, dt.day, tzinfo=timezone.utc)
    return int(midnight.timestamp() * 1000)


def today_ms():
    return day_start_ms(now_ms())


def days_ago_ms(days):
    return to_ms(datetime.now(timezone.utc) - timedelta(days=days))


def stamp_new(record):
    now = now_ms()
    record.created_at = now
    record.updated_at = now
    return record


def touch(record):
    # updated_at never moves backwards, even if the wall clock does
    record.updated_at = max(now_ms(), record.updated_at or 0, record.created_at or 0)


def get_owned(model, record_id, user_id, label=None):
    label = label or model.__name__
    record = db.session.get(model, record_id) if record_id is not None else None
    if record is None:
        raise NotFoundError(f"{label} not found")
    if record.user_id != user_id:
        raise ForbiddenError()
    return record


def find_owned(model, record_id, user_id):
    """Like get_owned, but a missing or foreign record is just None."""
    if record_id is None:
        return None
    record = db.session.get(model, record_id)
    if record is None or record.user_id != user_id:
        return None
    return record


def apply_patch(record, changes, nullable=()):
    """Copy the given fields onto ``record``.

    ``None`` only clears a field listed in ``nullable``; for required
    columns it means "leave as is".
    """
    for key, value in changes.items():
        if value is None and key not in nullable:
            continue
        setattr(record, key, value)


def summary(record, *fields):
    if record is None:
        return None
    data = {'id': record.id}
    for field in fields:
        data[field] = getattr(record, field)
    return data
