# massage_api/services/dates.py
from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Optional

from sqlalchemy import and_, func, or_

from massage_api.common.errors import InvalidArgument
from massage_api.models.sale import REPR_EPOCH, REPR_NATIVE, SalesRecord

"""
Sales records carry their timestamp in one of two shapes:

  native : occurred_at                              (naive UTC DateTime)
  epoch  : occurred_epoch_seconds + occurred_nanos  (legacy import pair)

Everything that reads or compares a sale's time goes through normalize();
range queries build one predicate per representation and OR them.
"""

EPOCH = datetime(1970, 1, 1)
REPRESENTATIONS = (REPR_NATIVE, REPR_EPOCH)
_DATE_ONLY = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


@dataclass(frozen=True)
class Boundary:
    instant: datetime
    date_only: bool


# ---------- conversions ----------
def _naive_utc(dt: datetime) -> datetime:
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt


def to_epoch_pair(dt: datetime) -> tuple[int, int]:
    delta = _naive_utc(dt) - EPOCH
    return delta.days * 86400 + delta.seconds, delta.microseconds * 1000


def from_epoch_pair(seconds, nanos=0) -> datetime:
    # datetime has microsecond resolution; the sub-microsecond remainder is dropped
    return EPOCH + timedelta(seconds=int(seconds), microseconds=int(nanos or 0) // 1000)


def normalize(record: SalesRecord) -> Optional[datetime]:
    """Canonical naive-UTC datetime for a stored record, whatever its representation."""
    if record.occurred_repr == REPR_EPOCH:
        if record.occurred_epoch_seconds is None:
            return None
        return from_epoch_pair(record.occurred_epoch_seconds, record.occurred_nanos)
    return record.occurred_at


def store_occurred_at(record: SalesRecord, dt: datetime, representation: str):
    """Write `dt` onto the record using the given representation, clearing the other one."""
    if representation == REPR_EPOCH:
        seconds, nanos = to_epoch_pair(dt)
        record.occurred_repr = REPR_EPOCH
        record.occurred_epoch_seconds = seconds
        record.occurred_nanos = nanos
        record.occurred_at = None
    else:
        record.occurred_repr = REPR_NATIVE
        record.occurred_at = _naive_utc(dt)
        record.occurred_epoch_seconds = None
        record.occurred_nanos = None


def isoformat(dt: Optional[datetime]) -> Optional[str]:
    if dt is None:
        return None
    return dt.isoformat(timespec="milliseconds") + "Z"


# ---------- parsing ----------
def _parse_string(raw: str, field: str) -> Boundary:
    s = raw.strip()
    if not s:
        raise InvalidArgument(f"{field} must not be empty")
    try:
        if _DATE_ONLY.match(s):
            d = date.fromisoformat(s)
            return Boundary(datetime(d.year, d.month, d.day), True)
        if s.endswith(("Z", "z")):
            s = s[:-1] + "+00:00"
        return Boundary(_naive_utc(datetime.fromisoformat(s)), False)
    except (ValueError, OverflowError):
        raise InvalidArgument(f"{field} is not a valid date: {raw!r}")


def parse_boundary(value, field: str = "date") -> Optional[Boundary]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return Boundary(_naive_utc(value), False)
    if isinstance(value, date):
        return Boundary(datetime(value.year, value.month, value.day), True)
    if isinstance(value, str):
        return _parse_string(value, field)
    raise InvalidArgument(f"{field} is not a valid date: {value!r}")


def parse_occurred_at(value, field: str = "date") -> datetime:
    """
    Accepts an ISO date or datetime string, a datetime, or a legacy epoch pair
    mapping ({"seconds", "nanoseconds"} or {"_seconds", "_nanoseconds"}).
    """
    if value is None or value == "":
        raise InvalidArgument(f"{field} is required")
    if isinstance(value, dict):
        seconds = value.get("seconds", value.get("_seconds"))
        nanos = value.get("nanoseconds", value.get("_nanoseconds", 0))
        if isinstance(seconds, bool) or isinstance(nanos, bool):
            raise InvalidArgument(f"{field} epoch pair must be numeric")
        try:
            seconds, nanos = int(seconds), int(nanos or 0)
        except (TypeError, ValueError):
            raise InvalidArgument(f"{field} epoch pair must be numeric")
        if not 0 <= nanos < 1_000_000_000:
            raise InvalidArgument(f"{field} nanoseconds must be in [0, 1e9)")
        try:
            return from_epoch_pair(seconds, nanos)
        except (OverflowError, ValueError):
            raise InvalidArgument(f"{field} epoch pair is out of range")
    return parse_boundary(value, field).instant


# ---------- range predicate ----------
def upper_limit(end: Optional[Boundary]) -> tuple[Optional[datetime], bool]:
    """
    (limit, inclusive) for an end boundary.

    A date-only end becomes the exclusive start of the following day. The last
    representable day has no following day, so it leaves the range unbounded.
    """
    if end is None:
        return None, True
    if not end.date_only:
        return end.instant, True
    try:
        return end.instant + timedelta(days=1), False
    except OverflowError:
        return None, False


def _epoch_after(b: datetime):
    sec, ns = to_epoch_pair(b)
    col, nanos = SalesRecord.occurred_epoch_seconds, func.coalesce(SalesRecord.occurred_nanos, 0)
    return or_(col > sec, and_(col == sec, nanos >= ns))


def _epoch_before(b: datetime, inclusive: bool):
    sec, ns = to_epoch_pair(b)
    col, nanos = SalesRecord.occurred_epoch_seconds, func.coalesce(SalesRecord.occurred_nanos, 0)
    tail = nanos <= ns if inclusive else nanos < ns
    return or_(col < sec, and_(col == sec, tail))


def range_condition(start: Optional[Boundary], end: Optional[Boundary]):
    """
    SQL predicate for start <= occurred <= end over both representations.

    A date-only end covers its whole calendar day (< end + 24h).
    Returns None when neither boundary is given.
    """
    if start is None and end is None:
        return None

    native = [SalesRecord.occurred_repr == REPR_NATIVE]
    epoch = [SalesRecord.occurred_repr == REPR_EPOCH]

    if start is not None:
        native.append(SalesRecord.occurred_at >= start.instant)
        epoch.append(_epoch_after(start.instant))

    limit, inclusive = upper_limit(end)
    if limit is not None:
        if inclusive:
            native.append(SalesRecord.occurred_at <= limit)
        else:
            native.append(SalesRecord.occurred_at < limit)
        epoch.append(_epoch_before(limit, inclusive=inclusive))

    return or_(and_(*native), and_(*epoch))
