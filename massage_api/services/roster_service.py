# massage_api/services/roster_service.py
from __future__ import annotations

import enum
import logging

from massage_api.common.errors import Conflict, InvalidArgument, NotFound
from massage_api.models.schedule import MonthlySchedule
from massage_api.services.dates import isoformat

log = logging.getLogger(__name__)

MAX_UPSERT_ATTEMPTS = 3


class RosterMergePolicy(str, enum.Enum):
    """
    How an upsert treats an existing roster.

    PARTIAL_MERGE : only the grid is replaced; summary and created_at are kept.
    FULL_REPLACE  : the grid is replaced, and summary too when one is supplied.

    On creation PARTIAL_MERGE starts with an empty summary, FULL_REPLACE keeps
    the supplied one. created_at is server-set once and never taken from input.
    """
    PARTIAL_MERGE = "partial-merge"
    FULL_REPLACE = "full-replace"

    @classmethod
    def parse(cls, value) -> "RosterMergePolicy":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            allowed = ", ".join(p.value for p in cls)
            raise ValueError(f"unknown roster merge policy {value!r} (expected one of: {allowed})")


def _as_int(val, field_name, lo, hi):
    if isinstance(val, bool) or val is None or val == "":
        raise InvalidArgument(f"{field_name} is required")
    try:
        n = int(val)
    except (TypeError, ValueError):
        raise InvalidArgument(f"{field_name} must be integer")
    if isinstance(val, float) and val != n:
        raise InvalidArgument(f"{field_name} must be integer")
    if not lo <= n <= hi:
        raise InvalidArgument(f"{field_name} must be between {lo} and {hi}")
    return n


def validate_key(year, month) -> tuple[int, int]:
    return _as_int(year, "year", 1, 9999), _as_int(month, "month", 1, 12)


class RosterService:
    def __init__(self, store, policy=RosterMergePolicy.PARTIAL_MERGE):
        self.store = store
        self.policy = RosterMergePolicy.parse(policy)

    def get_roster(self, year, month) -> MonthlySchedule:
        year, month = validate_key(year, month)
        doc = self.store.find_one(MonthlySchedule, year=year, month=month)
        if doc is None:
            raise NotFound(f"No schedule for {year}-{month:02d}")
        return doc

    def upsert_roster(self, year, month, roster_grid, summary=None) -> tuple[MonthlySchedule, bool]:
        """
        Create the (year, month) roster or update it according to the policy.

        Returns (document, created). A lost creation race (unique constraint on
        year+month) is retried as an update, so at most one row per key exists.
        """
        year, month = validate_key(year, month)
        if roster_grid is None:
            raise InvalidArgument("schedule is required")
        if not isinstance(roster_grid, list):
            raise InvalidArgument("schedule must be an array")
        if summary is not None and not isinstance(summary, list):
            raise InvalidArgument("summary must be an array")

        for attempt in range(1, MAX_UPSERT_ATTEMPTS + 1):
            doc = self.store.find_one(MonthlySchedule, year=year, month=month)
            if doc is not None:
                self._merge(doc, roster_grid, summary)
                self.store.save(doc)
                log.info("roster %s-%02d updated (%s)", year, month, self.policy.value)
                return doc, False

            doc = MonthlySchedule(year=year, month=month, roster_grid=roster_grid,
                                  summary=self._initial_summary(summary))
            try:
                self.store.insert(doc)
            except Conflict:
                log.warning("roster %s-%02d created concurrently; retrying as update (attempt %d)",
                            year, month, attempt)
                continue
            log.info("roster %s-%02d created", year, month)
            return doc, True

        raise Conflict(f"Could not save schedule for {year}-{month:02d}, please retry")

    def _initial_summary(self, summary):
        if self.policy is RosterMergePolicy.FULL_REPLACE and summary is not None:
            return summary
        return []

    def _merge(self, doc: MonthlySchedule, roster_grid, summary):
        doc.roster_grid = roster_grid
        if self.policy is RosterMergePolicy.FULL_REPLACE and summary is not None:
            doc.summary = summary


def schedule_row(doc: MonthlySchedule):
    return {
        "id": doc.id,
        "year": doc.year,
        "month": doc.month,
        "schedule": doc.roster_grid or [],
        "summary": doc.summary or [],
        "createdAt": isoformat(doc.created_at),
    }
