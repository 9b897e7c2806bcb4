# massage_api/store/gateway.py
from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import Iterable

from sqlalchemy import Index, select, text
from sqlalchemy.exc import (
    DBAPIError,
    DisconnectionError,
    IntegrityError,
    InterfaceError,
    OperationalError,
    SQLAlchemyError,
)

from massage_api.common.errors import Conflict, Internal, Unavailable

log = logging.getLogger(__name__)


class StoreGateway:
    """
    Thin capability over the SQLAlchemy session.

    Business rules live in the services; the gateway only fetches, writes and
    translates driver failures into the API error taxonomy:

      IntegrityError                         -> Conflict
      OperationalError / InterfaceError /
      DisconnectionError                     -> Unavailable (and marks us disconnected)
      any other SQLAlchemyError              -> Internal
    """

    def __init__(self, db, ping_interval: float = 5.0):
        self.db = db
        self.ping_interval = ping_interval
        self._available = True
        self._checked_at = None

    @property
    def session(self):
        return self.db.session

    # ---------- connectivity ----------
    def ping(self) -> bool:
        try:
            self.session.execute(text("SELECT 1"))
        except (DBAPIError, DisconnectionError) as e:
            self.session.rollback()
            self._mark_unavailable(e)
        else:
            if not self._available:
                log.info("store connection restored")
            self._available = True
        self._checked_at = time.monotonic()
        return self._available

    def is_available(self) -> bool:
        if self._checked_at is not None and time.monotonic() - self._checked_at < self.ping_interval:
            return self._available
        return self.ping()

    def _mark_unavailable(self, e: Exception):
        if self._available:
            log.warning("store connection lost: %s", e)
        self._available = False
        self._checked_at = time.monotonic()

    @contextmanager
    def _translate(self, what: str):
        try:
            yield
        except IntegrityError as e:
            self.session.rollback()
            log.warning("%s: constraint violated: %s", what, e.orig if e.orig is not None else e)
            raise Conflict(f"{what}: record already exists") from e
        except (OperationalError, InterfaceError, DisconnectionError) as e:
            self.session.rollback()
            self._mark_unavailable(e)
            raise Unavailable("Database unavailable, please retry later") from e
        except SQLAlchemyError as e:
            self.session.rollback()
            log.exception("%s failed", what)
            raise Internal(f"{what} failed", payload=str(e)) from e

    # ---------- reads ----------
    def get(self, model, key):
        with self._translate(f"get {model.__tablename__}"):
            return self.session.get(model, key)

    def find_one(self, model, **criteria):
        with self._translate(f"find {model.__tablename__}"):
            return self.session.execute(
                select(model).filter_by(**criteria).limit(1)
            ).scalars().first()

    def find(self, model, *conditions, order_by: Iterable = ()):
        with self._translate(f"find {model.__tablename__}"):
            stmt = select(model)
            if conditions:
                stmt = stmt.where(*conditions)
            stmt = stmt.order_by(*order_by)
            return list(self.session.execute(stmt).scalars())

    # ---------- writes ----------
    def insert(self, obj):
        """
        Add and commit a new row. A unique-constraint loss rolls the session
        back (the pending row is discarded) and surfaces as Conflict, so the
        caller may retry as an update.
        """
        with self._translate(f"insert {obj.__tablename__}"):
            self.session.add(obj)
            self.session.commit()
        return obj

    def save(self, obj=None):
        """Commit pending changes (an update of an already-loaded row)."""
        what = f"save {obj.__tablename__}" if obj is not None else "save"
        with self._translate(what):
            if obj is not None:
                self.session.add(obj)
            self.session.commit()
        return obj

    def delete(self, obj):
        with self._translate(f"delete {obj.__tablename__}"):
            self.session.delete(obj)
            self.session.commit()

    def rollback(self):
        self.session.rollback()

    # ---------- schema ----------
    def ensure_unique_index(self, model, name: str, *columns: str):
        table = model.__table__
        idx = next((i for i in table.indexes if i.name == name), None)
        if idx is None:
            idx = Index(name, *[table.c[c] for c in columns], unique=True)
            # keep the model metadata as declared
            table.indexes.discard(idx)
        with self._translate(f"create index {name}"):
            idx.create(bind=self.db.engine, checkfirst=True)
        log.info("unique index %s on %s(%s) ensured", name, table.name, ", ".join(columns))
