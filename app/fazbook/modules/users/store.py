from __future__ import annotations

import itertools
import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime

from flask import current_app
from sqlalchemy import delete, select
from sqlalchemy.orm import sessionmaker

from app.fazbook.db import unit_of_work
from app.fazbook.modules.users.models import User
from app.fazbook.modules.users.service import UserPayload

logger = logging.getLogger(__name__)

# Upper bound of the users.id column (32-bit INTEGER).
MAX_USER_ID = 2_147_483_647


def _storable_id(user_id: int) -> bool:
    return 0 < user_id <= MAX_USER_ID


class UserStore:
    """
    Persistence interface for User records.

    Every method is a single unit of work; callers never hold a transaction
    across two calls.
    """

    def find_all(self) -> list[User]:
        raise NotImplementedError

    def find_by_id(self, user_id: int) -> User | None:
        raise NotImplementedError

    def create(self, payload: UserPayload) -> User:
        raise NotImplementedError

    def update(self, user_id: int, payload: UserPayload) -> User | None:
        """Overwrite the four profile fields. Returns None when the id does not resolve."""
        raise NotImplementedError

    def destroy(self, user_id: int) -> bool:
        """Remove the record. Returns whether a row was removed."""
        raise NotImplementedError


@dataclass(frozen=True)
class SqlUserStore(UserStore):
    sm: sessionmaker

    def find_all(self) -> list[User]:
        with unit_of_work(self.sm) as s:
            return list(s.scalars(select(User).order_by(User.id.asc())).all())

    def find_by_id(self, user_id: int) -> User | None:
        if not _storable_id(user_id):
            return None
        with unit_of_work(self.sm) as s:
            return s.get(User, user_id)

    def create(self, payload: UserPayload) -> User:
        now = datetime.utcnow()
        with unit_of_work(self.sm) as s:
            user = User(**payload.as_columns(), created_at=now, updated_at=now)
            s.add(user)
            s.flush()
        logger.info("user.create id=%s", user.id)
        return user

    def update(self, user_id: int, payload: UserPayload) -> User | None:
        if not _storable_id(user_id):
            return None
        with unit_of_work(self.sm) as s:
            user = s.get(User, user_id)
            if user is None:
                return None
            for attr, value in payload.as_columns().items():
                setattr(user, attr, value)
            user.updated_at = datetime.utcnow()
        logger.info("user.update id=%s", user_id)
        return user

    def destroy(self, user_id: int) -> bool:
        if not _storable_id(user_id):
            logger.info("user.destroy id=%s removed=False (out of range)", user_id)
            return False
        with unit_of_work(self.sm) as s:
            result = s.execute(delete(User).where(User.id == user_id))
            removed = (result.rowcount or 0) > 0
        logger.info("user.destroy id=%s removed=%s", user_id, removed)
        return removed


@dataclass
class MemoryUserStore(UserStore):
    """Dict-backed store. Hands out detached copies so callers cannot mutate stored rows."""

    _rows: dict[int, dict[str, object]] = field(default_factory=dict)
    _ids: itertools.count = field(default_factory=lambda: itertools.count(1))
    _lock: threading.Lock = field(default_factory=threading.Lock)

    @staticmethod
    def _to_user(row: dict[str, object]) -> User:
        return User(**row)

    def find_all(self) -> list[User]:
        with self._lock:
            return [self._to_user(self._rows[k]) for k in sorted(self._rows)]

    def find_by_id(self, user_id: int) -> User | None:
        with self._lock:
            row = self._rows.get(user_id)
            return self._to_user(row) if row is not None else None

    def create(self, payload: UserPayload) -> User:
        now = datetime.utcnow()
        with self._lock:
            user_id = next(self._ids)
            row = {"id": user_id, **payload.as_columns(), "created_at": now, "updated_at": now}
            self._rows[user_id] = row
            return self._to_user(row)

    def update(self, user_id: int, payload: UserPayload) -> User | None:
        with self._lock:
            row = self._rows.get(user_id)
            if row is None:
                return None
            row.update(payload.as_columns())
            row["updated_at"] = datetime.utcnow()
            return self._to_user(row)

    def destroy(self, user_id: int) -> bool:
        with self._lock:
            return self._rows.pop(user_id, None) is not None


def user_store() -> UserStore:
    """The store injected into the running app."""
    return current_app.extensions["user_store"]
