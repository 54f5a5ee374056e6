from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
import logging
import secrets

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from linkshelf.database import session_scope
from linkshelf.models.session import SessionEntry

LOGGER = logging.getLogger(__name__)


class DeletionOutcome(str, Enum):
    DELETED = "deleted"
    NOT_FOUND = "not_found"
    FAILED = "failed"


@dataclass(frozen=True)
class SessionRecord:
    token: str
    user_id: int
    created_at: datetime
    expires_at: datetime


def mask_token(token: str) -> str:
    if len(token) <= 8:
        return "***"
    return f"{token[:6]}..."


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes even for timezone-aware columns.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class SessionStore:
    def __init__(self, session_factory: sessionmaker, ttl_days: int) -> None:
        self._session_factory = session_factory
        self._ttl_days = ttl_days

    def create_session(self, user_id: int) -> str:
        now = datetime.now(timezone.utc)
        token = secrets.token_urlsafe(32)
        expires_at = now + timedelta(days=self._ttl_days)
        with session_scope(self._session_factory) as session:
            session.execute(delete(SessionEntry).where(SessionEntry.expires_at <= now))
            session.add(
                SessionEntry(
                    token=token,
                    user_id=user_id,
                    created_at=now,
                    expires_at=expires_at,
                )
            )
        LOGGER.info("Created session user_id=%s token=%s", user_id, mask_token(token))
        return token

    def lookup_session(self, token: str) -> SessionRecord | None:
        if not token:
            return None
        now = datetime.now(timezone.utc)
        with session_scope(self._session_factory) as session:
            expired = session.execute(
                delete(SessionEntry).where(
                    SessionEntry.token == token,
                    SessionEntry.expires_at <= now,
                )
            )
            if expired.rowcount:
                LOGGER.info("Dropped expired session token=%s", mask_token(token))
                return None
            entry = session.execute(
                select(SessionEntry).where(SessionEntry.token == token)
            ).scalar_one_or_none()
            if entry is None:
                return None
            return SessionRecord(
                token=entry.token,
                user_id=entry.user_id,
                created_at=_as_utc(entry.created_at),
                expires_at=_as_utc(entry.expires_at),
            )

    def delete_session(self, token: str) -> DeletionOutcome:
        # Absent records and database failures are outcomes, not exceptions.
        try:
            with session_scope(self._session_factory) as session:
                result = session.execute(
                    delete(SessionEntry).where(SessionEntry.token == token)
                )
                deleted = result.rowcount > 0
        except SQLAlchemyError:
            LOGGER.exception("Failed to delete session token=%s", mask_token(token))
            return DeletionOutcome.FAILED
        if not deleted:
            return DeletionOutcome.NOT_FOUND
        return DeletionOutcome.DELETED
