from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.orm import sessionmaker

from linkshelf.database import session_scope
from linkshelf.models.user import UserEntry
from linkshelf.schemas.users import UserSummary


def _normalize_email(email: str) -> str:
    return email.strip().lower()


class UserStore:
    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory

    def ensure_user(
        self, email: str, name: str | None = None, verified: bool = True
    ) -> UserSummary:
        key = _normalize_email(email)
        if not key or "@" not in key:
            raise ValueError("A valid email is required")
        now = datetime.now(timezone.utc)
        with session_scope(self._session_factory) as session:
            entry = session.execute(
                select(UserEntry).where(UserEntry.email == key)
            ).scalar_one_or_none()
            if entry is None:
                entry = UserEntry(
                    email=key,
                    name=name,
                    email_verified_at=now if verified else None,
                    created_at=now,
                )
                session.add(entry)
            else:
                if name and not entry.name:
                    entry.name = name
                if verified and entry.email_verified_at is None:
                    entry.email_verified_at = now
            session.flush()
            return self._to_summary(entry)

    def get_verified_user(self, user_id: int) -> UserSummary | None:
        with session_scope(self._session_factory) as session:
            entry = session.get(UserEntry, user_id)
            if entry is None or entry.email_verified_at is None:
                return None
            return self._to_summary(entry)

    def _to_summary(self, entry: UserEntry) -> UserSummary:
        return UserSummary(id=entry.id, name=entry.name, email=entry.email)
