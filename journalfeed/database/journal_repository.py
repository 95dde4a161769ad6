from __future__ import annotations

from typing import List, Optional
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from journalfeed.errors import StorageError
from journalfeed.model.journal import Journal
from journalfeed.database.db.session import SessionLocal
from journalfeed.database.db.models import JournalRow


def _to_journal(row: JournalRow) -> Journal:
    return Journal(
        id=row.id,
        name=row.name,
        rss_url=row.rss_url,
        category=row.category,
        color=row.color,
        is_active=bool(row.is_active),
        last_fetched_at=row.last_fetched_at,
    )


class JournalRepository:
    """
    Source registry.

    Consulted, never edited, by the fetch pipeline; the only write the
    pipeline performs is `touch_last_fetch`.
    """

    def __init__(self, session_factory: Optional[sessionmaker] = None):
        self._session_factory = session_factory or SessionLocal

    def list_active(self) -> List[Journal]:
        return self._list(active_only=True)

    def list_all(self) -> List[Journal]:
        return self._list(active_only=False)

    def _list(self, active_only: bool) -> List[Journal]:
        try:
            with self._session_factory() as db:
                query = select(JournalRow).order_by(JournalRow.name.asc())
                if active_only:
                    query = query.where(JournalRow.is_active.is_(True))
                rows = db.execute(query).scalars().all()
                return [_to_journal(r) for r in rows]
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to list journals: {e}") from e

    def get(self, journal_id: str) -> Optional[Journal]:
        try:
            with self._session_factory() as db:
                row = db.get(JournalRow, journal_id)
                return _to_journal(row) if row else None
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to load journal {journal_id}: {e}") from e

    def touch_last_fetch(self, journal_id: str, fetched_at: datetime) -> None:
        try:
            with self._session_factory() as db:
                row = db.get(JournalRow, journal_id)
                if not row:
                    return
                row.last_fetched_at = fetched_at
                db.commit()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to update last fetch of {journal_id}: {e}") from e

    def upsert(self, journal: Journal) -> None:
        """
        Insert or update a journal definition (admin / seeding only).
        """
        try:
            with self._session_factory() as db:
                row = db.get(JournalRow, journal.id)
                if row is None:
                    row = JournalRow(id=journal.id)
                    db.add(row)
                row.name = journal.name
                row.rss_url = journal.rss_url
                row.category = journal.category
                row.color = journal.color
                row.is_active = journal.is_active
                db.commit()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to save journal {journal.id}: {e}") from e
