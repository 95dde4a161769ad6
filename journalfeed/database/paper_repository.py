from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Sequence

from sqlalchemy import Select, func, or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from journalfeed.errors import StorageError
from journalfeed.model.paper import Paper
from journalfeed.database.db.session import SessionLocal
from journalfeed.database.db.models import PaperRow


def _to_paper(row: PaperRow) -> Paper:
    return Paper(
        id=row.id,
        journal_id=row.journal_id,
        title=row.title,
        authors=list(row.authors or []),
        abstract=row.abstract or "",
        url=row.url,
        dedup_key=row.dedup_key,
        published_date=row.published_date,
        created_at=row.created_at,
    )


def _to_row(paper: Paper) -> PaperRow:
    return PaperRow(
        id=paper.id,
        journal_id=paper.journal_id,
        title=paper.title,
        authors=list(paper.authors),
        abstract=paper.abstract,
        url=paper.url,
        dedup_key=paper.dedup_key,
        published_date=paper.published_date,
        created_at=paper.created_at,
    )


class PaperRepository:
    """
    Insert-only repository for Paper.

    (journal_id, dedup_key) is unique: enforced by `insert_if_absent`
    and by the uq_papers_journal_dedup constraint.
    """

    def __init__(self, session_factory: Optional[sessionmaker] = None):
        self._session_factory = session_factory or SessionLocal

    # =====================================================
    # Dedup lookups
    # =====================================================

    @staticmethod
    def _exists(db: Session, journal_id: str, dedup_key: str) -> bool:
        found = db.execute(
            select(PaperRow.id)
            .where(PaperRow.journal_id == journal_id, PaperRow.dedup_key == dedup_key)
            .limit(1)
        ).first()
        return found is not None

    def exists_by_dedup_key(self, journal_id: str, dedup_key: str) -> bool:
        try:
            with self._session_factory() as db:
                return self._exists(db, journal_id, dedup_key)
        except SQLAlchemyError as e:
            raise StorageError(f"Dedup lookup failed for {journal_id}/{dedup_key}: {e}") from e

    # =====================================================
    # Insert-only logic (ingest)
    # =====================================================

    def insert(self, paper: Paper) -> None:
        """
        Plain insert. Raises StorageError on any failure, including a
        duplicate (journal_id, dedup_key).
        """
        try:
            with self._session_factory() as db:
                db.add(_to_row(paper))
                db.commit()
        except SQLAlchemyError as e:
            raise StorageError(f"Insert failed for paper {paper.dedup_key}: {e}") from e

    def insert_if_absent(self, paper: Paper) -> bool:
        """
        Existence check + insert in one transaction.

        Returns True when the paper was inserted, False when the key was
        already present (including a concurrent writer winning the race).
        """
        try:
            with self._session_factory() as db:
                if self._exists(db, paper.journal_id, paper.dedup_key):
                    return False
                db.add(_to_row(paper))
                try:
                    db.commit()
                except IntegrityError:
                    db.rollback()
                    return False
                return True
        except SQLAlchemyError as e:
            raise StorageError(f"Insert failed for paper {paper.dedup_key}: {e}") from e

    # =====================================================
    # Reads (API)
    # =====================================================

    def get_paper_by_id(self, paper_id: str) -> Optional[Paper]:
        try:
            with self._session_factory() as db:
                row = db.get(PaperRow, paper_id)
                return _to_paper(row) if row else None
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to load paper {paper_id}: {e}") from e

    def list_recent(
        self,
        journal_ids: Optional[Sequence[str]] = None,
        limit: int = 20,
    ) -> List[Paper]:
        """
        Newest papers first (published date, then insert time).
        """
        return self.search(journal_ids=journal_ids, limit=limit)

    def search(
        self,
        journal_ids: Optional[Sequence[str]] = None,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
        text: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[Paper]:
        """
        Filtered, paginated listing, newest first.

        `date_from` is inclusive, `date_to` exclusive; both apply to the
        published date, so undated papers drop out once either is set.
        `text` matches title or abstract, case-insensitively.
        """
        try:
            with self._session_factory() as db:
                query = _apply_filters(select(PaperRow), journal_ids, date_from, date_to, text)
                query = (
                    query.order_by(
                        PaperRow.published_date.desc(),
                        PaperRow.created_at.desc(),
                        PaperRow.id.asc(),
                    )
                    .offset(offset)
                    .limit(limit)
                )
                rows = db.execute(query).scalars().all()
                return [_to_paper(r) for r in rows]
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to list papers: {e}") from e

    def count(
        self,
        journal_ids: Optional[Sequence[str]] = None,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
        text: Optional[str] = None,
    ) -> int:
        """Number of papers `search` would page through."""
        try:
            with self._session_factory() as db:
                query = select(func.count()).select_from(PaperRow)
                query = _apply_filters(query, journal_ids, date_from, date_to, text)
                return db.scalar(query) or 0
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to count papers: {e}") from e


def _apply_filters(
    query: Select,
    journal_ids: Optional[Sequence[str]],
    date_from: Optional[datetime],
    date_to: Optional[datetime],
    text: Optional[str],
) -> Select:
    if journal_ids:
        query = query.where(PaperRow.journal_id.in_(list(journal_ids)))
    if date_from is not None:
        query = query.where(PaperRow.published_date >= date_from)
    if date_to is not None:
        query = query.where(PaperRow.published_date < date_to)
    if text and text.strip():
        pattern = "%" + _escape_like(text.strip()) + "%"
        query = query.where(
            or_(
                PaperRow.title.ilike(pattern, escape="\\"),
                PaperRow.abstract.ilike(pattern, escape="\\"),
            )
        )
    return query


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
