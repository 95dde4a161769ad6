from __future__ import annotations

from typing import Iterable, List, Optional, Set

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from journalfeed.errors import StorageError
from journalfeed.model.summary import Summary
from journalfeed.database.db.session import SessionLocal
from journalfeed.database.db.models import SummaryRow


class SummaryRepository:
    """Append-only store of AI summaries."""

    def __init__(self, session_factory: Optional[sessionmaker] = None):
        self._session_factory = session_factory or SessionLocal

    def insert(self, summary: Summary) -> Summary:
        try:
            with self._session_factory() as db:
                db.add(
                    SummaryRow(
                        id=summary.id,
                        paper_id=summary.paper_id,
                        ai_provider=summary.ai_provider,
                        ai_model=summary.ai_model,
                        purpose=summary.purpose,
                        methodology=summary.methodology,
                        findings=summary.findings,
                        implications=summary.implications,
                        summary_text=summary.summary_text,
                        created_at=summary.created_at,
                    )
                )
                db.commit()
            return summary
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to save summary for paper {summary.paper_id}: {e}") from e

    def list_by_paper(self, paper_id: str) -> List[Summary]:
        """Newest first."""
        try:
            with self._session_factory() as db:
                rows = db.execute(
                    select(SummaryRow)
                    .where(SummaryRow.paper_id == paper_id)
                    .order_by(SummaryRow.created_at.desc())
                ).scalars().all()
                return [
                    Summary(
                        id=r.id,
                        paper_id=r.paper_id,
                        ai_provider=r.ai_provider,
                        ai_model=r.ai_model,
                        purpose=r.purpose,
                        methodology=r.methodology,
                        findings=r.findings,
                        implications=r.implications,
                        summary_text=r.summary_text,
                        created_at=r.created_at,
                    )
                    for r in rows
                ]
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to list summaries for paper {paper_id}: {e}") from e

    def paper_ids_with_summaries(self, paper_ids: Iterable[str]) -> Set[str]:
        """Subset of `paper_ids` that have at least one summary."""
        ids = list(paper_ids)
        if not ids:
            return set()
        try:
            with self._session_factory() as db:
                rows = db.execute(
                    select(SummaryRow.paper_id).where(SummaryRow.paper_id.in_(ids)).distinct()
                ).scalars().all()
                return set(rows)
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to look up summaries: {e}") from e
