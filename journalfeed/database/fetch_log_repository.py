from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from journalfeed.errors import StorageError
from journalfeed.model.run_result import FetchLog, JournalFetchResult
from journalfeed.database.db.session import SessionLocal
from journalfeed.database.db.models import FetchLogRow


class FetchLogRepository:
    """
    History of per-journal fetch attempts (admin view).
    """

    def __init__(self, session_factory: Optional[sessionmaker] = None):
        self._session_factory = session_factory or SessionLocal

    def add(self, result: JournalFetchResult) -> None:
        try:
            with self._session_factory() as db:
                db.add(
                    FetchLogRow(
                        journal_id=result.journal_id,
                        status="success" if result.success else "error",
                        papers_fetched=result.papers_fetched,
                        new_papers=result.new_papers,
                        error_message=result.error,
                    )
                )
                db.commit()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to write fetch log for {result.journal_id}: {e}") from e

    def list_recent(self, limit: int = 50) -> List[FetchLog]:
        try:
            with self._session_factory() as db:
                rows = db.execute(
                    select(FetchLogRow)
                    .order_by(FetchLogRow.created_at.desc(), FetchLogRow.id.desc())
                    .limit(limit)
                ).scalars().all()
                return [
                    FetchLog(
                        id=r.id,
                        journal_id=r.journal_id,
                        status=r.status,
                        papers_fetched=r.papers_fetched or 0,
                        new_papers=r.new_papers or 0,
                        error_message=r.error_message,
                        created_at=r.created_at,
                    )
                    for r in rows
                ]
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to list fetch logs: {e}") from e
