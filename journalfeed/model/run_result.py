from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class JournalFetchResult(BaseModel):
    """Outcome of one per-journal fetch + store."""

    journal_id: str
    journal_name: str = ""
    success: bool = False
    papers_fetched: int = 0
    new_papers: int = 0
    skipped_entries: int = 0
    failed_inserts: int = 0
    error: Optional[str] = None
    skipped: bool = False

    @classmethod
    def skipped_run(cls, journal_id: str) -> "JournalFetchResult":
        return cls(journal_id=journal_id, skipped=True)


class RunResult(BaseModel):
    """Aggregate outcome of a full ingestion pass (not persisted)."""

    total: int = 0
    success: int = 0
    failed: int = 0
    new_papers: int = 0
    details: List[JournalFetchResult] = Field(default_factory=list)
    skipped: bool = False
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None

    @classmethod
    def skipped_run(cls) -> "RunResult":
        return cls(skipped=True)

    @classmethod
    def aggregate(
        cls,
        details: List[JournalFetchResult],
        started_at: datetime,
        finished_at: datetime,
    ) -> "RunResult":
        succeeded = sum(1 for d in details if d.success)
        return cls(
            total=len(details),
            success=succeeded,
            failed=len(details) - succeeded,
            new_papers=sum(d.new_papers for d in details),
            details=details,
            started_at=started_at,
            finished_at=finished_at,
        )


class SchedulerStatus(BaseModel):
    is_running: bool
    last_run_at: Optional[datetime] = None
    next_run_at: Optional[datetime] = None
    enabled: bool = False


class FetchLog(BaseModel):
    id: Optional[int] = None
    journal_id: str
    status: str
    papers_fetched: int = 0
    new_papers: int = 0
    error_message: Optional[str] = None
    created_at: Optional[datetime] = None
