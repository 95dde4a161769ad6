from datetime import date, datetime, time, timedelta, timezone
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from api.deps import get_journal_repo, get_paper_repo, get_summary_repo
from api.schemas.paper import PaginationMeta, PaperListItem, PaperListResponse
from journalfeed.database.journal_repository import JournalRepository
from journalfeed.database.paper_repository import PaperRepository
from journalfeed.database.summary_repository import SummaryRepository

router = APIRouter(prefix="/api/papers", tags=["papers"])


def _split_ids(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


def _start_of(day: Optional[date]) -> Optional[datetime]:
    if day is None:
        return None
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


@router.get("", response_model=PaperListResponse)
def list_papers(
    journals: Optional[str] = Query(default=None, description="Comma-separated journal ids"),
    date_from: Optional[date] = Query(default=None),
    date_to: Optional[date] = Query(default=None, description="Inclusive"),
    search: Optional[str] = Query(default=None),
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    repo: PaperRepository = Depends(get_paper_repo),
    journal_repo: JournalRepository = Depends(get_journal_repo),
    summary_repo: SummaryRepository = Depends(get_summary_repo),
):
    """List stored papers, newest first."""
    filters = dict(
        journal_ids=_split_ids(journals),
        date_from=_start_of(date_from),
        # whole last day included
        date_to=_start_of(date_to + timedelta(days=1)) if date_to else None,
        text=search,
    )

    papers = repo.search(limit=limit, offset=offset, **filters)
    total = repo.count(**filters)

    journal_by_id = {j.id: j for j in journal_repo.list_all()}
    summarized = summary_repo.paper_ids_with_summaries(p.id for p in papers)

    items = [
        PaperListItem.build(p, journal_by_id.get(p.journal_id), p.id in summarized)
        for p in papers
    ]
    return PaperListResponse(
        papers=items,
        pagination=PaginationMeta.build(total=total, limit=limit, offset=offset),
    )


@router.get("/{paper_id}", response_model=PaperListItem)
def get_paper(
    paper_id: str,
    repo: PaperRepository = Depends(get_paper_repo),
    journal_repo: JournalRepository = Depends(get_journal_repo),
    summary_repo: SummaryRepository = Depends(get_summary_repo),
):
    """Get a single paper by ID."""
    paper = repo.get_paper_by_id(paper_id)
    if not paper:
        raise HTTPException(status_code=404, detail="Paper not found")
    has_summary = paper.id in summary_repo.paper_ids_with_summaries([paper.id])
    return PaperListItem.build(paper, journal_repo.get(paper.journal_id), has_summary)
