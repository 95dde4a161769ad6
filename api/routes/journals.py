from fastapi import APIRouter, Depends, HTTPException, Query

from api.deps import get_journal_repo, get_paper_repo
from api.schemas.journal import (
    JournalDetailResponse,
    JournalListResponse,
    JournalResponse,
    PaperCardResponse,
)
from journalfeed.database.journal_repository import JournalRepository
from journalfeed.database.paper_repository import PaperRepository

router = APIRouter(prefix="/api/journals", tags=["journals"])


@router.get("", response_model=JournalListResponse)
def list_journals(
    all: bool = Query(default=False),
    repo: JournalRepository = Depends(get_journal_repo),
):
    """List journals (active only unless ?all=true)."""
    journals = repo.list_all() if all else repo.list_active()
    return JournalListResponse(journals=[JournalResponse.from_journal(j) for j in journals])


@router.get("/{journal_id}", response_model=JournalDetailResponse)
def get_journal(
    journal_id: str,
    repo: JournalRepository = Depends(get_journal_repo),
    paper_repo: PaperRepository = Depends(get_paper_repo),
):
    """Journal detail with its 10 most recent papers."""
    journal = repo.get(journal_id)
    if not journal:
        raise HTTPException(status_code=404, detail="Journal not found")

    recent = paper_repo.list_recent(journal_ids=[journal_id], limit=10)
    return JournalDetailResponse(
        **JournalResponse.from_journal(journal).model_dump(),
        recent_papers=[PaperCardResponse.from_paper(p) for p in recent],
    )
