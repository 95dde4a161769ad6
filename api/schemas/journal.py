from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from journalfeed.model.journal import Journal
from journalfeed.model.paper import Paper


class PaperCardResponse(BaseModel):
    id: str
    journal_id: str
    title: str
    authors: List[str]
    abstract: str
    url: Optional[str] = None
    published_date: Optional[datetime] = None
    created_at: datetime

    @classmethod
    def from_paper(cls, paper: Paper) -> PaperCardResponse:
        return cls(**paper.model_dump(exclude={"dedup_key"}))


class JournalResponse(BaseModel):
    id: str
    name: str
    rss_url: str
    category: Optional[str] = None
    color: Optional[str] = None
    is_active: bool
    last_fetched_at: Optional[datetime] = None

    @classmethod
    def from_journal(cls, journal: Journal) -> JournalResponse:
        return cls(**journal.model_dump())


class JournalDetailResponse(JournalResponse):
    recent_papers: List[PaperCardResponse]


class JournalListResponse(BaseModel):
    journals: List[JournalResponse]
