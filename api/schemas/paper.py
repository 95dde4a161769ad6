from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel

from journalfeed.model.journal import Journal
from journalfeed.model.paper import Paper
from api.schemas.journal import PaperCardResponse


# --- List item ---

class PaperListItem(PaperCardResponse):
    journal_name: Optional[str] = None
    journal_color: Optional[str] = None
    has_summary: bool = False

    @classmethod
    def build(cls, paper: Paper, journal: Optional[Journal], has_summary: bool) -> PaperListItem:
        return cls(
            **PaperCardResponse.from_paper(paper).model_dump(),
            journal_name=journal.name if journal else None,
            journal_color=journal.color if journal else None,
            has_summary=has_summary,
        )


# --- Pagination ---

class PaginationMeta(BaseModel):
    total: int
    limit: int
    offset: int
    has_more: bool

    @classmethod
    def build(cls, total: int, limit: int, offset: int) -> PaginationMeta:
        return cls(
            total=total,
            limit=limit,
            offset=offset,
            has_more=offset + limit < total,
        )


# --- List response ---

class PaperListResponse(BaseModel):
    papers: List[PaperListItem]
    pagination: PaginationMeta
