from typing import List, Optional

from pydantic import BaseModel

from journalfeed.model.paper import CandidatePaper
from journalfeed.model.run_result import FetchLog


class FeedPreviewRequest(BaseModel):
    rss_url: str
    limit: int = 5


class FeedPreviewResponse(BaseModel):
    success: bool
    papers: List[CandidatePaper] = []
    skipped_entries: int = 0
    error: Optional[str] = None


class FetchLogListResponse(BaseModel):
    logs: List[FetchLog]
