from typing import List, Optional

from pydantic import BaseModel

from journalfeed.model.summary import Summary
from journalfeed.service.providers import ProviderInfo


class GenerateSummaryRequest(BaseModel):
    paper_id: str
    provider: Optional[str] = None
    model: Optional[str] = None


class SummaryResponse(BaseModel):
    summary: Summary


class SummaryListResponse(BaseModel):
    summaries: List[Summary]


class ProvidersResponse(BaseModel):
    providers: List[ProviderInfo]
    current: str
