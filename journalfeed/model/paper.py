import hashlib
import uuid
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def title_key(title: str) -> str:
    normalized = " ".join(title.lower().split())
    return "title:" + hashlib.sha256(normalized.encode("utf-8")).hexdigest()


class CandidatePaper(BaseModel):
    """
    One parsed feed entry, not yet deduplicated.
    """

    title: str
    authors: List[str] = Field(default_factory=list)
    abstract: str = ""
    url: Optional[str] = None
    guid: Optional[str] = None
    published_date: Optional[datetime] = None

    model_config = {
        "str_strip_whitespace": True,
        "extra": "ignore",
    }

    @property
    def dedup_key(self) -> str:
        """GUID, else URL, else a stable hash of the title."""
        if self.guid:
            return self.guid
        if self.url:
            return self.url
        return title_key(self.title)


class Paper(BaseModel):
    """
    Stored, deduplicated paper. Never updated after insert.
    """

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    journal_id: str
    title: str
    authors: List[str] = Field(default_factory=list)
    abstract: str = ""
    url: Optional[str] = None
    dedup_key: str
    published_date: Optional[datetime] = None
    created_at: datetime = Field(default_factory=_utcnow)

    model_config = {
        "frozen": True,
        "extra": "ignore",
    }

    @classmethod
    def from_candidate(cls, journal_id: str, candidate: CandidatePaper) -> "Paper":
        return cls(
            journal_id=journal_id,
            title=candidate.title,
            authors=list(candidate.authors),
            abstract=candidate.abstract,
            url=candidate.url,
            dedup_key=candidate.dedup_key,
            published_date=candidate.published_date,
        )
