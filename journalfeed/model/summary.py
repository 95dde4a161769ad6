import uuid
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field

from journalfeed.errors import MalformedResponseError

STRUCTURED_FIELDS = ("purpose", "methodology", "findings", "implications")


class SummaryDraft(BaseModel):
    """
    Normalized provider output, before it is attached to a paper.

    Either all four structured fields are set, or only `text`.
    """

    model: str
    purpose: Optional[str] = None
    methodology: Optional[str] = None
    findings: Optional[str] = None
    implications: Optional[str] = None
    text: Optional[str] = None

    @property
    def is_structured(self) -> bool:
        return all(getattr(self, name) for name in STRUCTURED_FIELDS)


class Summary(BaseModel):
    """
    Stored AI summary. Regenerating creates a new record.
    """

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    paper_id: str
    ai_provider: str
    ai_model: str

    purpose: Optional[str] = None
    methodology: Optional[str] = None
    findings: Optional[str] = None
    implications: Optional[str] = None
    summary_text: Optional[str] = None

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    model_config = {
        "frozen": True,
        "extra": "ignore",
    }

    @classmethod
    def from_draft(cls, paper_id: str, provider: str, draft: SummaryDraft) -> "Summary":
        """
        Raises:
            MalformedResponseError: draft is neither fully structured nor text
        """
        if draft.is_structured:
            return cls(
                paper_id=paper_id,
                ai_provider=provider,
                ai_model=draft.model,
                purpose=draft.purpose,
                methodology=draft.methodology,
                findings=draft.findings,
                implications=draft.implications,
            )
        if not (draft.text or "").strip():
            raise MalformedResponseError(
                f"Incomplete summary from {provider}/{draft.model}: no text and not all of {list(STRUCTURED_FIELDS)}"
            )
        return cls(
            paper_id=paper_id,
            ai_provider=provider,
            ai_model=draft.model,
            summary_text=draft.text,
        )
