from typing import Optional
from datetime import datetime

from pydantic import BaseModel


class Journal(BaseModel):
    """
    A configured RSS source (academic journal).

    Read-only to the ingestion core except for `last_fetched_at`.
    Inactive journals are skipped by a full run but can still be fetched
    explicitly by id.
    """

    id: str
    name: str
    rss_url: str
    category: Optional[str] = None
    color: Optional[str] = None
    is_active: bool = True
    last_fetched_at: Optional[datetime] = None

    model_config = {
        "str_strip_whitespace": True,
        "extra": "ignore",
    }
