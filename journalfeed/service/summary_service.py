# journalfeed/service/summary_service.py

"""
Summary generation for a single stored paper.

Independent of the ingestion pass: never waits on the fetch guard.
No automatic retry here; providers retry transient network errors
internally and the caller decides whether to try again.
"""

import logging
from typing import List, Optional

from journalfeed.database.paper_repository import PaperRepository
from journalfeed.database.summary_repository import SummaryRepository
from journalfeed.errors import NotFoundError
from journalfeed.model.summary import Summary
from journalfeed.service.providers import ProviderRegistry

logger = logging.getLogger(__name__)


class SummaryService:
    def __init__(
        self,
        paper_repo: Optional[PaperRepository] = None,
        summary_repo: Optional[SummaryRepository] = None,
        registry: Optional[ProviderRegistry] = None,
    ):
        self.paper_repo = paper_repo or PaperRepository()
        self.summary_repo = summary_repo or SummaryRepository()
        self.registry = registry or ProviderRegistry()

    def generate(
        self,
        paper_id: str,
        provider: Optional[str] = None,
        model: Optional[str] = None,
    ) -> Summary:
        """
        Generate and store a new summary.

        Raises:
            ConfigurationError: provider unknown or credential missing
            NotFoundError: paper does not exist
            UpstreamError / MalformedResponseError: retryable provider failure
        """
        adapter = self.registry.get(provider)

        paper = self.paper_repo.get_paper_by_id(paper_id)
        if paper is None:
            raise NotFoundError(f"Paper not found: {paper_id}")

        draft = adapter.generate(paper, model)
        summary = Summary.from_draft(paper_id=paper.id, provider=adapter.name, draft=draft)
        self.summary_repo.insert(summary)

        shape = "structured" if draft.is_structured else "text"
        logger.info(f"✅ Summary stored: paper={paper.id} provider={adapter.name} model={draft.model} ({shape})")
        return summary

    def list_summaries(self, paper_id: str) -> List[Summary]:
        return self.summary_repo.list_by_paper(paper_id)
