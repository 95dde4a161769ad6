"""Abstract interface for summary providers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional

from pydantic import BaseModel

from journalfeed.model.paper import Paper
from journalfeed.model.summary import SummaryDraft


class ProviderInfo(BaseModel):
    id: str
    name: str
    default_model: str
    models: List[str]


class SummaryProvider(ABC):
    """One external summarization backend."""

    name: str = ""
    display_name: str = ""

    @property
    @abstractmethod
    def default_model(self) -> str:
        raise NotImplementedError

    @property
    @abstractmethod
    def models(self) -> List[str]:
        raise NotImplementedError

    @property
    @abstractmethod
    def is_configured(self) -> bool:
        """True when the backend credential is present."""
        raise NotImplementedError

    @abstractmethod
    def generate(self, paper: Paper, model: Optional[str] = None) -> SummaryDraft:
        """
        Summarize one paper.

        Raises:
            ConfigurationError: credential missing
            UpstreamError: backend call failed
            MalformedResponseError: backend output unusable
        """
        raise NotImplementedError

    def info(self) -> ProviderInfo:
        return ProviderInfo(
            id=self.name,
            name=self.display_name or self.name,
            default_model=self.default_model,
            models=self.models,
        )
