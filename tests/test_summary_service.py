from typing import List, Optional

import pytest

from conftest import candidate
from journalfeed.errors import ConfigurationError, MalformedResponseError, NotFoundError, UpstreamError
from journalfeed.model.paper import Paper
from journalfeed.model.summary import Summary, SummaryDraft
from journalfeed.service.providers import ProviderRegistry, SummaryProvider
from journalfeed.service.summary_service import SummaryService


class StubProvider(SummaryProvider):
    def __init__(self, name, draft=None, error=None, configured=True):
        self.name = name
        self.display_name = name.title()
        self._draft = draft
        self._error = error
        self._configured = configured
        self.calls: List[str] = []

    @property
    def default_model(self) -> str:
        return "stub-1"

    @property
    def models(self) -> List[str]:
        return ["stub-1"]

    @property
    def is_configured(self) -> bool:
        return self._configured

    def generate(self, paper: Paper, model: Optional[str] = None) -> SummaryDraft:
        self.calls.append(paper.id)
        if self._error:
            raise self._error
        return self._draft.model_copy(update={"model": model or self.default_model})


STRUCTURED = SummaryDraft(
    model="stub-1",
    purpose="p",
    methodology="m",
    findings="f",
    implications="i",
)


@pytest.fixture
def paper(paper_repo, make_journal):
    make_journal("j1")
    stored = Paper.from_candidate("j1", candidate("g1", abstract="Some abstract"))
    paper_repo.insert(stored)
    return stored


def _service(paper_repo, summary_repo, **providers):
    registry = ProviderRegistry(providers=providers, default=next(iter(providers)))
    return SummaryService(paper_repo, summary_repo, registry)


def test_structured_summary_is_stored(paper, paper_repo, summary_repo):
    service = _service(paper_repo, summary_repo, claude=StubProvider("claude", draft=STRUCTURED))

    summary = service.generate(paper.id)

    assert summary.ai_provider == "claude"
    assert summary.ai_model == "stub-1"
    assert summary.purpose == "p"
    assert summary.summary_text is None
    assert [s.id for s in service.list_summaries(paper.id)] == [summary.id]


def test_free_text_summary(paper, paper_repo, summary_repo):
    draft = SummaryDraft(model="stub-1", text="One paragraph.")
    service = _service(paper_repo, summary_repo, openai=StubProvider("openai", draft=draft))

    summary = service.generate(paper.id, model="stub-2")

    assert summary.summary_text == "One paragraph."
    assert summary.purpose is None
    assert summary.ai_model == "stub-2"


def test_regenerating_adds_a_new_record(paper, paper_repo, summary_repo):
    service = _service(paper_repo, summary_repo, claude=StubProvider("claude", draft=STRUCTURED))

    first = service.generate(paper.id)
    second = service.generate(paper.id)

    stored = service.list_summaries(paper.id)
    assert len(stored) == 2
    assert {s.id for s in stored} == {first.id, second.id}


def test_explicit_provider_overrides_default(paper, paper_repo, summary_repo):
    claude = StubProvider("claude", draft=STRUCTURED)
    gemini = StubProvider("gemini", draft=STRUCTURED)
    service = _service(paper_repo, summary_repo, claude=claude, gemini=gemini)

    summary = service.generate(paper.id, provider="gemini")

    assert summary.ai_provider == "gemini"
    assert gemini.calls == [paper.id]
    assert claude.calls == []


def test_missing_paper(paper_repo, summary_repo):
    service = _service(paper_repo, summary_repo, claude=StubProvider("claude", draft=STRUCTURED))
    with pytest.raises(NotFoundError):
        service.generate("does-not-exist")


def test_unknown_provider_is_checked_first(paper_repo, summary_repo):
    service = _service(paper_repo, summary_repo, claude=StubProvider("claude", draft=STRUCTURED))
    with pytest.raises(ConfigurationError):
        service.generate("does-not-exist", provider="mistral")


def test_provider_failure_stores_nothing(paper, paper_repo, summary_repo):
    failing = StubProvider("claude", error=UpstreamError("timeout"))
    service = _service(paper_repo, summary_repo, claude=failing)

    with pytest.raises(UpstreamError):
        service.generate(paper.id)
    assert service.list_summaries(paper.id) == []


def test_partial_structured_draft_is_rejected(paper, paper_repo, summary_repo):
    partial = SummaryDraft(model="stub-1", purpose="only purpose")
    service = _service(paper_repo, summary_repo, claude=StubProvider("claude", draft=partial))

    with pytest.raises(MalformedResponseError):
        service.generate(paper.id)
    assert service.list_summaries(paper.id) == []


def test_empty_draft_cannot_become_a_summary():
    with pytest.raises(MalformedResponseError):
        Summary.from_draft("p1", "claude", SummaryDraft(model="m", text="   "))
