from datetime import datetime, timezone

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from conftest import candidate
from api import deps
from api.routes.papers import router as papers_router
from journalfeed.model.paper import Paper
from journalfeed.model.summary import Summary


def _utc(day, hour=12):
    return datetime(2025, 1, day, hour, tzinfo=timezone.utc)


@pytest.fixture
def stored(paper_repo, summary_repo, make_journal):
    make_journal("j1", name="Journal One")
    make_journal("j2", name="Journal Two")

    papers = {
        "a": Paper.from_candidate("j1", candidate("a", title="Graph neural networks", published_date=_utc(1))),
        "b": Paper.from_candidate("j1", candidate("b", title="Protein folding", abstract="Uses NEURAL fields", published_date=_utc(5))),
        "c": Paper.from_candidate("j2", candidate("c", title="Dark matter survey", published_date=_utc(10))),
        "d": Paper.from_candidate("j2", candidate("d", title="100% recall_rates", published_date=_utc(10, 8))),
    }
    for paper in papers.values():
        paper_repo.insert(paper)

    summary_repo.insert(Summary(paper_id=papers["b"].id, ai_provider="claude", ai_model="m", summary_text="x"))
    return papers


@pytest.fixture
def client(journal_repo, paper_repo, summary_repo):
    app = FastAPI()
    app.include_router(papers_router)
    app.dependency_overrides[deps.get_journal_repo] = lambda: journal_repo
    app.dependency_overrides[deps.get_paper_repo] = lambda: paper_repo
    app.dependency_overrides[deps.get_summary_repo] = lambda: summary_repo
    return TestClient(app)


def _titles(resp):
    return [p["title"] for p in resp.json()["papers"]]


def test_newest_first_with_journal_info(client, stored):
    resp = client.get("/api/papers")
    assert resp.status_code == 200
    body = resp.json()

    assert _titles(resp) == [
        "Dark matter survey",
        "100% recall_rates",
        "Protein folding",
        "Graph neural networks",
    ]
    assert body["pagination"] == {"total": 4, "limit": 50, "offset": 0, "has_more": False}

    protein = body["papers"][2]
    assert protein["journal_name"] == "Journal One"
    assert protein["has_summary"] is True
    assert body["papers"][0]["has_summary"] is False


def test_filter_by_journals(client, stored):
    resp = client.get("/api/papers", params={"journals": "j2"})
    assert set(_titles(resp)) == {"Dark matter survey", "100% recall_rates"}

    resp = client.get("/api/papers", params={"journals": "j1, j2"})
    assert resp.json()["pagination"]["total"] == 4


def test_filter_by_date_range(client, stored):
    resp = client.get("/api/papers", params={"date_from": "2025-01-05", "date_to": "2025-01-09"})
    assert _titles(resp) == ["Protein folding"]

    # date_to covers the whole day
    resp = client.get("/api/papers", params={"date_from": "2025-01-10", "date_to": "2025-01-10"})
    assert resp.json()["pagination"]["total"] == 2


def test_search_title_and_abstract(client, stored):
    resp = client.get("/api/papers", params={"search": "neural"})
    assert _titles(resp) == ["Protein folding", "Graph neural networks"]

    # LIKE wildcards are matched literally
    resp = client.get("/api/papers", params={"search": "100%"})
    assert _titles(resp) == ["100% recall_rates"]
    resp = client.get("/api/papers", params={"search": "recal_"})
    assert _titles(resp) == []


def test_pagination(client, stored):
    first = client.get("/api/papers", params={"limit": 3}).json()
    second = client.get("/api/papers", params={"limit": 3, "offset": 3}).json()

    assert first["pagination"]["has_more"] is True
    assert second["pagination"]["has_more"] is False
    assert len(first["papers"]) == 3
    assert len(second["papers"]) == 1
    seen = [p["id"] for p in first["papers"] + second["papers"]]
    assert len(set(seen)) == 4


def test_invalid_paging_params(client, stored):
    assert client.get("/api/papers", params={"limit": 0}).status_code == 422
    assert client.get("/api/papers", params={"offset": -1}).status_code == 422


def test_get_single_paper(client, stored):
    resp = client.get(f"/api/papers/{stored['a'].id}")
    assert resp.status_code == 200
    assert resp.json()["title"] == "Graph neural networks"
    assert resp.json()["journal_name"] == "Journal One"

    assert client.get("/api/papers/missing").status_code == 404
