from unittest import mock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from conftest import SAMPLE_RSS, FakeFeedClient, candidate
from api import deps
from api.routes.admin import router as admin_router
from api.routes.journals import router as journals_router
from api.routes.summaries import router as summaries_router
from journalfeed.config import Config, FetchConfig, SchedulerConfig
from journalfeed.crawler.feed_client import FeedClient, ParsedFeed
from journalfeed.errors import ConfigurationError, MalformedResponseError
from journalfeed.scheduler.fetch_runner import FetchRunner
from journalfeed.scheduler.scheduler_service import SchedulerService
from journalfeed.service.paper_store import PaperStore
from journalfeed.service.summary_service import SummaryService

ADMIN = {"X-Admin-Token": "s3cret"}


@pytest.fixture
def summary_service():
    return mock.Mock(spec=SummaryService)


@pytest.fixture
def app(journal_repo, paper_repo, fetch_log_repo, make_journal, summary_service, monkeypatch):
    monkeypatch.setattr(Config, "admin_token", "s3cret")

    make_journal("j1", name="Journal One")
    make_journal("j2", name="Journal Two", is_active=False)

    runner = FetchRunner(
        journal_repo=journal_repo,
        feed_client=FakeFeedClient({"j1": ParsedFeed(papers=[candidate("g1"), candidate("g2")])}),
        paper_store=PaperStore(paper_repo, journal_repo),
        fetch_log_repo=fetch_log_repo,
    )

    app = FastAPI()
    app.include_router(journals_router)
    app.include_router(summaries_router)
    app.include_router(admin_router)

    app.state.fetch_runner = runner
    app.state.scheduler = SchedulerService(runner, SchedulerConfig(enabled=False))
    app.state.summary_service = summary_service

    app.dependency_overrides[deps.get_journal_repo] = lambda: journal_repo
    app.dependency_overrides[deps.get_paper_repo] = lambda: paper_repo
    app.dependency_overrides[deps.get_fetch_log_repo] = lambda: fetch_log_repo
    app.dependency_overrides[deps.get_feed_client] = lambda: FeedClient(FetchConfig(retries=0))
    return app


@pytest.fixture
def client(app):
    return TestClient(app)


def test_list_journals(client):
    resp = client.get("/api/journals")
    assert resp.status_code == 200
    assert [j["id"] for j in resp.json()["journals"]] == ["j1"]

    resp = client.get("/api/journals", params={"all": "true"})
    assert {j["id"] for j in resp.json()["journals"]} == {"j1", "j2"}


def test_journal_detail(client):
    client.post("/api/admin/scheduler/run", headers=ADMIN)

    resp = client.get("/api/journals/j1")
    assert resp.status_code == 200
    body = resp.json()
    assert body["name"] == "Journal One"
    assert len(body["recent_papers"]) == 2
    assert "dedup_key" not in body["recent_papers"][0]

    assert client.get("/api/journals/missing").status_code == 404


@pytest.mark.parametrize(
    "method, path",
    [
        ("post", "/api/admin/scheduler/run"),
        ("get", "/api/admin/scheduler/status"),
        ("post", "/api/admin/journals/j1/fetch"),
        ("get", "/api/admin/logs"),
    ],
)
def test_admin_routes_require_token(client, method, path):
    assert getattr(client, method)(path).status_code == 403
    assert getattr(client, method)(path, headers={"X-Admin-Token": "wrong"}).status_code == 403


def test_admin_disabled_without_configured_token(client, monkeypatch):
    monkeypatch.setattr(Config, "admin_token", None)
    assert client.get("/api/admin/scheduler/status", headers=ADMIN).status_code == 403


def test_run_scheduler_and_logs(client):
    resp = client.post("/api/admin/scheduler/run", headers=ADMIN)
    assert resp.status_code == 200
    body = resp.json()
    assert body["skipped"] is False
    assert body["total"] == 1
    assert body["new_papers"] == 2

    logs = client.get("/api/admin/logs", headers=ADMIN).json()["logs"]
    assert len(logs) == 1
    assert logs[0]["journal_id"] == "j1"
    assert logs[0]["status"] == "success"


def test_scheduler_status(client):
    resp = client.get("/api/admin/scheduler/status", headers=ADMIN)
    assert resp.status_code == 200
    assert resp.json()["is_running"] is False
    assert resp.json()["enabled"] is False


def test_fetch_single_journal(client):
    resp = client.post("/api/admin/journals/j2/fetch", headers=ADMIN)
    assert resp.status_code == 200
    assert resp.json()["success"] is False  # fake client has no feed for j2

    assert client.post("/api/admin/journals/nope/fetch", headers=ADMIN).status_code == 404


def test_rss_preview(client):
    ok = mock.Mock(status_code=200)
    ok.iter_content.return_value = [SAMPLE_RSS]
    with mock.patch("journalfeed.crawler.feed_client.requests.get", return_value=ok):
        resp = client.post(
            "/api/admin/journals/test-rss",
            json={"rss_url": "https://example.org/jot.rss", "limit": 1},
            headers=ADMIN,
        )
    body = resp.json()
    assert body["success"] is True
    assert [p["guid"] for p in body["papers"]] == ["g1"]

    bad = mock.Mock(status_code=404)
    with mock.patch("journalfeed.crawler.feed_client.requests.get", return_value=bad):
        resp = client.post(
            "/api/admin/journals/test-rss",
            json={"rss_url": "https://example.org/missing.rss"},
            headers=ADMIN,
        )
    assert resp.json()["success"] is False
    assert "404" in resp.json()["error"]


def test_generate_summary_not_configured(client, summary_service):
    summary_service.generate.side_effect = ConfigurationError("Claude API key is not configured")

    resp = client.post("/api/summaries/generate", json={"paper_id": "p1"})

    assert resp.status_code == 503
    assert resp.json()["error"] == "AI service not configured"
    assert resp.json()["retryable"] is False


def test_generate_summary_bad_model_output(client, summary_service):
    summary_service.generate.side_effect = MalformedResponseError("empty")

    resp = client.post("/api/summaries/generate", json={"paper_id": "p1", "provider": "openai"})

    assert resp.status_code == 502
    assert resp.json()["retryable"] is True
    summary_service.generate.assert_called_once_with("p1", provider="openai", model=None)
