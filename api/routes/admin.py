from fastapi import APIRouter, Depends, HTTPException, Query

from api.deps import (
    get_feed_client,
    get_fetch_log_repo,
    get_fetch_runner,
    get_scheduler,
    require_admin,
)
from api.schemas.admin import FeedPreviewRequest, FeedPreviewResponse, FetchLogListResponse
from journalfeed.crawler.feed_client import FeedClient
from journalfeed.database.fetch_log_repository import FetchLogRepository
from journalfeed.errors import FetchError, NotFoundError, ParseError
from journalfeed.model.run_result import JournalFetchResult, RunResult, SchedulerStatus
from journalfeed.scheduler.fetch_runner import FetchRunner
from journalfeed.scheduler.scheduler_service import SchedulerService

router = APIRouter(
    prefix="/api/admin",
    tags=["admin"],
    dependencies=[Depends(require_admin)],
)


@router.post("/scheduler/run", response_model=RunResult)
def run_scheduler(runner: FetchRunner = Depends(get_fetch_runner)):
    """Fetch all active journals now (skipped if a pass is running)."""
    return runner.run_all()


@router.get("/scheduler/status", response_model=SchedulerStatus)
def scheduler_status(scheduler: SchedulerService = Depends(get_scheduler)):
    return scheduler.status()


@router.post("/journals/test-rss", response_model=FeedPreviewResponse)
def test_rss(
    body: FeedPreviewRequest,
    client: FeedClient = Depends(get_feed_client),
):
    """Fetch and parse a feed URL without storing anything."""
    try:
        feed = client.preview(body.rss_url, limit=body.limit)
    except (FetchError, ParseError) as e:
        return FeedPreviewResponse(success=False, error=str(e))
    return FeedPreviewResponse(success=True, papers=feed.papers, skipped_entries=feed.skipped_entries)


@router.post("/journals/{journal_id}/fetch", response_model=JournalFetchResult)
def fetch_journal(
    journal_id: str,
    runner: FetchRunner = Depends(get_fetch_runner),
):
    """Fetch one journal now, active or not."""
    try:
        return runner.run_one(journal_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Journal not found")


@router.get("/logs", response_model=FetchLogListResponse)
def fetch_logs(
    limit: int = Query(default=50, ge=1, le=500),
    repo: FetchLogRepository = Depends(get_fetch_log_repo),
):
    return FetchLogListResponse(logs=repo.list_recent(limit=limit))
