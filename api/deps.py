import secrets
from typing import Optional

from fastapi import Header, HTTPException, Request

from journalfeed.config import Config
from journalfeed.database.fetch_log_repository import FetchLogRepository
from journalfeed.database.journal_repository import JournalRepository
from journalfeed.database.paper_repository import PaperRepository
from journalfeed.database.summary_repository import SummaryRepository
from journalfeed.crawler.feed_client import FeedClient
from journalfeed.scheduler.fetch_runner import FetchRunner
from journalfeed.scheduler.scheduler_service import SchedulerService
from journalfeed.service.summary_service import SummaryService


def get_journal_repo() -> JournalRepository:
    """Stateless, safe to create per-request."""
    return JournalRepository()


def get_paper_repo() -> PaperRepository:
    return PaperRepository()


def get_summary_repo() -> SummaryRepository:
    return SummaryRepository()


def get_fetch_log_repo() -> FetchLogRepository:
    return FetchLogRepository()


def get_feed_client() -> FeedClient:
    return FeedClient()


# --- Process-wide singletons (created in main.lifespan) ---

def get_fetch_runner(request: Request) -> FetchRunner:
    return request.app.state.fetch_runner


def get_scheduler(request: Request) -> SchedulerService:
    return request.app.state.scheduler


def get_summary_service(request: Request) -> SummaryService:
    return request.app.state.summary_service


def require_admin(x_admin_token: Optional[str] = Header(default=None)) -> None:
    """
    Gate for privileged operations (ingestion triggers, logs, feed tests).
    """
    expected = Config.admin_token
    if not expected or not x_admin_token or not secrets.compare_digest(x_admin_token, expected):
        raise HTTPException(status_code=403, detail="Admin access required")
