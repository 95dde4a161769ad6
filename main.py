import logging
import os
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routes.admin import router as admin_router
from api.routes.journals import router as journals_router
from api.routes.papers import router as papers_router
from api.routes.summaries import router as summaries_router
from journalfeed.config import Config
from journalfeed.database.db.models import Base
from journalfeed.database.db.session import engine
from journalfeed.database.fetch_log_repository import FetchLogRepository
from journalfeed.logger import setup_logging
from journalfeed.scheduler.fetch_runner import FetchRunner
from journalfeed.scheduler.scheduler_service import SchedulerService
from journalfeed.service.summary_service import SummaryService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    # Create any missing tables on startup
    Base.metadata.create_all(bind=engine)

    runner = FetchRunner(fetch_log_repo=FetchLogRepository())
    scheduler = SchedulerService(runner)
    app.state.fetch_runner = runner
    app.state.scheduler = scheduler
    app.state.summary_service = SummaryService()

    scheduler.start()
    logger.info(f"AI provider: {Config.ai_provider}")
    try:
        yield
    finally:
        # stop the timer and drain a running pass before closing the pool
        scheduler.shutdown()
        engine.dispose()


app = FastAPI(title="journalfeed API", lifespan=lifespan)

is_dev = os.getenv("ENV", "development") == "development"
cors_origins = (
    ["*"]
    if is_dev
    else [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True if not is_dev else False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(journals_router)
app.include_router(papers_router)
app.include_router(summaries_router)
app.include_router(admin_router)


@app.get("/api/health")
def health_check():
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "scheduler": app.state.scheduler.status().model_dump(mode="json"),
    }
