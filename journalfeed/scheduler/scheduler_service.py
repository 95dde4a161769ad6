# journalfeed/scheduler/scheduler_service.py

import logging
from datetime import datetime, timezone
from typing import Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.executors.pool import ThreadPoolExecutor
from apscheduler.triggers.interval import IntervalTrigger

from journalfeed.config import Config, SchedulerConfig
from journalfeed.model.run_result import SchedulerStatus
from journalfeed.scheduler.fetch_runner import FetchRunner

logger = logging.getLogger(__name__)


class SchedulerService:
    """
    Long-running background timer for journal ingestion.

    - Starts APScheduler
    - Triggers FetchRunner.run_all every `interval_minutes`
    - Shares the runner's single-flight guard with on-demand triggers
    - Drains an in-flight pass on shutdown (bounded)
    """

    JOB_ID = "fetch_journals"

    def __init__(self, runner: FetchRunner, cfg: Optional[SchedulerConfig] = None):
        self.runner = runner
        self.cfg = cfg or Config.scheduler

        executors = {
            "default": ThreadPoolExecutor(max_workers=1),
        }

        self.scheduler = BackgroundScheduler(
            timezone=self.cfg.timezone,
            executors=executors,
        )
        self._started = False

    # --------------------------------------------------
    # Lifecycle
    # --------------------------------------------------

    @property
    def started(self) -> bool:
        return self._started

    def start(self) -> None:
        """
        Start scheduler (idempotent).
        """
        if self._started:
            return

        if not self.cfg.enabled:
            logger.info("⏸ Scheduler disabled by config")
            return

        logger.info("⏱ Starting SchedulerService...")
        self.scheduler.start()
        self.reload()
        self._started = True

    def shutdown(self, drain_timeout: Optional[float] = None) -> bool:
        """
        Stop the timer, then wait (bounded) for an in-flight pass.

        Returns:
            True if no pass was left running.
        """
        timeout = self.cfg.drain_timeout_seconds if drain_timeout is None else drain_timeout

        if self._started:
            logger.info("🛑 Stopping SchedulerService...")
            self.scheduler.shutdown(wait=False)
            self._started = False

        drained = self.runner.wait_idle(timeout)
        if not drained:
            logger.warning(f"⚠ Fetch pass still running after {timeout}s, abandoning it")
        return drained

    # --------------------------------------------------
    # Reload logic
    # --------------------------------------------------

    def reload(self) -> None:
        """
        Re-register the fetch job from config. Safe to call multiple times.
        """
        logger.info("🔄 Reloading scheduler jobs...")

        self.scheduler.remove_all_jobs()
        self._add_fetch_job(interval_minutes=self.cfg.interval_minutes)

        self._log_jobs()

    def _add_fetch_job(self, interval_minutes: int) -> None:
        trigger = IntervalTrigger(minutes=interval_minutes, timezone=self.cfg.timezone)

        kwargs = {}
        if self.cfg.run_on_start:
            kwargs["next_run_time"] = datetime.now(timezone.utc)

        self.scheduler.add_job(
            self._run_job,
            trigger=trigger,
            id=self.JOB_ID,
            replace_existing=True,
            max_instances=1,
            coalesce=True,
            misfire_grace_time=300,
            **kwargs,
        )

        logger.info(f"✅ Job registered: {self.JOB_ID} (every {interval_minutes} min)")

    def _run_job(self) -> None:
        result = self.runner.run_all()
        if result.skipped:
            logger.info("⏭ Scheduled fetch skipped: another pass is running")

    # --------------------------------------------------
    # Status
    # --------------------------------------------------

    def status(self) -> SchedulerStatus:
        status = self.runner.status()
        status.enabled = self._started
        job = self.scheduler.get_job(self.JOB_ID) if self._started else None
        if job is not None:
            status.next_run_at = job.next_run_time
        return status

    def _log_jobs(self) -> None:
        jobs = self.scheduler.get_jobs()
        if not jobs:
            logger.warning("⚠️ No scheduled jobs")
            return

        logger.info("📅 Active jobs:")
        for job in jobs:
            logger.info(f"  - {job.id} | next run at {job.next_run_time}")
