# journalfeed/scheduler/fetch_runner.py

"""
Single-flight ingestion runner.

Every trigger (background timer, admin API, CLI) goes through one
FetchRunner instance. A non-blocking lock guards the pass:

    Idle -> Running -> Idle

A call that finds the runner Running returns a `skipped` result
immediately instead of queueing.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import List, Optional

from journalfeed.config import Config, FetchConfig
from journalfeed.crawler.feed_client import FeedClient
from journalfeed.database.fetch_log_repository import FetchLogRepository
from journalfeed.database.journal_repository import JournalRepository
from journalfeed.errors import JournalFeedError, NotFoundError
from journalfeed.model.journal import Journal
from journalfeed.model.run_result import JournalFetchResult, RunResult, SchedulerStatus
from journalfeed.service.paper_store import PaperStore

logger = logging.getLogger(__name__)


class FetchRunner:
    def __init__(
        self,
        journal_repo: Optional[JournalRepository] = None,
        feed_client: Optional[FeedClient] = None,
        paper_store: Optional[PaperStore] = None,
        fetch_log_repo: Optional[FetchLogRepository] = None,
        cfg: Optional[FetchConfig] = None,
    ):
        self.cfg = cfg or Config.fetch
        self.journal_repo = journal_repo or JournalRepository()
        self.feed_client = feed_client or FeedClient(self.cfg)
        self.paper_store = paper_store or PaperStore(journal_repo=self.journal_repo)
        self.fetch_log_repo = fetch_log_repo

        self._lock = threading.Lock()
        self._idle = threading.Event()
        self._idle.set()
        self._last_run_at: Optional[datetime] = None
        self._last_result: Optional[RunResult] = None

    # --------------------------------------------------
    # Entry points
    # --------------------------------------------------

    def run_all(self) -> RunResult:
        """
        Fetch every active journal. Per-journal failures end up in
        `details`; only an unattributable failure (e.g. the journal
        listing itself) propagates.
        """
        if not self._enter():
            logger.info("⏭ Fetch already running, skipping run_all")
            return RunResult.skipped_run()

        started_at = datetime.now(timezone.utc)
        try:
            journals = self.journal_repo.list_active()
            logger.info(f"🔎 Fetching {len(journals)} active journal(s)...")

            details = self._fetch_many(journals)
            result = RunResult.aggregate(details, started_at, datetime.now(timezone.utc))
            self._last_result = result
            self._last_run_at = result.finished_at

            logger.info(
                f"📚 Fetch finished: total={result.total} success={result.success} "
                f"failed={result.failed} new={result.new_papers}"
            )
            return result
        finally:
            self._leave()

    def run_one(self, journal_id: str) -> JournalFetchResult:
        """
        Fetch a single journal by id, active or not.

        Raises:
            NotFoundError: unknown journal id
        """
        if not self._enter():
            logger.info(f"⏭ Fetch already running, skipping run_one({journal_id})")
            return JournalFetchResult.skipped_run(journal_id)

        try:
            journal = self.journal_repo.get(journal_id)
            if journal is None:
                raise NotFoundError(f"Journal not found: {journal_id}")
            result = self._fetch_journal(journal)
            self._last_run_at = datetime.now(timezone.utc)
            return result
        finally:
            self._leave()

    def status(self) -> SchedulerStatus:
        return SchedulerStatus(
            is_running=self._lock.locked(),
            last_run_at=self._last_run_at,
        )

    @property
    def last_result(self) -> Optional[RunResult]:
        return self._last_result

    def wait_idle(self, timeout: Optional[float] = None) -> bool:
        """Block until no pass is running. False on timeout."""
        return self._idle.wait(timeout)

    # --------------------------------------------------
    # Guard
    # --------------------------------------------------

    def _enter(self) -> bool:
        if not self._lock.acquire(blocking=False):
            return False
        self._idle.clear()
        return True

    def _leave(self) -> None:
        self._idle.set()
        self._lock.release()

    # --------------------------------------------------
    # Per-journal work
    # --------------------------------------------------

    def _fetch_many(self, journals: List[Journal]) -> List[JournalFetchResult]:
        if not journals:
            return []

        workers = max(1, min(self.cfg.max_workers, len(journals)))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="journal-fetch") as pool:
            futures = [pool.submit(self._fetch_journal, journal) for journal in journals]
            # join: results are assembled only after every task finished
            return [future.result() for future in futures]

    def _fetch_journal(self, journal: Journal) -> JournalFetchResult:
        """
        fetch -> parse -> dedupe -> store for one journal. Never raises.
        """
        result = JournalFetchResult(journal_id=journal.id, journal_name=journal.name)
        try:
            feed = self.feed_client.fetch(journal)
            result.papers_fetched = len(feed.papers)
            result.skipped_entries = feed.skipped_entries

            outcome = self.paper_store.store_batch(journal.id, feed.papers)
            result.new_papers = outcome.new_papers
            result.failed_inserts = outcome.failed

            self.paper_store.mark_fetched(journal.id)
            result.success = True
            logger.info(
                f"📌 journal='{journal.name}' fetched={result.papers_fetched} new={result.new_papers}"
            )
        except JournalFeedError as e:
            result.success = False
            result.error = str(e)
            logger.warning(f"❌ journal='{journal.name}' failed: {e}")
        except Exception as e:  # noqa: BLE001
            result.success = False
            result.error = f"{type(e).__name__}: {e}"
            logger.exception(f"❌ journal='{journal.name}' crashed")

        self._write_log(result)
        return result

    def _write_log(self, result: JournalFetchResult) -> None:
        if self.fetch_log_repo is None:
            return
        try:
            self.fetch_log_repo.add(result)
        except JournalFeedError as e:
            logger.warning(f"⚠ Could not write fetch log for {result.journal_id}: {e}")
