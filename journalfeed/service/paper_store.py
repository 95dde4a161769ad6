from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, Optional

from journalfeed.database.journal_repository import JournalRepository
from journalfeed.database.paper_repository import PaperRepository
from journalfeed.errors import StorageError
from journalfeed.model.paper import CandidatePaper, Paper

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoreOutcome:
    new_papers: int = 0
    duplicates: int = 0
    failed: int = 0


class PaperStore:
    """
    Dedup & store.

    Owns the idempotency invariant: a (journal_id, dedup_key) pair is
    stored at most once, however often a feed re-lists an entry.
    Holds no per-call state, so one instance serves all fetch workers.
    """

    def __init__(
        self,
        paper_repo: Optional[PaperRepository] = None,
        journal_repo: Optional[JournalRepository] = None,
    ):
        self.paper_repo = paper_repo or PaperRepository()
        self.journal_repo = journal_repo or JournalRepository()

    def store_new(self, journal_id: str, candidates: Iterable[CandidatePaper]) -> int:
        """
        Insert candidates whose dedup key is not yet stored for this journal.

        Returns:
            number of newly inserted papers
        """
        return self.store_batch(journal_id, candidates).new_papers

    def store_batch(self, journal_id: str, candidates: Iterable[CandidatePaper]) -> StoreOutcome:
        """
        Same as `store_new`, with duplicate and failure counts.

        A failure on one candidate is logged and skipped; the rest of the
        batch still goes in.
        """
        inserted = 0
        duplicates = 0
        failed = 0
        seen_keys = set()

        for candidate in candidates:
            key = candidate.dedup_key
            if key in seen_keys:
                duplicates += 1
                continue
            seen_keys.add(key)

            paper = Paper.from_candidate(journal_id, candidate)
            try:
                if self.paper_repo.insert_if_absent(paper):
                    inserted += 1
                else:
                    duplicates += 1
            except StorageError as e:
                failed += 1
                logger.warning(f"❌ Store failed: journal={journal_id} key={key} ({e})")

        if failed:
            logger.warning(f"⚠ {failed} paper(s) could not be stored for journal={journal_id}")
        return StoreOutcome(new_papers=inserted, duplicates=duplicates, failed=failed)

    def mark_fetched(self, journal_id: str, fetched_at: Optional[datetime] = None) -> None:
        """Record a completed fetch pass, whether or not anything was new."""
        self.journal_repo.touch_last_fetch(journal_id, fetched_at or datetime.now(timezone.utc))
