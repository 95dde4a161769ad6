import os

# keep the module-level engine away from the real database
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("JOURNALFEED_SETTINGS", os.path.join(os.path.dirname(__file__), "missing.yaml"))

import threading
from typing import Dict, List

import pytest

from journalfeed.crawler.feed_client import ParsedFeed
from journalfeed.database.db.models import Base
from journalfeed.database.db.session import make_engine, make_session_factory
from journalfeed.database.fetch_log_repository import FetchLogRepository
from journalfeed.database.journal_repository import JournalRepository
from journalfeed.database.paper_repository import PaperRepository
from journalfeed.database.summary_repository import SummaryRepository
from journalfeed.errors import FetchError
from journalfeed.model.journal import Journal
from journalfeed.model.paper import CandidatePaper


SAMPLE_RSS = b"""<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0" xmlns:dc="http://purl.org/dc/elements/1.1/">
  <channel>
    <title>Journal of Testing</title>
    <link>https://example.org/jot</link>
    <description>Test feed</description>
    <item>
      <title>Deep &amp; Wide Networks</title>
      <link>https://example.org/jot/1</link>
      <guid>g1</guid>
      <description>&lt;p&gt;We study   &lt;b&gt;networks&lt;/b&gt;.&lt;/p&gt;</description>
      <dc:creator>Alice Smith, Bob Jones</dc:creator>
      <pubDate>Mon, 06 Jan 2025 09:30:00 +0900</pubDate>
    </item>
    <item>
      <title>Sparse Attention</title>
      <link>https://example.org/jot/2</link>
      <guid>g2</guid>
      <description>Attention, but sparse.</description>
      <pubDate>Tue, 07 Jan 2025 00:00:00 GMT</pubDate>
    </item>
  </channel>
</rss>
"""


@pytest.fixture
def session_factory(tmp_path):
    engine = make_engine(f"sqlite:///{tmp_path / 'test.db'}")
    Base.metadata.create_all(bind=engine)
    yield make_session_factory(engine)
    engine.dispose()


@pytest.fixture
def journal_repo(session_factory):
    return JournalRepository(session_factory)


@pytest.fixture
def paper_repo(session_factory):
    return PaperRepository(session_factory)


@pytest.fixture
def summary_repo(session_factory):
    return SummaryRepository(session_factory)


@pytest.fixture
def fetch_log_repo(session_factory):
    return FetchLogRepository(session_factory)


@pytest.fixture
def make_journal(journal_repo):
    def _make(journal_id: str, name: str = "", is_active: bool = True) -> Journal:
        journal = Journal(
            id=journal_id,
            name=name or journal_id.upper(),
            rss_url=f"https://example.org/{journal_id}.rss",
            is_active=is_active,
        )
        journal_repo.upsert(journal)
        return journal

    return _make


def candidate(guid: str, title: str = "", **kwargs) -> CandidatePaper:
    return CandidatePaper(title=title or f"Paper {guid}", guid=guid, **kwargs)


class FakeFeedClient:
    """
    Serves canned ParsedFeed objects per journal id.

    A value that is an Exception is raised instead of returned.
    """

    def __init__(self, feeds: Dict[str, object]):
        self.feeds = feeds
        self.calls: List[str] = []
        self._lock = threading.Lock()

    def fetch(self, journal: Journal) -> ParsedFeed:
        with self._lock:
            self.calls.append(journal.id)
        value = self.feeds.get(journal.id)
        if value is None:
            raise FetchError(f"no feed for {journal.id}")
        if isinstance(value, Exception):
            raise value
        return value


class BlockingFeedClient(FakeFeedClient):
    """Blocks inside fetch() until `release` is set."""

    def __init__(self, feeds: Dict[str, object]):
        super().__init__(feeds)
        self.entered = threading.Event()
        self.release = threading.Event()

    def fetch(self, journal: Journal) -> ParsedFeed:
        self.entered.set()
        self.release.wait(timeout=10)
        return super().fetch(journal)
