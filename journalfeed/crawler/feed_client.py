"""
RSS / Atom feed fetching and parsing.

Bytes are fetched with requests (strict timeout, bounded retries) and
handed to feedparser. Entry fields are normalized into CandidatePaper:
- dedup key: GUID, else link, else title hash (see CandidatePaper.dedup_key)
- published date: timezone-aware UTC datetime or None
"""

from __future__ import annotations

import calendar
import html
import logging
import re
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, List, Optional

import feedparser
import requests

from journalfeed.config import Config, FetchConfig
from journalfeed.errors import FetchError, ParseError
from journalfeed.model.journal import Journal
from journalfeed.model.paper import CandidatePaper

logger = logging.getLogger(__name__)

_TAG_RE = re.compile(r"<[^>]+>")
_WS_RE = re.compile(r"\s+")
_AUTHOR_SPLIT_RE = re.compile(r"\s*(?:,|;|\band\b)\s*")

_PARSED_DATE_KEYS = ("published_parsed", "updated_parsed", "created_parsed")
_RAW_DATE_KEYS = ("published", "updated", "created", "dc_date", "prism_publicationdate", "prism_coverdate")

_CHUNK_SIZE = 64 * 1024

_clock = time.monotonic


@dataclass
class ParsedFeed:
    papers: List[CandidatePaper] = field(default_factory=list)
    skipped_entries: int = 0

    def __len__(self) -> int:
        return len(self.papers)

    def __iter__(self):
        return iter(self.papers)


class FeedClient:
    def __init__(self, cfg: Optional[FetchConfig] = None):
        self.cfg = cfg or Config.fetch

    # --------------------------------------------------
    # Public API
    # --------------------------------------------------

    def fetch(self, journal: Journal) -> ParsedFeed:
        """
        Fetch + parse one journal feed.

        Raises:
            FetchError: network error, timeout, non-2xx status
            ParseError: not an RSS/Atom document
        """
        raw = self._download(journal.rss_url)
        parsed = parse_feed(raw)
        logger.info(
            f"📰 {journal.name}: entries={len(parsed.papers)} skipped={parsed.skipped_entries}"
        )
        return parsed

    def preview(self, url: str, limit: int = 5) -> ParsedFeed:
        """
        Fetch + parse an arbitrary feed URL without storing anything.
        """
        parsed = parse_feed(self._download(url))
        return ParsedFeed(papers=parsed.papers[:limit], skipped_entries=parsed.skipped_entries)

    # --------------------------------------------------
    # Network
    # --------------------------------------------------

    def _download(self, url: str) -> bytes:
        headers = {
            "User-Agent": self.cfg.user_agent,
            "Accept": "application/rss+xml, application/atom+xml, application/xml;q=0.9, */*;q=0.8",
        }
        last_error: Optional[Exception] = None

        for attempt in range(1, self.cfg.retries + 2):
            try:
                return self._get(url, headers)
            except (requests.ConnectionError, requests.Timeout) as e:
                last_error = e
                logger.warning(f"⚠ Fetch error [{attempt}/{self.cfg.retries + 1}]: {url} | {e}")
                if attempt <= self.cfg.retries:
                    time.sleep(0.5 * attempt)
            except requests.RequestException as e:
                raise FetchError(f"Request failed for {url}: {e}") from e

        raise FetchError(f"Request failed for {url}: {last_error}") from last_error

    def _get(self, url: str, headers: dict) -> bytes:
        """
        One streamed GET. `timeout_seconds` bounds each socket read and
        also the whole body; `max_bytes` caps its size.
        """
        deadline = _clock() + self.cfg.timeout_seconds
        resp = requests.get(url, headers=headers, timeout=self.cfg.timeout_seconds, stream=True)
        try:
            if not 200 <= resp.status_code < 300:
                raise FetchError(f"HTTP {resp.status_code} for {url}")

            chunks: List[bytes] = []
            size = 0
            for chunk in resp.iter_content(chunk_size=_CHUNK_SIZE):
                size += len(chunk)
                if size > self.cfg.max_bytes:
                    raise FetchError(f"Feed larger than {self.cfg.max_bytes} bytes: {url}")
                if _clock() > deadline:
                    raise FetchError(f"Download exceeded {self.cfg.timeout_seconds}s: {url}")
                chunks.append(chunk)
            return b"".join(chunks)
        finally:
            resp.close()


# --------------------------------------------------
# Parsing
# --------------------------------------------------

def parse_feed(raw: bytes) -> ParsedFeed:
    """
    Parse a feed document. Malformed entries are skipped and counted.
    """
    parsed = feedparser.parse(raw)
    entries = parsed.get("entries") or []

    if not entries:
        if parsed.get("bozo"):
            reason = parsed.get("bozo_exception")
            raise ParseError(f"Malformed feed: {reason}")
        if not parsed.get("version"):
            raise ParseError("Unrecognized feed format")

    result = ParsedFeed()
    for entry in entries:
        try:
            candidate = _entry_to_candidate(entry)
        except Exception as e:  # noqa: BLE001
            logger.debug(f"Skipping unparsable entry: {e}")
            candidate = None
        if candidate is None:
            result.skipped_entries += 1
            continue
        result.papers.append(candidate)
    return result


def _entry_to_candidate(entry: Any) -> Optional[CandidatePaper]:
    title = clean_text(entry.get("title") or "")
    if not title:
        return None

    return CandidatePaper(
        title=title,
        authors=_extract_authors(entry),
        abstract=_extract_abstract(entry),
        url=(entry.get("link") or "").strip() or None,
        guid=(entry.get("id") or "").strip() or None,
        published_date=extract_published(entry),
    )


def clean_text(value: str) -> str:
    """Strip tags, unescape entities, collapse whitespace."""
    text = _TAG_RE.sub(" ", value)
    text = html.unescape(text)
    return _WS_RE.sub(" ", text).strip()


def _extract_authors(entry: Any) -> List[str]:
    names: List[str] = []
    for author in entry.get("authors") or []:
        name = clean_text(author.get("name") or "") if hasattr(author, "get") else ""
        if name:
            names.extend(_split_authors(name))
    if not names and entry.get("author"):
        names = _split_authors(clean_text(entry.get("author")))

    # keep order, drop repeats
    seen = set()
    ordered = []
    for name in names:
        if name not in seen:
            seen.add(name)
            ordered.append(name)
    return ordered


def _split_authors(value: str) -> List[str]:
    return [part.strip() for part in _AUTHOR_SPLIT_RE.split(value) if part.strip()]


def _extract_abstract(entry: Any) -> str:
    for key in ("summary", "description"):
        value = entry.get(key)
        if value:
            return clean_text(value)
    for content in entry.get("content") or []:
        value = content.get("value") if hasattr(content, "get") else None
        if value:
            return clean_text(value)
    return ""


def extract_published(entry: Any) -> Optional[datetime]:
    for key in _PARSED_DATE_KEYS:
        struct = entry.get(key)
        if struct:
            return datetime.fromtimestamp(calendar.timegm(struct), tz=timezone.utc)
    for key in _RAW_DATE_KEYS:
        raw = entry.get(key)
        if raw:
            parsed = parse_date(str(raw))
            if parsed:
                return parsed
    return None


def parse_date(raw: str) -> Optional[datetime]:
    """RFC 2822 or ISO 8601 (date or datetime) -> aware UTC datetime."""
    raw = raw.strip()
    if not raw:
        return None

    value: Optional[datetime] = None
    try:
        value = parsedate_to_datetime(raw)
    except (TypeError, ValueError, IndexError):
        value = None

    if value is None:
        try:
            value = datetime.fromisoformat(raw.replace("Z", "+00:00"))
        except ValueError:
            return None

    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
