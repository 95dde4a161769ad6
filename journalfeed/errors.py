"""
Error taxonomy for ingestion and summary generation.

Source-level (recorded per journal, never abort a pass):
    FetchError, ParseError
Item-level (recorded per paper, never abort a batch):
    StorageError
Provider-level (surfaced to the summary caller):
    ConfigurationError  -> "service not configured"
    UpstreamError, MalformedResponseError -> retryable failure
"""


class JournalFeedError(Exception):
    """Base class for all journalfeed errors."""


class FetchError(JournalFeedError):
    """Network failure, timeout or non-2xx response while fetching a feed."""


class ParseError(JournalFeedError):
    """Fetched document is not a recognisable RSS/Atom feed."""


class StorageError(JournalFeedError):
    """Database read/write failed."""


class NotFoundError(JournalFeedError):
    """Referenced journal or paper does not exist."""


class ConfigurationError(JournalFeedError):
    """Provider credential missing or provider unknown."""


class UpstreamError(JournalFeedError):
    """Summarization backend call failed."""

    retryable = True


class MalformedResponseError(JournalFeedError):
    """Summarization backend answered with something we cannot use."""

    retryable = True
