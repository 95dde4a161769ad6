from .journal import Journal
from .paper import CandidatePaper, Paper
from .summary import Summary, SummaryDraft, STRUCTURED_FIELDS
from .run_result import JournalFetchResult, RunResult, SchedulerStatus, FetchLog

__all__ = [
    "Journal",
    "CandidatePaper",
    "Paper",
    "Summary",
    "SummaryDraft",
    "STRUCTURED_FIELDS",
    "JournalFetchResult",
    "RunResult",
    "SchedulerStatus",
    "FetchLog",
]
