from .journal import (
    PaperCardResponse,
    JournalResponse,
    JournalDetailResponse,
    JournalListResponse,
)
from .paper import (
    PaperListItem,
    PaginationMeta,
    PaperListResponse,
)
from .summary import (
    GenerateSummaryRequest,
    SummaryResponse,
    SummaryListResponse,
    ProvidersResponse,
)
from .admin import (
    FeedPreviewRequest,
    FeedPreviewResponse,
    FetchLogListResponse,
)

__all__ = [
    "PaperCardResponse",
    "JournalResponse",
    "JournalDetailResponse",
    "JournalListResponse",
    "PaperListItem",
    "PaginationMeta",
    "PaperListResponse",
    "GenerateSummaryRequest",
    "SummaryResponse",
    "SummaryListResponse",
    "ProvidersResponse",
    "FeedPreviewRequest",
    "FeedPreviewResponse",
    "FetchLogListResponse",
]
