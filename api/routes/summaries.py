from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from api.deps import get_summary_service
from api.schemas.summary import (
    GenerateSummaryRequest,
    ProvidersResponse,
    SummaryListResponse,
    SummaryResponse,
)
from journalfeed.errors import (
    ConfigurationError,
    MalformedResponseError,
    NotFoundError,
    UpstreamError,
)
from journalfeed.service.summary_service import SummaryService

router = APIRouter(prefix="/api/summaries", tags=["summaries"])


@router.get("/providers", response_model=ProvidersResponse)
def list_providers(service: SummaryService = Depends(get_summary_service)):
    """Configured AI providers and the default one."""
    return ProvidersResponse(
        providers=service.registry.get_available_providers(),
        current=service.registry.get_current_provider(),
    )


@router.post("/generate", response_model=SummaryResponse)
def generate_summary(
    body: GenerateSummaryRequest,
    service: SummaryService = Depends(get_summary_service),
):
    """Generate a new AI summary for one paper."""
    try:
        summary = service.generate(body.paper_id, provider=body.provider, model=body.model)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Paper not found")
    except ConfigurationError as e:
        return JSONResponse(
            status_code=503,
            content={"error": "AI service not configured", "detail": str(e), "retryable": False},
        )
    except (UpstreamError, MalformedResponseError) as e:
        return JSONResponse(
            status_code=502,
            content={"error": "Failed to generate summary", "detail": str(e), "retryable": True},
        )
    return SummaryResponse(summary=summary)


@router.get("/{paper_id}", response_model=SummaryListResponse)
def list_summaries(
    paper_id: str,
    service: SummaryService = Depends(get_summary_service),
):
    """All summaries of a paper, newest first."""
    return SummaryListResponse(summaries=service.list_summaries(paper_id))
