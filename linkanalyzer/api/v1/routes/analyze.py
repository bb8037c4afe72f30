"""
Analysis API Routes

No business logic lives here.
Routes validate input, call engines, return responses.
"""

from __future__ import annotations

from typing import Annotated, Any

import structlog
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import Response
from pydantic import BaseModel, ConfigDict, Field

from linkanalyzer.engines.base import AnalysisResult, BulkResult
from linkanalyzer.engines.bulk.engine import BulkOrchestrator
from linkanalyzer.engines.crawler.engine import CrawlerEngine
from linkanalyzer.services.export import export_filename, export_json

logger = structlog.get_logger(__name__)
router = APIRouter()


# ─────────────────────────────────────────────
# Request Schemas
# ─────────────────────────────────────────────

class AnalyzeRequest(BaseModel):
    url: str | None = None


class BulkAnalyzeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    urls: list[str] | None = None
    max_concurrent: int | None = Field(default=None, alias="maxConcurrent")


class ExportRequest(BaseModel):
    data: dict[str, Any] | list[dict[str, Any]] | None = None


# Body field (or alias) -> message returned when that field fails validation
VALIDATION_MESSAGES = {
    "url": "URL is required",
    "urls": "URLs array is required",
    "maxConcurrent": "maxConcurrent must be an integer",
    "data": "Analysis data is required",
}
INVALID_BODY_MESSAGE = "Invalid request body"


def validation_message(errors: list[dict[str, Any]]) -> str:
    """Reduce pydantic validation errors to the message for the first bad field."""
    for error in errors:
        loc = error.get("loc", ())
        if len(loc) > 1 and loc[0] == "body" and loc[1] in VALIDATION_MESSAGES:
            return VALIDATION_MESSAGES[loc[1]]
    return INVALID_BODY_MESSAGE


# ─────────────────────────────────────────────
# Dependencies
# ─────────────────────────────────────────────

def get_crawler_engine() -> CrawlerEngine:
    return CrawlerEngine()


def get_bulk_orchestrator(
    engine: Annotated[CrawlerEngine, Depends(get_crawler_engine)],
) -> BulkOrchestrator:
    return BulkOrchestrator(engine.analyze)


Engine = Annotated[CrawlerEngine, Depends(get_crawler_engine)]
Orchestrator = Annotated[BulkOrchestrator, Depends(get_bulk_orchestrator)]


# ─────────────────────────────────────────────
# Routes
# ─────────────────────────────────────────────

@router.post(
    "",
    response_model=AnalysisResult,
    summary="Analyze a single URL",
)
async def analyze_url(request: AnalyzeRequest, engine: Engine) -> AnalysisResult:
    if not request.url:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="URL is required")
    return await engine.analyze(request.url)


@router.post(
    "/bulk",
    response_model=BulkResult,
    summary="Analyze up to 50 URLs in concurrent batches",
)
async def analyze_bulk(request: BulkAnalyzeRequest, orchestrator: Orchestrator) -> BulkResult:
    result = await orchestrator.run(request.urls, request.max_concurrent)
    logger.info(
        "Bulk analysis finished",
        total=result.summary.total,
        successful=result.summary.successful,
        failed=result.summary.failed,
    )
    return result


@router.post(
    "/export",
    summary="Download analysis results as a JSON document",
)
async def export_analysis(request: ExportRequest) -> Response:
    if not request.data:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Analysis data is required")

    first = request.data[0] if isinstance(request.data, list) else request.data
    filename = export_filename(str(first.get("url", "results")))
    return Response(
        content=export_json(request.data),
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
