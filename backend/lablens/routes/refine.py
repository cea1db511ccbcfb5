"""Refinement API route: optional plain-language rewrite of an analysis.

Failures here never affect /api/analyze; clients keep the base result and
treat a 503 from this route as "refinement unavailable".
"""

import logging
from collections.abc import AsyncGenerator

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from lablens.auth import verify_api_key
from lablens.schemas import AnalysisResult
from lablens.services.refiner import (
    RefinementError,
    RefinementService,
    RefinementUnavailableError,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/refine", tags=["refine"])


class RefineRequest(BaseModel):
    """Request body for the refine endpoint."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    analysis_result: AnalysisResult = Field(description="A completed analysis to rephrase")


class RefineResponse(BaseModel):
    """Plain-language rendition of an analysis."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    refined_text: str


async def get_refinement_service() -> AsyncGenerator[RefinementService, None]:
    """Provide a RefinementService for the request, closing it afterwards.

    Raises:
        HTTPException: 503 if refinement is not configured.
    """
    try:
        service = RefinementService()
    except RefinementUnavailableError as e:
        logger.warning("Refinement requested but not configured")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(e),
        )
    try:
        yield service
    finally:
        await service.close()


@router.post("", response_model=RefineResponse)
async def refine(
    request: RefineRequest,
    _api_key: str = Depends(verify_api_key),
    service: RefinementService = Depends(get_refinement_service),
) -> RefineResponse:
    """Rephrase an analysis result in patient-friendly language.

    Raises:
        HTTPException: 503 if the refinement service fails.
    """
    try:
        text = await service.refine(request.analysis_result)
    except RefinementError:
        logger.exception("Refinement failed")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Failed to refine analysis",
        )
    return RefineResponse(refined_text=text)
