"""HTTP route definitions for the service."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status
from pydantic import ValidationError

from app.schemas import RowIssue, RunSummaryModel, TransformRequest, TransformResponse
from models.errors import ERROR, WARNING, NoDataError, TransformError
from services.normalizer import Normalizer

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/transform",
    response_model=TransformResponse,
    response_model_by_alias=True,
    summary="Normalize a provider payload into the ingest document.",
)
def transform(request: TransformRequest) -> TransformResponse:
    try:
        normalizer = Normalizer(request.to_config())
        normalizer.process(request.data)
    except ValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except (NoDataError, TransformError) as exc:
        logger.info("Rejected payload: %s", exc, extra={"provider": request.provider})
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc

    issues = [
        RowIssue(category=category, message=entry.message)
        for category in (ERROR, WARNING)
        for entry in normalizer.log.entries(category)
    ]
    return TransformResponse(
        document=normalizer.data(),
        summary=RunSummaryModel.model_validate(normalizer.summary().as_dict()),
        issues=issues,
    )


@router.get(
    "/health",
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.get(
    "/",
    summary="Root endpoint mirrors health information.",
    status_code=status.HTTP_200_OK,
)
async def root() -> dict[str, str]:
    return {"status": "ok", "detail": "See /health for service status."}
