"""HTTP route definitions for the service."""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Query, status
from fastapi.responses import JSONResponse

from app.errors import error_response
from app.schemas import (
    ErrorResponse,
    MeasurementCreatedResponse,
    MeasurementData,
    MetricsResponse,
    RangeQueryResponse,
)
from services.measurements import MeasurementService, build_default_service

router = APIRouter(prefix="/api/measurements", tags=["measurements"])
fallback_router = APIRouter(include_in_schema=False)

_ERRORS = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
    status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
}
_ALL_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]


def get_service() -> MeasurementService:
    return build_default_service()


# Query parameters are taken as raw strings so that parsing failures surface
# as ValidationError payloads instead of FastAPI's own 422 responses.


@router.get("/", include_in_schema=False)
@router.get(
    "",
    response_model=RangeQueryResponse,
    responses=_ERRORS,
    summary="Paginated values of one field over an inclusive day range.",
)
def query_range(
    field: Optional[str] = Query(None, description="One of field1, field2, field3."),
    start_date: Optional[str] = Query(None, description="YYYY-MM-DD, inclusive."),
    end_date: Optional[str] = Query(None, description="YYYY-MM-DD, inclusive."),
    page: Optional[str] = Query(None, description="Page number, default 1."),
    limit: Optional[str] = Query(None, description="Page size 1..5000, default 500."),
    service: MeasurementService = Depends(get_service),
) -> RangeQueryResponse:
    result = service.query_range(field, start_date, end_date, page=page, limit=limit)
    return RangeQueryResponse.from_page(result)


@router.get(
    "/metrics",
    response_model=MetricsResponse,
    responses=_ERRORS,
    summary="Average, min, max, population std dev and count for one field.",
)
def field_metrics(
    field: Optional[str] = Query(None),
    start_date: Optional[str] = Query(None),
    end_date: Optional[str] = Query(None),
    service: MeasurementService = Depends(get_service),
) -> MetricsResponse:
    result = service.aggregate(field, start_date, end_date)
    return MetricsResponse.from_statistics(result)


@router.post("/", status_code=status.HTTP_201_CREATED, include_in_schema=False)
@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=MeasurementCreatedResponse,
    responses={status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse}},
    summary="Store a single measurement.",
)
def create_measurement(
    payload: Optional[Dict[str, Any]] = Body(None),
    service: MeasurementService = Depends(get_service),
) -> MeasurementCreatedResponse:
    measurement = service.ingest(payload)
    return MeasurementCreatedResponse(data=MeasurementData.from_measurement(measurement))


@fallback_router.get(
    "/health",
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@fallback_router.api_route("/api", methods=_ALL_METHODS)
@fallback_router.api_route("/api/{path:path}", methods=_ALL_METHODS)
async def unknown_api_route() -> JSONResponse:
    return error_response(status.HTTP_404_NOT_FOUND, "NotFound", "API route not found")
