"""Pydantic schemas for the HTTP API layer."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from models.records import Measurement, format_timestamp
from services.measurements import FieldStatistics, RangePage


class RangeMeta(BaseModel):
    """Echo of the request plus paging totals."""

    field: str
    start_date: str
    end_date: str
    page: int = Field(..., ge=1)
    limit: int = Field(..., ge=1)
    total: int = Field(..., ge=0, description="Matches across all pages.")
    returned: int = Field(..., ge=0, description="Items in this page.")


class RangeQueryResponse(BaseModel):
    meta: RangeMeta
    data: List[Dict[str, Any]] = Field(
        default_factory=list,
        description="Points shaped as {timestamp, <field>} ordered by timestamp.",
    )

    @classmethod
    def from_page(cls, result: RangePage) -> "RangeQueryResponse":
        name = result.field.value
        assert result.dates.start_date is not None and result.dates.end_date is not None
        return cls(
            meta=RangeMeta(
                field=name,
                start_date=result.dates.start_date,
                end_date=result.dates.end_date,
                page=result.pagination.page,
                limit=result.pagination.limit,
                total=result.total,
                returned=len(result.points),
            ),
            data=[
                {"timestamp": format_timestamp(point.timestamp), name: point.value}
                for point in result.points
            ],
        )


class DateRangeEcho(BaseModel):
    start_date: Optional[str] = None
    end_date: Optional[str] = None


class MetricsResponse(BaseModel):
    """Rounded statistics for one field."""

    model_config = ConfigDict(populate_by_name=True)

    field: str
    range: Optional[DateRangeEcho] = None
    count: int = Field(..., ge=0)
    avg: float
    min: float
    max: float
    std_dev: float = Field(..., ge=0, alias="stdDev")

    @classmethod
    def from_statistics(cls, result: FieldStatistics) -> "MetricsResponse":
        dates = result.dates
        summary = result.summary
        echo = (
            DateRangeEcho(start_date=dates.start_date, end_date=dates.end_date)
            if dates.supplied
            else None
        )
        return cls(
            field=result.field.value,
            range=echo,
            count=summary.count,
            avg=summary.avg,
            min=summary.min,
            max=summary.max,
            std_dev=summary.std_dev,
        )


class MeasurementData(BaseModel):
    timestamp: datetime
    field1: float
    field2: float
    field3: float

    @field_serializer("timestamp")
    def _serialize_timestamp(self, value: datetime) -> str:
        return format_timestamp(value)

    @classmethod
    def from_measurement(cls, measurement: Measurement) -> "MeasurementData":
        return cls(
            timestamp=measurement.timestamp,
            field1=measurement.field1,
            field2=measurement.field2,
            field3=measurement.field3,
        )


class MeasurementCreatedResponse(BaseModel):
    message: str = "Measurement created"
    data: MeasurementData


class ErrorResponse(BaseModel):
    """Uniform failure payload."""

    error: str
    message: str
