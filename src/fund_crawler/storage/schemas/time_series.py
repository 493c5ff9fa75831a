"""Time-series data models for storage layer.

Models for:
- MeasurementPoint: One tagged, timestamped InfluxDB point
- BatchPoints: The bulk-write unit holding every point for one fund

All models use:
- Pydantic for validation
- Timezone-aware datetimes (naive values are rejected)
- Only str/float/int/bool field values, the types line protocol can carry
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

FieldValue = str | float | int | bool


class MeasurementPoint(BaseModel):
    """One InfluxDB point.

    Stored in: measurement `fund` of database `fund` (by default), tagged
    with the fund's identity.
    """

    model_config = ConfigDict(frozen=True)

    measurement: str = Field(..., min_length=1, description="Measurement name")
    tags: dict[str, str] = Field(default_factory=dict, description="Tag set")
    fields: dict[str, FieldValue] = Field(..., description="Field set")
    timestamp: datetime = Field(..., description="Point time (timezone-aware)")

    @field_validator("fields")
    @classmethod
    def validate_fields(cls, v: dict[str, FieldValue]) -> dict[str, FieldValue]:
        if not v:
            raise ValueError("a point needs at least one field")
        return v

    @field_validator("timestamp")
    @classmethod
    def validate_timestamp(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            raise ValueError("timestamp must be timezone-aware")
        return v


class BatchPoints(BaseModel):
    """Bulk-write unit addressed to one database."""

    database: str = Field(..., min_length=1)
    precision: str = Field(default="ns")
    retention_policy: str | None = Field(default=None)
    points: list[MeasurementPoint] = Field(default_factory=list)

    def add_point(self, point: MeasurementPoint) -> None:
        self.points.append(point)

    def __len__(self) -> int:
        return len(self.points)
