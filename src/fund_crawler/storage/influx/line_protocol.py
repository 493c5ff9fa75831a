"""InfluxDB line protocol encoding.

Format: measurement,tag1=value1,tag2=value2 field1=value1,field2="text" timestamp

Escaping rules:
- measurement: comma, space
- tag keys, tag values, field keys: comma, equals sign, space
- string field values: double quote, backslash (value is quoted)
"""

from datetime import UTC, datetime

from fund_crawler.storage.schemas.time_series import (
    BatchPoints,
    FieldValue,
    MeasurementPoint,
)

EPOCH = datetime(1970, 1, 1, tzinfo=UTC)

# Nanoseconds per unit of each write precision
PRECISION_DIVISORS = {
    "ns": 1,
    "n": 1,
    "u": 1_000,
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60_000_000_000,
    "h": 3_600_000_000_000,
}

_MEASUREMENT_ESCAPES = str.maketrans({",": r"\,", " ": r"\ "})
_KEY_ESCAPES = str.maketrans({",": r"\,", "=": r"\=", " ": r"\ "})
_STRING_ESCAPES = str.maketrans({"\\": "\\\\", '"': '\\"'})


def escape_measurement(value: str) -> str:
    return value.translate(_MEASUREMENT_ESCAPES)


def escape_key(value: str) -> str:
    """Escape a tag key, tag value or field key."""
    return value.translate(_KEY_ESCAPES)


def format_field_value(value: FieldValue) -> str:
    # bool first: it is a subclass of int
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return f"{value}i"
    if isinstance(value, float):
        return repr(value)
    return f'"{value.translate(_STRING_ESCAPES)}"'


def to_epoch(timestamp: datetime, precision: str = "ns") -> int:
    """Integer timestamp in the given precision, computed without float rounding."""
    try:
        divisor = PRECISION_DIVISORS[precision]
    except KeyError:
        raise ValueError(f"Unsupported precision: {precision}") from None
    delta = timestamp - EPOCH
    nanos = (delta.days * 86_400 + delta.seconds) * 1_000_000_000
    nanos += delta.microseconds * 1_000
    return nanos // divisor


def encode_point(point: MeasurementPoint, precision: str = "ns") -> str:
    """
    Render one point as a line.

    Tags are sorted by key; tags with empty values are left out since
    InfluxDB rejects them.
    """
    parts = [escape_measurement(point.measurement)]
    for key in sorted(point.tags):
        value = point.tags[key]
        if value == "":
            continue
        parts.append(f"{escape_key(key)}={escape_key(value)}")
    series = ",".join(parts)

    fields = ",".join(
        f"{escape_key(key)}={format_field_value(value)}"
        for key, value in point.fields.items()
    )
    if not fields:
        raise ValueError("cannot encode a point without fields")

    return f"{series} {fields} {to_epoch(point.timestamp, precision)}"


def encode_batch(batch: BatchPoints) -> str:
    """Render every point of the batch, one per line."""
    return "\n".join(encode_point(point, batch.precision) for point in batch.points)
