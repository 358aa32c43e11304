"""JSON encoding of cache-resident view models."""

import json
from dataclasses import asdict, fields
from datetime import datetime
from decimal import Decimal
from typing import Any, Type, TypeVar, Union

from fincore.domain.views import Quote, IndicatorResult

V = TypeVar("V", Quote, IndicatorResult)

_DECIMAL_FIELDS = {
    Quote: {"current_price", "previous_close", "price_change", "price_change_percent"},
    IndicatorResult: {"value"},
}
_DATETIME_FIELDS = {
    Quote: {"last_updated"},
    IndicatorResult: {"calculated_at"},
}


def to_bytes(view: Union[Quote, IndicatorResult]) -> bytes:
    """Serialize a view model to JSON bytes."""
    data = asdict(view)
    for key, value in data.items():
        if isinstance(value, Decimal):
            data[key] = str(value)
        elif isinstance(value, datetime):
            data[key] = value.isoformat()
        elif hasattr(value, "value"):  # Enum
            data[key] = value.value
    return json.dumps(data).encode("utf-8")


def from_bytes(cls: Type[V], raw: bytes) -> V:
    """Deserialize JSON bytes produced by to_bytes back into cls."""
    data: dict[str, Any] = json.loads(raw)
    known = {f.name for f in fields(cls)}
    data = {k: v for k, v in data.items() if k in known}
    for key in _DECIMAL_FIELDS[cls]:
        data[key] = Decimal(data[key])
    for key in _DATETIME_FIELDS[cls]:
        data[key] = datetime.fromisoformat(data[key])
    return cls(**data)
