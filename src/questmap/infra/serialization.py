# questmap/infra/serialization.py
from __future__ import annotations

from dataclasses import fields, is_dataclass
from datetime import datetime, timezone
from enum import Enum
from types import UnionType
from typing import Any, Mapping, Type, TypeVar, Union, get_args, get_origin, get_type_hints

T = TypeVar("T")

# ---------- Encoding (dataclass -> document) ----------


def to_bson(x: Any) -> Any:
    if isinstance(x, Enum):
        return x.value

    # datetime -> naive UTC (what PyMongo stores)
    if isinstance(x, datetime):
        if x.tzinfo is not None:
            x = x.astimezone(timezone.utc).replace(tzinfo=None)
        return x

    if is_dataclass(x) and not isinstance(x, type):
        return {f.name: to_bson(getattr(x, f.name)) for f in fields(x)}

    if isinstance(x, dict):
        return {k: to_bson(v) for k, v in x.items()}

    if isinstance(x, (list, tuple, set)):
        return [to_bson(v) for v in x]

    return x


# ---------- Decoding (document -> dataclass) ----------


def from_bson(cls: Type[T], doc: Mapping[str, Any] | None) -> T | None:
    """
    Rebuild a dataclass of type ``cls`` from a stored document.
    Unknown keys such as Mongo's ``_id`` are ignored; missing keys fall back
    to the dataclass defaults.
    """
    if doc is None:
        return None

    hints = get_type_hints(cls)
    kwargs = {}
    for f in fields(cls):  # type: ignore[arg-type]
        if f.name not in doc:
            continue
        kwargs[f.name] = _decode(hints.get(f.name, f.type), doc[f.name])
    return cls(**kwargs)


def _decode(expected_type: Any, value: Any) -> Any:
    if value is None:
        return None

    origin = get_origin(expected_type)
    if origin in (Union, UnionType):
        inner = next((a for a in get_args(expected_type) if a is not type(None)), Any)
        return _decode(inner, value)

    if isinstance(expected_type, type) and issubclass(expected_type, Enum):
        return expected_type(value)

    # Stored as naive UTC unless the client is tz-aware; always hand back aware UTC
    if expected_type is datetime and isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    if expected_type is int and not isinstance(value, bool):
        return int(value)

    return value
