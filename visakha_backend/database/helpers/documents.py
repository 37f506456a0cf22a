"""
Document shaping helpers.

Entities are stored with snake_case attributes; the REST surface speaks
camelCase documents. These helpers convert between the two for any mapped
entity, which is what the generic collection CRUD and the curation endpoints
rely on.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Iterable

from pydantic.alias_generators import to_camel, to_snake
from sqlalchemy import DateTime, Uuid, inspect

from visakha_backend.database.core.errors import InvalidRequestError
from visakha_backend.database.helpers.identifiers import parse_object_id


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_document(entity) -> Dict[str, Any]:
    """Return every mapped column of `entity` keyed by its camelCase name."""
    mapper = inspect(entity).mapper
    return {to_camel(attr.key): getattr(entity, attr.key) for attr in mapper.column_attrs}


def document_columns(entity_cls) -> Dict[str, Any]:
    """Map attribute name → Column for a mapped class."""
    return {attr.key: attr.columns[0] for attr in inspect(entity_cls).column_attrs}


def coerce_value(column, value, field: str):
    """
    Convert a JSON value into what `column` stores.

    - UUID columns accept their string form.
    - DateTime columns accept ISO8601 strings (a trailing ``Z`` is UTC).
    """
    if value is None:
        return None
    if isinstance(column.type, Uuid) and not isinstance(value, (bytes,)):
        return parse_object_id(value, field)
    if isinstance(column.type, DateTime) and isinstance(value, str):
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            raise InvalidRequestError("Invalid request", f"{field} is not an ISO8601 datetime: {value!r}") from None
    return value


def apply_document(entity, data: Dict[str, Any], read_only: Iterable[str] = ("id",)) -> None:
    """
    Copy a camelCase (or snake_case) document onto `entity`.

    Keys listed in `read_only` (attribute names) and ``_id`` are dropped.
    Unknown keys are rejected so a typo never silently disappears.
    """
    columns = document_columns(type(entity))
    skipped = set(read_only) | {"_id"}
    unknown = []
    for key, value in data.items():
        attribute = key if key in columns else to_snake(key)
        if key in skipped or attribute in skipped:
            continue
        if attribute not in columns:
            unknown.append(key)
            continue
        setattr(entity, attribute, coerce_value(columns[attribute], value, key))
    if unknown:
        raise InvalidRequestError("Invalid request", f"Unknown fields: {', '.join(sorted(unknown))}")
