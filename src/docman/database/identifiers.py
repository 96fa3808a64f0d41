"""Identifier normalisation at the store boundary.

References arrive in several shapes: UUID objects, their string form,
populated records, or JSON objects carrying ``_id``/``id``. Everything
below the query layer compares plain ``uuid.UUID`` values only.
"""

from __future__ import annotations

import uuid
from collections.abc import Mapping
from typing import Any


def to_uuid(value: Any) -> uuid.UUID:
    """Normalise a reference to a UUID.

    Args:
        value: UUID, UUID string, mapping with ``_id`` or ``id``, or an
            object exposing an ``id`` attribute.

    Returns:
        The referenced UUID.

    Raises:
        ValueError: If the value cannot be interpreted as an identifier.
    """
    if isinstance(value, uuid.UUID):
        return value
    if isinstance(value, str):
        return uuid.UUID(value.strip())
    if isinstance(value, Mapping):
        for key in ("_id", "id"):
            if value.get(key) is not None:
                return to_uuid(value[key])
        raise ValueError(f"Mapping has no identifier: {value!r}")
    ref = getattr(value, "id", None)
    if ref is not None:
        return to_uuid(ref)
    raise ValueError(f"Cannot interpret {value!r} as an identifier")


def to_optional_uuid(value: Any) -> uuid.UUID | None:
    """Like :func:`to_uuid` but passes ``None`` through."""
    if value is None:
        return None
    return to_uuid(value)
