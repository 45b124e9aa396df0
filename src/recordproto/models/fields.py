"""Field helpers.

This module provides convenience functions for declaring record fields with
recordproto-specific metadata.
"""

from __future__ import annotations

from typing import Any, cast

from pydantic import Field
from pydantic.fields import FieldInfo

from ..codec.schema import INDEX_KEY


def FieldIndex(index: int, *, default: Any = None, **kwargs: Any) -> FieldInfo:
    """Create a field with an explicit, stable wire index.

    Explicit indices let fields be reordered or removed from the class body
    without moving the data of the others. Once one field of a record uses
    FieldIndex(), every field must.

    The index is validated when the record class is created (positive,
    unique within the record).

    Args:
        index: Field index (positive integer, unique within the record)
        default: Default value (None unless given)
        **kwargs: Additional Field() arguments (description, etc.)

    Returns:
        Pydantic FieldInfo suitable for use as a field default

    Example:
        >>> class Session(Record):
        ...     proto_schema: ClassVar[str] = "myapp.users.session"
        ...
        ...     token: str | None = FieldIndex(1)
        ...     # index 2 retired, never reuse it
        ...     user_id: int | None = FieldIndex(3)
    """
    extra = dict(kwargs.pop("json_schema_extra", None) or {})
    extra[INDEX_KEY] = index
    return cast(FieldInfo, Field(default=default, json_schema_extra=extra, **kwargs))
