"""Payload size and inspection utilities."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from ..codec.converter import Context
from ..codec.encoder import encode
from ..codec.registry import SchemaRegistry
from ..codec.wire import unpack_payload
from ..config import DEFAULT_CONFIG, CodecConfig


def encoded_size(
    instance: BaseModel,
    converter: Context,
    *,
    registry: SchemaRegistry | None = None,
    config: CodecConfig = DEFAULT_CONFIG,
) -> int:
    """Return the size in bytes of encode(instance, converter).

    Raises:
        Same errors as encode()

    Example:
        >>> encoded_size(User(id=1, name="Alice"), USERS)
        18
    """
    return len(encode(instance, converter, registry=registry, config=config))


def payload_of(data: bytes) -> tuple[Any, tuple[Any, ...]]:
    """Return the raw (schema_index, value_tuple) pair inside encoded data.

    No schema lookup happens: nested records show up as nesting markers.

    Example:
        >>> payload_of(USERS.encode(User(id=42, name="Alice")))
        (1, (42, 'Alice'))
    """
    return unpack_payload(data)
