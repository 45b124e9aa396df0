"""Record encoder.

This module provides the encode() function that converts a registered record
instance into a compact payload: the schema name is replaced by the
converter's index and field names are replaced by tuple positions.

Payload shape (before msgpack + zlib):

    (schema_index, (slot_1, slot_2, ..., slot_n))

Slot i holds the value of the field with index i, or None when the field is
absent or no field uses that index. Values that are themselves registered
records become nesting markers (NEST_TAG, nested_index, nested_slots) whose
index is resolved through the same converter.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from ..config import DEFAULT_CONFIG, CodecConfig
from ..exceptions import EncodeError
from ..logging import get_logger
from .converter import NAMED_CONTEXT, Context
from .registry import SchemaRegistry, resolve_registry
from .wire import NEST_TAG, pack_payload

logger = get_logger("codec")


def encode(
    instance: BaseModel,
    converter: Context,
    *,
    registry: SchemaRegistry | None = None,
    config: CodecConfig = DEFAULT_CONFIG,
) -> bytes:
    """Encode a record to compressed binary format.

    Args:
        instance: Record instance whose type is registered
        converter: Context converter supplying the schema index
        registry: Schema registry, defaults to the global registry
        config: Codec configuration

    Returns:
        Compressed binary payload

    Raises:
        SchemaNotRegistered: If the instance's type (or a nested record's
            type) has no registered schema
        SchemaNotInContext: If the schema (or a nested schema) is not part of
            the converter mapping
        EncodeError: If a field value cannot be serialized

    Examples:
        ```python
        from recordproto import PayloadConverter, Record, encode

        class User(Record):
            proto_schema: ClassVar[str] = "myapp.users.user"

            id: int | None = None
            name: str | None = None

        USERS = PayloadConverter("myapp.users", [(1, "myapp.users.user")])

        data = encode(User(id=1, name="Alice"), USERS)
        ```
    """
    index, values = encode_payload(instance, converter, registry=registry, config=config)
    data = pack_payload(index, values, config)

    logger.debug(
        "Encoded %s as index %r in %r (%d slots, %d bytes)",
        type(instance).__qualname__,
        index,
        converter.context_name,
        len(values),
        len(data),
    )
    return data


def encode_payload(
    instance: BaseModel,
    converter: Context,
    *,
    registry: SchemaRegistry | None = None,
    config: CodecConfig = DEFAULT_CONFIG,
) -> tuple[Any, tuple[Any, ...]]:
    """Build the uncompressed (schema_index, value_tuple) pair for a record.

    Same arguments and errors as encode().
    """
    return _encode_record(instance, converter, resolve_registry(registry), config, depth=1)


def encode_named(
    instance: BaseModel,
    *,
    registry: SchemaRegistry | None = None,
    config: CodecConfig = DEFAULT_CONFIG,
) -> bytes:
    """Encode a record in self-describing mode (schema name instead of index).

    No converter is needed: any registered schema can be encoded, and
    decode_named() can decode it in any process that has the schema loaded.
    The payload is larger than with a converter.
    """
    return encode(instance, NAMED_CONTEXT, registry=registry, config=config)


def _encode_record(
    instance: BaseModel,
    converter: Context,
    registry: SchemaRegistry,
    config: CodecConfig,
    depth: int,
) -> tuple[Any, tuple[Any, ...]]:
    if depth > config.max_depth:
        raise EncodeError(f"Record nesting exceeds max_depth={config.max_depth}")

    descriptor = registry.require_by_type(type(instance))
    index = converter.index_for(descriptor.name)

    values = []
    for position in range(1, descriptor.max_index + 1):
        field_name = descriptor.index_field(position)
        value = None if field_name is None else getattr(instance, field_name, None)
        values.append(_encode_value(value, converter, registry, config, depth))

    if config.trim_trailing_absent:
        while values and values[-1] is None:
            values.pop()

    return index, tuple(values)


def _encode_value(
    value: Any,
    converter: Context,
    registry: SchemaRegistry,
    config: CodecConfig,
    depth: int,
) -> Any:
    """Replace a registered record with a nesting marker; pass anything else through."""
    if isinstance(value, BaseModel) and registry.lookup_by_type(type(value)) is not None:
        index, values = _encode_record(value, converter, registry, config, depth + 1)
        return (NEST_TAG, index, values)
    return value
