"""Record decoder.

This module provides the decode() function that converts a compressed
payload back to a record instance, resolving the schema index through the
converter and the field positions through the registered descriptor.

Slots missing at the end of the value tuple (data written before fields were
appended to the schema) decode as None. Slots beyond the descriptor's highest
index (data written by a newer schema version) are ignored.
"""

from __future__ import annotations

from typing import Any, Sequence

from pydantic import BaseModel

from ..config import DEFAULT_CONFIG, CodecConfig
from ..exceptions import DecodeError, SchemaNotFound, UnknownIndex
from ..logging import get_logger
from .converter import NAMED_CONTEXT, Context
from .registry import SchemaRegistry, resolve_registry
from .schema import SchemaDescriptor
from .wire import is_nest_marker, unpack_payload

logger = get_logger("codec")


def decode(
    data: bytes,
    converter: Context,
    *,
    registry: SchemaRegistry | None = None,
    config: CodecConfig = DEFAULT_CONFIG,
) -> BaseModel:
    """Decode compressed binary data to a record.

    Args:
        data: Bytes produced by encode()
        converter: Context converter the data was encoded with
        registry: Schema registry, defaults to the global registry
        config: Codec configuration

    Returns:
        Record instance of the type registered for the resolved schema

    Raises:
        DecodeError: If the data is corrupted
        UnknownIndex: If the top-level index is not in the converter mapping
        SchemaNotFound: If the resolved schema is not registered in this process

    Examples:
        ```python
        from recordproto import decode

        user = decode(data, USERS)
        print(user.name)
        ```
    """
    index, values = unpack_payload(data)
    return decode_payload(index, values, converter, registry=registry, config=config)


def decode_payload(
    index: Any,
    values: Sequence[Any],
    converter: Context,
    *,
    registry: SchemaRegistry | None = None,
    config: CodecConfig = DEFAULT_CONFIG,
) -> BaseModel:
    """Decode an uncompressed (schema_index, value_tuple) pair.

    Same errors as decode().
    """
    if not isinstance(values, (tuple, list)):
        raise DecodeError(f"Expected a value tuple, got {type(values).__name__}")

    registry = resolve_registry(registry)
    name = converter.name_for(index)
    descriptor = registry.require_by_name(name)
    return _build_record(descriptor, values, converter, registry, config, depth=1)


def decode_named(
    data: bytes,
    *,
    registry: SchemaRegistry | None = None,
    config: CodecConfig = DEFAULT_CONFIG,
) -> BaseModel:
    """Decode data produced by encode_named()."""
    return decode(data, NAMED_CONTEXT, registry=registry, config=config)


def _build_record(
    descriptor: SchemaDescriptor,
    values: Sequence[Any],
    converter: Context,
    registry: SchemaRegistry,
    config: CodecConfig,
    depth: int,
) -> BaseModel:
    if depth > config.max_depth:
        raise DecodeError(f"Record nesting exceeds max_depth={config.max_depth}")

    record_class = registry.type_for(descriptor.name)
    if record_class is None:
        raise SchemaNotFound(descriptor.name)

    field_values: dict[str, Any] = {}
    for field_name in descriptor.fields:
        position = descriptor.field_indices[field_name]
        raw = values[position - 1] if position <= len(values) else None
        field_values[field_name] = _decode_value(raw, converter, registry, config, depth)

    try:
        return record_class.model_construct(**field_values)
    except Exception as e:
        raise DecodeError(f"Failed to construct {record_class.__name__}: {e}") from e


def _decode_value(
    raw: Any,
    converter: Context,
    registry: SchemaRegistry,
    config: CodecConfig,
    depth: int,
) -> Any:
    """Rebuild a nested record from a nesting marker; pass anything else through."""
    if not is_nest_marker(raw):
        return raw

    _, index, values = raw
    try:
        descriptor = registry.require_by_name(converter.name_for(index))
    except (UnknownIndex, SchemaNotFound):
        # Ordinary data that happens to look like a marker
        logger.debug(
            "Marker-shaped value with unresolvable index %r kept as literal data", index
        )
        return raw

    return _build_record(descriptor, values, converter, registry, config, depth + 1)
