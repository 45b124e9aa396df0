"""Compact record codec for recordproto.

This module provides the schema descriptor, the schema registry, context
converters, and the encode/decode engine built on them.
"""

from __future__ import annotations

from .converter import NAMED_CONTEXT, NamedContext, PayloadConverter
from .decoder import decode, decode_named, decode_payload
from .encoder import encode, encode_named, encode_payload
from .registry import (
    REGISTRY,
    SchemaRegistry,
    get_schema,
    get_schema_by_type,
    register_schema,
)
from .schema import SchemaDescriptor, define
from .wire import NEST_TAG

__all__ = [
    "encode",
    "decode",
    "encode_payload",
    "decode_payload",
    "encode_named",
    "decode_named",
    "SchemaDescriptor",
    "define",
    "SchemaRegistry",
    "REGISTRY",
    "register_schema",
    "get_schema",
    "get_schema_by_type",
    "PayloadConverter",
    "NamedContext",
    "NAMED_CONTEXT",
    "NEST_TAG",
]
