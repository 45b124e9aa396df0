"""recordproto: compact index-based record serialization

A Python library that serializes Pydantic records without repeating their
schema and field names: the schema name becomes a small integer scoped to a
context converter, and field names become tuple positions. Values are packed
with MessagePack and compressed with zlib.

Key Features:
- Pydantic-based record modeling
- Context-scoped schema indices (no global index collisions)
- Nested records encoded recursively through the same converter
- Additive schema evolution (appended fields decode as None in old data)

Quick Start:
    >>> from typing import ClassVar
    >>> from recordproto import PayloadConverter, Record
    >>>
    >>> class User(Record):
    ...     proto_schema: ClassVar[str] = "myapp.users.user"
    ...     id: int | None = None
    ...     name: str | None = None
    >>>
    >>> USERS = PayloadConverter("myapp.users", [(1, "myapp.users.user")])
    >>> data = USERS.encode(User(id=1, name="Alice"))
    >>> USERS.decode(data)
    User(id=1, name='Alice')
"""

from __future__ import annotations

from .codec import (
    NAMED_CONTEXT,
    NEST_TAG,
    REGISTRY,
    PayloadConverter,
    SchemaDescriptor,
    SchemaRegistry,
    decode,
    decode_named,
    decode_payload,
    define,
    encode,
    encode_named,
    encode_payload,
    get_schema,
    get_schema_by_type,
    register_schema,
)
from .config import DEFAULT_CONFIG, CodecConfig
from .exceptions import (
    ConverterError,
    DecodeError,
    DuplicateFieldIndex,
    DuplicateFieldName,
    DuplicateSchemaIndex,
    DuplicateSchemaName,
    EncodeError,
    InvalidIndex,
    InvalidSchemaIndex,
    InvalidSchemaName,
    OwningTypeConflict,
    RecordProtoError,
    SchemaConflict,
    SchemaError,
    SchemaNotFound,
    SchemaNotInContext,
    SchemaNotRegistered,
    UnknownIndex,
)
from .logging import configure_logging, get_logger
from .models import FieldIndex, Record
from .utils import encoded_size, payload_of

__version__ = "0.1.0"

__all__ = [
    # Core API
    "Record",
    "FieldIndex",
    "PayloadConverter",
    "encode",
    "decode",
    "encode_payload",
    "decode_payload",
    "encode_named",
    "decode_named",
    # Schemas
    "SchemaDescriptor",
    "define",
    "SchemaRegistry",
    "REGISTRY",
    "register_schema",
    "get_schema",
    "get_schema_by_type",
    "NAMED_CONTEXT",
    "NEST_TAG",
    # Configuration
    "CodecConfig",
    "DEFAULT_CONFIG",
    "configure_logging",
    "get_logger",
    # Exceptions
    "RecordProtoError",
    "SchemaError",
    "DuplicateFieldIndex",
    "DuplicateFieldName",
    "InvalidIndex",
    "SchemaConflict",
    "OwningTypeConflict",
    "ConverterError",
    "DuplicateSchemaIndex",
    "DuplicateSchemaName",
    "InvalidSchemaIndex",
    "InvalidSchemaName",
    "EncodeError",
    "SchemaNotRegistered",
    "SchemaNotInContext",
    "DecodeError",
    "UnknownIndex",
    "SchemaNotFound",
    # Utilities
    "encoded_size",
    "payload_of",
    # Version
    "__version__",
]
