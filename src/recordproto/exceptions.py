"""Exception hierarchy for recordproto.

This module defines all custom exceptions used throughout the package.
All exceptions inherit from RecordProtoError for easy catching of any
recordproto-specific error.

Declaration-time errors (SchemaError and subclasses) are raised while schemas
and converters are being built and should abort loading. Encode/decode errors
are raised per call and signal a mismatch between the data and the schemas
known to this process.
"""

from __future__ import annotations

from typing import Any


class RecordProtoError(Exception):
    """Base exception for all recordproto errors."""

    pass


class SchemaError(RecordProtoError):
    """Raised when a schema or converter declaration is invalid.

    Examples:
        - Two fields share a name or an index
        - An explicit index is not a positive integer
        - A schema name is re-bound to different content
    """

    pass


class DuplicateFieldName(SchemaError):
    """Raised when two fields of one schema share a name."""

    def __init__(self, schema: str, field: str) -> None:
        super().__init__(f"Schema {schema!r}: field {field!r} is already defined")
        self.schema = schema
        self.field = field


class DuplicateFieldIndex(SchemaError):
    """Raised when two fields of one schema share an index."""

    def __init__(self, schema: str, index: int, field: str, existing: str) -> None:
        super().__init__(
            f"Schema {schema!r}: index {index} of field {field!r} "
            f"is already used by field {existing!r}"
        )
        self.schema = schema
        self.index = index
        self.field = field
        self.existing = existing


class InvalidIndex(SchemaError):
    """Raised when an explicit field index is not a positive integer."""

    def __init__(self, schema: str, field: str, index: Any) -> None:
        super().__init__(
            f"Schema {schema!r}: field {field!r} must have a positive integer index, "
            f"got {index!r}"
        )
        self.schema = schema
        self.field = field
        self.index = index


class SchemaConflict(SchemaError):
    """Raised when a schema name is already bound to a different descriptor."""

    def __init__(self, name: str) -> None:
        super().__init__(
            f"Schema {name!r} is already registered with different fields or indices. "
            f"Schema names must never be reused for a different shape."
        )
        self.name = name


class OwningTypeConflict(SchemaError):
    """Raised when a type is already bound to a different schema name."""

    def __init__(self, owning_type: type, existing: str, name: str) -> None:
        super().__init__(
            f"{owning_type.__qualname__} is already registered as schema {existing!r}, "
            f"cannot register it again as {name!r}"
        )
        self.owning_type = owning_type
        self.existing = existing
        self.name = name


class ConverterError(SchemaError):
    """Raised when a context converter mapping is malformed."""

    pass


class DuplicateSchemaIndex(ConverterError):
    """Raised when a converter mapping uses the same index twice."""


class DuplicateSchemaName(ConverterError):
    """Raised when a converter mapping lists the same schema name twice."""


class InvalidSchemaIndex(ConverterError):
    """Raised when a converter mapping index is not a positive integer."""


class InvalidSchemaName(ConverterError):
    """Raised when a converter mapping name is not a non-empty string."""


class EncodeError(RecordProtoError):
    """Raised when encoding a record fails.

    Examples:
        - The record type has no registered schema
        - The schema (or a nested schema) is not part of the converter mapping
        - A field value cannot be represented by the value codec
    """

    pass


class SchemaNotRegistered(EncodeError):
    """Raised when an instance's type has no registered descriptor."""

    def __init__(self, owning_type: type) -> None:
        super().__init__(
            f"Schema not found for {owning_type.__qualname__}. "
            f"Make sure the class is a Record with proto_schema set and its module is imported."
        )
        self.owning_type = owning_type


class SchemaNotInContext(EncodeError):
    """Raised when a schema name is absent from the active converter mapping."""

    def __init__(self, name: str, context: str, available: list[str]) -> None:
        super().__init__(
            f"Schema {name!r} not found in converter {context!r}. Available: {available}"
        )
        self.name = name
        self.context = context
        self.available = available


class DecodeError(RecordProtoError):
    """Raised when decoding binary data fails.

    Examples:
        - Corrupted or truncated data
        - Index unknown to the active converter
        - Schema name unknown to this process (deploy/version skew)
    """

    pass


class UnknownIndex(DecodeError):
    """Raised when an index is absent from the active converter mapping."""

    def __init__(self, index: Any, context: str) -> None:
        super().__init__(f"Unknown index {index!r} for converter {context!r}")
        self.index = index
        self.context = context


class SchemaNotFound(DecodeError):
    """Raised when no descriptor is registered under a schema name."""

    def __init__(self, name: str) -> None:
        super().__init__(
            f"Schema {name!r} not found in registry. Make sure the module is loaded."
        )
        self.name = name
