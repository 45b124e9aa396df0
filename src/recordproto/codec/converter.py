"""Context-scoped payload converters.

A PayloadConverter maps small positive integers to schema names for one
bounded context (e.g. one domain package). Indices only have meaning inside
their converter: two converters may reuse the same index for different
schemas, and the converter identity is never written to the wire.

Schema existence is not checked when a converter is built, so contexts can be
declared before the modules holding their schemas are imported. Encode and
decode resolve schemas lazily and fail then if one is missing.
"""

from __future__ import annotations

from typing import Any, Iterable, Sequence, Union

from pydantic import BaseModel

from ..config import DEFAULT_CONFIG, CodecConfig
from ..exceptions import (
    DuplicateSchemaIndex,
    DuplicateSchemaName,
    InvalidSchemaIndex,
    InvalidSchemaName,
    SchemaNotFound,
    SchemaNotInContext,
    UnknownIndex,
)
from ..logging import get_logger
from .registry import SchemaRegistry, resolve_registry


logger = get_logger("converter")


class PayloadConverter:
    """Index <-> schema name mapping for one context.

    Example:
        >>> USERS = PayloadConverter(
        ...     "myapp.users",
        ...     [
        ...         (1, "myapp.users.user"),
        ...         (2, "myapp.users.profile"),
        ...         (3, "myapp.users.session"),
        ...     ],
        ... )
        >>> data = USERS.encode(User(id=1, name="Alice"))
        >>> USERS.decode(data)
        User(id=1, name='Alice', email=None)
    """

    def __init__(self, context_name: str, mapping: Iterable[tuple[int, str]]) -> None:
        """Build and validate a converter.

        Args:
            context_name: Name of the context (diagnostics only, never serialized)
            mapping: (index, schema_name) pairs

        Raises:
            DuplicateSchemaIndex: If an index appears twice
            DuplicateSchemaName: If a schema name appears twice
            InvalidSchemaIndex: If an index is not a positive integer
            InvalidSchemaName: If a name is not a non-empty string
        """
        self.context_name = context_name
        pairs = [tuple(item) for item in mapping]
        _validate_mapping(context_name, pairs)

        self._mapping: tuple[tuple[int, str], ...] = tuple(pairs)  # type: ignore[arg-type]
        self._name_to_index = {name: index for index, name in self._mapping}
        self._index_to_name = {index: name for index, name in self._mapping}

        logger.debug(
            "Built converter %r with %d schemas", context_name, len(self._mapping)
        )

    @property
    def mapping(self) -> tuple[tuple[int, str], ...]:
        """The declared (index, schema_name) pairs, in declaration order."""
        return self._mapping

    @property
    def names(self) -> list[str]:
        return [name for _, name in self._mapping]

    @property
    def indices(self) -> list[int]:
        return [index for index, _ in self._mapping]

    def index_for(self, schema_name: str) -> int:
        """Return the index of a schema in this context.

        Raises:
            SchemaNotInContext: If the schema is not part of the mapping
        """
        index = self._name_to_index.get(schema_name)
        if index is None:
            raise SchemaNotInContext(schema_name, self.context_name, self.names)
        return index

    def name_for(self, index: Any) -> str:
        """Return the schema name bound to an index in this context.

        Raises:
            UnknownIndex: If the index is not part of the mapping
        """
        # Exact ints only: True and 1.0 hash like 1 but are not indices
        name = self._index_to_name.get(index) if type(index) is int else None
        if name is None:
            raise UnknownIndex(index, self.context_name)
        return name

    def missing_schemas(self, registry: SchemaRegistry | None = None) -> list[str]:
        """Return mapped schema names that the registry does not know (yet)."""
        registry = resolve_registry(registry)
        return [name for name in self.names if name not in registry]

    def check(self, registry: SchemaRegistry | None = None) -> None:
        """Eagerly verify that every mapped schema is registered.

        Raises:
            SchemaNotFound: For the first missing schema
        """
        missing = self.missing_schemas(registry)
        if missing:
            logger.warning(
                "Converter %r references unregistered schemas: %s",
                self.context_name,
                missing,
            )
            raise SchemaNotFound(missing[0])

    def encode(
        self,
        instance: BaseModel,
        *,
        registry: SchemaRegistry | None = None,
        config: CodecConfig = DEFAULT_CONFIG,
    ) -> bytes:
        """Encode a record using this converter. See recordproto.codec.encode()."""
        from .encoder import encode

        return encode(instance, self, registry=registry, config=config)

    def decode(
        self,
        data: bytes,
        *,
        registry: SchemaRegistry | None = None,
        config: CodecConfig = DEFAULT_CONFIG,
    ) -> BaseModel:
        """Decode bytes using this converter. See recordproto.codec.decode()."""
        from .decoder import decode

        return decode(data, self, registry=registry, config=config)

    def decode_payload(
        self,
        index: int,
        values: Sequence[Any],
        *,
        registry: SchemaRegistry | None = None,
        config: CodecConfig = DEFAULT_CONFIG,
    ) -> BaseModel:
        """Decode an already unpacked (index, value tuple) pair."""
        from .decoder import decode_payload

        return decode_payload(index, values, self, registry=registry, config=config)

    def __contains__(self, schema_name: object) -> bool:
        return schema_name in self._name_to_index

    def __len__(self) -> int:
        return len(self._mapping)

    def __repr__(self) -> str:
        return f"PayloadConverter({self.context_name!r}, {list(self._mapping)!r})"


def _validate_mapping(context_name: str, pairs: list[tuple[Any, ...]]) -> None:
    """Validate a converter mapping.

    Raises:
        ConverterError subclass describing the first problem found
    """
    for pair in pairs:
        if len(pair) != 2:
            raise InvalidSchemaIndex(
                f"Converter {context_name!r}: mapping entries must be (index, name) pairs, "
                f"got {pair!r}"
            )

    indices = [pair[0] for pair in pairs]
    names = [pair[1] for pair in pairs]

    invalid_indices = [
        index
        for index in indices
        if not isinstance(index, int) or isinstance(index, bool) or index < 1
    ]
    if invalid_indices:
        raise InvalidSchemaIndex(
            f"Converter {context_name!r}: invalid indices (must be positive integers): "
            f"{invalid_indices}"
        )

    invalid_names = [name for name in names if not isinstance(name, str) or not name]
    if invalid_names:
        raise InvalidSchemaName(
            f"Converter {context_name!r}: invalid schema names (must be non-empty strings): "
            f"{invalid_names}"
        )

    duplicate_indices = sorted({index for index in indices if indices.count(index) > 1})
    if duplicate_indices:
        raise DuplicateSchemaIndex(
            f"Converter {context_name!r}: duplicate indices in mapping: {duplicate_indices}"
        )

    duplicate_names = sorted({name for name in names if names.count(name) > 1})
    if duplicate_names:
        raise DuplicateSchemaName(
            f"Converter {context_name!r}: duplicate schema names in mapping: {duplicate_names}"
        )


class NamedContext:
    """Resolver that writes schema names instead of indices.

    Used by the self-describing mode (encode_named()/decode_named()). Any
    registered schema is accepted, at the cost of carrying its full name in
    every payload and nesting marker.
    """

    context_name = "named"

    def index_for(self, schema_name: str) -> str:
        return schema_name

    def name_for(self, key: Any) -> str:
        if not isinstance(key, str):
            raise UnknownIndex(key, self.context_name)
        return key

    def __repr__(self) -> str:
        return "NamedContext()"


NAMED_CONTEXT = NamedContext()

#: Anything encode()/decode() accept as a converter
Context = Union[PayloadConverter, NamedContext]
