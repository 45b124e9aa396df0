"""Schema descriptors.

A SchemaDescriptor binds a schema name to an ordered list of fields and a
bijective field <-> index mapping. Indices fix the tuple position of each
value on the wire, so they must stay stable across versions: with the
sequential policy fields may only ever be appended.

Descriptors are plain immutable values. Registering one with a registry is a
separate step (see registry.py).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterable, Literal, Mapping, Sequence, Type

from pydantic import BaseModel
from pydantic.fields import FieldInfo

from ..exceptions import DuplicateFieldIndex, DuplicateFieldName, InvalidIndex, SchemaError

IndexPolicy = Literal["sequential", "explicit"]

#: Key under which FieldIndex() stores an explicit index in json_schema_extra.
INDEX_KEY = "proto_index"


def _is_valid_index(index: Any) -> bool:
    return isinstance(index, int) and not isinstance(index, bool) and index > 0


@dataclass(frozen=True)
class SchemaDescriptor:
    """Static metadata for one record shape.

    Attributes:
        name: Globally unique schema name
        fields: Field names in declaration order
        field_indices: Field name -> positive index
        index_fields: Index -> field name (inverse of field_indices)
        policy: How the indices were assigned ("sequential" or "explicit")

    Use define() or from_model() rather than the constructor: they validate
    the declaration.
    """

    name: str
    fields: tuple[str, ...]
    field_indices: Mapping[str, int]
    index_fields: Mapping[int, str]
    policy: IndexPolicy = field(default="sequential", compare=False)

    def __hash__(self) -> int:
        return hash((self.name, self.fields, tuple(sorted(self.field_indices.items()))))

    @property
    def max_index(self) -> int:
        """Highest field index, i.e. the full length of a value tuple."""
        return max(self.index_fields, default=0)

    def field_index(self, name: str) -> int | None:
        """Return the index of a field, or None if the schema has no such field."""
        return self.field_indices.get(name)

    def index_field(self, index: int) -> str | None:
        """Return the field at an index, or None if no field uses it."""
        return self.index_fields.get(index)

    @classmethod
    def from_model(
        cls, model_class: Type[BaseModel], name: str | None = None
    ) -> SchemaDescriptor:
        """Create a descriptor from a pydantic model.

        Fields carrying FieldIndex() metadata select the explicit policy; if
        no field carries one, indices follow declaration order.

        Args:
            model_class: Pydantic model class to introspect
            name: Schema name, defaults to the class's proto_schema

        Returns:
            Validated SchemaDescriptor

        Raises:
            SchemaError: If no name is available or the fields are malformed
        """
        if name is None:
            name = getattr(model_class, "proto_schema", None)
        if name is None:
            raise SchemaError(
                f"{model_class.__qualname__} has no proto_schema. "
                f"Pass a schema name or set proto_schema on the class."
            )

        model_fields = model_class.model_fields
        explicit = {
            field_name: _explicit_index(info) for field_name, info in model_fields.items()
        }

        if all(index is None for index in explicit.values()):
            return define(name, list(model_fields))

        for field_name, index in explicit.items():
            if index is None:
                # Mixed declarations: every field needs an index once one has it
                raise InvalidIndex(name, field_name, None)

        return define(name, list(explicit.items()), index_policy="explicit")


def _explicit_index(field_info: FieldInfo) -> Any:
    extra = field_info.json_schema_extra
    if isinstance(extra, dict):
        return extra.get(INDEX_KEY)
    return None


def define(
    name: str,
    fields: Iterable[str] | Iterable[tuple[str, int]],
    index_policy: IndexPolicy = "sequential",
) -> SchemaDescriptor:
    """Define a schema descriptor.

    Args:
        name: Schema name (non-empty string, never reused for another shape)
        fields: Field names (sequential policy) or (field, index) pairs
            (explicit policy)
        index_policy: "sequential" assigns 1..N in declaration order,
            "explicit" takes the index supplied with each field

    Returns:
        Immutable SchemaDescriptor

    Raises:
        SchemaError: If the name or the policy is invalid
        DuplicateFieldName: If two fields share a name
        DuplicateFieldIndex: If two fields share an index
        InvalidIndex: If an explicit index is not a positive integer

    Example:
        >>> user = define("myapp.users.user", ["id", "name", "email"])
        >>> user.field_index("name")
        2
        >>> session = define("myapp.users.session", [("token", 1), ("user", 3)],
        ...                  index_policy="explicit")
        >>> session.max_index
        3
    """
    if not isinstance(name, str) or not name:
        raise SchemaError(f"Schema name must be a non-empty string, got {name!r}")

    if index_policy == "sequential":
        pairs: Sequence[tuple[Any, Any]] = [
            (field_name, position) for position, field_name in enumerate(fields, start=1)
        ]
    elif index_policy == "explicit":
        pairs = list(fields)  # type: ignore[arg-type]
        for pair in pairs:
            if not isinstance(pair, (tuple, list)) or len(pair) != 2:
                raise SchemaError(
                    f"Schema {name!r}: explicit fields must be (field, index) pairs, got {pair!r}"
                )
    else:
        raise SchemaError(
            f"Schema {name!r}: unknown index policy {index_policy!r}, "
            f"expected 'sequential' or 'explicit'"
        )

    field_indices: dict[str, int] = {}
    index_fields: dict[int, str] = {}

    for field_name, index in pairs:
        if not isinstance(field_name, str) or not field_name:
            raise SchemaError(
                f"Schema {name!r}: field names must be non-empty strings, got {field_name!r}"
            )
        if field_name in field_indices:
            raise DuplicateFieldName(name, field_name)
        if not _is_valid_index(index):
            raise InvalidIndex(name, field_name, index)
        if index in index_fields:
            raise DuplicateFieldIndex(name, index, field_name, index_fields[index])

        field_indices[field_name] = index
        index_fields[index] = field_name

    return SchemaDescriptor(
        name=name,
        fields=tuple(field_indices),
        field_indices=MappingProxyType(field_indices),
        index_fields=MappingProxyType(index_fields),
        policy=index_policy,
    )
