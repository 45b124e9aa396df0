"""Base record class and recordproto-specific Pydantic configuration.

This module provides the Record class that all serializable records should
inherit from. A subclass that sets proto_schema is described and registered
with the global schema registry as soon as the class is created, so importing
the module that declares it is all a process needs to encode and decode it.
"""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict

from ..codec.registry import REGISTRY
from ..codec.schema import SchemaDescriptor


class Record(BaseModel):
    """Base class for all recordproto records.

    Records define fields with ordinary Pydantic annotations. Fields are
    normally optional (``T | None = None``) since an unset field is encoded
    as absent and decodes back to None.

    recordproto-specific options are configured as ClassVar attributes:

    Example:
        >>> from typing import ClassVar
        >>> class User(Record):
        ...     proto_schema: ClassVar[str] = "myapp.users.user"
        ...
        ...     id: int | None = None
        ...     name: str | None = None
        ...     email: str | None = None

    Attributes:
        proto_schema: Globally unique schema name. Records without one are
            plain models and are not registered.
        proto_register: Register with the global registry on class creation
            (default True). Set False to register manually, e.g. into a
            private SchemaRegistry.
    """

    model_config = ConfigDict(
        # Allow arbitrary types (opaque field values)
        arbitrary_types_allowed=True,
        # Validate on assignment
        validate_assignment=True,
        # Forbid extra fields not defined in schema
        extra="forbid",
    )

    proto_schema: ClassVar[str | None] = None
    proto_register: ClassVar[bool] = True

    @classmethod
    def __pydantic_init_subclass__(cls, **kwargs: Any) -> None:
        """Hook called once Pydantic has finished building a subclass.

        model_fields is complete at this point (unlike __init_subclass__),
        so the schema descriptor can be derived and registered.
        """
        super().__pydantic_init_subclass__(**kwargs)

        # Subclasses inherit proto_schema; only the declaring class owns it
        if "proto_schema" not in cls.__dict__ or cls.proto_schema is None:
            return
        if not cls.proto_register:
            return

        REGISTRY.register(cls.proto_descriptor(), cls)

    @classmethod
    def proto_descriptor(cls, name: str | None = None) -> SchemaDescriptor:
        """Build the schema descriptor for this class.

        Args:
            name: Schema name, defaults to proto_schema
        """
        return SchemaDescriptor.from_model(cls, name)
