"""Process-wide schema registry.

The registry maps schema names and owning types to descriptors. It is
populated while modules are imported (Record subclasses register themselves
when their class is created) and is read without locking afterwards.

There is no coordinating service and no persisted state: after a cold
restart, importing the same schema modules rebuilds an identical registry.
"""

from __future__ import annotations

import threading
from typing import Any

from pydantic import BaseModel

from ..exceptions import OwningTypeConflict, SchemaConflict, SchemaNotFound, SchemaNotRegistered
from ..logging import get_logger
from .schema import SchemaDescriptor

logger = get_logger("registry")


class SchemaRegistry:
    """Name/type -> SchemaDescriptor table.

    Writes are serialised with a lock so that concurrent, redundant
    registrations of the same schema stay no-ops. Lookups are plain dict
    reads.

    Example:
        >>> registry = SchemaRegistry()
        >>> registry.register(SchemaDescriptor.from_model(User), User)
        >>> registry.lookup_by_name("myapp.users.user") is not None
        True
    """

    def __init__(self) -> None:
        self._by_name: dict[str, SchemaDescriptor] = {}
        self._by_type: dict[type, SchemaDescriptor] = {}
        self._types: dict[str, type[BaseModel]] = {}
        self._lock = threading.Lock()

    def register(self, descriptor: SchemaDescriptor, owning_type: type[BaseModel]) -> None:
        """Register a descriptor for a record type.

        Re-registering an identical descriptor for the same type is a no-op.
        The same descriptor from a different class is a SchemaConflict, even
        when that class is a copy of the first: reloading a schema module
        (importlib.reload, or running it as __main__ while it is also
        imported by name) therefore fails instead of silently rebinding the
        name to the new class.

        Args:
            descriptor: Descriptor to register
            owning_type: Class whose instances use this schema

        Raises:
            SchemaConflict: If the name is bound to different content or to
                another type
            OwningTypeConflict: If the type is bound to another schema name
        """
        name = descriptor.name

        with self._lock:
            existing = self._by_name.get(name)
            if existing is not None:
                if existing != descriptor or self._types[name] is not owning_type:
                    logger.warning("Conflicting registration for schema %r", name)
                    raise SchemaConflict(name)
                # Already registered, no-op
                return

            bound = self._by_type.get(owning_type)
            if bound is not None:
                raise OwningTypeConflict(owning_type, bound.name, name)

            self._by_name[name] = descriptor
            self._by_type[owning_type] = descriptor
            self._types[name] = owning_type

        logger.debug(
            "Registered schema %r for %s (%d fields)",
            name,
            owning_type.__qualname__,
            len(descriptor.fields),
        )

    def lookup_by_name(self, name: str) -> SchemaDescriptor | None:
        """Return the descriptor registered under a name, or None."""
        return self._by_name.get(name)

    def lookup_by_type(self, owning_type: type) -> SchemaDescriptor | None:
        """Return the descriptor registered for a type, or None."""
        return self._by_type.get(owning_type)

    def type_for(self, name: str) -> type[BaseModel] | None:
        """Return the owning type registered under a schema name, or None."""
        return self._types.get(name)

    def require_by_name(self, name: str) -> SchemaDescriptor:
        """Like lookup_by_name() but raises SchemaNotFound when absent."""
        descriptor = self._by_name.get(name)
        if descriptor is None:
            raise SchemaNotFound(name)
        return descriptor

    def require_by_type(self, owning_type: type) -> SchemaDescriptor:
        """Like lookup_by_type() but raises SchemaNotRegistered when absent."""
        descriptor = self._by_type.get(owning_type)
        if descriptor is None:
            raise SchemaNotRegistered(owning_type)
        return descriptor

    def list_schemas(self) -> list[str]:
        """Return all registered schema names, sorted."""
        return sorted(self._by_name)

    def stats(self) -> dict[str, Any]:
        """Return registry statistics."""
        return {
            "total_schemas": len(self._by_name),
            "schemas": self.list_schemas(),
        }

    def export(self) -> dict[str, dict[str, Any]]:
        """Dump the registered declarations as plain data.

        The dump is informational (backups, diffs between deployments). It is
        never loaded back: the schema declarations themselves are the source
        of truth.

        Returns:
            Mapping of schema name -> {"type": qualified type name,
            "fields": {field: index}}
        """
        return {
            name: {
                "type": f"{self._types[name].__module__}.{self._types[name].__qualname__}",
                "fields": dict(descriptor.field_indices),
            }
            for name, descriptor in sorted(self._by_name.items())
        }

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __len__(self) -> int:
        return len(self._by_name)

    def __repr__(self) -> str:
        return f"SchemaRegistry({len(self._by_name)} schemas)"


# Global registry, filled as Record subclasses are imported
REGISTRY = SchemaRegistry()


def register_schema(descriptor: SchemaDescriptor, owning_type: type[BaseModel]) -> None:
    """Register a descriptor with the global registry."""
    REGISTRY.register(descriptor, owning_type)


def get_schema(name: str) -> SchemaDescriptor | None:
    """Look up a descriptor in the global registry by schema name."""
    return REGISTRY.lookup_by_name(name)


def get_schema_by_type(owning_type: type) -> SchemaDescriptor | None:
    """Look up a descriptor in the global registry by owning type."""
    return REGISTRY.lookup_by_type(owning_type)


def resolve_registry(registry: SchemaRegistry | None) -> SchemaRegistry:
    """Return registry, or the global registry when None."""
    return REGISTRY if registry is None else registry
