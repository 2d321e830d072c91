"""
Field Registry - Keyed per-field handler tables
Every canonical field must be registered exactly once, so adding a field to
the vocabulary without deciding its transform or validator fails at import
time instead of silently passing values through
"""
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Optional

from services.enums import CANONICAL_FIELDS


class FieldRegistry:
    """
    Builder for an immutable canonical field -> handler table.
    Handlers may be None where a field deliberately has no handler.
    """

    def __init__(self, name: str, fields: Iterable = CANONICAL_FIELDS):
        self.name = name
        self._expected = tuple(getattr(field, 'value', field) for field in fields)
        self._handlers: Dict[str, Any] = {}

    def register(self, handler: Optional[Any], *fields) -> 'FieldRegistry':
        """
        Register one handler for one or more fields.

        Args:
            handler: Callable to dispatch to, or None for "no handler"
            *fields: Canonical fields (enum members or names)

        Raises:
            ValueError: If a field is already registered
        """
        for field in fields:
            key = getattr(field, 'value', field)
            if self.has(key):
                raise ValueError(f"{self.name}: field '{key}' is already registered")
            self._handlers[key] = handler
        return self

    def has(self, field) -> bool:
        """Check if a field is registered."""
        return getattr(field, 'value', field) in self._handlers

    def missing(self) -> list:
        """Canonical fields not registered yet, in vocabulary order."""
        return [key for key in self._expected if key not in self._handlers]

    def freeze(self) -> Mapping[str, Any]:
        """
        Return the read-only table.

        Raises:
            ValueError: If any canonical field is unregistered or an unknown
                field was registered
        """
        missing = self.missing()
        if missing:
            raise ValueError(f"{self.name}: no entry for canonical field(s) {', '.join(missing)}")
        unknown = sorted(set(self._handlers) - set(self._expected))
        if unknown:
            raise ValueError(f"{self.name}: unknown field(s) {', '.join(unknown)}")
        return MappingProxyType(dict(self._handlers))
