# tenantsync Config Bundle
# Immutable materialized tenant configuration and its builder

import copy
import json
from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import Any, Optional

from tenantsync.core.classifier import MatchKind, PathMatch
from tenantsync.errors import BundleConflictError


def _freeze(value: Any) -> Any:
    """Recursively wrap dicts in read-only proxies."""
    if isinstance(value, dict):
        return MappingProxyType({key: _freeze(item) for key, item in value.items()})
    if isinstance(value, list):
        return tuple(_freeze(item) for item in value)
    return value


def _thaw(value: Any) -> Any:
    """Recursively convert read-only proxies back to plain containers."""
    if isinstance(value, Mapping):
        return {key: _thaw(item) for key, item in value.items()}
    if isinstance(value, tuple):
        return [_thaw(item) for item in value]
    return value


class ConfigBundle(Mapping):
    """
    Materialized tenant configuration, keyed by category.

    Read-only once built. Compares equal to a plain dict holding the same
    content, so it can be checked against fixtures directly.
    """

    def __init__(self, data: Optional[dict[str, Any]] = None, documents: tuple[str, ...] = ("settings",)):
        self._data = _freeze(copy.deepcopy(data or {}))
        self._documents = frozenset(documents)

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ConfigBundle):
            return self.to_dict() == other.to_dict()
        if isinstance(other, Mapping):
            return self.to_dict() == _thaw(other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"ConfigBundle(categories={self.categories!r})"

    @property
    def categories(self) -> list[str]:
        """Populated category names."""
        return list(self._data.keys())

    def is_document(self, category: str) -> bool:
        """Check if a category holds a single document rather than entries."""
        return category in self._documents

    def to_dict(self) -> dict[str, Any]:
        """Return a deep, mutable copy of the bundle."""
        return _thaw(self._data)

    def to_json(self, *, indent: Optional[int] = 2) -> str:
        """Serialize the bundle as JSON."""
        return json.dumps(self.to_dict(), indent=indent, sort_keys=True)

    def count_entries(self) -> dict[str, int]:
        """Number of entries per category (1 for document categories)."""
        counts: dict[str, int] = {}
        for category, content in self._data.items():
            counts[category] = 1 if category in self._documents else len(content)
        return counts


class BundleBuilder:
    """
    Mutable assembly buffer for a ConfigBundle.

    Every slot accepts exactly one write; grouped entries may be
    registered any number of times before or after their files arrive.
    """

    def __init__(self) -> None:
        self._data: dict[str, Any] = {}
        self._documents: list[str] = []

    def register_group(self, match: PathMatch) -> None:
        """Register a grouped entry (e.g. a database connection folder)."""
        entries = self._data.setdefault(match.category, {})
        entries.setdefault(match.identifier, {"scripts": {}, "metadata": {}})

    def insert(self, match: PathMatch, content: Any) -> None:
        """
        Insert decoded content at the slot described by a match.

        Args:
            match: Classification of the file the content came from.
            content: Decoded content.

        Raises:
            BundleConflictError: If the slot is already filled.
            ValueError: If the match does not describe file content.
        """
        if match.kind == MatchKind.DOCUMENT:
            if match.category in self._data:
                raise BundleConflictError(match.category, None, None)
            self._data[match.category] = content
            self._documents.append(match.category)
            return

        if match.kind != MatchKind.ENTRY:
            raise ValueError(f"Cannot insert content for {match.kind.value} path {match.path}")

        entries = self._data.setdefault(match.category, {})
        if match.key is not None:
            self.register_group(match)
            slot = entries[match.identifier].setdefault(match.slot, {})
            if match.key in slot:
                raise BundleConflictError(match.category, match.identifier, f"{match.slot}/{match.key}")
            slot[match.key] = content
            return

        entry = entries.setdefault(match.identifier, {})
        if match.slot in entry:
            raise BundleConflictError(match.category, match.identifier, match.slot)
        entry[match.slot] = content

    def build(self) -> ConfigBundle:
        """Freeze the collected content into a ConfigBundle."""
        return ConfigBundle(self._data, tuple(self._documents))
