"""Base class for graph store backends."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from variantdb.config import UNIQUE_CONSTRAINTS


@dataclass(frozen=True)
class NodeHandle:
    """Opaque reference to a stored node."""

    id: int


@dataclass(frozen=True)
class Node:
    handle: NodeHandle
    labels: frozenset[str]
    properties: dict[str, Any] = field(default_factory=dict, hash=False, compare=False)


@dataclass(frozen=True)
class Relationship:
    id: int
    start: NodeHandle
    end: NodeHandle
    type: str
    properties: dict[str, Any] = field(default_factory=dict, hash=False, compare=False)


class GraphStore(ABC):
    """Node/relationship store with unique identity constraints.

    Constraints are ``(label, key)`` pairs: no two nodes carrying ``label`` may
    share a value for ``key``. Backends enforce them on node creation, label
    addition and property updates, raising
    :class:`~variantdb.errors.StoreConstraintViolation`.
    """

    def __init__(self, unique_constraints: Iterable[tuple[str, str]] = UNIQUE_CONSTRAINTS) -> None:
        self.unique_constraints: frozenset[tuple[str, str]] = frozenset(unique_constraints)

    @abstractmethod
    def create_node(self, labels: Iterable[str], properties: Mapping[str, Any] | None = None) -> NodeHandle:
        """Create a node and return its handle."""

    @abstractmethod
    def add_label(self, handle: NodeHandle, label: str) -> None:
        """Attach a label to an existing node."""

    @abstractmethod
    def set_properties(self, handle: NodeHandle, properties: Mapping[str, Any]) -> None:
        """Merge properties into an existing node."""

    @abstractmethod
    def create_relationship(
        self,
        start: NodeHandle,
        end: NodeHandle,
        rel_type: str,
        properties: Mapping[str, Any] | None = None,
    ) -> int:
        """Create a typed relationship and return its id."""

    @abstractmethod
    def find_nodes(self, label: str, key: str, value: Any) -> list[NodeHandle]:
        """Return handles of nodes with ``label`` whose ``key`` equals ``value``."""

    @abstractmethod
    def node(self, handle: NodeHandle) -> Node:
        """Return labels and properties of a node."""

    @abstractmethod
    def relationships(
        self,
        *,
        start: NodeHandle | None = None,
        end: NodeHandle | None = None,
        rel_type: str | None = None,
    ) -> list[Relationship]:
        """Return relationships matching every given filter."""

    def match_or_create(self, label: str, key: str, value: Any) -> NodeHandle:
        """Return the node identified by ``label.key == value``, creating it if absent."""

        handle, _ = self.match_or_create_with_status(label, key, value)
        return handle

    def match_or_create_with_status(self, label: str, key: str, value: Any) -> tuple[NodeHandle, bool]:
        existing = self.find_nodes(label, key, value)
        if existing:
            return existing[0], False
        return self.create_node([label], {key: value}), True

    def close(self) -> None:
        """Release backend resources."""

    def __enter__(self) -> "GraphStore":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _constrained_keys(self, labels: Iterable[str], properties: Mapping[str, Any]) -> list[tuple[str, str, Any]]:
        return [
            (label, key, properties[key])
            for label, key in sorted(self.unique_constraints)
            if label in labels and properties.get(key) is not None
        ]


def clean_properties(properties: Mapping[str, Any] | None) -> dict[str, Any]:
    """Drop ``None`` values and copy sequences into plain lists."""

    cleaned: dict[str, Any] = {}
    for key, value in (properties or {}).items():
        if value is None:
            continue
        if isinstance(value, (tuple, set, frozenset)):
            value = sorted(value) if isinstance(value, (set, frozenset)) else list(value)
        cleaned[key] = value
    return cleaned
