"""In-process graph store backend."""

from __future__ import annotations

import copy
import itertools
from collections.abc import Iterable, Mapping
from typing import Any

from variantdb.config import UNIQUE_CONSTRAINTS
from variantdb.errors import StoreConstraintViolation
from variantdb.storage.base import GraphStore, Node, NodeHandle, Relationship, clean_properties


class InMemoryGraphStore(GraphStore):
    """Dictionary-backed store for tests and short-lived imports.

    ``operations`` counts calls per operation name, which makes store
    round-trips observable.
    """

    def __init__(self, unique_constraints: Iterable[tuple[str, str]] = UNIQUE_CONSTRAINTS) -> None:
        super().__init__(unique_constraints)
        self._labels: dict[int, set[str]] = {}
        self._properties: dict[int, dict[str, Any]] = {}
        self._unique: dict[tuple[str, str, Any], int] = {}
        self._relationships: list[Relationship] = []
        self._node_ids = itertools.count(1)
        self._rel_ids = itertools.count(1)
        self.operations: dict[str, int] = {}

    def create_node(self, labels: Iterable[str], properties: Mapping[str, Any] | None = None) -> NodeHandle:
        self._count("create_node")
        label_set = set(labels)
        if not label_set:
            raise ValueError("Nodes need at least one label")
        props = clean_properties(properties)
        entries = self._constrained_keys(label_set, props)
        self._check_unique(entries, node_id=None)

        node_id = next(self._node_ids)
        self._labels[node_id] = label_set
        self._properties[node_id] = props
        for entry in entries:
            self._unique[entry] = node_id
        return NodeHandle(node_id)

    def add_label(self, handle: NodeHandle, label: str) -> None:
        self._count("add_label")
        labels = self._require(handle)
        if label in labels:
            return
        entries = self._constrained_keys({label}, self._properties[handle.id])
        self._check_unique(entries, node_id=handle.id)
        labels.add(label)
        for entry in entries:
            self._unique[entry] = handle.id

    def set_properties(self, handle: NodeHandle, properties: Mapping[str, Any]) -> None:
        self._count("set_properties")
        labels = self._require(handle)
        props = clean_properties(properties)
        if not props:
            return
        current = self._properties[handle.id]
        entries = self._constrained_keys(labels, props)
        self._check_unique(entries, node_id=handle.id)

        for label, key, _ in entries:
            self._unique.pop((label, key, current.get(key)), None)
        current.update(props)
        for entry in entries:
            self._unique[entry] = handle.id

    def create_relationship(
        self,
        start: NodeHandle,
        end: NodeHandle,
        rel_type: str,
        properties: Mapping[str, Any] | None = None,
    ) -> int:
        self._count("create_relationship")
        self._require(start)
        self._require(end)
        rel_id = next(self._rel_ids)
        self._relationships.append(
            Relationship(id=rel_id, start=start, end=end, type=rel_type, properties=clean_properties(properties))
        )
        return rel_id

    def find_nodes(self, label: str, key: str, value: Any) -> list[NodeHandle]:
        self._count("find_nodes")
        if (label, key) in self.unique_constraints:
            node_id = self._unique.get((label, key, value))
            return [] if node_id is None else [NodeHandle(node_id)]

        return [
            NodeHandle(node_id)
            for node_id, labels in sorted(self._labels.items())
            if label in labels and self._properties[node_id].get(key) == value
        ]

    def node(self, handle: NodeHandle) -> Node:
        labels = self._require(handle)
        return Node(handle=handle, labels=frozenset(labels), properties=copy.deepcopy(self._properties[handle.id]))

    def relationships(
        self,
        *,
        start: NodeHandle | None = None,
        end: NodeHandle | None = None,
        rel_type: str | None = None,
    ) -> list[Relationship]:
        return [
            rel
            for rel in self._relationships
            if (start is None or rel.start == start)
            and (end is None or rel.end == end)
            and (rel_type is None or rel.type == rel_type)
        ]

    def node_count(self, label: str | None = None) -> int:
        if label is None:
            return len(self._labels)
        return sum(1 for labels in self._labels.values() if label in labels)

    def _check_unique(self, entries: list[tuple[str, str, Any]], *, node_id: int | None) -> None:
        for label, key, value in entries:
            owner = self._unique.get((label, key, value))
            if owner is not None and owner != node_id:
                raise StoreConstraintViolation(label, key, value)

    def _require(self, handle: NodeHandle) -> set[str]:
        try:
            return self._labels[handle.id]
        except KeyError:
            raise KeyError(f"Unknown node: {handle.id}") from None

    def _count(self, operation: str) -> None:
        self.operations[operation] = self.operations.get(operation, 0) + 1
