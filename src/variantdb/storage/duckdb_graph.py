"""DuckDB-backed durable graph store."""

from __future__ import annotations

import json
from collections.abc import Iterable, Iterator, Mapping
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import duckdb
import pandas as pd

from variantdb.config import UNIQUE_CONSTRAINTS
from variantdb.errors import StoreConstraintViolation
from variantdb.storage.base import GraphStore, Node, NodeHandle, Relationship, clean_properties

_SCHEMA: tuple[str, ...] = (
    "CREATE SEQUENCE IF NOT EXISTS node_ids START 1",
    "CREATE SEQUENCE IF NOT EXISTS relationship_ids START 1",
    "CREATE TABLE IF NOT EXISTS nodes (id BIGINT NOT NULL, properties VARCHAR NOT NULL)",
    "CREATE TABLE IF NOT EXISTS node_labels (node_id BIGINT NOT NULL, label VARCHAR NOT NULL)",
    (
        "CREATE TABLE IF NOT EXISTS unique_keys ("
        "label VARCHAR NOT NULL, key VARCHAR NOT NULL, value VARCHAR NOT NULL, "
        "node_id BIGINT NOT NULL, PRIMARY KEY (label, key, value))"
    ),
    (
        "CREATE TABLE IF NOT EXISTS relationships ("
        "id BIGINT NOT NULL, start_id BIGINT NOT NULL, end_id BIGINT NOT NULL, "
        "type VARCHAR NOT NULL, properties VARCHAR NOT NULL)"
    ),
)

_TABLES: tuple[str, ...] = ("nodes", "node_labels", "unique_keys", "relationships")


class DuckDBGraphStore(GraphStore):
    """Persist the variant graph in a DuckDB file.

    Node and relationship properties are stored as JSON text. Identity values
    for constrained ``(label, key)`` pairs live in ``unique_keys`` whose primary
    key enforces uniqueness across runs.
    """

    def __init__(
        self,
        *,
        db_path: str | Path,
        unique_constraints: Iterable[tuple[str, str]] = UNIQUE_CONSTRAINTS,
    ) -> None:
        super().__init__(unique_constraints)
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._connection = duckdb.connect(str(self.db_path))
        for statement in _SCHEMA:
            self._connection.execute(statement)

    def create_node(self, labels: Iterable[str], properties: Mapping[str, Any] | None = None) -> NodeHandle:
        label_set = sorted(set(labels))
        if not label_set:
            raise ValueError("Nodes need at least one label")
        props = clean_properties(properties)
        entries = self._constrained_keys(label_set, props)
        self._check_unique(entries, node_id=None)

        node_id = self._connection.execute("SELECT nextval('node_ids')").fetchone()[0]
        with self._transaction():
            self._connection.execute(
                "INSERT INTO nodes VALUES (?, ?)",
                [node_id, json.dumps(props, sort_keys=True)],
            )
            for label in label_set:
                self._connection.execute("INSERT INTO node_labels VALUES (?, ?)", [node_id, label])
            self._insert_unique(entries, node_id)
        return NodeHandle(int(node_id))

    def add_label(self, handle: NodeHandle, label: str) -> None:
        labels = self._labels(handle)
        if label in labels:
            return
        entries = self._constrained_keys({label}, self._properties(handle))
        self._check_unique(entries, node_id=handle.id)

        with self._transaction():
            self._connection.execute("INSERT INTO node_labels VALUES (?, ?)", [handle.id, label])
            self._insert_unique(entries, handle.id)

    def set_properties(self, handle: NodeHandle, properties: Mapping[str, Any]) -> None:
        labels = self._labels(handle)
        props = clean_properties(properties)
        if not props:
            return

        current = self._properties(handle)
        changed = {key: value for key, value in props.items() if current.get(key) != value}
        if not changed:
            return
        entries = self._constrained_keys(labels, changed)
        self._check_unique(entries, node_id=handle.id)
        current.update(changed)

        with self._transaction():
            self._connection.execute(
                "UPDATE nodes SET properties = ? WHERE id = ?",
                [json.dumps(current, sort_keys=True), handle.id],
            )
            for label, key, _ in entries:
                self._connection.execute(
                    "DELETE FROM unique_keys WHERE label = ? AND key = ? AND node_id = ?",
                    [label, key, handle.id],
                )
            self._insert_unique(entries, handle.id)

    def create_relationship(
        self,
        start: NodeHandle,
        end: NodeHandle,
        rel_type: str,
        properties: Mapping[str, Any] | None = None,
    ) -> int:
        self._labels(start)
        self._labels(end)
        rel_id = self._connection.execute("SELECT nextval('relationship_ids')").fetchone()[0]
        self._connection.execute(
            "INSERT INTO relationships VALUES (?, ?, ?, ?, ?)",
            [rel_id, start.id, end.id, rel_type, json.dumps(clean_properties(properties), sort_keys=True)],
        )
        return int(rel_id)

    def find_nodes(self, label: str, key: str, value: Any) -> list[NodeHandle]:
        if (label, key) in self.unique_constraints:
            rows = self._connection.execute(
                "SELECT node_id FROM unique_keys WHERE label = ? AND key = ? AND value = ?",
                [label, key, _encode(value)],
            ).fetchall()
            return [NodeHandle(int(row[0])) for row in rows]

        rows = self._connection.execute(
            "SELECT n.id, n.properties FROM nodes n "
            "JOIN node_labels l ON l.node_id = n.id "
            "WHERE l.label = ? ORDER BY n.id",
            [label],
        ).fetchall()
        return [NodeHandle(int(node_id)) for node_id, payload in rows if json.loads(payload).get(key) == value]

    def node(self, handle: NodeHandle) -> Node:
        return Node(handle=handle, labels=frozenset(self._labels(handle)), properties=self._properties(handle))

    def relationships(
        self,
        *,
        start: NodeHandle | None = None,
        end: NodeHandle | None = None,
        rel_type: str | None = None,
    ) -> list[Relationship]:
        clauses: list[str] = []
        params: list[Any] = []
        if start is not None:
            clauses.append("start_id = ?")
            params.append(start.id)
        if end is not None:
            clauses.append("end_id = ?")
            params.append(end.id)
        if rel_type is not None:
            clauses.append("type = ?")
            params.append(rel_type)

        where = f" WHERE {' AND '.join(clauses)}" if clauses else ""
        rows = self._connection.execute(
            f"SELECT id, start_id, end_id, type, properties FROM relationships{where} ORDER BY id",
            params,
        ).fetchall()
        return [
            Relationship(
                id=int(rel_id),
                start=NodeHandle(int(start_id)),
                end=NodeHandle(int(end_id)),
                type=rel_type_value,
                properties=json.loads(payload),
            )
            for rel_id, start_id, end_id, rel_type_value, payload in rows
        ]

    def to_frames(self) -> dict[str, pd.DataFrame]:
        """Return every backing table as a DataFrame."""

        return {table: self._connection.execute(f"SELECT * FROM {table}").df() for table in _TABLES}

    def export_parquet(self, directory: str | Path) -> dict[str, Path]:
        """Write each backing table to ``<directory>/<table>.parquet``."""

        target_dir = Path(directory)
        target_dir.mkdir(parents=True, exist_ok=True)

        written: dict[str, Path] = {}
        for table in _TABLES:
            target = target_dir / f"{table}.parquet"
            if target.exists():
                target.unlink()
            parquet_target = target.as_posix().replace("'", "''")
            self._connection.execute(f"COPY {table} TO '{parquet_target}' (FORMAT PARQUET)")
            written[table] = target
        return written

    def close(self) -> None:
        self._connection.close()

    @contextmanager
    def _transaction(self) -> Iterator[None]:
        self._connection.begin()
        try:
            yield
        except BaseException:
            self._connection.rollback()
            raise
        self._connection.commit()

    def _insert_unique(self, entries: list[tuple[str, str, Any]], node_id: int) -> None:
        for label, key, value in entries:
            try:
                self._connection.execute(
                    "INSERT INTO unique_keys VALUES (?, ?, ?, ?)",
                    [label, key, _encode(value), node_id],
                )
            except duckdb.ConstraintException as exc:
                raise StoreConstraintViolation(label, key, value) from exc

    def _check_unique(self, entries: list[tuple[str, str, Any]], *, node_id: int | None) -> None:
        for label, key, value in entries:
            row = self._connection.execute(
                "SELECT node_id FROM unique_keys WHERE label = ? AND key = ? AND value = ?",
                [label, key, _encode(value)],
            ).fetchone()
            if row is not None and int(row[0]) != node_id:
                raise StoreConstraintViolation(label, key, value)

    def _labels(self, handle: NodeHandle) -> set[str]:
        rows = self._connection.execute(
            "SELECT label FROM node_labels WHERE node_id = ?",
            [handle.id],
        ).fetchall()
        if not rows:
            raise KeyError(f"Unknown node: {handle.id}")
        return {row[0] for row in rows}

    def _properties(self, handle: NodeHandle) -> dict[str, Any]:
        row = self._connection.execute("SELECT properties FROM nodes WHERE id = ?", [handle.id]).fetchone()
        if row is None:
            raise KeyError(f"Unknown node: {handle.id}")
        return json.loads(row[0])


def _encode(value: Any) -> str:
    return json.dumps(value, sort_keys=True)
