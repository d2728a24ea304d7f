"""Graph store backends for variant imports."""

from .base import GraphStore, Node, NodeHandle, Relationship
from .duckdb_graph import DuckDBGraphStore
from .memory import InMemoryGraphStore

__all__ = [
    "GraphStore",
    "Node",
    "NodeHandle",
    "Relationship",
    "DuckDBGraphStore",
    "InMemoryGraphStore",
]
