"""Adapter and store registries for pluggable imports."""

from __future__ import annotations

import importlib
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from variantdb.adapters import CallFileAdapter, PysamVcfAdapter
from variantdb.storage import DuckDBGraphStore, GraphStore, InMemoryGraphStore

T = TypeVar("T")


@dataclass(frozen=True)
class PluginSpec:
    """Spec describing a dynamically imported adapter or store implementation."""

    name: str
    module: str
    class_name: str


class Registry(Generic[T]):
    """Registry that maps stable names to constructors."""

    def __init__(self, kind: str) -> None:
        self.kind = kind
        self._factories: dict[str, Callable[..., T]] = {}

    def register(self, name: str, factory: Callable[..., T]) -> None:
        """Register a factory under a unique name."""

        key = name.strip().lower()
        if not key:
            raise ValueError(f"{self.kind.capitalize()} name cannot be empty")
        if key in self._factories:
            raise ValueError(f"{self.kind.capitalize()} already registered: {name}")
        self._factories[key] = factory

    def register_plugin(self, plugin: PluginSpec) -> None:
        """Register an implementation by importing a module/class at runtime."""

        module = importlib.import_module(plugin.module)
        factory = getattr(module, plugin.class_name)
        self.register(plugin.name, factory)

    def create(self, name: str, **kwargs: Any) -> T:
        """Instantiate a registered implementation."""

        key = name.strip().lower()
        if key not in self._factories:
            raise KeyError(
                f"Unknown {self.kind} '{name}'. Available: {', '.join(self.available())}"
            )
        return self._factories[key](**kwargs)

    def available(self) -> list[str]:
        """Return sorted list of known names."""

        return sorted(self._factories.keys())


def build_default_adapter_registry() -> Registry[CallFileAdapter]:
    """Create a registry preloaded with built-in call-file adapters."""

    registry: Registry[CallFileAdapter] = Registry("adapter")
    registry.register(PysamVcfAdapter.name, PysamVcfAdapter)
    return registry


def build_default_store_registry() -> Registry[GraphStore]:
    """Create a registry preloaded with built-in graph stores."""

    registry: Registry[GraphStore] = Registry("store")
    registry.register("duckdb", DuckDBGraphStore)
    registry.register("memory", InMemoryGraphStore)
    return registry
