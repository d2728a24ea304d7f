"""Per-run registry of graph handles created during one import."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

from variantdb.models import GenomeVariant
from variantdb.storage.base import NodeHandle


@dataclass
class SessionRegistry:
    """Handles created or registered during the current import run.

    Owned by exactly one pipeline run and discarded when it ends. Not
    thread-safe. ``created_variants`` holds only nodes created in this run, in
    creation order; ``cached_variants`` optionally holds store-resident nodes
    seen during the run.
    """

    created_variants: dict[GenomeVariant, NodeHandle] = field(default_factory=dict)
    cached_variants: dict[GenomeVariant, NodeHandle] = field(default_factory=dict)
    run_info_nodes: dict[str, NodeHandle] = field(default_factory=dict)

    def get_variant(self, variant: GenomeVariant) -> NodeHandle | None:
        handle = self.created_variants.get(variant)
        if handle is None:
            handle = self.cached_variants.get(variant)
        return handle

    def put_variant(self, variant: GenomeVariant, handle: NodeHandle) -> None:
        if variant in self.created_variants:
            raise ValueError(f"Variant already registered in session: {variant.concatenated_id}")
        self.created_variants[variant] = handle

    def cache_variant(self, variant: GenomeVariant, handle: NodeHandle) -> None:
        self.cached_variants.setdefault(variant, handle)

    def get_run_info(self, sample_id: str) -> NodeHandle | None:
        return self.run_info_nodes.get(sample_id)

    def put_run_info(self, sample_id: str, handle: NodeHandle) -> None:
        self.run_info_nodes[sample_id] = handle

    def new_variants(self) -> Iterator[GenomeVariant]:
        """Variants created in this run, in creation order."""

        return iter(self.created_variants)

    def __len__(self) -> int:
        return len(self.created_variants)
