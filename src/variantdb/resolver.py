"""Three-tier resolution of genotype observations to variant nodes."""

from __future__ import annotations

import logging
from enum import Enum

from variantdb.config import GraphSchema
from variantdb.models import GenomeVariant, Zygosity
from variantdb.session import SessionRegistry
from variantdb.storage.base import GraphStore, NodeHandle

logger = logging.getLogger(__name__)


class ResolutionTier(str, Enum):
    """Which lookup produced the variant node for an observation."""

    SESSION = "session"
    STORE = "store"
    CREATED = "created"


class VariantResolver:
    """Resolve a canonical variant to exactly one node and attach a genotype edge.

    Tiers run in order and fall through only when a lookup finds nothing:

    1. the session registry (nodes created earlier in this run),
    2. the store, by ``VariantId`` (nodes from previous runs),
    3. creation of a new node, which is then registered in the session.

    With ``cache_store_hits`` tier-2 hits are also kept in the session, in a map
    separate from created nodes.
    """

    def __init__(self, store: GraphStore, *, cache_store_hits: bool = False) -> None:
        self.store = store
        self.cache_store_hits = cache_store_hits

    def resolve(
        self,
        session: SessionRegistry,
        variant: GenomeVariant,
        run_node: NodeHandle,
        zygosity: Zygosity,
        quality: int | None,
    ) -> ResolutionTier:
        variant_node, tier = self._variant_node(session, variant)
        self.store.create_relationship(
            run_node,
            variant_node,
            zygosity.relationship_type,
            {"Quality": quality},
        )
        logger.debug("%s resolved via %s tier", variant.concatenated_id, tier.value)
        return tier

    def _variant_node(self, session: SessionRegistry, variant: GenomeVariant) -> tuple[NodeHandle, ResolutionTier]:
        handle = session.get_variant(variant)
        if handle is not None:
            return handle, ResolutionTier.SESSION

        existing = self.store.find_nodes(GraphSchema.VARIANT, GraphSchema.VARIANT_ID, variant.concatenated_id)
        if existing:
            if self.cache_store_hits:
                session.cache_variant(variant, existing[0])
            return existing[0], ResolutionTier.STORE

        handle = self.store.create_node([GraphSchema.VARIANT], {GraphSchema.VARIANT_ID: variant.concatenated_id})
        category = variant.chromosome_category
        if category is not None:
            self.store.add_label(handle, category.label)
        session.put_variant(variant, handle)
        return handle, ResolutionTier.CREATED
