import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT / "src"))

from variantdb import (  # noqa: E402
    GenomeVariant,
    GraphSchema,
    ResolutionTier,
    SessionRegistry,
    VariantResolver,
    Zygosity,
)
from variantdb.storage import InMemoryGraphStore, NodeHandle  # noqa: E402


def _run_node(store: InMemoryGraphStore, analysis_id: str = "W1_S1_Q1") -> NodeHandle:
    return store.create_node([GraphSchema.RUN_INFO], {GraphSchema.ANALYSIS_ID: analysis_id})


def test_session_registry_rejects_duplicate_creation() -> None:
    session = SessionRegistry()
    variant = GenomeVariant("1", 100, "A", "C")
    session.put_variant(variant, NodeHandle(1))

    with pytest.raises(ValueError):
        session.put_variant(variant, NodeHandle(2))
    assert session.get_variant(variant) == NodeHandle(1)
    assert len(session) == 1


def test_session_registry_keeps_cached_hits_out_of_new_variants() -> None:
    session = SessionRegistry()
    created = GenomeVariant("1", 100, "A", "C")
    cached = GenomeVariant("1", 200, "G", "T")
    session.put_variant(created, NodeHandle(1))
    session.cache_variant(cached, NodeHandle(2))

    assert session.get_variant(cached) == NodeHandle(2)
    assert list(session.new_variants()) == [created]


def test_resolver_creates_then_hits_session() -> None:
    store = InMemoryGraphStore()
    run_node = _run_node(store)
    session = SessionRegistry()
    resolver = VariantResolver(store)
    variant = GenomeVariant("X", 400, "C", "T")

    assert resolver.resolve(session, variant, run_node, Zygosity.HETEROZYGOUS, 15) is ResolutionTier.CREATED
    finds_after_create = store.operations["find_nodes"]
    assert resolver.resolve(session, variant, run_node, Zygosity.HOMOZYGOUS, 20) is ResolutionTier.SESSION

    assert store.operations["find_nodes"] == finds_after_create
    assert store.node_count(GraphSchema.VARIANT) == 1

    variant_node = session.get_variant(variant)
    assert variant_node is not None
    node = store.node(variant_node)
    assert node.labels == {GraphSchema.VARIANT, "XChromosome"}
    assert node.properties == {GraphSchema.VARIANT_ID: "X:400C>T"}

    edges = store.relationships(start=run_node, end=variant_node)
    assert [(edge.type, edge.properties) for edge in edges] == [
        (GraphSchema.HAS_HET_VARIANT, {"Quality": 15}),
        (GraphSchema.HAS_HOM_VARIANT, {"Quality": 20}),
    ]


def test_resolver_uses_store_for_variants_from_previous_runs() -> None:
    store = InMemoryGraphStore()
    existing = store.create_node([GraphSchema.VARIANT], {GraphSchema.VARIANT_ID: "1:100A>C"})
    run_node = _run_node(store)
    session = SessionRegistry()
    resolver = VariantResolver(store)
    variant = GenomeVariant("1", 100, "A", "C")

    assert resolver.resolve(session, variant, run_node, Zygosity.HETEROZYGOUS, None) is ResolutionTier.STORE
    assert resolver.resolve(session, variant, run_node, Zygosity.HETEROZYGOUS, None) is ResolutionTier.STORE

    assert len(session) == 0
    assert store.node_count(GraphSchema.VARIANT) == 1
    assert [edge.end for edge in store.relationships(start=run_node)] == [existing, existing]
    assert store.relationships(start=run_node)[0].properties == {}


def test_resolver_caches_store_hits_when_enabled() -> None:
    store = InMemoryGraphStore()
    store.create_node([GraphSchema.VARIANT], {GraphSchema.VARIANT_ID: "1:100A>C"})
    run_node = _run_node(store)
    session = SessionRegistry()
    resolver = VariantResolver(store, cache_store_hits=True)
    variant = GenomeVariant("1", 100, "A", "C")

    assert resolver.resolve(session, variant, run_node, Zygosity.HETEROZYGOUS, 1) is ResolutionTier.STORE
    assert resolver.resolve(session, variant, run_node, Zygosity.HETEROZYGOUS, 1) is ResolutionTier.SESSION
    assert list(session.new_variants()) == []


def test_unplaced_contig_gets_no_chromosome_label() -> None:
    store = InMemoryGraphStore()
    run_node = _run_node(store)
    session = SessionRegistry()
    variant = GenomeVariant("GL000192.1", 5, "A", "T")

    VariantResolver(store).resolve(session, variant, run_node, Zygosity.HOMOZYGOUS, 9)

    handle = session.get_variant(variant)
    assert store.node(handle).labels == {GraphSchema.VARIANT}
