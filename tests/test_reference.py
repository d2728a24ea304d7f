import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT / "src"))

from variantdb import GraphSchema, ReferenceSeeder  # noqa: E402
from variantdb.storage import InMemoryGraphStore  # noqa: E402


def test_seed_bundled_reference_panels() -> None:
    store = InMemoryGraphStore()

    report = ReferenceSeeder(store).seed_file(ROOT / "config" / "reference" / "panels.json")

    assert report.users == 1
    assert report.panels == 2
    panel = store.find_nodes(GraphSchema.VIRTUAL_PANEL, GraphSchema.VIRTUAL_PANEL_NAME, "Breast Cancer")[0]
    symbols = store.relationships(start=panel, rel_type=GraphSchema.HAS_CONTAINS_SYMBOL)
    assert sorted(store.node(edge.end).properties[GraphSchema.SYMBOL_ID] for edge in symbols) == ["BRCA1", "BRCA2"]
    designed = store.relationships(start=panel, rel_type=GraphSchema.HAS_DESIGNED_BY)
    assert len(designed) == 1
    assert isinstance(designed[0].properties["Date"], int)


def test_reseeding_skips_existing_panels() -> None:
    store = InMemoryGraphStore()
    payload = {
        "users": [{"UserId": "ml", "FullName": "M L"}],
        "virtual_panels": [{"name": "Cardiac", "symbols": ["MYH7"], "designed_by": "ml"}],
    }
    seeder = ReferenceSeeder(store)

    seeder.seed(payload)
    seeder.seed(payload)

    assert store.node_count(GraphSchema.USER) == 1
    assert len(store.relationships(rel_type=GraphSchema.HAS_CONTAINS_SYMBOL)) == 1
    user = store.find_nodes(GraphSchema.USER, GraphSchema.USER_ID, "ml")[0]
    assert store.node(user).properties["FullName"] == "M L"


def test_unknown_designer_is_rejected() -> None:
    payload = {"virtual_panels": [{"name": "Cardiac", "symbols": [], "designed_by": "nobody"}]}

    with pytest.raises(KeyError):
        ReferenceSeeder(InMemoryGraphStore()).seed(payload)
