"""Static reference-data seeding: users and virtual gene panels."""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from variantdb.config import GraphSchema
from variantdb.storage.base import GraphStore

logger = logging.getLogger(__name__)


@dataclass
class SeedReport:
    users: int = 0
    panels: int = 0
    panel_symbols: int = 0


class ReferenceSeeder:
    """Seed users and virtual panels from a JSON document.

    Expected format::

        {"users": [{"UserId": "ml", "FullName": "..."}],
         "virtual_panels": [{"name": "...", "symbols": ["BRCA1"], "designed_by": "ml"}]}
    """

    def __init__(self, store: GraphStore) -> None:
        self.store = store

    def seed_file(self, path: str | Path) -> SeedReport:
        return self.seed(json.loads(Path(path).read_text()))

    def seed(self, payload: dict[str, Any]) -> SeedReport:
        report = SeedReport()

        logger.info("Adding users ...")
        for raw_user in payload.get("users", []):
            user = dict(raw_user)
            user_id = str(user.pop(GraphSchema.USER_ID, "")).strip()
            if not user_id:
                raise ValueError("Reference user entries require a UserId")
            handle = self.store.match_or_create(GraphSchema.USER, GraphSchema.USER_ID, user_id)
            self.store.set_properties(handle, user)
            report.users += 1

        logger.info("Adding virtual panels ...")
        for panel in payload.get("virtual_panels", []):
            name = str(panel.get("name", "")).strip()
            if not name:
                raise ValueError("Virtual panel entries require a name")

            panel_node, created = self.store.match_or_create_with_status(
                GraphSchema.VIRTUAL_PANEL,
                GraphSchema.VIRTUAL_PANEL_NAME,
                name,
            )
            report.panels += 1
            if not created:
                logger.info("Virtual panel already present: %s", name)
                continue

            for symbol in panel.get("symbols", []):
                symbol_node = self.store.match_or_create(GraphSchema.SYMBOL, GraphSchema.SYMBOL_ID, symbol)
                self.store.create_relationship(panel_node, symbol_node, GraphSchema.HAS_CONTAINS_SYMBOL)
                report.panel_symbols += 1

            designer = panel.get("designed_by")
            if designer:
                user_nodes = self.store.find_nodes(GraphSchema.USER, GraphSchema.USER_ID, designer)
                if not user_nodes:
                    raise KeyError(f"Panel '{name}' designer not found: {designer}")
                self.store.create_relationship(
                    panel_node,
                    user_nodes[0],
                    GraphSchema.HAS_DESIGNED_BY,
                    {"Date": int(time.time() * 1000)},
                )

        return report
