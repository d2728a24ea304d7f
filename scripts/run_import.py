#!/usr/bin/env python3
"""Run a configurable variant graph import from a JSON config."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from variantdb import (  # noqa: E402
    ImportProfileLoader,
    PluginSpec,
    ReferenceSeeder,
    VariantImportPipeline,
    build_default_adapter_registry,
    build_default_store_registry,
)
from variantdb.publishers import ImportedVariantsPublisher  # noqa: E402
from variantdb.runconfig import load_import_config  # noqa: E402


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Import variant calls and annotations into the variant graph")
    parser.add_argument("--config", required=True, help="Path to import JSON config")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity",
    )
    return parser.parse_args()


def register_plugins(config: dict[str, Any], adapter_registry: Any, store_registry: Any) -> None:
    for plugin_raw in config.get("plugins", []):
        spec = PluginSpec(
            name=plugin_raw["name"],
            module=plugin_raw["module"],
            class_name=plugin_raw["class_name"],
        )
        if plugin_raw["kind"] == "adapter":
            adapter_registry.register_plugin(spec)
        else:
            store_registry.register_plugin(spec)


def build_publishers(config: dict[str, Any]) -> list[Any]:
    output = config.get("output", {})
    if "imported_vcf" not in output:
        return []
    return [ImportedVariantsPublisher(output_path=output["imported_vcf"])]


def load_profile(config: dict[str, Any]) -> Any:
    loader = ImportProfileLoader(profiles_dir=config.get("profiles_dir"))
    if "profile_path" in config:
        return loader.load(config["profile_path"])
    return loader.load(config.get("profile", "default"))


def main() -> int:
    args = parse_args()
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    logger = logging.getLogger("variantdb.import")

    config = load_import_config(args.config)
    adapter_registry = build_default_adapter_registry()
    store_registry = build_default_store_registry()
    register_plugins(config, adapter_registry, store_registry)

    profile = load_profile(config)
    store_config = config["store"]
    logger.info("Starting %s store ...", store_config["type"])
    store = store_registry.create(store_config["type"], **dict(store_config.get("params", {})))

    payload: dict[str, Any] = {"profile": profile.name}
    try:
        if "reference" in config:
            seeded = ReferenceSeeder(store).seed_file(config["reference"])
            payload["reference"] = {"users": seeded.users, "panels": seeded.panels}

        pipeline = VariantImportPipeline(
            store=store,
            profile=profile,
            publishers=build_publishers(config),
        )

        if "genotypes" in config:
            adapter_raw = config["genotypes"]
            adapter = adapter_registry.create(adapter_raw["adapter"], **dict(adapter_raw.get("params", {})))
            report = pipeline.import_genotypes(adapter)
            payload["genotypes"] = {
                "records": report.records,
                "genotypes": report.genotypes,
                "genotype_edges": report.genotype_edges,
                "created_variants": report.created_variants,
                "session_hits": report.session_hits,
                "store_hits": report.store_hits,
                "skipped_genotypes": report.skipped_genotypes,
            }

        if "annotations" in config:
            adapter_raw = config["annotations"]
            adapter = adapter_registry.create(adapter_raw["adapter"], **dict(adapter_raw.get("params", {})))
            annotation_report = pipeline.import_annotations(adapter)
            payload["annotations"] = {
                "records": annotation_report.records,
                "annotations": annotation_report.annotations,
                "consequence_edges": annotation_report.consequence_edges,
            }

        parquet_dir = config.get("output", {}).get("parquet_dir")
        if parquet_dir:
            if not hasattr(store, "export_parquet"):
                raise ValueError(f"Store type {store_config['type']} cannot export Parquet")
            store.export_parquet(parquet_dir)
    finally:
        logger.info("Shutting down store ...")
        store.close()

    print(json.dumps(payload, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
