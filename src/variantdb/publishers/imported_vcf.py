"""Listing of newly imported variants in call-file layout."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

import pandas as pd

from variantdb.models import GenomeVariant
from variantdb.publishers.base import Publisher

logger = logging.getLogger(__name__)

VCF_COLUMNS: tuple[str, ...] = ("#CHROM", "POS", "ID", "REF", "ALT", "QUAL", "FILTER", "INFO")


class ImportedVariantsPublisher(Publisher):
    """Write one VCF-like row per variant created in the run, in creation order."""

    def __init__(self, *, output_path: str | Path = "imported.vcf", file_format: str = "VCFv4.1") -> None:
        self.output_path = Path(output_path)
        self.file_format = file_format

    def publish(self, variants: Sequence[GenomeVariant]) -> None:
        logger.info("Writing %d imported variants to %s", len(variants), self.output_path)

        frame = pd.DataFrame(
            [
                {
                    "#CHROM": variant.contig,
                    "POS": variant.position,
                    "ID": ".",
                    "REF": variant.reference,
                    "ALT": variant.alternate,
                    "QUAL": ".",
                    "FILTER": ".",
                    "INFO": ".",
                }
                for variant in variants
            ],
            columns=list(VCF_COLUMNS),
        )

        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        with self.output_path.open("w", newline="") as stream:
            stream.write(f"##fileformat={self.file_format}\n")
            frame.to_csv(stream, sep="\t", index=False, lineterminator="\n")
