"""VCF adapter backed by pysam."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import pysam

from variantdb.adapters.base import CallFileAdapter
from variantdb.annotations import fields_from_description
from variantdb.models import CallRecord, GenotypeCall, RunInfo

logger = logging.getLogger(__name__)

SAMPLE_META_KEY = "SAMPLE"


class PysamVcfAdapter(CallFileAdapter):
    """Read VCF/BCF records, genotypes and ``##SAMPLE`` run metadata.

    Each call to :meth:`read` reopens the file, so the adapter can serve both the
    genotype pass and the annotation pass of an import.
    """

    name = "vcf"

    def __init__(self, *, path: str | Path) -> None:
        self.path = Path(path)
        if not self.path.exists():
            raise FileNotFoundError(f"Call file not found: {self.path}")

    def read(self) -> Iterable[CallRecord]:
        with pysam.VariantFile(str(self.path)) as vcf:
            for record in vcf:
                yield self._to_record(record)

    def samples(self) -> list[RunInfo]:
        with pysam.VariantFile(str(self.path)) as vcf:
            header = vcf.header
            described: dict[str, RunInfo] = {}
            for header_record in header.records:
                if header_record.key != SAMPLE_META_KEY:
                    continue
                fields = self._meta_fields(header_record)
                if "ID" not in fields:
                    continue
                run = RunInfo.from_meta(fields)
                described[run.sample_id] = run

            runs: list[RunInfo] = []
            for sample in header.samples:
                if sample in described:
                    runs.append(described[sample])
                    continue
                logger.warning("%s: no SAMPLE header line, using sample id as analysis id", sample)
                runs.append(RunInfo(sample_id=sample))
            return runs

    def annotation_fields(self, key: str) -> tuple[str, ...] | None:
        with pysam.VariantFile(str(self.path)) as vcf:
            if key not in vcf.header.info:
                return None
            return fields_from_description(vcf.header.info[key].description)

    @staticmethod
    def _meta_fields(header_record: Any) -> dict[str, str]:
        if header_record.value is not None:
            return _split_meta_value(header_record.value)
        return {str(key): str(value) for key, value in header_record.items() if key != "IDX"}

    @staticmethod
    def _to_record(record: Any) -> CallRecord:
        genotypes: list[GenotypeCall] = []
        for sample_name, sample in record.samples.items():
            indices = sample.get("GT") or ()
            quality = sample.get("GQ")
            genotypes.append(
                GenotypeCall(
                    sample=sample_name,
                    allele_indices=tuple(indices),
                    quality=int(quality) if quality is not None else None,
                )
            )

        return CallRecord(
            contig=record.chrom,
            position=record.pos,
            reference=record.ref,
            alternates=tuple(record.alts or ()),
            variant_id=record.id,
            filters=tuple(record.filter.keys()),
            genotypes=genotypes,
            info=dict(record.info.items()),
        )


def _split_meta_value(value: str) -> dict[str, str]:
    """Split ``<ID=a,Tissue=b>`` into key/value pairs."""

    fields: dict[str, str] = {}
    for pair in value.strip().lstrip("<").rstrip(">").split(","):
        key, sep, item = pair.partition("=")
        if sep:
            fields[key.strip()] = item.strip()
    return fields
