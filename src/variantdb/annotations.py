"""Decomposition of VEP consequence annotations into per-transcript records."""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any

VEP_V82_FIELDS: tuple[str, ...] = (
    "Allele",
    "Consequence",
    "IMPACT",
    "SYMBOL",
    "Gene",
    "Feature_type",
    "Feature",
    "BIOTYPE",
    "EXON",
    "INTRON",
    "HGVSc",
    "HGVSp",
    "cDNA_position",
    "CDS_position",
    "Protein_position",
    "Amino_acids",
    "Codons",
    "Existing_variation",
    "DISTANCE",
    "STRAND",
    "SYMBOL_SOURCE",
    "HGNC_ID",
    "CANONICAL",
    "TSL",
    "CCDS",
    "ENSP",
    "SWISSPROT",
    "TREMBL",
    "UNIPARC",
    "SIFT",
    "PolyPhen",
    "DOMAINS",
)

# Domain sources whose identifiers are merged into one combined list.
MERGED_DOMAIN_SOURCES: dict[str, tuple[str, ...]] = {
    "Pfam_domain": ("Pfam_domain",),
    "hmmpanther": ("hmmpanther",),
    "prosite": ("PROSITE_profiles", "PROSITE_patterns"),
    "Superfamily_domains": ("Superfamily_domains",),
}

_FORMAT_RE = re.compile(r"Format:\s*([^\s\"]+)")
_LEADING_INT_RE = re.compile(r"^\s*(\d+)")


def fields_from_description(description: str | None) -> tuple[str, ...] | None:
    """Extract the ``Format: A|B|C`` field layout from a CSQ header description."""

    if not description:
        return None
    match = _FORMAT_RE.search(description)
    if match is None:
        return None
    return tuple(match.group(1).split("|"))


@dataclass(frozen=True)
class AnnotationRecord:
    """One transcript-level consequence annotation.

    Instances compare by every captured value, so identical annotations reported
    for different transcripts collapse when collected into a set.
    """

    symbol: str | None = None
    gene: str | None = None
    feature: str | None = None
    feature_type: str | None = None
    biotype: str | None = None
    exon: str | None = None
    intron: str | None = None
    hgvs_coding: str | None = None
    hgvs_protein: str | None = None
    codons: str | None = None
    sift: str | None = None
    polyphen: str | None = None
    ccds: str | None = None
    strand: int | None = None
    canonical: bool = False
    consequences: tuple[str, ...] = ()
    domains: tuple[tuple[str, tuple[str, ...]], ...] = ()

    @property
    def exon_number(self) -> int | None:
        return _position_of(self.exon)

    @property
    def intron_number(self) -> int | None:
        return _position_of(self.intron)

    @property
    def total_exons(self) -> int | None:
        return _total_of(self.exon)

    def domain_map(self) -> dict[str, tuple[str, ...]]:
        return dict(self.domains)

    def merged_domains(self) -> dict[str, list[str]]:
        """Return domain identifiers grouped into the stored domain-list fields."""

        by_source = self.domain_map()
        merged: dict[str, list[str]] = {}
        for target, sources in MERGED_DOMAIN_SOURCES.items():
            present = [source for source in sources if source in by_source]
            if not present:
                continue
            combined: set[str] = set()
            for source in present:
                combined.update(by_source[source])
            merged[target] = sorted(combined)
        return merged


def filter_out(record: AnnotationRecord, allowed_biotypes: Iterable[str] = ("protein_coding",)) -> bool:
    """Return True when the annotation should be dropped."""

    return not record.biotype or record.biotype not in set(allowed_biotypes)


class AnnotationDecomposer:
    """Split a raw CSQ attribute into a deduplicated set of annotation records."""

    def __init__(
        self,
        fields: Sequence[str] = VEP_V82_FIELDS,
        *,
        allowed_biotypes: Iterable[str] = ("protein_coding",),
    ) -> None:
        self.fields = tuple(fields)
        self.allowed_biotypes = frozenset(allowed_biotypes)

    def decompose(self, raw: Any) -> set[AnnotationRecord]:
        records: set[AnnotationRecord] = set()
        for entry in self._entries(raw):
            record = self.parse(entry)
            if filter_out(record, self.allowed_biotypes):
                continue
            records.add(record)
        return records

    def parse(self, entry: str) -> AnnotationRecord:
        """Parse one ``|``-delimited annotation against the configured layout."""

        values = entry.split("|")
        row = {name: _clean(values[index]) if index < len(values) else None for index, name in enumerate(self.fields)}

        return AnnotationRecord(
            symbol=row.get("SYMBOL"),
            gene=row.get("Gene"),
            feature=row.get("Feature"),
            feature_type=row.get("Feature_type"),
            biotype=row.get("BIOTYPE"),
            exon=row.get("EXON"),
            intron=row.get("INTRON"),
            hgvs_coding=row.get("HGVSc"),
            hgvs_protein=row.get("HGVSp"),
            codons=row.get("Codons"),
            sift=row.get("SIFT"),
            polyphen=row.get("PolyPhen"),
            ccds=row.get("CCDS"),
            strand=_to_int(row.get("STRAND")),
            canonical=(row.get("CANONICAL") or "").upper() == "YES",
            consequences=_ordered_unique(row.get("Consequence")),
            domains=_parse_domains(row.get("DOMAINS")),
        )

    @staticmethod
    def _entries(raw: Any) -> list[str]:
        if raw is None:
            return []
        if isinstance(raw, str):
            items: Iterable[Any] = raw.split(",")
        else:
            items = raw
        return [str(item) for item in items if item is not None and str(item).strip()]


def decompose(
    raw: Any,
    fields: Sequence[str] = VEP_V82_FIELDS,
    allowed_biotypes: Iterable[str] = ("protein_coding",),
) -> set[AnnotationRecord]:
    """Shortcut for ``AnnotationDecomposer(...).decompose(raw)``."""

    return AnnotationDecomposer(fields, allowed_biotypes=allowed_biotypes).decompose(raw)


def _clean(value: str) -> str | None:
    cleaned = value.strip()
    return cleaned or None


def _to_int(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def _ordered_unique(value: str | None) -> tuple[str, ...]:
    if not value:
        return ()
    seen: dict[str, None] = {}
    for term in value.split("&"):
        term = term.strip()
        if term:
            seen.setdefault(term, None)
    return tuple(seen)


def _parse_domains(value: str | None) -> tuple[tuple[str, tuple[str, ...]], ...]:
    """Group ``source:id&source:id`` domain memberships by source."""

    if not value:
        return ()
    grouped: dict[str, set[str]] = {}
    for item in value.split("&"):
        source, sep, identifier = item.partition(":")
        if not sep or not source or not identifier:
            continue
        grouped.setdefault(source, set()).add(identifier)
    return tuple(sorted((source, tuple(sorted(ids))) for source, ids in grouped.items()))


def _position_of(value: str | None) -> int | None:
    if not value:
        return None
    match = _LEADING_INT_RE.match(value.split("/")[0])
    return int(match.group(1)) if match else None


def _total_of(value: str | None) -> int | None:
    if not value or "/" not in value:
        return None
    return _to_int(value.split("/", 1)[1].strip())
