"""Configuration contracts for variant graph imports."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping


class GraphSchema:
    """Node labels, identity keys and relationship types written by the importer."""

    SAMPLE = "Sample"
    RUN_INFO = "RunInfo"
    VARIANT = "Variant"
    SYMBOL = "Symbol"
    FEATURE = "Feature"
    CANONICAL = "Canonical"
    ANNOTATION = "Annotation"
    VIRTUAL_PANEL = "VirtualPanel"
    USER = "User"

    SAMPLE_ID = "SampleId"
    ANALYSIS_ID = "AnalysisId"
    VARIANT_ID = "VariantId"
    SYMBOL_ID = "SymbolId"
    FEATURE_ID = "FeatureId"
    VIRTUAL_PANEL_NAME = "VirtualPanelName"
    USER_ID = "UserId"

    HAS_ANALYSIS = "HAS_ANALYSIS"
    HAS_HET_VARIANT = "HAS_HET_VARIANT"
    HAS_HOM_VARIANT = "HAS_HOM_VARIANT"
    HAS_IN_SYMBOL = "HAS_IN_SYMBOL"
    HAS_IN_FEATURE = "HAS_IN_FEATURE"
    HAS_UNKNOWN_CONSEQUENCE = "HAS_UNKNOWN_CONSEQUENCE"
    HAS_CONTAINS_SYMBOL = "HAS_CONTAINS_SYMBOL"
    HAS_DESIGNED_BY = "HAS_DESIGNED_BY"

    @staticmethod
    def consequence_relationship(consequence: str) -> str:
        return f"HAS_{consequence.strip().upper()}_CONSEQUENCE"

    @staticmethod
    def biotype_relationship(biotype: str) -> str:
        return f"HAS_{biotype.strip().upper()}_BIOTYPE"


UNIQUE_CONSTRAINTS: tuple[tuple[str, str], ...] = (
    (GraphSchema.SAMPLE, GraphSchema.SAMPLE_ID),
    (GraphSchema.RUN_INFO, GraphSchema.ANALYSIS_ID),
    (GraphSchema.VARIANT, GraphSchema.VARIANT_ID),
    (GraphSchema.FEATURE, GraphSchema.FEATURE_ID),
    (GraphSchema.SYMBOL, GraphSchema.SYMBOL_ID),
    (GraphSchema.VIRTUAL_PANEL, GraphSchema.VIRTUAL_PANEL_NAME),
    (GraphSchema.USER, GraphSchema.USER_ID),
)


@dataclass(frozen=True)
class AlleleCountFrequency:
    """Frequency derived as allele count over allele number."""

    count_field: str
    number_field: str
    property_name: str


DIRECT_FREQUENCY_FIELDS: Mapping[str, str] = {
    "onekGPhase3.EAS_AF": "onekGPhase3_EAS_AF",
    "onekGPhase3.EUR_AF": "onekGPhase3_EUR_AF",
    "onekGPhase3.AFR_AF": "onekGPhase3_AFR_AF",
    "onekGPhase3.AMR_AF": "onekGPhase3_AMR_AF",
    "onekGPhase3.SAS_AF": "onekGPhase3_SAS_AF",
}

ALLELE_COUNT_FREQUENCIES: tuple[AlleleCountFrequency, ...] = tuple(
    AlleleCountFrequency(f"ExAC.AC_{population}", f"ExAC.AN_{population}", f"ExAC_{population}_AF")
    for population in ("AFR", "AMR", "EAS", "FIN", "NFE", "OTH", "SAS")
)

CONSERVATION_FIELDS: Mapping[str, str] = {
    "GERP": "GERP",
    "phastCons": "phastCons",
    "phyloP": "phyloP",
}


@dataclass(frozen=True)
class ImportProfile:
    """Tunable behaviour of one import run.

    Defaults reproduce the VEP/1000 Genomes/ExAC annotated call files the
    importer was first written for; profiles under ``config/profiles`` can
    override any field.
    """

    name: str = "default"
    annotation_field: str = "CSQ"
    allowed_biotypes: frozenset[str] = frozenset({"protein_coding"})
    min_allele_number: int = 120
    direct_frequencies: Mapping[str, str] = field(default_factory=lambda: dict(DIRECT_FREQUENCY_FIELDS))
    allele_count_frequencies: tuple[AlleleCountFrequency, ...] = ALLELE_COUNT_FREQUENCIES
    conservation_scores: Mapping[str, str] = field(default_factory=lambda: dict(CONSERVATION_FIELDS))
    cache_store_hits: bool = False
