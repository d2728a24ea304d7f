"""Variant graph import primitives.

This package provides the building blocks for importing variant calls and
transcript annotations into a deduplicated, uniqueness-constrained graph.
"""

from .annotations import AnnotationDecomposer, AnnotationRecord, decompose, filter_out
from .attacher import AnnotationAttacher
from .config import GraphSchema, ImportProfile
from .errors import (
    MalformedGenotype,
    MissingAnnotationTarget,
    MissingRunInfo,
    StoreConstraintViolation,
    UnknownInheritance,
    VariantImportError,
)
from .genotypes import classify_genotype
from .models import CallRecord, ChromosomeCategory, GenomeVariant, GenotypeCall, RunInfo, Zygosity, canonicalize
from .pipeline import AnnotationRunReport, ImportRunReport, VariantImportPipeline
from .profiles import ImportProfileLoader
from .reference import ReferenceSeeder
from .registry import PluginSpec, Registry, build_default_adapter_registry, build_default_store_registry
from .resolver import ResolutionTier, VariantResolver
from .session import SessionRegistry

__all__ = [
    "AnnotationAttacher",
    "AnnotationDecomposer",
    "AnnotationRecord",
    "AnnotationRunReport",
    "CallRecord",
    "ChromosomeCategory",
    "GenomeVariant",
    "GenotypeCall",
    "GraphSchema",
    "ImportProfile",
    "ImportProfileLoader",
    "ImportRunReport",
    "MalformedGenotype",
    "MissingAnnotationTarget",
    "MissingRunInfo",
    "PluginSpec",
    "ReferenceSeeder",
    "Registry",
    "ResolutionTier",
    "RunInfo",
    "SessionRegistry",
    "StoreConstraintViolation",
    "UnknownInheritance",
    "VariantImportError",
    "VariantImportPipeline",
    "VariantResolver",
    "Zygosity",
    "build_default_adapter_registry",
    "build_default_store_registry",
    "canonicalize",
    "classify_genotype",
    "decompose",
    "filter_out",
]
