"""Failure taxonomy for variant and annotation imports."""

from __future__ import annotations


class VariantImportError(Exception):
    """Base class for failures that abort an import run."""


class MalformedGenotype(VariantImportError, ValueError):
    """Genotype is structurally invalid (for example non-diploid)."""

    def __init__(self, message: str, *, contig: str, position: int, sample: str | None = None) -> None:
        super().__init__(f"{contig}:{position} {message}")
        self.contig = contig
        self.position = position
        self.sample = sample


class UnknownInheritance(VariantImportError, ValueError):
    """Genotype pattern is not one of the supported zygosity cases."""

    def __init__(self, message: str, *, contig: str, position: int, sample: str | None = None) -> None:
        super().__init__(f"Inheritance unknown at {contig}:{position}: {message}")
        self.contig = contig
        self.position = position
        self.sample = sample


class MissingRunInfo(VariantImportError, KeyError):
    """A genotype names a sample with no run registered in this session."""

    def __init__(self, sample: str) -> None:
        super().__init__(sample)
        self.sample = sample

    def __str__(self) -> str:
        return f"No run info registered for sample '{self.sample}'"


class MissingAnnotationTarget(VariantImportError, LookupError):
    """Annotation record references a variant absent from the store."""

    def __init__(self, variant_id: str) -> None:
        super().__init__(f"Variant not found in store: {variant_id}")
        self.variant_id = variant_id


class StoreConstraintViolation(VariantImportError):
    """Second node with an identity already held by another node."""

    def __init__(self, label: str, key: str, value: object) -> None:
        super().__init__(f"Unique constraint violated: {label}.{key}={value!r}")
        self.label = label
        self.key = key
        self.value = value
