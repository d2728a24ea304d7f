"""Canonical in-memory data models used by the variant importer."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping

from variantdb.config import GraphSchema


@dataclass(frozen=True)
class GenomeVariant:
    """Single allele change at a genomic locus.

    Equality and hashing cover the full quadruple, so observations only compare
    equal once both sides have been reduced with :func:`canonicalize`.
    """

    contig: str
    position: int
    reference: str
    alternate: str

    @property
    def concatenated_id(self) -> str:
        """Identity string used as the store's unique ``VariantId``."""

        return f"{self.contig}:{self.position}{self.reference}>{self.alternate}"

    def minimal(self) -> "GenomeVariant":
        return canonicalize(self.contig, self.position, self.reference, self.alternate)

    @property
    def chromosome_category(self) -> "ChromosomeCategory | None":
        return ChromosomeCategory.from_contig(self.contig)


def canonicalize(contig: str, position: int, reference: str, alternate: str) -> GenomeVariant:
    """Reduce a raw call to its minimal representation.

    The shared suffix is trimmed first, then the shared prefix, advancing the
    position by the number of leading bases removed. Trimming stops as soon as
    either allele is empty, which is the canonical form of an indel.
    """

    ref = reference
    alt = alternate

    while ref and alt and ref[-1] == alt[-1]:
        ref = ref[:-1]
        alt = alt[:-1]

    prefix = 0
    while prefix < len(ref) and prefix < len(alt) and ref[prefix] == alt[prefix]:
        prefix += 1

    return GenomeVariant(
        contig=contig,
        position=position + prefix,
        reference=ref[prefix:],
        alternate=alt[prefix:],
    )


class ChromosomeCategory(str, Enum):
    """Chromosome class assigned to a variant node once, at creation."""

    AUTOSOMAL = "Autosomal"
    X = "X"
    Y = "Y"
    MITOCHONDRIAL = "Mitochondrial"

    @property
    def label(self) -> str:
        return f"{self.value}Chromosome"

    @classmethod
    def from_contig(cls, contig: str) -> "ChromosomeCategory | None":
        """Return the category for a contig name, or ``None`` for other contigs."""

        name = contig.strip()
        if name.lower().startswith("chr"):
            name = name[3:]
        name = name.upper()

        if name == "X":
            return cls.X
        if name == "Y":
            return cls.Y
        if name in {"M", "MT"}:
            return cls.MITOCHONDRIAL
        if name.isdigit() and 0 < int(name) < 23:
            return cls.AUTOSOMAL
        return None


class Zygosity(str, Enum):
    """Genotype state carried on the run → variant relationship."""

    HETEROZYGOUS = "heterozygous"
    HOMOZYGOUS = "homozygous"

    @property
    def relationship_type(self) -> str:
        if self is Zygosity.HOMOZYGOUS:
            return GraphSchema.HAS_HOM_VARIANT
        return GraphSchema.HAS_HET_VARIANT


@dataclass
class RunInfo:
    """Sequencing/analysis run for one sample, as described in the call file header."""

    sample_id: str
    tissue: str | None = None
    worklist_id: str | None = None
    seq_id: str | None = None
    assay: str | None = None
    pipeline_name: str | None = None
    pipeline_version: int | None = None
    remote_bam_file_path: str | None = None
    remote_vcf_file_path: str | None = None

    @property
    def analysis_id(self) -> str:
        """Composite run identity; falls back to the sample id without run metadata."""

        if self.worklist_id is None and self.seq_id is None:
            return self.sample_id
        return f"{self.worklist_id}_{self.sample_id}_{self.seq_id}"

    @classmethod
    def from_meta(cls, fields: Mapping[str, Any]) -> "RunInfo":
        """Build from the key/value pairs of a ``##SAMPLE=<...>`` header line."""

        version = fields.get("PipelineVersion")
        return cls(
            sample_id=str(fields["ID"]),
            tissue=_clean(fields.get("Tissue")),
            worklist_id=_clean(fields.get("WorklistId")),
            seq_id=_clean(fields.get("SeqId")),
            assay=_clean(fields.get("Assay")),
            pipeline_name=_clean(fields.get("PipelineName")),
            pipeline_version=int(version) if _clean(version) is not None else None,
            remote_bam_file_path=_clean(fields.get("RemoteBamFilePath")),
            remote_vcf_file_path=_clean(fields.get("RemoteVcfFilePath")),
        )

    def run_properties(self) -> dict[str, Any]:
        properties = {
            "AnalysisId": self.analysis_id,
            "WorklistId": self.worklist_id,
            "SeqId": self.seq_id,
            "Assay": self.assay,
            "PipelineName": self.pipeline_name,
            "PipelineVersion": self.pipeline_version,
            "RemoteBamFilePath": self.remote_bam_file_path,
            "RemoteVcfFilePath": self.remote_vcf_file_path,
        }
        return {key: value for key, value in properties.items() if value is not None}


@dataclass(frozen=True)
class GenotypeCall:
    """One sample's genotype at a record.

    ``allele_indices`` follows VCF GT semantics: ``0`` is the reference allele,
    ``n`` the n-th alternate, ``None`` a missing call.
    """

    sample: str
    allele_indices: tuple[int | None, ...]
    quality: int | None = None

    @property
    def ploidy(self) -> int:
        return len(self.allele_indices)

    @property
    def is_no_call(self) -> bool:
        return all(index is None for index in self.allele_indices)

    @property
    def is_mixed(self) -> bool:
        called = [index is not None for index in self.allele_indices]
        return any(called) and not all(called)

    @property
    def is_hom_ref(self) -> bool:
        return bool(self.allele_indices) and all(index == 0 for index in self.allele_indices)

    def genotype_string(self) -> str:
        return "/".join("." if index is None else str(index) for index in self.allele_indices)


@dataclass
class CallRecord:
    """Reader-neutral view of one variant record in a call file."""

    contig: str
    position: int
    reference: str
    alternates: tuple[str, ...]
    variant_id: str | None = None
    filters: tuple[str, ...] = ()
    genotypes: list[GenotypeCall] = field(default_factory=list)
    info: dict[str, Any] = field(default_factory=dict)

    @property
    def is_filtered(self) -> bool:
        return any(name not in {"PASS", "."} for name in self.filters)

    @property
    def is_variant(self) -> bool:
        return any(alt and alt != self.reference for alt in self.alternates)

    def allele(self, index: int) -> str:
        """Return the allele string for a GT index."""

        if index == 0:
            return self.reference
        if index < 0 or index > len(self.alternates):
            raise IndexError(f"Allele index {index} out of range at {self.contig}:{self.position}")
        return self.alternates[index - 1]

    def locus(self) -> str:
        return f"{self.contig} {self.position} {self.reference}{list(self.alternates)}"


def _clean(value: Any) -> str | None:
    if value is None:
        return None
    cleaned = str(value).strip()
    return cleaned or None
