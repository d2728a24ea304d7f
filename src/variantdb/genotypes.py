"""Zygosity classification of raw genotype calls.

Every genotype observation passes through :func:`classify_genotype` exactly
once and comes out as one member of a closed set of outcomes. The pipeline then
acts on the outcome without re-inspecting the genotype.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from variantdb.models import CallRecord, GenotypeCall, GenomeVariant, canonicalize

SPANNING_DELETION = "*"


class SkipReason(str, Enum):
    NO_CALL = "no_call"
    HOM_REF = "hom_ref"
    MIXED = "mixed"
    SPANNING_DELETION = "spanning_deletion"


class FatalKind(str, Enum):
    MALFORMED = "malformed"
    UNKNOWN_INHERITANCE = "unknown_inheritance"


@dataclass(frozen=True)
class Skip:
    reason: SkipReason


@dataclass(frozen=True)
class Fatal:
    kind: FatalKind
    message: str


@dataclass(frozen=True)
class HomozygousCall:
    variant: GenomeVariant


@dataclass(frozen=True)
class HeterozygousCall:
    variant: GenomeVariant


@dataclass(frozen=True)
class HeterozygousNonRefCall:
    first: GenomeVariant
    second: GenomeVariant

    @property
    def variants(self) -> tuple[GenomeVariant, GenomeVariant]:
        return (self.first, self.second)


GenotypeOutcome = Union[Skip, Fatal, HomozygousCall, HeterozygousCall, HeterozygousNonRefCall]


def classify_genotype(record: CallRecord, genotype: GenotypeCall) -> GenotypeOutcome:
    """Decide what one genotype contributes to the graph.

    Checks run in a fixed order: no-call and hom-ref, mixed, ploidy, spanning
    deletion, then zygosity.
    """

    if genotype.is_no_call or genotype.is_hom_ref:
        return Skip(SkipReason.NO_CALL if genotype.is_no_call else SkipReason.HOM_REF)

    if genotype.is_mixed:
        return Skip(SkipReason.MIXED)

    if genotype.ploidy != 2:
        return Fatal(
            FatalKind.MALFORMED,
            f"Genotype {genotype.genotype_string()} for {genotype.sample} is not diploid",
        )

    try:
        alleles = [record.allele(index) for index in genotype.allele_indices]
    except IndexError:
        return Fatal(
            FatalKind.MALFORMED,
            f"Genotype {genotype.genotype_string()} for {genotype.sample} "
            f"references a missing allele",
        )

    if SPANNING_DELETION in alleles:
        return Skip(SkipReason.SPANNING_DELETION)

    first, second = genotype.allele_indices
    if first == second:
        return HomozygousCall(_minimal(record, alleles[1]))

    if first == 0 or second == 0:
        alternate = alleles[1] if first == 0 else alleles[0]
        return HeterozygousCall(_minimal(record, alternate))

    if first > 0 and second > 0:
        return HeterozygousNonRefCall(
            first=_minimal(record, alleles[1]),
            second=_minimal(record, alleles[0]),
        )

    return Fatal(FatalKind.UNKNOWN_INHERITANCE, f"{genotype.sample} {genotype.genotype_string()}")


def _minimal(record: CallRecord, alternate: str) -> GenomeVariant:
    return canonicalize(record.contig, record.position, record.reference, alternate)
