import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT / "src"))

from variantdb import CallRecord, GenomeVariant, GenotypeCall, classify_genotype  # noqa: E402
from variantdb.genotypes import (  # noqa: E402
    Fatal,
    FatalKind,
    HeterozygousCall,
    HeterozygousNonRefCall,
    HomozygousCall,
    Skip,
    SkipReason,
)


def _record(reference: str = "A", alternates: tuple[str, ...] = ("C", "G")) -> CallRecord:
    return CallRecord(contig="1", position=100, reference=reference, alternates=alternates)


def _call(*indices: int | None) -> GenotypeCall:
    return GenotypeCall(sample="S1", allele_indices=tuple(indices), quality=30)


def test_no_call_and_hom_ref_are_skipped() -> None:
    assert classify_genotype(_record(), _call(None, None)) == Skip(SkipReason.NO_CALL)
    assert classify_genotype(_record(), _call(0, 0)) == Skip(SkipReason.HOM_REF)


def test_mixed_genotype_is_skipped() -> None:
    assert classify_genotype(_record(), _call(None, 1)) == Skip(SkipReason.MIXED)


def test_non_diploid_genotype_is_malformed() -> None:
    outcome = classify_genotype(_record(), _call(0, 1, 1))
    assert isinstance(outcome, Fatal)
    assert outcome.kind is FatalKind.MALFORMED

    haploid = classify_genotype(_record(), _call(1))
    assert isinstance(haploid, Fatal)
    assert haploid.kind is FatalKind.MALFORMED


def test_allele_index_outside_record_is_malformed() -> None:
    outcome = classify_genotype(_record(alternates=("C",)), _call(0, 2))

    assert isinstance(outcome, Fatal)
    assert outcome.kind is FatalKind.MALFORMED


def test_spanning_deletion_allele_is_skipped() -> None:
    outcome = classify_genotype(_record(alternates=("*", "C")), _call(1, 2))

    assert outcome == Skip(SkipReason.SPANNING_DELETION)


def test_hom_alt_yields_canonical_variant() -> None:
    outcome = classify_genotype(_record(reference="AT", alternates=("A",)), _call(1, 1))

    assert outcome == HomozygousCall(GenomeVariant("1", 101, "T", ""))


def test_het_picks_non_reference_allele_in_either_order() -> None:
    expected = HeterozygousCall(GenomeVariant("1", 100, "A", "G"))

    assert classify_genotype(_record(), _call(0, 2)) == expected
    assert classify_genotype(_record(), _call(2, 0)) == expected


def test_het_non_ref_yields_both_alternates() -> None:
    outcome = classify_genotype(_record(), _call(1, 2))

    assert isinstance(outcome, HeterozygousNonRefCall)
    assert outcome.first == GenomeVariant("1", 100, "A", "G")
    assert outcome.second == GenomeVariant("1", 100, "A", "C")
