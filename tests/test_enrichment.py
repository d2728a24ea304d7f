import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT / "src"))

from variantdb import ImportProfile  # noqa: E402
from variantdb.enrichment import VariantAttributeExtractor  # noqa: E402


def test_direct_and_allele_count_frequencies() -> None:
    extractor = VariantAttributeExtractor()
    info = {
        "onekGPhase3.EAS_AF": (0.5,),
        "onekGPhase3.EUR_AF": ".",
        "ExAC.AC_AFR": (12,),
        "ExAC.AN_AFR": 240,
        "ExAC.AC_AMR": (3,),
        "ExAC.AN_AMR": 100,
        "ExAC.AC_SAS": None,
        "ExAC.AN_SAS": 500,
    }

    properties = extractor.population_frequencies(info)

    assert properties == {
        "onekGPhase3_EAS_AF": pytest.approx(0.5),
        "ExAC_AFR_AF": pytest.approx(0.05),
    }


def test_allele_number_threshold_comes_from_profile() -> None:
    extractor = VariantAttributeExtractor(ImportProfile(min_allele_number=50))

    properties = extractor.population_frequencies({"ExAC.AC_AMR": 3, "ExAC.AN_AMR": 100})

    assert properties == {"ExAC_AMR_AF": pytest.approx(0.03)}


def test_conservation_scores_skip_absent_values() -> None:
    extractor = VariantAttributeExtractor()

    scores = extractor.conservation_scores({"GERP": "5.1", "phyloP": float("nan"), "phastCons": "."})

    assert scores == {"GERP": pytest.approx(5.1)}
