import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT / "src"))

from variantdb import GenomeVariant  # noqa: E402
from variantdb.publishers import ImportedVariantsPublisher  # noqa: E402


def test_imported_listing_writes_header_and_rows(tmp_path: Path) -> None:
    output = tmp_path / "out" / "imported.vcf"
    publisher = ImportedVariantsPublisher(output_path=output)

    publisher.publish([GenomeVariant("1", 100, "A", "G"), GenomeVariant("1", 201, "T", "")])

    lines = output.read_text().splitlines()
    assert lines[0] == "##fileformat=VCFv4.1"
    assert lines[1] == "#CHROM\tPOS\tID\tREF\tALT\tQUAL\tFILTER\tINFO"
    assert lines[2] == "1\t100\t.\tA\tG\t.\t.\t."
    assert lines[3] == "1\t201\t.\tT\t\t.\t.\t."
    assert len(lines) == 4


def test_empty_run_writes_header_only(tmp_path: Path) -> None:
    output = tmp_path / "imported.vcf"

    ImportedVariantsPublisher(output_path=output, file_format="VCFv4.2").publish([])

    assert output.read_text().splitlines() == [
        "##fileformat=VCFv4.2",
        "#CHROM\tPOS\tID\tREF\tALT\tQUAL\tFILTER\tINFO",
    ]
