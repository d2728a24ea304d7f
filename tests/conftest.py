import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT / "src"))

CSQ_FORMAT = "Allele|Consequence|SYMBOL|Gene|Feature_type|Feature|BIOTYPE|EXON|INTRON|HGVSc|STRAND|CANONICAL|CCDS|DOMAINS"

CALLS_VCF = "\n".join(
    [
        "##fileformat=VCFv4.1",
        "##contig=<ID=1,length=249250621>",
        "##contig=<ID=X,length=155270560>",
        '##FILTER=<ID=LowQual,Description="Low quality">',
        '##FORMAT=<ID=GT,Number=1,Type=String,Description="Genotype">',
        '##FORMAT=<ID=GQ,Number=1,Type=Integer,Description="Genotype Quality">',
        "##SAMPLE=<ID=S1,Tissue=Blood,WorklistId=W1,SeqId=Q1,Assay=Panel,PipelineName=Germline,PipelineVersion=2>",
        "\t".join(["#CHROM", "POS", "ID", "REF", "ALT", "QUAL", "FILTER", "INFO", "FORMAT", "S1", "S2"]),
        "\t".join(["1", "100", "rs1", "A", "C,G", "50", "PASS", ".", "GT:GQ", "1/2:30", "0/1:20"]),
        "\t".join(["1", "200", ".", "AT", "A", "50", "PASS", ".", "GT:GQ", "1/1:40", "./.:."]),
        "\t".join(["1", "300", ".", "G", "T", "50", "LowQual", ".", "GT:GQ", "0/1:35", "0/1:35"]),
        "\t".join(["X", "400", ".", "C", "T", "50", "PASS", ".", "GT:GQ", "0/0:10", "0/1:15"]),
    ]
) + "\n"

ANNOTATED_VCF = "\n".join(
    [
        "##fileformat=VCFv4.1",
        "##contig=<ID=1,length=249250621>",
        f'##INFO=<ID=CSQ,Number=.,Type=String,Description="Consequence annotations from Ensembl VEP. Format: {CSQ_FORMAT}">',
        '##INFO=<ID=GERP,Number=1,Type=Float,Description="GERP score">',
        '##INFO=<ID=onekGPhase3.EUR_AF,Number=A,Type=Float,Description="EUR allele frequency">',
        '##INFO=<ID=ExAC.AC_NFE,Number=A,Type=Integer,Description="NFE allele count">',
        '##INFO=<ID=ExAC.AN_NFE,Number=1,Type=Integer,Description="NFE allele number">',
        "\t".join(["#CHROM", "POS", "ID", "REF", "ALT", "QUAL", "FILTER", "INFO"]),
        "\t".join(
            [
                "1",
                "100",
                "rs1",
                "A",
                "C",
                ".",
                ".",
                "CSQ="
                "C|missense_variant|BRCA1|ENSG1|Transcript|ENST1|protein_coding|2/10||c.5A>C|1|YES|CCDS1|Pfam_domain:PF1,"
                "C|missense_variant&splice_region_variant|BRCA1|ENSG1|Transcript|ENST2|protein_coding|2/9||c.5A>C|1||CCDS2|,"
                "C|downstream_gene_variant|NBR2|ENSG2|Transcript|ENST3|lincRNA|||||-1|||"
                ";GERP=4.5;onekGPhase3.EUR_AF=0.25;ExAC.AC_NFE=30;ExAC.AN_NFE=300",
            ]
        ),
        "\t".join(["1", "200", ".", "AT", "A", ".", ".", "GERP=."]),
    ]
) + "\n"


@pytest.fixture
def calls_vcf(tmp_path: Path) -> Path:
    path = tmp_path / "calls.vcf"
    path.write_text(CALLS_VCF)
    return path


@pytest.fixture
def annotated_vcf(tmp_path: Path) -> Path:
    path = tmp_path / "annotated.vcf"
    path.write_text(ANNOTATED_VCF)
    return path
