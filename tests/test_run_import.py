import json
import subprocess
import sys
from pathlib import Path

import duckdb


def _run(config_path: Path) -> subprocess.CompletedProcess:
    repo_root = Path(__file__).resolve().parents[1]
    return subprocess.run(
        [sys.executable, "scripts/run_import.py", "--config", str(config_path)],
        cwd=repo_root,
        text=True,
        capture_output=True,
    )


def test_run_import_script_executes_full_import(tmp_path: Path, calls_vcf: Path, annotated_vcf: Path) -> None:
    repo_root = Path(__file__).resolve().parents[1]
    imported = tmp_path / "output" / "imported.vcf"
    parquet_dir = tmp_path / "output" / "parquet"
    config_path = tmp_path / "import.json"
    config_path.write_text(
        json.dumps(
            {
                "store": {"type": "duckdb", "params": {"db_path": str(tmp_path / "graph.duckdb")}},
                "profile": "default",
                "reference": str(repo_root / "config" / "reference" / "panels.json"),
                "genotypes": {"adapter": "vcf", "params": {"path": str(calls_vcf)}},
                "annotations": {"adapter": "vcf", "params": {"path": str(annotated_vcf)}},
                "output": {"imported_vcf": str(imported), "parquet_dir": str(parquet_dir)},
            }
        )
    )

    result = _run(config_path)
    assert result.returncode == 0, result.stderr

    payload = json.loads(result.stdout)
    assert payload["profile"] == "default"
    assert payload["reference"] == {"users": 1, "panels": 2}
    assert payload["genotypes"]["created_variants"] == 4
    assert payload["annotations"]["annotations"] == 2

    assert len(imported.read_text().splitlines()) == 6
    assert (parquet_dir / "nodes.parquet").exists()

    with duckdb.connect(str(tmp_path / "graph.duckdb"), read_only=True) as connection:
        variants = connection.execute(
            "SELECT count(*) FROM unique_keys WHERE label = 'Variant'"
        ).fetchone()[0]
    assert variants == 4


def test_run_import_script_second_run_adds_nothing(tmp_path: Path, calls_vcf: Path) -> None:
    config_path = tmp_path / "import.json"
    config_path.write_text(
        json.dumps(
            {
                "store": {"type": "duckdb", "params": {"db_path": str(tmp_path / "graph.duckdb")}},
                "genotypes": {"adapter": "vcf", "params": {"path": str(calls_vcf)}},
                "output": {"imported_vcf": str(tmp_path / "imported.vcf")},
            }
        )
    )

    assert _run(config_path).returncode == 0
    result = _run(config_path)
    assert result.returncode == 0, result.stderr

    payload = json.loads(result.stdout)
    assert payload["genotypes"]["created_variants"] == 0
    assert payload["genotypes"]["store_hits"] == 5
    assert (tmp_path / "imported.vcf").read_text().splitlines() == [
        "##fileformat=VCFv4.1",
        "#CHROM\tPOS\tID\tREF\tALT\tQUAL\tFILTER\tINFO",
    ]


def test_run_import_script_rejects_invalid_config(tmp_path: Path) -> None:
    config_path = tmp_path / "import.json"
    config_path.write_text(json.dumps({"genotypes": {"adapter": "vcf"}}))

    result = _run(config_path)

    assert result.returncode != 0
    assert "Invalid import config" in result.stderr
