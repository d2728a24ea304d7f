"""Import profile loader for variant graph runs."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from variantdb.config import (
    ALLELE_COUNT_FREQUENCIES,
    CONSERVATION_FIELDS,
    DIRECT_FREQUENCY_FIELDS,
    AlleleCountFrequency,
    ImportProfile,
)


class ImportProfileLoader:
    """Load profile JSON from ``config/profiles`` or a custom path."""

    def __init__(self, profiles_dir: str | Path | None = None) -> None:
        if profiles_dir is None:
            profiles_dir = Path(__file__).resolve().parents[2] / "config" / "profiles"
        self.profiles_dir = Path(profiles_dir)

    def list_profiles(self) -> list[str]:
        """Return available profile names from the configured profile directory."""

        return sorted(path.stem for path in self.profiles_dir.glob("*.json"))

    def load(self, name_or_path: str | Path) -> ImportProfile:
        """Load a profile by name (for example, ``default``) or explicit path."""

        path = self._resolve_path(name_or_path)
        payload = json.loads(path.read_text())
        return self._parse(payload)

    def _resolve_path(self, name_or_path: str | Path) -> Path:
        requested = Path(name_or_path)

        if requested.exists():
            return requested

        candidate = self.profiles_dir / f"{requested}.json"
        if candidate.exists():
            return candidate

        raise FileNotFoundError(
            f"Profile not found: {name_or_path}. Available: {', '.join(self.list_profiles())}"
        )

    def _parse(self, payload: dict[str, Any]) -> ImportProfile:
        min_allele_number = int(payload.get("min_allele_number", 120))
        if min_allele_number < 0:
            raise ValueError("min_allele_number must be >= 0")

        biotypes = frozenset(
            str(value).strip()
            for value in payload.get("allowed_biotypes", ["protein_coding"])
            if str(value).strip()
        )
        if not biotypes:
            raise ValueError(f"Profile {payload.get('name')} must allow at least one biotype")

        if "allele_count_frequencies" in payload:
            allele_counts = tuple(
                AlleleCountFrequency(
                    count_field=str(item["count"]),
                    number_field=str(item["number"]),
                    property_name=str(item["property"]),
                )
                for item in payload["allele_count_frequencies"]
            )
        else:
            allele_counts = ALLELE_COUNT_FREQUENCIES

        return ImportProfile(
            name=str(payload["name"]),
            annotation_field=str(payload.get("annotation_field", "CSQ")),
            allowed_biotypes=biotypes,
            min_allele_number=min_allele_number,
            direct_frequencies=dict(payload.get("direct_frequencies", DIRECT_FREQUENCY_FIELDS)),
            allele_count_frequencies=allele_counts,
            conservation_scores=dict(payload.get("conservation_scores", CONSERVATION_FIELDS)),
            cache_store_hits=bool(payload.get("cache_store_hits", False)),
        )
