"""Population-frequency and conservation-score attributes for variant nodes."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import pandas as pd

from variantdb.config import ImportProfile

ABSENT = "."


class VariantAttributeExtractor:
    """Pull scalar INFO attributes into variant node properties.

    An attribute is absent when missing, ``None`` or ``"."``. Multi-valued INFO
    entries contribute their first element.
    """

    def __init__(self, profile: ImportProfile | None = None) -> None:
        self.profile = profile or ImportProfile()

    def population_frequencies(self, info: Mapping[str, Any]) -> dict[str, float]:
        properties: dict[str, float] = {}

        for field_name, property_name in self.profile.direct_frequencies.items():
            value = self._to_float(info.get(field_name))
            if value is not None:
                properties[property_name] = value

        for spec in self.profile.allele_count_frequencies:
            count = self._to_float(info.get(spec.count_field))
            number = self._to_float(info.get(spec.number_field))
            if count is None or number is None:
                continue
            if number > self.profile.min_allele_number:
                properties[spec.property_name] = count / number

        return properties

    def conservation_scores(self, info: Mapping[str, Any]) -> dict[str, float]:
        properties: dict[str, float] = {}
        for field_name, property_name in self.profile.conservation_scores.items():
            value = self._to_float(info.get(field_name))
            if value is not None:
                properties[property_name] = value
        return properties

    @staticmethod
    def _to_float(value: Any) -> float | None:
        if isinstance(value, (list, tuple)):
            value = value[0] if value else None
        if value is None or (not isinstance(value, str) and pd.isna(value)):
            return None

        cleaned = str(value).strip()
        if not cleaned or cleaned == ABSENT:
            return None

        try:
            return float(cleaned)
        except ValueError:
            return None
