"""Base interface for call-file adapters."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable

from variantdb.models import CallRecord, RunInfo


class CallFileAdapter(ABC):
    """Adapter that exposes a variant call file as a single-pass record stream."""

    name: str

    @abstractmethod
    def read(self) -> Iterable[CallRecord]:
        """Yield call records in file order."""

    @abstractmethod
    def samples(self) -> list[RunInfo]:
        """Return run metadata for every sample in the file."""

    def annotation_fields(self, key: str) -> tuple[str, ...] | None:
        """Return the field layout declared for a multi-valued annotation attribute."""

        return None
