"""Publisher interface for import outputs."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from variantdb.models import GenomeVariant


class Publisher(ABC):
    """Publishes the variants created by an import run into audit artifacts."""

    @abstractmethod
    def publish(self, variants: Sequence[GenomeVariant]) -> None:
        """Publish newly created variants into output targets."""
