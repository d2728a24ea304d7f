"""Import output publishers."""

from .base import Publisher
from .imported_vcf import ImportedVariantsPublisher

__all__ = [
    "Publisher",
    "ImportedVariantsPublisher",
]
