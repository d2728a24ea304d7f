"""Call-file adapters for variant imports."""

from .base import CallFileAdapter
from .vcf import PysamVcfAdapter

__all__ = [
    "CallFileAdapter",
    "PysamVcfAdapter",
]
