"""
Ingest layer: 작성된 CS Form 212 워크북 -> 구조화된 payload.
"""

from .importer import CsForm212Importer

__all__ = ["CsForm212Importer"]
