"""Logo package export engine."""

from logopack.engine.registry import exporter, get_registry, ExporterRegistry
from logopack.engine.context import ExportContext
from logopack.engine.assembler import PackageAssembler

__all__ = [
    "exporter",
    "get_registry",
    "ExporterRegistry",
    "ExportContext",
    "PackageAssembler",
]
