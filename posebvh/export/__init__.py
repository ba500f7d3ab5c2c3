"""
Export modules for captured motion.

Supports export to:
- BVH (Biovision Hierarchy) - position-only upper-body skeleton
"""

from posebvh.export.bvh_export import (
    BVHExporter,
    EmptyInputError,
    ExportWriteError,
    build_bvh,
)
from posebvh.export.service import ExportResponse, ExportService

__all__ = [
    "BVHExporter",
    "EmptyInputError",
    "ExportResponse",
    "ExportService",
    "ExportWriteError",
    "build_bvh",
]
