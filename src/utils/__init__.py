"""
App Catalog Utility Modules

Filesystem helpers for scratch extraction and atomic file placement.
"""

from .scratch import scratch_directory, atomic_replace

__all__ = [
    "scratch_directory",
    "atomic_replace",
]
