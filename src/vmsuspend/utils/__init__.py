"""
File utilities for the suspend helper.
"""

from .atomic_write import atomic_write_text, atomic_write_json

__all__ = [
    "atomic_write_text",
    "atomic_write_json",
]
