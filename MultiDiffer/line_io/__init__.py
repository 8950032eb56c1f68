"""
Loading line sequences
"""

from .sources import (
    SequenceSource,
    FileSequenceSource,
    InMemorySequenceSource,
    SequenceCache,
    read_lines
)

__all__ = [
    "SequenceSource",
    "FileSequenceSource",
    "InMemorySequenceSource",
    "SequenceCache",
    "read_lines"
]
