"""
Line Alignment Module
Pairwise LCS edit scripts and their multi-sequence accumulation
"""

from .errors import (
    MultiDifferError,
    ConfigurationError,
    SourceReadError,
    InternalConsistencyError
)
from .pairwise import (
    Line,
    Sequence,
    EditOp,
    Match,
    Change,
    Delete,
    Insert,
    EditScript,
    PairwiseAligner,
    pairwise
)
from .accumulate import (
    Entry,
    Row,
    AlignmentTable,
    MultiSequenceAccumulator,
    entry_for_op
)
from .differ import Differ, multi_diff

__all__ = [
    "MultiDifferError",
    "ConfigurationError",
    "SourceReadError",
    "InternalConsistencyError",
    "Line",
    "Sequence",
    "EditOp",
    "Match",
    "Change",
    "Delete",
    "Insert",
    "EditScript",
    "PairwiseAligner",
    "pairwise",
    "Entry",
    "Row",
    "AlignmentTable",
    "MultiSequenceAccumulator",
    "entry_for_op",
    "Differ",
    "multi_diff"
]
