"""
Multi-sequence accumulation
- Pairwise scripts of every other sequence against one base
- Serial, threaded or asyncio map stage
- Positional zip of the scripts into one row table
"""

from __future__ import annotations
import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from functools import partial
from itertools import zip_longest
from typing import Iterator, List, Literal, NamedTuple, Optional, Tuple

from .errors import ConfigurationError, InternalConsistencyError
from .pairwise import (
    Change,
    Delete,
    EditOp,
    EditScript,
    Insert,
    Match,
    PairwiseAligner,
    Sequence,
)

logger = logging.getLogger(__name__)


# -------------------------
# Data structures
# -------------------------
class Entry(NamedTuple):
    symbol: str  # "" match, "!" change, "-" delete, "+" insert
    text: str


# one slot per compared sequence, None where that script has no step
Row = Tuple[Optional[Entry], ...]


@dataclass
class AlignmentTable:
    rows: List[Row] = field(default_factory=list)
    base_name: str = "base"
    other_names: List[str] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[Row]:
        return iter(self.rows)

    def __getitem__(self, index: int) -> Row:
        return self.rows[index]

    def column(self, k: int) -> List[Optional[Entry]]:
        """Entries of the k-th compared sequence, row by row"""
        return [row[k] for row in self.rows]

    def to_list(self) -> List[List[Optional[List[str]]]]:
        """Plain nested lists, absent entries kept as None"""
        return [
            [list(entry) if entry is not None else None for entry in row]
            for row in self.rows
        ]


def entry_for_op(op: EditOp) -> Entry:
    """Turn one edit step into its table entry"""
    if isinstance(op, Match):
        return Entry("", op.base.text)
    if isinstance(op, Change):
        return Entry("!", f"{op.base.text}|{op.other.text}")
    if isinstance(op, Delete):
        return Entry("-", op.base.text)
    if isinstance(op, Insert):
        return Entry("+", op.other.text)
    raise InternalConsistencyError(f"Unknown edit operation {op!r}")


def zip_scripts(scripts: List[EditScript]) -> List[Row]:
    """Zip scripts by position; shorter scripts leave None slots"""
    return [
        tuple(entry_for_op(op) if op is not None else None for op in ops)
        for ops in zip_longest(*(script.ops for script in scripts))
    ]


# -------------------------
# Orchestrator
# -------------------------
class MultiSequenceAccumulator:
    """Align every other sequence against one base and fold the results"""

    def __init__(
        self,
        aligner: Optional[PairwiseAligner] = None,
        backend: Literal["serial", "threads"] = "serial",
        n_jobs: Optional[int] = None,
    ):
        if backend not in ("serial", "threads"):
            raise ConfigurationError("backend must be 'serial' | 'threads'")
        self.aligner = aligner if aligner is not None else PairwiseAligner()
        self.backend = backend
        self.n_jobs = n_jobs

    @staticmethod
    def _check_others(others: List[Sequence]) -> None:
        if not others:
            raise ConfigurationError("At least one sequence to compare with the base is required")

    def align_all(self, base: Sequence, others: List[Sequence]) -> List[EditScript]:
        """Pairwise scripts in the order of ``others``"""
        align = partial(self.aligner.align, base)
        if self.backend == "threads" and len(others) > 1:
            with ThreadPoolExecutor(max_workers=self.n_jobs) as ex:
                # map keeps submission order
                return list(ex.map(align, others))
        return [align(other) for other in others]

    def _build_table(
        self,
        base: Sequence,
        others: List[Sequence],
        scripts: List[EditScript]
    ) -> AlignmentTable:
        table = AlignmentTable(
            rows=zip_scripts(scripts),
            base_name=base.name,
            other_names=[other.name for other in others],
        )
        logger.debug("Accumulated %d rows for %s against %d sequences",
                     len(table), base.name, len(others))
        return table

    def accumulate(self, base: Sequence, others: List[Sequence]) -> AlignmentTable:
        """
        Build the alignment table of ``others`` against ``base``

        Row i holds the i-th step of each pairwise script; the table is as
        long as the longest script.
        """
        others = list(others)
        self._check_others(others)
        scripts = self.align_all(base, others)
        return self._build_table(base, others, scripts)

    async def accumulate_async(
        self,
        base: Sequence,
        others: List[Sequence],
        timeout: Optional[float] = None,
    ) -> AlignmentTable:
        """
        Async version: each pairwise alignment runs in a worker thread.
        The "threads" backend uses up to n_jobs workers, "serial" a single one.
        On timeout asyncio.TimeoutError propagates and no table is built.
        """
        others = list(others)
        self._check_others(others)
        loop = asyncio.get_running_loop()

        workers = self.n_jobs if self.backend == "threads" else 1
        ex = ThreadPoolExecutor(max_workers=workers)
        try:
            jobs = [
                loop.run_in_executor(ex, self.aligner.align, base, other)
                for other in others
            ]
            gathered = asyncio.gather(*jobs)
            if timeout is not None:
                scripts = await asyncio.wait_for(gathered, timeout)
            else:
                scripts = await gathered
        finally:
            # abandoned alignments finish in the background
            ex.shutdown(wait=False)
        return self._build_table(base, others, list(scripts))
