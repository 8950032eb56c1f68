"""
Pairwise Line Alignment Module
LCS edit scripts between a base sequence of lines and one other sequence
"""

import logging
import numpy as np
from typing import ClassVar, Dict, Iterable, Iterator, List, Optional, Tuple, Union
from dataclasses import dataclass

from .errors import InternalConsistencyError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Line:
    """One line of text and its 0-based position in the owning sequence"""
    text: str
    index: int


@dataclass(frozen=True)
class Sequence:
    """Named, ordered and read-only list of lines"""
    name: str
    lines: Tuple[Line, ...] = ()

    @classmethod
    def from_texts(cls, name: str, texts: Iterable[str]) -> "Sequence":
        return cls(name, tuple(Line(text, i) for i, text in enumerate(texts)))

    def texts(self) -> List[str]:
        return [line.text for line in self.lines]

    def __len__(self) -> int:
        return len(self.lines)

    def __getitem__(self, index: int) -> Line:
        return self.lines[index]

    def __iter__(self) -> Iterator[Line]:
        return iter(self.lines)


# =========================
# Edit operations
# =========================
class EditOp:
    """
    Single step of an edit script.

    Concrete steps are Match, Change, Delete and Insert; ``base`` or
    ``other`` is None on the side a step does not consume.
    """
    symbol: ClassVar[str] = "?"
    base: Optional[Line] = None
    other: Optional[Line] = None

    def mirrored(self) -> "EditOp":
        raise NotImplementedError


@dataclass(frozen=True)
class Match(EditOp):
    base: Line
    other: Line
    symbol: ClassVar[str] = "="

    def __post_init__(self):
        if self.base.text != self.other.text:
            raise InternalConsistencyError(
                f"Match between unequal lines {self.base.text!r} and {self.other.text!r}"
            )

    def mirrored(self) -> "Match":
        return Match(self.other, self.base)


@dataclass(frozen=True)
class Change(EditOp):
    base: Line
    other: Line
    symbol: ClassVar[str] = "!"

    def __post_init__(self):
        if self.base.text == self.other.text:
            raise InternalConsistencyError(
                f"Change between equal lines {self.base.text!r}"
            )

    def mirrored(self) -> "Change":
        return Change(self.other, self.base)


@dataclass(frozen=True)
class Delete(EditOp):
    base: Line
    symbol: ClassVar[str] = "-"

    def mirrored(self) -> "Insert":
        return Insert(self.base)


@dataclass(frozen=True)
class Insert(EditOp):
    other: Line
    symbol: ClassVar[str] = "+"

    def mirrored(self) -> "Delete":
        return Delete(self.other)


# side-by-side markers used by EditScript.format
_MARKERS = {"=": "|", "!": ".", "-": "<", "+": ">"}


@dataclass
class EditScript:
    """Store an edit script and the names of the sequences it relates"""
    ops: List[EditOp]
    base_name: str = "base"
    other_name: str = "other"

    def __len__(self) -> int:
        return len(self.ops)

    def __iter__(self) -> Iterator[EditOp]:
        return iter(self.ops)

    def __getitem__(self, index: int) -> EditOp:
        return self.ops[index]

    def __str__(self) -> str:
        """String representation of the script"""
        return (
            f"Base: {self.base_name}\n"
            f"Other: {self.other_name}\n"
            f"Length: {len(self.ops)}\n"
            f"Matches: {self.nmatch()}\n"
            f"Changes: {self.nchange()}\n"
            f"Deletes: {self.ndelete()}\n"
            f"Inserts: {self.ninsert()}\n"
            f"Identity: {self.identity:.2%}\n"
        )

    def _count(self, kind: type) -> int:
        return sum(1 for op in self.ops if isinstance(op, kind))

    def nmatch(self) -> int:
        """Number of matching lines"""
        return self._count(Match)

    def nchange(self) -> int:
        return self._count(Change)

    def ndelete(self) -> int:
        return self._count(Delete)

    def ninsert(self) -> int:
        return self._count(Insert)

    @property
    def lcs_length(self) -> int:
        return self.nmatch()

    @property
    def identity(self) -> float:
        return self.nmatch() / len(self.ops) if self.ops else 0.0

    def base_texts(self) -> List[str]:
        """Base side of the script, which is the base sequence itself"""
        return [op.base.text for op in self.ops if not isinstance(op, Insert)]

    def other_texts(self) -> List[str]:
        """Other side of the script, which is the other sequence itself"""
        return [op.other.text for op in self.ops if not isinstance(op, Delete)]

    def mirrored(self) -> "EditScript":
        return EditScript(
            [op.mirrored() for op in self.ops],
            base_name=self.other_name,
            other_name=self.base_name,
        )

    def format(self, width: int = 40) -> str:
        """Side-by-side view, base on the left"""
        lines = [f"{self.base_name[:width]:<{width}}   {self.other_name[:width]}"]
        for op in self.ops:
            left = op.base.text if op.base is not None else ""
            right = op.other.text if op.other is not None else ""
            lines.append(f"{left[:width]:<{width}} {_MARKERS[op.symbol]} {right[:width]}")
        return "\n".join(lines)

    def view(self, width: int = 40) -> None:
        """Print the side-by-side view"""
        print(self.format(width))


class PairwiseAligner:
    """Longest-common-subsequence aligner for sequences of lines"""

    def __init__(self, verbose: bool = False):
        """
        Initialize aligner

        Parameters:
        -----------
        verbose : bool
            Log progress at INFO instead of DEBUG (default False)
        """
        self.verbose = verbose

    def _log(self, msg: str, *args) -> None:
        logger.log(logging.INFO if self.verbose else logging.DEBUG, msg, *args)

    def _encode(
        self,
        base: Sequence,
        other: Sequence
    ) -> Tuple[np.ndarray, np.ndarray]:
        """Intern line texts to integer codes shared by both sequences"""
        vocab: Dict[str, int] = {}
        codes_base = np.array(
            [vocab.setdefault(line.text, len(vocab)) for line in base], dtype=np.int64
        )
        codes_other = np.array(
            [vocab.setdefault(line.text, len(vocab)) for line in other], dtype=np.int64
        )
        return codes_base, codes_other

    def _fill_matrix(self, equal: np.ndarray) -> Tuple[np.ndarray, int]:
        """
        Fill the scoring matrix in suffix form.

        score[i, j] is the best alignment of base[i:] and other[j:], where
        every step (match, change, delete, insert) costs 1 and every match
        earns ``weight``. ``weight`` exceeds any step count, so the most
        matches win first (an LCS) and the shortest script second.
        """
        len1, len2 = equal.shape
        weight = len1 + len2 + 1
        score = np.zeros((len1 + 1, len2 + 1), dtype=np.int64)
        score[len1, :] = -np.arange(len2, -1, -1)
        score[:, len2] = -np.arange(len1, -1, -1)

        for i in range(len1 - 1, -1, -1):
            row_equal = equal[i]
            below = score[i + 1]
            current = score[i]
            for j in range(len2 - 1, -1, -1):
                diag = below[j + 1] + (weight - 1 if row_equal[j] else -1)
                current[j] = max(diag, below[j] - 1, current[j + 1] - 1)
        return score, weight

    def _traceback(
        self,
        equal: np.ndarray,
        score: np.ndarray,
        weight: int
    ) -> List[Tuple[int, int]]:
        """Matched (base, other) index pairs of the best path, in order"""
        len1, len2 = equal.shape
        pairs = []
        i = j = 0
        while i < len1 and j < len2:
            best = score[i, j]
            if equal[i, j] and best == score[i + 1, j + 1] + weight - 1:
                pairs.append((i, j))
                i += 1
                j += 1
            elif best == score[i + 1, j] - 1:
                # tie: consume from base first
                i += 1
            elif not equal[i, j] and best == score[i + 1, j + 1] - 1:
                i += 1
                j += 1
            else:
                j += 1
        return pairs

    @staticmethod
    def _emit_gap(
        ops: List[EditOp],
        base: Sequence,
        other: Sequence,
        ai: int,
        ma: int,
        bj: int,
        mb: int
    ) -> None:
        """Unmatched lines between two matches: changes, then deletes, then inserts"""
        while ai < ma and bj < mb:
            ops.append(Change(base[ai], other[bj]))
            ai += 1
            bj += 1
        while ai < ma:
            ops.append(Delete(base[ai]))
            ai += 1
        while bj < mb:
            ops.append(Insert(other[bj]))
            bj += 1

    def _classify(
        self,
        base: Sequence,
        other: Sequence,
        pairs: List[Tuple[int, int]]
    ) -> List[EditOp]:
        ops: List[EditOp] = []
        ai = bj = 0
        for ma, mb in pairs:
            self._emit_gap(ops, base, other, ai, ma, bj, mb)
            ops.append(Match(base[ma], other[mb]))
            ai, bj = ma + 1, mb + 1
        self._emit_gap(ops, base, other, ai, len(base), bj, len(other))
        return ops

    def align(self, base: Sequence, other: Sequence) -> EditScript:
        """
        Compute the edit script turning base into other

        Parameters:
        -----------
        base : Sequence
            Reference sequence
        other : Sequence
            Compared sequence

        Returns:
        --------
        EditScript
            Match / Change / Delete / Insert steps covering both sequences
        """
        self._log("Aligning %s (%d lines) with %s (%d lines)",
                  base.name, len(base), other.name, len(other))

        codes_base, codes_other = self._encode(base, other)
        equal = codes_base[:, None] == codes_other[None, :]

        score, weight = self._fill_matrix(equal)
        pairs = self._traceback(equal, score, weight)
        ops = self._classify(base, other, pairs)

        script = EditScript(ops, base_name=base.name, other_name=other.name)
        self._log("%s vs %s: %d matches, %d changes, %d deletes, %d inserts",
                  base.name, other.name, script.nmatch(), script.nchange(),
                  script.ndelete(), script.ninsert())
        return script


def _as_sequence(data: Union[Sequence, Iterable[str]], name: str) -> Sequence:
    if isinstance(data, Sequence):
        return data
    return Sequence.from_texts(name, data)


# MAIN CONVENIENCE FUNCTION
def pairwise(
    base: Union[Sequence, Iterable[str]],
    other: Union[Sequence, Iterable[str]],
    verbose: bool = False
) -> EditScript:
    """
    Pairwise line alignment

    Parameters:
    -----------
    base : Sequence or iterable of str
        Reference lines
    other : Sequence or iterable of str
        Compared lines
    verbose : bool
        Log progress at INFO (default False)

    Returns:
    --------
    EditScript
        Edit script with .view() method

    Examples:
    ---------
    >>> script = pairwise(["a", "b", "c"], ["a", "x", "c"])
    >>> [op.symbol for op in script]
    ['=', '!', '=']
    """
    aligner = PairwiseAligner(verbose=verbose)
    return aligner.align(_as_sequence(base, "base"), _as_sequence(other, "other"))
