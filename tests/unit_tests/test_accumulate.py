import asyncio
import threading
import time

import pytest

from MultiDiffer.line_alignment import (
    AlignmentTable,
    ConfigurationError,
    EditOp,
    EditScript,
    Entry,
    InternalConsistencyError,
    Line,
    MultiSequenceAccumulator,
    PairwiseAligner,
    Sequence,
    entry_for_op,
    pairwise,
)
from MultiDiffer.line_alignment.accumulate import zip_scripts


def seq(name, *texts):
    return Sequence.from_texts(name, texts)


@pytest.fixture
def base():
    return seq("base", "a", "b", "c")


def test_base_against_itself(base):
    table = MultiSequenceAccumulator().accumulate(base, [base])
    assert len(table) == 3
    assert table.rows == [(Entry("", "a"),), (Entry("", "b"),), (Entry("", "c"),)]


def test_entries_for_every_kind(base):
    table = MultiSequenceAccumulator().accumulate(
        base, [seq("changed", "a", "x", "c"), seq("shorter", "a", "c", "d")]
    )
    assert table.column(0) == [Entry("", "a"), Entry("!", "b|x"), Entry("", "c")]
    assert table.column(1) == [Entry("", "a"), Entry("-", "b"), Entry("", "c"), Entry("+", "d")]
    assert table.other_names == ["changed", "shorter"]
    assert table.base_name == "base"


def test_shorter_scripts_leave_empty_slots():
    table = MultiSequenceAccumulator().accumulate(
        seq("base", "a"), [seq("longer", "a", "b"), seq("same", "a")]
    )
    assert len(table) == 2
    assert table[0] == (Entry("", "a"), Entry("", "a"))
    assert table[1] == (Entry("+", "b"), None)
    assert table.to_list() == [[["", "a"], ["", "a"]], [["+", "b"], None]]


def test_empty_match_text_is_not_missing():
    table = MultiSequenceAccumulator().accumulate(seq("base", ""), [seq("other", "", "z")])
    assert table[0] == (Entry("", ""),)
    assert table[0][0] is not None


def test_table_length_is_longest_script(base):
    others = [seq("o1", "a"), seq("o2", "a", "b", "c", "d", "e"), seq("o3")]
    table = MultiSequenceAccumulator().accumulate(base, others)
    assert len(table) == 5
    assert all(len(row) == 3 for row in table)


def test_empty_others_rejected(base):
    with pytest.raises(ConfigurationError):
        MultiSequenceAccumulator().accumulate(base, [])


def test_unknown_backend_rejected():
    with pytest.raises(ConfigurationError):
        MultiSequenceAccumulator(backend="gpu")


class _Bogus(EditOp):
    symbol = "?"


def test_unknown_op_is_internal_error():
    with pytest.raises(InternalConsistencyError):
        entry_for_op(_Bogus())
    script = EditScript([_Bogus()])
    with pytest.raises(InternalConsistencyError):
        zip_scripts([script])


def test_zip_scripts_uses_positions():
    first = pairwise(["a"], ["a", "b"])
    second = pairwise(["a"], ["z"])
    assert zip_scripts([first, second]) == [
        (Entry("", "a"), Entry("!", "a|z")),
        (Entry("+", "b"), None),
    ]


class _SlowFirstAligner(PairwiseAligner):
    """Finishes the first comparison last"""

    def align(self, base, other):
        if other.name == "first":
            time.sleep(0.05)
        return super().align(base, other)


def test_threads_keep_order(base):
    others = [seq("first", "a"), seq("second", "a", "b", "c")]
    table = MultiSequenceAccumulator(_SlowFirstAligner(), backend="threads", n_jobs=2).accumulate(
        base, others
    )
    assert table.other_names == ["first", "second"]
    assert table.column(0) == [Entry("", "a"), Entry("-", "b"), Entry("-", "c")]
    assert table.column(1) == [Entry("", "a"), Entry("", "b"), Entry("", "c")]


def test_async_matches_serial(base):
    others = [seq("first", "a"), seq("second", "b", "c", "d")]
    accumulator = MultiSequenceAccumulator(_SlowFirstAligner())
    expected = accumulator.accumulate(base, others)
    result = asyncio.run(accumulator.accumulate_async(base, others))
    assert isinstance(result, AlignmentTable)
    assert result == expected


def test_async_timeout_returns_nothing(base):
    class _Stalling(PairwiseAligner):
        def align(self, base, other):
            time.sleep(0.5)
            return super().align(base, other)

    accumulator = MultiSequenceAccumulator(_Stalling())
    with pytest.raises(asyncio.TimeoutError):
        asyncio.run(accumulator.accumulate_async(base, [seq("o", "a")], timeout=0.01))


def test_async_empty_others_rejected(base):
    with pytest.raises(ConfigurationError):
        asyncio.run(MultiSequenceAccumulator().accumulate_async(base, []))


def test_base_is_not_mutated(base):
    before = base.texts()
    MultiSequenceAccumulator().accumulate(base, [seq("o", "q", "b")])
    assert base.texts() == before
    assert base[1] == Line("b", 1)


class _PeakAligner(PairwiseAligner):
    """Records how many alignments ran at the same time"""

    def __init__(self):
        super().__init__()
        self._lock = threading.Lock()
        self.active = 0
        self.peak = 0

    def align(self, base, other):
        with self._lock:
            self.active += 1
            self.peak = max(self.peak, self.active)
        try:
            time.sleep(0.02)
            return super().align(base, other)
        finally:
            with self._lock:
                self.active -= 1


def test_async_serial_backend_uses_one_worker(base):
    aligner = _PeakAligner()
    others = [seq(f"o{k}", "a", "b") for k in range(4)]
    table = asyncio.run(MultiSequenceAccumulator(aligner).accumulate_async(base, others))
    assert aligner.peak == 1
    assert table.other_names == ["o0", "o1", "o2", "o3"]


def test_async_threads_backend_respects_n_jobs(base):
    aligner = _PeakAligner()
    others = [seq(f"o{k}", "a") for k in range(6)]
    accumulator = MultiSequenceAccumulator(aligner, backend="threads", n_jobs=2)
    table = asyncio.run(accumulator.accumulate_async(base, others))
    assert 1 <= aligner.peak <= 2
    assert table.other_names == [f"o{k}" for k in range(6)]
    assert table.column(5) == [Entry("", "a"), Entry("-", "b"), Entry("-", "c")]
