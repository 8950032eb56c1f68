import matplotlib

matplotlib.use("Agg")

import pytest

from MultiDiffer.line_io import InMemorySequenceSource


@pytest.fixture
def memory_source():
    return InMemorySequenceSource({
        "base": ["a", "b", "c"],
        "changed": ["a", "x", "c"],
        "shorter": ["a", "b"],
        "same": ["a", "b", "c"],
    })


@pytest.fixture
def write_file(tmp_path):
    def _write(name: str, content: str) -> str:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return str(path)
    return _write
