"""
Line sources and the sequence cache
"""
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Literal, Optional

from ..line_alignment.errors import ConfigurationError, SourceReadError
from ..line_alignment.pairwise import Sequence

logger = logging.getLogger(__name__)

_STRIPPERS = {
    "trailing": str.rstrip,
    "both": str.strip,
    "none": lambda s: s.rstrip("\r\n"),
}


def _stripper(strip: str):
    try:
        return _STRIPPERS[strip]
    except KeyError:
        raise ConfigurationError("strip must be 'trailing' | 'both' | 'none'") from None


class SequenceSource:
    """Anything that can turn an identifier into a Sequence"""

    def load(self, identifier: str) -> Sequence:
        raise NotImplementedError


class FileSequenceSource(SequenceSource):
    """
    Read sequences from text files

    Args:
        encoding: Text encoding of the files (default utf-8)
        strip: Whitespace removed from each line, 'trailing' (default),
            'both' or 'none' (line terminator only)
    """

    def __init__(self, encoding: str = "utf-8",
                 strip: Literal["trailing", "both", "none"] = "trailing"):
        self.encoding = encoding
        self.strip = strip
        self._strip = _stripper(strip)

    def load(self, identifier: str) -> Sequence:
        logger.debug("Loading %s", identifier)
        try:
            with open(identifier, "r", encoding=self.encoding) as f:
                texts = [self._strip(line) for line in f]
        except (OSError, UnicodeDecodeError) as e:
            raise SourceReadError(identifier, e) from e
        return Sequence.from_texts(identifier, texts)


class InMemorySequenceSource(SequenceSource):
    """Serve sequences from a dict of name -> lines, counting every read"""

    def __init__(self, data: Optional[Dict[str, Iterable[str]]] = None,
                 strip: Literal["trailing", "both", "none"] = "trailing"):
        self._strip = _stripper(strip)
        self._data: Dict[str, List[str]] = {}
        self.reads = 0
        for name, lines in (data or {}).items():
            self.update(name, lines)

    def update(self, name: str, lines: Iterable[str]) -> None:
        self._data[name] = list(lines)

    def load(self, identifier: str) -> Sequence:
        logger.debug("Loading %s", identifier)
        self.reads += 1
        try:
            lines = self._data[identifier]
        except KeyError as e:
            raise SourceReadError(identifier, LookupError(f"no such sequence: {identifier}")) from e
        return Sequence.from_texts(identifier, [self._strip(line) for line in lines])


@dataclass
class SequenceCache:
    """Holds one loaded sequence and decides when to reload it"""
    source: SequenceSource
    identifier: str
    cached: Optional[Sequence] = None

    def get_or_load(self, force: bool = False) -> Sequence:
        if force or self.cached is None:
            self.cached = self.source.load(self.identifier)
        else:
            logger.debug("Using cached %s", self.identifier)
        return self.cached

    def clear(self) -> None:
        self.cached = None


def read_lines(filename: str, encoding: str = "utf-8",
               strip: Literal["trailing", "both", "none"] = "trailing") -> Sequence:
    """
    Read a text file as a Sequence

    Example:
        >>> seq = read_lines('notes.txt')
        >>> seq.texts()[:2]
    """
    return FileSequenceSource(encoding=encoding, strip=strip).load(filename)

