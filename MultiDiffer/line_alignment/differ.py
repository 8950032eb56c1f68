"""
Differ: compare a base file against any number of other files
"""
import logging
from typing import Optional

from .accumulate import AlignmentTable, MultiSequenceAccumulator
from .errors import ConfigurationError

logger = logging.getLogger(__name__)


class Differ:
    """
    Takes a list of sequence identifiers and calculates their differences.

    The first identifier is the base, every other one is compared with it.
    The base sequence and the last table are cached until a forced reload.
    """

    def __init__(
        self,
        *identifiers: str,
        source=None,
        accumulator: Optional[MultiSequenceAccumulator] = None,
    ):
        """
        Create new differ instance

        Args:
            *identifiers: Base identifier followed by at least one other
            source: SequenceSource used to load lines (default: text files)
            accumulator: MultiSequenceAccumulator to use (default: serial)

        Raises:
            ConfigurationError: fewer than two identifiers were given
        """
        if len(identifiers) < 2:
            raise ConfigurationError("At least two sequences should be specified")

        from ..line_io.sources import FileSequenceSource, SequenceCache

        self.source = source if source is not None else FileSequenceSource()
        self.accumulator = accumulator if accumulator is not None else MultiSequenceAccumulator()
        self.base_identifier = identifiers[0]
        self.other_identifiers = list(identifiers[1:])
        self._base = SequenceCache(self.source, self.base_identifier)
        self._table: Optional[AlignmentTable] = None

    def get_diff(self, force_reload: bool = False) -> AlignmentTable:
        """
        Get the alignment table

        Args:
            force_reload: re-read every sequence and recompute
        """
        if self._table is not None and not force_reload:
            logger.debug("Returning cached table for %s", self.base_identifier)
            return self._table

        if force_reload:
            logger.debug("Forced reload of %d sequences", 1 + len(self.other_identifiers))
            self._table = None

        base = self._base.get_or_load(force=force_reload)
        others = [self.source.load(identifier) for identifier in self.other_identifiers]
        self._table = self.accumulator.accumulate(base, others)
        return self._table

    def to_string(self, force_reload: bool = False, separator: str = ";") -> str:
        """Pretty-formatted table"""
        from ..presentation.render import render_table

        return render_table(self.get_diff(force_reload=force_reload), separator=separator)

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        # contents are never shown
        return f"{self.__class__.__name__}:{id(self)}>"


def multi_diff(*identifiers: str, force_reload: bool = False, **kwargs) -> AlignmentTable:
    """
    Alignment table of files against the first one

    Example:
        >>> table = multi_diff('base.txt', 'v1.txt', 'v2.txt')
        >>> len(table)
    """
    return Differ(*identifiers, **kwargs).get_diff(force_reload=force_reload)
