"""
Exceptions raised by the line alignment engine
"""
from typing import Optional


class MultiDifferError(Exception):
    """Base class for every error raised by MultiDiffer"""


class ConfigurationError(MultiDifferError, ValueError):
    """Invalid engine setup (too few sequences, unknown option, ...)"""


class SourceReadError(MultiDifferError):
    """A sequence could not be loaded from its source"""

    def __init__(self, identifier: str, cause: Optional[BaseException] = None):
        self.identifier = identifier
        self.cause = cause
        reason = cause if cause is not None else "unknown error"
        super().__init__(f"Unable to process {identifier}:\n{reason}")


class InternalConsistencyError(MultiDifferError, AssertionError):
    """The aligner produced something outside its own contract"""
