"""Exception hierarchy for ncrst."""

from __future__ import annotations


class NcrstError(Exception):
    """Base class for all errors raised by ncrst."""


class FormatError(NcrstError):
    """A file does not follow, or an operation violates, its format rules."""


class FileError(NcrstError):
    """The underlying container could not be opened, read or written."""


class SchemaConsistencyError(NcrstError, RuntimeError):
    """
    A freshly created schema failed its own validation.

    This signals a bug in the writer rather than a problem with user input,
    and is kept apart from FormatError so callers do not mistake it for one.
    """
