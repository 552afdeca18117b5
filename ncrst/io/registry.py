"""Static registry of the available formats."""

from __future__ import annotations

from pathlib import Path

from ..errors import FormatError
from .base import Format, FormatInfo
from .formats import AmberRestartFormat

# Every format known to ncrst, keyed by format name
FORMATS: dict[str, type[Format]] = {
    AmberRestartFormat.info.name: AmberRestartFormat,
}

_BY_EXTENSION: dict[str, type[Format]] = {
    cls.info.extension: cls for cls in FORMATS.values() if cls.info.extension
}


def formats_list() -> list[FormatInfo]:
    """Return metadata of all registered formats."""
    return [cls.info for cls in FORMATS.values()]


def find_format(path: str | Path, format: str | None = None) -> type[Format]:
    """
    Select the format class to use for a file.

    Args:
        path: File path, whose extension is used when `format` is not given.
        format: Explicit format name, e.g. "Amber Restart".

    Returns:
        Format class.

    Raises:
        FormatError: If no registered format matches.
    """
    if format:
        try:
            return FORMATS[format]
        except KeyError:
            raise FormatError(f"can not find a format named '{format}'") from None

    extension = Path(path).suffix
    if not extension:
        raise FormatError(
            f"file at '{path}' does not have an extension, provide a format name to read it"
        )
    try:
        return _BY_EXTENSION[extension]
    except KeyError:
        raise FormatError(f"can not find a format associated with the '{extension}' extension") from None
