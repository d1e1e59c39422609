"""packlocale exception hierarchy.

Only ConfigurationError and UnknownCultureError ever reach callers, and only
synchronously at construction time. Everything raised while a load is running
is contained by PackageDataProvider and reported through logging and the
LoadSummary.

Python 3.13+.
"""

__all__ = [
    "AcquisitionError",
    "ConfigurationError",
    "DocumentParseError",
    "EntryReadError",
    "LocalizationError",
    "PackageReleasedError",
    "UnknownCultureError",
]


class LocalizationError(Exception):
    """Base exception for all packlocale errors."""


class ConfigurationError(LocalizationError, ValueError):
    """Invalid construction arguments.

    Examples:
    - Empty archive path or URL
    - Missing package source or document parser
    - Non-positive timeout or entry size limit
    """


class UnknownCultureError(LocalizationError, ValueError):
    """Culture code is malformed or unknown to CLDR.

    Attributes:
        code: The culture code as supplied by the caller
    """

    def __init__(self, message: str, *, code: str = "") -> None:
        """Initialize UnknownCultureError.

        Args:
            message: Error message
            code: The rejected culture code
        """
        super().__init__(message)
        self.code = code


class AcquisitionError(LocalizationError):
    """Package could not be acquired from its source.

    Fallback: the load completes with an empty mapping.
    """


class EntryReadError(LocalizationError):
    """A package entry is missing or unreadable.

    Fallback: the entry is skipped.

    Attributes:
        entry_name: Name of the entry that failed
    """

    def __init__(self, message: str, *, entry_name: str = "") -> None:
        """Initialize EntryReadError.

        Args:
            message: Error message
            entry_name: Name of the entry that failed
        """
        super().__init__(message)
        self.entry_name = entry_name


class DocumentParseError(LocalizationError):
    """Entry bytes are not a valid localization document.

    Parsers raise this without knowing the entry name; the provider fills
    entry_name in before recording the failure.

    Attributes:
        entry_name: Name of the entry that failed, if known
    """

    def __init__(self, message: str, *, entry_name: str = "") -> None:
        """Initialize DocumentParseError.

        Args:
            message: Error message
            entry_name: Name of the entry that failed, if known
        """
        super().__init__(message)
        self.entry_name = entry_name


class PackageReleasedError(LocalizationError):
    """A package was accessed after release()."""
