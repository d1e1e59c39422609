"""Load result types for PackageDataProvider.

Components:
    EntryLoadResult - Immutable outcome of loading one package entry
    LoadSummary - Immutable aggregate of one load call

Python 3.13+.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from packlocale.culture import CultureInfo
from packlocale.enums import Layer, LoadStatus

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    "EntryLoadResult",
    "LoadSummary",
]


@dataclass(frozen=True, slots=True)
class EntryLoadResult:
    """Result of loading a single package entry.

    Exactly one of fragment and error is set: fragment for SUCCESS,
    error for ERROR.

    Attributes:
        entry_name: Entry name inside the package
        layer: Layer the entry was selected for
        status: Load status (success, error)
        fragment: Parsed key/value pairs if status is SUCCESS
        error: Exception if status is ERROR
    """

    entry_name: str
    layer: Layer
    status: LoadStatus
    fragment: Mapping[str, object] | None = None
    error: Exception | None = None

    @classmethod
    def success(
        cls, entry_name: str, layer: Layer, fragment: Mapping[str, object]
    ) -> EntryLoadResult:
        """Record a successfully parsed entry."""
        return cls(entry_name, layer, LoadStatus.SUCCESS, fragment=fragment)

    @classmethod
    def failure(cls, entry_name: str, layer: Layer, error: Exception) -> EntryLoadResult:
        """Record an entry that was skipped."""
        return cls(entry_name, layer, LoadStatus.ERROR, error=error)

    @property
    def is_success(self) -> bool:
        """Check if entry loaded successfully."""
        return self.status == LoadStatus.SUCCESS

    @property
    def is_error(self) -> bool:
        """Check if entry load failed with an error."""
        return self.status == LoadStatus.ERROR


@dataclass(frozen=True, slots=True)
class LoadSummary:
    """Immutable aggregate of one PackageDataProvider load call.

    Attributes:
        culture: Culture that was loaded
        acquired: Whether a usable package was acquired and enumerated
        acquisition_error: Exception raised by the source, if any
        results: Per-entry results in processing order

    Example:
        >>> data, summary = await provider.load_with_summary(culture)
        >>> if summary.has_errors:
        ...     for result in summary.get_errors():
        ...         print(f"Skipped {result.entry_name}: {result.error}")
    """

    culture: CultureInfo
    acquired: bool
    acquisition_error: Exception | None = None
    results: tuple[EntryLoadResult, ...] = ()

    def __repr__(self) -> str:
        return (
            f"LoadSummary(culture={self.culture.name!r}, "
            f"acquired={self.acquired}, "
            f"total={self.total_attempted}, "
            f"ok={self.successful}, "
            f"errors={self.errors})"
        )

    @property
    def total_attempted(self) -> int:
        """Total number of entry load attempts."""
        return len(self.results)

    @property
    def successful(self) -> int:
        """Number of entries merged."""
        return len(self.get_successful())

    @property
    def errors(self) -> int:
        """Number of entries skipped."""
        return len(self.get_errors())

    @property
    def keys_loaded(self) -> int:
        """Total keys across merged fragments, before overriding."""
        return sum(len(r.fragment) for r in self.results if r.fragment is not None)

    def get_errors(self) -> tuple[EntryLoadResult, ...]:
        """Results for skipped entries, in processing order."""
        return tuple(r for r in self.results if r.is_error)

    def get_successful(self) -> tuple[EntryLoadResult, ...]:
        """Results for merged entries, in processing order."""
        return tuple(r for r in self.results if r.is_success)

    def get_by_layer(self, layer: Layer) -> tuple[EntryLoadResult, ...]:
        """Results for entries selected for one layer."""
        return tuple(r for r in self.results if r.layer == layer)

    @property
    def has_errors(self) -> bool:
        """Check if any entry was skipped."""
        return any(r.is_error for r in self.results)

    @property
    def all_successful(self) -> bool:
        """Check if the package was acquired and every entry merged.

        An acquired package with no matching entries is successful.
        """
        return self.acquired and self.errors == 0
