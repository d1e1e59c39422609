"""Loader configuration for PackageDataProvider.

Python 3.13+.
"""

from __future__ import annotations

from dataclasses import dataclass

from packlocale.constants import DEFAULT_MAX_ENTRY_SIZE
from packlocale.errors import ConfigurationError

__all__ = ["LoaderConfig"]


@dataclass(frozen=True, slots=True)
class LoaderConfig:
    """Immutable configuration for PackageDataProvider.

    All fields have sensible defaults; ``LoaderConfig()`` with no arguments
    never times out and accepts entries up to 10 MiB.

    Attributes:
        acquire_timeout: Seconds to wait for the package source before giving
            up with an empty result (default: None, wait indefinitely).
        max_entry_size: Largest entry in bytes handed to the parser
            (default: 10 MiB). Larger entries are skipped as read failures.

    Example:
        >>> config = LoaderConfig(acquire_timeout=5.0)
        >>> provider = PackageDataProvider(source, parser, config=config)
    """

    acquire_timeout: float | None = None
    max_entry_size: int = DEFAULT_MAX_ENTRY_SIZE

    def __post_init__(self) -> None:
        """Validate configuration values at construction time.

        Raises:
            ConfigurationError: If acquire_timeout or max_entry_size is not positive
        """
        if self.acquire_timeout is not None and self.acquire_timeout <= 0:
            msg = "acquire_timeout must be positive"
            raise ConfigurationError(msg)
        if self.max_entry_size <= 0:
            msg = "max_entry_size must be positive"
            raise ConfigurationError(msg)
