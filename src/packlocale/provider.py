"""Layered localization data loading from packaged resources.

PackageDataProvider loads the key/value data for one culture from a package
that holds every culture side by side:

    root/default/...   base values for every culture
    root/zh/...        language family overrides
    root/zh-CN/...     full culture overrides

Layers are merged default -> family -> full, later layers overwriting keys
from earlier ones.

Failure Containment:
    A load never raises to its caller. An unavailable package yields an
    empty mapping; an unreadable or malformed entry is logged and skipped
    while every other entry still merges. Only construction can fail, with
    ConfigurationError.

Python 3.13+.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from packlocale.config import LoaderConfig
from packlocale.culture import CultureInfo
from packlocale.enums import Layer, LoadPhase
from packlocale.errors import (
    AcquisitionError,
    ConfigurationError,
    DocumentParseError,
    EntryReadError,
)
from packlocale.executor import CoroutineExecutor
from packlocale.packages import Package, PackageSource
from packlocale.parsers import DocumentParser
from packlocale.results import EntryLoadResult, LoadSummary
from packlocale.selection import select_entries
from packlocale.types import EntryName, LocalizedData

__all__ = ["PackageDataProvider"]

logger = logging.getLogger(__name__)


class PackageDataProvider:
    """Loads merged localization data for a culture from a package.

    Each load acquires its own package from the source and releases it
    before completing, so concurrent loads for different cultures are
    independent.

    Example - Callback style:
        >>> provider = PackageDataProvider(
        ...     ZipFileSource("build/strings.zip"), JsonDocumentParser()
        ... )
        >>> provider.load(CultureInfo.from_code("zh-CN"), on_completed=apply_strings)

    Example - Awaitable style:
        >>> data = await provider.load_async(CultureInfo.from_code("zh-CN"))

    Args:
        source: Package source acquired once per load
        parser: Parser applied to every selected entry
        config: Loader configuration (default: LoaderConfig())
        executor: Scheduler for load() (default: CoroutineExecutor())

    Raises:
        ConfigurationError: If source or parser is missing
    """

    __slots__ = ("_config", "_executor", "_parser", "_source")

    def __init__(
        self,
        source: PackageSource,
        parser: DocumentParser,
        *,
        config: LoaderConfig | None = None,
        executor: CoroutineExecutor | None = None,
    ) -> None:
        if source is None:
            msg = "source is required"
            raise ConfigurationError(msg)
        if parser is None:
            msg = "parser is required"
            raise ConfigurationError(msg)
        self._source = source
        self._parser = parser
        self._config = config if config is not None else LoaderConfig()
        self._executor = executor if executor is not None else CoroutineExecutor()

    @property
    def config(self) -> LoaderConfig:
        return self._config

    def load(
        self,
        culture: CultureInfo,
        on_completed: Callable[[LocalizedData], None] | None,
    ) -> None:
        """Load data for a culture in the background.

        Returns immediately. on_completed is called exactly once, after the
        package has been released, with the merged data (possibly empty).
        It is never called before load() returns.

        Args:
            culture: Culture to load
            on_completed: Receives the merged data; None discards it
        """
        self._executor.run(self._run(culture, on_completed))

    async def load_async(self, culture: CultureInfo) -> LocalizedData:
        """Load and return the merged data for a culture."""
        data, _summary = await self.load_with_summary(culture)
        return data

    async def load_with_summary(self, culture: CultureInfo) -> tuple[LocalizedData, LoadSummary]:
        """Load the merged data for a culture with per-entry results.

        Returns:
            Tuple of (merged data, LoadSummary)
        """
        data: LocalizedData = {}
        summary = await self._load_into(culture, data)
        return data, summary

    async def _run(
        self,
        culture: CultureInfo,
        on_completed: Callable[[LocalizedData], None] | None,
    ) -> None:
        data: LocalizedData = {}
        try:
            await self._load_into(culture, data)
        finally:
            # Also reached on cancellation: deliver what was merged so far
            self._complete(culture, on_completed, data)

    @staticmethod
    def _complete(
        culture: CultureInfo,
        on_completed: Callable[[LocalizedData], None] | None,
        data: LocalizedData,
    ) -> None:
        if on_completed is None:
            return
        try:
            on_completed(data)
        except Exception as e:  # pylint: disable=broad-exception-caught
            # Callback exceptions never escape the task
            logger.error("Completion callback for %s raised: %s", culture, e, exc_info=True)

    @staticmethod
    def _enter(culture: CultureInfo, phase: LoadPhase) -> None:
        logger.debug("Load %s: %s", culture, phase)

    async def _acquire(self) -> Package:
        try:
            if self._config.acquire_timeout is None:
                return await self._source.acquire()
            async with asyncio.timeout(self._config.acquire_timeout):
                return await self._source.acquire()
        except AcquisitionError:
            raise
        except TimeoutError as e:
            if self._config.acquire_timeout is None:
                msg = f"Package source timed out: {e}"
            else:
                msg = f"Package not acquired within {self._config.acquire_timeout}s"
            raise AcquisitionError(msg) from e
        except Exception as e:  # pylint: disable=broad-exception-caught
            msg = f"Package source failed: {e}"
            raise AcquisitionError(msg) from e

    async def _load_into(self, culture: CultureInfo, data: LocalizedData) -> LoadSummary:
        self._enter(culture, LoadPhase.ACQUIRING)
        try:
            package = await self._acquire()
        except AcquisitionError as e:
            logger.warning("Cannot acquire package for %s: %s", culture, e)
            self._enter(culture, LoadPhase.RELEASING)
            self._enter(culture, LoadPhase.COMPLETED)
            return LoadSummary(culture, acquired=False, acquisition_error=e)

        results: list[EntryLoadResult] = []
        try:
            self._enter(culture, LoadPhase.SELECTING)
            try:
                entry_names = package.list_entry_names()
            except Exception as e:  # pylint: disable=broad-exception-caught
                error = AcquisitionError(f"Cannot list package entries: {e}")
                error.__cause__ = e
                logger.warning("Cannot acquire package for %s: %s", culture, error)
                return LoadSummary(culture, acquired=False, acquisition_error=error)

            groups = select_entries(entry_names, culture)
            logger.debug(
                "Selected %d default, %d family, %d full entries for %s",
                len(groups.default),
                len(groups.family),
                len(groups.full),
                culture,
            )

            self._enter(culture, LoadPhase.MERGING)
            for layer, names in groups.ordered():
                for name in names:
                    result = self._load_entry(package, name, layer)
                    results.append(result)
                    if result.fragment is not None:
                        data.update(result.fragment)
                        logger.debug("Merged %d keys from %s", len(result.fragment), name)
                    else:
                        logger.warning(
                            "An error occurred when loading localized data from '%s': %s",
                            name,
                            result.error,
                        )
        finally:
            self._enter(culture, LoadPhase.RELEASING)
            self._release(culture, package)
            self._enter(culture, LoadPhase.COMPLETED)

        summary = LoadSummary(culture, acquired=True, results=tuple(results))
        logger.info(
            "Loaded %d keys for %s from %d entries (%d skipped)",
            len(data),
            culture,
            summary.successful,
            summary.errors,
        )
        return summary

    def _load_entry(self, package: Package, name: EntryName, layer: Layer) -> EntryLoadResult:
        """Read, size-check and parse one entry into an explicit result."""
        try:
            limit = self._config.max_entry_size
            raw = package.read_entry(name, max_size=limit)
            if len(raw) > limit:
                msg = f"Entry '{name}' is {len(raw)} bytes, limit is {limit}"
                raise EntryReadError(msg, entry_name=name)
            fragment = dict(self._parser.parse(raw))
        except DocumentParseError as e:
            e.entry_name = e.entry_name or name
            return EntryLoadResult.failure(name, layer, e)
        except Exception as e:  # pylint: disable=broad-exception-caught
            # Parsers and packages outside this library may raise anything
            return EntryLoadResult.failure(name, layer, e)
        return EntryLoadResult.success(name, layer, fragment)

    @staticmethod
    def _release(culture: CultureInfo, package: Package) -> None:
        try:
            package.release()
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.warning("Failed to release package for %s: %s", culture, e)
