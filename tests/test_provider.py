"""Tests for PackageDataProvider layered loading.

Covers merge order, fault containment, release guarantees, the completion
callback contract and acquisition failures.

Python 3.13+.
"""

from __future__ import annotations

import asyncio
import logging

import pytest

from packlocale import (
    AcquisitionError,
    ConfigurationError,
    CultureInfo,
    DocumentParseError,
    EntryReadError,
    JsonDocumentParser,
    Layer,
    LoaderConfig,
    PackageDataProvider,
    StaticPackageSource,
)
from tests.helpers.packages import RecordingSource, json_entries, load_with_callback

EN_US = CultureInfo(language="en", name="en-US")
ZH_CN = CultureInfo(language="zh", name="zh-CN")

LAYERED = json_entries(
    {
        "root/default/a.json": {"a": 1},
        "root/en/b.json": {"a": 2, "b": 2},
        "root/en-US/c.json": {"b": 3, "c": 3},
    }
)


def make_provider(source: object, **kwargs: object) -> PackageDataProvider:
    return PackageDataProvider(source, JsonDocumentParser(), **kwargs)  # type: ignore[arg-type]


class TestConstruction:
    """Test construction-time validation."""

    def test_missing_source_raises(self) -> None:
        """None source fails loudly at construction."""
        with pytest.raises(ConfigurationError, match="source is required"):
            PackageDataProvider(None, JsonDocumentParser())  # type: ignore[arg-type]

    def test_missing_parser_raises(self) -> None:
        """None parser fails loudly at construction."""
        with pytest.raises(ConfigurationError, match="parser is required"):
            PackageDataProvider(StaticPackageSource({}), None)  # type: ignore[arg-type]

    def test_default_config(self) -> None:
        """Provider uses LoaderConfig() when none is given."""
        provider = make_provider(StaticPackageSource({}))

        assert provider.config == LoaderConfig()


class TestMergeOrder:
    """Test layer merge order and key overriding."""

    def test_later_layers_override(self) -> None:
        """default < family < full, keys not overridden survive."""
        data = asyncio.run(make_provider(RecordingSource(LAYERED)).load_async(EN_US))

        assert data == {"a": 2, "b": 3, "c": 3}

    def test_same_key_resolves_to_full_culture(self) -> None:
        """One key defined in all three layers takes the full-culture value."""
        source = RecordingSource(
            json_entries(
                {
                    "root/default/a.json": {"k": "a"},
                    "root/en/b.json": {"k": "b"},
                    "root/en-US/c.json": {"k": "c"},
                }
            )
        )

        assert asyncio.run(make_provider(source).load_async(EN_US)) == {"k": "c"}

    def test_order_independent_of_package_listing(self) -> None:
        """Layer order wins even when the package lists full-culture entries first."""
        reversed_entries = dict(reversed(list(LAYERED.items())))
        data = asyncio.run(make_provider(RecordingSource(reversed_entries)).load_async(EN_US))

        assert data == {"a": 2, "b": 3, "c": 3}

    def test_other_cultures_ignored(self) -> None:
        """Only the requested culture's layers are merged."""
        data = asyncio.run(make_provider(RecordingSource(LAYERED)).load_async(ZH_CN))

        assert data == {"a": 1}

    def test_entries_within_layer_visited_sorted(self) -> None:
        """Within a layer, entries are read in sorted name order."""
        source = RecordingSource(
            json_entries({"root/default/b.json": {"k": "b"}, "root/default/a.json": {"k": "a"}})
        )
        data = asyncio.run(make_provider(source).load_async(EN_US))

        reads = [e for e in source.events if e.startswith("read:")]
        assert reads == ["read:root/default/a.json", "read:root/default/b.json"]
        assert data == {"k": "b"}

    def test_multi_segment_entry_loaded_per_layer(self) -> None:
        """A name in two layers is read once for each layer."""
        source = RecordingSource(json_entries({"root/default/en/x.json": {"k": 1}}))
        _data, summary = asyncio.run(make_provider(source).load_with_summary(EN_US))

        assert [r.layer for r in summary.results] == [Layer.DEFAULT, Layer.FAMILY]
        assert source.events.count("read:root/default/en/x.json") == 2

    def test_result_does_not_alias_fragments(self) -> None:
        """The merged mapping is a fresh dict, not a parsed fragment."""
        source = RecordingSource(json_entries({"root/en-US/c.json": {"k": 1}}))
        data, summary = asyncio.run(make_provider(source).load_with_summary(EN_US))

        data["k"] = 2
        assert summary.results[0].fragment == {"k": 1}

    def test_empty_package(self) -> None:
        """Package with no entries yields an empty mapping."""
        data, summary = asyncio.run(make_provider(RecordingSource({})).load_with_summary(EN_US))

        assert data == {}
        assert summary.acquired
        assert summary.total_attempted == 0


class TestFaultContainment:
    """Test per-entry failure handling."""

    def test_malformed_full_entry_keeps_other_layers(self) -> None:
        """Broken full-culture entry is skipped; default and family keys remain."""
        entries = dict(LAYERED)
        entries["root/en-US/c.json"] = b"{not json"
        data, summary = asyncio.run(make_provider(RecordingSource(entries)).load_with_summary(EN_US))

        assert data == {"a": 2, "b": 2}
        assert summary.errors == 1
        (failure,) = summary.get_errors()
        assert failure.entry_name == "root/en-US/c.json"
        assert failure.layer == Layer.FULL
        assert isinstance(failure.error, DocumentParseError)
        assert failure.error.entry_name == "root/en-US/c.json"

    def test_malformed_entry_does_not_drop_merged_keys(self) -> None:
        """A failure in the middle keeps keys merged before and after it."""
        entries = json_entries(
            {"root/default/a.json": {"a": 1}, "root/default/c.json": {"c": 3}}
        )
        entries["root/default/b.json"] = b"[1, 2]"
        data = asyncio.run(make_provider(RecordingSource(entries)).load_async(EN_US))

        assert data == {"a": 1, "c": 3}

    def test_parse_failure_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        """Skipped entries are reported as warnings naming the entry."""
        entries = {"root/en/bad.json": b"\xff\xfe"}
        with caplog.at_level(logging.WARNING, logger="packlocale.provider"):
            asyncio.run(make_provider(RecordingSource(entries)).load_async(EN_US))

        assert "root/en/bad.json" in caplog.text

    def test_oversized_entry_skipped(self) -> None:
        """Entries above max_entry_size are read failures."""
        entries = json_entries({"root/en/big.json": {"k": "x" * 100}, "root/en/ok.json": {"ok": 1}})
        provider = make_provider(RecordingSource(entries), config=LoaderConfig(max_entry_size=50))
        data, summary = asyncio.run(provider.load_with_summary(EN_US))

        assert data == {"ok": 1}
        (failure,) = summary.get_errors()
        assert isinstance(failure.error, EntryReadError)
        assert "limit is 50" in str(failure.error)

    def test_foreign_parser_exception_contained(self) -> None:
        """Parsers raising arbitrary exceptions are contained per entry."""

        class ExplodingParser:
            def parse(self, data: bytes) -> dict[str, object]:
                if b"boom" in data:
                    msg = "boom"
                    raise RuntimeError(msg)
                return {"fine": True}

        source = RecordingSource({"root/default/a": b"ok", "root/en/b": b"boom"})
        provider = PackageDataProvider(source, ExplodingParser())
        data, summary = asyncio.run(provider.load_with_summary(EN_US))

        assert data == {"fine": True}
        assert isinstance(summary.get_errors()[0].error, RuntimeError)

    def test_non_mapping_fragment_contained(self) -> None:
        """A parser returning a non-mapping fails only that entry."""

        class ListParser:
            def parse(self, data: bytes) -> object:
                return [1, 2, 3]

        source = RecordingSource({"root/default/a": b""})
        provider = PackageDataProvider(source, ListParser())  # type: ignore[arg-type]
        data, summary = asyncio.run(provider.load_with_summary(EN_US))

        assert data == {}
        assert summary.errors == 1


class TestReleaseGuarantee:
    """Test package release semantics."""

    def test_released_once_after_success(self) -> None:
        """A successful load releases its package exactly once."""
        source = RecordingSource(LAYERED)
        asyncio.run(make_provider(source).load_async(EN_US))

        (package,) = source.packages
        assert package.release_count == 1
        assert not package.accessed_after_release

    def test_released_once_after_entry_failures(self) -> None:
        """Per-entry failures still release exactly once."""
        source = RecordingSource({"root/default/a.json": b"nope", "root/en/b.json": b"{"})
        asyncio.run(make_provider(source).load_async(EN_US))

        assert source.packages[0].release_count == 1

    def test_release_is_last_package_access(self) -> None:
        """No package access happens after release."""
        source = RecordingSource(LAYERED)
        asyncio.run(make_provider(source).load_async(EN_US))

        assert source.events[0] == "acquire"
        assert source.events[-1] == "release"

    def test_release_failure_contained(self, caplog: pytest.LogCaptureFixture) -> None:
        """An exception from release() is logged, not raised."""
        source = RecordingSource(LAYERED, fail_release=True)
        with caplog.at_level(logging.WARNING, logger="packlocale.provider"):
            data = asyncio.run(make_provider(source).load_async(EN_US))

        assert data == {"a": 2, "b": 3, "c": 3}
        assert "Failed to release package" in caplog.text

    def test_listing_failure_releases_package(self) -> None:
        """A package whose entries cannot be listed is still released."""
        source = RecordingSource(LAYERED, fail_listing=True)
        data, summary = asyncio.run(make_provider(source).load_with_summary(EN_US))

        assert data == {}
        assert not summary.acquired
        assert isinstance(summary.acquisition_error, AcquisitionError)
        assert source.packages[0].release_count == 1

    def test_each_load_acquires_own_package(self) -> None:
        """Concurrent loads acquire and release separate packages."""
        source = RecordingSource(LAYERED)
        provider = make_provider(source)

        async def scenario() -> list[dict[str, object]]:
            return list(
                await asyncio.gather(provider.load_async(EN_US), provider.load_async(ZH_CN))
            )

        en, zh = asyncio.run(scenario())

        assert en == {"a": 2, "b": 3, "c": 3}
        assert zh == {"a": 1}
        assert source.acquire_count == 2
        assert [p.release_count for p in source.packages] == [1, 1]


class TestAcquisitionFailure:
    """Test behavior when the package cannot be acquired."""

    def test_source_exception_yields_empty_result(self) -> None:
        """Source errors produce an empty mapping and a recorded cause."""
        source = RecordingSource(LAYERED, error=ConnectionError("offline"))
        data, summary = asyncio.run(make_provider(source).load_with_summary(EN_US))

        assert data == {}
        assert not summary.acquired
        assert isinstance(summary.acquisition_error, AcquisitionError)
        assert isinstance(summary.acquisition_error.__cause__, ConnectionError)
        assert source.packages == []

    def test_acquisition_error_passed_through(self) -> None:
        """AcquisitionError raised by the source is recorded as-is."""
        error = AcquisitionError("gone")
        source = RecordingSource(error=error)
        _data, summary = asyncio.run(make_provider(source).load_with_summary(EN_US))

        assert summary.acquisition_error is error

    def test_acquisition_failure_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        """Acquisition failures are warnings naming the culture."""
        source = RecordingSource(error=OSError("disk"))
        with caplog.at_level(logging.WARNING, logger="packlocale.provider"):
            asyncio.run(make_provider(source).load_async(EN_US))

        assert "Cannot acquire package for en-US" in caplog.text

    def test_acquire_timeout(self) -> None:
        """A stalled source is abandoned after acquire_timeout."""
        source = RecordingSource(LAYERED, delay=5.0)
        provider = make_provider(source, config=LoaderConfig(acquire_timeout=0.05))
        data, summary = asyncio.run(provider.load_with_summary(EN_US))

        assert data == {}
        assert isinstance(summary.acquisition_error, AcquisitionError)
        assert isinstance(summary.acquisition_error.__cause__, TimeoutError)
        assert "0.05s" in str(summary.acquisition_error)


class TestCompletionCallback:
    """Test the load() callback contract."""

    def test_callback_receives_merged_data_once(self) -> None:
        """on_completed fires exactly once with the merged mapping."""
        provider = make_provider(RecordingSource(LAYERED))
        calls = asyncio.run(load_with_callback(provider, EN_US))

        assert calls == [{"a": 2, "b": 3, "c": 3}]

    def test_callback_after_release(self) -> None:
        """The package is released before on_completed runs."""
        source = RecordingSource(LAYERED)
        asyncio.run(load_with_callback(make_provider(source), EN_US, source.events))

        assert source.events[-2:] == ["release", "completed"]

    def test_callback_on_acquisition_failure(self) -> None:
        """Acquisition failure still completes, with an empty mapping."""
        source = RecordingSource(error=OSError("unreachable"))
        calls = asyncio.run(load_with_callback(make_provider(source), EN_US))

        assert calls == [{}]

    def test_callback_on_empty_package(self) -> None:
        """Empty package completes once with an empty mapping."""
        calls = asyncio.run(load_with_callback(make_provider(RecordingSource({})), EN_US))

        assert calls == [{}]

    def test_callback_on_entry_failure(self) -> None:
        """Malformed full-culture entry: callback still fires once."""
        entries = dict(LAYERED)
        entries["root/en-US/c.json"] = b"<xml/>"
        calls = asyncio.run(load_with_callback(make_provider(RecordingSource(entries)), EN_US))

        assert calls == [{"a": 2, "b": 2}]

    def test_repeated_loads_are_independent(self) -> None:
        """Two loads of the same culture give equal, distinct mappings."""
        provider = make_provider(RecordingSource(LAYERED))

        async def scenario() -> list[dict[str, object]]:
            first = await load_with_callback(provider, EN_US)
            second = await load_with_callback(provider, EN_US)
            return first + second

        first, second = asyncio.run(scenario())

        assert first == second
        assert first is not second

    def test_callback_exception_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        """An exception from on_completed is logged and does not escape."""
        provider = make_provider(RecordingSource(LAYERED))

        async def scenario() -> None:
            done = asyncio.Event()

            def on_completed(data: dict[str, object]) -> None:
                done.set()
                msg = "consumer bug"
                raise ValueError(msg)

            provider.load(EN_US, on_completed)
            await asyncio.wait_for(done.wait(), timeout=5)
            await asyncio.sleep(0)

        with caplog.at_level(logging.ERROR, logger="packlocale.provider"):
            asyncio.run(scenario())

        assert "Completion callback for en-US raised: consumer bug" in caplog.text

    def test_none_callback_accepted(self) -> None:
        """load() with no callback still runs the load and releases."""
        source = RecordingSource(LAYERED)
        provider = make_provider(source)

        async def scenario() -> None:
            provider.load(EN_US, None)
            for _ in range(20):
                await asyncio.sleep(0)

        asyncio.run(scenario())

        assert source.packages[0].release_count == 1

    def test_cancelled_load_still_completes(self) -> None:
        """Cancelling the task mid-acquire still delivers one (empty) result."""
        source = RecordingSource(LAYERED, delay=5.0)
        provider = make_provider(source)
        calls: list[dict[str, object]] = []

        async def scenario() -> asyncio.Task[None]:
            task = asyncio.create_task(provider._run(EN_US, calls.append))
            await asyncio.sleep(0.01)
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task
            return task

        task = asyncio.run(scenario())

        assert task.cancelled()
        assert calls == [{}]


class TestLogging:
    """Test log records emitted during a load."""

    def test_phases_logged_in_order(self, provider_logs: pytest.LogCaptureFixture) -> None:
        """Every phase after IDLE is logged once, in lifecycle order."""
        asyncio.run(make_provider(RecordingSource(LAYERED)).load_async(EN_US))

        phases = [
            r.getMessage().removeprefix("Load en-US: ")
            for r in provider_logs.records
            if r.getMessage().startswith("Load en-US: ")
        ]
        assert phases == ["acquiring", "selecting", "merging", "releasing", "completed"]

    def test_completion_summary(self, provider_logs: pytest.LogCaptureFixture) -> None:
        """One INFO record reports keys, merged entries and skipped entries."""
        asyncio.run(make_provider(RecordingSource(LAYERED)).load_async(EN_US))

        infos = [r.getMessage() for r in provider_logs.records if r.levelno == logging.INFO]
        assert infos == ["Loaded 3 keys for en-US from 3 entries (0 skipped)"]
