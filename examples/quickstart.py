"""Quickstart example for packlocale.

Builds a small zip package holding three cultures side by side, then loads
it for several cultures to show the default -> family -> full merge.

Note: Examples print LoadSummary for visibility. In production, pass an
on_completed callback to load() and let logging report skipped entries.
"""

import asyncio
import json
import logging
import tempfile
import zipfile
from pathlib import Path

from packlocale import (
    CultureInfo,
    JsonDocumentParser,
    PackageDataProvider,
    XmlDocumentParser,
    ZipFileSource,
)

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

ENTRIES = {
    "strings/default/app.json": {"app": {"title": "Demo", "quit": "Quit"}, "color": "Color"},
    "strings/en/app.json": {"greeting": "Hello"},
    "strings/en-GB/app.json": {"color": "Colour"},
    "strings/zh/app.json": {"greeting": "你好", "app": {"quit": "退出"}},
    "strings/zh-CN/app.json": {"app": {"title": "演示"}},
    "strings/de/broken.json": "not an object",
}


def build_archive(path: Path) -> None:
    with zipfile.ZipFile(path, "w") as archive:
        for name, table in ENTRIES.items():
            archive.writestr(name, json.dumps(table, ensure_ascii=False))


async def main() -> None:
    with tempfile.TemporaryDirectory() as tmpdir:
        archive = Path(tmpdir) / "strings.zip"
        build_archive(archive)
        provider = PackageDataProvider(ZipFileSource(archive), JsonDocumentParser())

        # Example 1: Layered merge
        for code in ("en-US", "en-GB", "zh-CN"):
            culture = CultureInfo.from_code(code)
            data, summary = await provider.load_with_summary(culture)
            print(f"\n[{culture}] {summary!r}")
            for key in sorted(data):
                print(f"  {key} = {data[key]}")

        # Example 2: Broken entries are skipped, defaults still load
        data, summary = await provider.load_with_summary(CultureInfo.from_code("de-DE"))
        print(f"\n[de-DE] {summary!r}")
        for result in summary.get_errors():
            print(f"  skipped {result.entry_name}: {result.error}")

        # Example 3: Callback style
        done = asyncio.Event()

        def on_completed(strings: dict[str, object]) -> None:
            print(f"\n[callback] received {len(strings)} keys")
            done.set()

        provider.load(CultureInfo.from_code("zh-CN"), on_completed)
        await done.wait()

    # Example 4: Android-style XML resources
    xml = b"""<?xml version="1.0" encoding="utf-8"?>
<resources>
    <string name="app.title">Demo</string>
    <int name="retries">3</int>
    <bool name="beta">true</bool>
    <string-array name="sizes"><item>S</item><item>M</item></string-array>
</resources>"""
    print(f"\n[xml] {XmlDocumentParser().parse(xml)}")


if __name__ == "__main__":
    asyncio.run(main())
