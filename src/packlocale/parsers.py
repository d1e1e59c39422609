"""Document parsers turning entry bytes into key/value fragments.

Components:
    DocumentParser - Protocol for entry parsers (structural typing)
    JsonDocumentParser - JSON objects, nested objects flattened to dotted keys
    XmlDocumentParser - <resources> documents with typed value elements

Python 3.13+.
"""

from __future__ import annotations

import json
import xml.etree.ElementTree as ET
from collections.abc import Callable, Mapping
from typing import ClassVar, Protocol

from packlocale.constants import DEFAULT_ENCODING
from packlocale.errors import ConfigurationError, DocumentParseError

__all__ = [
    "DocumentParser",
    "JsonDocumentParser",
    "XmlDocumentParser",
]


class DocumentParser(Protocol):
    """Protocol for parsing one package entry into key/value pairs.

    Example:
        >>> class LinesParser:
        ...     def parse(self, data: bytes) -> dict[str, object]:
        ...         pairs = (line.split("=", 1) for line in data.decode().splitlines())
        ...         return {k.strip(): v.strip() for k, v in pairs}
    """

    def parse(self, data: bytes) -> Mapping[str, object]:
        """Parse entry bytes.

        Args:
            data: Raw entry bytes

        Returns:
            Mapping of localization key to value

        Raises:
            DocumentParseError: If data is not a valid document
        """


class JsonDocumentParser:
    """Parser for JSON localization tables.

    The document must be a JSON object. Nested objects are flattened into
    dotted keys; every other value is kept as decoded. Only leaves produce
    keys, so an empty nested object (``{"menu": {}}``) contributes nothing
    and cannot override a key from an earlier layer.

    Example:
        >>> JsonDocumentParser().parse(b'{"menu": {"file": "File"}, "ok": "OK"}')
        {'menu.file': 'File', 'ok': 'OK'}
    """

    __slots__ = ("_encoding",)

    def __init__(self, encoding: str = DEFAULT_ENCODING) -> None:
        if not encoding:
            msg = "encoding cannot be empty"
            raise ConfigurationError(msg)
        self._encoding = encoding

    @property
    def encoding(self) -> str:
        return self._encoding

    def parse(self, data: bytes) -> dict[str, object]:
        try:
            text = data.decode(self._encoding).removeprefix("\ufeff")
            document = json.loads(text)
        except (UnicodeDecodeError, LookupError, json.JSONDecodeError) as e:
            msg = f"Invalid JSON document: {e}"
            raise DocumentParseError(msg) from e

        if not isinstance(document, dict):
            msg = f"JSON document must be an object, got {type(document).__name__}"
            raise DocumentParseError(msg)

        result: dict[str, object] = {}
        self._flatten(document, "", result)
        return result

    @classmethod
    def _flatten(cls, node: dict[str, object], prefix: str, out: dict[str, object]) -> None:
        for key, value in node.items():
            full_key = f"{prefix}{key}"
            if isinstance(value, dict):
                cls._flatten(value, f"{full_key}.", out)
            else:
                out[full_key] = value


def _parse_bool(text: str) -> bool:
    match text.strip().lower():
        case "true":
            return True
        case "false":
            return False
        case _:
            msg = f"invalid literal for bool: '{text}'"
            raise ValueError(msg)


class XmlDocumentParser:
    """Parser for XML localization tables.

    Format::

        <resources>
            <string name="app.name">Demo</string>
            <int name="retries">3</int>
            <float name="scale">1.5</float>
            <bool name="beta">true</bool>
            <string-array name="days">
                <item>Mon</item>
                <item>Tue</item>
            </string-array>
        </resources>

    Arrays decode to tuples. Unknown element names, missing name attributes
    and unconvertible values are parse errors.
    """

    __slots__ = ()

    _SCALARS: ClassVar[dict[str, Callable[[str], object]]] = {
        "string": str,
        "int": int,
        "float": float,
        "bool": _parse_bool,
    }

    def parse(self, data: bytes) -> dict[str, object]:
        try:
            root = ET.fromstring(data)  # noqa: S314
        except ET.ParseError as e:
            msg = f"Invalid XML document: {e}"
            raise DocumentParseError(msg) from e

        if root.tag != "resources":
            msg = f"XML root element must be <resources>, got <{root.tag}>"
            raise DocumentParseError(msg)

        result: dict[str, object] = {}
        for element in root:
            name = element.get("name")
            if not name:
                msg = f"<{element.tag}> element is missing the 'name' attribute"
                raise DocumentParseError(msg)
            result[name] = self._convert(element)
        return result

    def _convert(self, element: ET.Element) -> object:
        text = element.text or ""
        try:
            if element.tag == "string-array":
                return tuple(item.text or "" for item in element.iter("item"))
            converter = self._SCALARS.get(element.tag)
            if converter is None:
                msg = f"Unsupported element <{element.tag}>"
                raise DocumentParseError(msg)
            return converter(text if element.tag == "string" else text.strip())
        except ValueError as e:
            msg = f"Invalid <{element.tag}> value for '{element.get('name')}': {e}"
            raise DocumentParseError(msg) from e
