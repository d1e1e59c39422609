"""packlocale - Layered localization data from packaged resources.

Loads the key/value strings for a culture from a package (zip archive,
directory tree, or any custom container), merging three layers:

    root/default/...   shared defaults
    root/zh/...        language family
    root/zh-CN/...     full culture

Later layers override earlier ones. Loading is asynchronous and never fails
the caller: broken entries are skipped and logged.

Public API:
    PackageDataProvider - Asynchronous layered loader
    CultureInfo - Culture identifier (language + full name)
    select_entries - Pure entry selection for a culture
    LoaderConfig - Loader configuration

Submodules:
    packlocale.packages - Package/PackageSource protocols and implementations
    packlocale.parsers - DocumentParser protocol, JSON and XML parsers
    packlocale.results - EntryLoadResult and LoadSummary
    packlocale.errors - Exception hierarchy
"""

from .config import LoaderConfig
from .culture import CultureInfo, get_system_culture
from .enums import Layer, LoadPhase, LoadStatus
from .errors import (
    AcquisitionError,
    ConfigurationError,
    DocumentParseError,
    EntryReadError,
    LocalizationError,
    PackageReleasedError,
    UnknownCultureError,
)
from .packages import (
    DirectorySource,
    Package,
    PackageSource,
    StaticPackageSource,
    UrlPackageSource,
    ZipFileSource,
)
from .parsers import DocumentParser, JsonDocumentParser, XmlDocumentParser
from .provider import PackageDataProvider
from .results import EntryLoadResult, LoadSummary
from .selection import EntryGroups, select_entries

# Version information - Auto-populated from package metadata
# SINGLE SOURCE OF TRUTH: pyproject.toml [project] version
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _get_version

try:
    __version__ = _get_version("packlocale")
except PackageNotFoundError:
    # Development mode: package not installed yet
    __version__ = "0.0.0+dev"

__all__ = [
    "AcquisitionError",
    "ConfigurationError",
    "CultureInfo",
    "DirectorySource",
    "DocumentParseError",
    "DocumentParser",
    "EntryGroups",
    "EntryLoadResult",
    "EntryReadError",
    "JsonDocumentParser",
    "Layer",
    "LoadPhase",
    "LoadStatus",
    "LoadSummary",
    "LoaderConfig",
    "LocalizationError",
    "Package",
    "PackageDataProvider",
    "PackageReleasedError",
    "PackageSource",
    "StaticPackageSource",
    "UnknownCultureError",
    "UrlPackageSource",
    "XmlDocumentParser",
    "ZipFileSource",
    "__version__",
    "get_system_culture",
    "select_entries",
]
