"""Shared constants for packlocale.

Constants are grouped by domain:
- Layer segments: Literal path segments that select entry layers
- Decoding: Default text encoding for shipped parsers
- Input limits: Size bounds applied before parsing an entry
- Transport: Network defaults for downloaded packages
- Culture detection: Fallback culture when the OS reports none

Python 3.13+.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Layer segments
    "DEFAULT_SEGMENT",
    # Decoding
    "DEFAULT_ENCODING",
    # Input limits
    "DEFAULT_MAX_ENTRY_SIZE",
    # Transport
    "DEFAULT_DOWNLOAD_TIMEOUT",
    # Culture detection
    "FALLBACK_CULTURE",
]

# ============================================================================
# LAYER SEGMENTS
# ============================================================================

# Entries whose path contains "/default/" form the base layer for every culture.
DEFAULT_SEGMENT: str = "default"

# ============================================================================
# DECODING
# ============================================================================

DEFAULT_ENCODING: str = "utf-8"

# ============================================================================
# INPUT LIMITS
# ============================================================================

# 10 MiB per entry. Localization tables are text; anything larger is treated
# as a corrupt or hostile entry and skipped before it reaches the parser.
DEFAULT_MAX_ENTRY_SIZE: int = 10 * 1024 * 1024

# ============================================================================
# TRANSPORT
# ============================================================================

# Seconds allowed for each network operation of a UrlPackageSource download.
DEFAULT_DOWNLOAD_TIMEOUT: float = 30.0

# ============================================================================
# CULTURE DETECTION
# ============================================================================

FALLBACK_CULTURE: str = "en_US"
