"""Enumerations for packlocale type-safe constants.

Uses StrEnum (Python 3.11+) for automatic string conversion.
StrEnum members are strings themselves, eliminating boilerplate __str__ methods.

Python 3.13+.
"""

from enum import StrEnum


class Layer(StrEnum):
    """Fallback tier an entry was selected for.

    Members are declared in merge order: later layers override earlier ones.
    """

    DEFAULT = "default"
    """Entries under a /default/ segment, shared by every culture."""

    FAMILY = "family"
    """Entries under the language code segment: /zh/, /en/"""

    FULL = "full"
    """Entries under the full culture name segment: /zh-CN/, /en-US/"""


class LoadStatus(StrEnum):
    """Outcome of loading a single package entry."""

    SUCCESS = "success"
    """Entry was read and parsed; its fragment was merged."""

    ERROR = "error"
    """Entry could not be read or parsed and was skipped."""


class LoadPhase(StrEnum):
    """Phase of a single load call.

    A call moves forward only:
    IDLE -> ACQUIRING -> SELECTING -> MERGING -> RELEASING -> COMPLETED.
    A failed acquisition jumps from ACQUIRING straight to RELEASING.
    """

    IDLE = "idle"
    ACQUIRING = "acquiring"
    SELECTING = "selecting"
    MERGING = "merging"
    RELEASING = "releasing"
    COMPLETED = "completed"


__all__ = [
    "Layer",
    "LoadPhase",
    "LoadStatus",
]
