"""Culture code handling at the system boundary.

Culture codes arrive as BCP-47 ("zh-CN"), POSIX ("zh_CN.UTF-8") or anything in
between. This module reduces them to subtags and hands Babel the underscore
form it expects.

Python 3.13+.
"""

from __future__ import annotations

import functools
import os
from collections.abc import Iterator
from typing import TYPE_CHECKING

from packlocale.constants import FALLBACK_CULTURE

if TYPE_CHECKING:
    from babel import Locale

__all__ = [
    "clear_locale_cache",
    "get_babel_locale",
    "get_system_locale",
    "iter_system_locales",
    "split_locale",
    "to_posix",
]

# Environment variables consulted after the OS locale, highest priority first
_ENV_VARS = ("LC_ALL", "LC_MESSAGES", "LANG")

_PSEUDO_LOCALES = frozenset({"", "C", "POSIX"})


def to_posix(code: str) -> str:
    """Return a culture code with underscore separators and no encoding or modifier.

    Example:
        >>> to_posix(" zh-CN.UTF-8 ")
        'zh_CN'
    """
    return code.strip().replace("-", "_").split(".")[0].split("@")[0]


def split_locale(code: str) -> tuple[str, str | None, str | None, str | None]:
    """Split a culture code into (language, territory, script, variant).

    Subtags come back canonically cased. No likely-subtag expansion is done,
    so "zh-CN" stays ("zh", "CN", None, None).

    Raises:
        ValueError: If the code is not a well-formed identifier

    Example:
        >>> split_locale("zh-hant-tw")
        ('zh', 'TW', 'Hant', None)
    """
    from babel.core import parse_locale  # noqa: PLC0415

    language, territory, script, variant, *_ = parse_locale(to_posix(code))
    return language, territory, script, variant


@functools.lru_cache(maxsize=64)
def get_babel_locale(code: str) -> Locale:
    """Return the Babel Locale for a culture code, cached per code.

    Raises:
        babel.core.UnknownLocaleError: If CLDR has no data for the code
        ValueError: If the code is malformed
    """
    from babel import Locale  # noqa: PLC0415

    return Locale.parse(to_posix(code))


def clear_locale_cache() -> None:
    get_babel_locale.cache_clear()


def iter_system_locales() -> Iterator[str]:
    """Yield the culture codes configured for this process, best first.

    The OS locale comes first, then LC_ALL, LC_MESSAGES and LANG. The "C" and
    "POSIX" pseudo-locales are skipped.
    """
    import locale  # noqa: PLC0415

    try:
        os_locale = locale.getlocale()[0]
    except ValueError:
        os_locale = None
    candidates = [os_locale, *(os.environ.get(var) for var in _ENV_VARS)]
    for candidate in candidates:
        if candidate is None:
            continue
        code = to_posix(candidate)
        if code not in _PSEUDO_LOCALES:
            yield code


def get_system_locale() -> str:
    """Return the first configured system culture code, or FALLBACK_CULTURE."""
    return next(iter_system_locales(), FALLBACK_CULTURE)
