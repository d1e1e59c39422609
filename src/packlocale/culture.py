"""Culture identifiers for layered localization lookups.

A culture has three derivable forms used by entry selection:
- the implicit default layer, shared by every culture
- language: the short language code ("zh", "en")
- name: the full BCP-47 name ("zh-CN", "en-US")

Python 3.13+.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from packlocale.errors import UnknownCultureError
from packlocale.locale_utils import get_babel_locale, get_system_locale, split_locale

if TYPE_CHECKING:
    from babel import Locale

__all__ = ["CultureInfo", "get_system_culture"]


@dataclass(frozen=True, slots=True)
class CultureInfo:
    """Immutable culture identifier.

    Construct directly when the codes are already canonical, or use
    from_code() to accept user input in any common spelling.

    Attributes:
        language: Short language code (e.g., 'zh')
        name: Full culture name in BCP-47 form (e.g., 'zh-CN')

    Example:
        >>> culture = CultureInfo.from_code("zh_cn")
        >>> culture.language, culture.name
        ('zh', 'zh-CN')
    """

    language: str
    name: str

    def __post_init__(self) -> None:
        """Validate that both forms are present and path-safe.

        Raises:
            UnknownCultureError: If language or name is empty or contains '/'
        """
        for label, value in (("language", self.language), ("name", self.name)):
            if not value:
                msg = f"Culture {label} cannot be empty"
                raise UnknownCultureError(msg, code=self.name)
            if "/" in value:
                msg = f"Path separators not allowed in culture {label}: '{value}'"
                raise UnknownCultureError(msg, code=self.name)

    def __str__(self) -> str:
        return self.name

    @classmethod
    def from_code(cls, code: str) -> CultureInfo:
        """Build a CultureInfo from a BCP-47 or POSIX culture code.

        The code is validated against CLDR through Babel, then rebuilt in
        canonical case with hyphen separators.

        Args:
            code: Culture code (e.g., 'en-US', 'en_us', 'zh-Hant-TW')

        Returns:
            Canonical CultureInfo

        Raises:
            UnknownCultureError: If the code is malformed or unknown
        """
        from babel.core import UnknownLocaleError  # noqa: PLC0415

        try:
            language, territory, script, variant = split_locale(code)
            get_babel_locale("_".join(p for p in (language, script, territory, variant) if p))
        except (ValueError, TypeError, UnknownLocaleError) as e:
            msg = f"Unknown culture '{code}': {e}"
            raise UnknownCultureError(msg, code=code) from e

        name = "-".join(part for part in (language, script, territory, variant) if part)
        return cls(language=language, name=name)

    @classmethod
    def from_locale(cls, locale: Locale) -> CultureInfo:
        """Build a CultureInfo from a Babel Locale.

        Args:
            locale: Babel Locale instance

        Returns:
            CultureInfo with the locale's language and hyphenated identifier
        """
        parts = (locale.language, locale.script, locale.territory, locale.variant)
        return cls(language=locale.language, name="-".join(p for p in parts if p))


def get_system_culture() -> CultureInfo:
    """Detect the operating system culture.

    Unknown system cultures fall back to en-US rather than failing.

    Returns:
        CultureInfo for the detected culture
    """
    try:
        return CultureInfo.from_code(get_system_locale())
    except UnknownCultureError:
        return CultureInfo(language="en", name="en-US")
