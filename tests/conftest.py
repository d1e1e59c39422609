"""Pytest configuration for the packlocale test suite.

Hypothesis profiles:
- dev: local runs, 200 examples
- ci: CI runs, 50 derandomized examples
- verbose: 50 examples with per-example output

HYPOTHESIS_PROFILE selects a profile explicitly; otherwise CI=true selects
"ci" and everything else runs "dev".
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator

import pytest
from hypothesis import HealthCheck, Verbosity, settings

from packlocale.locale_utils import clear_locale_cache

_PROFILES = {
    "dev": {"max_examples": 200},
    "ci": {"max_examples": 50, "derandomize": True, "print_blob": True},
    "verbose": {"max_examples": 50, "verbosity": Verbosity.verbose},
}

for _name, _options in _PROFILES.items():
    settings.register_profile(
        _name,
        deadline=None,
        suppress_health_check=[HealthCheck.too_slow],
        **_options,
    )


def _detect_profile() -> str:
    explicit = os.environ.get("HYPOTHESIS_PROFILE", "")
    if explicit in _PROFILES:
        return explicit
    return "ci" if os.environ.get("CI") == "true" else "dev"


settings.load_profile(_detect_profile())


@pytest.fixture(autouse=True)
def _fresh_locale_cache() -> Iterator[None]:
    """Isolate tests from Babel locales cached by earlier tests."""
    clear_locale_cache()
    yield
    clear_locale_cache()


@pytest.fixture
def provider_logs(caplog: pytest.LogCaptureFixture) -> pytest.LogCaptureFixture:
    """caplog capturing packlocale.provider down to DEBUG."""
    caplog.set_level(logging.DEBUG, logger="packlocale.provider")
    return caplog
