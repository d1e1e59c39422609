"""Hypothesis strategies for packlocale property-based testing.

Strategies are organized by domain:

- packages: Cultures, entry names and layered package contents

Usage:
    from tests.strategies import cultures, layered_packages

Event-Emitting Strategies (HypoFuzz-Optimized):
    These strategies emit hypothesis.event() calls for coverage-guided fuzzing:
    - cultures, entry_names, layered_packages
"""

from .packages import cultures, entry_names, fragments, layered_packages

__all__ = [
    "cultures",
    "entry_names",
    "fragments",
    "layered_packages",
]
