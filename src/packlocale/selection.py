"""Entry selection for layered culture lookups.

Splits the entry names of a package into the three fallback layers:

    root/default/...   -> Layer.DEFAULT (every culture)
    root/zh/...        -> Layer.FAMILY  (language code)
    root/zh-CN/...     -> Layer.FULL    (full culture name)

Matching is a substring test on the delimited segment ("/zh/"), not a path
parse. Layer membership is independent, so a contrived name such as
"root/default/en/x.json" belongs to both the default and the "en" layers.

Python 3.13+.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from packlocale.constants import DEFAULT_SEGMENT
from packlocale.culture import CultureInfo
from packlocale.enums import Layer

__all__ = ["EntryGroups", "layer_segment", "select_entries"]


def layer_segment(layer: Layer, culture: CultureInfo) -> str:
    """Return the delimited path segment that selects a layer.

    Example:
        >>> layer_segment(Layer.FAMILY, CultureInfo("zh", "zh-CN"))
        '/zh/'
    """
    match layer:
        case Layer.DEFAULT:
            return f"/{DEFAULT_SEGMENT}/"
        case Layer.FAMILY:
            return f"/{culture.language}/"
        case Layer.FULL:
            return f"/{culture.name}/"


@dataclass(frozen=True, slots=True)
class EntryGroups:
    """Entry names selected for each layer.

    Attributes:
        default: Names containing /default/
        family: Names containing /{language}/
        full: Names containing /{name}/
    """

    default: frozenset[str] = frozenset()
    family: frozenset[str] = frozenset()
    full: frozenset[str] = frozenset()

    def __len__(self) -> int:
        return len(self.default) + len(self.family) + len(self.full)

    def group(self, layer: Layer) -> frozenset[str]:
        """Return the names selected for one layer."""
        match layer:
            case Layer.DEFAULT:
                return self.default
            case Layer.FAMILY:
                return self.family
            case Layer.FULL:
                return self.full

    def ordered(self) -> Iterator[tuple[Layer, list[str]]]:
        """Yield (layer, names) in merge order.

        Names within a layer are sorted so repeated loads visit entries in
        the same order.
        """
        for layer in Layer:
            yield layer, sorted(self.group(layer))


def select_entries(entry_names: Iterable[str], culture: CultureInfo) -> EntryGroups:
    """Select the entry names belonging to each layer for a culture.

    Pure function: no I/O, no parsing.

    Args:
        entry_names: All entry names in a package
        culture: Culture being loaded

    Returns:
        EntryGroups with one set of names per layer

    Example:
        >>> groups = select_entries(
        ...     ["root/default/a.json", "root/en/b.json", "root/en-US/c.json"],
        ...     CultureInfo.from_code("en-US"),
        ... )
        >>> sorted(groups.full)
        ['root/en-US/c.json']
    """
    names = tuple(entry_names)
    selected: dict[Layer, frozenset[str]] = {}
    for layer in Layer:
        segment = layer_segment(layer, culture)
        selected[layer] = frozenset(n for n in names if segment in n)
    return EntryGroups(
        default=selected[Layer.DEFAULT],
        family=selected[Layer.FAMILY],
        full=selected[Layer.FULL],
    )
