"""
Pristine values of translated nodes.

BeautifulSoup tags and strings compare (and hash) by content, so a plain
dict would merge two identical <p>Welcome</p> nodes, and str subclasses
cannot be weakly referenced. NodeMap therefore keeps each value on the
node it belongs to: lookups are by identity and an entry goes away with
its node.
"""

from __future__ import annotations

import itertools
from typing import Generic, TypeVar

from bs4 import NavigableString, Tag

V = TypeVar("V")

_map_ids = itertools.count()


class NodeMap(Generic[V]):
    """Identity-keyed mapping whose entries live on the nodes themselves."""

    def __init__(self):
        self._slot = f"_fm_nodemap_{next(_map_ids)}"

    def __contains__(self, node: object) -> bool:
        return self._slot in vars(node)

    def get(self, node: object, default: V | None = None) -> V | None:
        return vars(node).get(self._slot, default)

    def __setitem__(self, node: object, value: V) -> None:
        # vars() skips Tag.__getattr__, which would treat the name as a child tag
        vars(node)[self._slot] = value


class OriginalValueStore:
    """
    First-read-wins record of original text and attribute values.

    Once captured, a value is never overwritten, so restoring always writes
    back what the page author wrote no matter how many translate cycles ran.
    """

    def __init__(self):
        self._texts: NodeMap[str] = NodeMap()
        self._attrs: NodeMap[dict[str, str | None]] = NodeMap()

    def text(self, node: NavigableString) -> str:
        if node not in self._texts:
            self._texts[node] = str(node)
        return self._texts.get(node)

    def attribute(self, element: Tag, name: str) -> str | None:
        values = self._attrs.get(element)
        if values is None:
            values = {}
            self._attrs[element] = values
        if name not in values:
            values[name] = element.get(name)
        return values[name]

    def carry_text(self, old: NavigableString, new: NavigableString) -> None:
        """Hand the original of a replaced text node over to its replacement."""
        if old in self._texts and new not in self._texts:
            self._texts[new] = self._texts.get(old)
