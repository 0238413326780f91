"""
Text and attribute extraction.

Walks the live document and produces one TranslatableItem per location
that can be shown translated: a text node's content, or one attribute of
one element. Page authors opt a subtree out with any of:

    data-no-translate      (attribute, any value)
    class="notranslate"
    translate="no"
    contenteditable="true"
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod

from bs4 import NavigableString, Tag

from farmmind.page.document import LiveDocument, closest, has_class
from farmmind.page.originals import OriginalValueStore


NO_TRANSLATE_ATTR = "data-no-translate"
NO_TRANSLATE_CLASS = "notranslate"

SKIPPED_TAGS = frozenset({
    "script", "style", "noscript", "code", "pre",
    "svg", "math", "textarea", "input",
})

# Brand names stay as written
SKIP_TEXT = frozenset({"FarmMind", "FARMMIND"})

ATTRIBUTE_TARGETS = "[placeholder], [title], [aria-label], img[alt], input[value]"
BUTTON_INPUT_TYPES = frozenset({"button", "submit", "reset"})

_HAS_LETTER = re.compile(r"[A-Za-z]")
_URL_LIKE = re.compile(r"https?://|www\.", re.IGNORECASE)


# =============================================================================
# Filters
# =============================================================================


def is_opted_out(element: Tag) -> bool:
    """True when the element carries an opt-out marker itself."""
    return (
        element.has_attr(NO_TRANSLATE_ATTR)
        or has_class(element, NO_TRANSLATE_CLASS)
        or element.get("translate") == "no"
        or element.get("contenteditable") == "true"
    )


def in_opted_out_region(element: Tag | None) -> bool:
    return closest(element, is_opted_out) is not None


def in_skipped_tag(element: Tag | None) -> bool:
    return closest(element, lambda el: el.name in SKIPPED_TAGS) is not None


def should_skip_text(text: str) -> bool:
    """Strings that are never sent for translation."""
    trimmed = text.strip()
    if not trimmed:
        return True
    if trimmed in SKIP_TEXT:
        return True
    if not _HAS_LETTER.search(trimmed):
        return True
    if _URL_LIKE.search(trimmed):
        return True
    if "@" in trimmed:
        return True
    return False


def split_whitespace(text: str) -> tuple[str, str, str]:
    """Split into (leading whitespace, core, trailing whitespace)."""
    core = text.strip()
    if not core:
        return text, "", ""
    start = len(text) - len(text.lstrip())
    end = len(text.rstrip())
    return text[:start], core, text[end:]


# =============================================================================
# Items
# =============================================================================


class TranslatableItem(ABC):
    """One location that can show translated or original content."""

    key: str

    @abstractmethod
    def apply(self, text: str) -> None:
        ...

    @abstractmethod
    def restore(self) -> None:
        ...


class TextItem(TranslatableItem):
    """A text node. Surrounding whitespace is kept on every write."""

    def __init__(
        self,
        document: LiveDocument,
        originals: OriginalValueStore,
        node: NavigableString,
        original: str,
    ):
        self.document = document
        self.originals = originals
        self.node = node
        self.original = original
        self.leading, self.key, self.trailing = split_whitespace(original)

    def _write(self, value: str) -> None:
        # Page script may have dropped the node while translations were fetched
        if self.node.parent is None:
            return
        replacement = self.document.replace_text(self.node, value)
        self.originals.carry_text(self.node, replacement)
        self.node = replacement

    def apply(self, text: str) -> None:
        self._write(f"{self.leading}{text}{self.trailing}")

    def restore(self) -> None:
        self._write(self.original)

    def __repr__(self) -> str:
        return f"TextItem({self.key!r})"


class AttributeItem(TranslatableItem):
    """One attribute of one element."""

    def __init__(self, document: LiveDocument, element: Tag, name: str, original: str):
        self.document = document
        self.element = element
        self.name = name
        self.original = original
        self.key = original.strip()

    def apply(self, text: str) -> None:
        self.document.set_attribute(self.element, self.name, text)

    def restore(self) -> None:
        self.document.set_attribute(self.element, self.name, self.original)

    def __repr__(self) -> str:
        return f"AttributeItem({self.name}={self.key!r})"


# =============================================================================
# Extraction
# =============================================================================


def collect_text_nodes(document: LiveDocument) -> list[NavigableString]:
    """Eligible text nodes under the body, in document order."""
    nodes = []
    for node in document.text_nodes():
        parent = node.parent
        if parent is None:
            continue
        if not node.strip():
            continue
        if in_opted_out_region(parent) or in_skipped_tag(parent):
            continue
        nodes.append(node)
    return nodes


def eligible_attributes(element: Tag) -> list[str]:
    """Attribute names to translate on a matched element."""
    tag = element.name
    if tag == "input":
        input_type = (element.get("type") or "text").lower()
        if input_type in BUTTON_INPUT_TYPES:
            return ["value"]
        return ["placeholder"] if element.has_attr("placeholder") else []
    if tag == "textarea":
        return ["placeholder"] if element.has_attr("placeholder") else []

    names = [name for name in ("placeholder", "title", "aria-label") if element.has_attr(name)]
    if tag == "img" and element.has_attr("alt"):
        names.append("alt")
    return names


def collect_items(document: LiveDocument, originals: OriginalValueStore) -> list[TranslatableItem]:
    """
    The complete current set of translatable items.

    Text nodes come first in document order, then attribute targets in
    selector order. Keys come from the first value ever read at a location.
    """
    items: list[TranslatableItem] = []

    for node in collect_text_nodes(document):
        original = originals.text(node)
        if should_skip_text(original):
            continue
        items.append(TextItem(document, originals, node, original))

    for element in document.select(ATTRIBUTE_TARGETS):
        if in_opted_out_region(element):
            continue
        for name in eligible_attributes(element):
            original = originals.attribute(element, name)
            if not original or should_skip_text(original):
                continue
            items.append(AttributeItem(document, element, name, original))

    return items
