"""
Live HTML document.

Wraps a BeautifulSoup tree and routes every mutation through one object so
that observers can be told about it, the way a browser's MutationObserver
is. Three kinds of mutation records are produced:

- ``childList``: nodes added to or removed from an element
- ``characterData``: a text node's content replaced
- ``attributes``: an element attribute written or removed

Observers choose which kinds they want and whether descendants of their
target count (``subtree``). Callbacks run synchronously after the mutation.

The document also dispatches simple UI events (click, keydown) to listeners
registered on an element or on the document itself, bubbling from the
event target outwards.
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass, field
from typing import Any, Callable

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import PageElement, PreformattedString


CHILD_LIST = "childList"
CHARACTER_DATA = "characterData"
ATTRIBUTES = "attributes"


# =============================================================================
# Mutation Records
# =============================================================================


@dataclass
class MutationRecord:
    """One observed change to the document."""

    type: str
    target: PageElement
    added: list[PageElement] = field(default_factory=list)
    removed: list[PageElement] = field(default_factory=list)
    attribute_name: str | None = None


MutationCallback = Callable[[list[MutationRecord]], None]


@dataclass
class Observation:
    """A registered observer. Call ``disconnect()`` to stop receiving records."""

    document: "LiveDocument"
    callback: MutationCallback
    target: Tag
    child_list: bool = False
    character_data: bool = False
    attributes: bool = False
    subtree: bool = False

    def wants(self, record: MutationRecord) -> bool:
        if record.type == CHILD_LIST and not self.child_list:
            return False
        if record.type == CHARACTER_DATA and not self.character_data:
            return False
        if record.type == ATTRIBUTES and not self.attributes:
            return False
        if record.target is self.target:
            return True
        return self.subtree and is_inside(record.target, self.target)

    def disconnect(self) -> None:
        self.document._observations = [
            o for o in self.document._observations if o is not self
        ]


# =============================================================================
# UI Events
# =============================================================================


@dataclass
class DomEvent:
    """A dispatched UI event."""

    type: str
    target: Tag | None = None
    key: str | None = None
    default_prevented: bool = False

    def prevent_default(self) -> None:
        self.default_prevented = True


EventHandler = Callable[[DomEvent], Any]


# =============================================================================
# Tree helpers
# =============================================================================


def is_inside(node: PageElement | None, ancestor: PageElement) -> bool:
    """True when ``node`` is ``ancestor`` or one of its descendants."""
    while node is not None:
        if node is ancestor:
            return True
        node = node.parent
    return False


def is_text_node(node: PageElement) -> bool:
    """Plain text strings only: comments, doctypes and CDATA are excluded."""
    return isinstance(node, NavigableString) and not isinstance(node, PreformattedString)


def closest(element: Tag | None, predicate: Callable[[Tag], bool]) -> Tag | None:
    """Nearest element, starting with ``element`` itself, matching ``predicate``."""
    while element is not None and not isinstance(element, BeautifulSoup):
        if predicate(element):
            return element
        element = element.parent
    return None


def class_list(element: Tag) -> list[str]:
    # Set via attribute assignment, "class" can be a plain string
    classes = element.get("class") or []
    if isinstance(classes, str):
        return classes.split()
    return list(classes)


def has_class(element: Tag, name: str) -> bool:
    return name in class_list(element)


# =============================================================================
# Live Document
# =============================================================================


class LiveDocument:
    """
    An HTML page whose mutations can be observed.

    Usage:
        doc = LiveDocument("<html><body><p>Welcome</p></body></html>")
        obs = doc.observe(on_change, child_list=True, subtree=True)
        doc.append(doc.body, "<p>New crop report</p>")   # on_change called
        obs.disconnect()
    """

    def __init__(self, markup: str = "", parser: str = "html.parser"):
        self.parser = parser
        self.soup = BeautifulSoup(markup, parser)
        self._observations: list[Observation] = []
        self._listeners: list[tuple[Tag | None, str, EventHandler]] = []

    @classmethod
    def from_file(cls, path, parser: str = "html.parser") -> "LiveDocument":
        with open(path, encoding="utf-8") as f:
            return cls(f.read(), parser)

    # -------------------------------------------------------------------------
    # Structure
    # -------------------------------------------------------------------------

    @property
    def body(self) -> Tag:
        """The <body> element, or the whole tree for fragments."""
        body = self.soup.body
        return body if body is not None else self.soup

    @property
    def root_element(self) -> Tag | None:
        return self.soup.html

    @property
    def lang(self) -> str | None:
        root = self.root_element
        return root.get("lang") if root is not None else None

    @lang.setter
    def lang(self, value: str) -> None:
        root = self.root_element
        if root is not None:
            self.set_attribute(root, "lang", value)

    def get_element_by_id(self, element_id: str) -> Tag | None:
        return self.soup.find(id=element_id)

    def select(self, selector: str, root: Tag | None = None) -> list[Tag]:
        return (root if root is not None else self.soup).select(selector)

    def select_one(self, selector: str, root: Tag | None = None) -> Tag | None:
        return (root if root is not None else self.soup).select_one(selector)

    def text_nodes(self, root: Tag | None = None) -> list[NavigableString]:
        """Text nodes under ``root`` (the body by default) in document order."""
        root = root if root is not None else self.body
        return [node for node in root.descendants if is_text_node(node)]

    def serialize(self) -> str:
        return str(self.soup)

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def _fragment(self, markup: str) -> list[PageElement]:
        fragment = BeautifulSoup(markup, self.parser)
        return [child.extract() for child in list(fragment.contents)]

    def append(self, parent: Tag, content: str | PageElement) -> list[PageElement]:
        """Append markup or a node to ``parent``. Returns the added nodes."""
        nodes = self._fragment(content) if isinstance(content, str) else [content]
        for node in nodes:
            parent.append(node)
        self._notify(MutationRecord(CHILD_LIST, parent, added=nodes))
        return nodes

    def remove(self, node: PageElement) -> None:
        parent = node.parent
        node.extract()
        if parent is not None:
            self._notify(MutationRecord(CHILD_LIST, parent, removed=[node]))

    def replace_children(self, parent: Tag, content: str) -> list[PageElement]:
        """Swap every child of ``parent`` for the given markup."""
        removed = [child.extract() for child in list(parent.contents)]
        added = self._fragment(content) if content else []
        for node in added:
            parent.append(node)
        self._notify(MutationRecord(CHILD_LIST, parent, added=added, removed=removed))
        return added

    def set_text_content(self, element: Tag, text: str) -> None:
        """Replace an element's children with a single text node."""
        removed = [child.extract() for child in list(element.contents)]
        added = [NavigableString(text)] if text else []
        for node in added:
            element.append(node)
        self._notify(MutationRecord(CHILD_LIST, element, added=added, removed=removed))

    def replace_text(self, node: NavigableString, text: str) -> NavigableString:
        """
        Replace a text node's content.

        BeautifulSoup strings are immutable, so the node is swapped for a new
        one in the same position. The new node is returned; callers that key
        data by node identity must follow it.
        """
        replacement = node.__class__(text)
        node.replace_with(replacement)
        self._notify(MutationRecord(CHARACTER_DATA, replacement))
        return replacement

    def set_attribute(self, element: Tag, name: str, value: str | list[str]) -> None:
        element[name] = value
        self._notify(MutationRecord(ATTRIBUTES, element, attribute_name=name))

    def remove_attribute(self, element: Tag, name: str) -> None:
        if element.has_attr(name):
            del element[name]
            self._notify(MutationRecord(ATTRIBUTES, element, attribute_name=name))

    def toggle_class(self, element: Tag, name: str, force: bool | None = None) -> bool:
        """Add or remove a class. Returns whether the class is now present."""
        classes = class_list(element)
        present = name in classes
        wanted = (not present) if force is None else force
        if wanted and not present:
            classes.append(name)
        elif not wanted and present:
            classes.remove(name)
        else:
            return present
        self.set_attribute(element, "class", classes)
        return wanted

    # -------------------------------------------------------------------------
    # Observation
    # -------------------------------------------------------------------------

    def observe(
        self,
        callback: MutationCallback,
        target: Tag | None = None,
        *,
        child_list: bool = False,
        character_data: bool = False,
        attributes: bool = False,
        subtree: bool = False,
    ) -> Observation:
        observation = Observation(
            document=self,
            callback=callback,
            target=target if target is not None else self.body,
            child_list=child_list,
            character_data=character_data,
            attributes=attributes,
            subtree=subtree,
        )
        self._observations.append(observation)
        return observation

    def _notify(self, record: MutationRecord) -> None:
        for observation in list(self._observations):
            if observation.wants(record):
                observation.callback([record])

    # -------------------------------------------------------------------------
    # Events
    # -------------------------------------------------------------------------

    def add_event_listener(
        self, event_type: str, handler: EventHandler, target: Tag | None = None
    ) -> None:
        """Listen on ``target``, or on the whole document when target is None."""
        self._listeners.append((target, event_type, handler))

    async def dispatch(self, event_type: str, target: Tag | None = None, **detail) -> DomEvent:
        """
        Deliver an event: listeners on the target and its ancestors first
        (innermost outwards), then document-level listeners.
        """
        event = DomEvent(type=event_type, target=target, **detail)

        chain: list[PageElement] = []
        node = target
        while node is not None:
            chain.append(node)
            node = node.parent

        handlers = [
            handler
            for element in chain
            for (bound, kind, handler) in list(self._listeners)
            if kind == event_type and bound is element
        ]
        handlers += [
            handler
            for (bound, kind, handler) in list(self._listeners)
            if kind == event_type and bound is None
        ]

        for handler in handlers:
            result = handler(event)
            if inspect.isawaitable(result):
                await result
        return event

    def contains(self, ancestor: PageElement, node: PageElement | None) -> bool:
        return is_inside(node, ancestor)
