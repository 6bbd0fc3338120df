"""
Build events emitted by the Newick state machine and the sink interface that
receives them.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Protocol, Tuple


class Element(str, Enum):
    """Element names passed to ``start``/``end`` of an event sink."""

    TREE = "tree"
    NODE = "node"
    ID = "id"
    BRANCH_LENGTH = "branch_length"
    BOOTSTRAP = "bootstrap"
    NHX_TAG = "nhx_tag"
    TAG_NAME = "tag_name"
    TAG_VALUE = "tag_value"


class EventSink(Protocol):
    """Capabilities the parser needs from whatever materializes a tree."""

    def start(self, name: Element) -> None: ...

    def end(self, name: Element) -> None: ...

    def characters(self, text: str) -> None: ...

    def end_document(self) -> Any: ...

    def is_open(self, name: Element) -> bool: ...


@dataclass(frozen=True)
class Event:
    kind: str
    text: str = ""


class EventRecorder:
    """
    Sink that records the flat event stream instead of building a tree.

    Event kinds are ``start-<element>``, ``end-<element>`` and ``<element>``
    for character payloads, with underscores written as dashes, e.g.
    ``start-node`` or ``branch-length``.
    """

    def __init__(self) -> None:
        self.events: List[Event] = []
        self._open: Dict[Element, int] = {}
        self._elements: List[Element] = []

    def start(self, name: Element) -> None:
        name = Element(name)
        self._open[name] = self._open.get(name, 0) + 1
        self._elements.append(name)
        if name in (Element.TREE, Element.NODE, Element.NHX_TAG):
            self.events.append(Event(f"start-{_kind(name)}"))

    def end(self, name: Element) -> None:
        name = Element(name)
        self._open[name] = self._open.get(name, 0) - 1
        if self._elements and self._elements[-1] is name:
            self._elements.pop()
        if name in (Element.TREE, Element.NODE, Element.NHX_TAG):
            self.events.append(Event(f"end-{_kind(name)}"))

    def characters(self, text: str) -> None:
        if self._elements:
            self.events.append(Event(_kind(self._elements[-1]), text))

    def end_document(self) -> List[Event]:
        return list(self.events)

    def is_open(self, name: Element) -> bool:
        return self._open.get(Element(name), 0) > 0

    def kinds(self) -> List[str]:
        return [event.kind for event in self.events]

    def pairs(self) -> List[Tuple[str, str]]:
        return [(event.kind, event.text) for event in self.events]


def _kind(name: Element) -> str:
    return name.value.replace("_", "-")
