"""
Reference event sink: assembles parser events into a :class:`Tree` arena.
"""

from __future__ import annotations

import logging
import math
from typing import Dict, List, Optional

from treeio.exceptions import MalformedTreeError
from treeio.parser.events import Element
from treeio.tree import Node, Tree

logger = logging.getLogger(__name__)

# Tokens some programs write instead of an actual branch length.
NULL_LIKE_LENGTHS = frozenset({"", "null", "NULL", "none", "None", "NA", "nan"})


def _parse_float(text: str, what: str) -> float:
    try:
        value = float(text)
    except ValueError as e:
        raise MalformedTreeError(f"Invalid {what} {text!r}: not a number") from e
    if math.isinf(value):
        raise MalformedTreeError(f"Invalid {what} {text!r}: not finite")
    return value


class TreeEventBuilder:
    """
    Builds a tree from ``start``/``characters``/``end`` events.

    A stack holds the nodes that are still open; the innermost one receives
    ids, branch lengths, bootstraps and NHX tags. A node that closes with
    nothing left on the stack is a top-level node, and ``end_document``
    requires exactly one of those.

    A builder is good for one tree. After a failed parse it holds partial
    state and must be discarded.
    """

    def __init__(self) -> None:
        self._nodes: List[Node] = []
        self._stack: List[int] = []
        self._top_level: List[int] = []
        self._elements: List[Element] = []
        self._open: Dict[Element, int] = {}
        self._tag_name: Optional[str] = None
        self._tree_started = False
        self._tree_finished = False

    # ------------------------------------------------------------------------
    # EventSink interface
    # ------------------------------------------------------------------------
    def start(self, name: Element) -> None:
        name = Element(name)
        if name is Element.TREE:
            if self._tree_started:
                raise MalformedTreeError("A builder can only build one tree")
            self._tree_started = True
        elif name is Element.NODE:
            self._start_node()
        elif not self._stack:
            raise MalformedTreeError(f"'{name.value}' outside of any node")
        self._elements.append(name)
        self._open[name] = self._open.get(name, 0) + 1

    def end(self, name: Element) -> None:
        name = Element(name)
        if not self._elements or self._elements[-1] is not name:
            current = self._elements[-1].value if self._elements else None
            raise MalformedTreeError(
                f"Cannot end '{name.value}' while '{current}' is open"
            )
        self._elements.pop()
        self._open[name] -= 1

        if name is Element.NODE:
            finished = self._stack.pop()
            if not self._stack:
                self._top_level.append(finished)
        elif name is Element.TREE:
            self._tree_finished = True
        elif name is Element.NHX_TAG and self._tag_name is not None:
            raise MalformedTreeError(
                f"NHX tag {self._tag_name!r} has no value"
            )

    def characters(self, text: str) -> None:
        if not self._elements:
            raise MalformedTreeError(f"Characters {text!r} outside of any element")
        element = self._elements[-1]
        if element in (Element.TREE, Element.NODE, Element.NHX_TAG):
            return
        current = self._nodes[self._stack[-1]]

        if element is Element.ID:
            current.id = text
        elif element is Element.BRANCH_LENGTH:
            text = text.strip()
            if text in NULL_LIKE_LENGTHS:
                logger.debug("Treating branch length %r as missing", text)
                current.branch_length = None
            else:
                current.branch_length = _parse_float(text, "branch length")
        elif element is Element.BOOTSTRAP:
            current.bootstrap = _parse_float(text.strip(), "bootstrap value")
        elif element is Element.TAG_NAME:
            self._tag_name = text
        elif element is Element.TAG_VALUE:
            if self._tag_name is None:
                raise MalformedTreeError(f"NHX tag value {text!r} without a name")
            # pair is committed only once both halves are known
            current.add_tag_value(self._tag_name, text)
            self._tag_name = None

    def is_open(self, name: Element) -> bool:
        return self._open.get(Element(name), 0) > 0

    def end_document(self) -> Tree:
        """
        Return the finished tree.

        Raises:
            MalformedTreeError: If nodes are still open or the events did not
                produce exactly one root node.
        """
        if self._stack:
            raise MalformedTreeError(
                f"{len(self._stack)} node(s) still open at end of document"
            )
        if len(self._top_level) != 1:
            raise MalformedTreeError(
                f"Expected exactly one root node, found {len(self._top_level)}"
            )
        return Tree(self._nodes, root_index=self._top_level[0])

    # ------------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------------
    def _start_node(self) -> None:
        if self._tree_finished:
            raise MalformedTreeError("Node started after the tree was closed")
        index = len(self._nodes)
        parent = self._stack[-1] if self._stack else None
        node = Node(index=index, parent=parent)
        self._nodes.append(node)
        if parent is not None:
            self._nodes[parent].children.append(index)
        self._stack.append(index)
