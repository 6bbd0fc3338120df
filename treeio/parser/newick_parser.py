"""
Finite state machine that turns Newick/NHX text into build events.

The parser pulls tokens from a :class:`~treeio.parser.tokenizer.Cursor` and
pushes ``start``/``characters``/``end`` calls into an event sink, usually a
:class:`~treeio.tree_builder.TreeEventBuilder`.
"""

from __future__ import annotations

import logging
import re
from enum import Enum
from typing import Callable, Dict, Optional

from treeio.config import DEFAULT_CONFIG, InternalNodeId, NewickConfig
from treeio.exceptions import StructuralError, TokenizationError
from treeio.parser.events import Element, EventSink
from treeio.parser.tokenizer import Cursor, next_token

logger = logging.getLogger(__name__)

# Delimiter sets requested from the tokenizer at each step.
INITIAL_DELIMITERS = "[(:,);"
NEW_NODE_DELIMITERS = "[(:,)"
NAME_DELIMITERS = "[:,);"
BRANCH_LENGTH_DELIMITERS = "[,);"
CONTROL_DELIMITERS = ",);"
TERMINAL_DELIMITERS = "("

_LABEL_STOP_CHARS = frozenset("[:,);")
_NHX_BLOCK = re.compile(r"^\[&&NHX:?(.*)\]$", re.DOTALL)
_NUMBER = re.compile(r"^[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?$")
_BRACKETED_NUMBER = re.compile(r"^\[([-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)\]$")


class ParserState(Enum):
    NEW_NODE = "new_node"
    NAMING_NODE = "naming_node"
    BRANCH_LENGTH_OR_TAG = "branch_length_or_tag"
    NHX_TAG = "nhx_tag"
    END_NODE = "end_node"
    TERMINAL = "terminal"


def is_number(token: str) -> bool:
    return _NUMBER.match(token) is not None


class NewickParser:
    """
    Newick/NHX parser driving an event sink.

    A parser instance holds per-call state (cursor, depth, leaf flag), so one
    instance must not run two parses at the same time. The sink is mutated as
    events arrive and is not rolled back on failure; discard it after an error.

    Args:
        sink: Receiver of the build events.
        config: Options; only ``internal_node_id`` affects parsing.
    """

    def __init__(self, sink: EventSink, config: NewickConfig = DEFAULT_CONFIG):
        self.sink = sink
        self.config = config
        self._cursor = Cursor("")
        self._state = ParserState.NEW_NODE
        self._depth = 0
        self._leaf_flag = False
        self._handlers: Dict[ParserState, Callable[[str], Optional[str]]] = {
            ParserState.NEW_NODE: self._new_node,
            ParserState.NAMING_NODE: self._naming_node,
            ParserState.BRANCH_LENGTH_OR_TAG: self._branch_length_or_tag,
            ParserState.NHX_TAG: self._nhx_tag,
            ParserState.END_NODE: self._end_node,
            ParserState.TERMINAL: self._terminal,
        }

    @property
    def state(self) -> ParserState:
        return self._state

    @property
    def depth(self) -> int:
        return self._depth

    def parse(self, text: str) -> None:
        """
        Parse one tree and emit its events into the sink.

        Args:
            text: A single normalized tree, normally ending in ``;``.

        Raises:
            TokenizationError: If a required delimiter is missing.
            StructuralError: On unbalanced parentheses, an unexpected token
                after a node, or content after the terminating ``;``.
        """
        self._cursor = Cursor(text)
        self._state = ParserState.NEW_NODE
        self._depth = 0
        self._leaf_flag = False

        token = self._next(INITIAL_DELIMITERS)
        self.sink.start(Element.TREE)

        while token is not None:
            logger.debug("state=%s token=%r", self._state.value, token)
            token = self._handlers[self._state](token)

        self._finish()

    # ------------------------------------------------------------------
    # State handlers. Each returns the token for the next iteration.
    # ------------------------------------------------------------------
    def _new_node(self, token: str) -> Optional[str]:
        self.sink.start(Element.NODE)
        if token == "(":
            self._depth += 1
            return self._next(NEW_NODE_DELIMITERS)
        self._leaf_flag = True
        self._state = ParserState.NAMING_NODE
        return token

    def _naming_node(self, token: str) -> Optional[str]:
        self._state = ParserState.BRANCH_LENGTH_OR_TAG
        if _LABEL_STOP_CHARS.intersection(token):
            # anonymous node
            return token

        if (
            not self._leaf_flag
            and self.config.internal_node_id is InternalNodeId.BOOTSTRAP
            and is_number(token)
        ):
            self._emit(Element.BOOTSTRAP, token)
        else:
            self._emit(Element.ID, token)
        return self._next(NAME_DELIMITERS)

    def _branch_length_or_tag(self, token: str) -> Optional[str]:
        self._state = ParserState.NHX_TAG
        if token == ":":
            length = self._next(BRANCH_LENGTH_DELIMITERS)
            if length is None:
                return None
            if length in BRANCH_LENGTH_DELIMITERS:
                # "A:,B" - colon without a length
                token = length
            else:
                self._emit(Element.BRANCH_LENGTH, length)
                return self._next(CONTROL_DELIMITERS)

        if token == "[":
            # NHX block that arrived without a branch length in front of it
            rest = self._next(CONTROL_DELIMITERS)
            return token + (rest or "")
        return token

    def _nhx_tag(self, token: str) -> Optional[str]:
        self._state = ParserState.END_NODE

        nhx = _NHX_BLOCK.match(token)
        if nhx is not None:
            self.sink.start(Element.NHX_TAG)
            # NHX may be empty, e.g. "[&&NHX:]" just before ";"
            for attribute in nhx.group(1).split(":"):
                attribute = attribute.strip()
                if "=" not in attribute:
                    if attribute:
                        logger.debug("Skipping NHX attribute without '=': %r", attribute)
                    continue
                name, value = attribute.split("=", 1)
                self._emit(Element.TAG_NAME, name)
                self._emit(Element.TAG_VALUE, value)
            self.sink.end(Element.NHX_TAG)
            return self._next(CONTROL_DELIMITERS)

        molphy = _BRACKETED_NUMBER.match(token)
        if molphy is not None:
            # molphy-style bootstrap: (A:0.11,B:0.22):0.33[100]
            self._emit(Element.BOOTSTRAP, molphy.group(1))
            return self._next(CONTROL_DELIMITERS)
        return token

    def _end_node(self, token: str) -> Optional[str]:
        if token == ")":
            if self._depth == 0:
                raise StructuralError("Parse error: unbalanced parentheses")
            self.sink.end(Element.NODE)
            self._depth -= 1
            # Closing into the label position of an internal node.
            self._leaf_flag = False
            self._state = ParserState.NAMING_NODE
            return self._next(NAME_DELIMITERS)

        if token == ",":
            self.sink.end(Element.NODE)
            self._state = ParserState.NEW_NODE
            return self._next(NEW_NODE_DELIMITERS)

        if token == ";":
            if self._depth != 0:
                raise StructuralError("Parse error: unbalanced parentheses")
            self.sink.end(Element.NODE)
            self.sink.end(Element.TREE)
            self._state = ParserState.TERMINAL
            return self._next(TERMINAL_DELIMITERS)

        raise StructuralError(
            f"Parse error: expected ';', ')' or ',' but found {token!r}"
        )

    def _terminal(self, token: str) -> Optional[str]:
        raise StructuralError(
            f"Parse error: unexpected trailing content after ';': {token!r}"
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _emit(self, element: Element, text: str) -> None:
        self.sink.start(element)
        self.sink.characters(text)
        self.sink.end(element)

    def _next(self, delimiters: str) -> Optional[str]:
        try:
            return next_token(self._cursor, delimiters)
        except TokenizationError as e:
            if self._state is ParserState.TERMINAL:
                raise StructuralError(
                    "Parse error: unexpected trailing content after ';': "
                    f"{e.remaining!r}"
                ) from e
            if self._depth > 0:
                raise StructuralError("Parse error: unbalanced parentheses") from e
            raise

    def _finish(self) -> None:
        """Close whatever the input left open when it ran out."""
        if self._state is ParserState.TERMINAL and not self.sink.is_open(Element.TREE):
            return
        if self._depth != 0:
            raise StructuralError("Parse error: unbalanced parentheses")

        logger.debug("Input ended in state %s; closing open tree", self._state.value)
        if self.sink.is_open(Element.NODE):
            self.sink.end(Element.NODE)
        if self.sink.is_open(Element.TREE):
            self.sink.end(Element.TREE)
        self._state = ParserState.TERMINAL
