"""
Newick format parser module for phylogenetic trees.

This module provides the tokenizer, the input normalizer and the state machine
that turns Newick/NHX strings into build events.
"""

from .tokenizer import Cursor, next_token
from .normalizer import NormalizedNewick, normalize_newick, split_trees
from .events import Element, Event, EventRecorder, EventSink
from .newick_parser import NewickParser, ParserState

__all__ = [
    "Cursor",
    "next_token",
    "NormalizedNewick",
    "normalize_newick",
    "split_trees",
    "Element",
    "Event",
    "EventRecorder",
    "EventSink",
    "NewickParser",
    "ParserState",
]
