"""
Preprocessing of raw Newick text before it reaches the state machine.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional

_QUOTED = re.compile(r'("[^"]*")')
_WHITESPACE = re.compile(r"\s+")
_LEADING_COMMENT = re.compile(r"^\[([^\]]*)\]")
_SCORE = re.compile(r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")


@dataclass(frozen=True)
class NormalizedNewick:
    """Normalized tree text plus the score taken from a leading comment."""

    text: str
    score: Optional[float] = None


def _dequote(quoted: str) -> str:
    # '"  Homo sapiens "' -> 'Homo sapiens'
    return quoted[1:-1].strip()


def _parse_score(comment: str) -> Optional[float]:
    comment = _WHITESPACE.sub("", comment).replace("lh=", "", 1)
    match = _SCORE.search(comment)
    if match is None:
        return None
    return float(match.group(0))


def normalize_newick(text: str) -> NormalizedNewick:
    """
    Normalize one tree's worth of Newick text.

    - whitespace outside double quotes is removed
    - quoted spans lose their quotes and surrounding inner whitespace
    - a leading ``[...]`` comment is removed and read as the tree score
    - a terminating ``;`` is appended when missing

    Args:
        text: Raw text of a single tree.

    Returns:
        NormalizedNewick with the cleaned text and optional score.

    Example:
        >>> normalize_newick('[lh=-12.5] ( "Homo  sapiens" , B ) ')
        NormalizedNewick(text='(Homo  sapiens,B);', score=-12.5)
    """
    parts = _QUOTED.split(text)
    cleaned: List[str] = []
    for i, part in enumerate(parts):
        # re.split with one group: odd indices are the quoted spans
        if i % 2:
            cleaned.append(_dequote(part))
        else:
            cleaned.append(_WHITESPACE.sub("", part))
    normalized = "".join(cleaned)

    score: Optional[float] = None
    match = _LEADING_COMMENT.match(normalized)
    if match is not None:
        score = _parse_score(match.group(1))
        normalized = normalized[match.end() :]

    if not normalized.endswith(";"):
        normalized += ";"
    return NormalizedNewick(text=normalized, score=score)


def split_trees(text: str) -> List[str]:
    """
    Split a multi-tree text into one chunk per tree.

    Every ``;`` outside double quotes and square brackets closes a tree. The
    terminator stays attached to its chunk; blank chunks are dropped.
    """
    chunks: List[str] = []
    start = 0
    bracket_depth = 0
    in_quotes = False
    for i, char in enumerate(text):
        if char == '"':
            in_quotes = not in_quotes
        elif in_quotes:
            continue
        elif char == "[":
            bracket_depth += 1
        elif char == "]" and bracket_depth:
            bracket_depth -= 1
        elif char == ";" and not bracket_depth:
            chunks.append(text[start : i + 1])
            start = i + 1
    chunks.append(text[start:])
    return [chunk for chunk in chunks if chunk.strip() and chunk.strip() != ";"]
