from __future__ import annotations

from typing import Optional

from treeio.exceptions import TokenizationError


class Cursor:
    """
    Read position over an immutable Newick string.

    The text never changes; only ``offset`` moves forward. A cursor belongs to
    exactly one parse call.
    """

    __slots__ = ("text", "offset")

    def __init__(self, text: str, offset: int = 0):
        self.text = text
        self.offset = offset

    @property
    def remaining(self) -> str:
        return self.text[self.offset :]

    def skip_whitespace(self) -> None:
        text = self.text
        offset = self.offset
        while offset < len(text) and text[offset].isspace():
            offset += 1
        self.offset = offset

    def at_end(self) -> bool:
        return self.offset >= len(self.text)

    def __repr__(self) -> str:
        return f"Cursor(offset={self.offset}, remaining={self.remaining!r})"


def next_token(cursor: Cursor, delimiters: str) -> Optional[str]:
    """
    Pull the next token from the cursor.

    The token ends at the earliest position where any delimiter character
    occurs. A delimiter at the very start is returned as a one-character token.

    Args:
        cursor: Shared cursor, advanced past the returned token.
        delimiters: Characters that may end the token.

    Returns:
        The token, or None at end of input.

    Raises:
        TokenizationError: If none of the delimiters occurs ahead.

    Example:
        >>> c = Cursor("  ab,cd")
        >>> next_token(c, ",")
        'ab'
        >>> c.remaining
        ',cd'
    """
    cursor.skip_whitespace()
    if cursor.at_end():
        return None

    text = cursor.text
    start = cursor.offset
    index = -1
    for delimiter in delimiters:
        pos = text.find(delimiter, start)
        if pos >= 0 and (index < 0 or pos < index):
            index = pos
    if index < 0:
        raise TokenizationError(delimiters, cursor.remaining)

    if index == start:
        cursor.offset = start + 1
        return text[start]
    cursor.offset = index
    return text[start:index]
