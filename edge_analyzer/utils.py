"""Utility functions for the Edge analyzer."""

import bisect
from typing import Optional


def line_starts(text: str) -> list[int]:
    """Return the offset at which each line of ``text`` starts."""
    starts = [0]
    index = text.find("\n")
    while index != -1:
        starts.append(index + 1)
        index = text.find("\n", index + 1)
    return starts


class LineIndex:
    """Converts between string offsets and (line, column) positions.

    Lines and columns are 0-based; columns count code points.
    """

    def __init__(self, text: str):
        self.text = text
        self._starts = line_starts(text)

    @property
    def line_count(self) -> int:
        return len(self._starts)

    def position_at(self, offset: int) -> tuple[int, int]:
        """Convert an offset into a (line, column) pair, clamping to the text."""
        offset = max(0, min(offset, len(self.text)))
        line = bisect.bisect_right(self._starts, offset) - 1
        return (line, offset - self._starts[line])

    def offset_at(self, line: int, column: int) -> Optional[int]:
        """Convert a position into an offset.

        Returns None if the line does not exist or the column lies past the
        end of the line.
        """
        if line < 0 or line >= len(self._starts) or column < 0:
            return None
        start = self._starts[line]
        if line + 1 < len(self._starts):
            end = self._starts[line + 1] - 1  # the newline itself
        else:
            end = len(self.text)
        if start + column > end:
            return None
        return start + column
