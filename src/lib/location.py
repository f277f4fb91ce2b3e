"""
Line index for a text buffer

Answers "which line holds this character position" for a buffer, so that
positions reported by the markup parser and the script tokenizer can be
turned into source-map coordinates.

Boundary convention: for every line break the index records where its
terminator starts ("\\n", or the "\\r" of "\\r\\n") and where the next line
starts. A query counts the terminators starting at or before the position,
i.e. a line terminator is counted as part of the line it opens. This makes
"\\r\\n" and "\\n" buffers give the same answers.

Example:
    >>> index = LineIndex("<script>\\nfoo\\n</script>")
    >>> index.line_get(0)
    0
    >>> index.line_get(8)     # the first "\\n"
    1
    >>> index.line_get(9)     # "f"
    1
"""

from bisect import bisect_right
from typing import List


class LineIndex:
    """
    Sorted tables of line break positions for one buffer

    Built once per buffer and read-only afterwards.

    Attributes:
        breaks: Start position of every line terminator, ascending
        starts: Start position of every line after the first, ascending
    """

    def __init__(self, buf: str) -> None:
        """
        Scan buf once and record every line break

        Args:
            buf: Text to index
        """
        if not isinstance(buf, str):
            raise TypeError('Buffer must be a string.')

        self.breaks: List[int] = []
        self.starts: List[int] = []

        index = buf.find('\n')
        while index != -1:
            crlf = index > 0 and buf[index - 1] == '\r'
            self.breaks.append(index - 1 if crlf else index)
            self.starts.append(index + 1)
            index = buf.find('\n', index + 1)

    def __len__(self) -> int:
        return len(self.breaks)

    def line_get(self, index: int) -> int:
        """
        Get the 0-based line number for a character position

        Args:
            index: 0-based character position

        Returns:
            Number of line terminators starting at or before index

        Raises:
            TypeError: If index is not an integer
            ValueError: If index is negative
        """
        self.index_check(index)
        return bisect_right(self.breaks, index)

    def column_get(self, index: int) -> int:
        """
        Get the 0-based column of a character position

        The column is measured from the start of the line holding index.
        """
        self.index_check(index)
        line = bisect_right(self.starts, index)
        if line == 0:
            return index
        return index - self.starts[line - 1]

    def index_get(self, line: int, column: int) -> int:
        """
        Convert a 1-based line and 0-based column back to a position

        This is the coordinate system html.parser reports with getpos().

        Args:
            line: 1-based line number
            column: 0-based column within that line

        Returns:
            0-based character position
        """
        if line < 1 or line > len(self.starts) + 1:
            raise ValueError(f"Line {line} is outside of the buffer.")
        if line == 1:
            return column
        return self.starts[line - 2] + column

    @staticmethod
    def index_check(index: int) -> None:
        """Validate a position argument"""
        if isinstance(index, bool) or not isinstance(index, int):
            raise TypeError('Index must be an integer.')
        if index < 0:
            raise ValueError('Index must not be negative.')
