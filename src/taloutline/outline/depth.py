"""Block nesting depth for procedure and sub-procedure bodies."""

from taloutline.outline.declarations import count_keyword

BLOCK_OPEN = "begin"
BLOCK_CLOSE = "end"


class BlockDepthTracker:
    """Counts ``begin``/``end`` keywords to find where a body ends.

    A body ends on a line that holds at least one ``end`` and leaves the
    depth at zero or below. Lines holding only ``begin`` never end a body,
    nor do lines whose counts cancel out without an ``end``.
    """

    __slots__ = ("depth",)

    def __init__(self) -> None:
        self.depth = 0

    @property
    def opened(self) -> bool:
        """Whether a block is currently open."""
        return self.depth > 0

    def feed(self, line: str) -> bool:
        """Account for one comment-stripped line; return True when the body is complete."""
        self.depth += count_keyword(line, BLOCK_OPEN)
        closes = count_keyword(line, BLOCK_CLOSE)
        if closes == 0:
            return False
        self.depth -= closes
        return self.depth <= 0
