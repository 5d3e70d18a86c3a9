"""Source position tracking.

SourcePosition is an immutable (line, column, offset) triple. All three
are zero-based. PositionTracker owns the mutable cursor of one run and
advances it as tokens consume raw text.

Thread Safety:
SourcePosition is frozen and safe to share. A PositionTracker belongs
to exactly one tokenizer run and must never be shared.

"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True, order=True)
class SourcePosition:
    """A point in the source text.

    Attributes:
        line: Line number (0-based)
        column: Characters since the last newline (0-based)
        offset: Characters since the start of the source (0-based)

    Examples:
            >>> SourcePosition(0, 4, 4)
        SourcePosition(line=0, column=4, offset=4)
            >>> str(SourcePosition(2, 1, 17))
            '2:1'

    """

    line: int = 0
    column: int = 0
    offset: int = 0

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"

    def to_dict(self) -> dict[str, int]:
        return {"line": self.line, "column": self.column, "offset": self.offset}


START = SourcePosition()


class PositionTracker:
    """Mutable cursor over one source string.

    The tracker never rewinds: every call to advance() moves the offset
    forward by the length of the consumed text.

    Usage:
            >>> tracker = PositionTracker("a\\nbc")
            >>> tracker.advance("a\\nb")
        SourcePosition(line=1, column=1, offset=3)
            >>> tracker.remainder
            'c'
    """

    __slots__ = ("_source", "_source_len", "_line", "_column", "_offset", "_remainder")

    def __init__(self, source: str) -> None:
        self._source = source
        self._source_len = len(source)
        self._line = 0
        self._column = 0
        self._offset = 0
        self._remainder: str | None = source

    @property
    def source(self) -> str:
        return self._source

    @property
    def offset(self) -> int:
        return self._offset

    @property
    def position(self) -> SourcePosition:
        """Snapshot of the current position."""
        return SourcePosition(self._line, self._column, self._offset)

    @property
    def remainder(self) -> str:
        """Unconsumed source text (sliced lazily, cached until next advance)."""
        if self._remainder is None:
            self._remainder = self._source[self._offset :]
        return self._remainder

    def is_eof(self) -> bool:
        """True when the whole source has been consumed."""
        return self._offset == self._source_len

    def matches(self, text: str) -> bool:
        """Check whether the unconsumed source starts with text."""
        return self._source.startswith(text, self._offset)

    def advance(self, raw: str) -> SourcePosition:
        """Consume raw from the front of the remaining source.

        Newlines embedded in raw bump the line count; the column becomes
        the length of the run after the last newline.

        Args:
            raw: Text to consume. Must equal the upcoming source text.

        Returns:
            Position immediately after the consumed text.

        Raises:
            ValueError: If raw does not match the upcoming source text.
        """
        if not raw:
            return self.position
        if not self._source.startswith(raw, self._offset):
            msg = f"cannot advance over {raw[:20]!r}: source differs at offset {self._offset}"
            raise ValueError(msg)

        newline_count = raw.count("\n")
        if newline_count:
            self._line += newline_count
            self._column = len(raw) - raw.rfind("\n") - 1
        else:
            self._column += len(raw)
        self._offset += len(raw)
        self._remainder = None
        return self.position
