"""
Text spans: read-only string values that are either a view into the input
buffer or an owned copy.

A borrowed span keeps a reference to the source string plus a range and only
materializes its text on demand. Substring operations always produce owned
spans, so a split never aliases the original buffer.

Author: Olivier Vitrac, PhD, HDR | olivier.vitrac@adservio.fr | Adservio | 2026-10-19
"""

from typing import Optional, Union


class TextSpan:
    """
    Immutable text value, borrowed (view) or owned (buffer).

    Equality and hashing use the text content only, so a borrowed span and an
    owned span with the same characters compare equal, and both compare equal
    to the plain ``str``.
    """

    __slots__ = ("_source", "_start", "_end", "_owned")

    def __init__(self, source: str, start: int = 0, end: Optional[int] = None, owned: bool = True):
        if end is None:
            end = len(source)
        if not 0 <= start <= end <= len(source):
            raise ValueError(f"Invalid span range {start}:{end} for source of length {len(source)}")
        self._source = source
        self._start = start
        self._end = end
        self._owned = owned

    # -- constructors -------------------------------------------------------

    @classmethod
    def borrowed(cls, source: str, start: int = 0, end: Optional[int] = None) -> "TextSpan":
        """View into ``source[start:end]``, valid as long as the source is."""
        return cls(source, start, end, owned=False)

    @classmethod
    def owned(cls, text: str) -> "TextSpan":
        """Owned buffer holding ``text``."""
        return cls(text, 0, len(text), owned=True)

    @classmethod
    def coerce(cls, value: Union[str, "TextSpan"]) -> "TextSpan":
        """Return ``value`` unchanged if it is a span, else an owned span."""
        if isinstance(value, TextSpan):
            return value
        if isinstance(value, str):
            return cls.owned(value)
        raise TypeError(f"Expected str or TextSpan, got {type(value).__name__}")

    # -- accessors ----------------------------------------------------------

    @property
    def is_borrowed(self) -> bool:
        return not self._owned

    @property
    def is_owned(self) -> bool:
        return self._owned

    @property
    def text(self) -> str:
        if self._start == 0 and self._end == len(self._source):
            return self._source
        return self._source[self._start:self._end]

    def substr(self, start: int, end: Optional[int] = None) -> "TextSpan":
        """Copy ``self[start:end]`` into an owned span."""
        length = len(self)
        if end is None:
            end = length
        if not 0 <= start <= end <= length:
            raise ValueError(f"Invalid substring range {start}:{end} for span of length {length}")
        return TextSpan.owned(self._source[self._start + start:self._start + end])

    def to_owned(self) -> "TextSpan":
        if self._owned:
            return self
        return TextSpan.owned(self.text)

    # -- dunder -------------------------------------------------------------

    def __len__(self) -> int:
        return self._end - self._start

    def __str__(self) -> str:
        return self.text

    def __repr__(self) -> str:
        mode = "owned" if self._owned else "borrowed"
        return f"TextSpan({self.text!r}, {mode})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, TextSpan):
            return self.text == other.text
        if isinstance(other, str):
            return self.text == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.text)

    def __bool__(self) -> bool:
        return self._end > self._start

    # immutable: copies share the instance
    def __copy__(self) -> "TextSpan":
        return self

    def __deepcopy__(self, memo) -> "TextSpan":
        return self
