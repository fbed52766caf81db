"""Half-open character intervals into a document's raw text."""

from pydantic import BaseModel, Field, model_validator

from mentionschema.errors import InvalidSpan


class Span(BaseModel, frozen=True):
    """A ``[start, end)`` interval of character offsets.

    The lower invariant ``0 <= start < end`` is checked at construction.
    The upper bound depends on the document the span points into and is
    checked with :meth:`check_within` whenever a span is bound to a text.

    Note that :meth:`overlaps` is inclusive at the boundaries: two spans
    that merely touch (``a.end == b.start``) are considered overlapping.
    """

    start: int = Field(description="Offset of the first character of the interval.")
    end: int = Field(description="Offset just past the last character of the interval.")

    @model_validator(mode="after")
    def _check_bounds(self) -> "Span":
        if self.start < 0 or self.start >= self.end:
            raise InvalidSpan(self.start, self.end)
        return self

    @property
    def length(self) -> int:
        return self.end - self.start

    def check_within(self, text: str) -> None:
        """Raise InvalidSpan if this span does not fit inside ``text``."""
        if self.end > len(text):
            raise InvalidSpan(self.start, self.end, len(text))

    def overlaps(self, other: "Span") -> bool:
        return (other.start <= self.end and other.end >= self.end) or (
            self.start <= other.end and self.end >= other.end
        )

    def contains(self, other: "Span") -> bool:
        return other.start >= self.start and other.end <= self.end

    def contains_position(self, position: int) -> bool:
        return self.start <= position <= self.end

    def sort_key(self) -> tuple[int, int]:
        return (self.start, self.end)

    def __str__(self) -> str:
        return f"({self.start},{self.end})"
