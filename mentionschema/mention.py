"""Mentions: detected occurrences of an entity or value at a text span.

A mention is the output unit of every recognizer. It records:

- the **type** of what was detected (see :class:`MentionType`);
- the **span** it occupies in the article's raw text;
- the **text**, which must equal ``raw_text[span.start:span.end]``;
- the **source**, i.e. the recognizer (or combiner) that produced it;
- for valued types, the parsed **value** (``None`` when parsing failed);
- for named types, an optional linked :class:`NamedEntity`.

Mentions are frozen Pydantic models. Equality and hashing only consider
the position, the text and the source, so two recognizers reporting the
same span with different types are still distinct mentions, while the
same mention re-read from a cache compares equal to the original.
"""

import re

from pydantic import BaseModel, Field, model_validator

from mentionschema.entity import NamedEntity
from mentionschema.period import Period
from mentionschema.span import Span
from mentionschema.types import MentionType

# unicode whitespace and ASCII punctuation
_EDGE_NOISE = re.compile(r"[\s!-/:-@\[-`{-~]")


class Mention(BaseModel, frozen=True):
    """A single detected occurrence of an entity or value.

    Example:
        ```python
        text = "Emmanuel Macron visited Lyon."
        mention = Mention.from_text(text, MentionType.PERSON, 0, 15, source="nero")
        assert mention.text == "Emmanuel Macron"
        assert mention.check_text(text)
        ```
    """

    type: MentionType = Field(description="Type of the detected mention.")
    span: Span = Field(description="Position of the mention in the article raw text.")
    text: str = Field(description="Exact substring of the raw text at span.")
    source: str = Field(description="Identifier of the recognizer that produced the mention.")
    value: Period | None = Field(default=None, description="Parsed value, valued types only.")
    entity: NamedEntity | None = Field(default=None, description="Linked entity, named types only.")

    @model_validator(mode="after")
    def _check_consistency(self) -> "Mention":
        if len(self.text) != self.span.length:
            raise ValueError(f"Text {self.text!r} does not fit span {self.span} ({self.span.length} chars)")
        if self.value is not None and not self.type.is_valued:
            raise ValueError(f"{self.type.value} mentions cannot carry a value")
        if self.entity is not None:
            if not self.type.is_named:
                raise ValueError(f"{self.type.value} mentions cannot be linked to a named entity")
            if self.entity.type != self.type:
                raise ValueError(f"Trying to associate a {self.entity.type.value} entity to a {self.type.value} mention")
        return self

    @classmethod
    def from_text(
        cls,
        raw_text: str,
        mention_type: MentionType,
        start: int,
        end: int,
        source: str,
        value: Period | None = None,
    ) -> "Mention":
        """Build a mention whose text is sliced from ``raw_text``.

        Raises:
            InvalidSpan: If ``(start, end)`` is malformed or exceeds the text.
        """
        span = Span(start=start, end=end)
        span.check_within(raw_text)
        return cls(type=mention_type, span=span, text=raw_text[start:end], source=source, value=value)

    @property
    def start(self) -> int:
        return self.span.start

    @property
    def end(self) -> int:
        return self.span.end

    @property
    def length(self) -> int:
        return self.span.length

    def check_text(self, raw_text: str) -> bool:
        """Round-trip check: does the stored text still match the document?"""
        return self.end <= len(raw_text) and raw_text[self.start : self.end] == self.text

    def overlaps_with(self, other: "Mention") -> bool:
        return self.span.overlaps(other.span)

    def contains(self, other: "Mention") -> bool:
        return self.span.contains(other.span)

    def has_same_position(self, other: "Mention") -> bool:
        return self.start == other.start and self.end == other.end

    def precedes(self, other: "Mention") -> bool:
        return self.start < other.start

    def link(self, entity: NamedEntity) -> "Mention":
        """Return a copy of this mention associated with ``entity``."""
        if entity.type != self.type:
            raise ValueError(f"Trying to associate a {entity.type.value} entity to a {self.type.value} mention")
        return self.model_copy(update={"entity": entity})

    def sort_key(self) -> tuple[int, int, str]:
        return (self.start, self.end, self.text)

    def _reframe(self, lead: int, trail: int) -> "Mention | None":
        if lead == 0 and trail == 0:
            return self
        end = self.end - trail
        start = self.start + lead
        if start >= end:
            return None
        return self.model_copy(
            update={"span": Span(start=start, end=end), "text": self.text[lead : len(self.text) - trail]}
        )

    def corrected(self) -> "Mention":
        """Drop whitespace and punctuation captured at both ends of the span.

        Returns ``self`` unchanged if nothing would be left.
        """
        lead = 0
        while lead < len(self.text) and _EDGE_NOISE.match(self.text[lead]):
            lead += 1
        trail = 0
        while trail < len(self.text) - lead and _EDGE_NOISE.match(self.text[-1 - trail]):
            trail += 1
        return self._reframe(lead, trail) or self

    def trimmed(self) -> "Mention | None":
        """Drop every non-alphanumeric character at both ends of the span.

        Returns None when the mention contains no letter or digit at all.
        """
        lead = 0
        while lead < len(self.text) and not self.text[lead].isalnum():
            lead += 1
        if lead == len(self.text):
            return None
        trail = 0
        while not self.text[-1 - trail].isalnum():
            trail += 1
        return self._reframe(lead, trail)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Mention):
            return NotImplemented
        return self.span == other.span and self.text == other.text and self.source == other.source

    def __hash__(self) -> int:
        return hash((self.start, self.end, self.text, self.source))

    def __str__(self) -> str:
        result = f'MENTION(STRING="{self.text}", TYPE={self.type.value}, POS={self.span}, SOURCE={self.source}'
        if self.value is not None:
            result += f", VALUE=({self.value})"
        return result + ")"
