"""Ordered, mutable collections of mentions.

A :class:`Mentions` collection is built once per (article, recognizer) or
(article, combiner) pair and is owned by exactly one call stack while it is
being built. Pipeline steps that merely refine a result (noise filtering,
redundancy resolution, trimming) edit the collection they are given in
place; every other step returns a new collection.

The collection serialises to JSON through Pydantic, and deserialising that
JSON reproduces identical spans, types, texts, sources, values and entity
links, which is what result caching relies on.
"""

from typing import Callable, Iterable, Iterator

from pydantic import BaseModel, Field

from mentionschema.mention import Mention
from mentionschema.types import MentionType


class Mentions(BaseModel):
    """Mentions detected in one article by one source.

    Attributes:
        source: Identifier of the recognizer or combiner that built the collection.
        items: The mentions, in insertion order until :meth:`sort_by_position` is called.

    Example:
        ```python
        mentions = Mentions(source="nero")
        mentions.add(Mention.from_text(text, MentionType.PERSON, 0, 15, source="nero"))
        mentions.retain(lambda m: m.type is MentionType.PERSON)
        mentions.sort_by_position()
        ```
    """

    source: str = Field(description="Recognizer or combiner that produced the collection.")
    items: list[Mention] = Field(default_factory=list, description="Mentions, ordered.")

    def __iter__(self) -> Iterator[Mention]:  # type: ignore[override]
        return iter(list(self.items))

    def __len__(self) -> int:
        return len(self.items)

    def __contains__(self, mention: object) -> bool:
        return mention in self.items

    def __getitem__(self, index: int) -> Mention:
        return self.items[index]

    def add(self, mention: Mention) -> None:
        """Append ``mention`` unless an equal one is already present."""
        if mention not in self.items:
            self.items.append(mention)

    def extend(self, mentions: Iterable[Mention]) -> None:
        for mention in mentions:
            self.add(mention)

    def remove(self, mention: Mention) -> None:
        """Remove ``mention`` (compared by position, text and source).

        Raises:
            ValueError: If the mention is not in the collection.
        """
        self.items.remove(mention)

    def replace(self, old: Mention, new: Mention) -> None:
        index = self.items.index(old)
        self.items[index] = new

    def clear(self) -> None:
        self.items.clear()

    def retain(self, predicate: Callable[[Mention], bool]) -> list[Mention]:
        """Keep only the mentions satisfying ``predicate``, in place.

        Returns:
            The removed mentions, in their original order.
        """
        kept: list[Mention] = []
        removed: list[Mention] = []
        for mention in self.items:
            (kept if predicate(mention) else removed).append(mention)
        self.items[:] = kept
        return removed

    def of_type(self, mention_type: MentionType) -> list[Mention]:
        return [m for m in self.items if m.type == mention_type]

    def types(self) -> set[MentionType]:
        return {m.type for m in self.items}

    def overlapping(self, mention: Mention) -> list[Mention]:
        """Every mention of the collection overlapping ``mention``."""
        return [m for m in self.items if m.overlaps_with(mention)]

    def first_overlapping(self, mention: Mention) -> Mention | None:
        for other in self.items:
            if other.overlaps_with(mention):
                return other
        return None

    def is_overlapping(self, mention: Mention) -> bool:
        return self.first_overlapping(mention) is not None

    def sort_by_position(self) -> None:
        """Sort by start, then end, then text."""
        self.items.sort(key=Mention.sort_key)

    def check_texts(self, raw_text: str) -> list[Mention]:
        """Return the mentions whose text no longer matches ``raw_text``."""
        return [m for m in self.items if not m.check_text(raw_text)]

    def copy_as(self, source: str | None = None) -> "Mentions":
        """Shallow copy (mentions are immutable), optionally under another source name."""
        return Mentions(source=source or self.source, items=list(self.items))
