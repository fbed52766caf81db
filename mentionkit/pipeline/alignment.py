"""Recovery of mention offsets from a tagged copy of the text.

Some backends do not return offsets: they return their input with inline
markers around the mentions (``<pers>Emmanuel Macron</pers> visited
<loc>Lyon</loc>.``). The text they saw had usually been cleaned first
(diacritics folded, quotes and repeated punctuation removed), and the
backend may itself have altered spacing or punctuation. The aligner walks
the original text and the tagged text side by side to find, for each
marker, the matching position in the original text:

- characters equal up to case and diacritics advance both cursors;
- otherwise any non-alphanumeric character is skipped, on either side;
- two different letters or digits mean the texts cannot be reconciled.

Opening markers push ``(tag, position in the original text)`` on a stack;
closing markers pop it and emit a mention over the recorded interval.
"""

from typing import Iterable, Mapping, NamedTuple

from pydantic import BaseModel, ConfigDict

from mentionschema import AlignmentError, Mention, MentionError, MentionType, UnknownTag

from mentionkit.builders import MentionBuilder
from mentionkit.logging import setup_logging
from mentionkit.text import chars_match_relaxed, highlight_position

logger = setup_logging()

DEFAULT_IGNORED_TAGS = frozenset({"amount", "unk"})


class _OpenMarker(NamedTuple):
    tag: str
    mention_type: MentionType | None
    start: int


class AlignmentOutcome(BaseModel):
    """Result of aligning one tagged chunk: the mentions found, or why it failed."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    mentions: tuple[Mention, ...] = ()
    error: MentionError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> list[Mention]:
        """Return the mentions, or raise the error that stopped the alignment.

        Raises:
            AlignmentError: If the texts could not be reconciled.
            UnknownTag: If the tagged text held an unmappable marker.
        """
        if self.error is not None:
            raise self.error
        return list(self.mentions)


class TagAligner:
    """Maps the markers of a tagged text onto positions of the original text.

    Args:
        tag_map: Marker name (case-insensitive) to mention type.
        ignored_tags: Marker names that are valid but produce no mention.

    Example:
        ```python
        aligner = TagAligner({"pers": MentionType.PERSON, "loc": MentionType.LOCATION})
        builder = MentionBuilder(article=article, source="nero")
        outcome = aligner.align(article.raw_text, "<pers>Emmanuel Macron</pers> visited <loc>Lyon</loc>.", builder)
        mentions = outcome.unwrap()
        ```
    """

    def __init__(self, tag_map: Mapping[str, MentionType], ignored_tags: Iterable[str] = DEFAULT_IGNORED_TAGS):
        self.tag_map = {tag.lower(): mention_type for tag, mention_type in tag_map.items()}
        self.ignored_tags = frozenset(tag.lower() for tag in ignored_tags)

    def align(self, original: str, annotated: str, builder: MentionBuilder, offset: int = 0) -> AlignmentOutcome:
        """Align ``annotated`` with ``original``, a piece of the article starting at ``offset``.

        Mention spans are expressed in article coordinates (``offset`` added)
        and stripped of surrounding whitespace and punctuation.
        """
        run = _AlignmentRun(self, original, annotated, builder, offset)
        try:
            run.run()
        except (AlignmentError, UnknownTag) as exc:
            return AlignmentOutcome(error=exc)
        return AlignmentOutcome(mentions=tuple(run.mentions))

    def resolve_tag(self, tag: str, context: str) -> MentionType | None:
        """Mention type of an opening marker, None for an ignored one.

        Raises:
            UnknownTag: If the marker is neither mapped nor ignored.
        """
        key = tag.strip().lower()
        if key in self.ignored_tags:
            return None
        if key in self.tag_map:
            return self.tag_map[key]
        if not key:
            logger.warning(f"Found an empty tag, settling for a date:\n{context}")
            return MentionType.DATE
        raise UnknownTag(tag, context)


class _AlignmentRun:
    """State of one alignment: both cursors, the marker stack, the mentions found so far."""

    def __init__(self, aligner: TagAligner, original: str, annotated: str, builder: MentionBuilder, offset: int):
        self.aligner = aligner
        self.original = original
        self.annotated = annotated
        self.builder = builder
        self.offset = offset
        self.i1 = 0
        self.i2 = 0
        self.stack: list[_OpenMarker] = []
        self.mentions: list[Mention] = []

    def run(self) -> None:
        while self.i1 < len(self.original) and self.original[self.i1] == "\n":
            self.i1 += 1
        while self.i2 < len(self.annotated) and self.annotated[self.i2] == "\n":
            self.i2 += 1

        while self.i1 < len(self.original) and self.i2 < len(self.annotated):
            if self.annotated[self.i2] == "<":
                self._read_marker()
            else:
                self._compare()

        self._finish()

    def _read_marker(self) -> None:
        marker_pos = self.i2
        close = self.annotated.find(">", marker_pos)
        if close < 0:
            raise AlignmentError(f"Unterminated tag:\n{highlight_position(marker_pos, self.annotated)}")
        content = self.annotated[marker_pos + 1 : close]
        self.i2 = close + 1
        if content.startswith("/"):
            self._close(content[1:], marker_pos)
        else:
            self._open(content, marker_pos)

    def _open(self, tag: str, marker_pos: int) -> None:
        context = highlight_position(marker_pos, self.annotated)
        mention_type = self.aligner.resolve_tag(tag, context)
        self.stack.append(_OpenMarker(tag, mention_type, self.i1))

    def _close(self, tag: str, marker_pos: int) -> None:
        if not self.stack:
            raise AlignmentError(
                f"Closing tag ({tag}) without opening tag:\n{highlight_position(marker_pos, self.annotated)}"
            )
        marker = self.stack.pop()
        if tag.lower() != marker.tag.lower():
            logger.warning(
                f"Opening tag ({marker.tag}) different from closing tag ({tag}):\n"
                f"{highlight_position(marker_pos, self.annotated)}"
            )
        if marker.mention_type is None:
            return
        if marker.start >= self.i1:
            logger.warning(f"Ignoring empty <{marker.tag}> mention at {self.offset + self.i1}")
            return

        mention = self.builder.build(marker.mention_type, self.offset + marker.start, self.offset + self.i1)
        corrected = mention.corrected()
        if corrected is not mention:
            mention = self.builder.rebuild(corrected)
        self.mentions.append(mention)

    def _compare(self) -> None:
        c1 = self.original[self.i1]
        c2 = self.annotated[self.i2]
        if chars_match_relaxed(c1, c2):
            self.i1 += 1
            self.i2 += 1
            return

        moved = False
        if not c1.isalnum():
            self.i1 += 1
            moved = True
        if not c2.isalnum():
            self.i2 += 1
            moved = True
        if not moved:
            raise AlignmentError(
                "Found an untreatable character:\n"
                f"{highlight_position(self.i1, self.original)}\n"
                f"{highlight_position(self.i2, self.annotated)}"
            )

    def _finish(self) -> None:
        while self.i1 < len(self.original) and not self.original[self.i1].isalnum():
            self.i1 += 1
        if self.i1 < len(self.original):
            raise AlignmentError(
                f"Didn't reach the end of the original text:\n{highlight_position(self.i1, self.original)}"
            )

        # markers left at the end still close mentions running to the end of the text
        while self.i2 < len(self.annotated):
            if self.annotated[self.i2] == "<":
                self._read_marker()
            elif not self.annotated[self.i2].isalnum():
                self.i2 += 1
            else:
                raise AlignmentError(
                    f"Didn't reach the end of the annotated text:\n{highlight_position(self.i2, self.annotated)}"
                )

        if self.stack:
            logger.warning(f"Tags left open at the end of the text: {', '.join(m.tag for m in self.stack)}")
