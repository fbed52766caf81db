"""Recognizers whose backend answers with a tagged copy of its input.

The article is cut into sentence-aligned chunks, each chunk is cleaned
and sent to the backend, and every tagged chunk is then aligned with the
original (uncleaned) chunk to recover mention offsets.
"""

import subprocess
from abc import abstractmethod
from typing import Any, Sequence

from pydantic import BaseModel

from mentionschema import Article, Mentions, MentionType

from mentionkit.builders import MentionBuilder
from mentionkit.config import RecognizerConfig
from mentionkit.logging import setup_logging
from mentionkit.pipeline.alignment import DEFAULT_IGNORED_TAGS, TagAligner
from mentionkit.pipeline.caching import MentionsCacheInterface
from mentionkit.pipeline.chunking import SentenceChunker, TextChunk
from mentionkit.pipeline.interfaces import RecognizerInterface
from mentionkit.resources import LanguageResources
from mentionkit.text import clean_text

logger = setup_logging()

DEFAULT_TAG_MAP: dict[str, MentionType] = {
    "fonc": MentionType.FUNCTION,
    "loc": MentionType.LOCATION,
    "org": MentionType.ORGANIZATION,
    "pers": MentionType.PERSON,
    "prod": MentionType.PRODUCTION,
    "time": MentionType.DATE,
}

# message returned by the Nero tagger when its punctuation pre-processing crashes
NERO_ERROR_MESSAGE = "The cook with the punctuation has failed: please contact the administrator"


class TaggedChunk(BaseModel):
    """One chunk as sent to the backend and as returned by it."""

    model_config = {"frozen": True}

    chunk: TextChunk
    sent: str
    annotated: str


class TaggedTextRecognizer(RecognizerInterface):
    """Base class for backends returning their input with inline markers.

    Subclasses implement :meth:`annotate` and may override the class
    attributes to describe their marker vocabulary.

    Attributes:
        tag_map: Marker name to mention type.
        ignored_tags: Markers that produce no mention.
        error_sentinels: Strings whose presence in the output means the
            backend failed on that chunk; such chunks yield no mention.
        clean_input: Whether chunks go through :func:`clean_text` before
            being sent.
    """

    tag_map: dict[str, MentionType] = DEFAULT_TAG_MAP
    ignored_tags: frozenset[str] = DEFAULT_IGNORED_TAGS
    error_sentinels: tuple[str, ...] = ()
    clean_input: bool = True

    @abstractmethod
    def annotate(self, text: str) -> str:
        """Send one chunk to the backend and return the tagged text."""

    def supported_types(self) -> frozenset[MentionType]:
        return frozenset(self.tag_map.values())

    def backend_settings(self) -> dict[str, Any]:
        return {
            "tag_map": {tag: mention_type.value for tag, mention_type in self.tag_map.items()},
            "ignored_tags": sorted(self.ignored_tags),
            "error_sentinels": list(self.error_sentinels),
            "clean_input": self.clean_input,
        }

    def invoke(self, article: Article) -> list[TaggedChunk]:
        chunker = SentenceChunker(self.config.chunking.max_size)
        result: list[TaggedChunk] = []
        for chunk in chunker.chunk(article):
            sent = clean_text(chunk.content) if self.clean_input else chunk.content
            logger.debug(f"{self.name}: processing chunk {chunk.chunk_index} ({len(sent)} chars)")
            result.append(TaggedChunk(chunk=chunk, sent=sent, annotated=self.annotate(sent)))
        return result

    def raw_to_text(self, raw: list[TaggedChunk]) -> str:
        return "\n".join(tagged.annotated for tagged in raw)

    def convert(self, article: Article, raw: list[TaggedChunk]) -> Mentions:
        builder = MentionBuilder(article=article, source=self.name)
        aligner = TagAligner(self.tag_map, self.ignored_tags)
        mentions = Mentions(source=self.name)
        for tagged in raw:
            sentinel = next((s for s in self.error_sentinels if s in tagged.annotated), None)
            if sentinel is not None:
                logger.warning(f'{self.name}: chunk {tagged.chunk.chunk_index} failed, backend returned "{sentinel}"')
                continue
            if not tagged.annotated.strip():
                logger.warning(f"{self.name}: backend returned an empty string for chunk {tagged.chunk.chunk_index}")
                continue
            outcome = aligner.align(tagged.chunk.content, tagged.annotated, builder, tagged.chunk.start_offset)
            mentions.extend(outcome.unwrap())
        return mentions


class CommandTaggedRecognizer(TaggedTextRecognizer):
    """Tagged-text recognizer piping each chunk through an external command.

    The command reads the cleaned chunk on its standard input and writes
    the tagged text on its standard output.

    Args:
        name: Name of the recognizer (source of its mentions).
        command: Program and arguments, e.g. ``["nero", "--stdin"]``.
        timeout: Seconds allowed per chunk.
        tag_map: Overrides the default marker vocabulary.
        error_sentinels: Output strings signalling a failed chunk.
    """

    def __init__(
        self,
        name: str,
        command: Sequence[str],
        timeout: float = 60.0,
        tag_map: dict[str, MentionType] | None = None,
        error_sentinels: Sequence[str] = (NERO_ERROR_MESSAGE,),
        config: RecognizerConfig | None = None,
        cache: MentionsCacheInterface | None = None,
        resources: LanguageResources | None = None,
    ):
        super().__init__(config=config, cache=cache, resources=resources)
        self._name = name
        self.command = list(command)
        self.timeout = timeout
        if tag_map is not None:
            self.tag_map = dict(tag_map)
        self.error_sentinels = tuple(error_sentinels)

    @property
    def name(self) -> str:
        return self._name

    def backend_settings(self) -> dict[str, Any]:
        return {**super().backend_settings(), "command": self.command}

    def annotate(self, text: str) -> str:
        """Run the command on ``text``.

        Raises:
            RuntimeError: If the command exits with a non-zero status.
            subprocess.TimeoutExpired: If it runs longer than ``timeout``.
        """
        result = subprocess.run(
            self.command,
            input=text,
            capture_output=True,
            text=True,
            check=False,
            timeout=self.timeout,
        )
        if result.returncode != 0:
            raise RuntimeError(f"{self.command[0]} exited with status {result.returncode}: {result.stderr.strip()}")
        return result.stdout
