"""Recognizer interfaces, result caching and backend adapters."""

from mentionkit.pipeline.alignment import AlignmentOutcome, TagAligner
from mentionkit.pipeline.caching import (
    FileBasedMentionsCache,
    InMemoryMentionsCache,
    MentionsCacheInterface,
)
from mentionkit.pipeline.chunking import SentenceChunker, TextChunk
from mentionkit.pipeline.interfaces import RecognizerInterface
from mentionkit.pipeline.offsets import SpanListRecognizer
from mentionkit.pipeline.tagged import (
    CommandTaggedRecognizer,
    TaggedChunk,
    TaggedTextRecognizer,
)

__all__ = [
    # Core interface
    "RecognizerInterface",
    # Adapters
    "TaggedTextRecognizer",
    "CommandTaggedRecognizer",
    "TaggedChunk",
    "SpanListRecognizer",
    # Alignment and chunking
    "TagAligner",
    "AlignmentOutcome",
    "SentenceChunker",
    "TextChunk",
    # Caching interfaces and implementations
    "MentionsCacheInterface",
    "InMemoryMentionsCache",
    "FileBasedMentionsCache",
]
