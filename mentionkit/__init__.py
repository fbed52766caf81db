"""
Mention recognition toolkit: run named-entity backends on articles and merge their results.

The value types (mentions, spans, articles) live in :mod:`mentionschema`;
this package holds the behaviour:

    - recognizer contract, caching and backend adapters (:mod:`mentionkit.pipeline`)
    - noise filtering and redundancy resolution
    - combination of several recognizers
    - configuration and logging

Typical usage:

    from mentionkit import Combiner, CommandTaggedRecognizer, load_config

    config = load_config()
    nero = CommandTaggedRecognizer("nero", ["nero"], config=config)
    mentions = Combiner("main", [dates, nero], config=config).recognize(article)
"""

from mentionkit.builders import MentionBuilder
from mentionkit.combiner import Combiner, MergeStrategy, StraightMerge
from mentionkit.config import (
    CacheConfig,
    ChunkingConfig,
    NoiseFilterConfig,
    RecognizerConfig,
    load_config,
)
from mentionkit.dates import parse_date
from mentionkit.noise import NoiseFilter
from mentionkit.pipeline import (
    AlignmentOutcome,
    CommandTaggedRecognizer,
    FileBasedMentionsCache,
    InMemoryMentionsCache,
    MentionsCacheInterface,
    RecognizerInterface,
    SpanListRecognizer,
    TagAligner,
    TaggedTextRecognizer,
)
from mentionkit.redundancy import resolve_redundancy, trim_mentions
from mentionkit.registry import RecognizerRegistry
from mentionkit.resources import LanguageResources

__all__ = [
    # Recognizers
    "RecognizerInterface",
    "TaggedTextRecognizer",
    "CommandTaggedRecognizer",
    "SpanListRecognizer",
    "RecognizerRegistry",
    # Combination
    "Combiner",
    "MergeStrategy",
    "StraightMerge",
    # Alignment
    "TagAligner",
    "AlignmentOutcome",
    "MentionBuilder",
    # Post-processing
    "NoiseFilter",
    "LanguageResources",
    "resolve_redundancy",
    "trim_mentions",
    "parse_date",
    # Caching
    "MentionsCacheInterface",
    "InMemoryMentionsCache",
    "FileBasedMentionsCache",
    # Configuration
    "RecognizerConfig",
    "NoiseFilterConfig",
    "CacheConfig",
    "ChunkingConfig",
    "load_config",
]
