"""Combination of several recognizers into one authoritative result.

A :class:`Combiner` runs each of its recognizers on the article, keeps
from each result only the types that recognizer declares, and hands the
per-recognizer results to a :class:`MergeStrategy`. The combiner is a
recognizer itself, so its results are cached the same way and a
combiner can be used wherever a recognizer is expected.

Typical usage:
    ```python
    combiner = Combiner(
        "straight",
        [dates_recognizer, nero_recognizer],
        strategy=StraightMerge(),
    )
    mentions = combiner.recognize(article)
    ```
"""

from abc import ABC, abstractmethod
from typing import Sequence

from mentionschema import Article, Mentions, MentionType

from mentionkit.config import RecognizerConfig
from mentionkit.logging import setup_logging
from mentionkit.pipeline.caching import MentionsCacheInterface
from mentionkit.pipeline.interfaces import RecognizerInterface
from mentionkit.resources import LanguageResources

logger = setup_logging()


class MergeStrategy(ABC):
    """Reduces per-recognizer results to a single collection."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Short name, part of the combiner identity."""

    @abstractmethod
    def merge(
        self, results: Sequence[tuple[RecognizerInterface, Mentions]], source: str
    ) -> Mentions:
        """Merge the results, given in the order the recognizers were registered.

        Args:
            results: Each recognizer with its (type-filtered) mentions.
            source: Name of the produced collection.
        """


class StraightMerge(MergeStrategy):
    """Priority merge: earlier recognizers are authoritative.

    Every mention of the highest-priority recognizer is kept. Each
    following recognizer contributes only mentions of types no previous
    recognizer handles, and only those not overlapping an already kept
    mention.

    Args:
        priorities: Recognizer names from highest to lowest priority.
            Recognizers not listed come after, in registration order.
    """

    def __init__(self, priorities: Sequence[str] = ()):
        self.priorities = list(priorities)

    @property
    def name(self) -> str:
        if not self.priorities:
            return "straight"
        return f"straight({','.join(self.priorities)})"

    def _ordered(self, results: Sequence[tuple[RecognizerInterface, Mentions]]):
        rank = {name: i for i, name in enumerate(self.priorities)}
        return sorted(results, key=lambda pair: rank.get(pair[0].name, len(rank)))

    def merge(self, results: Sequence[tuple[RecognizerInterface, Mentions]], source: str) -> Mentions:
        merged = Mentions(source=source)
        claimed: set[MentionType] = set()
        for index, (recognizer, mentions) in enumerate(self._ordered(results)):
            for mention in mentions:
                if index == 0:
                    merged.add(mention)
                elif mention.type not in claimed and not merged.is_overlapping(mention):
                    merged.add(mention)
                else:
                    logger.debug(f"{source}: {recognizer.name} mention discarded: {mention}")
            claimed |= recognizer.supported_types()
        merged.sort_by_position()
        return merged


class Combiner(RecognizerInterface):
    """A recognizer delegating to several others and merging their results.

    Any failure of a delegate aborts the whole combination: results of
    the other recognizers are not returned.

    Args:
        name: Name of the combiner (source of the merged collection).
        recognizers: Delegates, in priority order unless the strategy says otherwise.
        strategy: How results are merged; :class:`StraightMerge` by default.
    """

    def __init__(
        self,
        name: str,
        recognizers: Sequence[RecognizerInterface],
        strategy: MergeStrategy | None = None,
        config: RecognizerConfig | None = None,
        cache: MentionsCacheInterface | None = None,
        resources: LanguageResources | None = None,
    ):
        if not recognizers:
            raise ValueError("A combiner needs at least one recognizer")
        super().__init__(config=config, cache=cache, resources=resources)
        self._name = name
        self.recognizers = list(recognizers)
        self.strategy = strategy or StraightMerge()

    @property
    def name(self) -> str:
        return self._name

    @property
    def identity(self) -> str:
        subs = "+".join(r.identity for r in self.recognizers)
        return f"{self.name}_{self.strategy.name}[{subs}]"

    def supported_types(self) -> frozenset[MentionType]:
        return frozenset().union(*(r.supported_types() for r in self.recognizers))

    def supports_language(self, language) -> bool:
        return any(r.supports_language(language) for r in self.recognizers)

    def set_sub_cache_enabled(self, enabled: bool) -> None:
        """Turn result caching on or off for every delegate, recursively."""
        for recognizer in self.recognizers:
            recognizer.cache_enabled = enabled
            if isinstance(recognizer, Combiner):
                recognizer.set_sub_cache_enabled(enabled)

    def invoke(self, article: Article) -> list[tuple[RecognizerInterface, Mentions]]:
        results = []
        for recognizer in self.recognizers:
            mentions = recognizer.recognize(article)
            handled = recognizer.supported_types()
            removed = mentions.retain(lambda m: m.type in handled)
            if removed:
                logger.debug(f"{self.name}: {len(removed)} mentions of unhandled types dropped from {recognizer.name}")
            results.append((recognizer, mentions))
        return results

    def raw_to_text(self, raw: list[tuple[RecognizerInterface, Mentions]]) -> str:
        return "\n".join(f"{recognizer.identity}: {len(mentions)} mentions" for recognizer, mentions in raw)

    def convert(self, article: Article, raw: list[tuple[RecognizerInterface, Mentions]]) -> Mentions:
        return self.strategy.merge(raw, source=self.name)

    def postprocess(self, article: Article, mentions: Mentions) -> None:
        mentions.sort_by_position()

