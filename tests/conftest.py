"""Test fixtures and fake recognizers.

This module provides:
- Fake implementations of the recognizer interfaces (offset lists, tagged
  text) that count how many times their backend is invoked, so caching
  behaviour can be asserted
- A recognizer whose backend always fails
- Pytest fixtures for articles, word lists and configurations that keep
  every result in memory

Fake backends never touch the network or the filesystem; tests that need
a file cache use ``tmp_path``.
"""

from typing import Callable, Sequence

import pytest

from mentionschema import Article, ArticleLanguage, Mention, Mentions, MentionType

from mentionkit.config import CacheConfig, NoiseFilterConfig, RecognizerConfig
from mentionkit.pipeline.interfaces import RecognizerInterface
from mentionkit.pipeline.tagged import TaggedTextRecognizer
from mentionkit.resources import LanguageResources

SAMPLE_TEXT = "Emmanuel Macron visited Lyon on 3 May 2017. He met the mayor of Lyon."


class FakeRecognizer(RecognizerInterface):
    """Recognizer returning a fixed list of ``(type, start, end)`` detections.

    Args:
        name: Recognizer name.
        types: Types the recognizer declares.
        detections: What the "backend" finds, whatever the article.
    """

    def __init__(
        self,
        name: str,
        types: Sequence[MentionType],
        detections: Sequence[tuple[MentionType, int, int]] = (),
        **kwargs,
    ):
        super().__init__(**kwargs)
        self._name = name
        self._types = frozenset(types)
        self.detections = list(detections)
        self.invocations = 0

    @property
    def name(self) -> str:
        return self._name

    def supported_types(self) -> frozenset[MentionType]:
        return self._types

    def supported_languages(self) -> frozenset[ArticleLanguage]:
        return frozenset({ArticleLanguage.EN})

    def invoke(self, article: Article) -> list[tuple[MentionType, int, int]]:
        self.invocations += 1
        return list(self.detections)

    def convert(self, article: Article, raw: list[tuple[MentionType, int, int]]) -> Mentions:
        mentions = Mentions(source=self.name)
        for mention_type, start, end in raw:
            mentions.add(Mention.from_text(article.raw_text, mention_type, start, end, source=self.name))
        return mentions


class FailingRecognizer(FakeRecognizer):
    """Recognizer whose backend is unreachable."""

    def invoke(self, article: Article):
        self.invocations += 1
        raise ConnectionError("backend unreachable")


class FakeTaggedRecognizer(TaggedTextRecognizer):
    """Tagged-text recognizer whose backend is a plain function of the sent text."""

    def __init__(self, tagger: Callable[[str], str], name: str = "tagger", **kwargs):
        super().__init__(**kwargs)
        self._name = name
        self.tagger = tagger
        self.sent: list[str] = []

    @property
    def name(self) -> str:
        return self._name

    def annotate(self, text: str) -> str:
        self.sent.append(text)
        return self.tagger(text)


def make_mention(
    text: str,
    start: int,
    end: int,
    mention_type: MentionType = MentionType.PERSON,
    source: str = "test",
) -> Mention:
    """Build a mention over ``text[start:end]``."""
    return Mention.from_text(text, mention_type, start, end, source=source)


@pytest.fixture
def article() -> Article:
    """English sample article with a stable identity."""
    return Article(raw_text=SAMPLE_TEXT, language=ArticleLanguage.EN, article_id="sample")


@pytest.fixture
def resources() -> LanguageResources:
    """Small in-memory word lists."""
    return LanguageResources.from_lists(
        excluded={ArticleLanguage.EN: ["the", "May"], ArticleLanguage.FR: ["le", "la"]},
        pronouns={ArticleLanguage.EN: ["he", "she"], ArticleLanguage.FR: ["il", "elle"]},
    )


@pytest.fixture
def config() -> RecognizerConfig:
    """In-memory caching, every noise check on."""
    return RecognizerConfig(
        noise=NoiseFilterConfig(),
        cache=CacheConfig(enabled=True),
    )


@pytest.fixture
def uncached_config() -> RecognizerConfig:
    return RecognizerConfig(cache=CacheConfig(enabled=False))
