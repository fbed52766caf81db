"""Tests for combining several recognizers with the straight merge strategy.

This module verifies:
- Priority merge: the first recognizer is authoritative, later ones only
  fill in unclaimed types without overlapping
- Filtering of mentions a recognizer does not declare
- Failure propagation, caching and identities
"""

import string

import pytest

from mentionschema import Article, ArticleLanguage, MentionType, RecognitionFailed

from mentionkit.combiner import Combiner, StraightMerge
from mentionkit.config import RecognizerConfig

from tests.conftest import FailingRecognizer, FakeRecognizer

TEXT = string.ascii_letters[:40]


@pytest.fixture
def letters() -> Article:
    return Article(raw_text=TEXT, language=ArticleLanguage.EN, article_id="letters")


@pytest.fixture
def dates(config, resources) -> FakeRecognizer:
    return FakeRecognizer("dates", [MentionType.DATE], [(MentionType.DATE, 0, 10)], config=config, resources=resources)


@pytest.fixture
def nero(config, resources) -> FakeRecognizer:
    return FakeRecognizer(
        "nero",
        [MentionType.LOCATION, MentionType.PERSON, MentionType.ORGANIZATION],
        [(MentionType.PERSON, 5, 15), (MentionType.ORGANIZATION, 20, 30)],
        config=config,
        resources=resources,
    )


def positions(mentions) -> list[tuple[MentionType, int, int]]:
    return [(m.type, m.start, m.end) for m in mentions]


class TestStraightMerge:
    def test_first_recognizer_is_authoritative(self, letters, dates, nero, config, resources):
        combiner = Combiner("straight", [dates, nero], config=config, resources=resources)
        mentions = combiner.recognize(letters)
        assert positions(mentions) == [
            (MentionType.DATE, 0, 10),
            (MentionType.ORGANIZATION, 20, 30),
        ]
        assert mentions.source == "straight"

    def test_undeclared_types_dropped(self, letters, nero, config, resources):
        chatty = FakeRecognizer(
            "dates",
            [MentionType.DATE],
            [(MentionType.DATE, 0, 10), (MentionType.PERSON, 32, 38)],
            config=config,
            resources=resources,
        )
        mentions = Combiner("straight", [chatty, nero], config=config, resources=resources).recognize(letters)
        assert (MentionType.PERSON, 32, 38) not in positions(mentions)

    def test_claimed_types_not_refilled(self, letters, config, resources):
        first = FakeRecognizer(
            "first", [MentionType.DATE, MentionType.PERSON], [(MentionType.DATE, 0, 10)], config=config, resources=resources
        )
        second = FakeRecognizer(
            "second", [MentionType.PERSON], [(MentionType.PERSON, 20, 30)], config=config, resources=resources
        )
        mentions = Combiner("straight", [first, second], config=config, resources=resources).recognize(letters)
        assert positions(mentions) == [(MentionType.DATE, 0, 10)]

    def test_priorities_override_order(self, letters, dates, nero, config, resources):
        strategy = StraightMerge(priorities=["nero"])
        assert strategy.name == "straight(nero)"
        mentions = Combiner("straight", [dates, nero], strategy=strategy, config=config, resources=resources).recognize(
            letters
        )
        assert positions(mentions) == [
            (MentionType.PERSON, 5, 15),
            (MentionType.ORGANIZATION, 20, 30),
        ]

    def test_first_recognizer_keeps_its_own_overlaps(self, letters, config, resources):
        """Overlaps inside the authoritative result are its own business."""
        raw = RecognizerConfig(no_overlap=False)
        first = FakeRecognizer(
            "first",
            [MentionType.PERSON],
            [(MentionType.PERSON, 0, 10), (MentionType.PERSON, 5, 15)],
            config=raw,
            resources=resources,
        )
        mentions = Combiner("straight", [first], config=config, resources=resources).recognize(letters)
        assert len(mentions) == 2


class TestCombiner:
    def test_failure_aborts(self, letters, dates, config, resources):
        broken = FailingRecognizer("broken", [MentionType.PERSON], config=config, resources=resources)
        combiner = Combiner("straight", [dates, broken], config=config, resources=resources)
        with pytest.raises(RecognitionFailed) as exc_info:
            combiner.recognize(letters)
        assert exc_info.value.backend == broken.identity
        assert combiner.cache.get_stats()["size"] == 0

    def test_result_cached(self, letters, dates, nero, config, resources):
        combiner = Combiner("straight", [dates, nero], config=config, resources=resources)
        first = combiner.recognize(letters)
        second = combiner.recognize(letters)
        assert second.model_dump_json() == first.model_dump_json()
        assert (dates.invocations, nero.invocations) == (1, 1)

    def test_sub_caches(self, letters, dates, nero, config, resources):
        combiner = Combiner("straight", [dates, nero], config=config, resources=resources)
        combiner.cache_enabled = False
        combiner.recognize(letters)
        combiner.recognize(letters)
        assert dates.invocations == 1

        combiner.set_sub_cache_enabled(False)
        combiner.recognize(letters)
        assert (dates.invocations, nero.invocations) == (2, 2)

    def test_sub_caches_recursive(self, dates, nero, config, resources):
        inner = Combiner("inner", [nero], config=config, resources=resources)
        outer = Combiner("outer", [dates, inner], config=config, resources=resources)
        outer.set_sub_cache_enabled(False)
        assert not inner.cache_enabled
        assert not nero.cache_enabled
        assert outer.cache_enabled

    def test_identity_includes_delegates(self, dates, nero, config, resources):
        combiner = Combiner("straight", [dates, nero], config=config, resources=resources)
        assert combiner.identity == f"straight_straight[{dates.identity}+{nero.identity}]"

    def test_supported_types_union(self, dates, nero, config, resources):
        combiner = Combiner("straight", [dates, nero], config=config, resources=resources)
        assert combiner.supported_types() == frozenset(
            {MentionType.DATE, MentionType.LOCATION, MentionType.PERSON, MentionType.ORGANIZATION}
        )
        assert combiner.supports_language(ArticleLanguage.EN)
        assert not combiner.supports_language(ArticleLanguage.FR)

    def test_needs_recognizers(self, config, resources):
        with pytest.raises(ValueError):
            Combiner("empty", [], config=config, resources=resources)
