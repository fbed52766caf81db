"""Tests for the recognizer template: caching, post-processing, error reporting."""

import logging

import pytest

from mentionschema import Article, ArticleLanguage, MentionType, RecognitionFailed

from mentionkit.config import CacheConfig, RecognizerConfig
from mentionkit.pipeline.caching import FileBasedMentionsCache, InMemoryMentionsCache

from tests.conftest import SAMPLE_TEXT, FailingRecognizer, FakeRecognizer

DETECTIONS = [
    (MentionType.LOCATION, 64, 68),  # Lyon
    (MentionType.PERSON, 44, 46),  # He
    (MentionType.PERSON, 0, 15),  # Emmanuel Macron
    (MentionType.DATE, 32, 42),  # 3 May 2017
]


class TestRecognize:
    """Tests for RecognizerInterface.recognize."""

    def test_result_filtered_and_sorted(self, article, config, resources):
        recognizer = FakeRecognizer("fake", [MentionType.PERSON, MentionType.LOCATION, MentionType.DATE], DETECTIONS, config=config, resources=resources)
        mentions = recognizer.recognize(article)
        assert [m.text for m in mentions] == ["Emmanuel Macron", "3 May 2017", "Lyon"]
        assert mentions.source == "fake"
        assert all(m.source == "fake" for m in mentions)
        assert all(m.check_text(article.raw_text) for m in mentions)

    def test_overlaps_resolved(self, article, config, resources):
        detections = [(MentionType.PERSON, 0, 8), (MentionType.PERSON, 0, 15)]
        recognizer = FakeRecognizer("fake", [MentionType.PERSON], detections, config=config, resources=resources)
        assert [m.text for m in recognizer.recognize(article)] == ["Emmanuel Macron"]

    def test_overlaps_kept_when_disabled(self, article, resources):
        config = RecognizerConfig(no_overlap=False)
        detections = [(MentionType.PERSON, 0, 8), (MentionType.PERSON, 0, 15)]
        recognizer = FakeRecognizer("fake", [MentionType.PERSON], detections, config=config, resources=resources)
        assert [m.text for m in recognizer.recognize(article)] == ["Emmanuel", "Emmanuel Macron"]

    def test_trim(self, article, resources):
        config = RecognizerConfig(trim=True)
        recognizer = FakeRecognizer("fake", [MentionType.LOCATION], [(MentionType.LOCATION, 23, 29)], config=config, resources=resources)
        (mention,) = recognizer.recognize(article)
        assert mention.text == "Lyon"
        assert (mention.start, mention.end) == (24, 28)

    def test_identity_encodes_configuration(self, resources):
        a = FakeRecognizer("fake", [MentionType.PERSON], resources=resources)
        b = FakeRecognizer("fake", [MentionType.PERSON], resources=resources)
        c = FakeRecognizer("fake", [MentionType.PERSON], config=RecognizerConfig(trim=True), resources=resources)
        assert a.identity == b.identity
        assert a.identity != c.identity
        assert a.identity.startswith("fake_")


class TestRecognizeCaching:
    """Caching idempotence."""

    def test_second_call_uses_cache(self, article, config, resources):
        recognizer = FakeRecognizer("fake", [MentionType.PERSON], DETECTIONS, config=config, resources=resources)
        first = recognizer.recognize(article)
        second = recognizer.recognize(article)
        assert recognizer.invocations == 1
        assert second.model_dump_json() == first.model_dump_json()

    def test_cache_disabled(self, article, uncached_config, resources):
        recognizer = FakeRecognizer("fake", [MentionType.PERSON], DETECTIONS, config=uncached_config, resources=resources)
        recognizer.recognize(article)
        recognizer.recognize(article)
        assert recognizer.invocations == 2

    def test_different_configurations_do_not_share_results(self, article, resources):
        cache = InMemoryMentionsCache()
        a = FakeRecognizer("fake", [MentionType.PERSON], DETECTIONS, cache=cache, resources=resources)
        b = FakeRecognizer("fake", [MentionType.PERSON], DETECTIONS, config=RecognizerConfig(no_overlap=False), cache=cache, resources=resources)
        a.recognize(article)
        b.recognize(article)
        assert (a.invocations, b.invocations) == (1, 1)
        assert cache.get_stats()["size"] == 2

    def test_file_cache_survives_instances(self, article, resources, tmp_path):
        config = RecognizerConfig(cache=CacheConfig(cache_dir=tmp_path))
        first = FakeRecognizer("fake", [MentionType.PERSON], DETECTIONS, config=config, resources=resources)
        assert isinstance(first.cache, FileBasedMentionsCache)
        expected = first.recognize(article)

        second = FakeRecognizer("fake", [MentionType.PERSON], DETECTIONS, config=config, resources=resources)
        result = second.recognize(article)
        assert second.invocations == 0
        assert result.model_dump_json() == expected.model_dump_json()

    def test_articles_cached_separately(self, config, resources):
        recognizer = FakeRecognizer("fake", [MentionType.PERSON], [(MentionType.PERSON, 0, 4)], config=config, resources=resources)
        recognizer.recognize(Article(raw_text="Anne was there.", language=ArticleLanguage.EN))
        recognizer.recognize(Article(raw_text="Bobo was there.", language=ArticleLanguage.EN))
        assert recognizer.invocations == 2


class TestRecognizeErrors:
    def test_backend_failure_reported(self, article, config, resources):
        recognizer = FailingRecognizer("broken", [MentionType.PERSON], config=config, resources=resources)
        with pytest.raises(RecognitionFailed) as exc_info:
            recognizer.recognize(article)
        assert exc_info.value.backend == recognizer.identity
        assert isinstance(exc_info.value.cause, ConnectionError)
        assert recognizer.cache.get_stats()["size"] == 0

    def test_conversion_failure_reported(self, config, resources):
        """A span outside the article is a conversion failure."""
        recognizer = FakeRecognizer("fake", [MentionType.PERSON], [(MentionType.PERSON, 0, 500)], config=config, resources=resources)
        with pytest.raises(RecognitionFailed):
            recognizer.recognize(Article(raw_text=SAMPLE_TEXT, language=ArticleLanguage.EN))

    def test_unsupported_language_warns(self, config, resources, caplog):
        recognizer = FakeRecognizer("fake", [MentionType.PERSON], DETECTIONS, config=config, resources=resources)
        with caplog.at_level(logging.WARNING):
            mentions = recognizer.recognize(Article(raw_text=SAMPLE_TEXT, language=ArticleLanguage.FR))
        assert "not supported" in caplog.text
        assert len(mentions) > 0

    def test_unknown_language_warns(self, config, resources, caplog):
        recognizer = FakeRecognizer("fake", [MentionType.PERSON], DETECTIONS, config=config, resources=resources)
        with caplog.at_level(logging.WARNING):
            recognizer.recognize(Article(raw_text=SAMPLE_TEXT))
        assert "unknown" in caplog.text
