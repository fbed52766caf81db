"""Tests for the recognizer registry."""

import pytest

from mentionschema import MentionType

from mentionkit.registry import RecognizerRegistry

from tests.conftest import FakeRecognizer


def fake_factory(**kwargs) -> FakeRecognizer:
    return FakeRecognizer("fake", [MentionType.PERSON], **kwargs)


class TestRecognizerRegistry:
    def test_create_builds_new_instances(self, config, resources):
        registry = RecognizerRegistry()
        registry.register("fake", fake_factory)
        first = registry.create("fake", config=config, resources=resources)
        second = registry.create("fake", config=config, resources=resources)
        assert isinstance(first, FakeRecognizer)
        assert first is not second
        assert first.config is config

    def test_duplicate_name_rejected(self):
        registry = RecognizerRegistry()
        registry.register("fake", fake_factory)
        with pytest.raises(ValueError, match="already registered"):
            registry.register("fake", fake_factory)

    def test_unknown_name(self):
        registry = RecognizerRegistry()
        registry.register("fake", fake_factory)
        with pytest.raises(KeyError, match="known: fake"):
            registry.create("nero")

    def test_names_and_membership(self):
        registry = RecognizerRegistry()
        registry.register("nero", fake_factory)
        registry.register("dates", fake_factory)
        assert registry.names() == ["dates", "nero"]
        assert "nero" in registry
        assert "spacy" not in registry
