"""Recognizer interface: the contract every recognition backend implements.

Recognition of one article happens in two phases:

- **Invoke**: call the backend (external service, subprocess, in-process
  model) and get back its raw output, whatever its shape.
- **Convert**: turn that raw output into a :class:`Mentions` collection
  whose spans point into the article raw text. Conversion is pure and
  deterministic given the article and the raw output.

:meth:`RecognizerInterface.recognize` wraps both phases with result
caching and post-processing (trimming, noise filtering, redundancy
resolution, sorting), so concrete recognizers only implement ``invoke``,
``convert`` and a capability description.

Typical flow:
    1. A cached result for ``(article.identity, recognizer.identity)`` is returned as is
    2. ``invoke(article)`` produces the raw backend output
    3. ``convert(article, raw)`` produces the mentions
    4. The mentions are post-processed, cached and returned
"""

import hashlib
import json
from abc import ABC, abstractmethod
from typing import Any

from mentionschema import Article, ArticleLanguage, Mentions, MentionType, RecognitionFailed

from mentionkit.config import RecognizerConfig
from mentionkit.logging import setup_logging
from mentionkit.noise import NoiseFilter
from mentionkit.pipeline.caching import FileBasedMentionsCache, InMemoryMentionsCache, MentionsCacheInterface
from mentionkit.redundancy import resolve_redundancy, trim_mentions
from mentionkit.resources import LanguageResources

logger = setup_logging()


class RecognizerInterface(ABC):
    """Detect mentions in articles using one backend (or several, for combiners).

    Recognizers hold configuration and a cache but no per-article state,
    so one instance can process any number of articles one after the
    other. Do not share an instance between threads working on the same
    article: cache writes are not synchronised.

    Args:
        config: Post-processing and caching settings.
        cache: Where results are stored. Defaults to a file cache under
            ``config.cache.cache_dir`` if set, to an in-memory cache otherwise.
        resources: Word lists for the noise filter. Defaults to the bundled lists.
    """

    def __init__(
        self,
        config: RecognizerConfig | None = None,
        cache: MentionsCacheInterface | None = None,
        resources: LanguageResources | None = None,
    ):
        self.config = config or RecognizerConfig()
        if cache is None:
            cache_dir = self.config.cache.cache_dir
            cache = FileBasedMentionsCache(cache_dir) if cache_dir is not None else InMemoryMentionsCache()
        self.cache = cache
        self.cache_enabled = self.config.cache.enabled
        self.noise_filter = NoiseFilter(resources or LanguageResources.load(), self.config.noise)

    @property
    @abstractmethod
    def name(self) -> str:
        """Short backend name, also used as the source of the produced mentions."""

    @property
    def identity(self) -> str:
        """Deterministic identifier encoding the name and every setting that affects results."""
        identity = f"{self.name}_{self.config.describe()}"
        settings = self.backend_settings()
        if settings:
            encoded = json.dumps(settings, sort_keys=True, default=str).encode("utf-8")
            identity += f"_{hashlib.sha256(encoded).hexdigest()[:12]}"
        return identity

    def backend_settings(self) -> dict[str, Any]:
        """Backend settings that change the produced mentions, digested into :attr:`identity`."""
        return {}

    @abstractmethod
    def supported_types(self) -> frozenset[MentionType]:
        """Mention types this recognizer can detect."""

    def supported_languages(self) -> frozenset[ArticleLanguage]:
        return frozenset(ArticleLanguage)

    def supports_language(self, language: ArticleLanguage | None) -> bool:
        return language is not None and language in self.supported_languages()

    @abstractmethod
    def invoke(self, article: Article) -> Any:
        """Call the backend on ``article`` and return its raw output.

        Raises:
            Exception: Any failure; :meth:`recognize` reports it as RecognitionFailed.
        """

    @abstractmethod
    def convert(self, article: Article, raw: Any) -> Mentions:
        """Turn the raw backend output into mentions of ``article``.

        Raises:
            UnknownTag: If the output holds a label that cannot be mapped.
            AlignmentError: If the output cannot be reconciled with the article text.
        """

    def raw_to_text(self, raw: Any) -> str:
        """Text form of the raw output, written when ``output_raw_results`` is on."""
        return str(raw)

    def postprocess(self, article: Article, mentions: Mentions) -> None:
        """Clean a freshly converted result in place."""
        if self.config.trim:
            trim_mentions(mentions)
        self.noise_filter.filter(mentions, article.language)
        if self.config.no_overlap:
            resolve_redundancy(mentions)
        mentions.sort_by_position()

    def recognize(self, article: Article) -> Mentions:
        """Detect the mentions of ``article``.

        Returns:
            The mentions, sorted by position.

        Raises:
            RecognitionFailed: If the backend or the conversion of its output failed.
                No partial result is returned.
        """
        if self.cache_enabled:
            cached = self.cache.get(article.identity, self.identity)
            if cached is not None:
                logger.debug(f"{self.identity}: using cached mentions for {article.identity}")
                return cached

        if article.language is None:
            logger.warning(f"{self.identity}: the language of {article.identity} is unknown")
        elif not self.supports_language(article.language):
            logger.warning(f"{self.identity}: language {article.language.value} is not supported")

        try:
            raw = self.invoke(article)
            if self.config.cache.output_raw_results:
                self.cache.put_raw(article.identity, self.identity, self.raw_to_text(raw))
            mentions = self.convert(article, raw)
        except RecognitionFailed:
            raise
        except Exception as exc:
            logger.error(f"{self.identity}: recognition failed on {article.identity}: {exc}")
            raise RecognitionFailed(self.identity, exc) from exc

        self.postprocess(article, mentions)
        logger.info(f"{self.identity}: {len(mentions)} mentions detected in {article.identity}")

        if self.cache_enabled:
            self.cache.put(article.identity, self.identity, mentions)
        return mentions
