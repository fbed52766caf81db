"""Language-dependent word lists used to discard noisy mentions.

The bundled lists live next to this module, one word per line, under
``excluded/<lang>.txt`` (stop words) and ``pronouns/<lang>.txt``. Lines
starting with ``#`` and blank lines are ignored; comparisons are
case-insensitive.
"""

from importlib import resources as importlib_resources
from typing import Iterable

from mentionschema import ArticleLanguage

from mentionkit.logging import setup_logging

logger = setup_logging()

EXCLUDED = "excluded"
PRONOUNS = "pronouns"


def _normalize(words: Iterable[str]) -> frozenset[str]:
    return frozenset(w.strip().lower() for w in words if w.strip() and not w.strip().startswith("#"))


class LanguageResources:
    """Stop words and pronouns per language, loaded lazily and cached.

    Example:
        ```python
        resources = LanguageResources.load()
        resources.is_pronoun("Elle", ArticleLanguage.FR)  # True
        ```
    """

    def __init__(self, loader=None):
        self._loader = loader
        self._lists: dict[tuple[str, ArticleLanguage], frozenset[str]] = {}

    @classmethod
    def load(cls) -> "LanguageResources":
        """Resources read on first use from the lists bundled with the package."""
        return cls(loader=_read_bundled_list)

    @classmethod
    def from_lists(
        cls,
        excluded: dict[ArticleLanguage, Iterable[str]] | None = None,
        pronouns: dict[ArticleLanguage, Iterable[str]] | None = None,
    ) -> "LanguageResources":
        """Resources built from in-memory lists; missing languages are empty."""
        result = cls()
        for kind, lists in ((EXCLUDED, excluded or {}), (PRONOUNS, pronouns or {})):
            for language, words in lists.items():
                result._lists[(kind, language)] = _normalize(words)
        return result

    def words(self, kind: str, language: ArticleLanguage) -> frozenset[str]:
        key = (kind, language)
        if key not in self._lists:
            self._lists[key] = self._loader(kind, language) if self._loader else frozenset()
        return self._lists[key]

    def is_excluded(self, text: str, language: ArticleLanguage) -> bool:
        return text.lower() in self.words(EXCLUDED, language)

    def is_pronoun(self, text: str, language: ArticleLanguage) -> bool:
        return text.lower() in self.words(PRONOUNS, language)


def _read_bundled_list(kind: str, language: ArticleLanguage) -> frozenset[str]:
    filename = f"{language.value.lower()}.txt"
    try:
        content = importlib_resources.files(__name__).joinpath(kind).joinpath(filename).read_text(encoding="utf-8")
    except OSError as exc:
        logger.warning(f"Could not read the {kind} list for {language.value} ({exc}), using an empty list")
        return frozenset()
    return _normalize(content.splitlines())
