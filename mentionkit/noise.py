"""Removal of mentions that are almost always recognition noise."""

from mentionschema import ArticleLanguage, Mention, Mentions

from mentionkit.config import NoiseFilterConfig
from mentionkit.logging import setup_logging
from mentionkit.resources import LanguageResources
from mentionkit.text import has_no_letter

logger = setup_logging()


class NoiseFilter:
    """Discards stop words, pronouns and letter-less mentions.

    Checks run in that order, each one only when enabled in the config.
    The stop-word and pronoun checks need a language; when it is unknown
    only the length and number checks apply.
    """

    def __init__(self, resources: LanguageResources, config: NoiseFilterConfig | None = None):
        self.resources = resources
        self.config = config or NoiseFilterConfig()

    def reason(self, mention: Mention, language: ArticleLanguage | None) -> str | None:
        """Why ``mention`` should be dropped, or None if it should be kept."""
        text = mention.text
        if self.config.exclusion_on and language is not None and self.resources.is_excluded(text, language):
            return "excluded word"
        if self.config.ignore_pronouns and (
            len(text) <= 1 or (language is not None and self.resources.is_pronoun(text, language))
        ):
            return "pronoun"
        if self.config.ignore_numbers and has_no_letter(text):
            return "number"
        return None

    def filter(self, mentions: Mentions, language: ArticleLanguage | None) -> list[Mention]:
        """Remove noisy mentions from ``mentions`` in place.

        Returns:
            The removed mentions.
        """

        def keep(mention: Mention) -> bool:
            reason = self.reason(mention, language)
            if reason is not None:
                logger.debug(f"Mention {mention} removed ({reason})")
            return reason is None

        return mentions.retain(keep)
