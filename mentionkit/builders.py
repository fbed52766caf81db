from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from mentionschema import Article, Mention, MentionType, Period

from mentionkit.dates import parse_date


class MentionBuilder(BaseModel):
    """Builds mentions of one article on behalf of one source.

    The mention text is always sliced from the article, and DATE mentions
    get their value parsed in the article language.
    """

    model_config = ConfigDict(frozen=True)

    article: Article
    source: str

    def build(self, mention_type: MentionType, start: int, end: int) -> Mention:
        """Build a mention over ``[start, end)`` of the article text.

        Raises:
            InvalidSpan: If ``(start, end)`` does not fit the article text.
        """
        value: Period | None = None
        if mention_type.is_valued:
            value = parse_date(
                self.article.raw_text[start:end], self.article.language, reference=self.article.publishing_date
            )
        return Mention.from_text(self.article.raw_text, mention_type, start, end, self.source, value=value)

    def rebuild(self, mention: Mention) -> Mention:
        """Re-parse the value of a mention whose span was adjusted."""
        return self.build(mention.type, mention.start, mention.end)
