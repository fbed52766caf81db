"""Article representation: the document mentions are extracted from.

An article is the only input of the recognition pipeline. Its raw text is
never modified; every mention span is expressed as offsets into it.
Retrieval (search engines, HTML readers) happens upstream and is not part
of this package.
"""

import hashlib
from datetime import datetime

from pydantic import BaseModel, Field

from mentionschema.types import ArticleLanguage


class Article(BaseModel, frozen=True):
    """A retrieved article, ready for mention recognition.

    Attributes:
        raw_text: The untouched text of the article.
        language: Language of the text, or None if unknown.
        publishing_date: Publication timestamp, if known.
        article_id: Caller-supplied identifier (URL slug, folder name, ...).
            When absent, :attr:`identity` derives one from the text.
        title: Optional title, informative only.
    """

    raw_text: str = Field(description="Untouched article text; all spans point into it.")
    language: ArticleLanguage | None = Field(default=None, description="Language of the article.")
    publishing_date: datetime | None = Field(default=None, description="Publication date, if known.")
    article_id: str | None = Field(default=None, description="Stable identifier used for caching.")
    title: str | None = Field(default=None, description="Article title if available.")

    @property
    def identity(self) -> str:
        """Deterministic identifier of this article, used in cache keys."""
        if self.article_id:
            return self.article_id
        digest = hashlib.sha256(self.raw_text.encode("utf-8")).hexdigest()
        return f"sha256-{digest[:16]}"
