"""Value types for mention recognition: spans, mentions, entities, articles.

This package has no behaviour beyond validation and simple predicates; the
recognition pipeline lives in :mod:`mentionkit`.
"""

from mentionschema.article import Article
from mentionschema.entity import NamedEntity
from mentionschema.errors import (
    AlignmentError,
    InvalidSpan,
    MentionError,
    RecognitionFailed,
    UnknownTag,
)
from mentionschema.mention import Mention
from mentionschema.mentions import Mentions
from mentionschema.period import PartialDate, Period
from mentionschema.span import Span
from mentionschema.types import ArticleLanguage, MentionKind, MentionType

__all__ = [
    "Article",
    "ArticleLanguage",
    "AlignmentError",
    "InvalidSpan",
    "Mention",
    "MentionError",
    "MentionKind",
    "Mentions",
    "MentionType",
    "NamedEntity",
    "PartialDate",
    "Period",
    "RecognitionFailed",
    "Span",
    "UnknownTag",
]
