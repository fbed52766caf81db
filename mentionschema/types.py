"""Closed taxonomies: mention types and article languages."""

from enum import Enum


class MentionKind(str, Enum):
    """Whether a mention type designates a named thing or a parsed value."""

    NAMED = "named"
    """Mentions refer to a named real-world entity (person, place, ...)."""

    VALUED = "valued"
    """Mentions carry a parsed domain value (e.g. a date or period)."""


class MentionType(str, Enum):
    """Types of mentions the recognizers can report."""

    DATE = "DATE"
    FUNCTION = "FUNCTION"
    LOCATION = "LOCATION"
    MEETING = "MEETING"
    ORGANIZATION = "ORGANIZATION"
    PERSON = "PERSON"
    PRODUCTION = "PRODUCTION"

    @property
    def kind(self) -> MentionKind:
        return _KINDS[self]

    @property
    def is_named(self) -> bool:
        return self.kind is MentionKind.NAMED

    @property
    def is_valued(self) -> bool:
        return self.kind is MentionKind.VALUED


_KINDS: dict[MentionType, MentionKind] = {
    MentionType.DATE: MentionKind.VALUED,
    MentionType.FUNCTION: MentionKind.NAMED,
    MentionType.LOCATION: MentionKind.NAMED,
    MentionType.MEETING: MentionKind.NAMED,
    MentionType.ORGANIZATION: MentionKind.NAMED,
    MentionType.PERSON: MentionKind.NAMED,
    MentionType.PRODUCTION: MentionKind.NAMED,
}


class ArticleLanguage(str, Enum):
    """Languages an article can be written in."""

    EN = "EN"
    FR = "FR"
