"""Recognizers whose backend reports mentions as offset records.

In-process NER pipelines (and most web APIs) return a list of records
such as ``{"start": 0, "end": 15, "entity_group": "PER", "score": 0.99}``
with offsets into the text they were given. Conversion maps the labels
to mention types and shifts the offsets back into the article.
"""

from typing import Any, Callable, Iterable, Mapping

from mentionschema import Article, Mentions, MentionType, UnknownTag

from mentionkit.builders import MentionBuilder
from mentionkit.config import RecognizerConfig
from mentionkit.logging import setup_logging
from mentionkit.pipeline.caching import MentionsCacheInterface
from mentionkit.pipeline.chunking import SentenceChunker
from mentionkit.pipeline.interfaces import RecognizerInterface
from mentionkit.resources import LanguageResources

logger = setup_logging()

# labels of the usual CoNLL-style NER models
DEFAULT_LABEL_MAP: dict[str, MentionType] = {
    "per": MentionType.PERSON,
    "person": MentionType.PERSON,
    "loc": MentionType.LOCATION,
    "location": MentionType.LOCATION,
    "gpe": MentionType.LOCATION,
    "org": MentionType.ORGANIZATION,
    "organization": MentionType.ORGANIZATION,
    "date": MentionType.DATE,
    "time": MentionType.DATE,
}
DEFAULT_IGNORED_LABELS = frozenset({"misc", "o"})


def _normalize_label(label: str) -> str:
    s = (label or "").strip().lower()
    # B-PER / I-PER token labels
    if len(s) > 2 and s[1] == "-" and s[0] in "bies":
        s = s[2:]
    return s


class SpanListRecognizer(RecognizerInterface):
    """Recognizer wrapping a callable that returns offset records for a text.

    Args:
        name: Name of the recognizer (source of its mentions).
        pipeline: Called once per chunk with the chunk text; returns records
            holding ``start``, ``end`` and a label under ``label``,
            ``entity_group`` or ``entity``.
        label_map: Label (case-insensitive, IOB prefix ignored) to mention type.
        ignored_labels: Labels producing no mention.
    """

    def __init__(
        self,
        name: str,
        pipeline: Callable[[str], Iterable[Mapping[str, Any]]],
        label_map: Mapping[str, MentionType] | None = None,
        ignored_labels: Iterable[str] = DEFAULT_IGNORED_LABELS,
        config: RecognizerConfig | None = None,
        cache: MentionsCacheInterface | None = None,
        resources: LanguageResources | None = None,
    ):
        super().__init__(config=config, cache=cache, resources=resources)
        self._name = name
        self._pipeline = pipeline
        self._label_map = {k.lower(): v for k, v in (label_map or DEFAULT_LABEL_MAP).items()}
        self._ignored_labels = frozenset(label.lower() for label in ignored_labels)

    @property
    def name(self) -> str:
        return self._name

    def supported_types(self) -> frozenset[MentionType]:
        return frozenset(self._label_map.values())

    def backend_settings(self) -> dict[str, Any]:
        return {
            "label_map": {label: mention_type.value for label, mention_type in self._label_map.items()},
            "ignored_labels": sorted(self._ignored_labels),
        }

    def invoke(self, article: Article) -> list[dict[str, Any]]:
        """Run the pipeline chunk by chunk; returned offsets are relative to the article."""
        records: list[dict[str, Any]] = []
        for chunk in SentenceChunker(self.config.chunking.max_size).chunk(article):
            for record in self._pipeline(chunk.content):
                label = record.get("label") or record.get("entity_group") or record.get("entity") or ""
                records.append(
                    {
                        "start": chunk.start_offset + int(record["start"]),
                        "end": chunk.start_offset + int(record["end"]),
                        "label": str(label),
                    }
                )
        return records

    def convert(self, article: Article, raw: list[dict[str, Any]]) -> Mentions:
        builder = MentionBuilder(article=article, source=self.name)
        mentions = Mentions(source=self.name)
        seen: set[tuple[int, int, MentionType]] = set()
        for record in raw:
            label = _normalize_label(record["label"])
            if label in self._ignored_labels:
                continue
            mention_type = self._label_map.get(label)
            if mention_type is None:
                raise UnknownTag(record["label"], f"record {record}")
            mention = builder.build(mention_type, record["start"], record["end"])
            corrected = mention.corrected()
            if corrected is not mention:
                mention = builder.rebuild(corrected)
            key = (mention.start, mention.end, mention.type)
            if key in seen:
                continue
            seen.add(key)
            mentions.add(mention)
        return mentions
