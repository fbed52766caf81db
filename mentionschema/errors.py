"""Error taxonomy shared by the schema and the recognition pipeline.

- **InvalidSpan**: malformed interval at construction time.
- **RecognitionFailed**: a backend invocation or its output conversion failed.
- **UnknownTag**: the tag-alignment converter met a marker it cannot map.
- **AlignmentError**: original and annotated texts cannot be reconciled.

``InvalidSpan`` does not derive from ``ValueError``: pydantic only wraps
``ValueError``/``AssertionError`` raised inside validators, so keeping it
outside that hierarchy lets it reach the caller unchanged.
"""


class MentionError(Exception):
    """Base class for every error raised by mentionschema and mentionkit."""


class InvalidSpan(MentionError):
    """A character interval violates ``0 <= start < end <= len(text)``."""

    def __init__(self, start: int, end: int, text_length: int | None = None):
        self.start = start
        self.end = end
        self.text_length = text_length
        if text_length is None:
            msg = f"Invalid span ({start},{end}): expected 0 <= start < end"
        else:
            msg = f"Invalid span ({start},{end}) for a text of length {text_length}"
        super().__init__(msg)


class UnknownTag(MentionError):
    """An annotation marker could not be mapped to a mention type."""

    def __init__(self, tag: str, context: str = ""):
        self.tag = tag
        self.context = context
        msg = f'Found an unknown tag: "{tag}"'
        if context:
            msg = f"{msg} at\n{context}"
        super().__init__(msg)


class AlignmentError(MentionError):
    """The annotated text diverges from the original text in a way that cannot be explained by cleaning."""


class RecognitionFailed(MentionError):
    """A recognizer could not produce mentions for an article.

    Attributes:
        backend: Identity of the recognizer (or combiner) that failed.
        cause: The underlying exception.
    """

    def __init__(self, backend: str, cause: BaseException):
        self.backend = backend
        self.cause = cause
        super().__init__(f"Recognizer {backend} failed: {cause}")
