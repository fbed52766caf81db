"""String helpers for comparing, cleaning and splitting article text."""

import re
import unicodedata

PUNCTUATION = "'()<>:,-!.\";&@%+"

# sentence = run of text ended by . ! or ? (optionally followed by a quote), before a space or the end
_SENTENCE_PATTERN = re.compile(
    r"[^.!?\s][^.!?]*(?:[.!?](?!['\"]?\s|$)[^.!?]*)*[.!?]?['\"]?(?=\s|$)",
    re.MULTILINE,
)
_LETTER = re.compile(r"[^\W\d_]")

_REPEATED_PUNCT = re.compile(f"([{re.escape(PUNCTUATION)}])\\1+")
_NEWLINE_PUNCT = re.compile(f"[\n\r]([{re.escape(PUNCTUATION)}])")
_LEADING_PUNCT = re.compile(f"^[{re.escape(PUNCTUATION)}]")
_NEWLINE_SPACE = re.compile("[\n\r] ")


def remove_diacritics(text: str) -> str:
    """Strip combining marks: ``"Élysée"`` becomes ``"Elysee"``."""
    decomposed = unicodedata.normalize("NFD", text)
    return "".join(c for c in decomposed if not unicodedata.combining(c))


def fold_char(c: str) -> str:
    """Case- and diacritics-insensitive form of a single character."""
    folded = remove_diacritics(c)
    return (folded or c).casefold()


def chars_match_relaxed(c1: str, c2: str) -> bool:
    """Compare two characters ignoring case and diacritics."""
    return c1 == c2 or fold_char(c1) == fold_char(c2)


def has_no_letter(text: str) -> bool:
    return _LETTER.search(text) is None


def clean_text(text: str) -> str:
    """Normalise text before handing it to a fragile tagging backend.

    Diacritics are folded, double quotes and angle brackets become spaces
    (a literal ``<`` would read as a marker in the output), runs of the same
    punctuation mark are collapsed, and punctuation at the start of a line
    is pushed behind a space. The rules are reapplied until the text stops
    changing.
    """
    result = text
    while True:
        previous = result
        result = remove_diacritics(result)
        result = result.replace('"', " ").replace("<", " ").replace(">", " ")
        result = _REPEATED_PUNCT.sub(r"\1", result)
        result = _NEWLINE_PUNCT.sub(r" \1", result)
        result = _LEADING_PUNCT.sub(" ", result)
        result = _NEWLINE_SPACE.sub("  ", result)
        if result == previous:
            return result


def sentence_positions(text: str) -> list[int]:
    """Offsets of the first character of each sentence."""
    return [match.start() for match in _SENTENCE_PATTERN.finditer(text)]


def split_text(text: str, max_size: int) -> list[str]:
    """Break ``text`` into chunks of at most ``max_size`` characters.

    Chunks are only cut between sentences, and concatenating them gives
    back the original text.

    Raises:
        ValueError: If a single sentence is longer than ``max_size``.
    """
    result: list[str] = []
    start = 0
    prev_end = 0
    for match in _SENTENCE_PATTERN.finditer(text):
        cur_end = match.end()
        if cur_end - start > max_size and start != prev_end:
            result.append(text[start:prev_end])
            start = prev_end
        if cur_end - start > max_size:
            sentence = match.group()
            raise ValueError(
                f'The sentence "{sentence}" ({len(sentence)} chars) is too long to be split using max_size={max_size}'
            )
        prev_end = cur_end

    if start < len(text):
        result.append(text[start:])
    return result


def highlight_position(pos: int, text: str, window: int = 20) -> str:
    """Excerpt of ``text`` around ``pos`` with a caret under the position."""
    begin = max(0, pos - window)
    end = min(len(text), pos + window)
    prefix = "[...]" if begin > 0 else ""
    suffix = "[...]" if end < len(text) else ""
    excerpt = f"{prefix}{text[begin:end]}{suffix}"
    caret = " " * (len(prefix) + pos - begin) + "^"
    return f"{excerpt}\n{caret}"
