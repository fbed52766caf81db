"""Tests for the string helpers and sentence chunking."""

import pytest

from mentionschema import Article

from mentionkit.pipeline.chunking import SentenceChunker
from mentionkit.text import (
    chars_match_relaxed,
    clean_text,
    has_no_letter,
    highlight_position,
    remove_diacritics,
    sentence_positions,
    split_text,
)


class TestCharacterTools:
    def test_remove_diacritics(self):
        assert remove_diacritics("Élysée café") == "Elysee cafe"

    def test_relaxed_comparison(self):
        assert chars_match_relaxed("é", "E")
        assert chars_match_relaxed("a", "A")
        assert not chars_match_relaxed("a", "b")

    def test_has_no_letter(self):
        assert has_no_letter("2017")
        assert has_no_letter("--")
        assert not has_no_letter("3 May")

    def test_highlight_position(self):
        assert highlight_position(2, "abcdef") == "abcdef\n  ^"


class TestCleanText:
    """Tests for the pre-backend text normalisation."""

    def test_quotes_become_spaces(self):
        assert clean_text('He said "hello"') == "He said  hello "

    def test_angle_brackets_removed(self):
        assert clean_text("a < b > c") == "a   b   c"
        assert clean_text("<<x>>") == "  x  "

    def test_repeated_punctuation_collapsed(self):
        assert clean_text("Wait!!! Now...") == "Wait! Now."

    def test_diacritics_folded(self):
        assert clean_text("café") == "cafe"

    def test_leading_punctuation(self):
        assert clean_text("-Leading") == " Leading"

    def test_punctuation_after_newline(self):
        assert clean_text("line\n-item") == "line -item"

    def test_space_after_newline(self):
        assert clean_text("a\n b") == "a  b"

    def test_fixed_point(self):
        text = 'Il a dit : "Non !!!"\n-- fin...'
        cleaned = clean_text(text)
        assert clean_text(cleaned) == cleaned


class TestSplitText:
    """Tests for sentence-aligned splitting."""

    TEXT = "First sentence. Second one here. Third."

    def test_sentence_positions(self):
        assert sentence_positions(self.TEXT) == [0, 16, 33]

    def test_decimal_point_is_not_a_sentence_end(self):
        assert sentence_positions("Prices rose 12.32 percent. Then fell.") == [0, 27]

    def test_short_text_is_one_chunk(self):
        assert split_text(self.TEXT, 100) == [self.TEXT]

    def test_split_between_sentences(self):
        chunks = split_text(self.TEXT, 20)
        assert chunks == ["First sentence.", " Second one here.", " Third."]
        assert "".join(chunks) == self.TEXT
        assert all(len(chunk) <= 20 for chunk in chunks)

    def test_sentence_too_long(self):
        with pytest.raises(ValueError):
            split_text("A very long sentence without any end", 10)

    def test_too_long_sentence_after_a_cut(self):
        with pytest.raises(ValueError):
            split_text("Short. This second sentence is much too long.", 10)

    def test_empty_text(self):
        assert split_text("", 10) == []


class TestSentenceChunker:
    def test_chunks_are_contiguous(self):
        article = Article(raw_text="First sentence. Second one here. Third.", article_id="doc")
        chunks = SentenceChunker(max_size=20).chunk(article)
        assert [c.chunk_index for c in chunks] == [0, 1, 2]
        assert [(c.start_offset, c.end_offset) for c in chunks] == [(0, 15), (15, 32), (32, 39)]
        for chunk in chunks:
            assert article.raw_text[chunk.start_offset : chunk.end_offset] == chunk.content
            assert chunk.article_id == "doc"
