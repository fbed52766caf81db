"""Splitting of articles into chunks small enough for size-limited backends.

Chunks never cut a sentence, and they are contiguous: concatenated in
order they give back the article raw text exactly, so a position in a
chunk maps to a position in the article by adding the chunk's
``start_offset``.
"""

from pydantic import BaseModel, Field

from mentionschema import Article

from mentionkit.text import split_text


class TextChunk(BaseModel):
    """A contiguous piece of an article.

    Attributes:
        content: The text of this chunk, untouched
        start_offset: Character offset where this chunk starts in the article
        end_offset: Character offset where this chunk ends in the article
        chunk_index: Sequential index of this chunk (0-based)
        article_id: Identity of the parent article
    """

    model_config = {"frozen": True}

    content: str = Field(..., description="Text content of this chunk")
    start_offset: int = Field(..., ge=0, description="Starting character offset in the article")
    end_offset: int = Field(..., ge=0, description="Ending character offset in the article")
    chunk_index: int = Field(..., ge=0, description="Sequential index of this chunk (0-based)")
    article_id: str = Field(..., description="Identity of the parent article")


class SentenceChunker:
    """Cuts articles at sentence boundaries into chunks of at most ``max_size`` characters."""

    def __init__(self, max_size: int = 25000):
        self.max_size = max_size

    def chunk(self, article: Article) -> list[TextChunk]:
        """Split ``article`` into contiguous chunks.

        Raises:
            ValueError: If one sentence of the article is longer than ``max_size``.
        """
        chunks: list[TextChunk] = []
        offset = 0
        for index, content in enumerate(split_text(article.raw_text, self.max_size)):
            chunks.append(
                TextChunk(
                    content=content,
                    start_offset=offset,
                    end_offset=offset + len(content),
                    chunk_index=index,
                    article_id=article.identity,
                )
            )
            offset += len(content)
        return chunks
