"""Caching of recognition results.

Invoking a recognition backend is the expensive part of the pipeline:
external services are slow, rate limited, and sometimes paid. Caching is
critical for:

- **Cost reduction**: Avoiding repeated backend calls for the same article
- **Reproducibility**: The same article always yields the same mentions
- **Offline operation**: Re-running the combination step without backends

Entries are keyed by ``(article identity, recognizer identity)``; since a
recognizer identity encodes its configuration, changing a setting never
returns a stale result.

Key abstractions:
    - MentionsCacheInterface: Cache contract
    - InMemoryMentionsCache: Per-process cache
    - FileBasedMentionsCache: One JSON file per article and recognizer

Typical usage:
    ```python
    cache = FileBasedMentionsCache(Path("out/mentions"))
    recognizer = MyRecognizer(cache=cache)
    recognizer.recognize(article)  # backend called, result stored
    recognizer.recognize(article)  # read back from out/mentions/<article>-<hash>/<recognizer>-<hash>.json
    ```
"""

import hashlib
import re
from abc import ABC, abstractmethod
from pathlib import Path

from pydantic import ValidationError

from mentionschema import Mentions

from mentionkit.logging import setup_logging

logger = setup_logging()

_UNSAFE_FILENAME_CHARS = re.compile(r"[^\w.=+-]", re.ASCII)


def _filename(identifier: str) -> str:
    """Readable, length-bounded file name that stays distinct for distinct identifiers."""
    digest = hashlib.sha256(identifier.encode("utf-8")).hexdigest()[:16]
    return f"{_UNSAFE_FILENAME_CHARS.sub('_', identifier)[:64]}-{digest}"


class MentionsCacheInterface(ABC):
    """Abstract interface for storing recognition results.

    Implementations provide different storage backends with the same
    semantics: a stored collection is returned unchanged (same spans,
    types, texts, sources and values) by later lookups.
    """

    @abstractmethod
    def get(self, article_id: str, recognizer_id: str) -> Mentions | None:
        """Retrieve a stored result.

        Args:
            article_id: Identity of the processed article
            recognizer_id: Identity of the recognizer (or combiner)

        Returns:
            The cached mentions, or None on a cache miss
        """

    @abstractmethod
    def put(self, article_id: str, recognizer_id: str, mentions: Mentions) -> None:
        """Store a result, replacing any previous one for the same key."""

    def put_raw(self, article_id: str, recognizer_id: str, raw: str) -> None:
        """Persist a backend's raw output for debugging.

        No-op for caches that do not persist anything.
        """

    @abstractmethod
    def clear(self) -> None:
        """Drop every stored result."""

    @abstractmethod
    def get_stats(self) -> dict[str, int]:
        """Get cache statistics.

        Returns:
            Dictionary with "hits", "misses" and "size"
        """


class InMemoryMentionsCache(MentionsCacheInterface):
    """Keeps results in a dictionary for the lifetime of the process.

    Stored collections are copied on the way in and out, so callers
    editing a returned collection never alter the cache.
    """

    def __init__(self):
        self._cache: dict[tuple[str, str], Mentions] = {}
        self._hits = 0
        self._misses = 0

    def get(self, article_id: str, recognizer_id: str) -> Mentions | None:
        cached = self._cache.get((article_id, recognizer_id))
        if cached is None:
            self._misses += 1
            return None
        self._hits += 1
        return cached.copy_as()

    def put(self, article_id: str, recognizer_id: str, mentions: Mentions) -> None:
        self._cache[(article_id, recognizer_id)] = mentions.copy_as()

    def clear(self) -> None:
        self._cache.clear()
        self._hits = 0
        self._misses = 0

    def get_stats(self) -> dict[str, int]:
        return {"hits": self._hits, "misses": self._misses, "size": len(self._cache)}


class FileBasedMentionsCache(MentionsCacheInterface):
    """Persistent cache writing one JSON file per article and recognizer.

    The layout is ``<cache_dir>/<article id>/<recognizer id>.json``, plus
    ``<recognizer id>.raw.txt`` when raw outputs are kept. Writes are
    atomic (write to a temp file, then rename) so an interrupted run
    never leaves a truncated result behind.

    Each identifier becomes a file name made of its first characters, with
    anything outside ``[A-Za-z0-9_.=+-]`` replaced, and a digest of the
    whole identifier, so names stay short and never collide.

    There is no locking: two processes recognizing the same article with
    the same recognizer at the same time both invoke the backend and the
    last write wins. Give concurrent workers disjoint articles.

    An unreadable or invalid cache file is reported and treated as a miss.
    """

    def __init__(self, cache_dir: Path | str):
        self.cache_dir = Path(cache_dir)
        self._hits = 0
        self._misses = 0

    def _folder(self, article_id: str) -> Path:
        return self.cache_dir / _filename(article_id)

    def _path(self, article_id: str, recognizer_id: str, suffix: str = ".json") -> Path:
        return self._folder(article_id) / (_filename(recognizer_id) + suffix)

    def _write(self, path: Path, content: str) -> None:
        temp_file = path.parent / (path.name + ".tmp")
        temp_file.parent.mkdir(parents=True, exist_ok=True)
        with open(temp_file, "w", encoding="utf-8") as f:
            f.write(content)
        temp_file.replace(path)

    def get(self, article_id: str, recognizer_id: str) -> Mentions | None:
        path = self._path(article_id, recognizer_id)
        if not path.exists():
            self._misses += 1
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                mentions = Mentions.model_validate_json(f.read())
        except (OSError, ValidationError) as exc:
            logger.warning({"message": "Ignoring unreadable cache file", "path": str(path), "error": str(exc)})
            self._misses += 1
            return None
        self._hits += 1
        return mentions

    def put(self, article_id: str, recognizer_id: str, mentions: Mentions) -> None:
        """Store ``mentions``; a failed write is reported and the result is simply not cached."""
        path = self._path(article_id, recognizer_id)
        try:
            self._write(path, mentions.model_dump_json(indent=2))
        except OSError as exc:
            logger.warning({"message": "Could not write cache file", "path": str(path), "error": str(exc)})
            return
        logger.debug({"message": "Cached mentions", "path": str(path), "count": len(mentions)})

    def put_raw(self, article_id: str, recognizer_id: str, raw: str) -> None:
        path = self._path(article_id, recognizer_id, ".raw.txt")
        try:
            self._write(path, raw)
        except OSError as exc:
            logger.warning({"message": "Could not write raw output", "path": str(path), "error": str(exc)})

    def clear(self) -> None:
        for path in self.cache_dir.glob("*/*.json"):
            path.unlink()
        self._hits = 0
        self._misses = 0

    def get_stats(self) -> dict[str, int]:
        size = sum(1 for _ in self.cache_dir.glob("*/*.json")) if self.cache_dir.exists() else 0
        return {"hits": self._hits, "misses": self._misses, "size": size}
