"""Recognizer configuration and its TOML loader.

Configuration is looked up in order:
  1. The path passed to :func:`load_config` (if any)
  2. Path in the MENTIONKIT_CONFIG env var (if set)
  3. mentionkit.toml in the current working directory

If no file is found, built-in defaults are used. The file mirrors the
models below, e.g.::

    [noise]
    exclusion_on = false
    ignore_pronouns = true

    [cache]
    enabled = true
    cache_dir = "out/mentions"

    [chunking]
    max_size = 25000

    trim = false
    no_overlap = true
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from mentionkit.logging import setup_logging

CONFIG_ENV = "MENTIONKIT_CONFIG"
CONFIG_FILENAME = "mentionkit.toml"

logger = setup_logging()


class NoiseFilterConfig(BaseModel):
    """Which kinds of noisy mentions are discarded after recognition.

    Attributes:
        exclusion_on: Drop mentions matching the language stop-word list.
        ignore_pronouns: Drop one-character mentions and pronouns.
        ignore_numbers: Drop mentions without any letter.
    """

    model_config = {"frozen": True}

    exclusion_on: bool = Field(True, description="Filter stop words")
    ignore_pronouns: bool = Field(True, description="Filter pronouns and single characters")
    ignore_numbers: bool = Field(True, description="Filter mentions containing no letter")


class CacheConfig(BaseModel):
    """Result caching.

    Attributes:
        enabled: Reuse previously stored results instead of re-invoking the backend.
        cache_dir: Root folder of file-based caches (None keeps results in memory).
        output_raw_results: Also persist the backend's raw output, for debugging.
    """

    model_config = {"frozen": True}

    enabled: bool = Field(True, description="Reuse cached results")
    cache_dir: Path | None = Field(None, description="Root directory of the file cache")
    output_raw_results: bool = Field(False, description="Persist raw backend output next to cached results")


class ChunkingConfig(BaseModel):
    """How article text is split before being sent to size-limited backends."""

    model_config = {"frozen": True}

    max_size: int = Field(25000, gt=0, description="Maximal size of a chunk, in characters")


class RecognizerConfig(BaseModel):
    """Everything a recognizer needs besides its backend-specific settings.

    Attributes:
        noise: Noise filter switches.
        cache: Caching behaviour.
        chunking: Chunk size for tagged-text backends.
        trim: Strip non-alphanumeric characters at mention ends.
        no_overlap: Resolve overlapping mentions, keeping the longest.
    """

    model_config = {"frozen": True}

    noise: NoiseFilterConfig = Field(default_factory=NoiseFilterConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    chunking: ChunkingConfig = Field(default_factory=ChunkingConfig)
    trim: bool = Field(False, description="Trim mention ends")
    no_overlap: bool = Field(True, description="Collapse overlapping mentions")

    def describe(self) -> str:
        """Compact, deterministic description used in recognizer identities."""
        return (
            f"ignPro={self.noise.ignore_pronouns}"
            f"_ignNbr={self.noise.ignore_numbers}"
            f"_exclude={self.noise.exclusion_on}"
            f"_trim={self.trim}"
            f"_noOverlap={self.no_overlap}"
            f"_maxSize={self.chunking.max_size}"
        )


def _default_config_paths() -> list[Path]:
    """Return paths to check for mentionkit.toml (first existing wins)."""
    paths: list[Path] = []
    if os.environ.get(CONFIG_ENV):
        paths.append(Path(os.environ[CONFIG_ENV]))
    paths.append(Path.cwd() / CONFIG_FILENAME)
    return paths


def load_config(path: Path | str | None = None) -> RecognizerConfig:
    """Load the recognizer configuration from TOML.

    Args:
        path: Explicit config file. When given, it must exist.

    Returns:
        The parsed configuration, or the defaults when no file is found.

    Raises:
        FileNotFoundError: If an explicit ``path`` does not exist.
        pydantic.ValidationError: If the file holds invalid values.
    """
    if path is not None:
        candidates = [Path(path)]
        if not candidates[0].is_file():
            raise FileNotFoundError(f"Config file not found: {path}")
    else:
        candidates = _default_config_paths()

    for candidate in candidates:
        if candidate.is_file():
            with open(candidate, "rb") as f:
                data: dict[str, Any] = tomllib.load(f)
            logger.debug({"message": "Loaded mentionkit config", "path": str(candidate), "data": data})
            return RecognizerConfig.model_validate(data)

    return RecognizerConfig()
