# src/docstruct/parsers/config.py

import logging
import re
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

logger = logging.getLogger(__name__)

DEFAULT_ABBREVIATIONS = [
    "Mr",
    "Mrs",
    "Ms",
    "Dr",
    "Prof",
    "St",
    "Ave",
    "Rd",
    "Blvd",
    "etc",
    "e.g",
    "i.e",
    "vs",
    "al",
    "et",
    "ca",
    "cf",
]


class ParserConfig(BaseModel):
    """Configuration for the markdown structure parser.

    Immutable. Explicit. Unknown options are rejected.
    """

    confidence_threshold: float = Field(default=0.0, ge=0.0, le=1.0)
    chapter_header_levels: list[int] = Field(default_factory=lambda: [2])
    min_sentence_length: int = Field(default=5, ge=0)
    max_sentence_length: int = Field(default=500, gt=0)
    sentence_boundary_patterns: list[str] = Field(default_factory=list)
    abbreviations: list[str] = Field(
        default_factory=lambda: list(DEFAULT_ABBREVIATIONS)
    )
    include_code_blocks: bool = False
    include_tables: bool = False
    include_blockquotes: bool = True
    include_lists: bool = True
    error_handling_strategy: Literal["recover", "strict"] = "recover"
    chapter_strategy: str = "heading_level"
    max_file_size_mb: float = Field(default=10.0, gt=0)

    class Config:
        extra = "forbid"
        frozen = True

    @field_validator("chapter_header_levels")
    @classmethod
    def _check_levels(cls, levels: list[int]) -> list[int]:
        if not levels:
            raise ValueError("chapter_header_levels must not be empty")
        for level in levels:
            if not 1 <= level <= 6:
                raise ValueError(f"Invalid heading level: {level}")
        return sorted(set(levels))

    @field_validator("sentence_boundary_patterns")
    @classmethod
    def _check_patterns(cls, patterns: list[str]) -> list[str]:
        for pattern in patterns:
            try:
                re.compile(pattern)
            except re.error as exc:
                raise ValueError(f"Invalid boundary pattern {pattern!r}: {exc}")
        return patterns

    @model_validator(mode="after")
    def _check_sentence_lengths(self) -> "ParserConfig":
        if self.max_sentence_length <= self.min_sentence_length:
            raise ValueError("max_sentence_length must be > min_sentence_length")
        return self

    @property
    def max_file_size_bytes(self) -> int:
        return int(self.max_file_size_mb * 1024 * 1024)

    @property
    def strict(self) -> bool:
        return self.error_handling_strategy == "strict"


PRESETS: dict[str, dict[str, Any]] = {
    "technical": {
        "include_code_blocks": True,
        "include_tables": True,
        "chapter_header_levels": [1, 2],
        "confidence_threshold": 0.5,
    },
    "narrative": {
        "chapter_header_levels": [1],
        "min_sentence_length": 3,
        "confidence_threshold": 0.4,
    },
    "academic": {
        "include_tables": True,
        "chapter_header_levels": [1, 2, 3],
        "max_sentence_length": 1000,
        "confidence_threshold": 0.6,
    },
    "blog": {
        "include_code_blocks": True,
        "chapter_header_levels": [2],
        "confidence_threshold": 0.3,
    },
}


def get_preset(name: str) -> ParserConfig:
    """Return the named preset as a ParserConfig.

    Raises:
        ValueError: If the preset is unknown.
    """
    try:
        overrides = PRESETS[name]
    except KeyError:
        raise ValueError(f"Unknown preset: {name}")
    return ParserConfig(**overrides)


def load_config(path: str | Path) -> ParserConfig:
    """Load a ParserConfig from a YAML file.

    A top-level ``preset`` key selects a preset whose values the rest of
    the file overrides.

    Example:
        >>> # parser.yaml
        >>> # preset: technical
        >>> # confidence_threshold: 0.7
        >>> config = load_config("parser.yaml")
    """
    logger.info("Loading parser config from %s", path)
    with open(path) as f:
        data = yaml.safe_load(f)

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError(f"Parser config must be a mapping, got {type(data).__name__}")

    preset = data.pop("preset", None)
    values: dict[str, Any] = {}
    if preset is not None:
        if preset not in PRESETS:
            raise ValueError(f"Unknown preset: {preset}")
        values.update(PRESETS[preset])
    values.update(data)

    config = ParserConfig(**values)
    logger.debug("Loaded parser config: preset=%s, options=%s", preset, sorted(data))
    return config
