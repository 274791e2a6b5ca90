import logging
from collections.abc import Callable

from .config import ParserConfig
from .tokenizer import Token, TokenKind

logger = logging.getLogger(__name__)

# Returns the indices of the heading tokens that open chapters, in order
ChapterStrategy = Callable[[list[Token], ParserConfig], list[int]]


def heading_level_strategy(tokens: list[Token], config: ParserConfig) -> list[int]:
    """Every heading whose depth is one of ``chapter_header_levels``."""
    levels = set(config.chapter_header_levels)
    return [
        i
        for i, token in enumerate(tokens)
        if token.kind is TokenKind.HEADING and token.depth in levels
    ]


def top_level_strategy(tokens: list[Token], config: ParserConfig) -> list[int]:
    """Headings at the shallowest depth present.

    A lone level-1 heading followed by deeper headings is treated as the
    document title, not as a chapter.
    """
    headings = [
        (i, token) for i, token in enumerate(tokens) if token.kind is TokenKind.HEADING
    ]
    if not headings:
        return []

    level_one = [i for i, token in headings if token.depth == 1]
    if len(level_one) == 1 and any(token.depth > 1 for _, token in headings):
        headings = [(i, token) for i, token in headings if token.depth > 1]

    shallowest = min(token.depth for _, token in headings)
    return [i for i, token in headings if token.depth == shallowest]


class StrategyRegistry:
    def __init__(self) -> None:
        self._strategies: dict[str, ChapterStrategy] = {}

    def register(self, name: str, strategy: ChapterStrategy) -> None:
        if name in self._strategies:
            raise ValueError(f"Chapter strategy '{name}' already registered")

        self._strategies[name] = strategy
        logger.debug("Registered chapter strategy: %s", name)

    def get(self, name: str) -> ChapterStrategy:
        try:
            return self._strategies[name]
        except KeyError:
            logger.error("Chapter strategy not found: %s", name)
            raise KeyError(f"Chapter strategy '{name}' not found")

    def remove(self, name: str) -> None:
        try:
            del self._strategies[name]
            logger.debug("Removed chapter strategy: %s", name)
        except KeyError:
            logger.error("Cannot remove chapter strategy, not found: %s", name)
            raise KeyError(f"Chapter strategy '{name}' not found")

    def list(self) -> dict[str, ChapterStrategy]:
        return dict(self._strategies)


def default_registry() -> StrategyRegistry:
    """A fresh registry holding the built-in strategies."""
    registry = StrategyRegistry()
    registry.register("heading_level", heading_level_strategy)
    registry.register("top_level", top_level_strategy)
    return registry
