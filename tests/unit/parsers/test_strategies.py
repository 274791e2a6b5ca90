import pytest

from docstruct.parsers.config import ParserConfig
from docstruct.parsers.strategies import (
    StrategyRegistry,
    default_registry,
    heading_level_strategy,
    top_level_strategy,
)
from docstruct.parsers.tokenizer import Token, tokenize


def _titles(text: str, indices: list[int]) -> list[str]:
    tokens = tokenize(text).tokens
    return [tokens[i].text for i in indices]


def _tokens(text: str) -> list[Token]:
    return tokenize(text).tokens


BOOK = "# Book\n\n## One\n\n### One.A\n\n## Two\n\nText."


class TestHeadingLevelStrategy:
    def test_selects_configured_levels(self) -> None:
        indices = heading_level_strategy(_tokens(BOOK), ParserConfig())

        assert _titles(BOOK, indices) == ["One", "Two"]

    def test_multiple_levels(self) -> None:
        config = ParserConfig(chapter_header_levels=[1, 3])
        indices = heading_level_strategy(_tokens(BOOK), config)

        assert _titles(BOOK, indices) == ["Book", "One.A"]

    def test_no_headings(self) -> None:
        assert heading_level_strategy(_tokens("Just text."), ParserConfig()) == []


class TestTopLevelStrategy:
    def test_skips_single_title_heading(self) -> None:
        indices = top_level_strategy(_tokens(BOOK), ParserConfig())

        assert _titles(BOOK, indices) == ["One", "Two"]

    def test_uses_level_one_when_repeated(self) -> None:
        text = "# Part One\n\n## Detail\n\n# Part Two"
        indices = top_level_strategy(_tokens(text), ParserConfig())

        assert _titles(text, indices) == ["Part One", "Part Two"]

    def test_only_deep_headings(self) -> None:
        text = "### A\n\n#### A.1\n\n### B"
        indices = top_level_strategy(_tokens(text), ParserConfig())

        assert _titles(text, indices) == ["A", "B"]

    def test_lone_title_without_other_headings_is_a_chapter(self) -> None:
        text = "# Only\n\nBody."
        indices = top_level_strategy(_tokens(text), ParserConfig())

        assert _titles(text, indices) == ["Only"]

    def test_no_headings(self) -> None:
        assert top_level_strategy(_tokens("Just text."), ParserConfig()) == []


@pytest.fixture
def registry() -> StrategyRegistry:
    return StrategyRegistry()


def test_register_and_get(registry: StrategyRegistry) -> None:
    registry.register("levels", heading_level_strategy)
    assert registry.get("levels") is heading_level_strategy


def test_register_duplicate_raises(registry: StrategyRegistry) -> None:
    registry.register("levels", heading_level_strategy)
    with pytest.raises(ValueError, match="already registered"):
        registry.register("levels", top_level_strategy)


def test_get_unknown_raises(registry: StrategyRegistry) -> None:
    with pytest.raises(KeyError, match="not found"):
        registry.get("nonexistent")


def test_remove(registry: StrategyRegistry) -> None:
    registry.register("levels", heading_level_strategy)
    registry.remove("levels")
    assert "levels" not in registry.list()


def test_remove_unknown_raises(registry: StrategyRegistry) -> None:
    with pytest.raises(KeyError, match="not found"):
        registry.remove("nonexistent")


def test_list_returns_copy(registry: StrategyRegistry) -> None:
    registry.register("levels", heading_level_strategy)
    listed = registry.list()
    listed.clear()
    assert "levels" in registry.list()


def test_default_registry_has_builtins() -> None:
    assert set(default_registry().list()) == {"heading_level", "top_level"}
