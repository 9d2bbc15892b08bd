"""
Pytest Configuration and Fixtures

Author: Olivier Vitrac, PhD, HDR | olivier.vitrac@adservio.fr | Adservio | 2026-10-19
"""

import sys
from pathlib import Path
from typing import List

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from mdtranslation.config import TranslationConfig, set_config
from mdtranslation.tokens import Tag, Token


def paragraph(*inner: Token) -> List[Token]:
    """Tokens of a paragraph wrapping ``inner``."""
    tag = Tag.paragraph()
    return [Token.start(tag), *inner, Token.end(tag)]


def wrap(tag: Tag, *inner: Token) -> List[Token]:
    return [Token.start(tag), *inner, Token.end(tag)]


@pytest.fixture(autouse=True)
def default_config(monkeypatch, tmp_path):
    """Isolate every test from user config files and environment overrides."""
    for var in ("MDTRANSLATION_SOURCE_LANGUAGE", "MDTRANSLATION_LOG_LEVEL", "MDTRANSLATION_PLUGINS"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    config = TranslationConfig()
    set_config(config)
    yield config
    set_config(None)


@pytest.fixture
def sample_markdown() -> str:
    return (
        "# Title\n"
        "\n"
        "Hello world. How are you?\n"
        "\n"
        "- first item. Second sentence.\n"
        "- *second* item\n"
        "\n"
        "Text with a note[^1].\n"
        "\n"
        "[^1]: Footnote one. Footnote two.\n"
    )
