"""
End-to-end pipelines over markdown text.

- passthrough: tokenize, then render the tokens unchanged
- translate_extract: tokenize, build the tree, segment sentences, extract
  clauses, project them to tokens and render

Author: Olivier Vitrac, PhD, HDR | olivier.vitrac@adservio.fr | Adservio | 2026-10-19
"""

import logging
from typing import Optional

from mdtranslation.builder import build_document as _build_from_tokens
from mdtranslation.clause import DocumentClauseList
from mdtranslation.clause import extract_clause_list as _extract_from_document
from mdtranslation.config import TranslationConfig, get_config
from mdtranslation.nodes import Document
from mdtranslation.render import render_tokens
from mdtranslation.segment import segment_document
from mdtranslation.serializer import clause_list_tokens
from mdtranslation.tokenizer import tokenize

logger = logging.getLogger(__name__)


def _resolve(config: Optional[TranslationConfig]) -> TranslationConfig:
    return config if config is not None else get_config()


def passthrough(text: str, config: Optional[TranslationConfig] = None) -> str:
    """Tokenize ``text`` and render the tokens straight back."""
    config = _resolve(config)
    tokens = tokenize(text, config.tokenizer.plugins)
    return render_tokens(tokens, config.render)


def build_document(text: str, config: Optional[TranslationConfig] = None) -> Document:
    """Parse ``text`` into a document tree."""
    config = _resolve(config)
    return _build_from_tokens(tokenize(text, config.tokenizer.plugins))


def extract_clause_list(
    text: str,
    source_language: Optional[str] = None,
    config: Optional[TranslationConfig] = None,
) -> DocumentClauseList:
    """
    Parse, segment and extract the clauses of ``text``.

    Args:
        text: markdown source
        source_language: language id of ``text`` (config value when None)
        config: configuration (global config when None)
    """
    config = _resolve(config)
    language = source_language or config.source_language
    doc = build_document(text, config)
    segment_document(doc, skip_code_blocks=config.segmentation.skip_code_blocks)
    clauses = _extract_from_document(doc, language)
    logger.info(f"Extracted {len(clauses)} clauses ({language})")
    return clauses


def translate_extract(
    text: str,
    source_language: Optional[str] = None,
    config: Optional[TranslationConfig] = None,
) -> str:
    """Render the clause list of ``text`` as a translation worksheet."""
    config = _resolve(config)
    clauses = extract_clause_list(text, source_language, config)
    return render_tokens(clause_list_tokens(clauses), config.render)
