"""
mdtranslation — Markdown Sentence Extraction for Translation

Converts a markdown token stream into a document tree, segments its leaf
content into sentences and extracts numbered clauses for translation.

Stages:
    tokenizer:   markdown text -> flat tokens (mistune)
    builder:     tokens -> Document tree
    segment:     in-place sentence segmentation (UAX #29)
    clause:      Document -> DocumentClauseList
    serializer:  Document / clause list -> lazy token stream
    render:      tokens -> markdown text

Author: Olivier Vitrac, PhD, HDR | olivier.vitrac@adservio.fr | Adservio | 2026-10-19
"""

from mdtranslation.version import __version__
from mdtranslation.errors import StructureError
from mdtranslation.spans import TextSpan
from mdtranslation.tokens import Tag, TagKind, Token, TokenKind
from mdtranslation.nodes import Document
from mdtranslation.builder import build_document
from mdtranslation.serializer import TokenStream, document_tokens, clause_list_tokens
from mdtranslation.segment import SENTENCE_TAG, segment_document
from mdtranslation.clause import Clause, DocumentClauseList, extract_clause_list
from mdtranslation.config import TranslationConfig, get_config, load_config, set_config

__all__ = [
    "__version__",
    "StructureError",
    "TextSpan",
    "Tag",
    "TagKind",
    "Token",
    "TokenKind",
    "Document",
    "build_document",
    "TokenStream",
    "document_tokens",
    "clause_list_tokens",
    "SENTENCE_TAG",
    "segment_document",
    "Clause",
    "DocumentClauseList",
    "extract_clause_list",
    "TranslationConfig",
    "get_config",
    "load_config",
    "set_config",
]
