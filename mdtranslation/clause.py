"""
Clause extraction.

After sentence segmentation, every top-level ``Sentence`` wrapper of a leaf
becomes one ``Clause``. Clauses are numbered from 1 in document traversal
order (main blocks depth-first, then out-of-band nodes) and carry a list of
(language, content) translations seeded with the source content.

Extraction copies content; the document is left untouched.

Author: Olivier Vitrac, PhD, HDR | olivier.vitrac@adservio.fr | Adservio | 2026-10-19
"""

import copy
import logging
from dataclasses import dataclass, field
from typing import Iterator, List, Tuple

from mdtranslation.nodes import Document, InlineNode
from mdtranslation.segment import is_sentence
from mdtranslation.textualize import textualize_inline_list

logger = logging.getLogger(__name__)


@dataclass
class Clause:
    """One translatable sentence."""
    index: int
    contents: List[InlineNode] = field(default_factory=list)
    translations: List[Tuple[str, List[InlineNode]]] = field(default_factory=list)

    @property
    def text(self) -> str:
        return textualize_inline_list(self.contents)

    def add_translation(self, language: str, contents: List[InlineNode]) -> None:
        self.translations.append((language, contents))


@dataclass
class DocumentClauseList:
    """Ordered clauses of a document."""
    clauses: List[Clause] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.clauses)

    def __iter__(self) -> Iterator[Clause]:
        return iter(self.clauses)

    def __getitem__(self, i: int) -> Clause:
        return self.clauses[i]

    def into_tokens(self):
        from mdtranslation.serializer import clause_list_tokens
        return clause_list_tokens(self)


def extract_clause_list(doc: Document, source_language: str) -> DocumentClauseList:
    """
    Collect one clause per sentence wrapper of ``doc``.

    Args:
        doc: segmented document
        source_language: language id paired with the original content

    Returns:
        DocumentClauseList with indices 1..N
    """
    result = DocumentClauseList()
    for _tag, contents in doc.iter_leaf_contents():
        for node in contents:
            if not is_sentence(node):
                continue
            clause = Clause(
                index=len(result.clauses) + 1,
                contents=copy.deepcopy(node.contents),
            )
            clause.add_translation(source_language, copy.deepcopy(node.contents))
            result.clauses.append(clause)
    logger.debug(f"Extracted {len(result)} clauses ({source_language})")
    return result
