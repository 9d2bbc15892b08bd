"""
Textualizer: inline content -> plain-text approximation.

Used only to measure content and locate sentence boundaries; the result is
lossy and never rendered.

Author: Olivier Vitrac, PhD, HDR | olivier.vitrac@adservio.fr | Adservio | 2026-10-19
"""

from typing import Iterable, List

from mdtranslation.nodes import (
    ContentKind,
    InlineNode,
    SurroundingInline,
    SurroundingKind,
)

# Surrounding kinds whose children are kept (wrapped in parentheses)
WRAPPING_KINDS = frozenset({
    SurroundingKind.EMPHASIS,
    SurroundingKind.STRONG,
    SurroundingKind.STRIKETHROUGH,
})

CONTENT_PLACEHOLDERS = {
    ContentKind.CODE: "(code)",
    ContentKind.RAW_HTML: "(raw html)",
    ContentKind.FOOTNOTE_REF: "(ref)",
    ContentKind.TASK_LIST_MARKER: "(marker)",
    ContentKind.SOFT_BREAK: " ",
    ContentKind.HARD_BREAK: "\n",
}


def _write_node(node: InlineNode, parts: List[str]) -> None:
    if isinstance(node, SurroundingInline):
        kind = node.tag.kind
        if kind in WRAPPING_KINDS:
            parts.append("(")
            for child in node.contents:
                _write_node(child, parts)
            parts.append(")")
        elif kind is SurroundingKind.LINK:
            parts.append("(link)")
        elif kind is SurroundingKind.IMAGE:
            parts.append("(image)")
        else:
            for child in node.contents:
                _write_node(child, parts)
        return

    kind = node.tag.kind
    if kind is ContentKind.TEXT:
        parts.append(node.tag.text.text)
    elif kind is ContentKind.CUSTOM:
        parts.append(f"({node.tag.name})")
    else:
        parts.append(CONTENT_PLACEHOLDERS[kind])


def textualize_inline_node(node: InlineNode) -> str:
    parts: List[str] = []
    _write_node(node, parts)
    return "".join(parts)


def textualize_inline_list(nodes: Iterable[InlineNode]) -> str:
    """Flatten an inline list to its plain-text approximation."""
    parts: List[str] = []
    for node in nodes:
        _write_node(node, parts)
    return "".join(parts)


def textualized_length(node: InlineNode) -> int:
    return len(textualize_inline_node(node))
