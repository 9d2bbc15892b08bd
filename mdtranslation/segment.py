"""
Sentence segmentation of leaf inline content.

For each leaf, the inline list is flattened (see ``textualize``), sentence
starts are located with UAX #29 sentence boundaries (``uniseg``), and the
inline list is rewritten as a sequence of ``Sentence`` wrappers. Text nodes
are cut at boundaries; emphasis, strong and strikethrough nodes straddling a
boundary are split into sibling wrappers of the same tag. Every other inline
is atomic and stays in one sentence.

Positions are code-point offsets into the flattened string. A wrapper's
children start one position after the wrapper itself (its opening
parenthesis in the flattened form).

Segmentation is not idempotent: existing ``Sentence`` wrappers are treated as
ordinary custom spans on a second run.

Author: Olivier Vitrac, PhD, HDR | olivier.vitrac@adservio.fr | Adservio | 2026-10-19
"""

import bisect
import logging
from typing import List, NamedTuple, Sequence

from uniseg.sentencebreak import sentences

from mdtranslation.nodes import (
    BlockNode,
    ContainerBlock,
    ContentInline,
    ContentKind,
    Document,
    InlineNode,
    LeafBlock,
    LeafKind,
    OutOfBandContainer,
    SurroundingInline,
    SurroundingInlineTag,
)
from mdtranslation.textualize import WRAPPING_KINDS, textualize_inline_list, textualized_length

logger = logging.getLogger(__name__)

SENTENCE_TAG_NAME = "Sentence"
SENTENCE_TAG = SurroundingInlineTag.custom(SENTENCE_TAG_NAME)


def is_sentence(node: InlineNode) -> bool:
    return isinstance(node, SurroundingInline) and node.tag == SENTENCE_TAG


# ---------------------------------------------------------------------------
# Boundary detection
# ---------------------------------------------------------------------------

def sentence_starts(text: str) -> List[int]:
    """
    Start offsets of the sentences of ``text`` that contain at least one
    alphanumeric character.
    """
    starts = []
    offset = 0
    for sentence in sentences(text):
        if any(ch.isalnum() for ch in sentence):
            starts.append(offset)
        offset += len(sentence)
    return starts


# ---------------------------------------------------------------------------
# Split / regroup
# ---------------------------------------------------------------------------

class _Piece(NamedTuple):
    node: InlineNode
    start: int
    end: int


def _inner_offsets(offsets: Sequence[int], start: int, end: int) -> List[int]:
    """Offsets strictly between ``start`` and ``end`` (``offsets`` is sorted)."""
    lo = bisect.bisect_right(offsets, start)
    hi = bisect.bisect_left(offsets, end)
    return list(offsets[lo:hi])


def _wrap(tag: SurroundingInlineTag, nodes: List[InlineNode]) -> InlineNode:
    if len(nodes) == 1 and isinstance(nodes[0], SurroundingInline) and nodes[0].tag == tag:
        return nodes[0]
    return SurroundingInline(tag, nodes)


def regroup(
    pieces: List[_Piece],
    offsets: Sequence[int],
    tag: SurroundingInlineTag,
    start: int,
    end: int,
) -> List[_Piece]:
    """
    Group consecutive pieces, closing a group when the next non-empty piece
    starts at a split offset, and wrap each group in ``tag``.

    The first group starts at ``start`` and the last one ends at ``end`` so
    that the wrapper's own parentheses stay inside the outer pieces.
    """
    boundaries = set(offsets)
    groups: List[List[_Piece]] = []
    current: List[_Piece] = []
    for piece in pieces:
        if current and piece.end > piece.start and piece.start in boundaries:
            groups.append(current)
            current = []
        current.append(piece)
    if current:
        groups.append(current)

    result = []
    last = len(groups) - 1
    for i, group in enumerate(groups):
        group_start = start if i == 0 else group[0].start
        group_end = end if i == last else group[-1].end
        result.append(_Piece(_wrap(tag, [p.node for p in group]), group_start, group_end))
    return result


def _split_text(node: ContentInline, offsets: List[int], start: int, end: int) -> List[_Piece]:
    span = node.tag.text
    pieces = []
    cut = start
    for offset in offsets + [end]:
        pieces.append(_Piece(ContentInline.text(span.substr(cut - start, offset - start)), cut, offset))
        cut = offset
    return pieces


def _split_node(node: InlineNode, offsets: Sequence[int], start: int) -> List[_Piece]:
    end = start + textualized_length(node)
    inner = _inner_offsets(offsets, start, end)
    if not inner:
        return [_Piece(node, start, end)]

    if isinstance(node, ContentInline) and node.tag.kind is ContentKind.TEXT:
        return _split_text(node, inner, start, end)

    if isinstance(node, SurroundingInline) and node.tag.kind in WRAPPING_KINDS:
        children = split_nodes(node.contents, offsets, start + 1)
        return regroup(children, offsets, node.tag, start, end)

    # links, images, code, breaks, custom nodes
    return [_Piece(node, start, end)]


def split_nodes(nodes: Sequence[InlineNode], offsets: Sequence[int], start: int = 0) -> List[_Piece]:
    """Split ``nodes`` (beginning at flattened position ``start``) at ``offsets``."""
    pieces = []
    position = start
    for node in nodes:
        node_pieces = _split_node(node, offsets, position)
        pieces.extend(node_pieces)
        position = node_pieces[-1].end
    return pieces


def segment_inlines(contents: List[InlineNode]) -> List[InlineNode]:
    """
    Return ``contents`` rewritten as a list of sentence wrappers.

    Content without any sentence (no alphanumeric character) is returned
    unchanged.
    """
    text = textualize_inline_list(contents)
    starts = sentence_starts(text)
    if not starts:
        return contents
    offsets = starts[1:]
    pieces = split_nodes(contents, offsets, 0)
    grouped = regroup(pieces, offsets, SENTENCE_TAG, 0, len(text))
    return [piece.node for piece in grouped]


# ---------------------------------------------------------------------------
# Document traversal
# ---------------------------------------------------------------------------

def _segment_leaf(contents: List[InlineNode]) -> int:
    segmented = segment_inlines(contents)
    contents[:] = segmented
    return sum(1 for node in segmented if is_sentence(node))


def _segment_block(block: BlockNode, skip_code_blocks: bool) -> int:
    if isinstance(block, ContainerBlock):
        return sum(_segment_block(child, skip_code_blocks) for child in block.children)
    if isinstance(block, LeafBlock):
        if skip_code_blocks and block.tag.kind is LeafKind.CODE_BLOCK:
            return 0
        return _segment_leaf(block.contents)
    return 0


def segment_document(doc: Document, skip_code_blocks: bool = False) -> int:
    """
    Segment every leaf of ``doc`` in place.

    Args:
        doc: document to rewrite
        skip_code_blocks: leave code block leaves untouched

    Returns:
        Number of sentence wrappers created
    """
    count = 0
    for block in doc.blocks:
        count += _segment_block(block, skip_code_blocks)
    for node in doc.outofbands:
        if isinstance(node, OutOfBandContainer):
            for block in node.children:
                count += _segment_block(block, skip_code_blocks)
        else:
            count += _segment_leaf(node.contents)
    logger.debug(f"Segmented document into {count} sentences")
    return count
