"""
Tree builder: flat token stream -> document tree.

Recursive descent over a peekable token stream. One function, ``load_nodes``,
handles every level; the kind of children it may produce is given by an
explicit ``ChildContext`` and the out-of-band collector is threaded through
every call.

Two lookahead cases run before the generic dispatch:

- list items whose content mixes bare inline tokens with block regions
  (tight lists): bare inlines are gathered into an implicit paragraph;
- consecutive raw html tokens at block level: merged into one html leaf.

Any structural inconsistency raises ``StructureError`` and no partial tree is
returned.

Author: Olivier Vitrac, PhD, HDR | olivier.vitrac@adservio.fr | Adservio | 2026-10-19
"""

import logging
from enum import Enum
from typing import Iterable, Iterator, List, Optional

from mdtranslation.errors import StructureError
from mdtranslation.nodes import (
    ContainerBlock,
    ContentInline,
    ContainerBlockTag,
    Document,
    LeafBlock,
    LeafBlockTag,
    MarkupBlock,
    OutOfBandContainer,
    OutOfBandLeaf,
    SurroundingInline,
)
from mdtranslation.tags import TagCategory, convert_atom, convert_tag, is_token_inline
from mdtranslation.tokens import Tag, TagKind, Token, TokenKind

logger = logging.getLogger(__name__)


class ChildContext(str, Enum):
    """Kind of children the current recursion level collects."""
    BLOCKS = "blocks"
    INLINES = "inlines"
    NONE = "none"


_EMPTY = object()


class PeekableTokens:
    """Token iterator with one token of lookahead."""

    def __init__(self, tokens: Iterable[Token]):
        self._it = iter(tokens)
        self._head = _EMPTY

    def peek(self) -> Optional[Token]:
        if self._head is _EMPTY:
            self._head = next(self._it, None)
        return self._head

    def next(self) -> Optional[Token]:
        token = self.peek()
        self._head = _EMPTY
        return token

    def __iter__(self) -> Iterator[Token]:
        return self

    def __next__(self) -> Token:
        token = self.next()
        if token is None:
            raise StopIteration
        return token


# ---------------------------------------------------------------------------
# Region reading
# ---------------------------------------------------------------------------

def _read_region(tokens: PeekableTokens) -> List[Token]:
    """
    Consume one atomic token or one balanced open..close region.

    Balance is tracked across all tag kinds; a close that does not match the
    innermost open raises.
    """
    region = []
    stack: List[Tag] = []
    while True:
        token = tokens.next()
        if token is None:
            return region
        if token.kind is TokenKind.START:
            stack.append(token.tag)
        elif token.kind is TokenKind.END:
            if not stack or stack.pop() != token.tag:
                raise StructureError(f"Unbalanced close token {token.describe()}")
        region.append(token)
        if not stack:
            return region


# ---------------------------------------------------------------------------
# Lookahead special cases
# ---------------------------------------------------------------------------

def _load_list_item(tokens: PeekableTokens, blocks: list, outofbands: list) -> None:
    """Consume a whole list item, wrapping bare inline runs in implicit paragraphs."""
    tokens.next()  # the item open
    children = []
    pending_inlines = []

    while True:
        token = tokens.peek()
        if token is None:
            raise StructureError("End of stream inside a list item")

        if is_token_inline(token):
            region = _read_region(tokens)
            load_nodes(PeekableTokens(region), None, ChildContext.INLINES, pending_inlines, outofbands)
            continue

        if pending_inlines:
            children.append(LeafBlock(LeafBlockTag.paragraph(implicit=True), pending_inlines))
            pending_inlines = []

        if token.kind is TokenKind.END:
            if token.tag.kind is not TagKind.ITEM:
                raise StructureError(f"Unexpected {token.describe()} inside a list item")
            tokens.next()
            break

        region = _read_region(tokens)
        load_nodes(PeekableTokens(region), None, ChildContext.BLOCKS, children, outofbands)

    blocks.append(ContainerBlock(ContainerBlockTag.list_item(), children))


def _load_html_block(tokens: PeekableTokens, blocks: list) -> None:
    """Merge consecutive raw html tokens into a single html leaf."""
    contents = []
    while True:
        token = tokens.peek()
        if token is None or token.kind is not TokenKind.HTML:
            break
        tokens.next()
        contents.append(ContentInline(convert_atom(token).tag))
    blocks.append(LeafBlock(LeafBlockTag.html(), contents))


# ---------------------------------------------------------------------------
# Recursive descent
# ---------------------------------------------------------------------------

def load_nodes(
    tokens: PeekableTokens,
    terminator: Optional[Tag],
    context: ChildContext,
    children: Optional[list],
    outofbands: list,
) -> None:
    """
    Parse tokens into ``children`` until ``terminator`` closes (or the stream
    ends when there is no terminator).

    Args:
        tokens: peekable token source
        terminator: tag whose close ends this level, None at top level
        context: kind of children this level accepts
        children: output list for in-band children (None for NONE context)
        outofbands: collector for out-of-band nodes
    """
    while True:
        token = tokens.peek()
        if token is None:
            if terminator is None:
                return
            raise StructureError(f"End of stream while waiting for close of {terminator.kind.value}")

        if context is ChildContext.BLOCKS:
            if token.kind is TokenKind.START and token.tag.kind is TagKind.ITEM:
                _load_list_item(tokens, children, outofbands)
                continue
            if token.kind is TokenKind.HTML:
                _load_html_block(tokens, children)
                continue

        tokens.next()

        if token.kind is TokenKind.START:
            _load_open(tokens, token.tag, context, children, outofbands)
            continue

        if token.kind is TokenKind.END:
            if terminator is not None and token.tag == terminator:
                return
            raise StructureError(f"Unexpected close token {token.describe()}")

        converted = convert_atom(token)
        if converted.category is TagCategory.MARKUP_BLOCK:
            if context is not ChildContext.BLOCKS:
                raise StructureError(f"Markup token {token.describe()} outside block context")
            children.append(MarkupBlock(converted.tag))
        else:
            if context is not ChildContext.INLINES:
                raise StructureError(f"Content token {token.describe()} outside inline context")
            children.append(ContentInline(converted.tag))


def _load_open(
    tokens: PeekableTokens,
    tag: Tag,
    context: ChildContext,
    children: Optional[list],
    outofbands: list,
) -> None:
    converted = convert_tag(tag)
    category = converted.category

    if category.out_of_band:
        nested = []
        if category is TagCategory.OUT_OF_BAND_CONTAINER:
            node = OutOfBandContainer(converted.tag)
            load_nodes(tokens, tag, ChildContext.BLOCKS, node.children, nested)
        else:
            node = OutOfBandLeaf(converted.tag)
            load_nodes(tokens, tag, ChildContext.INLINES, node.contents, nested)
        outofbands.append(node)
        outofbands.extend(nested)
        return

    if context is ChildContext.BLOCKS:
        if category is TagCategory.CONTAINER_BLOCK:
            node = ContainerBlock(converted.tag)
            load_nodes(tokens, tag, ChildContext.BLOCKS, node.children, outofbands)
        elif category is TagCategory.LEAF_BLOCK:
            node = LeafBlock(converted.tag)
            load_nodes(tokens, tag, ChildContext.INLINES, node.contents, outofbands)
        else:
            raise StructureError(f"Tag {tag.kind.value} cannot open a block")
        children.append(node)
        return

    if context is ChildContext.INLINES:
        if category is TagCategory.SURROUNDING_INLINE:
            node = SurroundingInline(converted.tag)
            load_nodes(tokens, tag, ChildContext.INLINES, node.contents, outofbands)
        elif category is TagCategory.CONTENT_INLINE:
            node = ContentInline(converted.tag)
            load_nodes(tokens, tag, ChildContext.NONE, None, outofbands)
        else:
            raise StructureError(f"Tag {tag.kind.value} cannot open an inline")
        children.append(node)
        return

    raise StructureError(f"Tag {tag.kind.value} opened where no children are allowed")


def build_document(tokens: Iterable[Token]) -> Document:
    """Build a ``Document`` from a complete token stream."""
    doc = Document()
    stream = PeekableTokens(tokens)
    load_nodes(stream, None, ChildContext.BLOCKS, doc.blocks, doc.outofbands)
    if stream.peek() is not None:
        raise StructureError(f"Trailing token {stream.peek().describe()} after document end")
    logger.debug(f"Built document: {len(doc.blocks)} blocks, {len(doc.outofbands)} out-of-band nodes")
    return doc
