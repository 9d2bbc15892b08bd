"""
Tag converter: two-way mapping between token tags and tree node tags.

Forward: every open tag is classified into exactly one node category
(container / leaf / markup block, surrounding / content inline, out-of-band
container / leaf) together with the node tag that represents it. Atomic
content tokens are classified the same way by ``convert_atom``.

Inverse: every node tag maps to an emission form telling the serializer which
tokens to produce (span, single token, markup pair, transparent, or
unsupported).

Author: Olivier Vitrac, PhD, HDR | olivier.vitrac@adservio.fr | Adservio | 2026-10-19
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from mdtranslation.errors import StructureError
from mdtranslation.nodes import (
    ContainerBlockTag,
    ContainerKind,
    ContentInlineTag,
    ContentKind,
    LeafBlockTag,
    LeafKind,
    MarkupBlockTag,
    MarkupKind,
    NodeTag,
    OutOfBandContainerKind,
    OutOfBandContainerTag,
    OutOfBandLeafTag,
    SurroundingInlineTag,
    SurroundingKind,
)
from mdtranslation.tokens import LinkType, Tag, TagKind, Token, TokenKind


# ---------------------------------------------------------------------------
# Forward mapping
# ---------------------------------------------------------------------------

class TagCategory(str, Enum):
    """Node category an open tag (or atomic token) converts to."""
    CONTAINER_BLOCK = "container_block"
    LEAF_BLOCK = "leaf_block"
    MARKUP_BLOCK = "markup_block"
    SURROUNDING_INLINE = "surrounding_inline"
    CONTENT_INLINE = "content_inline"
    OUT_OF_BAND_CONTAINER = "out_of_band_container"
    OUT_OF_BAND_LEAF = "out_of_band_leaf"

    @property
    def out_of_band(self) -> bool:
        return self in (TagCategory.OUT_OF_BAND_CONTAINER, TagCategory.OUT_OF_BAND_LEAF)


@dataclass(frozen=True)
class ConvertedTag:
    category: TagCategory
    tag: NodeTag


# Tag kinds whose regions are inline content
INLINE_TAG_KINDS = frozenset({
    TagKind.EMPHASIS,
    TagKind.STRONG,
    TagKind.STRIKETHROUGH,
    TagKind.LINK,
    TagKind.IMAGE,
})


def convert_tag(tag: Tag) -> ConvertedTag:
    """Classify an open/close tag and build the matching node tag."""
    kind = tag.kind

    if kind is TagKind.PARAGRAPH:
        return ConvertedTag(TagCategory.LEAF_BLOCK, LeafBlockTag.paragraph())
    if kind is TagKind.HEADING:
        return ConvertedTag(TagCategory.LEAF_BLOCK, LeafBlockTag.heading(tag.level))
    if kind is TagKind.CODE_BLOCK:
        return ConvertedTag(TagCategory.LEAF_BLOCK, LeafBlockTag.code_block(tag.code_kind, tag.info))
    if kind is TagKind.TABLE_CELL:
        return ConvertedTag(TagCategory.LEAF_BLOCK, LeafBlockTag.table_cell())

    if kind is TagKind.BLOCK_QUOTE:
        return ConvertedTag(TagCategory.CONTAINER_BLOCK, ContainerBlockTag.block_quote())
    if kind is TagKind.LIST:
        return ConvertedTag(TagCategory.CONTAINER_BLOCK, ContainerBlockTag.list(tag.start))
    if kind is TagKind.ITEM:
        return ConvertedTag(TagCategory.CONTAINER_BLOCK, ContainerBlockTag.list_item())
    if kind is TagKind.TABLE:
        return ConvertedTag(TagCategory.CONTAINER_BLOCK, ContainerBlockTag.table(tag.alignments))
    if kind is TagKind.TABLE_HEAD:
        return ConvertedTag(TagCategory.CONTAINER_BLOCK, ContainerBlockTag.table_head())
    if kind is TagKind.TABLE_ROW:
        return ConvertedTag(TagCategory.CONTAINER_BLOCK, ContainerBlockTag.table_row())

    if kind is TagKind.FOOTNOTE_DEFINITION:
        return ConvertedTag(
            TagCategory.OUT_OF_BAND_CONTAINER,
            OutOfBandContainerTag.footnote_definition(tag.label),
        )

    if kind is TagKind.EMPHASIS:
        return ConvertedTag(TagCategory.SURROUNDING_INLINE, SurroundingInlineTag.emphasis())
    if kind is TagKind.STRONG:
        return ConvertedTag(TagCategory.SURROUNDING_INLINE, SurroundingInlineTag.strong())
    if kind is TagKind.STRIKETHROUGH:
        return ConvertedTag(TagCategory.SURROUNDING_INLINE, SurroundingInlineTag.strikethrough())
    if kind is TagKind.LINK:
        return ConvertedTag(
            TagCategory.SURROUNDING_INLINE,
            SurroundingInlineTag.link(tag.link_type or LinkType.INLINE, tag.destination, tag.title),
        )
    if kind is TagKind.IMAGE:
        return ConvertedTag(
            TagCategory.SURROUNDING_INLINE,
            SurroundingInlineTag.image(tag.link_type or LinkType.INLINE, tag.destination, tag.title),
        )

    raise StructureError(f"Unknown tag kind: {kind!r}")


def convert_atom(token: Token) -> ConvertedTag:
    """Classify an atomic token (content inline or markup block)."""
    kind = token.kind

    if kind is TokenKind.TEXT:
        return ConvertedTag(TagCategory.CONTENT_INLINE, ContentInlineTag.text_span(token.content))
    if kind is TokenKind.CODE:
        return ConvertedTag(TagCategory.CONTENT_INLINE, ContentInlineTag.code(token.content))
    if kind is TokenKind.HTML:
        return ConvertedTag(TagCategory.CONTENT_INLINE, ContentInlineTag.raw_html(token.content))
    if kind is TokenKind.FOOTNOTE_REFERENCE:
        return ConvertedTag(TagCategory.CONTENT_INLINE, ContentInlineTag.footnote_ref(token.content))
    if kind is TokenKind.TASK_LIST_MARKER:
        return ConvertedTag(TagCategory.CONTENT_INLINE, ContentInlineTag.task_list_marker(bool(token.checked)))
    if kind is TokenKind.SOFT_BREAK:
        return ConvertedTag(TagCategory.CONTENT_INLINE, ContentInlineTag.soft_break())
    if kind is TokenKind.HARD_BREAK:
        return ConvertedTag(TagCategory.CONTENT_INLINE, ContentInlineTag.hard_break())
    if kind is TokenKind.RULE:
        return ConvertedTag(TagCategory.MARKUP_BLOCK, MarkupBlockTag.rule())

    raise StructureError(f"Not an atomic token: {token.describe()}")


def is_token_inline(token: Token) -> bool:
    """True for tokens that belong to inline content."""
    if token.kind in (TokenKind.START, TokenKind.END):
        return token.tag.kind in INLINE_TAG_KINDS
    return token.kind is not TokenKind.RULE


# ---------------------------------------------------------------------------
# Inverse mapping
# ---------------------------------------------------------------------------

class EmitForm(str, Enum):
    """How a node tag is written back to tokens."""
    SPAN = "span"                   # open, children, close
    SINGLE = "single"               # one atomic token, no children
    MARKUP = "markup"               # open + close, no traversable children
    TRANSPARENT = "transparent"     # children only, no literal token
    UNSUPPORTED = "unsupported"     # custom / unknown tag


@dataclass(frozen=True)
class UnconvertedTag:
    form: EmitForm
    open: Optional[Token] = None
    close: Optional[Token] = None
    name: str = ""

    @classmethod
    def span(cls, tag: Tag) -> "UnconvertedTag":
        return cls(EmitForm.SPAN, open=Token.start(tag), close=Token.end(tag))

    @classmethod
    def markup(cls, tag: Tag) -> "UnconvertedTag":
        return cls(EmitForm.MARKUP, open=Token.start(tag), close=Token.end(tag))

    @classmethod
    def single(cls, token: Token) -> "UnconvertedTag":
        return cls(EmitForm.SINGLE, open=token)

    @classmethod
    def transparent(cls) -> "UnconvertedTag":
        return cls(EmitForm.TRANSPARENT)

    @classmethod
    def unsupported(cls, name: str) -> "UnconvertedTag":
        return cls(EmitForm.UNSUPPORTED, name=name)


def unconvert_tag(tag: NodeTag) -> UnconvertedTag:
    """Map a node tag back to its token emission form."""
    if isinstance(tag, ContainerBlockTag):
        return _unconvert_container(tag)
    if isinstance(tag, LeafBlockTag):
        return _unconvert_leaf(tag)
    if isinstance(tag, MarkupBlockTag):
        if tag.kind is MarkupKind.RULE:
            return UnconvertedTag.single(Token.rule())
        return UnconvertedTag.unsupported(tag.name)
    if isinstance(tag, SurroundingInlineTag):
        return _unconvert_surrounding(tag)
    if isinstance(tag, ContentInlineTag):
        return _unconvert_content(tag)
    if isinstance(tag, OutOfBandContainerTag):
        if tag.kind is OutOfBandContainerKind.FOOTNOTE_DEFINITION:
            return UnconvertedTag.span(Tag.footnote_definition(tag.label))
        return UnconvertedTag.unsupported(tag.name)
    if isinstance(tag, OutOfBandLeafTag):
        return UnconvertedTag.unsupported(tag.name)
    return UnconvertedTag.unsupported(type(tag).__name__)


def _unconvert_container(tag: ContainerBlockTag) -> UnconvertedTag:
    kind = tag.kind
    if kind is ContainerKind.BLOCK_QUOTE:
        return UnconvertedTag.span(Tag.block_quote())
    if kind is ContainerKind.LIST:
        return UnconvertedTag.span(Tag.list(tag.start))
    if kind is ContainerKind.LIST_ITEM:
        return UnconvertedTag.span(Tag.item())
    if kind is ContainerKind.TABLE:
        return UnconvertedTag.span(Tag.table(tag.alignments))
    if kind is ContainerKind.TABLE_HEAD:
        return UnconvertedTag.span(Tag.table_head())
    if kind is ContainerKind.TABLE_ROW:
        return UnconvertedTag.span(Tag.table_row())
    return UnconvertedTag.unsupported(tag.name)


def _unconvert_leaf(tag: LeafBlockTag) -> UnconvertedTag:
    kind = tag.kind
    if kind is LeafKind.PARAGRAPH:
        if tag.implicit:
            return UnconvertedTag.transparent()
        return UnconvertedTag.span(Tag.paragraph())
    if kind is LeafKind.HEADING:
        return UnconvertedTag.span(Tag.heading(tag.level))
    if kind is LeafKind.CODE_BLOCK:
        return UnconvertedTag.span(Tag.code_block(tag.code_kind, tag.info))
    if kind is LeafKind.TABLE_CELL:
        return UnconvertedTag.span(Tag.table_cell())
    if kind is LeafKind.HTML:
        # html fragments are consecutive atomic tokens, not a bracketed region
        return UnconvertedTag.transparent()
    return UnconvertedTag.unsupported(tag.name)


def _unconvert_surrounding(tag: SurroundingInlineTag) -> UnconvertedTag:
    kind = tag.kind
    if kind is SurroundingKind.EMPHASIS:
        return UnconvertedTag.span(Tag.emphasis())
    if kind is SurroundingKind.STRONG:
        return UnconvertedTag.span(Tag.strong())
    if kind is SurroundingKind.STRIKETHROUGH:
        return UnconvertedTag.span(Tag.strikethrough())
    if kind is SurroundingKind.LINK:
        return UnconvertedTag.span(Tag.link(tag.destination, tag.title, tag.link_type))
    if kind is SurroundingKind.IMAGE:
        return UnconvertedTag.span(Tag.image(tag.destination, tag.title, tag.link_type))
    return UnconvertedTag.unsupported(tag.name)


def _unconvert_content(tag: ContentInlineTag) -> UnconvertedTag:
    kind = tag.kind
    if kind is ContentKind.TEXT:
        return UnconvertedTag.single(Token.text(tag.text))
    if kind is ContentKind.CODE:
        return UnconvertedTag.single(Token.code(tag.text))
    if kind is ContentKind.RAW_HTML:
        return UnconvertedTag.single(Token.html(tag.text))
    if kind is ContentKind.FOOTNOTE_REF:
        return UnconvertedTag.single(Token.footnote_reference(tag.text))
    if kind is ContentKind.TASK_LIST_MARKER:
        return UnconvertedTag.single(Token.task_list_marker(tag.checked))
    if kind is ContentKind.SOFT_BREAK:
        return UnconvertedTag.single(Token.soft_break())
    if kind is ContentKind.HARD_BREAK:
        return UnconvertedTag.single(Token.hard_break())
    return UnconvertedTag.unsupported(tag.name)
