"""
Document tree node taxonomy.

Block nodes are containers (block children), leaves (inline children) or
markup (no children). Inline nodes are surrounding (inline children) or
content (no children). Out-of-band nodes (footnote definitions) are kept in a
separate sequence of the ``Document``.

Every tag category is a closed set of kinds plus a ``CUSTOM`` kind carrying a
name; consumers match all kinds and treat ``CUSTOM`` explicitly.

Author: Olivier Vitrac, PhD, HDR | olivier.vitrac@adservio.fr | Adservio | 2026-10-19
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence, Tuple, Union

from mdtranslation.spans import TextSpan
from mdtranslation.tokens import Alignment, CodeBlockKind, LinkType


# ---------------------------------------------------------------------------
# Tag kinds
# ---------------------------------------------------------------------------

class ContainerKind(str, Enum):
    BLOCK_QUOTE = "block_quote"
    LIST = "list"
    LIST_ITEM = "list_item"
    TABLE = "table"
    TABLE_HEAD = "table_head"
    TABLE_ROW = "table_row"
    CUSTOM = "custom"


class LeafKind(str, Enum):
    PARAGRAPH = "paragraph"
    HEADING = "heading"
    CODE_BLOCK = "code_block"
    TABLE_CELL = "table_cell"
    HTML = "html"
    CUSTOM = "custom"


class MarkupKind(str, Enum):
    RULE = "rule"
    CUSTOM = "custom"


class SurroundingKind(str, Enum):
    EMPHASIS = "emphasis"
    STRONG = "strong"
    STRIKETHROUGH = "strikethrough"
    LINK = "link"
    IMAGE = "image"
    CUSTOM = "custom"


class ContentKind(str, Enum):
    TEXT = "text"
    CODE = "code"
    RAW_HTML = "raw_html"
    FOOTNOTE_REF = "footnote_ref"
    TASK_LIST_MARKER = "task_list_marker"
    SOFT_BREAK = "soft_break"
    HARD_BREAK = "hard_break"
    CUSTOM = "custom"


class OutOfBandContainerKind(str, Enum):
    FOOTNOTE_DEFINITION = "footnote_definition"
    CUSTOM = "custom"


class OutOfBandLeafKind(str, Enum):
    CUSTOM = "custom"


# ---------------------------------------------------------------------------
# Tags
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ContainerBlockTag:
    kind: ContainerKind
    start: Optional[int] = None                 # list
    alignments: Tuple[Alignment, ...] = ()      # table
    name: str = ""                              # custom

    @classmethod
    def block_quote(cls) -> "ContainerBlockTag":
        return cls(ContainerKind.BLOCK_QUOTE)

    @classmethod
    def list(cls, start: Optional[int] = None) -> "ContainerBlockTag":
        return cls(ContainerKind.LIST, start=start)

    @classmethod
    def list_item(cls) -> "ContainerBlockTag":
        return cls(ContainerKind.LIST_ITEM)

    @classmethod
    def table(cls, alignments: Sequence[Alignment] = ()) -> "ContainerBlockTag":
        return cls(ContainerKind.TABLE, alignments=tuple(alignments))

    @classmethod
    def table_head(cls) -> "ContainerBlockTag":
        return cls(ContainerKind.TABLE_HEAD)

    @classmethod
    def table_row(cls) -> "ContainerBlockTag":
        return cls(ContainerKind.TABLE_ROW)

    @classmethod
    def custom(cls, name: str) -> "ContainerBlockTag":
        return cls(ContainerKind.CUSTOM, name=name)


@dataclass(frozen=True)
class LeafBlockTag:
    kind: LeafKind
    level: Optional[int] = None                 # heading
    code_kind: Optional[CodeBlockKind] = None   # code block
    info: str = ""                              # code block
    implicit: bool = False                      # paragraph synthesized around bare list-item inlines
    name: str = ""                              # custom

    @classmethod
    def paragraph(cls, implicit: bool = False) -> "LeafBlockTag":
        return cls(LeafKind.PARAGRAPH, implicit=implicit)

    @classmethod
    def heading(cls, level: int) -> "LeafBlockTag":
        return cls(LeafKind.HEADING, level=level)

    @classmethod
    def code_block(cls, code_kind: CodeBlockKind, info: str = "") -> "LeafBlockTag":
        return cls(LeafKind.CODE_BLOCK, code_kind=code_kind, info=info)

    @classmethod
    def table_cell(cls) -> "LeafBlockTag":
        return cls(LeafKind.TABLE_CELL)

    @classmethod
    def html(cls) -> "LeafBlockTag":
        return cls(LeafKind.HTML)

    @classmethod
    def custom(cls, name: str) -> "LeafBlockTag":
        return cls(LeafKind.CUSTOM, name=name)


@dataclass(frozen=True)
class MarkupBlockTag:
    kind: MarkupKind
    name: str = ""

    @classmethod
    def rule(cls) -> "MarkupBlockTag":
        return cls(MarkupKind.RULE)

    @classmethod
    def custom(cls, name: str) -> "MarkupBlockTag":
        return cls(MarkupKind.CUSTOM, name=name)


@dataclass(frozen=True)
class SurroundingInlineTag:
    kind: SurroundingKind
    link_type: Optional[LinkType] = None
    destination: str = ""
    title: str = ""
    name: str = ""

    @classmethod
    def emphasis(cls) -> "SurroundingInlineTag":
        return cls(SurroundingKind.EMPHASIS)

    @classmethod
    def strong(cls) -> "SurroundingInlineTag":
        return cls(SurroundingKind.STRONG)

    @classmethod
    def strikethrough(cls) -> "SurroundingInlineTag":
        return cls(SurroundingKind.STRIKETHROUGH)

    @classmethod
    def link(cls, link_type: LinkType, destination: str, title: str = "") -> "SurroundingInlineTag":
        return cls(SurroundingKind.LINK, link_type=link_type, destination=destination, title=title)

    @classmethod
    def image(cls, link_type: LinkType, destination: str, title: str = "") -> "SurroundingInlineTag":
        return cls(SurroundingKind.IMAGE, link_type=link_type, destination=destination, title=title)

    @classmethod
    def custom(cls, name: str) -> "SurroundingInlineTag":
        return cls(SurroundingKind.CUSTOM, name=name)


@dataclass(frozen=True)
class ContentInlineTag:
    kind: ContentKind
    text: Optional[TextSpan] = None             # text, code, raw html, footnote label
    checked: Optional[bool] = None              # task list marker
    name: str = ""                              # custom

    @classmethod
    def text_span(cls, value: Union[str, TextSpan]) -> "ContentInlineTag":
        return cls(ContentKind.TEXT, text=TextSpan.coerce(value))

    @classmethod
    def code(cls, value: Union[str, TextSpan]) -> "ContentInlineTag":
        return cls(ContentKind.CODE, text=TextSpan.coerce(value))

    @classmethod
    def raw_html(cls, value: Union[str, TextSpan]) -> "ContentInlineTag":
        return cls(ContentKind.RAW_HTML, text=TextSpan.coerce(value))

    @classmethod
    def footnote_ref(cls, label: Union[str, TextSpan]) -> "ContentInlineTag":
        return cls(ContentKind.FOOTNOTE_REF, text=TextSpan.coerce(label))

    @classmethod
    def task_list_marker(cls, checked: bool) -> "ContentInlineTag":
        return cls(ContentKind.TASK_LIST_MARKER, checked=checked)

    @classmethod
    def soft_break(cls) -> "ContentInlineTag":
        return cls(ContentKind.SOFT_BREAK)

    @classmethod
    def hard_break(cls) -> "ContentInlineTag":
        return cls(ContentKind.HARD_BREAK)

    @classmethod
    def custom(cls, name: str) -> "ContentInlineTag":
        return cls(ContentKind.CUSTOM, name=name)


@dataclass(frozen=True)
class OutOfBandContainerTag:
    kind: OutOfBandContainerKind
    label: str = ""
    name: str = ""

    @classmethod
    def footnote_definition(cls, label: str) -> "OutOfBandContainerTag":
        return cls(OutOfBandContainerKind.FOOTNOTE_DEFINITION, label=label)

    @classmethod
    def custom(cls, name: str) -> "OutOfBandContainerTag":
        return cls(OutOfBandContainerKind.CUSTOM, name=name)


@dataclass(frozen=True)
class OutOfBandLeafTag:
    kind: OutOfBandLeafKind
    name: str = ""

    @classmethod
    def custom(cls, name: str) -> "OutOfBandLeafTag":
        return cls(OutOfBandLeafKind.CUSTOM, name=name)


NodeTag = Union[
    ContainerBlockTag,
    LeafBlockTag,
    MarkupBlockTag,
    SurroundingInlineTag,
    ContentInlineTag,
    OutOfBandContainerTag,
    OutOfBandLeafTag,
]


# ---------------------------------------------------------------------------
# Nodes
# ---------------------------------------------------------------------------

@dataclass
class SurroundingInline:
    """Inline node wrapping inline children (emphasis, link, ...)."""
    tag: SurroundingInlineTag
    contents: List["InlineNode"] = field(default_factory=list)


@dataclass
class ContentInline:
    """Inline node without children (text, code, breaks, ...)."""
    tag: ContentInlineTag

    @classmethod
    def text(cls, value: Union[str, TextSpan]) -> "ContentInline":
        return cls(ContentInlineTag.text_span(value))


InlineNode = Union[SurroundingInline, ContentInline]


@dataclass
class ContainerBlock:
    """Block node holding block children."""
    tag: ContainerBlockTag
    children: List["BlockNode"] = field(default_factory=list)


@dataclass
class LeafBlock:
    """Block node holding inline content."""
    tag: LeafBlockTag
    contents: List[InlineNode] = field(default_factory=list)


@dataclass
class MarkupBlock:
    """Block node without children."""
    tag: MarkupBlockTag


BlockNode = Union[ContainerBlock, LeafBlock, MarkupBlock]


@dataclass
class OutOfBandContainer:
    """Detached container (footnote definition) holding block children."""
    tag: OutOfBandContainerTag
    children: List[BlockNode] = field(default_factory=list)


@dataclass
class OutOfBandLeaf:
    """Detached leaf holding inline content."""
    tag: OutOfBandLeafTag
    contents: List[InlineNode] = field(default_factory=list)


OutOfBandNode = Union[OutOfBandContainer, OutOfBandLeaf]


@dataclass
class Document:
    """
    Document tree: main blocks plus out-of-band nodes.

    The convenience methods delegate to the builder, serializer, segmenter
    and clause extractor modules.
    """
    blocks: List[BlockNode] = field(default_factory=list)
    outofbands: List[OutOfBandNode] = field(default_factory=list)

    @classmethod
    def from_tokens(cls, tokens) -> "Document":
        from mdtranslation.builder import build_document
        return build_document(tokens)

    def into_tokens(self):
        from mdtranslation.serializer import document_tokens
        return document_tokens(self)

    def segment_sentences(self, skip_code_blocks: bool = False) -> None:
        from mdtranslation.segment import segment_document
        segment_document(self, skip_code_blocks=skip_code_blocks)

    def extract_clauses(self, source_language: str):
        from mdtranslation.clause import extract_clause_list
        return extract_clause_list(self, source_language)

    def iter_leaf_contents(self):
        """
        Yield every leaf inline list in document traversal order:
        main blocks pre-order depth-first, then out-of-band nodes.
        """
        for block in self.blocks:
            yield from _iter_block_leaves(block)
        for node in self.outofbands:
            if isinstance(node, OutOfBandContainer):
                for block in node.children:
                    yield from _iter_block_leaves(block)
            else:
                yield node.tag, node.contents


def _iter_block_leaves(block: BlockNode):
    if isinstance(block, ContainerBlock):
        for child in block.children:
            yield from _iter_block_leaves(child)
    elif isinstance(block, LeafBlock):
        yield block.tag, block.contents
    # markup blocks have no content
