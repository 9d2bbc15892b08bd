"""
Flat markup token model.

This is the shape exchanged with the tokenizer (input) and the renderer
(output): structural open/close tokens carrying a ``Tag``, and atomic content
tokens (text, code, html, footnote reference, breaks, rule, task marker).

Author: Olivier Vitrac, PhD, HDR | olivier.vitrac@adservio.fr | Adservio | 2026-10-19
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Tuple, Union

from mdtranslation.spans import TextSpan


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class TagKind(str, Enum):
    """Structural tag kinds that open and close a region."""
    PARAGRAPH = "paragraph"
    HEADING = "heading"
    BLOCK_QUOTE = "block_quote"
    CODE_BLOCK = "code_block"
    LIST = "list"
    ITEM = "item"
    FOOTNOTE_DEFINITION = "footnote_definition"
    TABLE = "table"
    TABLE_HEAD = "table_head"
    TABLE_ROW = "table_row"
    TABLE_CELL = "table_cell"
    EMPHASIS = "emphasis"
    STRONG = "strong"
    STRIKETHROUGH = "strikethrough"
    LINK = "link"
    IMAGE = "image"


class TokenKind(str, Enum):
    """Token kinds: open/close markers and atomic content."""
    START = "start"
    END = "end"
    TEXT = "text"
    CODE = "code"
    HTML = "html"
    FOOTNOTE_REFERENCE = "footnote_reference"
    SOFT_BREAK = "soft_break"
    HARD_BREAK = "hard_break"
    RULE = "rule"
    TASK_LIST_MARKER = "task_list_marker"


class CodeBlockKind(str, Enum):
    INDENTED = "indented"
    FENCED = "fenced"


class LinkType(str, Enum):
    INLINE = "inline"
    REFERENCE = "reference"
    COLLAPSED = "collapsed"
    SHORTCUT = "shortcut"
    AUTOLINK = "autolink"
    EMAIL = "email"


class Alignment(str, Enum):
    NONE = "none"
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


# Token kinds that carry a text span payload
TEXT_PAYLOAD_KINDS = frozenset({
    TokenKind.TEXT,
    TokenKind.CODE,
    TokenKind.HTML,
    TokenKind.FOOTNOTE_REFERENCE,
})


# ---------------------------------------------------------------------------
# Tag
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Tag:
    """A structural tag with its payload.

    Only the fields relevant to ``kind`` are set; the others keep their
    defaults so that two tags of the same kind and payload compare equal.
    """
    kind: TagKind
    level: Optional[int] = None                 # heading
    code_kind: Optional[CodeBlockKind] = None   # code block
    info: str = ""                              # code block info string
    start: Optional[int] = None                 # list: None = bullet list
    alignments: Tuple[Alignment, ...] = ()      # table
    label: str = ""                             # footnote definition
    link_type: Optional[LinkType] = None        # link / image
    destination: str = ""                       # link / image
    title: str = ""                             # link / image

    @classmethod
    def paragraph(cls) -> "Tag":
        return cls(TagKind.PARAGRAPH)

    @classmethod
    def heading(cls, level: int) -> "Tag":
        if not 1 <= level <= 6:
            raise ValueError(f"Heading level must be 1-6, got {level}")
        return cls(TagKind.HEADING, level=level)

    @classmethod
    def block_quote(cls) -> "Tag":
        return cls(TagKind.BLOCK_QUOTE)

    @classmethod
    def code_block(cls, code_kind: CodeBlockKind = CodeBlockKind.FENCED, info: str = "") -> "Tag":
        return cls(TagKind.CODE_BLOCK, code_kind=code_kind, info=info)

    @classmethod
    def list(cls, start: Optional[int] = None) -> "Tag":
        return cls(TagKind.LIST, start=start)

    @classmethod
    def item(cls) -> "Tag":
        return cls(TagKind.ITEM)

    @classmethod
    def footnote_definition(cls, label: str) -> "Tag":
        return cls(TagKind.FOOTNOTE_DEFINITION, label=label)

    @classmethod
    def table(cls, alignments: Sequence[Alignment] = ()) -> "Tag":
        return cls(TagKind.TABLE, alignments=tuple(alignments))

    @classmethod
    def table_head(cls) -> "Tag":
        return cls(TagKind.TABLE_HEAD)

    @classmethod
    def table_row(cls) -> "Tag":
        return cls(TagKind.TABLE_ROW)

    @classmethod
    def table_cell(cls) -> "Tag":
        return cls(TagKind.TABLE_CELL)

    @classmethod
    def emphasis(cls) -> "Tag":
        return cls(TagKind.EMPHASIS)

    @classmethod
    def strong(cls) -> "Tag":
        return cls(TagKind.STRONG)

    @classmethod
    def strikethrough(cls) -> "Tag":
        return cls(TagKind.STRIKETHROUGH)

    @classmethod
    def link(cls, destination: str, title: str = "", link_type: LinkType = LinkType.INLINE) -> "Tag":
        return cls(TagKind.LINK, link_type=link_type, destination=destination, title=title)

    @classmethod
    def image(cls, destination: str, title: str = "", link_type: LinkType = LinkType.INLINE) -> "Tag":
        return cls(TagKind.IMAGE, link_type=link_type, destination=destination, title=title)


# ---------------------------------------------------------------------------
# Token
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Token:
    """One unit of the flat token stream."""
    kind: TokenKind
    tag: Optional[Tag] = None
    content: Optional[TextSpan] = None
    checked: Optional[bool] = None

    @property
    def is_start(self) -> bool:
        return self.kind is TokenKind.START

    @property
    def is_end(self) -> bool:
        return self.kind is TokenKind.END

    @property
    def is_atomic(self) -> bool:
        return self.kind not in (TokenKind.START, TokenKind.END)

    @classmethod
    def start(cls, tag: Tag) -> "Token":
        return cls(TokenKind.START, tag=tag)

    @classmethod
    def end(cls, tag: Tag) -> "Token":
        return cls(TokenKind.END, tag=tag)

    @classmethod
    def text(cls, value: Union[str, TextSpan]) -> "Token":
        return cls(TokenKind.TEXT, content=TextSpan.coerce(value))

    @classmethod
    def code(cls, value: Union[str, TextSpan]) -> "Token":
        return cls(TokenKind.CODE, content=TextSpan.coerce(value))

    @classmethod
    def html(cls, value: Union[str, TextSpan]) -> "Token":
        return cls(TokenKind.HTML, content=TextSpan.coerce(value))

    @classmethod
    def footnote_reference(cls, label: Union[str, TextSpan]) -> "Token":
        return cls(TokenKind.FOOTNOTE_REFERENCE, content=TextSpan.coerce(label))

    @classmethod
    def soft_break(cls) -> "Token":
        return cls(TokenKind.SOFT_BREAK)

    @classmethod
    def hard_break(cls) -> "Token":
        return cls(TokenKind.HARD_BREAK)

    @classmethod
    def rule(cls) -> "Token":
        return cls(TokenKind.RULE)

    @classmethod
    def task_list_marker(cls, checked: bool) -> "Token":
        return cls(TokenKind.TASK_LIST_MARKER, checked=checked)

    def describe(self) -> str:
        """Short human-readable form used in error messages."""
        if self.tag is not None:
            return f"{self.kind.value}({self.tag.kind.value})"
        return self.kind.value
