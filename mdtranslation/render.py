"""
Markdown renderer: flat token stream -> CommonMark text.

The stream is first nested into elements (open token + children), then
written block by block. GFM extensions (tables, strikethrough, task list
markers, footnotes) are supported. Output style comes from ``RenderConfig``.

Author: Olivier Vitrac, PhD, HDR | olivier.vitrac@adservio.fr | Adservio | 2026-10-19
"""

import logging
import re
from typing import Iterable, List, Optional, Union

from mdtranslation.config import RenderConfig
from mdtranslation.errors import StructureError
from mdtranslation.tokens import Alignment, CodeBlockKind, LinkType, TagKind, Token, TokenKind

logger = logging.getLogger(__name__)

_INLINE_TAGS = frozenset({
    TagKind.EMPHASIS,
    TagKind.STRONG,
    TagKind.STRIKETHROUGH,
    TagKind.LINK,
    TagKind.IMAGE,
})

_ESCAPE_RE = re.compile(r"([\\`*_\[\]<])")
_LINE_START_RE = re.compile(r"^(#{1,6}(?:\s|$)|>|[-+](?:\s|$))")
_ORDERED_START_RE = re.compile(r"^(\d+)([.)])(?=\s|$)")
_BACKTICK_RUN_RE = re.compile(r"`+")

_ALIGNMENT_RULES = {
    Alignment.NONE: "---",
    Alignment.LEFT: ":--",
    Alignment.CENTER: ":-:",
    Alignment.RIGHT: "--:",
}


# ---------------------------------------------------------------------------
# Nesting
# ---------------------------------------------------------------------------

class _Element:
    """An open token with the nodes up to its matching close."""
    __slots__ = ("token", "children")

    def __init__(self, token: Token):
        self.token = token
        self.children: List["_Node"] = []

    @property
    def kind(self) -> TagKind:
        return self.token.tag.kind


_Node = Union[_Element, Token]


def nest(tokens: Iterable[Token]) -> List[_Node]:
    """Group a flat stream into elements; unbalanced streams raise."""
    root: List[_Node] = []
    stack: List[_Element] = []
    for token in tokens:
        target = stack[-1].children if stack else root
        if token.kind is TokenKind.START:
            element = _Element(token)
            target.append(element)
            stack.append(element)
        elif token.kind is TokenKind.END:
            if not stack or stack[-1].token.tag != token.tag:
                raise StructureError(f"Unbalanced close token {token.describe()}")
            stack.pop()
        else:
            target.append(token)
    if stack:
        raise StructureError(f"Unclosed {stack[-1].token.describe()} at end of stream")
    return root


def _is_inline(node: _Node) -> bool:
    if isinstance(node, _Element):
        return node.kind in _INLINE_TAGS
    return node.kind is not TokenKind.RULE


# ---------------------------------------------------------------------------
# Writer
# ---------------------------------------------------------------------------

class MarkdownWriter:
    """
    Write nested tokens as markdown.

    Attributes:
        config: output style options
    """

    def __init__(self, config: Optional[RenderConfig] = None):
        self.config = config or RenderConfig()

    def render(self, tokens: Iterable[Token]) -> str:
        text = self._blocks(nest(tokens))
        return text + "\n" if text else ""

    # -- blocks -------------------------------------------------------------

    def _blocks(self, nodes: List[_Node], html_inline: bool = False, separator: str = "\n\n") -> str:
        """
        Render a block sequence. Runs of inline nodes form one text block.

        Args:
            nodes: children of a block container
            html_inline: raw html tokens belong to the surrounding text
            separator: string joining the rendered blocks
        """
        chunks = []
        run: List[_Node] = []
        for node in nodes:
            if _is_inline(node) and (html_inline or not _is_html(node)):
                run.append(node)
                continue
            if run:
                chunks.append(self._text_block(run))
                run = []
            if isinstance(node, Token):
                if node.kind is TokenKind.RULE:
                    chunks.append(self.config.rule)
                else:
                    chunks.append(node.content.text.rstrip("\n"))
            else:
                chunks.append(self._block(node))
        if run:
            chunks.append(self._text_block(run))
        return separator.join(chunks)

    def _text_block(self, nodes: List[_Node]) -> str:
        text = self._inlines(nodes)
        if nodes and isinstance(nodes[0], Token) and nodes[0].kind is TokenKind.TEXT:
            text = _LINE_START_RE.sub(r"\\\1", text, count=1)
            text = _ORDERED_START_RE.sub(r"\1\\\2", text, count=1)
        return text

    def _block(self, element: _Element) -> str:
        kind = element.kind
        tag = element.token.tag

        if kind is TagKind.PARAGRAPH or kind is TagKind.TABLE_CELL:
            return self._text_block(element.children)
        if kind is TagKind.HEADING:
            return "#" * tag.level + " " + self._inlines(element.children).replace("\n", " ")
        if kind is TagKind.CODE_BLOCK:
            return self._code_block(element)
        if kind is TagKind.BLOCK_QUOTE:
            return _prefix_lines(self._blocks(element.children), "> ", ">")
        if kind is TagKind.LIST:
            return self._list(element)
        if kind is TagKind.ITEM:
            return self._item(element, tight=not _has_paragraph(element))
        if kind is TagKind.FOOTNOTE_DEFINITION:
            body = self._blocks(element.children)
            return f"[^{tag.label}]: " + _indent_tail(body, "    ")
        if kind is TagKind.TABLE:
            return self._table(element)
        if kind in (TagKind.TABLE_HEAD, TagKind.TABLE_ROW):
            return self._table_row(element)
        # inline element at block level
        return self._text_block([element])

    def _code_block(self, element: _Element) -> str:
        tag = element.token.tag
        content = "".join(t.content.text for t in element.children if isinstance(t, Token) and t.content is not None)
        if tag.code_kind is CodeBlockKind.INDENTED:
            return "\n".join("    " + line if line else "" for line in content.rstrip("\n").split("\n"))
        fence = self.config.code_fence
        while fence in content:
            fence += fence[0]
        if content and not content.endswith("\n"):
            content += "\n"
        return f"{fence}{tag.info}\n{content}{fence}"

    def _list(self, element: _Element) -> str:
        start = element.token.tag.start
        tight = not any(_has_paragraph(item) for item in element.children if isinstance(item, _Element))
        rendered = []
        for i, item in enumerate(element.children):
            if start is None:
                marker = self.config.bullet
            else:
                marker = f"{start + i}."
            body = self._item(item, tight) if isinstance(item, _Element) else self._inlines([item])
            pad = " " * (len(marker) + 1)
            rendered.append(f"{marker} " + _indent_tail(body, pad) if body else marker)
        return ("\n" if tight else "\n\n").join(rendered)

    def _item(self, element: _Element, tight: bool) -> str:
        return self._blocks(element.children, html_inline=True, separator="\n" if tight else "\n\n")

    def _table(self, element: _Element) -> str:
        alignments = element.token.tag.alignments
        rows = [child for child in element.children if isinstance(child, _Element)]
        lines = []
        for i, row in enumerate(rows):
            lines.append(self._table_row(row))
            if i == 0:
                columns = max(len(alignments), len(row.children))
                rules = [_ALIGNMENT_RULES[alignments[c]] if c < len(alignments) else "---" for c in range(columns)]
                lines.append("|" + "|".join(rules) + "|")
        return "\n".join(lines)

    def _table_row(self, row: _Element) -> str:
        cells = []
        for cell in row.children:
            if isinstance(cell, _Element):
                text = self._inlines(cell.children)
            else:
                text = self._inlines([cell])
            cells.append(text.replace("|", "\\|").replace("\n", " "))
        return "|" + "|".join(cells) + "|"

    # -- inlines ------------------------------------------------------------

    def _inlines(self, nodes: List[_Node]) -> str:
        return "".join(self._inline(node) for node in nodes)

    def _inline(self, node: _Node) -> str:
        if isinstance(node, _Element):
            return self._inline_element(node)

        kind = node.kind
        if kind is TokenKind.TEXT:
            return _ESCAPE_RE.sub(r"\\\1", node.content.text)
        if kind is TokenKind.CODE:
            return _code_span(node.content.text)
        if kind is TokenKind.HTML:
            return node.content.text
        if kind is TokenKind.FOOTNOTE_REFERENCE:
            return f"[^{node.content.text}]"
        if kind is TokenKind.SOFT_BREAK:
            return "\n"
        if kind is TokenKind.HARD_BREAK:
            return "  \n"
        if kind is TokenKind.TASK_LIST_MARKER:
            return "[x] " if node.checked else "[ ] "
        if kind is TokenKind.RULE:
            return self.config.rule
        raise StructureError(f"Cannot render {node.describe()} inline")

    def _inline_element(self, element: _Element) -> str:
        kind = element.kind
        tag = element.token.tag
        inner = self._inlines(element.children)

        if kind is TagKind.EMPHASIS:
            return f"{self.config.emphasis}{inner}{self.config.emphasis}"
        if kind is TagKind.STRONG:
            return f"{self.config.strong}{inner}{self.config.strong}"
        if kind is TagKind.STRIKETHROUGH:
            return f"~~{inner}~~"
        if kind in (TagKind.LINK, TagKind.IMAGE):
            prefix = "!" if kind is TagKind.IMAGE else ""
            if kind is TagKind.LINK and tag.link_type is LinkType.AUTOLINK:
                return f"<{tag.destination}>"
            if kind is TagKind.LINK and tag.link_type is LinkType.EMAIL:
                address = tag.destination
                if address.startswith("mailto:"):
                    address = address[len("mailto:"):]
                return f"<{address}>"
            return f"{prefix}[{inner}]({_destination(tag.destination)}{_title(tag.title)})"
        # block element nested in inline content
        return self._block(element)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _is_html(node: _Node) -> bool:
    return isinstance(node, Token) and node.kind is TokenKind.HTML


def _has_paragraph(item: _Element) -> bool:
    return any(isinstance(c, _Element) and c.kind is TagKind.PARAGRAPH for c in item.children)


def _prefix_lines(text: str, prefix: str, empty_prefix: str) -> str:
    return "\n".join(prefix + line if line else empty_prefix for line in text.split("\n"))


def _indent_tail(text: str, pad: str) -> str:
    """Indent every line but the first."""
    lines = text.split("\n")
    return "\n".join([lines[0]] + [pad + line if line else "" for line in lines[1:]])


def _code_span(code: str) -> str:
    longest = max((len(m) for m in _BACKTICK_RUN_RE.findall(code)), default=0)
    fence = "`" * (longest + 1)
    if code.startswith("`") or code.endswith("`") or (code.startswith(" ") and code.endswith(" ") and code.strip()):
        code = f" {code} "
    return f"{fence}{code}{fence}"


def _destination(url: str) -> str:
    if not url or any(ch in url for ch in " ()<>"):
        return "<" + url.replace("<", "\\<").replace(">", "\\>") + ">"
    return url


def _title(title: str) -> str:
    if not title:
        return ""
    return ' "' + title.replace('"', '\\"') + '"'


def render_tokens(tokens: Iterable[Token], config: Optional[RenderConfig] = None) -> str:
    """Render ``tokens`` to markdown text."""
    text = MarkdownWriter(config).render(tokens)
    logger.debug(f"Rendered {len(text)} chars")
    return text
