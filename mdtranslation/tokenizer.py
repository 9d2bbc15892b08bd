"""
Markdown tokenizer: raw text -> flat token stream.

Uses mistune v3 to parse the text into its AST (list of token dicts) and
flattens that AST into the ``Token`` model consumed by the tree builder.

Shape of the produced stream:

- tight list items (mistune ``block_text``) emit their inline tokens directly
  inside the item, without a paragraph;
- every ``block_html`` is one atomic html token at block level;
- footnote definitions come after the main content;
- adjacent text tokens are merged.

Author: Olivier Vitrac, PhD, HDR | olivier.vitrac@adservio.fr | Adservio | 2026-10-19
"""

import logging
from typing import Dict, List, Optional, Sequence

import mistune

from mdtranslation.config import DEFAULT_PLUGINS
from mdtranslation.errors import StructureError
from mdtranslation.spans import TextSpan
from mdtranslation.tokens import Alignment, CodeBlockKind, LinkType, Tag, Token, TokenKind

logger = logging.getLogger(__name__)

_ALIGNMENTS = {
    None: Alignment.NONE,
    "left": Alignment.LEFT,
    "center": Alignment.CENTER,
    "right": Alignment.RIGHT,
}


class MarkdownTokenizer:
    """
    Flatten mistune's AST into tokens.

    Attributes:
        plugins: mistune plugin names enabled for parsing
    """

    def __init__(self, plugins: Optional[Sequence[str]] = None):
        self.plugins = list(DEFAULT_PLUGINS if plugins is None else plugins)
        self._markdown = mistune.create_markdown(renderer="ast", plugins=self.plugins)

    def parse_ast(self, text: str) -> List[Dict]:
        """Raw mistune AST of ``text``."""
        return self._markdown(text)

    def tokenize(self, text: str) -> List[Token]:
        tokens: List[Token] = []
        for node in self.parse_ast(text):
            self._block(node, tokens)
        logger.debug(f"Tokenized {len(text)} chars into {len(tokens)} tokens")
        return tokens

    # -- blocks -------------------------------------------------------------

    def _block(self, node: Dict, out: List[Token], in_item: bool = False) -> None:
        kind = node.get("type")
        attrs = node.get("attrs") or {}

        if kind == "blank_line":
            return

        if kind == "paragraph":
            self._wrapped(Tag.paragraph(), node, out)
        elif kind == "block_text":
            if in_item:
                self._inlines(node.get("children", []), out)
            else:
                self._wrapped(Tag.paragraph(), node, out)
        elif kind == "heading":
            self._wrapped(Tag.heading(attrs.get("level", 1)), node, out)
        elif kind == "thematic_break":
            out.append(Token.rule())
        elif kind == "block_code":
            code_kind = CodeBlockKind.INDENTED if node.get("style") == "indent" else CodeBlockKind.FENCED
            tag = Tag.code_block(code_kind, (attrs.get("info") or "").strip())
            out.append(Token.start(tag))
            raw = node.get("raw", "")
            if raw:
                out.append(Token.text(TextSpan.borrowed(raw)))
            out.append(Token.end(tag))
        elif kind == "block_quote":
            tag = Tag.block_quote()
            out.append(Token.start(tag))
            for child in node.get("children", []):
                self._block(child, out)
            out.append(Token.end(tag))
        elif kind == "block_html":
            out.append(Token.html(TextSpan.borrowed(node.get("raw", ""))))
        elif kind == "list":
            start = None
            if attrs.get("ordered"):
                start = attrs.get("start", 1)
            tag = Tag.list(start)
            out.append(Token.start(tag))
            for item in node.get("children", []):
                self._list_item(item, out)
            out.append(Token.end(tag))
        elif kind in ("list_item", "task_list_item"):
            self._list_item(node, out)
        elif kind == "footnotes":
            for item in node.get("children", []):
                self._block(item, out)
        elif kind == "footnote_item":
            tag = Tag.footnote_definition(str(attrs.get("key", "")))
            out.append(Token.start(tag))
            for child in node.get("children", []):
                self._block(child, out)
            out.append(Token.end(tag))
        elif kind == "table":
            self._table(node, out)
        elif kind == "block_error":
            logger.warning(f"mistune reported a block error: {node.get('raw', '')[:40]!r}")
            tag = Tag.paragraph()
            out.append(Token.start(tag))
            _append_text(out, node.get("raw", ""))
            out.append(Token.end(tag))
        else:
            raise StructureError(f"Unsupported markdown block: {kind!r}")

    def _wrapped(self, tag: Tag, node: Dict, out: List[Token]) -> None:
        out.append(Token.start(tag))
        self._inlines(node.get("children", []), out)
        out.append(Token.end(tag))

    def _list_item(self, node: Dict, out: List[Token]) -> None:
        tag = Tag.item()
        out.append(Token.start(tag))
        children = node.get("children", [])
        checked = (node.get("attrs") or {}).get("checked") if node.get("type") == "task_list_item" else None

        for i, child in enumerate(children):
            if checked is not None and i == 0 and child.get("type") in ("block_text", "paragraph"):
                # marker is the first inline of the item text
                if child.get("type") == "paragraph":
                    ptag = Tag.paragraph()
                    out.append(Token.start(ptag))
                    out.append(Token.task_list_marker(bool(checked)))
                    self._inlines(child.get("children", []), out)
                    out.append(Token.end(ptag))
                else:
                    out.append(Token.task_list_marker(bool(checked)))
                    self._inlines(child.get("children", []), out)
                continue
            self._block(child, out, in_item=True)

        if checked is not None and not children:
            out.append(Token.task_list_marker(bool(checked)))
        out.append(Token.end(tag))

    def _table(self, node: Dict, out: List[Token]) -> None:
        head = None
        body_rows: List[Dict] = []
        for child in node.get("children", []):
            if child.get("type") == "table_head":
                head = child
            elif child.get("type") == "table_body":
                body_rows.extend(child.get("children", []))

        head_cells = head.get("children", []) if head else []
        alignments = [_ALIGNMENTS.get((c.get("attrs") or {}).get("align")) or Alignment.NONE for c in head_cells]

        table = Tag.table(alignments)
        out.append(Token.start(table))
        thead = Tag.table_head()
        out.append(Token.start(thead))
        for cell in head_cells:
            self._wrapped(Tag.table_cell(), cell, out)
        out.append(Token.end(thead))
        for row in body_rows:
            trow = Tag.table_row()
            out.append(Token.start(trow))
            for cell in row.get("children", []):
                self._wrapped(Tag.table_cell(), cell, out)
            out.append(Token.end(trow))
        out.append(Token.end(table))

    # -- inlines ------------------------------------------------------------

    def _inlines(self, nodes: List[Dict], out: List[Token]) -> None:
        for node in nodes:
            self._inline(node, out)

    def _inline(self, node: Dict, out: List[Token]) -> None:
        kind = node.get("type")
        attrs = node.get("attrs") or {}

        if kind == "text":
            _append_text(out, node.get("raw", ""))
        elif kind == "emphasis":
            self._wrapped(Tag.emphasis(), node, out)
        elif kind == "strong":
            self._wrapped(Tag.strong(), node, out)
        elif kind == "strikethrough":
            self._wrapped(Tag.strikethrough(), node, out)
        elif kind == "codespan":
            out.append(Token.code(TextSpan.borrowed(node.get("raw", ""))))
        elif kind == "inline_html":
            out.append(Token.html(TextSpan.borrowed(node.get("raw", ""))))
        elif kind == "linebreak":
            out.append(Token.hard_break())
        elif kind == "softbreak":
            out.append(Token.soft_break())
        elif kind == "footnote_ref":
            out.append(Token.footnote_reference(TextSpan.borrowed(str(node.get("raw", "")))))
        elif kind == "link":
            url = attrs.get("url", "")
            tag = Tag.link(url, attrs.get("title") or "", _link_type(url, node.get("children", [])))
            self._wrapped(tag, node, out)
        elif kind == "image":
            tag = Tag.image(attrs.get("url", ""), attrs.get("title") or "")
            self._wrapped(tag, node, out)
        else:
            raise StructureError(f"Unsupported markdown inline: {kind!r}")


def _append_text(out: List[Token], raw: str) -> None:
    if not raw:
        return
    if out and out[-1].kind is TokenKind.TEXT:
        merged = out[-1].content.text + raw
        out[-1] = Token.text(TextSpan.owned(merged))
        return
    out.append(Token.text(TextSpan.borrowed(raw)))


def _link_type(url: str, children: List[Dict]) -> LinkType:
    """Autolinks are links whose only text is their own destination."""
    if len(children) == 1 and children[0].get("type") == "text":
        label = children[0].get("raw", "")
        if url.startswith("mailto:") and url[len("mailto:"):] == label:
            return LinkType.EMAIL
        if label == url:
            return LinkType.AUTOLINK
    return LinkType.INLINE


_default_tokenizer: Optional[MarkdownTokenizer] = None


def tokenize(text: str, plugins: Optional[Sequence[str]] = None) -> List[Token]:
    """Tokenize ``text`` with the given plugins (default set when None)."""
    global _default_tokenizer
    if plugins is not None:
        return MarkdownTokenizer(plugins).tokenize(text)
    if _default_tokenizer is None:
        _default_tokenizer = MarkdownTokenizer()
    return _default_tokenizer.tokenize(text)
