"""
Tree serializer: document tree (or clause list) -> lazy token stream.

Traversal uses an explicit work deque: the next item is popped from the
left; when a node is expanded, its close token and children are pushed back
on the left so that depth-first order is preserved without recursion. The
resulting ``TokenStream`` is single-pass.

Author: Olivier Vitrac, PhD, HDR | olivier.vitrac@adservio.fr | Adservio | 2026-10-19
"""

import logging
from collections import deque
from typing import Iterable, Iterator, List, Optional

from mdtranslation.errors import StructureError
from mdtranslation.tags import EmitForm, unconvert_tag
from mdtranslation.tokens import Tag, Token

logger = logging.getLogger(__name__)


class TokenStream:
    """Lazy depth-first token iterator over tree nodes and literal tokens."""

    def __init__(self, items: Iterable = ()):
        self._items = deque(items)

    def __iter__(self) -> Iterator[Token]:
        return self

    def __next__(self) -> Token:
        while self._items:
            item = self._items.popleft()
            if isinstance(item, Token):
                return item
            token = self._expand(item)
            if token is not None:
                return token
        raise StopIteration

    def _push_front(self, items: List) -> None:
        self._items.extendleft(reversed(items))

    def _expand(self, node) -> Optional[Token]:
        """Expand ``node`` in place; return the token to emit now, if any."""
        unconverted = unconvert_tag(node.tag)
        form = unconverted.form

        if form is EmitForm.UNSUPPORTED:
            raise StructureError(f"Cannot serialize custom tag {unconverted.name!r}")
        if form is EmitForm.SINGLE:
            return unconverted.open
        if form is EmitForm.MARKUP:
            self._items.appendleft(unconverted.close)
            return unconverted.open

        children = _children_of(node)
        if form is EmitForm.TRANSPARENT:
            self._push_front(children)
            return None

        # span
        self._push_front(children + [unconverted.close])
        return unconverted.open


def _children_of(node) -> List:
    children = getattr(node, "children", None)
    if children is None:
        children = getattr(node, "contents", [])
    return list(children)


def document_tokens(doc) -> TokenStream:
    """Token stream of ``doc``: main blocks, then out-of-band nodes."""
    logger.debug(f"Serializing document: {len(doc.blocks)} blocks, {len(doc.outofbands)} out-of-band nodes")
    return TokenStream(list(doc.blocks) + list(doc.outofbands))


def clause_list_tokens(clause_list) -> TokenStream:
    """
    Token stream presenting each clause for translation:

        <ordered list starting at the clause index> <item> clause </item>
        ### language
        translation paragraph
        ...

    with a thematic break between clauses.
    """
    items = []
    for position, clause in enumerate(clause_list):
        if position:
            items.append(Token.rule())
        list_tag = Tag.list(clause.index)
        items.append(Token.start(list_tag))
        items.append(Token.start(Tag.item()))
        items.extend(clause.contents)
        items.append(Token.end(Tag.item()))
        items.append(Token.end(list_tag))
        for language, contents in clause.translations:
            heading = Tag.heading(3)
            items.append(Token.start(heading))
            items.append(Token.text(language))
            items.append(Token.end(heading))
            items.append(Token.start(Tag.paragraph()))
            items.extend(contents)
            items.append(Token.end(Tag.paragraph()))
    logger.debug(f"Projecting {len(clause_list)} clauses to tokens")
    return TokenStream(items)
