"""
Tests for the tree serializer and clause projection

Author: Olivier Vitrac, PhD, HDR | olivier.vitrac@adservio.fr | Adservio | 2026-10-19
"""

import pytest

from conftest import paragraph, wrap
from mdtranslation.builder import build_document
from mdtranslation.clause import Clause, DocumentClauseList
from mdtranslation.errors import StructureError
from mdtranslation.nodes import (
    ContainerBlock,
    ContainerBlockTag,
    ContentInline,
    Document,
    LeafBlock,
    LeafBlockTag,
    SurroundingInline,
    SurroundingInlineTag,
)
from mdtranslation.serializer import TokenStream, clause_list_tokens, document_tokens
from mdtranslation.tokens import Alignment, CodeBlockKind, LinkType, Tag, Token


def round_trip(tokens):
    return list(build_document(tokens).into_tokens())


class TestRoundTrip:
    """Build then serialize reproduces the stream."""

    def test_paragraphs(self):
        tokens = (
            wrap(Tag.heading(2), Token.text("Title"))
            + paragraph(
                Token.text("Hello "),
                *wrap(Tag.emphasis(), Token.text("big")),
                Token.hard_break(),
                *wrap(Tag.link("https://x.org", "X", LinkType.INLINE), Token.text("link")),
                Token.code("c"),
            )
            + [Token.rule()]
            + wrap(Tag.code_block(CodeBlockKind.FENCED, "py"), Token.text("x = 1\n"))
        )
        assert round_trip(tokens) == tokens

    def test_tight_and_loose_lists(self):
        tight = wrap(
            Tag.list(None),
            *wrap(Tag.item(), Token.task_list_marker(False), Token.text("a")),
            *wrap(Tag.item(), Token.text("b"), *wrap(Tag.list(3), *wrap(Tag.item(), Token.text("c")))),
        )
        loose = wrap(Tag.list(1), *wrap(Tag.item(), *paragraph(Token.text("d"))))
        tokens = tight + loose
        assert round_trip(tokens) == tokens

    def test_html_fragments_re_expand(self):
        tokens = [Token.html("<div>\n"), Token.html("hi\n"), Token.html("</div>\n")]
        assert round_trip(tokens) == tokens

    def test_table(self):
        tokens = wrap(
            Tag.table([Alignment.LEFT, Alignment.RIGHT]),
            *wrap(Tag.table_head(), *wrap(Tag.table_cell(), Token.text("a")), *wrap(Tag.table_cell(), Token.text("b"))),
            *wrap(Tag.table_row(), *wrap(Tag.table_cell(), Token.text("1")), *wrap(Tag.table_cell())),
        )
        assert round_trip(tokens) == tokens

    def test_out_of_band_after_main_blocks(self):
        note = wrap(Tag.footnote_definition("1"), *paragraph(Token.text("note")))
        first = paragraph(Token.text("a"), Token.footnote_reference("1"))
        last = paragraph(Token.text("b"))
        result = round_trip(first + note + last)
        assert result == first + last + note


class TestTokenStream:
    """Laziness and failure behaviour."""

    def test_stream_is_lazy_and_single_pass(self):
        doc = build_document(paragraph(Token.text("x")))
        stream = doc.into_tokens()
        assert isinstance(stream, TokenStream)
        assert next(stream) == Token.start(Tag.paragraph())
        assert list(stream) == [Token.text("x"), Token.end(Tag.paragraph())]
        assert list(stream) == []

    def test_unsupported_custom_tag_fails(self):
        doc = Document(blocks=[LeafBlock(LeafBlockTag.custom("box"), [ContentInline.text("x")])])
        with pytest.raises(StructureError):
            list(document_tokens(doc))

    def test_custom_inline_fails_when_reached(self):
        custom = SurroundingInline(SurroundingInlineTag.custom("Sentence"), [ContentInline.text("x")])
        doc = Document(blocks=[LeafBlock(LeafBlockTag.paragraph(), [custom])])
        stream = document_tokens(doc)
        assert next(stream) == Token.start(Tag.paragraph())
        with pytest.raises(StructureError):
            next(stream)

    def test_custom_container_fails(self):
        doc = Document(blocks=[ContainerBlock(ContainerBlockTag.custom("x"))])
        with pytest.raises(StructureError):
            list(document_tokens(doc))


class TestClauseProjection:
    """Clause list -> tokens."""

    def test_projection_shape(self):
        first = Clause(1, [ContentInline.text("Hello.")])
        first.add_translation("en-US", [ContentInline.text("Hello.")])
        first.add_translation("fr-FR", [ContentInline.text("Bonjour.")])
        second = Clause(2, [ContentInline.text("Bye.")])
        second.add_translation("en-US", [ContentInline.text("Bye.")])

        tokens = list(clause_list_tokens(DocumentClauseList([first, second])))

        expected = (
            wrap(Tag.list(1), *wrap(Tag.item(), Token.text("Hello.")))
            + wrap(Tag.heading(3), Token.text("en-US"))
            + paragraph(Token.text("Hello."))
            + wrap(Tag.heading(3), Token.text("fr-FR"))
            + paragraph(Token.text("Bonjour."))
            + [Token.rule()]
            + wrap(Tag.list(2), *wrap(Tag.item(), Token.text("Bye.")))
            + wrap(Tag.heading(3), Token.text("en-US"))
            + paragraph(Token.text("Bye."))
        )
        assert tokens == expected

    def test_empty_clause_list(self):
        assert list(DocumentClauseList().into_tokens()) == []
