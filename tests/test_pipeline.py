"""
Tests for the tokenizer, the renderer, the pipelines and the CLI

Author: Olivier Vitrac, PhD, HDR | olivier.vitrac@adservio.fr | Adservio | 2026-10-19
"""

import pytest

from conftest import paragraph, wrap
from mdtranslation.builder import build_document
from mdtranslation.cli import main
from mdtranslation.config import RenderConfig, TranslationConfig
from mdtranslation.errors import StructureError
from mdtranslation.pipeline import build_document as build_from_text
from mdtranslation.pipeline import extract_clause_list, passthrough, translate_extract
from mdtranslation.render import nest, render_tokens
from mdtranslation.tokenizer import MarkdownTokenizer, tokenize
from mdtranslation.tokens import Alignment, CodeBlockKind, LinkType, Tag, TagKind, Token, TokenKind


def kinds(tokens):
    return [(t.kind, t.tag.kind if t.tag else None) for t in tokens]


class TestTokenizer:
    """mistune AST -> tokens."""

    def test_paragraph(self):
        assert tokenize("Hello world.\n") == paragraph(Token.text("Hello world."))

    def test_heading_and_rule(self):
        tokens = tokenize("## Title\n\n***\n")
        assert tokens == wrap(Tag.heading(2), Token.text("Title")) + [Token.rule()]

    def test_tight_list_has_bare_inlines(self):
        tokens = tokenize("- one\n- two\n")
        assert tokens == wrap(
            Tag.list(None),
            *wrap(Tag.item(), Token.text("one")),
            *wrap(Tag.item(), Token.text("two")),
        )

    def test_ordered_list_start(self):
        tokens = tokenize("3. a\n4. b\n")
        assert tokens[0] == Token.start(Tag.list(3))

    def test_task_list_marker(self):
        tokens = tokenize("- [x] done\n- [ ] todo\n")
        markers = [t for t in tokens if t.kind is TokenKind.TASK_LIST_MARKER]
        assert [m.checked for m in markers] == [True, False]

    def test_fenced_code(self):
        tokens = tokenize("```python\nx = 1\n```\n")
        assert tokens[0] == Token.start(Tag.code_block(CodeBlockKind.FENCED, "python"))
        assert tokens[1] == Token.text("x = 1\n")

    def test_inline_markup(self):
        tokens = tokenize("*a* **b** ~~c~~ `d` [e](https://x.org \"T\")\n")
        tag_kinds = [t.tag.kind for t in tokens if t.kind is TokenKind.START]
        assert tag_kinds == [TagKind.PARAGRAPH, TagKind.EMPHASIS, TagKind.STRONG, TagKind.STRIKETHROUGH, TagKind.LINK]
        link = next(t for t in tokens if t.kind is TokenKind.START and t.tag.kind is TagKind.LINK)
        assert link.tag.destination == "https://x.org"
        assert link.tag.title == "T"
        assert Token.code("d") in tokens

    def test_footnotes_come_last(self):
        tokens = tokenize("Text[^1].\n\n[^1]: The note.\n\nMore text.\n")
        starts = [t.tag.kind for t in tokens if t.kind is TokenKind.START]
        assert starts[-2:] == [TagKind.FOOTNOTE_DEFINITION, TagKind.PARAGRAPH]
        assert any(t.kind is TokenKind.FOOTNOTE_REFERENCE for t in tokens)

    def test_table(self):
        tokens = tokenize("| a | b |\n|:--|--:|\n| 1 | 2 |\n")
        assert tokens[0] == Token.start(Tag.table([Alignment.LEFT, Alignment.RIGHT]))
        assert tokens[1] == Token.start(Tag.table_head())

    def test_block_html(self):
        tokens = tokenize("<div>\nhello\n</div>\n")
        assert tokens[0].kind is TokenKind.HTML

    def test_plugins_can_be_disabled(self):
        tokens = MarkdownTokenizer(plugins=[]).tokenize("~~x~~\n")
        assert not any(t.kind is TokenKind.START and t.tag.kind is TagKind.STRIKETHROUGH for t in tokens)

    def test_tokens_build_a_document(self, sample_markdown):
        doc = build_document(tokenize(sample_markdown))
        assert len(doc.outofbands) == 1
        assert list(doc.into_tokens())


class TestRenderer:
    """tokens -> markdown text."""

    def test_paragraphs_separated(self):
        tokens = paragraph(Token.text("a")) + paragraph(Token.text("b"))
        assert render_tokens(tokens) == "a\n\nb\n"

    def test_inline_markup(self):
        tokens = paragraph(
            *wrap(Tag.emphasis(), Token.text("e")),
            Token.text(" "),
            *wrap(Tag.strong(), Token.text("s")),
            Token.text(" "),
            Token.code("c`d"),
            Token.text(" "),
            *wrap(Tag.link("https://x.org", "T"), Token.text("l")),
        )
        assert render_tokens(tokens) == '*e* **s** ``c`d`` [l](https://x.org "T")\n'

    def test_autolink(self):
        tokens = paragraph(*wrap(Tag.link("https://x.org", "", LinkType.AUTOLINK), Token.text("https://x.org")))
        assert render_tokens(tokens) == "<https://x.org>\n"

    def test_escaping(self):
        assert render_tokens(paragraph(Token.text("a*b_c"))) == "a\\*b\\_c\n"
        assert render_tokens(paragraph(Token.text("# not a heading"))) == "\\# not a heading\n"
        assert render_tokens(paragraph(Token.text("1. not a list"))) == "1\\. not a list\n"

    def test_tight_list(self):
        tokens = wrap(Tag.list(None), *wrap(Tag.item(), Token.text("a")), *wrap(Tag.item(), Token.text("b")))
        assert render_tokens(tokens) == "- a\n- b\n"

    def test_ordered_loose_list(self):
        tokens = wrap(Tag.list(2), *wrap(Tag.item(), *paragraph(Token.text("a"))), *wrap(Tag.item(), *paragraph(Token.text("b"))))
        assert render_tokens(tokens) == "2. a\n\n3. b\n"

    def test_nested_list_indented(self):
        inner = wrap(Tag.list(None), *wrap(Tag.item(), Token.text("b")))
        tokens = wrap(Tag.list(None), *wrap(Tag.item(), Token.text("a"), *inner))
        assert render_tokens(tokens) == "- a\n  - b\n"

    def test_code_block_fence_grows(self):
        tokens = wrap(Tag.code_block(CodeBlockKind.FENCED, "md"), Token.text("```\nx\n```\n"))
        assert render_tokens(tokens) == "````md\n```\nx\n```\n````\n"

    def test_blockquote(self):
        tokens = wrap(Tag.block_quote(), *paragraph(Token.text("a")), *paragraph(Token.text("b")))
        assert render_tokens(tokens) == "> a\n>\n> b\n"

    def test_table(self):
        tokens = wrap(
            Tag.table([Alignment.NONE, Alignment.CENTER]),
            *wrap(Tag.table_head(), *wrap(Tag.table_cell(), Token.text("a")), *wrap(Tag.table_cell(), Token.text("b|c"))),
            *wrap(Tag.table_row(), *wrap(Tag.table_cell(), Token.text("1")), *wrap(Tag.table_cell(), Token.text("2"))),
        )
        assert render_tokens(tokens) == "|a|b\\|c|\n|---|:-:|\n|1|2|\n"

    def test_footnote_definition(self):
        tokens = wrap(Tag.footnote_definition("n"), *paragraph(Token.text("x")), *paragraph(Token.text("y")))
        assert render_tokens(tokens) == "[^n]: x\n\n    y\n"

    def test_render_config(self):
        config = RenderConfig(bullet="*", emphasis="_", rule="---")
        tokens = wrap(Tag.list(None), *wrap(Tag.item(), *wrap(Tag.emphasis(), Token.text("a")))) + [Token.rule()]
        assert render_tokens(tokens, config) == "* _a_\n\n---\n"

    def test_unbalanced_stream(self):
        with pytest.raises(StructureError):
            nest([Token.start(Tag.paragraph())])
        with pytest.raises(StructureError):
            render_tokens([Token.start(Tag.paragraph()), Token.end(Tag.heading(1))])

    def test_empty(self):
        assert render_tokens([]) == ""


class TestPipelines:
    """End-to-end text pipelines."""

    def test_passthrough_is_stable(self, sample_markdown):
        once = passthrough(sample_markdown)
        assert passthrough(once) == once

    def test_passthrough_keeps_structure(self):
        text = "# Title\n\nSome *emphasis* here.\n\n- a\n- b\n"
        assert passthrough(text) == text

    def test_build_document(self):
        doc = build_from_text("Para one.\n\nPara two.\n")
        assert len(doc.blocks) == 2

    def test_extract_clause_list(self, sample_markdown):
        clauses = extract_clause_list(sample_markdown, "en-US")
        texts = [c.text.strip() for c in clauses]
        assert texts[:3] == ["Title", "Hello world.", "How are you?"]
        assert texts[-2:] == ["Footnote one.", "Footnote two."]
        assert [c.index for c in clauses] == list(range(1, len(clauses) + 1))

    def test_default_language_from_config(self):
        config = TranslationConfig(source_language="fr-FR")
        clauses = extract_clause_list("Bonjour.\n", config=config)
        assert clauses[0].translations[0][0] == "fr-FR"

    def test_translate_extract(self):
        output = translate_extract("Hello world. How are you?\n")
        assert output.startswith("1. Hello world.")
        assert "### en-US" in output
        assert "2. How are you?" in output
        assert "\n***\n" in output


class TestCli:
    """Command line entry point."""

    def test_passthrough_to_file(self, tmp_path):
        source = tmp_path / "in.md"
        target = tmp_path / "out.md"
        source.write_text("# Title\n\nBody text.\n", encoding="utf-8")
        assert main(["passthrough", str(source), str(target)]) == 0
        assert target.read_text(encoding="utf-8") == "# Title\n\nBody text.\n"

    def test_extract_to_stdout(self, tmp_path, capsys):
        source = tmp_path / "in.md"
        source.write_text("One. Two.\n", encoding="utf-8")
        assert main(["extract", str(source), "--source-language", "de-DE"]) == 0
        out = capsys.readouterr().out
        assert "### de-DE" in out
        assert "1. One." in out

    def test_missing_input(self, tmp_path, capsys):
        assert main(["passthrough", str(tmp_path / "missing.md")]) == 1
        assert "Error:" in capsys.readouterr().err

    def test_no_command(self, capsys):
        assert main([]) == 1
