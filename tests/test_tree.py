import pytest

from discountmd.tree import (
    Alignment,
    Document,
    Line,
    Paragraph,
    ParagraphType,
    doc_author,
    doc_date,
    doc_title,
    dump_tree,
)


def test_header_fields():
    doc = Document(
        title=Line("% The Title", dle=2),
        author=Line("% Someone", dle=2),
        date=Line("% today", dle=2),
    )
    assert doc_title(doc) == "The Title"
    assert doc_author(doc) == "Someone"
    assert doc_date(doc) == "today"


def test_header_field_unset():
    doc = Document(title=Line("%", dle=2))
    assert doc_title(doc) is None
    assert doc_author(doc) is None
    assert doc_date(None) is None


def test_dump_two_paragraphs():
    doc = Document(code=[
        Paragraph(ParagraphType.HDR, text=[Line("Hi")], hnumber=1),
        Paragraph(ParagraphType.MARKUP, text=[Line("a"), Line("b")]),
    ])
    assert dump_tree(doc, "doc") == "doc--+--[h1, 1 line]\n     `--[markup, 2 lines]\n"


def test_dump_nested_has_line_per_leaf():
    leaves = [Paragraph(ParagraphType.MARKUP, text=[Line("x")]) for _ in range(3)]
    quote = Paragraph(ParagraphType.QUOTE, down=leaves, ident="note",
                      align=Alignment.CENTER, para_flags=0x1f)
    doc = Document(code=[quote, Paragraph(ParagraphType.HR)])
    text = dump_tree(doc, "in")
    lines = text.splitlines()
    assert len(lines) == 4
    assert "[quote note 1f, <center>]" in lines[0]
    assert lines[-1].endswith("[hr]")


def test_dump_empty_document_raises():
    with pytest.raises(ValueError):
        dump_tree(Document(), "empty")