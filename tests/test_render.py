import pytest

from discountmd.flags import Flag, FlagSet
from discountmd.render import (
    GITHUB_CHECK,
    IS_CHECKED,
    css,
    document_html,
    h1_title,
    set_basename,
)
from discountmd.tree import (
    Alignment,
    Callbacks,
    Document,
    Footnote,
    Line,
    Paragraph,
    ParagraphType,
)


def para(text, align=Alignment.PARA):
    return Paragraph(ParagraphType.MARKUP, text=[Line(text)], align=align)


def compiled(*paragraphs, flags=None, footnotes=None):
    return Document(code=list(paragraphs), compiled=True,
                    flags=flags if flags is not None else FlagSet(),
                    footnotes=footnotes if footnotes is not None else [])


def test_uncompiled_document_is_rejected():
    with pytest.raises(ValueError):
        document_html(Document())
    with pytest.raises(ValueError):
        css(Document())


def test_horizontal_rule():
    assert document_html(compiled(Paragraph(ParagraphType.HR))) == "<hr />"


def test_paragraphs_separated_by_blank_line():
    doc = compiled(Paragraph(ParagraphType.HR), Paragraph(ParagraphType.HR))
    assert document_html(doc) == "<hr />\n\n<hr />"


def test_html_is_cached():
    doc = compiled(para("hello"))
    first = document_html(doc)
    assert doc.html == first
    assert document_html(doc) is first


def test_paragraph_with_emphasis():
    html = document_html(compiled(para("hello *world*")))
    assert html.startswith("<p>") and html.endswith("</p>")
    assert "<em>world</em>" in html


def test_header():
    doc = compiled(Paragraph(ParagraphType.HDR, text=[Line("Title")], hnumber=2))
    html = document_html(doc)
    assert html.startswith("<h2>") and html.endswith("</h2>")
    assert "Title" in html


def test_code_block_escapes():
    doc = compiled(Paragraph(ParagraphType.CODE, text=[Line("a < b")], lang="python"))
    html = document_html(doc)
    assert html.startswith("<pre><code")
    assert 'class="python"' in html
    assert "&lt;" in html and "a < b" not in html


def test_code_formatter_callback():
    doc = compiled(Paragraph(ParagraphType.CODE, text=[Line("x = 1")]))
    seen = []

    def fmt(text, lang):
        seen.append((text, lang))
        return "FORMATTED"

    doc.callbacks = Callbacks(e_codefmt=fmt)
    html = document_html(doc)
    assert "FORMATTED" in html
    assert seen == [("x = 1\n", None)]


def test_blockquote_and_list():
    quote = Paragraph(ParagraphType.QUOTE, down=[para("quoted")])
    item = Paragraph(ParagraphType.LISTITEM, down=[para("one", Alignment.IMPLICIT)])
    lst = Paragraph(ParagraphType.UL, down=[item, item])
    html = document_html(compiled(quote, lst))
    assert html.startswith("<blockquote>")
    assert "<ul>" in html and html.count("<li>") == 2


def test_checked_list_item():
    item = Paragraph(ParagraphType.LISTITEM, down=[para("done", Alignment.IMPLICIT)],
                     para_flags=GITHUB_CHECK | IS_CHECKED)
    html = document_html(compiled(Paragraph(ParagraphType.OL, down=[item])))
    assert "&#x2611;" in html and "github_checkbox" in html


def test_css_collects_nested_styles():
    style = Paragraph(ParagraphType.STYLE, text=[Line("p { color: red }")])
    doc = compiled(Paragraph(ParagraphType.SOURCE, down=[style]))
    assert css(doc) == "p { color: red }\n"
    assert css(compiled(para("none"))) == ""


def test_h1_title():
    header = Paragraph(ParagraphType.HDR, text=[Line("Main")], hnumber=1)
    doc = compiled(para("x"), Paragraph(ParagraphType.QUOTE, down=[header]))
    assert h1_title(doc) == "Main"
    assert h1_title(compiled(para("x"))) is None


def test_set_basename():
    doc = compiled(para("[x](/path) [y](rel)"))
    set_basename(doc, "http://example.com")
    html = document_html(doc)
    assert 'href="http://example.com/path"' in html
    assert 'href="rel"' in html


def test_extra_footnotes():
    note = Footnote(tag="^1", text=[para("note body")])
    doc = compiled(para("see[^1]"), flags=FlagSet([Flag.EXTRA_FOOTNOTE]),
                   footnotes=[note])
    html = document_html(doc)
    assert '<div class="footnotes">' in html
    assert 'rel="footnote"' in html
    assert "note body" in html
    assert note.referenced and note.refnumber == 1