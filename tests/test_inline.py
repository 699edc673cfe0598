import html

import pytest

from discountmd.flags import Flag, FlagSet
from discountmd.inline import Inline, render_line, reparse_to_string
from discountmd.links import EOLN
from discountmd.tree import Footnote


def test_plain_text_is_unchanged():
    assert render_line("hello world") == "hello world"


def test_single_emphasis():
    assert render_line("*hi*") == "<em>" + "hi" + "</em>"


def test_strong_emphasis():
    assert render_line("**b**") == "<strong>" + "b" + "</strong>"


def test_underscore_inside_word_is_literal():
    assert render_line("snake_case_name") == "snake_case_name"


def test_code_span_escapes():
    assert render_line("`a<b`") == "<code>" + "a&lt;b" + "</code>"


def test_ampersand_and_entity():
    assert render_line("a & b") == "a &amp; b"
    assert render_line("&copy;") == "&copy;"


def test_dashes_become_entities():
    assert render_line("a -- b") == "a &ndash; b"


def test_nopants_leaves_dashes():
    assert render_line("a -- b", FlagSet([Flag.NOPANTS])) == "a -- b"


def test_double_quotes():
    assert render_line('"hi"') == "&ldquo;" + "hi" + "&rdquo;"


def test_superscript_and_flag():
    assert render_line("A^B") == "A<sup>" + "B" + "</sup>"
    assert render_line("A^B", FlagSet([Flag.NOSUPERSCRIPT])) == "A^B"


def test_strikethrough():
    assert render_line("~~x~~") == "<del>" + "x" + "</del>"


def test_inline_link():
    url = "http://x.example.com/"
    assert render_line(f"[t]({url})") == '<a href="' + url + '">' + "t" + "</a>"


def test_image():
    out = render_line("![alt](/i.png)")
    assert out == '<img src="' + "/i.png" + '"' + ' alt="' + "alt" + '" />'


def test_pseudo_protocol_id():
    assert render_line("[t](id:foo)") == '<span id="' + "foo" + '">' + "t" + "</span>"


def test_safelink_rejects_unknown_protocol():
    text = "[x](javascript:alert)"
    assert render_line(text, FlagSet([Flag.SAFELINK])) == text


def test_automatic_link():
    url = "http://a.example.com"
    assert render_line(f"<{url}>") == '<a href="' + url + '">' + url + "</a>"


def test_mail_address_is_mangled_but_equivalent():
    out = render_line("<someone@example.com>")
    assert "someone@example.com" not in out
    assert html.unescape(out) == (
        '<a href="mailto:someone@example.com">someone@example.com</a>'
    )


def test_html_tag_passes_through():
    assert render_line("<span>x</span>") == "<span>x</span>"


def test_nohtml_escapes_tags():
    out = render_line("<span>x</span>", FlagSet([Flag.NOHTML]))
    assert "<span>" not in out
    assert out.startswith("&lt;span")


def test_backslash_escapes():
    assert render_line("\\*not\\*") == "*not*"


def test_hard_break_token():
    assert render_line("a" + EOLN + "b") == "a" + "<br/>" + "b"


def test_tagtext_escapes_quotes_and_brackets():
    out = render_line('"x" <y>', FlagSet([Flag.TAGTEXT]))
    assert out == "&quot;x&quot; &lt;y&gt;"


@pytest.mark.parametrize("with_latex,expected", [
    (True, "$*a*$"),
    (False, "$<em>a</em>$"),
])
def test_latex_span(with_latex, expected):
    flags = FlagSet([Flag.LATEX]) if with_latex else FlagSet()
    assert render_line("$*a*$", flags) == expected


def test_latex_parenthesis_math():
    assert render_line("\\(a\\)", FlagSet([Flag.LATEX])) == "\\(a\\)"
    assert render_line("\\(a\\)") == "(a)"


def test_reference_link_from_footnotes():
    url = "http://r.example.com/"
    inline = Inline(footnotes=[Footnote(tag="ref", link=url)])
    inline.push("[ref]")
    inline.text()
    inline.emblock()
    assert inline.out == '<a href="' + url + '">' + "ref" + "</a>"


def test_extra_footnote_reference():
    note = Footnote(tag="^1", link="x")
    inline = Inline(FlagSet([Flag.EXTRA_FOOTNOTE]), footnotes=[note])
    inline.push("[^1]")
    inline.text()
    inline.emblock()
    assert note.referenced is True
    assert note.refnumber == 1
    assert 'href="#fn:1"' in inline.out


def test_escape_list_in_code():
    inline = Inline()
    inline.reparse("`a\\|b`", None, "|")
    inline.emblock()
    assert inline.out == "<code>" + "a|b" + "</code>"
    assert render_line("`a\\|b`") == "<code>" + "a\\|b" + "</code>"


def test_emit_and_emblock():
    inline = Inline()
    inline.emit("x")
    inline.emblock()
    assert inline.out == "x"
    assert inline.queue == []


def test_text_consumes_input():
    inline = Inline()
    inline.push("abc")
    inline.text()
    assert inline.inp == ""
    assert inline.isp == 0


@pytest.mark.parametrize("text", ["*a*", "plain", "a -- b", "`c`"])
def test_reparse_to_string_matches_render_line(text):
    assert reparse_to_string(text) == render_line(text)


def test_input_flags_are_not_modified():
    flags = FlagSet([Flag.NOPANTS])
    render_line("x", flags)
    assert flags == FlagSet([Flag.NOPANTS])


def test_autolink_flag_links_bare_urls():
    url = "http://b.example.com/"
    out = render_line(f"see {url}", FlagSet([Flag.AUTOLINK]))
    assert out == "see " + '<a href="' + url + '">' + url + "</a>"