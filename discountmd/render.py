"""Block-level html output for a compiled document."""

from __future__ import annotations

from typing import Optional
from urllib.parse import quote

from .flags import Flag
from .inline import Inline, render_line
from .links import EOLN
from .tree import Alignment, Document, Line, Paragraph, ParagraphType

# list item flags carried in Paragraph.para_flags
GITHUB_CHECK = 0x01
IS_CHECKED = 0x02

_SPACE = " \t\n\v\f\r"

_BLOCK_BEGIN = {
    Alignment.IMPLICIT: "",
    Alignment.PARA: "<p>",
    Alignment.CENTER: '<div style="text-align:center;">',
}
_BLOCK_END = {
    Alignment.IMPLICIT: "",
    Alignment.PARA: "</p>",
    Alignment.CENTER: "</div>",
}

_A_NONE, _A_CENTER, _A_LEFT, _A_RIGHT = range(4)
_CELL_STYLES = (
    "",
    ' style="text-align:center;"',
    ' style="text-align:left;"',
    ' style="text-align:right;"',
)


def _tidy(text: str) -> str:
    return text.rstrip(_SPACE)


def _cputc(f: Inline, c: str) -> None:
    f.emit({"&": "&amp;", ">": "&gt;", "<": "&lt;"}.get(c, c))


def _code(f: Inline, s: str) -> None:
    """Write text as code: only '<', '>' and '&' are expanded."""
    i = 0
    while i < len(s):
        c = s[i]
        if c == EOLN:
            f.emit("  ")
        elif c == "\\" and i < len(s) - 1 and any(s[i + 1] in e for e in f.esc):
            i += 1
            _cputc(f, s[i])
        else:
            _cputc(f, c)
        i += 1


def _anchor(label: str, f: Inline) -> str:
    cb = f.callbacks
    if cb and cb.e_anchor:
        edited = cb.e_anchor(label)
        if edited is not None:
            return edited
    return quote(label.strip(_SPACE).replace(" ", "-"), safe="-_.:")


def _print_header(pp: Paragraph, f: Inline) -> None:
    flags = f.flags
    labelled = bool(pp.label) and flags.isset(Flag.TOC) and not flags.isset(Flag.STRICT)
    if flags.isset(Flag.IDANCHOR):
        f.emit(f"<h{pp.hnumber}")
        if labelled:
            f.emit(f' id="{_anchor(pp.label, f)}"')
        f.emit(">")
    else:
        if labelled:
            f.emit(f'<a name="{_anchor(pp.label, f)}"></a>\n')
        f.emit(f"<h{pp.hnumber}>")
    if pp.text:
        f.push(pp.text[0].text)
    f.text()
    f.emit(f"</h{pp.hnumber}>")


def _splat(line: Line, block: str, align: list[int], force: bool, f: Inline) -> int:
    text = _tidy(line.text)
    if text.endswith("|"):
        text = text[:-1]

    idx = line.dle
    colno = 0
    f.emit("<tr>\n")
    while idx < len(text):
        first = idx
        if force and colno >= len(align) - 1:
            idx = len(text)
        else:
            while idx < len(text) and text[idx] != "|":
                if text[idx] == "\\":
                    idx += 1
                idx += 1
        style = _CELL_STYLES[align[colno] if colno < len(align) else _A_NONE]
        f.emit(f"<{block}{style}>")
        f.reparse(text[first:idx], None, "|")
        f.emit(f"</{block}>\n")
        idx += 1
        colno += 1
    if force:
        while colno < len(align):
            f.emit(f"<{block}></{block}>\n")
            colno += 1
    f.emit("</tr>\n")
    return colno


def _print_table(pp: Paragraph, f: Inline) -> None:
    hdr, dash, *body = pp.text

    if hdr.dle < len(hdr.text) and hdr.text[hdr.dle] == "|":
        for line in pp.text:
            line.dle += 1

    align: list[int] = []
    p = dash.text
    start = dash.dle
    while start < len(p):
        first = last = ""
        end = start
        while end < len(p) and p[end] != "|":
            if p[end] == "\\":
                end += 1
            elif p[end] not in _SPACE:
                first = first or p[end]
                last = p[end]
            end += 1
        if first == ":":
            align.append(_A_CENTER if last == ":" else _A_LEFT)
        else:
            align.append(_A_RIGHT if last == ":" else _A_NONE)
        start = end + 1

    f.emit("<table>\n")
    f.emit("<thead>\n")
    hcols = _splat(hdr, "th", align, False, f)
    f.emit("</thead>\n")

    if hcols < len(align):
        del align[hcols:]
    else:
        align.extend([_A_NONE] * (hcols - len(align)))

    f.emit("<tbody>\n")
    for line in body:
        _splat(line, "td", align, True, f)
    f.emit("</tbody>\n")
    f.emit("</table>\n")


def _code_callback(lines: list[Line], start: int, lang: Optional[str],
                   fenced: bool, f: Inline) -> Optional[int]:
    """Run the external code formatter; return the next line index, or None."""
    cb = f.callbacks
    if not (cb and cb.e_codefmt):
        return None
    end = start
    while end < len(lines) and (not fenced or lines[end].is_fenced):
        end += 1
    source = "".join(line.text + "\n" for line in lines[start:end])
    formatted = cb.e_codefmt(source, lang or None)
    if formatted is None:
        return None
    f.emit(formatted)
    return end


def _print_fenced(lines: list[Line], start: int, f: Inline) -> int:
    opener = lines[start]
    f.emit("<pre><code")
    if opener.fence_class:
        f.emit(f' class="{opener.fence_class}"')
    f.emit(">")

    ret = _code_callback(lines, start, opener.fence_class, True, f)
    if ret is None:
        ret = start + 1
        while ret < len(lines) and lines[ret].is_fenced:
            _code(f, lines[ret].text)
            f.emit("\n")
            ret += 1

    f.emit("</code></pre>\n")
    return ret


def _print_block(pp: Paragraph, f: Inline) -> None:
    lines = pp.text
    f.emit(_BLOCK_BEGIN[pp.align])
    i = 0
    while i < len(lines):
        t = lines[i]
        has_next = i + 1 < len(lines)
        if t.is_fenced:
            f.text()
            i = _print_fenced(lines, i, f)
        elif t.text:
            if has_next and len(t.text) > 2 and t.text.endswith("  "):
                f.push(t.text[:-2])
                f.push(EOLN)
                f.push("\n")
            else:
                t.text = _tidy(t.text)
                f.push(t.text)
                if has_next:
                    f.push("\n")
        i += 1
    f.text()
    f.emit(_BLOCK_END[pp.align])


def _print_code(lines: list[Line], lang: Optional[str], f: Inline) -> None:
    f.emit("<pre><code")
    if lang:
        f.emit(f' class="{lang}"')
    f.emit(">")

    if _code_callback(lines, 0, lang, False, f) is None:
        blanks = 0
        for t in lines:
            if len(t.text) > t.dle:
                f.emit("\n" * blanks)
                blanks = 0
                _code(f, t.text)
                f.emit("\n")
            else:
                blanks += 1
    f.emit("</code></pre>")


def _print_html(lines: list[Line], f: Inline) -> None:
    blanks = 0
    for t in lines:
        if t.text:
            f.emit("\n" * blanks)
            blanks = 0
            f.emit(t.text)
            f.emit("\n")
        else:
            blanks += 1


def _htmlify_paragraphs(paragraphs: list[Paragraph], f: Inline) -> None:
    f.emblock()
    for pos, p in enumerate(paragraphs):
        _display(p, f)
        if pos + 1 < len(paragraphs):
            f.emblock()
            f.emit("\n\n")


def _li_htmlify(paragraphs: list[Paragraph], arguments: Optional[str],
                flags: int, f: Inline) -> None:
    f.emblock()
    f.emit("<li")
    if arguments:
        f.emit(f" {arguments}")
    if flags & GITHUB_CHECK:
        f.emit(' class="github_checkbox"')
    f.emit(">")
    if flags & GITHUB_CHECK:
        f.emit("&#x2611;" if flags & IS_CHECKED else "&#x2610;")
    _htmlify_paragraphs(paragraphs, f)
    f.emit("</li>")
    f.emblock()


def _htmlify(paragraphs: list[Paragraph], block: Optional[str],
             arguments: Optional[str], f: Inline) -> None:
    f.emblock()
    if block:
        f.emit(f"<{block} {arguments}>" if arguments else f"<{block}>")
    _htmlify_paragraphs(paragraphs, f)
    if block:
        f.emit(f"</{block}>")
    f.emblock()


def _definition_list(paragraphs: list[Paragraph], f: Inline) -> None:
    if not paragraphs:
        return
    f.emit("<dl>\n")
    for p in paragraphs:
        for tag in p.text:
            f.emit("<dt>")
            f.reparse(tag.text, None, None)
            f.emit("</dt>\n")
        _htmlify(p.down, "dd", p.ident, f)
        f.emit("\n")
    f.emit("</dl>")


def _list_display(typ: ParagraphType, paragraphs: list[Paragraph], f: Inline) -> None:
    if not paragraphs:
        return
    letter = "u" if typ is ParagraphType.UL else "o"
    f.emit(f"<{letter}l")
    if typ is ParagraphType.AL:
        f.emit(' type="a"')
    f.emit(">\n")
    for p in paragraphs:
        _li_htmlify(p.down, p.ident, p.para_flags, f)
        f.emit("\n")
    f.emit(f"</{letter}l>\n")


def _display(p: Paragraph, f: Inline) -> None:
    typ = p.typ
    if typ in (ParagraphType.STYLE, ParagraphType.WHITESPACE):
        return
    if typ is ParagraphType.HTML:
        _print_html(p.text, f)
    elif typ is ParagraphType.CODE:
        _print_code(p.text, p.lang, f)
    elif typ is ParagraphType.QUOTE:
        _htmlify(p.down, "div" if p.ident else "blockquote", p.ident, f)
    elif typ in (ParagraphType.UL, ParagraphType.OL, ParagraphType.AL):
        _list_display(typ, p.down, f)
    elif typ is ParagraphType.DL:
        _definition_list(p.down, f)
    elif typ is ParagraphType.HR:
        f.emit("<hr />")
    elif typ is ParagraphType.HDR:
        _print_header(p, f)
    elif typ is ParagraphType.TABLE:
        _print_table(p, f)
    elif typ is ParagraphType.SOURCE:
        _htmlify(p.down, None, None, f)
    else:
        _print_block(p, f)


def _extra_footnotes(f: Inline) -> None:
    referenced = [note for note in f.footnotes if note.referenced]
    if not referenced:
        return
    prefix = f.ref_prefix if f.ref_prefix is not None else "fn"
    f.out += '\n<div class="footnotes">\n<hr/>\n<ol>\n'
    for number in range(1, len(referenced) + 1):
        for note in referenced:
            if note.refnumber != number:
                continue
            f.out += f'<li id="{prefix}:{number}">\n'
            _htmlify(note.text, None, None, f)
            f.out += f'<a href="#{prefix}ref:{number}" rev="footnote">&#8617;</a>'
            f.out += "</li>\n"
    f.out += "</ol>\n</div>\n"


def document_html(doc: Document) -> str:
    """Return the html for a compiled document, generating it once."""
    if not doc.compiled:
        raise ValueError("document is not compiled")
    if doc.html is None:
        f = Inline(doc.flags, doc.footnotes, doc.callbacks, doc.ref_prefix)
        _htmlify(doc.code, None, None, f)
        if doc.flags.isset(Flag.EXTRA_FOOTNOTE) and not doc.flags.isset(Flag.STRICT):
            _extra_footnotes(f)
        doc.html = f.out
    return doc.html


def _stylesheets(paragraphs: list[Paragraph], out: list[str]) -> None:
    for p in paragraphs:
        if p.typ is ParagraphType.STYLE:
            out.extend(line.text + "\n" for line in p.text)
        if p.down:
            _stylesheets(p.down, out)


def css(doc: Document) -> str:
    """Return the contents of every embedded style block."""
    if not doc.compiled:
        raise ValueError("document is not compiled")
    out: list[str] = []
    _stylesheets(doc.code, out)
    return "".join(out)


def _find_h1(paragraphs: list[Paragraph]) -> Optional[Paragraph]:
    for p in paragraphs:
        if p.typ is ParagraphType.HDR and p.hnumber == 1:
            return p
        if p.down:
            found = _find_h1(p.down)
            if found is not None:
                return found
    return None


def h1_title(doc: Optional[Document]) -> Optional[str]:
    """Render the first level-one header as plain tag text."""
    if doc is None:
        return None
    title = _find_h1(doc.code)
    if title is None or not title.text:
        return None
    flags = doc.flags.copy()
    flags.set(Flag.TAGTEXT)
    generated = render_line(title.text[0].text, flags)
    return generated or None


def set_basename(doc: Optional[Document], base: Optional[str]) -> None:
    """Prefix every absolute ('/'-rooted) link in ``doc`` with ``base``."""
    if doc is None or not base:
        return

    def prefix(link: str) -> Optional[str]:
        return base + link if link.startswith("/") else None

    doc.callbacks.e_url = prefix