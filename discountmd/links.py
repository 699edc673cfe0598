"""Inline links, images, footnote references and URL output.

The functions here work on an inline stream ``f`` that offers:
``inp`` (input text) and ``isp`` (read position), ``last`` (last
plain character written), ``flags`` (a FlagSet), ``callbacks``
(Callbacks or None), ``footnotes`` (list of Footnote shared by all
streams of a document), ``ref_prefix``, ``emit(text)`` and
``reparse(text, flags, esc)``.
"""

from __future__ import annotations

import string
from dataclasses import dataclass, field
from typing import Any, Optional

from .flags import Flag, FlagSet
from .textutil import strip
from .tree import Footnote

EOLN = "\x03"

_SPACE = " \t\n\v\f\r"
_PUNCT = string.punctuation

PROTOCOLS = ("https:", "http:", "news:", "ftp:")


def _isspace(c: Optional[str]) -> bool:
    return bool(c) and c in _SPACE


def _ispunct(c: Optional[str]) -> bool:
    return bool(c) and c in _PUNCT


def _isalpha(c: Optional[str]) -> bool:
    return bool(c) and c.isascii() and c.isalpha()


def _isalnum(c: Optional[str]) -> bool:
    return bool(c) and c.isascii() and c.isalnum()


def _isdigit(c: Optional[str]) -> bool:
    return bool(c) and c in "0123456789"


def _peek(f: Any, i: int) -> Optional[str]:
    idx = f.isp + i - 1
    return f.inp[idx] if 0 <= idx < len(f.inp) else None


def _pull(f: Any) -> Optional[str]:
    if f.isp < len(f.inp):
        c = f.inp[f.isp]
        f.isp += 1
        return c
    return None


def _seek(f: Any, pos: int) -> None:
    f.isp = pos
    f.last = ""


def _tidy(text: str) -> str:
    return text.rstrip(_SPACE)


@dataclass(frozen=True)
class LinkyType:
    """How one kind of link is written out."""

    pat: str
    link_pfx: Optional[str]
    link_sfx: Optional[str]
    wxh: bool
    text_pfx: Optional[str]
    text_sfx: Optional[str]
    flags: FlagSet = field(default_factory=FlagSet, compare=False)
    is_url: bool = False


IMAGE_TAG = LinkyType("", '<img src="', '"', True, ' alt="', '" />',
                      FlagSet([Flag.NOIMAGE, Flag.TAGTEXT, Flag.ALT_AS_TITLE]), True)
LINK_TAG = LinkyType("", '<a href="', '"', False, ">", "</a>",
                     FlagSet([Flag.NOLINKS]), True)

SPECIALS = (
    LinkyType("id:", '<span id="', '"', False, ">", "</span>"),
    LinkyType("raw:", None, None, False, None, None, FlagSet([Flag.NOHTML])),
    LinkyType("lang:", '<span lang="', '"', False, ">", "</span>"),
    LinkyType("abbr:", '<abbr title="', '"', False, ">", "</abbr>"),
    LinkyType("class:", '<span class="', '"', False, ">", "</span>"),
)


def is_autoprefix(text: str) -> bool:
    """Whether ``text`` starts with one of the known link protocols."""
    lowered = text.lower()
    return any(lowered.startswith(p) for p in PROTOCOLS)


def safelink(link: str) -> bool:
    """Whether a link is local or uses a well-known protocol."""
    colon = link.find(":")
    if colon < 0:
        return True
    if not _isalpha(link[0]):
        return True
    for ch in link[1:colon]:
        if not (_isalnum(ch) or ch in ".+-"):
            return True
    return is_autoprefix(link)


def pseudo(link: str) -> Optional[LinkyType]:
    """The pseudo-protocol that ``link`` begins with, if any."""
    for tag in SPECIALS:
        if len(link) > len(tag.pat) and link[:len(tag.pat)].lower() == tag.pat:
            return tag
    return None


def puturl(f: Any, url: str, display: bool = False) -> None:
    """Write a URL, escaping characters that cannot appear as-is."""
    if url and url[0] == "<" and url[-1] == ">":
        url = url[1:-1]
    i = 0
    while i < len(url):
        c = url[i]
        i += 1
        if c == "\\" and i < len(url):
            c = url[i]
            i += 1
            if not (_ispunct(c) or _isspace(c)):
                f.emit("\\")

        if c == "&":
            f.emit("&amp;")
        elif c == "<":
            f.emit("&lt;")
        elif c == '"':
            f.emit("%22")
        elif _isalnum(c) or _ispunct(c) or (display and _isspace(c)):
            f.emit(c)
        elif c == EOLN:
            f.emit("  ")
        else:
            f.emit("".join(f"%{b:02X}" for b in c.encode("utf-8")))


def _eatspace(f: Any) -> Optional[str]:
    while (c := _peek(f, 1)) is not None and _isspace(c):
        _pull(f)
    return c


def _parenthetical(opener: str, closer: str, f: Any) -> Optional[int]:
    indent = 1
    size = 0
    while indent:
        c = _pull(f)
        if c is None:
            return None
        if c == "\\" and _peek(f, 1) in (closer, opener):
            size += 1
            _pull(f)
        elif c == opener:
            indent += 1
        elif c == closer:
            indent -= 1
        size += 1
    return size - 1 if size else 0


def _linkylabel(f: Any) -> Optional[str]:
    start = f.isp
    size = _parenthetical("[", "]", f)
    if size is None:
        return None
    return f.inp[start:start + size]


def _linkyattrib(f: Any) -> Optional[str]:
    if _peek(f, 1) != "{":
        return None
    _pull(f)
    ptr = f.isp
    size = _parenthetical("{", "}", f)
    if size is None:
        return None
    alist = strip(f.inp[ptr:ptr + size])
    if not (alist.startswith("{") and alist.endswith("}")):
        return alist
    # '{{...}}' becomes '{...}' and is read again as plain text
    old = f.inp
    f.inp = old[:ptr + 1] + old[ptr:ptr + size] + old[ptr + size + 1:]
    _seek(f, ptr + 1)
    return None


def _linkytitle(f: Any, quote: str, ref: Footnote) -> bool:
    whence = f.isp
    title = whence
    while (c := _pull(f)) is not None:
        e = f.isp
        if c == quote and _eatspace(f) == ")":
            ref.title = f.inp[title + 1:title + 1 + (e - title) - 2]
            return True
    _seek(f, whence)
    return False


def _linkysize(f: Any, ref: Footnote) -> bool:
    whence = f.isp
    height = width = 0
    p_height = p_width = False

    if _isspace(_peek(f, 0)):
        _pull(f)  # the '='
        c = _pull(f)
        while _isdigit(c):
            width = width * 10 + int(c)
            c = _pull(f)
        if c == "%":
            p_width = True
            c = _pull(f)
        if c == "x":
            c = _pull(f)
            while _isdigit(c):
                height = height * 10 + int(c)
                c = _pull(f)
            if c == "%":
                p_height = True
                c = _pull(f)
            if _isspace(c):
                c = _eatspace(f)
            if c == ")" or (c in ("'", '"') and _linkytitle(f, c, ref)):
                ref.height = height
                ref.percent_height = p_height
                ref.width = width
                ref.percent_width = p_width
                return True
    _seek(f, whence)
    return False


def _linkybroket(f: Any, image: bool, ref: Footnote) -> bool:
    start = f.isp
    size = 0
    while (c := _pull(f)) != ">":
        if c is None:
            return False
        if c == "\\" and _ispunct(_peek(f, 2)):
            size += 1
            _pull(f)
        size += 1
    ref.link = f.inp[start:start + size]

    c = _eatspace(f)
    if c in ("'", '"') and _linkytitle(f, c, ref):
        good = True
    elif image and c == "=" and _linkysize(f, ref):
        good = True
    else:
        good = c == ")"

    if good:
        if _peek(f, 1) == ")":
            _pull(f)
        ref.link = _tidy(ref.link)
    return good


def _linkyurl(f: Any, image: bool, ref: Footnote) -> bool:
    c = _eatspace(f)
    if c is None:
        return False

    trim = False
    if c == "<":
        _pull(f)
        if not f.flags.isset(Flag.ONE_COMPAT):
            return _linkybroket(f, image, ref)
        trim = True

    start = f.isp
    size = 0
    while (c := _peek(f, 1)) != ")":
        if c is None:
            return False
        if c in ('"', "'") and _linkytitle(f, c, ref):
            break
        if image and c == "=" and _linkysize(f, ref):
            break
        if c == "\\" and _ispunct(_peek(f, 2)):
            size += 1
            _pull(f)
        _pull(f)
        size += 1
    if _peek(f, 1) == ")":
        _pull(f)

    link = _tidy(f.inp[start:start + size])
    if trim and link.endswith(">"):
        link = link[:-1]
    ref.link = link
    return True


def print_linky_ref(f: Any, tag: LinkyType, link: str) -> None:
    """Write the opening of an ``img``, ``a`` or pseudo-protocol tag."""
    if f.flags.isset(Flag.IS_LABEL):
        return
    cb = f.callbacks
    f.emit(tag.link_pfx or "")

    if tag.is_url:
        edit = cb.e_url(link) if cb and cb.e_url else None
        if edit is not None:
            puturl(f, edit, False)
        else:
            puturl(f, link[len(tag.pat):], False)
    else:
        f.reparse(link[len(tag.pat):], FlagSet([Flag.TAGTEXT]), None)

    f.emit(tag.link_sfx or "")

    edit = cb.e_flags(link) if cb and cb.e_flags else None
    if edit is not None:
        f.emit(" ")
        f.emit(edit)


def _prefix(f: Any) -> str:
    return f.ref_prefix if f.ref_prefix is not None else "fn"


def _extra_linky(f: Any, text: str, ref: Footnote) -> bool:
    if ref.referenced:
        return False
    if f.flags.isset(Flag.IS_LABEL):
        f.reparse(text, LINK_TAG.flags, None)
    else:
        number = 1 + sum(1 for note in f.footnotes if note.referenced)
        ref.referenced = True
        ref.refnumber = number
        pfx = _prefix(f)
        f.emit(f'<sup id="{pfx}ref:{number}"><a href="#{pfx}:{number}" '
               f'rel="footnote">{number}</a></sup>')
    return True


def _linkyformat(f: Any, text: str, image: bool, ref: Footnote) -> bool:
    flags = f.flags
    if image:
        tag = IMAGE_TAG
    else:
        special = pseudo(ref.link)
        if special is not None:
            if (flags.isset(Flag.NO_EXT) or flags.isset(Flag.STRICT)
                    or flags.isset(Flag.SAFELINK)):
                return False
            tag = special
        elif (flags.isset(Flag.SAFELINK) and not flags.isset(Flag.STRICT)
              and not safelink(ref.link)):
            return False
        else:
            tag = LINK_TAG

    if flags.any_of(tag.flags):
        return False

    if flags.isset(Flag.IS_LABEL):
        f.reparse(text, tag.flags, None)
    elif tag.link_pfx is not None:
        print_linky_ref(f, tag, ref.link)

        if tag.wxh:
            if ref.height:
                f.emit(f' height="{ref.height}{"%" if ref.percent_height else ""}"')
            if ref.width:
                f.emit(f' width="{ref.width}{"%" if ref.percent_width else ""}"')

        if ref.attrib:
            f.emit(f" {ref.attrib}")

        if ref.title or (flags.isset(Flag.ALT_AS_TITLE)
                         and tag.flags.isset(Flag.ALT_AS_TITLE)):
            f.emit(' title="')
            f.reparse(ref.title or text, FlagSet([Flag.TAGTEXT]), None)
            f.emit('"')

        f.emit(tag.text_pfx or "")
        f.reparse(text, tag.flags, None)
        f.emit(tag.text_sfx or "")
    else:
        f.emit(ref.link[len(tag.pat):])
    return True


def _same_tag(a: str, b: str) -> bool:
    if len(a) != len(b):
        return False
    for x, y in zip(a, b):
        if x.lower() == y.lower() or (x in _SPACE and y in _SPACE):
            continue
        return False
    return True


def _find_footnote(footnotes: list[Footnote], tag: str) -> Optional[Footnote]:
    return next((note for note in footnotes if _same_tag(note.tag, tag)), None)


def linkylinky(f: Any, image: bool) -> bool:
    """Handle a link or image whose opening '[' was just read.

    Returns True if one was written; otherwise the read position is
    restored and nothing is written.
    """
    start = f.isp
    key = Footnote()
    status = False

    name = _linkylabel(f)
    if name is not None:
        if _peek(f, 1) == "(":
            _pull(f)
            if _linkyurl(f, image, key):
                attrib = _linkyattrib(f)
                if attrib is not None:
                    key.attrib = attrib
                status = _linkyformat(f, name, image, key)
        else:
            implicit_mark = f.isp
            extra = False
            if (f.flags.isset(Flag.EXTRA_FOOTNOTE) and not f.flags.isset(Flag.STRICT)
                    and not image and name.startswith("^")):
                extra = True
                goodlink = True
            else:
                if _isspace(_peek(f, 1)):
                    _pull(f)
                if _peek(f, 1) == "[":
                    _pull(f)
                    tag = _linkylabel(f)
                    goodlink = tag is not None
                    if tag is not None:
                        key.tag = tag
                else:
                    _seek(f, implicit_mark)
                    goodlink = not f.flags.isset(Flag.ONE_COMPAT)

            if goodlink:
                if not key.tag:
                    key.tag = name
                ref = _find_footnote(f.footnotes, key.tag)
                if ref is not None:
                    if extra:
                        status = _extra_linky(f, name, ref)
                    else:
                        status = _linkyformat(f, name, image, ref)

    if not status:
        _seek(f, start)
    return status