"""Inline rendering: emphasis, code spans, links, entities and smart punctuation."""

from __future__ import annotations

import random
from typing import Callable, Optional

from .emphasis import EmphasisBlock, emphasize
from .flags import Flag, FlagSet
from .links import (
    EOLN,
    LINK_TAG,
    _isalnum,
    _isalpha,
    _isspace,
    _ispunct,
    _parenthetical,
    is_autoprefix,
    linkylinky,
    print_linky_ref,
    puturl,
)
from .tree import Callbacks, Footnote

_SPACE = " \t\n\v\f\r"

# (first character, pattern, entity, extra characters consumed)
_SMARTIES: tuple[tuple[str, str, Optional[str], int], ...] = (
    ("'", "'s|", "rsquo", 0),
    ("'", "'t|", "rsquo", 0),
    ("'", "'re|", "rsquo", 0),
    ("'", "'ll|", "rsquo", 0),
    ("'", "'ve|", "rsquo", 0),
    ("'", "'m|", "rsquo", 0),
    ("'", "'d|", "rsquo", 0),
    ("-", "---", "mdash", 2),
    ("-", "--", "ndash", 1),
    (".", "...", "hellip", 2),
    (".", ". . .", "hellip", 4),
    ("(", "(c)", "copy", 2),
    ("(", "(r)", "reg", 2),
    ("(", "(tm)", "trade", 3),
    ("3", "|3/4|", "frac34", 2),
    ("3", "|3/4ths|", "frac34", 2),
    ("1", "|1/2|", "frac12", 2),
    ("1", "|1/4|", "frac14", 2),
    ("1", "|1/4th|", "frac14", 2),
    ("&", "&#0;", None, 3),
)

_BACKSLASH_LITERALS = ">#.-+{}]![*_\\()`"


def _is_strict_tag_prefix(c: Optional[str]) -> bool:
    return _isalpha(c) or c in ("/", "!", "$", "?")


def _maybe_address(text: str) -> bool:
    """Whether ``text`` looks like a mail address."""
    n = len(text)
    i = 0
    while i < n and (_isalnum(text[i]) or text[i] in "._-+*"):
        i += 1
    if not (i < n and i > 0 and text[i] == "@"):
        return False
    i += 1
    if i < n and text[i] == ".":
        return False
    ok = False
    while i < n and (_isalnum(text[i]) or text[i] in "._-+"):
        if text[i] == "." and n - i > 1:
            ok = True
        i += 1
    return i == n and ok


class Inline:
    """An inline rendering stream: input text in, queued html out."""

    def __init__(self, flags: Optional[FlagSet] = None,
                 footnotes: Optional[list[Footnote]] = None,
                 callbacks: Optional[Callbacks] = None,
                 ref_prefix: Optional[str] = None) -> None:
        self.flags = flags.copy() if flags is not None else FlagSet()
        self.footnotes = footnotes if footnotes is not None else []
        self.callbacks = callbacks
        self.ref_prefix = ref_prefix
        self.esc: tuple[str, ...] = ()
        self.inp = ""
        self.isp = 0
        self.last = ""
        self.queue: list[EmphasisBlock] = []
        self.out = ""
        self._quotes = 0

    # -- input cursor ------------------------------------------------------

    def push(self, text: str) -> None:
        """Append text to the input."""
        self.inp += text

    def _peek(self, i: int) -> Optional[str]:
        idx = self.isp + i - 1
        return self.inp[idx] if 0 <= idx < len(self.inp) else None

    def _pull(self) -> Optional[str]:
        if self.isp < len(self.inp):
            c = self.inp[self.isp]
            self.isp += 1
            return c
        return None

    def _shift(self, i: int) -> None:
        if self.isp + i >= 0:
            self.isp += i

    def _seek(self, pos: int) -> None:
        self.isp = pos
        self.last = ""

    def _isthisspace(self, i: int) -> bool:
        c = self._peek(i)
        if c is None:
            return True
        if ord(c) >= 0x80:
            return False
        return c in _SPACE or c < " "

    def _isthisalnum(self, i: int) -> bool:
        return _isalnum(self._peek(i))

    def _isthisnonword(self, i: int) -> bool:
        return self._isthisspace(i) or _ispunct(self._peek(i))

    def _tagtext(self) -> bool:
        return self.flags.isset(Flag.TAGTEXT)

    # -- output ------------------------------------------------------------

    def emit(self, s: str) -> None:
        """Queue literal output text."""
        if not s:
            return
        if not self.queue:
            self.queue.append(EmphasisBlock())
        self.queue[-1].text += s

    def _emphasis(self, c: str, count: int) -> None:
        self.queue.append(EmphasisBlock(char=c, count=count))
        self.queue.append(EmphasisBlock())

    def emblock(self) -> None:
        """Resolve queued emphasis and move the result to ``out``."""
        self.out += emphasize(self.queue)

    def _cputc(self, c: str) -> None:
        self.emit({"&": "&amp;", ">": "&gt;", "<": "&lt;"}.get(c, c))

    def _escaped(self, c: str) -> bool:
        return any(c in e for e in self.esc)

    def reparse(self, text: str, flags: Optional[FlagSet] = None,
                esc: Optional[str] = None) -> None:
        """Render ``text`` in a nested stream and queue the result here."""
        sub = Inline(self.flags, self.footnotes, self.callbacks, self.ref_prefix)
        if flags is not None:
            sub.flags.update(flags)
        sub.esc = (esc,) + self.esc if esc else self.esc
        sub.push(text)
        sub.text()
        sub.emblock()
        self.emit(sub.out)
        self.last = sub.last

    # -- spans ---------------------------------------------------------------

    def _code(self, s: str) -> None:
        i = 0
        while i < len(s):
            c = s[i]
            if c == EOLN:
                self.emit("  ")
            elif c == "\\" and i < len(s) - 1 and self._escaped(s[i + 1]):
                i += 1
                self._cputc(s[i])
            else:
                self._cputc(c)
            i += 1

    def _delspan(self, size: int) -> None:
        self.emit("<del>")
        self.reparse(self.inp[self.isp - 1:self.isp - 1 + size], None, None)
        self.emit("</del>")

    def _latexspan(self, size: int) -> None:
        self.emit("$")
        if size > 0:
            self._code(self.inp[self.isp - 1:self.isp - 1 + size])
        self.emit("$")

    def _codespan(self, size: int) -> None:
        i = 0
        if size > 1 and self._peek(size - 1) == " ":
            size -= 1
        if self._peek(0) == " ":
            i += 1
            size -= 1
        start = self.isp + i - 1
        self.emit("<code>")
        self._code(self.inp[start:start + size])
        self.emit("</code>")

    def _nrticks(self, offset: int, tickchar: str) -> int:
        tick = 0
        while self._peek(offset + tick) == tickchar:
            tick += 1
        return tick

    def _matchticks(self, tickchar: str, ticks: int) -> tuple[int, int]:
        subsize = subtick = 0
        size = 0
        while (c := self._peek(size + ticks)) is not None:
            if c == tickchar:
                count = self._nrticks(size + ticks, tickchar)
                if count == ticks:
                    return size, ticks
                if subtick < count < ticks:
                    subsize, subtick = size, count
                size += count
            size += 1
        if subsize:
            return subsize, subtick
        return 0, ticks

    def _tickhandler(self, tickchar: str, minticks: int, allow_space: bool,
                     spanner: Callable[[int], None]) -> bool:
        tick = self._nrticks(0, tickchar)
        if not allow_space and _isspace(self._peek(tick)):
            return False
        if tick < minticks:
            return False
        size, endticks = self._matchticks(tickchar, tick)
        if not size:
            return False
        if endticks < tick:
            size += tick - endticks
            tick = endticks
        if size > 0:
            self._shift(tick)
            spanner(size)
            self._shift(size + tick - 1)
            return True
        return False

    def _mathhandler(self, e1: str, e2: str) -> bool:
        i = 1
        while self._peek(i) is not None:
            if self._peek(i) == e1 and self._peek(i + 1) == e2:
                self._cputc(self._peek(-1) or "")
                self._cputc(self._peek(0) or "")
                for _ in range(i + 1):
                    self._cputc(self._pull() or "")
                return True
            i += 1
        return False

    # -- links and tags ------------------------------------------------------

    def _mangle(self, s: str) -> None:
        for ch in s:
            self.emit("&#")
            if random.random() < 0.5:
                self.emit(f"x{ord(ch):02x};")
            else:
                self.emit(f"{ord(ch):02d};")

    def _process_possible_link(self, size: int) -> bool:
        if self.flags.isset(Flag.NOLINKS):
            return False
        text = self.inp[self.isp:self.isp + size]
        mailto = 0
        if size > 7 and text[:7].lower() == "mailto:":
            address = True
            mailto = 7
        else:
            address = _maybe_address(text)

        if address:
            self.emit('<a href="')
            if not mailto:
                self._mangle("mailto:")
            self._mangle(text)
            self.emit('">')
            self._mangle(text[mailto:])
            self.emit("</a>")
            return True
        if is_autoprefix(text):
            print_linky_ref(self, LINK_TAG, text)
            self.emit(">")
            puturl(self, text, True)
            self.emit("</a>")
            return True
        return False

    def _forbidden_tag(self) -> bool:
        c = (self._peek(1) or "").upper()
        if self.flags.isset(Flag.NOHTML):
            return True
        if c == "A" and self.flags.isset(Flag.NOLINKS) and not self._isthisalnum(2):
            return True
        if (c == "I" and self.flags.isset(Flag.NOIMAGE)
                and self.inp[self.isp + 1:self.isp + 3].upper() == "MG"
                and not self._isthisalnum(4)):
            return True
        return False

    def _maybe_tag_or_link(self) -> bool:
        if self._tagtext():
            return False
        size = 0
        if _is_strict_tag_prefix(self._peek(1)):
            size = 1
            while (c := self._peek(size + 1)) != ">":
                if c is None or c == "<":
                    return False
                if self.flags.isset(Flag.STRICT) and c == "`":
                    return False
                size += 1
        if size <= 0:
            return False
        if self._process_possible_link(size):
            self._shift(size + 1)
            return True
        if self._forbidden_tag():
            return False
        for i in range(size + 2):
            c = self._peek(i) or ""
            self.emit("&amp;" if c == "&" and i > 0 else c)
        self._shift(size + 1)
        return True

    def _maybe_autolink(self) -> bool:
        size = 0
        while (c := self._peek(size + 1)) is not None:
            if c == "\\":
                if self._peek(size + 2) is not None:
                    size += 1
            elif ord(c) >= 0x80:
                pass
            elif _isspace(c) or c in "'\"()[]{}<>`" or c == EOLN:
                break
            size += 1
        if size > 1 and self._process_possible_link(size):
            self._shift(size)
            return True
        return False

    # -- smart punctuation -----------------------------------------------------

    def _islike(self, pat: str) -> bool:
        if pat.startswith("|"):
            if not self._isthisnonword(-1):
                return False
            pat = pat[1:]
        n = len(pat)
        if not n:
            return False
        if pat[-1] == "|":
            if not self._isthisnonword(n - 1):
                return False
            n -= 1
        for i in range(1, n):
            c = self._peek(i)
            if c is None or c.lower() != pat[i]:
                return False
        return True

    def _smartyquote(self, kind: str) -> bool:
        bit = 1 if kind == "s" else 2
        if self._quotes & bit:
            if self._isthisnonword(1):
                self.emit(f"&r{kind}quo;")
                self._quotes &= ~bit
                return True
        elif self._isthisnonword(-1) and self._peek(1) is not None:
            self.emit(f"&l{kind}quo;")
            self._quotes |= bit
            return True
        return False

    def _smartypants(self, c: str) -> bool:
        if (self.flags.isset(Flag.NOPANTS) or self.flags.isset(Flag.TAGTEXT)
                or self.flags.isset(Flag.IS_LABEL)):
            return False

        for c0, pat, entity, extra in _SMARTIES:
            if c == c0 and self._islike(pat):
                if entity:
                    self.emit(f"&{entity};")
                self._shift(extra)
                return True

        if c == "'":
            return self._smartyquote("s")
        if c == '"':
            return self._smartyquote("d")
        if c == "`" and self._peek(1) == "`":
            j = 2
            while (d := self._peek(j)) is not None:
                if d == "\\":
                    j += 2
                elif d == "`":
                    break
                elif d == "'" and self._peek(j + 1) == "'":
                    self.emit("&ldquo;")
                    self.reparse(self.inp[self.isp + 1:self.isp + 1 + j - 2], None, None)
                    self.emit("&rdquo;")
                    self._shift(j + 1)
                    return True
                else:
                    j += 1
        return False

    # -- per-character handlers -------------------------------------------------

    def _plain(self, c: str) -> None:
        self.last = c
        self.emit(c)

    def _eoln(self, c: str) -> None:
        self.emit("  " if self._tagtext() else "<br/>")

    def _gt(self, c: str) -> None:
        self.emit("&gt;" if self._tagtext() else c)

    def _dquote(self, c: str) -> None:
        self.emit("&quot;" if self._tagtext() else c)

    def _bang(self, c: str) -> None:
        if self._peek(1) == "[":
            self._pull()
            if self._tagtext() or not linkylinky(self, True):
                self.emit("![")
        else:
            self.emit(c)

    def _bracket(self, c: str) -> None:
        if self._tagtext() or not linkylinky(self, False):
            self.emit(c)

    def _caret(self, c: str) -> None:
        flags = self.flags
        last = self.last
        if (flags.isset(Flag.NOSUPERSCRIPT) or flags.isset(Flag.STRICT)
                or flags.isset(Flag.TAGTEXT) or not last
                or ((_ispunct(last) or _isspace(last)) and last != ")")
                or self._isthisspace(1)):
            self.emit(c)
            return

        sup = self.isp
        if self._peek(1) == "(":
            here = self.isp
            self._pull()
            length = _parenthetical("(", ")", self)
            if length is None or length <= 0:
                self._seek(here)
                self.emit(c)
                return
            sup += 1
        else:
            length = 0
            while self._isthisalnum(1 + length):
                length += 1
            if not length:
                self.emit(c)
                return
            self._shift(length)
        self.emit("<sup>")
        self.reparse(self.inp[sup:sup + length], None, "()")
        self.emit("</sup>")

    def _underscore(self, c: str) -> None:
        if (not self.flags.isset(Flag.STRICT)
                and self._isthisalnum(-1) and self._isthisalnum(1)):
            self.emit(c)
            return
        self._star(c)

    def _star(self, c: str) -> None:
        if self._isthisspace(-1) and self._isthisspace(1):
            self.emit(c)
            return
        if self._tagtext():
            self.emit(c)
            return
        rep = 1
        while self._peek(1) == c:
            self._pull()
            rep += 1
        self._emphasis(c, rep)

    def _tilde(self, c: str) -> None:
        flags = self.flags
        if (flags.isset(Flag.NOSTRIKETHROUGH) or flags.isset(Flag.STRICT)
                or flags.isset(Flag.TAGTEXT)
                or not self._tickhandler(c, 2, False, self._delspan)):
            self.emit(c)

    def _backtick(self, c: str) -> None:
        if self._tagtext() or not self._tickhandler(c, 1, True, self._codespan):
            self.emit(c)

    def _backslash(self, c: str) -> None:
        flags = self.flags
        nxt = self._pull()
        if nxt is None:
            self.emit("\\")
            return
        if nxt == "&":
            self.emit("&amp;")
            return
        if nxt == "<":
            after = self._peek(1)
            if after is None or _isspace(after):
                self.emit("&lt;")
            else:
                self.emit("\\")
                self._shift(-1)
            return
        if nxt == "^":
            if flags.isset(Flag.NOSUPERSCRIPT):
                self.emit("\\")
                self._shift(-1)
            else:
                self.emit(nxt)
            return
        if nxt in ":|":
            if flags.isset(Flag.NOTABLES) or flags.isset(Flag.STRICT):
                self.emit("\\")
                self._shift(-1)
            else:
                self.emit(nxt)
            return
        if nxt in "[(":
            if (flags.isset(Flag.LATEX) and not flags.isset(Flag.STRICT)
                    and self._mathhandler("\\", ")" if nxt == "(" else "]")):
                return
        if self._escaped(nxt) or nxt in _BACKSLASH_LITERALS:
            self.emit(nxt)
        else:
            self.emit("\\")
            self._shift(-1)

    def _lt(self, c: str) -> None:
        if not self._maybe_tag_or_link():
            if self.flags.isset(Flag.STRICT) and _is_strict_tag_prefix(self._peek(1)):
                self.emit(c)
            else:
                self.emit("&lt;")

    def _amp(self, c: str) -> None:
        j = 2 if self._peek(1) == "#" else 1
        while self._isthisalnum(j):
            j += 1
        self.emit("&amp;" if self._peek(j) != ";" else c)

    def _dollar(self, c: str) -> None:
        if self.flags.isset(Flag.LATEX) and not self.flags.isset(Flag.STRICT):
            if self._peek(1) == "$":
                self._pull()
                if self._mathhandler("$", "$"):
                    return
                self._shift(-1)
            elif self._tickhandler(c, 1, True, self._latexspan):
                return
        self._plain(c)

    _DISPATCH = {
        EOLN: _eoln,
        ">": _gt,
        '"': _dquote,
        "!": _bang,
        "[": _bracket,
        "^": _caret,
        "_": _underscore,
        "*": _star,
        "~": _tilde,
        "`": _backtick,
        "\\": _backslash,
        "<": _lt,
        "&": _amp,
        "$": _dollar,
    }

    def text(self) -> None:
        """Render all pending input into the output queue."""
        self._quotes = 0
        while True:
            if (self.flags.isset(Flag.AUTOLINK) and not self.flags.isset(Flag.STRICT)
                    and _isalpha(self._peek(1)) and not self._tagtext()):
                self._maybe_autolink()

            c = self._pull()
            if c is None:
                break
            if self._smartypants(c):
                continue
            if c == "\0":
                # NUL bytes are dropped from the output
                continue
            self._DISPATCH.get(c, Inline._plain)(self, c)
        self.inp = ""
        self.isp = 0


def render_line(text: str, flags: Optional[FlagSet] = None) -> str:
    """Render one piece of inline markdown to html."""
    stream = Inline(flags)
    stream.reparse(text, None, None)
    stream.emblock()
    return stream.out


def reparse_to_string(text: str, flags: Optional[FlagSet] = None) -> str:
    """Render ``text`` with ``flags`` added to an empty flag set."""
    stream = Inline()
    stream.reparse(text, flags, None)
    stream.emblock()
    return stream.out