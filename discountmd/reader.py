"""Reading github-flavoured input, where every newline is a hard break."""

from __future__ import annotations

from typing import Iterable, Optional, TextIO

from .flags import Flag, FlagSet
from .tree import Document, Line

_SPACE = " \t\n\v\f\r"
TABSTOP = 4


def _make_line(text: str, tabstop: int) -> Line:
    text = text.expandtabs(tabstop)
    return Line(text, dle=len(text) - len(text.lstrip(" ")))


def _trim_line(line: Line, count: int) -> None:
    text = line.text[count:]
    line.text = text
    line.dle = len(text) - len(text.lstrip(" "))


def _keep(c: str) -> bool:
    return c.isprintable() or c in _SPACE or ord(c) >= 0x80


def gfm_populate(chars: Iterable[str], flags: Optional[FlagSet] = None) -> Document:
    """Build a document from a stream of characters."""
    flags = flags if flags is not None else FlagSet()
    doc = Document(flags=flags.copy())
    doc.tabstop = 4 if (flags.isset(Flag.TABSTOP) or flags.isset(Flag.STRICT)) else TABSTOP

    # number of leading '%' lines seen; None once a line is not one
    pandoc: Optional[int] = 0
    line: list[str] = []
    for c in chars:
        if c == "\n":
            if pandoc is not None and pandoc < 3:
                if line and line[0] == "%":
                    pandoc += 1
                else:
                    pandoc = None
            if pandoc is None:
                line.append("  ")
            doc.content.append(_make_line("".join(line), doc.tabstop))
            line = []
        elif _keep(c):
            line.append(c)

    if line:
        doc.content.append(_make_line("".join(line), doc.tabstop))

    if pandoc == 3 and not flags.isset(Flag.NOHEADER):
        doc.title, doc.author, doc.date = doc.content[:3]
        for header in (doc.title, doc.author, doc.date):
            _trim_line(header, 1)
        del doc.content[:3]

    return doc


def gfm_string(text: str, flags: Optional[FlagSet] = None) -> Document:
    """Build a document from a string."""
    return gfm_populate(text, flags)


def gfm_stream(stream: TextIO, flags: Optional[FlagSet] = None) -> Document:
    """Build a document from a text stream."""
    return gfm_populate(iter(lambda: stream.read(1), ""), flags)