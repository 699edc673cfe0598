"""The parsed document tree, its header fields and a debugging dump."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum, auto
from typing import Callable, Optional

from .flags import FlagSet


class ParagraphType(Enum):
    WHITESPACE = auto()
    CODE = auto()
    QUOTE = auto()
    MARKUP = auto()
    HTML = auto()
    STYLE = auto()
    DL = auto()
    UL = auto()
    OL = auto()
    AL = auto()
    LISTITEM = auto()
    HDR = auto()
    HR = auto()
    TABLE = auto()
    SOURCE = auto()


class Alignment(IntEnum):
    IMPLICIT = 0
    PARA = 1
    CENTER = 2


@dataclass
class Line:
    """One line of input; ``dle`` is the offset of its first non-blank."""

    text: str
    dle: int = 0
    is_fenced: bool = False
    fence_class: Optional[str] = None


@dataclass
class Paragraph:
    typ: ParagraphType
    text: list[Line] = field(default_factory=list)
    down: list[Paragraph] = field(default_factory=list)
    ident: Optional[str] = None
    lang: Optional[str] = None
    label: Optional[str] = None
    hnumber: int = 0
    align: Alignment = Alignment.IMPLICIT
    para_flags: int = 0


@dataclass
class Footnote:
    """A reference-style link target or an extra-style footnote."""

    tag: str = ""
    link: str = ""
    title: str = ""
    attrib: str = ""
    height: int = 0
    width: int = 0
    percent_height: bool = False
    percent_width: bool = False
    referenced: bool = False
    refnumber: int = 0
    text: list[Paragraph] = field(default_factory=list)


@dataclass
class Callbacks:
    """Caller-supplied hooks; each returns None to use the default output."""

    e_url: Optional[Callable[[str], Optional[str]]] = None
    e_flags: Optional[Callable[[str], Optional[str]]] = None
    e_anchor: Optional[Callable[[str], Optional[str]]] = None
    e_codefmt: Optional[Callable[[str, Optional[str]], Optional[str]]] = None


@dataclass
class Document:
    content: list[Line] = field(default_factory=list)
    code: list[Paragraph] = field(default_factory=list)
    title: Optional[Line] = None
    author: Optional[Line] = None
    date: Optional[Line] = None
    tabstop: int = 4
    flags: FlagSet = field(default_factory=FlagSet)
    footnotes: list[Footnote] = field(default_factory=list)
    callbacks: Callbacks = field(default_factory=Callbacks)
    ref_prefix: Optional[str] = None
    compiled: bool = False
    html: Optional[str] = None


def _only_if_set(line: Optional[Line]) -> Optional[str]:
    if line is None or line.dle < 0 or line.dle >= len(line.text):
        return None
    return line.text[line.dle:] or None


def doc_title(doc: Optional[Document]) -> Optional[str]:
    return _only_if_set(doc.title) if doc else None


def doc_author(doc: Optional[Document]) -> Optional[str]:
    return _only_if_set(doc.author) if doc else None


def doc_date(doc: Optional[Document]) -> Optional[str]:
    return _only_if_set(doc.date) if doc else None


_TYPE_NAMES = {
    ParagraphType.WHITESPACE: "whitespace",
    ParagraphType.CODE: "code",
    ParagraphType.QUOTE: "quote",
    ParagraphType.MARKUP: "markup",
    ParagraphType.HTML: "html",
    ParagraphType.DL: "dl",
    ParagraphType.UL: "ul",
    ParagraphType.OL: "ol",
    ParagraphType.LISTITEM: "item",
    ParagraphType.HDR: "header",
    ParagraphType.HR: "hr",
    ParagraphType.TABLE: "table",
    ParagraphType.SOURCE: "source",
    ParagraphType.STYLE: "style",
}

_ALIGN_NAMES = {Alignment.PARA: "P", Alignment.CENTER: "center"}


@dataclass
class _Frame:
    indent: int
    c: str


def _change_prefix(stack: list[_Frame], c: str) -> None:
    if stack and stack[-1].c in "+|":
        stack[-1].c = c


def _print_prefix(stack: list[_Frame], out: list[str]) -> None:
    if not stack:
        return
    top = stack[-1]
    if top.c in "+-":
        out.append(f"--{top.c}")
        top.c = " " if top.c == "-" else "|"
    else:
        for i, frame in enumerate(stack):
            if i:
                out.append("  ")
            out.append(" " * (frame.indent + 2) + frame.c)
            if frame.c == "`":
                frame.c = " "
    out.append("--")


def _dump(paragraphs: list[Paragraph], stack: list[_Frame], out: list[str]) -> None:
    for pos, pp in enumerate(paragraphs):
        if pos == len(paragraphs) - 1:
            _change_prefix(stack, "`")
        _print_prefix(stack, out)

        if pp.typ is ParagraphType.HDR:
            label = f"[h{pp.hnumber}"
        else:
            label = f"[{_TYPE_NAMES.get(pp.typ, 'mystery node!')}"
        if pp.ident:
            label += f" {pp.ident}"
        if pp.para_flags:
            label += f" {pp.para_flags:x}"
        if pp.align > Alignment.PARA:
            label += f", <{_ALIGN_NAMES[pp.align]}>"
        count = len(pp.text)
        if count:
            label += f", {count} line{'' if count == 1 else 's'}"
        label += "]"
        out.append(label)

        if pp.down:
            stack.append(_Frame(len(label), "+" if len(pp.down) > 1 else "-"))
            _dump(pp.down, stack, out)
            stack.pop()
        else:
            out.append("\n")


def dump_tree(doc: Document, title: str) -> str:
    """Draw the paragraph tree of a compiled document."""
    if not doc.code:
        raise ValueError("document has no compiled paragraphs")
    out: list[str] = [title]
    stack = [_Frame(len(title), "+" if len(doc.code) > 1 else "-")]
    _dump(doc.code, stack, out)
    return "".join(out)