"""Markdown processing flags and flag sets."""

from __future__ import annotations

from enum import IntEnum
from typing import Iterable, Iterator


class Flag(IntEnum):
    """Individual processing options, numbered by bit position."""

    NOLINKS = 0
    NOIMAGE = 1
    NOPANTS = 2
    NOHTML = 3
    TAGTEXT = 4
    NO_EXT = 5
    CDATA = 6
    NOSUPERSCRIPT = 7
    STRICT = 8
    NOTABLES = 9
    NOSTRIKETHROUGH = 10
    TOC = 11
    ONE_COMPAT = 12
    AUTOLINK = 13
    SAFELINK = 14
    NOHEADER = 15
    TABSTOP = 16
    NODIVQUOTE = 17
    NOALPHALIST = 18
    EXTRA_FOOTNOTE = 19
    NOSTYLE = 20
    DLDISCOUNT = 21
    DLEXTRA = 22
    FENCEDCODE = 23
    IDANCHOR = 24
    GITHUBTAGS = 25
    NORMAL_LISTITEM = 26
    URLENCODEDANCHOR = 27
    LATEX = 28
    EXPLICITLIST = 29
    ALT_AS_TITLE = 30
    # internal: the text being rendered is a label
    IS_LABEL = 31


NR_FLAGS = len(Flag)

# Display names; a leading "!" means the flag turns a feature off.
_FLAG_NAMES: tuple[tuple[Flag, str], ...] = (
    (Flag.NOLINKS, "!LINKS"),
    (Flag.NOIMAGE, "!IMAGE"),
    (Flag.NOPANTS, "!PANTS"),
    (Flag.NOHTML, "!HTML"),
    (Flag.TAGTEXT, "TAGTEXT"),
    (Flag.NO_EXT, "!EXT"),
    (Flag.CDATA, "CDATA"),
    (Flag.NOSUPERSCRIPT, "!SUPERSCRIPT"),
    (Flag.STRICT, "STRICT"),
    (Flag.NOTABLES, "!TABLES"),
    (Flag.NOSTRIKETHROUGH, "!STRIKETHROUGH"),
    (Flag.TOC, "TOC"),
    (Flag.ONE_COMPAT, "MKD_1_COMPAT"),
    (Flag.AUTOLINK, "AUTOLINK"),
    (Flag.SAFELINK, "SAFELINK"),
    (Flag.NOHEADER, "!HEADER"),
    (Flag.TABSTOP, "TABSTOP"),
    (Flag.NODIVQUOTE, "!DIVQUOTE"),
    (Flag.NOALPHALIST, "!ALPHALIST"),
    (Flag.EXTRA_FOOTNOTE, "FOOTNOTE"),
    (Flag.NOSTYLE, "!STYLE"),
    (Flag.DLDISCOUNT, "DLDISCOUNT"),
    (Flag.DLEXTRA, "DLEXTRA"),
    (Flag.FENCEDCODE, "FENCEDCODE"),
    (Flag.IDANCHOR, "IDANCHOR"),
    (Flag.GITHUBTAGS, "GITHUBTAGS"),
    (Flag.NORMAL_LISTITEM, "NORMAL_LISTITEM"),
    (Flag.URLENCODEDANCHOR, "URLENCODEDANCHOR"),
    (Flag.LATEX, "LATEX"),
    (Flag.EXPLICITLIST, "EXPLICITLIST"),
    (Flag.ALT_AS_TITLE, "ALT_AS_TITLE"),
)


class FlagSet:
    """A mutable set of processing flags."""

    def __init__(self, flags: Iterable[int] = ()) -> None:
        self._flags: set[Flag] = set()
        for flag in flags:
            self.set(flag)

    def set(self, flag: int) -> None:
        """Turn a flag on; numbers outside the flag range are ignored."""
        if 0 <= int(flag) < NR_FLAGS:
            self._flags.add(Flag(int(flag)))

    def clear(self, flag: int) -> None:
        """Turn a flag off; numbers outside the flag range are ignored."""
        if 0 <= int(flag) < NR_FLAGS:
            self._flags.discard(Flag(int(flag)))

    def isset(self, flag: int) -> bool:
        return 0 <= int(flag) < NR_FLAGS and Flag(int(flag)) in self._flags

    def set_bitmap(self, bits: int) -> None:
        """Set every flag whose bit is on in ``bits``."""
        for i in range(min(64, NR_FLAGS)):
            if bits & (1 << i):
                self.set(i)

    def copy(self) -> FlagSet:
        return FlagSet(self._flags)

    def update(self, other: FlagSet | None) -> None:
        """Add every flag of ``other`` to this set."""
        if other is not None:
            self._flags |= other._flags

    def any_of(self, other: FlagSet) -> bool:
        """Whether this set shares any flag with ``other``."""
        return bool(self._flags & other._flags)

    def describe(self, htmlplease: bool = False) -> str:
        """Describe the flags as plain text or as an HTML table."""
        out: list[str] = []
        if htmlplease:
            out.append('<table class="mkd_flags_are">\n')
        even = True
        for flag, name in _FLAG_NAMES:
            is_set = self.isset(flag)
            if name.startswith("!"):
                name = name[1:]
                is_set = not is_set

            if htmlplease:
                if even:
                    out.append(" <tr>")
                out.append("<td>")
            else:
                out.append(" ")

            if not is_set:
                out.append("<s>" if htmlplease else "!")
            out.append(name)

            if htmlplease:
                if not is_set:
                    out.append("</s>")
                out.append("</td>")
                if not even:
                    out.append("</tr>\n")
            even = not even
        if htmlplease:
            if even:
                out.append("</tr>\n")
            out.append("</table>\n")
        return "".join(out)

    def __contains__(self, flag: object) -> bool:
        return isinstance(flag, int) and self.isset(flag)

    def __iter__(self) -> Iterator[Flag]:
        return iter(sorted(self._flags))

    def __len__(self) -> int:
        return len(self._flags)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FlagSet):
            return NotImplemented
        return self._flags == other._flags

    def __repr__(self) -> str:
        return f"FlagSet([{', '.join(f.name for f in self)}])"