"""Option parsing with single-character and whole-word options, both led by '-'."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import Iterator, Sequence


@dataclass(frozen=True)
class HOpt:
    """One option: a word, a single character, or both."""

    option: int = 0
    optword: str | None = None
    optchar: str | None = None
    opthasarg: str | None = None
    optdesc: str | None = None


class HOptError(Exception):
    """An unknown option, or an option missing its argument."""

    def __init__(self, message: str, option: str | None = None) -> None:
        super().__init__(message)
        self.option = option


class HOptContext:
    """Walks an argument vector, returning one option at a time."""

    def __init__(self, argv: Sequence[str], opterr: bool = False) -> None:
        self.argv = list(argv)
        self.opterr = bool(opterr)
        self.optind = 1
        self.optchar = 0
        self.optarg: str | None = None
        self.optopt = ""
        self.optend = False

    @property
    def arguments(self) -> list[str]:
        """Arguments left after the options."""
        return self.argv[self.optind:]

    def _fail(self, message: str, option: str) -> None:
        if self.opterr:
            print(message, file=sys.stderr)
        raise HOptError(message, option)

    def gethopt(self, opts: Sequence[HOpt]) -> HOpt | None:
        """Return the next option, or None when the options are done."""
        while True:
            if self.optend or self.optind >= len(self.argv):
                return None

            self.optarg = None
            self.optopt = ""
            arg = self.argv[self.optind]

            if self.optchar == 0:
                if not arg.startswith("-"):
                    self.optend = True
                    return None
                if arg in ("-", "--"):
                    self.optend = True
                    self.optind += 1
                    return None

                dashes = 2 if arg[1] == "-" else 1
                word = arg[dashes:]
                for opt in opts:
                    if opt.optword and opt.optword == word:
                        if opt.opthasarg:
                            nxt = self.optind + 1
                            self.optarg = self.argv[nxt] if nxt < len(self.argv) else None
                            self.optind += 2
                        else:
                            self.optind += 1
                        return opt
                self.optchar = 1

            if self.optchar >= len(arg):
                self.optind += 1
                self.optchar = 0
                continue

            self.optopt = arg[self.optchar]
            self.optchar += 1

            for opt in opts:
                if not opt.optchar or opt.optchar != self.optopt:
                    continue
                if opt.opthasarg:
                    if self.optchar < len(arg):
                        self.optarg = arg[self.optchar:]
                        self.optind += 1
                    elif self.optind < len(self.argv) - 1:
                        self.optarg = self.argv[self.optind + 1]
                        self.optind += 2
                    else:
                        self.optarg = None
                        self.optind += 1
                        self.optchar = 0
                        self._fail(
                            f"{self.argv[0]}: option requires an argument -- {opt.optchar}",
                            opt.optchar,
                        )
                    self.optchar = 0
                elif self.optchar >= len(arg):
                    self.optind += 1
                    self.optchar = 0
                return opt

            self._fail(f"{self.argv[0]}: illegal option -- {self.optopt}", self.optopt)

    def options(self, opts: Sequence[HOpt]) -> Iterator[HOpt]:
        """Yield options until the option list ends."""
        while (opt := self.gethopt(opts)) is not None:
            yield opt


def hoptdescribe(pgm: str, opts: Sequence[HOpt], arguments: str | None = None,
                 verbose: bool = False) -> str:
    """Return a usage message, short or with one line per option."""
    out: list[str] = [f"usage: {pgm}"]

    if verbose:
        if opts:
            out.append(" [options]")
        if arguments:
            out.append(f" {arguments}")
        out.append("\n")
        if opts:
            out.append("options:\n")

        maxopt = max((len(o.optword) for o in opts if o.optword), default=0)
        maxarg = max((len(o.opthasarg) for o in opts if o.opthasarg), default=0)
        hasoptchar = any(o.optchar for o in opts)

        for opt in opts:
            if opt.optword:
                out.append(f" -{opt.optword}" + " " * (maxopt - len(opt.optword)))
            else:
                out.append(" " * (maxopt + 2))

            if opt.optchar:
                out.append(f" -{opt.optchar} ")
            elif hasoptchar:
                out.append("    ")

            if maxarg > 0:
                if opt.opthasarg:
                    out.append(f" [{opt.opthasarg}]" + " " * (maxarg - len(opt.opthasarg)))
                else:
                    out.append("   " + " " * maxarg)

            if opt.optdesc:
                out.append(f" {opt.optdesc}")
            out.append("\n")
    else:
        bare = "".join(o.optchar for o in opts if o.optchar and not o.opthasarg)
        if bare:
            out.append(f" [-{bare}]")
        for opt in opts:
            if opt.optchar and opt.opthasarg:
                out.append(f" [-{opt.optchar} {opt.opthasarg}]")
        for opt in opts:
            if opt.optword:
                suffix = f" {opt.opthasarg}" if opt.opthasarg else ""
                out.append(f" [-{opt.optword}{suffix}]")
        if arguments:
            out.append(f" {arguments}")

    out.append("\n")
    return "".join(out)


def hoptusage(pgm: str, opts: Sequence[HOpt], arguments: str | None = None) -> str:
    """Return the short usage message."""
    return hoptdescribe(pgm, opts, arguments, False)