"""Markdown to HTML rendering: flags, inline rendering, document output and option parsing."""

__version__ = "0.1.0"
__all__ = [
    "emphasis",
    "flags",
    "gethopt",
    "inline",
    "links",
    "reader",
    "render",
    "textutil",
    "tree",
]