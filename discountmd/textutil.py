"""Small string helpers used while parsing."""

from __future__ import annotations

_CSPACE = " \t\n\v\f\r"


def strip(text: str) -> str:
    """Remove leading and trailing ASCII whitespace."""
    return text.strip(_CSPACE)


def keyword(text: str) -> str:
    """Return the run of ASCII letters at the start of ``text``."""
    end = 0
    for ch in text:
        if not ("a" <= ch <= "z" or "A" <= ch <= "Z"):
            break
        end += 1
    return text[:end]


def skip_prefix(base: str, prefix: str) -> str | None:
    """Return what follows ``prefix`` in ``base``, or None if it is not a prefix."""
    if base.startswith(prefix):
        return base[len(prefix):]
    return None