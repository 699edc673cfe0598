"""Pairing of emphasis markers into <em> and <strong> spans."""

from __future__ import annotations

from dataclasses import dataclass

_EMTAGS = (("<em>", "</em>"), ("<strong>", "</strong>"))


@dataclass
class EmphasisBlock:
    """A run of text, or a run of ``count`` emphasis characters.

    ``post`` collects closing tags that are written before ``text``.
    """

    char: str = ""
    count: int = 0
    text: str = ""
    post: str = ""

    @property
    def is_text(self) -> bool:
        return not self.char

    def fill(self) -> None:
        """Turn unmatched emphasis characters back into plain text."""
        if self.is_text:
            return
        self.text += self.char * self.count
        self.count = 0


def _pair(blocks: list[EmphasisBlock], first: int, last: int, match: int) -> int:
    """Index of the nearest token that closes ``blocks[first]``, or 0."""
    begin = blocks[first]
    for i in range(first + 1, last + 1):
        p = blocks[i]
        if not p.is_text and p.count <= 0:
            continue
        if not p.is_text and p.char == begin.char:
            if p.count == match or p.count > 2:
                return i
    return 0


def _close(blocks: list[EmphasisBlock], first: int, last: int) -> None:
    for block in blocks[first + 1:last - 1]:
        block.fill()


def _match(blocks: list[EmphasisBlock], first: int, last: int) -> None:
    start = blocks[first]
    while True:
        count = start.count
        if count <= 0:
            return
        if count == 2:
            e = _pair(blocks, first, last, 2)
            match = 2
            if not e:
                e = _pair(blocks, first, last, 1)
                match = 1
        elif count == 1:
            e = _pair(blocks, first, last, 1)
            match = 1
        else:
            e = _pair(blocks, first, last, 1)
            e2 = _pair(blocks, first, last, 2)
            if e2 >= e:
                e, match = e2, 2
            else:
                match = 1

        if not e:
            return

        end = blocks[e]
        end.count -= match
        start.count -= match
        _block(blocks, first, e)
        opener, closer = _EMTAGS[match - 1]
        start.text = opener + start.text
        end.post += closer


def _block(blocks: list[EmphasisBlock], first: int, last: int) -> None:
    for i in range(first, last + 1):
        if not blocks[i].is_text:
            _match(blocks, i, last)
    _close(blocks, first, last)


def emphasize(blocks: list[EmphasisBlock]) -> str:
    """Resolve emphasis across ``blocks``, empty the list and return the text."""
    if not blocks:
        return ""
    _block(blocks, 0, len(blocks) - 1)
    out: list[str] = []
    for block in blocks:
        block.fill()
        out.append(block.post)
        out.append(block.text)
    blocks.clear()
    return "".join(out)