import pytest

from discountmd.emphasis import EmphasisBlock, emphasize


def em(char, count):
    return EmphasisBlock(char=char, count=count)


def txt(text):
    return EmphasisBlock(text=text)


def test_single_star_pair():
    blocks = [txt("x "), em("*", 1), txt("hi"), em("*", 1), txt(" y")]
    assert emphasize(blocks) == "x <em>hi</em> y"


def test_double_underscore_pair():
    blocks = [em("_", 2), txt("bold"), em("_", 2)]
    assert emphasize(blocks) == "<strong>bold</strong>"


def test_unmatched_marker_is_kept_as_text():
    blocks = [txt("a"), em("*", 1), txt("b")]
    assert emphasize(blocks) == "a" + "*" + "b"


def test_different_characters_do_not_pair():
    blocks = [em("*", 1), txt("a"), em("_", 1)]
    assert emphasize(blocks) == "*" + "a" + "_"


def test_text_only_concatenates():
    parts = ["one ", "two ", "three"]
    assert emphasize([txt(p) for p in parts]) == "".join(parts)


def test_empty_list():
    assert emphasize([]) == ""


def test_list_is_emptied():
    blocks = [em("*", 1), txt("a"), em("*", 1)]
    emphasize(blocks)
    assert blocks == []


def test_double_open_single_close_leaves_one_star():
    result = emphasize([em("*", 2), txt("a"), em("*", 1)])
    assert result.startswith("<em>")
    assert result.endswith("</em>")
    assert result.count("*") == 1


def test_four_stars_make_two_strong():
    result = emphasize([em("*", 4), txt("x"), em("*", 4)])
    assert result.count("<strong>") == 2
    assert result.count("</strong>") == 2
    assert "*" not in result


@pytest.mark.parametrize(
    "blocks",
    [
        [em("*", 1), txt("a"), em("*", 1), txt(" "), em("_", 2), txt("b"), em("_", 2)],
        [em("*", 3), txt("a"), em("*", 1), txt("b"), em("*", 2)],
        [em("*", 1), txt("a"), em("*", 2), txt("b"), em("*", 1)],
        [em("_", 1), txt("a"), em("*", 1), txt("b"), em("_", 1)],
    ],
)
def test_tags_balance(blocks):
    result = emphasize(blocks)
    assert result.count("<em>") == result.count("</em>")
    assert result.count("<strong>") == result.count("</strong>")


def test_fill_restores_characters():
    block = em("_", 3)
    block.fill()
    assert block.text == "___"
    assert block.count == 0