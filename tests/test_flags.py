import pytest

from discountmd.flags import Flag, FlagSet


def test_set_and_clear_flag():
    flags = FlagSet()
    flags.set(Flag.DLDISCOUNT)
    assert flags.isset(Flag.DLDISCOUNT)
    flags.clear(Flag.DLDISCOUNT)
    assert not flags.isset(Flag.DLDISCOUNT)


def test_copy_is_independent():
    flags = FlagSet([Flag.DLDISCOUNT])
    copy = flags.copy()
    assert copy == flags
    copy.clear(Flag.DLDISCOUNT)
    assert flags.isset(Flag.DLDISCOUNT)
    assert not copy.isset(Flag.DLDISCOUNT)


def test_copy_of_empty_is_empty():
    assert len(FlagSet().copy()) == 0


@pytest.mark.parametrize("bit", [-1, len(Flag), 1000])
def test_out_of_range_is_ignored(bit):
    flags = FlagSet()
    flags.set(bit)
    assert len(flags) == 0
    assert not flags.isset(bit)


def test_set_bitmap():
    flags = FlagSet()
    flags.set_bitmap((1 << Flag.NOLINKS) | (1 << Flag.NOPANTS))
    assert list(flags) == [Flag.NOLINKS, Flag.NOPANTS]


def test_update_and_any_of():
    a = FlagSet([Flag.TOC])
    b = FlagSet([Flag.STRICT])
    assert not a.any_of(b)
    a.update(b)
    assert a.any_of(b)
    assert Flag.STRICT in a and Flag.TOC in a


def test_describe_plain_negation():
    empty = FlagSet().describe(False).split()
    assert "LINKS" in empty
    assert "!TAGTEXT" in empty
    flagged = FlagSet([Flag.NOLINKS, Flag.TAGTEXT]).describe(False).split()
    assert "!LINKS" in flagged
    assert "TAGTEXT" in flagged


def test_describe_html_matches_plain():
    flags = FlagSet([Flag.NOIMAGE])
    plain = flags.describe(False).split()
    html = flags.describe(True)
    assert html.startswith('<table class="mkd_flags_are">\n')
    assert html.endswith("</table>\n")
    assert html.count("<td>") == len(plain)
    assert html.count("<s>") == sum(1 for word in plain if word.startswith("!"))