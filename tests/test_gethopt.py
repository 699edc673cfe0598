import pytest

from discountmd.gethopt import HOpt, HOptContext, HOptError, hoptdescribe, hoptusage

OPTS = [
    HOpt(0, "css", None, "file", "css file"),
    HOpt(1, "header", None, "file", "header file"),
    HOpt(2, None, "a", None, "option a (no arg)"),
    HOpt(3, None, "b", "arg", "option B (with arg)"),
    HOpt(4, "help", "?", None, "help message"),
]


def collect(argv):
    ctx = HOptContext(argv)
    got = [(opt.option, ctx.optarg) for opt in ctx.options(OPTS)]
    return got, ctx.arguments


def test_single_char_options():
    got, rest = collect(["prog", "-a", "-b", "x", "file"])
    assert got == [(2, None), (3, "x")]
    assert rest == ["file"]


def test_clustered_and_attached_argument():
    got, rest = collect(["prog", "-abvalue", "tail"])
    assert got == [(2, None), (3, "value")]
    assert rest == ["tail"]


def test_word_options_with_one_or_two_dashes():
    got, rest = collect(["prog", "-css", "s.css", "--header", "h.html", "--help"])
    assert got == [(0, "s.css"), (1, "h.html"), (4, None)]
    assert rest == []


def test_double_dash_ends_options():
    got, rest = collect(["prog", "-a", "--", "-b"])
    assert got == [(2, None)]
    assert rest == ["-b"]


def test_single_dash_ends_options():
    got, rest = collect(["prog", "-", "-a"])
    assert got == []
    assert rest == ["-a"]


def test_illegal_option_raises():
    ctx = HOptContext(["prog", "-z"])
    with pytest.raises(HOptError) as info:
        ctx.gethopt(OPTS)
    assert info.value.option == "z"


def test_missing_argument_raises():
    ctx = HOptContext(["prog", "-b"])
    with pytest.raises(HOptError) as info:
        ctx.gethopt(OPTS)
    assert info.value.option == "b"
    assert ctx.gethopt(OPTS) is None


def test_usage_lists_every_option():
    text = hoptusage("prog", OPTS, "[file]")
    assert text.startswith("usage: prog")
    assert text.endswith(" [file]\n")
    for opt in OPTS:
        assert (opt.optword or opt.optchar) in text


def test_verbose_describe_has_line_per_option():
    text = hoptdescribe("prog", OPTS, "[file]", True)
    lines = text.split("\n")
    assert lines[0] == "usage: prog [options] [file]"
    assert lines[1] == "options:"
    body = lines[2:2 + len(OPTS)]
    assert all(line.endswith(opt.optdesc) for line, opt in zip(body, OPTS))
    assert len({len(line) - len(opt.optdesc) for line, opt in zip(body, OPTS)}) == 1