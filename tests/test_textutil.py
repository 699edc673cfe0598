from discountmd.textutil import keyword, skip_prefix, strip


def test_strip_both_ends():
    assert strip(" \t hello world \n\r") == "hello world"


def test_strip_all_space():
    assert strip(" \t\n") == ""


def test_keyword_stops_at_non_letter():
    assert keyword("abc123 def") == "abc"


def test_keyword_empty_when_not_alpha():
    assert keyword("1abc") == ""


def test_skip_prefix_round_trip():
    base = "class: value"
    word = keyword(base)
    rest = skip_prefix(base, word)
    assert word + rest == base


def test_skip_prefix_not_a_prefix():
    assert skip_prefix("abc", "x") is None