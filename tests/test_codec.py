from __future__ import annotations

import pytest

from core.codec import decode, encode, normalize_quotes


@pytest.mark.parametrize(
    ("text", "encoded"),
    [
        ("", ""),
        ("hello world", "hello_world"),
        ("under_score", "under__score"),
        ("dash-case", "dash--case"),
        ("a_b-c d", "a__b--c_d"),
        ("why?", "why~q"),
        ("100%", "100~p"),
        ("#1", "~h1"),
        ('say "hi"', "say_''hi''"),
        ("and/or", "and~sor"),
        ("back\\slash", "back~bslash"),
        ("multi\nline", "multi~nline"),
        ("this & that", "this_~a_that"),
        ("<3", "~l3"),
        (">9000", "~g9000"),
        (" leading space", "_leading_space"),
        ("??__--", "~q~q____----"),
        ("   ", "___"),
        ("_", "__"),
        ("-", "--"),
    ],
)
def test_encode(text: str, encoded: str):
    assert encode(text) == encoded


@pytest.mark.parametrize(
    ("encoded", "text"),
    [
        ("", ""),
        ("hello_world", "hello world"),
        ("a__b--c_d", "a_b-c d"),
        ("say_''hi''", 'say "hi"'),
        ("multi~nline", "multi\nline"),
        ("trailing_space_", "trailing space "),
        ("~q~q____----", "??__--"),
        ("____", "__"),
        ("----", "--"),
    ],
)
def test_decode(encoded: str, text: str):
    assert decode(encoded) == text


def test_decode_reverses_every_special_character():
    text = 'a?b%c#d"e/f\\g\nh&i<j>k'
    assert encode(text) == "a~qb~pc~hd''e~sf~bg~nh~ai~lj~gk"
    assert decode(encode(text)) == text


def test_multiple_spaces_are_ambiguous():
    assert encode("a  b") == "a__b"
    assert decode("a__b") == "a_b"


def test_three_underscores_decode_to_underscore_and_space():
    assert decode("___") == "_ "


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("hello world", "hello world"),
        ("it’s", "it's"),
        ("“hello”", '"hello"'),
        ("2020–2025", "2020-2025"),
        ("wait—what", "wait--what"),
        ('"hello" -- it\'s me', '"hello" -- it\'s me'),
    ],
)
def test_normalize_quotes(text: str, expected: str):
    assert normalize_quotes(text) == expected


def test_smart_quotes_encode_like_typed_ones():
    assert encode(normalize_quotes("it’s a “test”")) == "it's_a_''test''"
