from __future__ import annotations

from xeno.lexer import tokenize


def _kinds(source: str) -> list[str]:
    return [tok.type for tok in tokenize(source)]


def test_empty_source_is_just_eof():
    tokens = tokenize("")
    assert [tok.type for tok in tokens] == ["EOF"]


def test_keywords_and_punctuation():
    assert _kinds("fn f(a: int[]) { return a; }") == [
        "FN", "NAME", "LPAR", "NAME", "COLON", "INT", "LSQB", "RSQB", "RPAR",
        "LBRACE", "RETURN", "NAME", "SEMICOLON", "RBRACE", "EOF",
    ]


def test_let_data_entry():
    assert _kinds("let a: int = 5;") == [
        "LET", "NAME", "COLON", "INT", "EQUAL", "INT_LIT", "SEMICOLON", "EOF",
    ]


def test_keywords_only_match_whole_words():
    tokens = tokenize("fnx lets returned integer _int int")
    assert [tok.type for tok in tokens] == ["NAME", "NAME", "NAME", "NAME", "NAME", "INT", "EOF"]
    assert [tok.value for tok in tokens[:5]] == ["fnx", "lets", "returned", "integer", "_int"]


def test_identifier_text_is_kept():
    tokens = tokenize("foo_bar9 _x")
    assert tokens[0].type == "NAME" and tokens[0].value == "foo_bar9"
    assert tokens[1].type == "NAME" and tokens[1].value == "_x"


def test_int_literal_carries_value():
    tokens = tokenize("0 42 007")
    assert [tok.value for tok in tokens[:3]] == [0, 42, 7]
    assert all(tok.type == "INT_LIT" for tok in tokens[:3])


def test_digits_then_letters_split():
    tokens = tokenize("12abc")
    assert [(tok.type, tok.value) for tok in tokens[:2]] == [("INT_LIT", 12), ("NAME", "abc")]


def test_overflowing_literal_degrades_to_zero():
    tokens = tokenize("9223372036854775807 9223372036854775808")
    assert tokens[0].value == 2**63 - 1
    assert tokens[1].type == "INT_LIT"
    assert tokens[1].value == 0


def test_unknown_characters_become_single_char_names():
    tokens = tokenize("a + -b")
    assert [(tok.type, tok.value) for tok in tokens[:-1]] == [
        ("NAME", "a"),
        ("NAME", "+"),
        ("NAME", "-"),
        ("NAME", "b"),
    ]


def test_stray_characters_are_not_merged():
    tokens = tokenize("+-")
    assert [tok.value for tok in tokens[:-1]] == ["+", "-"]


def test_unicode_whitespace_is_skipped():
    assert _kinds("fn f (\n)\t{}") == ["FN", "NAME", "LPAR", "RPAR", "LBRACE", "RBRACE", "EOF"]


def test_dot_reference():
    assert _kinds(".total") == ["DOT", "NAME", "EOF"]


def test_non_ascii_decimal_digits_degrade_to_zero():
    tokens = tokenize("١٢")
    assert tokens[0].type == "INT_LIT"
    assert tokens[0].value == 0


def test_non_decimal_numeric_starts_a_literal():
    tokens = tokenize("²x ½")
    assert [(tok.type, tok.value) for tok in tokens] == [
        ("INT_LIT", 0),
        ("NAME", "x"),
        ("INT_LIT", 0),
        ("EOF", ""),
    ]


def test_separator_controls_are_not_whitespace():
    tokens = tokenize("a\x1cb")
    assert [(tok.type, tok.value) for tok in tokens[:-1]] == [
        ("NAME", "a"),
        ("NAME", "\x1c"),
        ("NAME", "b"),
    ]
