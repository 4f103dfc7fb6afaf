# tickscript/tests/test_lexer.py

import pytest

from tickscript.src.errors import DSLSyntaxError
from tickscript.src.lexer import tokenize
from tickscript.src.tokens import TokenKind


def kinds(source):
    return [t.kind for t in tokenize(source)]


def test_declaration_tokens():
    tokens = tokenize("length = 20.5")
    assert [t.kind for t in tokens] == [
        TokenKind.IDENTIFIER,
        TokenKind.EQUAL,
        TokenKind.NUMBER,
        TokenKind.EOF,
    ]
    assert tokens[0].lexeme == "length"
    assert tokens[2].lexeme == "20.5"


def test_always_ends_with_single_eof():
    for source in ["", "\n\n", "plot(close())", "// only a comment"]:
        tokens = tokenize(source)
        assert tokens[-1].kind is TokenKind.EOF
        assert sum(1 for t in tokens if t.kind is TokenKind.EOF) == 1


def test_two_character_operators_are_greedy():
    assert kinds("a != b == c <= d >= e && f || g") == [
        TokenKind.IDENTIFIER, TokenKind.BANG_EQUAL,
        TokenKind.IDENTIFIER, TokenKind.EQUAL_EQUAL,
        TokenKind.IDENTIFIER, TokenKind.LESS_EQUAL,
        TokenKind.IDENTIFIER, TokenKind.GREATER_EQUAL,
        TokenKind.IDENTIFIER, TokenKind.AND,
        TokenKind.IDENTIFIER, TokenKind.OR,
        TokenKind.IDENTIFIER, TokenKind.EOF,
    ]


def test_single_character_fallbacks():
    assert kinds("! = < > + - * /")[:-1] == [
        TokenKind.BANG, TokenKind.EQUAL, TokenKind.LESS, TokenKind.GREATER,
        TokenKind.PLUS, TokenKind.MINUS, TokenKind.STAR, TokenKind.SLASH,
    ]


@pytest.mark.parametrize("source", ["a & b", "a | b"])
def test_lone_ampersand_or_pipe_is_an_error(source):
    with pytest.raises(DSLSyntaxError):
        tokenize(source)


def test_keywords_and_booleans():
    tokens = tokenize("true false and or study")
    assert [t.kind for t in tokens][:-1] == [
        TokenKind.BOOLEAN, TokenKind.BOOLEAN, TokenKind.AND, TokenKind.OR, TokenKind.IDENTIFIER,
    ]


def test_comment_is_emitted_and_lines_tracked():
    tokens = tokenize("x = 1 // trailing\ny = 2")
    comment = [t for t in tokens if t.kind is TokenKind.COMMENT][0]
    assert comment.lexeme == "// trailing"
    y = [t for t in tokens if t.lexeme == "y"][0]
    assert y.line == 2


def test_string_keeps_quotes_in_lexeme():
    tokens = tokenize('study("My Study")')
    assert tokens[2].kind is TokenKind.STRING
    assert tokens[2].lexeme == '"My Study"'


def test_unterminated_string_reports_start_line():
    with pytest.raises(DSLSyntaxError) as ei:
        tokenize('x = 1\ny = "never closed\nmore')
    assert ei.value.line == 2
    assert "Unterminated string" in str(ei.value)


def test_number_without_fraction_digits_stops_at_dot():
    with pytest.raises(DSLSyntaxError) as ei:
        tokenize("x = 1.")
    assert "'.'" in str(ei.value)


def test_minus_is_not_part_of_number():
    assert kinds("-5")[:-1] == [TokenKind.MINUS, TokenKind.NUMBER]


def test_unexpected_character_names_char_and_line():
    with pytest.raises(DSLSyntaxError) as ei:
        tokenize("x = 1\ny = 2 $ 3")
    assert "'$'" in str(ei.value)
    assert ei.value.line == 2
    assert "line 2" in str(ei.value)
