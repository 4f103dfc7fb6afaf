"""
TickScript lexer.

Scans source text left to right, one character at a time, and produces a flat
list of tokens terminated by a single EOF token. Comments and newlines are
emitted as tokens so the parser can skip them while line numbers stay intact.
"""

from __future__ import annotations

from .errors import DSLSyntaxError
from .tokens import EQUAL_SUFFIXED, KEYWORDS, SINGLE_CHAR_TOKENS, Token, TokenKind


def _is_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


def _is_ident_start(ch: str) -> bool:
    return ("a" <= ch <= "z") or ("A" <= ch <= "Z") or ch == "_"


def _is_ident_char(ch: str) -> bool:
    return _is_ident_start(ch) or _is_digit(ch)


class Lexer:
    """Single-pass scanner over one source string."""

    def __init__(self, source: str):
        self.source = source
        self.tokens: list[Token] = []
        self.start = 0
        self.current = 0
        self.line = 1

    def tokenize(self) -> list[Token]:
        while not self._at_end():
            self.start = self.current
            self._scan_token()
        self.tokens.append(Token(TokenKind.EOF, "", self.line))
        return self.tokens

    # --- scanning ---

    def _scan_token(self) -> None:
        ch = self._advance()

        if ch in " \t\r":
            return
        if ch == "\n":
            self._add(TokenKind.NEWLINE)
            self.line += 1
            return
        if ch in SINGLE_CHAR_TOKENS:
            self._add(SINGLE_CHAR_TOKENS[ch])
            return
        if ch == "/":
            if self._match("/"):
                while self._peek() != "\n" and not self._at_end():
                    self._advance()
                self._add(TokenKind.COMMENT)
            else:
                self._add(TokenKind.SLASH)
            return
        if ch in EQUAL_SUFFIXED:
            single, double = EQUAL_SUFFIXED[ch]
            self._add(double if self._match("=") else single)
            return
        if ch == "&":
            if not self._match("&"):
                raise DSLSyntaxError("Unexpected character: '&'", line=self.line)
            self._add(TokenKind.AND)
            return
        if ch == "|":
            if not self._match("|"):
                raise DSLSyntaxError("Unexpected character: '|'", line=self.line)
            self._add(TokenKind.OR)
            return
        if ch == '"':
            self._string()
            return
        if _is_digit(ch):
            self._number()
            return
        if _is_ident_start(ch):
            self._identifier()
            return

        raise DSLSyntaxError(f"Unexpected character: {ch!r}", line=self.line)

    def _string(self) -> None:
        start_line = self.line
        while self._peek() != '"' and not self._at_end():
            if self._peek() == "\n":
                self.line += 1
            self._advance()
        if self._at_end():
            raise DSLSyntaxError("Unterminated string", line=start_line)
        self._advance()  # closing quote
        self._add(TokenKind.STRING, line=start_line)

    def _number(self) -> None:
        while _is_digit(self._peek()):
            self._advance()
        if self._peek() == "." and _is_digit(self._peek_next()):
            self._advance()
            while _is_digit(self._peek()):
                self._advance()
        self._add(TokenKind.NUMBER)

    def _identifier(self) -> None:
        while _is_ident_char(self._peek()):
            self._advance()
        text = self.source[self.start:self.current]
        self._add(KEYWORDS.get(text, TokenKind.IDENTIFIER))

    # --- helpers ---

    def _at_end(self) -> bool:
        return self.current >= len(self.source)

    def _advance(self) -> str:
        ch = self.source[self.current]
        self.current += 1
        return ch

    def _match(self, expected: str) -> bool:
        if self._at_end() or self.source[self.current] != expected:
            return False
        self.current += 1
        return True

    def _peek(self) -> str:
        if self._at_end():
            return "\0"
        return self.source[self.current]

    def _peek_next(self) -> str:
        if self.current + 1 >= len(self.source):
            return "\0"
        return self.source[self.current + 1]

    def _add(self, kind: TokenKind, line: int | None = None) -> None:
        text = self.source[self.start:self.current]
        self.tokens.append(Token(kind, text, self.line if line is None else line))


def tokenize(source: str) -> list[Token]:
    """Convert TickScript source into a list of tokens ending with EOF."""
    return Lexer(source).tokenize()
