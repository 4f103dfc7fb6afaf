"""
Recursive-descent parser for TickScript.

Builds an ordered list of statements from the token stream. Expressions use
precedence climbing, lowest to highest:

    or -> and -> equality -> comparison -> additive -> multiplicative
       -> unary -> call/index postfix -> primary

Declarations are classified as series or scalar with kind inference over the
names this script has already declared as series.
"""

from __future__ import annotations

from typing import Callable, List, Optional

from loguru import logger

from .ast_nodes import (
    BinaryOp,
    BooleanLiteral,
    FunctionCall,
    NumberLiteral,
    PlotStatement,
    SeriesAccess,
    SeriesDeclaration,
    StringLiteral,
    StudyDeclaration,
    Variable,
    VariableDeclaration,
)
from .errors import DSLSyntaxError
from .inference import is_series_expression
from .lexer import tokenize
from .tokens import Token, TokenKind

DEFAULT_MAX_DEPTH = 50

_LOGICAL_OPS = {TokenKind.AND: "and", TokenKind.OR: "or"}


def _unquote(lexeme: str) -> str:
    return lexeme[1:-1]


class Parser:
    """Recursive descent parser over a token list ending with EOF."""

    def __init__(self, tokens: List[Token], max_depth: int = DEFAULT_MAX_DEPTH):
        self.tokens = list(tokens)
        if not self.tokens or self.tokens[-1].kind is not TokenKind.EOF:
            last_line = self.tokens[-1].line if self.tokens else 1
            self.tokens.append(Token(TokenKind.EOF, "", last_line))
        self.pos = 0
        self.depth = 0
        self.max_depth = max_depth
        self.series_names: set[str] = set()

    # --- cursor helpers ---

    def peek(self) -> Token:
        return self.tokens[self.pos]

    def peek_next(self) -> Token:
        return self.tokens[min(self.pos + 1, len(self.tokens) - 1)]

    def previous(self) -> Token:
        return self.tokens[self.pos - 1]

    def at_end(self) -> bool:
        return self.peek().kind is TokenKind.EOF

    def check(self, kind: TokenKind) -> bool:
        return self.peek().kind is kind

    def advance(self) -> Token:
        if not self.at_end():
            self.pos += 1
        return self.previous()

    def match(self, *kinds: TokenKind) -> bool:
        for kind in kinds:
            if self.check(kind):
                self.advance()
                return True
        return False

    def expect(self, kind: TokenKind, message: str) -> Token:
        if self.check(kind):
            return self.advance()
        tok = self.peek()
        raise DSLSyntaxError(f"{message}, got {tok}", line=tok.line)

    def _error(self, message: str, tok: Optional[Token] = None) -> DSLSyntaxError:
        tok = tok or self.peek()
        return DSLSyntaxError(message, line=tok.line)

    # --- entry point ---

    def parse_script(self):
        statements = []
        while not self.at_end():
            if self.match(TokenKind.NEWLINE, TokenKind.COMMENT):
                continue
            statements.append(self.parse_statement())
        return statements

    # --- statements ---

    def parse_statement(self):
        tok = self.peek()
        if tok.kind is not TokenKind.IDENTIFIER:
            raise self._error(f"Unexpected token: {tok}")

        if tok.lexeme == "study":
            self.advance()
            statement = self.parse_study()
        elif self.peek_next().kind is TokenKind.EQUAL:
            statement = self.parse_declaration()
        elif tok.lexeme == "plot":
            self.advance()
            statement = self.parse_plot()
        else:
            raise self._error(f"Expected '=' after {tok.lexeme!r}", self.peek_next())

        self._end_statement()
        return statement

    def _end_statement(self) -> None:
        if self.match(TokenKind.NEWLINE) or self.check(TokenKind.COMMENT) or self.at_end():
            return
        raise self._error(f"Expected newline after statement, got {self.peek()}")

    def parse_study(self) -> StudyDeclaration:
        self.expect(TokenKind.LPAREN, "Expected '(' after 'study'")
        fields = {"title": "", "shorttitle": "", "overlay": False}

        if self.check(TokenKind.STRING):
            fields["title"] = _unquote(self.advance().lexeme)
        elif self.check(TokenKind.IDENTIFIER):
            self._parse_study_param(fields)

        while self.match(TokenKind.COMMA):
            self._parse_study_param(fields)

        self.expect(TokenKind.RPAREN, "Expected ')' after study parameters")
        return StudyDeclaration(
            title=fields["title"],
            short_title=fields["shorttitle"],
            overlay=fields["overlay"],
        )

    def _parse_study_param(self, fields: dict) -> None:
        name_tok = self.expect(TokenKind.IDENTIFIER, "Expected parameter name in study declaration")
        self.expect(TokenKind.EQUAL, "Expected '=' after parameter name")
        name = name_tok.lexeme

        if name in ("title", "shorttitle"):
            value = self.expect(TokenKind.STRING, f"Expected string value for '{name}'")
            fields[name] = _unquote(value.lexeme)
        elif name == "overlay":
            value = self.expect(TokenKind.BOOLEAN, "Expected true or false for 'overlay'")
            fields["overlay"] = value.lexeme == "true"
        else:
            self.parse_expression()
            logger.debug("Ignoring unknown study parameter {!r} (line {})", name, name_tok.line)

    def parse_declaration(self):
        name = self.advance().lexeme
        self.advance()  # '='
        expression = self.parse_expression()

        if is_series_expression(expression, self.series_names):
            self.series_names.add(name)
            return SeriesDeclaration(name=name, expression=expression)
        self.series_names.discard(name)
        return VariableDeclaration(name=name, expression=expression)

    def parse_plot(self) -> PlotStatement:
        self.expect(TokenKind.LPAREN, "Expected '(' after 'plot'")
        expression = self.parse_expression()
        self.expect(TokenKind.RPAREN, "Expected ')' after plot expression")
        return PlotStatement(expression=expression)

    # --- expressions ---

    def _enter(self) -> None:
        self.depth += 1
        if self.depth > self.max_depth:
            raise self._error(f"Expression nested deeper than {self.max_depth} levels")

    def parse_expression(self):
        self._enter()
        try:
            return self.parse_or_expr()
        finally:
            self.depth -= 1

    def _fold_left(self, operand: Callable, *kinds: TokenKind):
        # each operator adds a tree level, so chains count against max_depth
        node = operand()
        levels = 0
        try:
            while self.match(*kinds):
                tok = self.previous()
                levels += 1
                self._enter()
                op = _LOGICAL_OPS.get(tok.kind, tok.lexeme)
                right = operand()
                node = BinaryOp(left=node, op=op, right=right)
        finally:
            self.depth -= levels
        return node

    def parse_or_expr(self):
        return self._fold_left(self.parse_and_expr, TokenKind.OR)

    def parse_and_expr(self):
        return self._fold_left(self.parse_equality, TokenKind.AND)

    def parse_equality(self):
        return self._fold_left(self.parse_comparison, TokenKind.BANG_EQUAL, TokenKind.EQUAL_EQUAL)

    def parse_comparison(self):
        return self._fold_left(
            self.parse_arith_expr,
            TokenKind.GREATER,
            TokenKind.GREATER_EQUAL,
            TokenKind.LESS,
            TokenKind.LESS_EQUAL,
        )

    def parse_arith_expr(self):
        return self._fold_left(self.parse_term, TokenKind.MINUS, TokenKind.PLUS)

    def parse_term(self):
        return self._fold_left(self.parse_unary, TokenKind.SLASH, TokenKind.STAR)

    def parse_unary(self):
        if self.match(TokenKind.BANG, TokenKind.MINUS):
            op = self.previous().lexeme
            self._enter()
            try:
                operand = self.parse_unary()
            finally:
                self.depth -= 1
            return BinaryOp(left=NumberLiteral(0.0), op=op, right=operand)
        return self.parse_call()

    def parse_call(self):
        node = self.parse_primary()
        while True:
            if self.match(TokenKind.LPAREN):
                node = self._finish_call(node)
            elif self.match(TokenKind.LBRACK):
                bracket = self.previous()
                index = self.parse_expression()
                self.expect(TokenKind.RBRACK, "Expected ']' after series index")
                if not isinstance(node, Variable):
                    raise self._error("Invalid series access", bracket)
                node = SeriesAccess(name=node.name, index=index)
            else:
                return node

    def _finish_call(self, callee):
        paren = self.previous()
        args = []
        if not self.check(TokenKind.RPAREN):
            args.append(self.parse_expression())
            while self.match(TokenKind.COMMA):
                args.append(self.parse_expression())
        self.expect(TokenKind.RPAREN, "Expected ')' after arguments")

        if not isinstance(callee, Variable):
            raise self._error("Invalid function call", paren)
        return FunctionCall(name=callee.name, args=tuple(args))

    def parse_primary(self):
        tok = self.peek()

        if self.match(TokenKind.BOOLEAN):
            return BooleanLiteral(tok.lexeme == "true")
        if self.match(TokenKind.NUMBER):
            return NumberLiteral(float(tok.lexeme))
        if self.match(TokenKind.STRING):
            return StringLiteral(_unquote(tok.lexeme))
        if self.match(TokenKind.IDENTIFIER):
            return Variable(tok.lexeme)
        if self.match(TokenKind.LPAREN):
            node = self.parse_expression()
            self.expect(TokenKind.RPAREN, "Expected ')' after expression")
            return node

        raise self._error(f"Unexpected token: {tok}")


# ==============
# Public API
# ==============

def parse(tokens: List[Token], max_depth: int = DEFAULT_MAX_DEPTH):
    """Parse a token list into an ordered list of statements."""
    return Parser(tokens, max_depth=max_depth).parse_script()


def parse_script(source: str, max_depth: int = DEFAULT_MAX_DEPTH):
    """Tokenize and parse TickScript source text."""
    return parse(tokenize(source), max_depth=max_depth)
