"""
letc Recursive Descent Parser
=============================

This module takes the token stream from the lexer and builds an
expression tree.

Grammar (EBNF, lowest to highest precedence)
--------------------------------------------
program    ::= expression EOF
expression ::= 'let' IDENTIFIER '=' expression ';' expression
             | term
term       ::= factor ('++' | '--')*
factor     ::= NUMBER | IDENTIFIER | '(' expression ')'

Postfix operators fold left onto the single factor before them:
"5 ++ --" parses as Decrement(Increment(Number 5)).

The whole token stream must be consumed; anything left over after a
complete expression is reported as an unexpected token.

Example Usage
-------------
>>> from letc.compiler.parser import parse_source
>>> parse_source("let x = 420; x++")
LetExpression(name='x', value=NumberLiteral(value=420), body=IncrementExpression(operand=IdentifierExpression(name='x')))
"""

from typing import Optional

from letc.compiler.lexer import Token, TokenType, tokenize
from letc.compiler.ast import (
    Expression,
    NumberLiteral,
    IncrementExpression,
    DecrementExpression,
    IdentifierExpression,
    LetExpression,
)
from letc.compiler.errors import ParseError, UnexpectedTokenError, MissingTokenError


class Parser:
    """
    Recursive descent parser for letc.

    Parsing stops at the first error; there is no recovery.

    Attributes:
        tokens: List of tokens to parse
        source_lines: Original source lines for error context
    """

    def __init__(
        self,
        tokens: list[Token],
        source_lines: Optional[list[str]] = None,
    ):
        """
        Initialize the parser.

        Args:
            tokens: Tokens from the lexer, with or without the trailing EOF
            source_lines: Original source lines for error context
        """
        self.tokens = list(tokens)
        if not self.tokens or self.tokens[-1].type != TokenType.EOF:
            self.tokens.append(self._synthetic_eof())
        self.source_lines = source_lines or []

        # Current position in token stream
        self._pos = 0

    def parse(self) -> Expression:
        """
        Parse the complete token stream into a single expression.

        Raises:
            ParseError: If the tokens do not form exactly one expression
        """
        try:
            expression = self._parse_expression()
        except RecursionError:
            token = self._peek()
            raise ParseError(
                "expression nested too deeply",
                location=token.location,
                hint="remove some parentheses or let bindings inside let values",
                source_line=self._get_source_line(token.line),
            ) from None

        if not self._at_end():
            token = self._peek()
            raise UnexpectedTokenError(
                token.describe(),
                expected="end of input",
                location=token.location,
                source_line=self._get_source_line(token.line),
            )

        return expression

    # =========================================================================
    # Token Access
    # =========================================================================

    def _synthetic_eof(self) -> Token:
        if self.tokens:
            last = self.tokens[-1]
            column = last.column + len(str(last.value or ""))
            return Token(TokenType.EOF, None, last.line, column, last.filename)
        return Token(TokenType.EOF, None)

    def _at_end(self) -> bool:
        return self._peek().type == TokenType.EOF

    def _peek(self, offset: int = 0) -> Token:
        """Look at token at current position + offset."""
        pos = self._pos + offset
        if pos >= len(self.tokens):
            return self.tokens[-1]  # EOF
        return self.tokens[pos]

    def _advance(self) -> Token:
        """Consume and return the current token."""
        token = self._peek()
        if not self._at_end():
            self._pos += 1
        return token

    def _check(self, *types: TokenType) -> bool:
        return self._peek().type in types

    def _expect(self, token_type: TokenType, expected: str) -> Token:
        """
        Expect and consume a specific token type.

        Raises:
            MissingTokenError: If the current token is of another type
        """
        if self._check(token_type):
            return self._advance()

        current = self._peek()
        raise MissingTokenError(
            expected,
            found=current.describe(),
            location=current.location,
            source_line=self._get_source_line(current.line),
        )

    def _get_source_line(self, line: int) -> Optional[str]:
        if 0 < line <= len(self.source_lines):
            return self.source_lines[line - 1]
        return None

    # =========================================================================
    # Grammar Rules
    # =========================================================================

    def _parse_expression(self) -> Expression:
        """
        Parse: ('let' IDENTIFIER '=' expression ';')* term

        A run of let clauses is read in a loop and nested afterwards, so
        long programs do not recurse once per binding.
        """
        clauses = []
        while self._check(TokenType.LET):
            clauses.append(self._parse_let_clause())

        expr = self._parse_term()

        for let_token, name, value in reversed(clauses):
            expr = LetExpression(
                name=name,
                value=value,
                body=expr,
                location=let_token.location,
            )

        return expr

    def _parse_let_clause(self) -> tuple[Token, str, Expression]:
        """Parse: let IDENTIFIER = expression ;"""
        let_token = self._advance()

        name_token = self._expect(TokenType.IDENTIFIER, "identifier after 'let'")
        self._expect(TokenType.ASSIGN, "'=' in let binding")
        value = self._parse_expression()
        self._expect(TokenType.LINE_END, "';' at the end of let binding")

        return let_token, name_token.value, value

    def _parse_term(self) -> Expression:
        """Parse a factor followed by any number of ++ / -- operators."""
        expr = self._parse_factor()

        while True:
            if self._check(TokenType.INCREMENT):
                self._advance()
                expr = IncrementExpression(operand=expr, location=expr.location)
            elif self._check(TokenType.DECREMENT):
                self._advance()
                expr = DecrementExpression(operand=expr, location=expr.location)
            else:
                break

        return expr

    def _parse_factor(self) -> Expression:
        """Parse a number, identifier or parenthesised expression."""
        token = self._peek()

        if token.type == TokenType.NUMBER:
            self._advance()
            return NumberLiteral(value=token.value, location=token.location)

        if token.type == TokenType.IDENTIFIER:
            self._advance()
            return IdentifierExpression(name=token.value, location=token.location)

        if token.type == TokenType.LPAREN:
            self._advance()
            expr = self._parse_expression()
            self._expect(TokenType.RPAREN, "')'")
            return expr

        raise UnexpectedTokenError(
            token.describe(),
            expected="a number, identifier or '('",
            location=token.location,
            source_line=self._get_source_line(token.line),
        )


# =============================================================================
# Convenience Functions
# =============================================================================

def parse(tokens: list[Token], source_lines: Optional[list[str]] = None) -> Expression:
    """
    Parse a token list into an expression tree.

    Raises:
        ParseError: If parsing fails
    """
    return Parser(tokens, source_lines).parse()


def parse_source(source: str, filename: str = "<input>") -> Expression:
    """
    Tokenize and parse source text.

    Raises:
        LexError: If tokenizing fails
        ParseError: If parsing fails
    """
    tokens = tokenize(source, filename)
    return Parser(tokens, source.splitlines()).parse()
