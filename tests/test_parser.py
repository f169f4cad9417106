"""
Parser Test Suite
=================

Tests for the recursive descent parser: grammar coverage, postfix
folding, let bindings, full-consumption checking and error reporting.
"""

import pytest
from letc.compiler.lexer import Token, TokenType, tokenize
from letc.compiler.parser import Parser, parse, parse_source
from letc.compiler.ast import (
    NumberLiteral,
    IncrementExpression,
    DecrementExpression,
    IdentifierExpression,
    LetExpression,
    ASTPrinter,
)
from letc.compiler.errors import (
    ParseError,
    UnexpectedTokenError,
    MissingTokenError,
)


# =============================================================================
# Factor Tests
# =============================================================================

class TestFactors:
    """Numbers, identifiers and parentheses."""

    def test_number(self):
        assert parse_source("5") == NumberLiteral(5)

    def test_negative_number(self):
        assert parse_source("-420") == NumberLiteral(-420)

    def test_identifier(self):
        assert parse_source("x") == IdentifierExpression("x")

    def test_parentheses_are_transparent(self):
        """'(5)' and '5' produce the same tree."""
        assert parse_source("(5)") == parse_source("5")

    def test_nested_parentheses(self):
        assert parse_source("((x))") == IdentifierExpression("x")

    def test_location_recorded(self):
        expr = parse_source("  7", "prog.let")
        assert expr.location.filename == "prog.let"
        assert expr.location.column == 3


# =============================================================================
# Postfix Tests
# =============================================================================

class TestPostfix:
    """++ / -- chains."""

    def test_increment(self):
        assert parse_source("5++") == IncrementExpression(NumberLiteral(5))

    def test_decrement(self):
        assert parse_source("5--") == DecrementExpression(NumberLiteral(5))

    def test_chain_folds_left(self):
        """'5++--' is Decrement(Increment(5))."""
        assert parse_source("5++--") == DecrementExpression(
            IncrementExpression(NumberLiteral(5))
        )

    def test_chain_with_spaces(self):
        assert parse_source("5 ++ --") == parse_source("5++--")

    def test_long_chain(self):
        expected = DecrementExpression(
            IncrementExpression(IncrementExpression(NumberLiteral(5)))
        )
        assert parse_source("5++++--") == expected

    def test_postfix_on_group(self):
        assert parse_source("(x++)--") == DecrementExpression(
            IncrementExpression(IdentifierExpression("x"))
        )


# =============================================================================
# Let Tests
# =============================================================================

class TestLet:
    """let name = value; body"""

    def test_simple_let(self):
        assert parse_source("let x = 5; x") == LetExpression(
            "x", NumberLiteral(5), IdentifierExpression("x")
        )

    def test_let_body_with_postfix(self):
        assert parse_source("let x = 420; x++") == LetExpression(
            "x", NumberLiteral(420), IncrementExpression(IdentifierExpression("x"))
        )

    def test_nested_let_in_body(self):
        expr = parse_source("let x = 420; let y = x++; y")
        assert expr == LetExpression(
            "x",
            NumberLiteral(420),
            LetExpression(
                "y",
                IncrementExpression(IdentifierExpression("x")),
                IdentifierExpression("y"),
            ),
        )

    def test_let_in_value(self):
        expr = parse_source("let x = let y = 1; y; x")
        assert expr == LetExpression(
            "x",
            LetExpression("y", NumberLiteral(1), IdentifierExpression("y")),
            IdentifierExpression("x"),
        )

    def test_let_in_parentheses(self):
        expr = parse_source("(let x = 1; x)++")
        assert isinstance(expr, IncrementExpression)
        assert isinstance(expr.operand, LetExpression)

    def test_missing_identifier(self):
        with pytest.raises(MissingTokenError, match="identifier after 'let'"):
            parse_source("let = 5; 1")

    def test_keyword_is_not_identifier(self):
        with pytest.raises(MissingTokenError):
            parse_source("let let = 5; 1")

    def test_missing_assign(self):
        with pytest.raises(MissingTokenError, match="'='"):
            parse_source("let x 5; x")

    def test_missing_line_end(self):
        with pytest.raises(MissingTokenError, match="';'"):
            parse_source("let x = 5 x")

    def test_missing_body(self):
        with pytest.raises(UnexpectedTokenError, match="end of input"):
            parse_source("let x = 5;")


# =============================================================================
# Error Tests
# =============================================================================

class TestErrors:
    """Malformed token streams."""

    def test_empty_input(self):
        with pytest.raises(UnexpectedTokenError, match="end of input"):
            parse_source("")

    def test_unmatched_lparen(self):
        with pytest.raises(MissingTokenError, match="'\\)'"):
            parse_source("(5")

    def test_stray_rparen(self):
        with pytest.raises(UnexpectedTokenError):
            parse_source(")")

    def test_postfix_without_operand(self):
        with pytest.raises(UnexpectedTokenError, match="'\\+\\+'"):
            parse_source("++5")

    def test_trailing_tokens_rejected(self):
        """Everything after a complete expression must be consumed."""
        with pytest.raises(UnexpectedTokenError) as exc_info:
            parse_source("5 6")
        assert exc_info.value.expected == "end of input"
        assert exc_info.value.found == "number 6"

    def test_trailing_rparen_rejected(self):
        with pytest.raises(ParseError):
            parse_source("5)")

    def test_all_parse_errors_share_base(self):
        for source in ["", "(5", "let x 1; x", "5 5"]:
            with pytest.raises(ParseError):
                parse_source(source)

    def test_error_location_and_context(self):
        with pytest.raises(MissingTokenError) as exc_info:
            parse_source("let x = 5 x", "prog.let")
        error = exc_info.value
        assert str(error.location) == "prog.let:1:11"
        assert "    let x = 5 x" in str(error)


# =============================================================================
# Token List Input Tests
# =============================================================================

class TestTokenInput:
    """parse() over explicit token lists."""

    def test_tokens_without_eof(self):
        tokens = [Token(TokenType.NUMBER, 5), Token(TokenType.INCREMENT, "++")]
        assert parse(tokens) == IncrementExpression(NumberLiteral(5))

    def test_empty_token_list(self):
        with pytest.raises(UnexpectedTokenError, match="end of input"):
            parse([])

    def test_unclosed_paren_tokens(self):
        tokens = [Token(TokenType.LPAREN, "("), Token(TokenType.NUMBER, 5)]
        with pytest.raises(ParseError):
            parse(tokens)

    def test_parser_class(self):
        assert Parser(tokenize("x--")).parse() == DecrementExpression(
            IdentifierExpression("x")
        )


# =============================================================================
# AST Printer Tests
# =============================================================================

class TestASTPrinter:

    def test_print_let(self):
        output = ASTPrinter().print(parse_source("let x = 1; x++"))
        assert output == "\n".join([
            "Let x",
            "  Value:",
            "    Number 1",
            "  Body:",
            "    Increment",
            "      Identifier x",
        ])


# =============================================================================
# Nesting Depth Tests
# =============================================================================

class TestNestingDepth:
    """Long programs parse; pathological nesting is a ParseError."""

    def test_long_let_sequence(self):
        expr = parse_source("let a = 1; " * 2000 + "a")
        depth = 0
        while isinstance(expr, LetExpression):
            assert expr.name == "a"
            expr = expr.body
            depth += 1
        assert depth == 2000
        assert expr == IdentifierExpression("a")

    def test_let_sequence_keeps_locations(self):
        expr = parse_source("let a = 1;\nlet b = 2;\nb")
        assert expr.location.line == 1
        assert expr.body.location.line == 2

    def test_long_postfix_chain(self):
        expr = parse_source("5" + "--" * 3000)
        count = 0
        while isinstance(expr, DecrementExpression):
            expr = expr.operand
            count += 1
        assert count == 3000

    def test_deep_parentheses(self):
        with pytest.raises(ParseError, match="nested too deeply") as exc_info:
            parse_source("(" * 600 + "5" + ")" * 600)
        assert "hint:" in str(exc_info.value)

    def test_parser_usable_after_depth_error(self):
        with pytest.raises(ParseError):
            parse_source("(" * 5000 + "1" + ")" * 5000)
        assert parse_source("((1))++") == IncrementExpression(NumberLiteral(1))

    def test_print_deep_chain(self):
        output = ASTPrinter().print(parse_source("5" + "++" * 2000))
        lines = output.splitlines()
        assert len(lines) == 2001
        assert lines[0] == "Increment"
        assert lines[-1] == "  " * 2000 + "Number 5"
