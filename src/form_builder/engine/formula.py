"""
Arithmetic formula evaluator for derived fields.

Formulas are parsed into a small AST by a recursive descent parser and then
evaluated against a mapping of variable names to numbers. Nothing is passed
to ``eval``.

Grammar (lowest to highest precedence)::

    expression := term (("+" | "-") term)*
    term       := unary (("*" | "/") unary)*
    unary      := ("+" | "-") unary | power
    power      := primary ("^" exponent)*
    exponent   := ("+" | "-") exponent | primary
    primary    := NUMBER | IDENTIFIER | "(" expression ")"

Every binary operator is left-associative, so ``2 ^ 3 ^ 2`` is ``(2 ^ 3) ^ 2``.
Parentheses and signs may nest at most ``MAX_DEPTH`` levels deep.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Mapping, Union

from form_builder.exceptions import EvaluationError

MAX_DEPTH = 100


class TokenType(Enum):
    NUMBER = "NUMBER"
    IDENTIFIER = "IDENTIFIER"
    PLUS = "+"
    MINUS = "-"
    STAR = "*"
    SLASH = "/"
    CARET = "^"
    LPAREN = "("
    RPAREN = ")"
    EOF = "EOF"


_SYMBOLS = {
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.STAR,
    "/": TokenType.SLASH,
    "^": TokenType.CARET,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
}


@dataclass(frozen=True)
class Token:
    type: TokenType
    text: str
    position: int


# AST nodes


@dataclass(frozen=True)
class Literal:
    value: float


@dataclass(frozen=True)
class Identifier:
    name: str


@dataclass(frozen=True)
class UnaryOp:
    op: str
    operand: "Node"


@dataclass(frozen=True)
class BinaryOp:
    op: str
    left: "Node"
    right: "Node"


Node = Union[Literal, Identifier, UnaryOp, BinaryOp]


class Lexer:
    """Tokenizer for arithmetic formulas."""

    def __init__(self, source: str):
        self.source = source
        self.pos = 0

    def tokenize(self) -> list[Token]:
        tokens: list[Token] = []
        while True:
            self._skip_whitespace()
            if self.pos >= len(self.source):
                break
            ch = self.source[self.pos]
            if ch.isdigit() or (ch == "." and self._peek(1).isdigit()):
                tokens.append(self._read_number())
            elif ch.isalpha() or ch == "_":
                tokens.append(self._read_identifier())
            elif ch in _SYMBOLS:
                tokens.append(Token(_SYMBOLS[ch], ch, self.pos))
                self.pos += 1
            else:
                raise EvaluationError(f"Unexpected character {ch!r}", self.pos)
        tokens.append(Token(TokenType.EOF, "", self.pos))
        return tokens

    def _peek(self, offset: int = 0) -> str:
        pos = self.pos + offset
        if pos < len(self.source):
            return self.source[pos]
        return ""

    def _skip_whitespace(self) -> None:
        while self.pos < len(self.source) and self.source[self.pos].isspace():
            self.pos += 1

    def _read_number(self) -> Token:
        start = self.pos
        while self._peek().isdigit():
            self.pos += 1
        if self._peek() == ".":
            self.pos += 1
            while self._peek().isdigit():
                self.pos += 1
        # Exponent part: 1e3, 2.5E-4
        if self._peek() in ("e", "E"):
            offset = 1
            if self._peek(offset) in ("+", "-"):
                offset += 1
            if self._peek(offset).isdigit():
                self.pos += offset
                while self._peek().isdigit():
                    self.pos += 1
        return Token(TokenType.NUMBER, self.source[start:self.pos], start)

    def _read_identifier(self) -> Token:
        start = self.pos
        while self._peek().isalnum() or self._peek() == "_":
            self.pos += 1
        return Token(TokenType.IDENTIFIER, self.source[start:self.pos], start)


class Parser:
    """Recursive descent parser producing a formula AST."""

    def __init__(self, tokens: list[Token]):
        self.tokens = tokens
        self.pos = 0
        self.depth = 0

    def parse(self) -> Node:
        if self._current.type == TokenType.EOF:
            raise EvaluationError("Formula is empty", self._current.position)
        node = self._expression()
        if self._current.type != TokenType.EOF:
            raise EvaluationError(
                f"Unexpected token {self._current.text!r}", self._current.position
            )
        return node

    @property
    def _current(self) -> Token:
        return self.tokens[self.pos]

    def _advance(self) -> Token:
        token = self.tokens[self.pos]
        if token.type != TokenType.EOF:
            self.pos += 1
        return token

    def _match(self, *types: TokenType) -> Token | None:
        if self._current.type in types:
            return self._advance()
        return None

    def _nested(self, token: Token, parse_operand: Callable[[], Node]) -> Node:
        self.depth += 1
        if self.depth > MAX_DEPTH:
            raise EvaluationError("Formula is nested too deeply", token.position)
        try:
            return parse_operand()
        finally:
            self.depth -= 1

    def _expression(self) -> Node:
        node = self._term()
        while (token := self._match(TokenType.PLUS, TokenType.MINUS)) is not None:
            node = BinaryOp(token.text, node, self._term())
        return node

    def _term(self) -> Node:
        node = self._unary()
        while (token := self._match(TokenType.STAR, TokenType.SLASH)) is not None:
            node = BinaryOp(token.text, node, self._unary())
        return node

    def _unary(self) -> Node:
        token = self._match(TokenType.PLUS, TokenType.MINUS)
        if token is not None:
            return UnaryOp(token.text, self._nested(token, self._unary))
        return self._power()

    def _power(self) -> Node:
        node = self._primary()
        while self._match(TokenType.CARET) is not None:
            node = BinaryOp("^", node, self._exponent())
        return node

    def _exponent(self) -> Node:
        token = self._match(TokenType.PLUS, TokenType.MINUS)
        if token is not None:
            return UnaryOp(token.text, self._nested(token, self._exponent))
        return self._primary()

    def _primary(self) -> Node:
        token = self._current
        if token.type == TokenType.NUMBER:
            self._advance()
            try:
                return Literal(float(token.text))
            except ValueError:
                raise EvaluationError(f"Invalid number {token.text!r}", token.position)
        if token.type == TokenType.IDENTIFIER:
            self._advance()
            return Identifier(token.text)
        if token.type == TokenType.LPAREN:
            self._advance()
            node = self._nested(token, self._expression)
            if self._match(TokenType.RPAREN) is None:
                raise EvaluationError("Expected ')'", self._current.position)
            return node
        if token.type == TokenType.EOF:
            raise EvaluationError("Unexpected end of formula", token.position)
        raise EvaluationError(f"Unexpected token {token.text!r}", token.position)


def parse(formula: str) -> Node:
    """Parse a formula into its AST."""
    return Parser(Lexer(formula).tokenize()).parse()


def referenced_identifiers(formula: str) -> list[str]:
    """Identifiers used by a formula, in order of first appearance."""
    names: list[str] = []
    for token in Lexer(formula).tokenize():
        if token.type == TokenType.IDENTIFIER and token.text not in names:
            names.append(token.text)
    return names


def _apply(op: str, left: float, right: float) -> float:
    if op == "+":
        return left + right
    if op == "-":
        return left - right
    if op == "*":
        return left * right
    if op == "/":
        if right == 0:
            raise EvaluationError("Division by zero")
        return left / right
    if op == "^":
        try:
            return math.pow(left, right)
        except (OverflowError, ValueError):
            raise EvaluationError(f"Cannot raise {left} to the power {right}")
    raise EvaluationError(f"Unknown operator {op!r}")


def evaluate_node(node: Node, variables: Mapping[str, float]) -> float:
    """Evaluate an AST against variable values."""
    if isinstance(node, Literal):
        return node.value
    if isinstance(node, Identifier):
        if node.name not in variables:
            raise EvaluationError(f"Unbound identifier {node.name!r}")
        return float(variables[node.name])
    if isinstance(node, UnaryOp):
        operand = evaluate_node(node.operand, variables)
        return -operand if node.op == "-" else operand
    if isinstance(node, BinaryOp):
        left = evaluate_node(node.left, variables)
        right = evaluate_node(node.right, variables)
        return _apply(node.op, left, right)
    raise EvaluationError(f"Unknown node {node!r}")


def evaluate(formula: str, variables: Mapping[str, float]) -> float:
    """
    Evaluate an arithmetic formula.

    Args:
        formula: Expression such as ``"2 * (a + b) - c"``.
        variables: Values for every identifier used in the formula.

    Returns:
        The finite numeric result.

    Raises:
        EvaluationError: If the formula is malformed, uses an unbound
            identifier, divides by zero or does not produce a finite number.

    Example:
        >>> evaluate("2 * (a + b) - c", {"a": 3, "b": 4, "c": 1})
        13.0
    """
    try:
        result = evaluate_node(parse(formula), variables)
    except RecursionError:
        # long operator chains build deep left-leaning trees
        raise EvaluationError("Formula is nested too deeply")
    if not math.isfinite(result):
        raise EvaluationError("Formula result is not a finite number")
    return result
