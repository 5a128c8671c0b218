"""Condition language: lexer, recursive-descent parser, and evaluator.

Grammar::

    expr        := or_expr
    or_expr     := and_expr ( "||" and_expr )*
    and_expr    := comparison ( "&&" comparison )*
    comparison  := operand ( ("=="|"!="|"<"|"<="|">"|">=") operand )?
    operand     := "(" expr ")" | reference | literal
    reference   := IDENT ("." IDENT)+
    literal     := NUMBER | STRING | "true" | "false"

Parsing and evaluation are decoupled: :func:`parse` builds an immutable
expression tree, :func:`evaluate` walks it against an environment mapping
namespace keyword -> attribute snapshot. :func:`validate` is the parse-only
pass used at rule-write time.

INVARIANT: ``&&`` and ``||`` always evaluate both operands, left to right,
so an undefined reference on either side is reported even when the other
side already decides the result.
"""

from __future__ import annotations

import functools
import operator
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, TypeAlias

from schedtagctl.domain.errors import ParseError, TypeMismatchError, UndefinedReferenceError

Scalar: TypeAlias = bool | int | float | str
Snapshot: TypeAlias = Mapping[str, Any]
Environment: TypeAlias = Mapping[str, Snapshot]

# Parenthesis nesting limit; keeps parse and evaluation recursion bounded.
MAX_NESTING = 64

# ---------------------------------------------------------------------------
# Lexer
# ---------------------------------------------------------------------------


class TokenKind(StrEnum):
    """Lexical token categories."""

    NUMBER = "number"
    STRING = "string"
    IDENT = "identifier"
    TRUE = "true"
    FALSE = "false"
    AND = "&&"
    OR = "||"
    COMPARE = "comparison"
    LPAREN = "("
    RPAREN = ")"
    END = "end of condition"


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str
    position: int


_TOKEN_RE = re.compile(
    r"""
    (?P<ws>\s+)
  | (?P<number>-?\d+(?:\.\d+)?(?:[eE][-+]?\d+)?)
  | (?P<string>"(?:[^"\\]|\\.)*"|'(?:[^'\\]|\\.)*')
  | (?P<ident>[A-Za-z_][A-Za-z0-9_]*(?:\.[A-Za-z_][A-Za-z0-9_]*)*)
  | (?P<op>&&|\|\||==|!=|<=|>=|<|>)
  | (?P<lparen>\()
  | (?P<rparen>\))
    """,
    re.VERBOSE | re.DOTALL,
)

_ESCAPES = {"n": "\n", "t": "\t"}
_KEYWORDS = {"true": TokenKind.TRUE, "false": TokenKind.FALSE}


def tokenize(condition: str) -> list[Token]:
    """Split *condition* into tokens, ending with a single END token.

    Raises:
        ParseError: On a character that starts no valid token.
    """
    tokens: list[Token] = []
    pos = 0
    while pos < len(condition):
        match = _TOKEN_RE.match(condition, pos)
        if match is None:
            char = condition[pos]
            if char in "\"'":
                raise ParseError("unterminated string literal", pos)
            raise ParseError(f"unexpected character {char!r}", pos)
        group = match.lastgroup
        text = match.group()
        if group == "number":
            tokens.append(Token(TokenKind.NUMBER, text, pos))
        elif group == "string":
            tokens.append(Token(TokenKind.STRING, text, pos))
        elif group == "ident":
            tokens.append(Token(_KEYWORDS.get(text, TokenKind.IDENT), text, pos))
        elif group == "op":
            kind = {"&&": TokenKind.AND, "||": TokenKind.OR}.get(text, TokenKind.COMPARE)
            tokens.append(Token(kind, text, pos))
        elif group == "lparen":
            tokens.append(Token(TokenKind.LPAREN, text, pos))
        elif group == "rparen":
            tokens.append(Token(TokenKind.RPAREN, text, pos))
        pos = match.end()
    tokens.append(Token(TokenKind.END, "", len(condition)))
    return tokens


def _unquote(text: str) -> str:
    body = text[1:-1]
    return re.sub(r"\\(.)", lambda m: _ESCAPES.get(m.group(1), m.group(1)), body, flags=re.DOTALL)


def _number(text: str) -> int | float:
    if any(c in text for c in ".eE"):
        return float(text)
    return int(text)


# ---------------------------------------------------------------------------
# Expression tree
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Literal:
    """A constant number, string, or boolean."""

    value: Scalar


@dataclass(frozen=True)
class Reference:
    """A ``namespace.field[.field...]`` lookup into the environment."""

    namespace: str
    path: tuple[str, ...]

    @property
    def text(self) -> str:
        return ".".join((self.namespace, *self.path))


@dataclass(frozen=True)
class BinaryOp:
    """A logical (``&&``, ``||``) or comparison operator node."""

    op: str
    left: Expr
    right: Expr


Expr: TypeAlias = Literal | Reference | BinaryOp


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


class _Parser:
    """Recursive-descent parser over a token list."""

    def __init__(self, tokens: list[Token]) -> None:
        self._tokens = tokens
        self._index = 0
        self._depth = 0

    @property
    def _current(self) -> Token:
        return self._tokens[self._index]

    def _advance(self) -> Token:
        token = self._current
        if token.kind is not TokenKind.END:
            self._index += 1
        return token

    def parse(self) -> Expr:
        if self._current.kind is TokenKind.END:
            raise ParseError("empty condition", 0)
        expr = self._or_expr()
        if self._current.kind is not TokenKind.END:
            raise self._unexpected()
        return expr

    def _or_expr(self) -> Expr:
        left = self._and_expr()
        while self._current.kind is TokenKind.OR:
            self._advance()
            left = BinaryOp("||", left, self._and_expr())
        return left

    def _and_expr(self) -> Expr:
        left = self._comparison()
        while self._current.kind is TokenKind.AND:
            self._advance()
            left = BinaryOp("&&", left, self._comparison())
        return left

    def _comparison(self) -> Expr:
        left = self._operand()
        if self._current.kind is TokenKind.COMPARE:
            op = self._advance().text
            return BinaryOp(op, left, self._operand())
        return left

    def _operand(self) -> Expr:
        token = self._current
        if token.kind is TokenKind.LPAREN:
            if self._depth >= MAX_NESTING:
                raise ParseError("condition nested too deeply", token.position)
            self._advance()
            self._depth += 1
            expr = self._or_expr()
            if self._current.kind is not TokenKind.RPAREN:
                raise self._unexpected(expected="')'")
            self._advance()
            self._depth -= 1
            return expr
        if token.kind is TokenKind.IDENT:
            namespace, _, rest = token.text.partition(".")
            if not rest:
                raise ParseError(
                    f"bare identifier {token.text!r}; references take the form namespace.field",
                    token.position,
                )
            self._advance()
            return Reference(namespace, tuple(rest.split(".")))
        if token.kind is TokenKind.NUMBER:
            self._advance()
            return Literal(_number(token.text))
        if token.kind is TokenKind.STRING:
            self._advance()
            return Literal(_unquote(token.text))
        if token.kind in (TokenKind.TRUE, TokenKind.FALSE):
            self._advance()
            return Literal(token.kind is TokenKind.TRUE)
        raise self._unexpected(expected="an operand")

    def _unexpected(self, *, expected: str | None = None) -> ParseError:
        token = self._current
        found = "end of condition" if token.kind is TokenKind.END else repr(token.text)
        message = f"unexpected {found}"
        if expected:
            message += f", expected {expected}"
        return ParseError(message, token.position)


@functools.lru_cache(maxsize=512)
def parse(condition: str) -> Expr:
    """Parse *condition* into an expression tree.

    Trees are immutable, so parses are cached per condition string.

    Raises:
        ParseError: If *condition* does not match the grammar.
    """
    return _Parser(tokenize(condition)).parse()


def validate(condition: str) -> None:
    """Parse-only check. Raises :class:`ParseError` on invalid syntax."""
    parse(condition)


def is_valid(condition: str) -> bool:
    """Whether *condition* parses under the grammar."""
    try:
        parse(condition)
    except ParseError:
        return False
    return True


def references(expr: Expr) -> list[Reference]:
    """All references in *expr*, left to right."""
    if isinstance(expr, Reference):
        return [expr]
    if isinstance(expr, BinaryOp):
        return references(expr.left) + references(expr.right)
    return []


# ---------------------------------------------------------------------------
# Evaluator
# ---------------------------------------------------------------------------

_COMPARATORS: dict[str, Callable[[Any, Any], bool]] = {
    "==": operator.eq,
    "!=": operator.ne,
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
}


def _kind(value: Any) -> str:
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    msg = f"unsupported value {value!r} of type {type(value).__name__}"
    raise TypeMismatchError(msg)


def _truthy(value: Scalar) -> bool:
    _kind(value)
    return bool(value)


def resolve_reference(ref: Reference, environment: Environment) -> Scalar:
    """Look *ref* up in *environment*.

    The remaining path is first tried as a single flat snapshot key, then
    walked one segment at a time through nested mappings.

    Raises:
        UndefinedReferenceError: Namespace or field absent, or the value is null.
    """
    if ref.namespace not in environment:
        raise UndefinedReferenceError(ref.text, f"namespace {ref.namespace!r} not in environment")
    snapshot = environment[ref.namespace]
    flat_key = ".".join(ref.path)
    if flat_key in snapshot:
        value = snapshot[flat_key]
    else:
        value = snapshot
        for segment in ref.path:
            if not isinstance(value, Mapping) or segment not in value:
                raise UndefinedReferenceError(
                    ref.text, f"field {flat_key!r} not in {ref.namespace!r} snapshot"
                )
            value = value[segment]
    if value is None:
        raise UndefinedReferenceError(ref.text, "value is null")
    if isinstance(value, Mapping):
        msg = f"{ref.text} is a mapping, not a scalar"
        raise TypeMismatchError(msg)
    return value


def _compare(op: str, left: Scalar, right: Scalar) -> bool:
    left_kind = _kind(left)
    right_kind = _kind(right)
    if left_kind != right_kind:
        msg = f"cannot compare {left_kind} {left!r} with {right_kind} {right!r} using {op!r}"
        raise TypeMismatchError(msg)
    if left_kind == "bool" and op not in ("==", "!="):
        msg = f"booleans support only '==' and '!=', not {op!r}"
        raise TypeMismatchError(msg)
    return _COMPARATORS[op](left, right)


def _evaluate(expr: Expr, environment: Environment) -> Scalar:
    if isinstance(expr, Literal):
        return expr.value
    if isinstance(expr, Reference):
        return resolve_reference(expr, environment)
    left = _evaluate(expr.left, environment)
    right = _evaluate(expr.right, environment)
    if expr.op in ("&&", "||"):
        left_true, right_true = _truthy(left), _truthy(right)
        if expr.op == "&&":
            return left_true and right_true
        return left_true or right_true
    return _compare(expr.op, left, right)


def evaluate(expr: Expr, environment: Environment) -> bool:
    """Evaluate a parsed expression to a boolean.

    A bare operand evaluates to its truthiness: booleans as-is, numbers
    when non-zero, strings when non-empty.

    Raises:
        UndefinedReferenceError: A referenced namespace or field is missing.
        TypeMismatchError: A comparison mixes incompatible kinds.
    """
    return _truthy(_evaluate(expr, environment))


def evaluate_condition(condition: str, environment: Environment) -> bool:
    """Parse and evaluate *condition* in one step."""
    return evaluate(parse(condition), environment)
