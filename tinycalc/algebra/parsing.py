from __future__ import annotations
import re
from dataclasses import dataclass
from typing import List, Optional
import sympy as sp
from ..core.allowlist import CONSTANT_TABLE, FUNCTION_TABLE, REGISTRY, AllowlistRegistry
from .numeric import DEFAULT_WORKING_DIGITS, ExpressionError, divide, make_number, power

class ExpressionSyntaxError(ExpressionError): ...
class UnknownIdentifierError(ExpressionError): ...

DEFAULT_MAX_DEPTH = 64

# plain decimals only; "1e3" splits into the number 1 and the identifier e3
_TOKEN_RE = re.compile(r"""
    (?P<number>[0-9]+\.?[0-9]*|\.[0-9]+)
  | (?P<ident>[A-Za-z_][A-Za-z0-9_]*)
  | (?P<op>[-+*/^(),])
  | (?P<space>\s+)
  | (?P<other>.)
""", re.VERBOSE | re.DOTALL)

@dataclass(frozen=True)
class Token:
    kind: str       # number | ident | op | other | end
    text: str
    position: int   # 0-based offset into the source

    @property
    def char(self) -> int:
        return self.position + 1

def tokenize(text: str) -> List[Token]:
    tokens = [Token(m.lastgroup, m.group(0), m.start())
              for m in _TOKEN_RE.finditer(text) if m.lastgroup != "space"]
    tokens.append(Token("end", "", len(text)))
    return tokens

def normalize_expression(text: str, registry: AllowlistRegistry = REGISTRY) -> str:
    """Rewrite every allowlisted identifier to its canonical casing.

    Unknown identifiers, numbers, operators and whitespace are kept exactly as
    typed, so `SIN(pi / 2)` becomes `sin(PI / 2)` and `Window` stays `Window`.
    """
    def _canonical(m: re.Match) -> str:
        token = m.group(0)
        if m.lastgroup != "ident":
            return token
        return registry.canonical(token) or token
    return _TOKEN_RE.sub(_canonical, text)

def find_unknown_identifier(text: str, registry: AllowlistRegistry = REGISTRY) -> Optional[str]:
    """First identifier (in order of appearance) that is on neither allowlist."""
    seen = set()
    for tok in tokenize(text):
        if tok.kind != "ident" or tok.text in seen:
            continue
        seen.add(tok.text)
        if not registry.is_allowed(tok.text):
            return tok.text
    return None

class _Parser:
    """Recursive descent over the token stream, building a sympy expression.

        expression := term (("+" | "-") term)*
        term       := unary (("*" | "/") unary)*
        unary      := ("-" | "+") unary | factor
        factor     := primary ("^" unary)?
        primary    := number | constant | function "(" args ")" | "(" expression ")"
    """

    def __init__(self, tokens: List[Token], registry: AllowlistRegistry, max_depth: int, digits: int):
        self.tokens = tokens
        self.pos = 0
        self.depth = 0
        self.registry = registry
        self.max_depth = max_depth
        self.digits = digits

    @property
    def current(self) -> Token:
        return self.tokens[self.pos]

    def _advance(self) -> Token:
        tok = self.tokens[self.pos]
        if tok.kind != "end":
            self.pos += 1
        return tok

    def _at(self, *ops: str) -> bool:
        return self.current.kind == "op" and self.current.text in ops

    def _expect(self, op: str) -> Token:
        if not self._at(op):
            tok = self.current
            if tok.kind == "end":
                raise ExpressionSyntaxError(f'Parenthesis {op} expected (char {tok.char})')
            raise ExpressionSyntaxError(f'Parenthesis {op} expected, got "{tok.text}" (char {tok.char})')
        return self._advance()

    def _enter(self, tok: Token):
        self.depth += 1
        if self.depth > self.max_depth:
            raise ExpressionSyntaxError(f"Maximum nesting depth of {self.max_depth} exceeded (char {tok.char})")

    def _leave(self):
        self.depth -= 1

    def parse(self) -> sp.Expr:
        if self.current.kind == "end":
            raise ExpressionSyntaxError("Unexpected end of expression (char 1)")
        expr = self.expression()
        tok = self.current
        if tok.kind != "end":
            raise ExpressionSyntaxError(f'Unexpected "{tok.text}" (char {tok.char})')
        return expr

    def expression(self) -> sp.Expr:
        left = self.term()
        while self._at("+", "-"):
            op = self._advance().text
            right = self.term()
            left = left + right if op == "+" else left - right
        return left

    def term(self) -> sp.Expr:
        left = self.unary()
        while self._at("*", "/"):
            op = self._advance().text
            right = self.unary()
            left = left * right if op == "*" else divide(left, right)
        return left

    def unary(self) -> sp.Expr:
        if self._at("-", "+"):
            tok = self._advance()
            self._enter(tok)
            operand = self.unary()
            self._leave()
            return -operand if tok.text == "-" else operand
        return self.factor()

    def factor(self) -> sp.Expr:
        base = self.primary()
        if self._at("^"):
            tok = self._advance()
            self._enter(tok)
            exponent = self.unary()
            self._leave()
            return power(base, exponent, self.digits)
        return base

    def primary(self) -> sp.Expr:
        tok = self.current
        if tok.kind == "number":
            self._advance()
            return make_number(tok.text)
        if tok.kind == "ident":
            self._advance()
            return self._identifier(tok)
        if self._at("("):
            self._advance()
            self._enter(tok)
            inner = self.expression()
            self._expect(")")
            self._leave()
            return inner
        if tok.kind == "end":
            raise ExpressionSyntaxError(f"Unexpected end of expression (char {tok.char})")
        if tok.kind == "other":
            raise ExpressionSyntaxError(f'Unexpected character "{tok.text}" (char {tok.char})')
        raise ExpressionSyntaxError(f"Value expected (char {tok.char})")

    def _identifier(self, tok: Token) -> sp.Expr:
        name = tok.text
        if self.registry.is_constant(name):
            if self._at("("):
                raise ExpressionSyntaxError(f"Constant {name} cannot be called (char {self.current.char})")
            return CONSTANT_TABLE[name]
        if not self.registry.is_function(name):
            raise UnknownIdentifierError(name)
        if not self._at("("):
            raise ExpressionSyntaxError(f"Function {name} must be called with parentheses (char {tok.char})")
        self._enter(self._advance())
        args = []
        if not self._at(")"):
            args.append(self.expression())
            while self._at(","):
                self._advance()
                args.append(self.expression())
        self._expect(")")
        self._leave()
        return self._call(name, args)

    def _call(self, name: str, args: List[sp.Expr]) -> sp.Expr:
        fn = FUNCTION_TABLE[name]
        expected = str(fn.min_args) if fn.max_args == fn.min_args else (
            f"{fn.min_args}+" if fn.max_args is None else f"{fn.min_args}-{fn.max_args}")
        if len(args) < fn.min_args:
            raise ExpressionSyntaxError(
                f"Too few arguments in function {name} (expected: {expected}, actual: {len(args)})")
        if fn.max_args is not None and len(args) > fn.max_args:
            raise ExpressionSyntaxError(
                f"Too many arguments in function {name} (expected: {expected}, actual: {len(args)})")
        if fn.takes_digits:
            return fn.impl(*args, digits=self.digits)
        return fn.impl(*args)

def parse_expression(text: str, registry: AllowlistRegistry = REGISTRY,
                     max_depth: int = DEFAULT_MAX_DEPTH,
                     digits: int = DEFAULT_WORKING_DIGITS) -> sp.Expr:
    """Parse a normalized, validated expression into an exact sympy expression."""
    return _Parser(tokenize(text), registry, max_depth, digits).parse()
