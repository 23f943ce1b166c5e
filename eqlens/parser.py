"""Recursive-descent parser turning LaTeX math into colored tokens.

The parser is total: every dispatch branch has a fallback and the cursor
advances on every step, so any input string yields some token tree.

Usage:
    from eqlens.parser import parse

    parsed = parse(r"y = \\frac{a}{b} + x^2")
    parsed.colorized   # LaTeX with {\\color{#rrggbb}...} annotations
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable

from eqlens.classifier import ParseContext
from eqlens.colorize import build_colorized
from eqlens.scanner import Scanner, is_digit, is_letter, is_operator
from eqlens.tokens import Bounds, ParsedEquation, Token, TokenRole

logger = logging.getLogger(__name__)

# Nested sub-parses beyond this depth are kept as literal text
MAX_DEPTH = 150

GREEK_LETTERS = frozenset({
    "alpha", "beta", "gamma", "delta", "epsilon", "zeta", "eta", "theta",
    "iota", "kappa", "lambda", "mu", "nu", "xi", "omicron", "pi", "rho",
    "sigma", "tau", "upsilon", "phi", "chi", "psi", "omega",
    "Alpha", "Beta", "Gamma", "Delta", "Epsilon", "Zeta", "Eta", "Theta",
    "Iota", "Kappa", "Lambda", "Mu", "Nu", "Xi", "Omicron", "Pi", "Rho",
    "Sigma", "Tau", "Upsilon", "Phi", "Chi", "Psi", "Omega",
})

FUNCTIONS = frozenset({
    "sin", "cos", "tan", "cot", "sec", "csc",
    "arcsin", "arccos", "arctan", "sinh", "cosh", "tanh",
    "exp", "det", "dim", "ker", "deg",
    "max", "min", "sup", "inf", "arg",
})

# name -> (role, value); raw text is always the command itself
SYMBOLS: dict[str, tuple[TokenRole, str]] = {
    "cdot": (TokenRole.OPERATOR, "cdot"),
    "times": (TokenRole.OPERATOR, "times"),
    "div": (TokenRole.OPERATOR, "div"),
    "pm": (TokenRole.OPERATOR, "pm"),
    "mp": (TokenRole.OPERATOR, "mp"),
    "to": (TokenRole.OPERATOR, "to"),
    "rightarrow": (TokenRole.OPERATOR, "rightarrow"),
    "leftarrow": (TokenRole.OPERATOR, "leftarrow"),
    "infty": (TokenRole.CONSTANT, "∞"),
    "partial": (TokenRole.OPERATOR, "∂"),
    "hbar": (TokenRole.CONSTANT, "ℏ"),
}

_BIG_OPERATORS: dict[str, TokenRole] = {
    "sum": TokenRole.SUMMATION,
    "prod": TokenRole.PRODUCT,
    "int": TokenRole.INTEGRAL,
}


class Command(str, Enum):
    """Closed set of recognized command shapes."""

    FRAC = "frac"
    BINOM = "binom"
    SQRT = "sqrt"
    SUM = "sum"
    PROD = "prod"
    INT = "int"
    LIM = "lim"
    LOG = "log"
    LN = "ln"
    HAT = "hat"
    GREEK = "<greek>"
    FUNCTION = "<function>"
    SYMBOL = "<symbol>"
    UNKNOWN = "<unknown>"

    @classmethod
    def lookup(cls, name: str) -> Command:
        command = _NAMED_COMMANDS.get(name)
        if command is not None:
            return command
        if name in GREEK_LETTERS:
            return cls.GREEK
        if name in FUNCTIONS:
            return cls.FUNCTION
        if name in SYMBOLS:
            return cls.SYMBOL
        return cls.UNKNOWN


_NAMED_COMMANDS: dict[str, Command] = {
    c.value: c for c in Command if not c.value.startswith("<")
}


def _layout(token: Token, frame: tuple[str, ...], parts: list[list[Token]]) -> Token:
    """Attach child slots and the literal macro text around them."""
    token.children = [child for part in parts for child in part]
    token.frame = frame
    token.slots = tuple(len(part) for part in parts)
    return token


class _Frame:
    """One parse frame: a scanner plus the inherited left-of-equals flag."""

    def __init__(
        self, text: str, context: ParseContext,
        left_of_equals: bool = True, depth: int = 0,
    ) -> None:
        self.scanner = Scanner(text)
        self.context = context
        self.left_of_equals = left_of_equals
        self.depth = depth

    # -- entry -----------------------------------------------------------

    def parse_expression(self) -> list[Token]:
        scanner = self.scanner
        tokens: list[Token] = []

        while True:
            scanner.skip_whitespace()
            if scanner.at_end:
                break
            char = scanner.peek()

            if char == "=":
                tokens.append(self.context.make_token(TokenRole.OPERATOR, "=", "="))
                scanner.advance()
                self.left_of_equals = False
            elif char == "\\":
                token = self._command()
                if token is not None:
                    tokens.append(token)
            elif char == "{":
                scanner.advance()
                token = self._group()
                if token is not None:
                    tokens.append(token)
            elif char == "}":
                break
            elif char == "^":
                scanner.advance()
                tokens.append(self._script(TokenRole.EXPONENT, "exponent", "^"))
            elif char == "_":
                scanner.advance()
                tokens.append(self._script(TokenRole.SUBSCRIPT, "subscript", "_"))
            elif is_operator(char):
                tokens.append(self.context.make_token(TokenRole.OPERATOR, char, char))
                scanner.advance()
            elif is_digit(char):
                number = scanner.read_number()
                tokens.append(self.context.make_token(TokenRole.CONSTANT, number, number))
            elif is_letter(char):
                tokens.append(self._variable())
            else:
                scanner.advance()

        return tokens

    def _subparse(self, text: str) -> list[Token]:
        """Parse ``text`` with the shared context and the current side flag."""
        if not text.strip():
            return []
        if self.depth >= MAX_DEPTH:
            logger.debug("nesting limit reached, keeping %r literal", text[:40])
            return [self.context.make_token(TokenRole.OPERATOR, text, text)]
        frame = _Frame(text, self.context, self.left_of_equals, self.depth + 1)
        return frame.parse_expression()

    # -- simple constructs ---------------------------------------------------

    def _group(self) -> Token | None:
        content = self.scanner.capture_balanced()
        tokens = self._subparse(content)
        if not tokens:
            return None
        if len(tokens) == 1:
            return tokens[0]
        token = self.context.make_token(TokenRole.GROUP, "group", f"{{{content}}}")
        return _layout(token, ("{", "}"), [tokens])

    def _script(self, role: TokenRole, value: str, marker: str) -> Token:
        content = self.scanner.capture_argument()
        token = self.context.make_token(role, value, f"{marker}{{{content}}}")
        return _layout(token, (f"{marker}{{", "}"), [self._subparse(content)])

    def _variable(self) -> Token:
        scanner = self.scanner
        name = scanner.peek()
        scanner.advance()
        raw = name

        scanner.skip_whitespace()
        if scanner.peek() == "_":
            scanner.advance()
            sub = scanner.capture_argument()
            raw += f"_{{{sub}}}"
            name += "_" + sub

        scanner.skip_whitespace()
        if scanner.peek() == "^":
            scanner.advance()
            sup = scanner.capture_argument()
            raw += f"^{{{sup}}}"

        return self.context.variable(name, raw, self.left_of_equals)

    # -- commands ------------------------------------------------------------

    def _command(self) -> Token | None:
        scanner = self.scanner
        scanner.advance()
        name = scanner.read_letters()

        if not name:
            char = scanner.peek()
            if not char:
                return None
            scanner.advance()
            return self.context.make_token(TokenRole.OPERATOR, "\\" + char, "\\" + char)

        command = Command.lookup(name)
        handler = self._HANDLERS[command]
        return handler(self, name)

    def _fraction(self, name: str) -> Token:
        scanner = self.scanner
        first = scanner.capture_argument()
        second = scanner.capture_argument()
        raw = f"\\{name}{{{first}}}{{{second}}}"
        if name == Command.BINOM.value:
            token = self.context.make_token(TokenRole.FUNCTION, "binom", raw)
        else:
            token = self.context.make_token(TokenRole.FRACTION, "fraction", raw)
        parts = [self._subparse(first), self._subparse(second)]
        return _layout(token, (f"\\{name}{{", "}{", "}"), parts)

    def _sqrt(self, name: str) -> Token:
        scanner = self.scanner
        scanner.skip_whitespace()
        opener = "\\sqrt{"
        if scanner.peek() == "[":
            scanner.advance()
            degree = scanner.capture_until("]")
            opener = f"\\sqrt[{degree}]{{"
        content = scanner.capture_argument()
        token = self.context.make_token(TokenRole.SQRT, "sqrt", f"{opener}{content}}}")
        return _layout(token, (opener, "}"), [self._subparse(content)])

    def _optional_argument(self, marker: str) -> str | None:
        self.scanner.skip_whitespace()
        if self.scanner.peek() != marker:
            return None
        self.scanner.advance()
        return self.scanner.capture_argument()

    def _big_operator(self, name: str) -> Token:
        role = _BIG_OPERATORS[name]
        lower = upper = None
        # bounds may come in either order: \int_{a}^{b} or \int^{b}_{a}
        for _ in range(2):
            self.scanner.skip_whitespace()
            marker = self.scanner.peek()
            if marker == "_" and lower is None:
                lower = self._optional_argument("_")
            elif marker == "^" and upper is None:
                upper = self._optional_argument("^")
            else:
                break
        bounds = Bounds(lower=lower, upper=upper)
        raw = "\\" + name
        frame = ["\\" + name]
        parts: list[list[Token]] = []
        if bounds.lower is not None:
            raw += f"_{{{bounds.lower}}}"
            lower_tokens = self._subparse(bounds.lower)
            self.context.force_index(lower_tokens)
            frame[-1] += "_{"
            frame.append("}")
            parts.append(lower_tokens)
        if bounds.upper is not None:
            raw += f"^{{{bounds.upper}}}"
            frame[-1] += "^{"
            frame.append("}")
            parts.append(self._subparse(bounds.upper))

        token = self.context.make_token(role, role.value, raw, bounds=bounds)
        return _layout(token, tuple(frame), parts)

    def _limit(self, name: str) -> Token:
        lower = self._optional_argument("_")
        bounds = Bounds(lower=lower)
        if lower is None:
            return self.context.make_token(TokenRole.LIMIT, "lim", "\\lim", bounds=bounds)
        token = self.context.make_token(
            TokenRole.LIMIT, "lim", f"\\lim_{{{lower}}}", bounds=bounds,
        )
        return _layout(token, ("\\lim_{", "}"), [self._subparse(lower)])

    def _logarithm(self, name: str) -> Token:
        raw = "\\" + name
        base = self._optional_argument("_")
        if base is not None:
            raw += f"_{{{base}}}"
        return self.context.make_token(TokenRole.FUNCTION, name, raw)

    def _hat(self, name: str) -> Token:
        scanner = self.scanner
        scanner.skip_whitespace()
        if scanner.peek() != "{":
            return self._unknown(name)
        scanner.advance()
        inner = scanner.capture_balanced()
        raw = f"\\hat{{{inner}}}"
        return self.context.make_token(TokenRole.OPERATOR, raw, raw)

    def _greek(self, name: str) -> Token:
        return self.context.variable(name, "\\" + name, self.left_of_equals)

    def _function(self, name: str) -> Token:
        return self.context.make_token(TokenRole.FUNCTION, name, "\\" + name)

    def _symbol(self, name: str) -> Token:
        role, value = SYMBOLS[name]
        return self.context.make_token(role, value, "\\" + name)

    def _unknown(self, name: str) -> Token:
        logger.debug("unknown command \\%s kept as operator", name)
        return self.context.make_token(TokenRole.OPERATOR, name, "\\" + name)

    _HANDLERS: dict[Command, Callable[[_Frame, str], Token]] = {
        Command.FRAC: _fraction,
        Command.BINOM: _fraction,
        Command.SQRT: _sqrt,
        Command.SUM: _big_operator,
        Command.PROD: _big_operator,
        Command.INT: _big_operator,
        Command.LIM: _limit,
        Command.LOG: _logarithm,
        Command.LN: _logarithm,
        Command.HAT: _hat,
        Command.GREEK: _greek,
        Command.FUNCTION: _function,
        Command.SYMBOL: _symbol,
        Command.UNKNOWN: _unknown,
    }


def parse(latex: str) -> ParsedEquation:
    """Parse a LaTeX math string into a colored token tree. Never raises."""
    context = ParseContext()
    tokens = _Frame(latex, context).parse_expression()
    colorized = build_colorized(tokens)
    logger.debug(
        "parse chars=%d tokens=%d variables=%d",
        len(latex), len(tokens), len(context.roles),
    )
    return ParsedEquation(
        tokens=tokens,
        color_map=dict(context.colors),
        colorized=colorized,
        original=latex,
        roles=dict(context.roles),
    )
