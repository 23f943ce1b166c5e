"""Token model shared by the parser, the output builder and consumers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator


class TokenRole(str, Enum):
    """Semantic category of a parsed token."""

    RESULT_VAR = "result_var"
    INPUT_VAR = "input_var"
    INDEX_VAR = "index_var"
    SUMMATION = "summation"
    PRODUCT = "product"
    INTEGRAL = "integral"
    LIMIT = "limit"
    FRACTION = "fraction"
    EXPONENT = "exponent"
    SUBSCRIPT = "subscript"
    SQRT = "sqrt"
    BOUNDS = "bounds"
    CONSTANT = "constant"
    OPERATOR = "operator"
    FUNCTION = "function"
    GREEK = "greek"
    GROUP = "group"

    @property
    def is_variable(self) -> bool:
        return self in VARIABLE_ROLES


VARIABLE_ROLES = frozenset(
    {TokenRole.RESULT_VAR, TokenRole.INPUT_VAR, TokenRole.INDEX_VAR}
)


@dataclass
class Bounds:
    """Raw text of the limits attached to a big operator or limit."""

    lower: str | None = None
    upper: str | None = None

    def to_dict(self) -> dict[str, str]:
        data: dict[str, str] = {}
        if self.lower is not None:
            data["lower"] = self.lower
        if self.upper is not None:
            data["upper"] = self.upper
        return data


@dataclass
class Token:
    """One parsed unit of an equation.

    ``frame`` holds the literal macro text around each child slot and
    ``slots`` the number of children that fill each slot, so that
    ``len(frame) == len(slots) + 1`` whenever the token has children.
    """

    id: str
    role: TokenRole
    value: str
    raw: str
    color: str
    children: list[Token] = field(default_factory=list)
    bounds: Bounds | None = None
    identity: str | None = None
    frame: tuple[str, ...] = field(default=(), repr=False)
    slots: tuple[int, ...] = field(default=(), repr=False)

    def walk(self) -> Iterator[Token]:
        """Yield this token and all of its descendants, depth-first."""
        yield self
        for child in self.children:
            yield from child.walk()

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready form consumed by the explanation service."""
        data: dict[str, Any] = {
            "id": self.id,
            "type": self.role.value,
            "value": self.value,
            "rawLatex": self.raw,
            "color": self.color,
        }
        if self.children:
            data["children"] = [child.to_dict() for child in self.children]
        if self.bounds is not None:
            data["bounds"] = self.bounds.to_dict()
        return data


def walk_tokens(tokens: list[Token]) -> Iterator[Token]:
    for token in tokens:
        yield from token.walk()


@dataclass(frozen=True)
class ParsedEquation:
    """Result of one top-level parse. Re-parse instead of mutating."""

    tokens: list[Token]
    color_map: dict[str, str]
    colorized: str
    original: str
    roles: dict[str, TokenRole] = field(default_factory=dict)

    def variables(self) -> list[Token]:
        """All variable tokens in document order, nested ones included."""
        return [t for t in walk_tokens(self.tokens) if t.role.is_variable]

    def role_of(self, identity: str) -> TokenRole | None:
        """Final role recorded for a variable base identity."""
        return self.roles.get(identity)

    def to_dict(self) -> dict[str, Any]:
        return {
            "tokens": [token.to_dict() for token in self.tokens],
            "colorMap": dict(self.color_map),
            "roleMap": {k: v.value for k, v in self.roles.items()},
            "colorizedLatex": self.colorized,
            "originalLatex": self.original,
        }
