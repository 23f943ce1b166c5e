"""Variable role classification and identity-sticky color lookup.

One ``ParseContext`` is created per top-level parse and handed by reference
to every sub-parse, so a variable keeps the same role and color wherever it
appears in the equation: in fractions, exponents and operator bounds alike.
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass, field
from typing import Iterable, Iterator

from eqlens.palette import color_for
from eqlens.tokens import Bounds, Token, TokenRole, walk_tokens

logger = logging.getLogger(__name__)

INDEX_NAMES = frozenset({"i", "j", "k", "n", "m"})


def base_identity(name: str) -> str:
    """Strip subscript decoration and LaTeX markup from a variable name."""
    head = name.split("_", 1)[0]
    return head.replace("\\", "").replace("{", "").replace("}", "")


@dataclass
class ParseContext:
    """State shared by every parse frame of one equation."""

    roles: dict[str, TokenRole] = field(default_factory=dict)
    colors: dict[str, str] = field(default_factory=dict)
    _ids: Iterator[int] = field(default_factory=lambda: itertools.count(1), repr=False)

    def next_id(self) -> str:
        return f"token-{next(self._ids)}"

    def make_token(
        self,
        role: TokenRole,
        value: str,
        raw: str,
        color: str | None = None,
        *,
        children: list[Token] | None = None,
        bounds: Bounds | None = None,
        identity: str | None = None,
    ) -> Token:
        return Token(
            id=self.next_id(),
            role=role,
            value=value,
            raw=raw,
            color=color or color_for(role),
            children=children if children is not None else [],
            bounds=bounds,
            identity=identity,
        )

    def classify(self, identity: str, left_of_equals: bool) -> TokenRole:
        """Role for ``identity``; memoized on first sighting."""
        role = self.roles.get(identity)
        if role is not None:
            return role
        if left_of_equals:
            role = TokenRole.RESULT_VAR
        elif identity in INDEX_NAMES:
            role = TokenRole.INDEX_VAR
        else:
            role = TokenRole.INPUT_VAR
        self.roles[identity] = role
        return role

    def color_of(self, identity: str, role: TokenRole) -> str:
        """Memoized color for ``identity``, assigning the role default once."""
        color = self.colors.get(identity)
        if color is None:
            color = color_for(role)
            self.colors[identity] = color
        return color

    def variable(self, name: str, raw: str, left_of_equals: bool) -> Token:
        identity = base_identity(name)
        role = self.classify(identity, left_of_equals)
        return self.make_token(
            role, name, raw, self.color_of(identity, role), identity=identity,
        )

    def force_index(self, tokens: Iterable[Token]) -> None:
        """Reclassify result/input variables found in a bound as indices."""
        index_color = color_for(TokenRole.INDEX_VAR)
        for token in walk_tokens(list(tokens)):
            if token.role not in (TokenRole.RESULT_VAR, TokenRole.INPUT_VAR):
                continue
            logger.debug(
                "index override identity=%s was=%s", token.identity, token.role.value,
            )
            token.role = TokenRole.INDEX_VAR
            token.color = index_color
            if token.identity is not None:
                self.roles[token.identity] = TokenRole.INDEX_VAR
                self.colors[token.identity] = index_color
