"""Rebuild a LaTeX string from a token tree with color annotations.

Structural tokens keep their macro syntax (``\\frac{..}{..}``, ``^{..}``,
``\\sum_{..}^{..}``); only the content inside each slot is rebuilt from the
colorized children.
"""

from __future__ import annotations

from eqlens.palette import NEUTRAL
from eqlens.tokens import Token, TokenRole

# Scripts bind to the preceding base, so their color goes inside the braces
_COLOR_INSIDE = frozenset({TokenRole.EXPONENT, TokenRole.SUBSCRIPT})


def wrap_color(latex: str, color: str) -> str:
    """Wrap ``latex`` as ``{\\color{#rrggbb}...}``; empty text stays empty."""
    if not latex or not color or color == NEUTRAL:
        return latex
    return f"{{\\color{{{color}}}{latex}}}"


def _inner(token: Token, slot_color: str | None = None) -> str:
    if not token.children or len(token.frame) != len(token.slots) + 1:
        return token.raw

    pieces = [token.frame[0]]
    start = 0
    for count, literal in zip(token.slots, token.frame[1:]):
        content = build_colorized(token.children[start:start + count])
        if slot_color is not None:
            content = wrap_color(content, slot_color)
        pieces.append(content)
        pieces.append(literal)
        start += count
    return "".join(pieces)


def colorize_token(token: Token) -> str:
    """Colorized LaTeX for one token, children first."""
    if token.role in _COLOR_INSIDE:
        return _inner(token, token.color)
    return wrap_color(_inner(token), token.color)


def build_colorized(tokens: list[Token]) -> str:
    return "".join(colorize_token(token) for token in tokens)
