"""Payload handed to the natural-language explanation service.

The service receives the original LaTeX plus the token list, and names each
component by its color. ``color_components`` picks one representative
token per color so every color the reader sees gets explained once.
"""

from __future__ import annotations

from typing import Any

from eqlens.palette import label_for
from eqlens.tokens import ParsedEquation, Token, TokenRole, walk_tokens

_SKIPPED_ROLES = frozenset({TokenRole.OPERATOR, TokenRole.GROUP})


def color_components(tokens: list[Token], nested: bool = False) -> list[dict[str, str]]:
    """One entry per distinct color, in first-appearance order.

    Operators and groups carry the neutral color and are skipped. With
    ``nested`` the walk also descends into children (fraction arguments,
    bounds, exponents).
    """
    seen: dict[str, dict[str, str]] = {}
    candidates = walk_tokens(tokens) if nested else iter(tokens)
    for token in candidates:
        if token.role in _SKIPPED_ROLES or token.color in seen:
            continue
        seen[token.color] = {
            "value": token.value,
            "type": token.role.value,
            "label": label_for(token.role),
            "color": token.color,
        }
    return list(seen.values())


def describe_components(components: list[dict[str, str]]) -> str:
    """Bullet list in the ``- "value" (type): #hex`` shape the service expects."""
    return "\n".join(
        f'- "{c["value"]}" ({c["type"]}): {c["color"]}' for c in components
    )


def explanation_payload(
    parsed: ParsedEquation, detail_level: str = "brief",
) -> dict[str, Any]:
    """Request body for the explanation service."""
    if detail_level not in ("brief", "detailed"):
        raise ValueError(f"detail_level must be 'brief' or 'detailed', got {detail_level!r}")
    return {
        "latex": parsed.original,
        "tokens": [token.to_dict() for token in parsed.tokens],
        "detailLevel": detail_level,
    }
