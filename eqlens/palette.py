"""Role palette, display labels and small color helpers."""

from __future__ import annotations

import re

from eqlens.tokens import TokenRole

TEAL = "#14b8a6"
ORANGE = "#f97316"
RED = "#ef4444"
PURPLE = "#a855f7"
BLUE = "#3b82f6"
CYAN = "#06b6d4"
GRAY = "#6b7280"
GREEN = "#22c55e"
PINK = "#ec4899"

# Tokens in this color are never wrapped in a color annotation
NEUTRAL = GRAY

ROLE_COLORS: dict[TokenRole, str] = {
    TokenRole.RESULT_VAR: TEAL,
    TokenRole.INPUT_VAR: ORANGE,
    TokenRole.INDEX_VAR: RED,
    TokenRole.SUMMATION: PURPLE,
    TokenRole.PRODUCT: PURPLE,
    TokenRole.INTEGRAL: PURPLE,
    TokenRole.LIMIT: PURPLE,
    TokenRole.FRACTION: BLUE,
    TokenRole.EXPONENT: CYAN,
    TokenRole.SUBSCRIPT: GRAY,
    TokenRole.SQRT: BLUE,
    TokenRole.BOUNDS: GREEN,
    TokenRole.CONSTANT: GREEN,
    TokenRole.OPERATOR: GRAY,
    TokenRole.FUNCTION: PINK,
    TokenRole.GREEK: ORANGE,
    TokenRole.GROUP: GRAY,
}

ROLE_LABELS: dict[TokenRole, str] = {
    TokenRole.RESULT_VAR: "Result",
    TokenRole.INPUT_VAR: "Input",
    TokenRole.INDEX_VAR: "Index",
    TokenRole.SUMMATION: "Sum",
    TokenRole.PRODUCT: "Product",
    TokenRole.INTEGRAL: "Integral",
    TokenRole.LIMIT: "Limit",
    TokenRole.FRACTION: "Fraction",
    TokenRole.EXPONENT: "Exponent",
    TokenRole.SUBSCRIPT: "Subscript",
    TokenRole.SQRT: "Square Root",
    TokenRole.BOUNDS: "Bounds",
    TokenRole.CONSTANT: "Constant",
    TokenRole.OPERATOR: "Operator",
    TokenRole.FUNCTION: "Function",
    TokenRole.GREEK: "Greek Letter",
    TokenRole.GROUP: "Group",
}

# Headline roles shown in the color legend, in display order
LEGEND: list[tuple[TokenRole, str]] = [
    (TokenRole.RESULT_VAR, "The output or what we're solving for"),
    (TokenRole.INPUT_VAR, "Input values or known quantities"),
    (TokenRole.INDEX_VAR, "Loop counters or iteration variables"),
    (TokenRole.SUMMATION, "Sum over a range of values"),
    (TokenRole.FRACTION, "Division or ratios"),
    (TokenRole.EXPONENT, "Powers and exponential expressions"),
    (TokenRole.BOUNDS, "Limits and boundary values"),
    (TokenRole.FUNCTION, "Mathematical functions (sin, log, etc.)"),
]

_HEX_RE = re.compile(r"^#?([0-9a-fA-F]{2})([0-9a-fA-F]{2})([0-9a-fA-F]{2})$")


def color_for(role: TokenRole) -> str:
    """Default palette color for a role."""
    return ROLE_COLORS.get(role, NEUTRAL)


def label_for(role: TokenRole) -> str:
    return ROLE_LABELS.get(role, role.value)


def hex_to_rgb(hex_color: str) -> tuple[int, int, int] | None:
    match = _HEX_RE.match(hex_color)
    if not match:
        return None
    return tuple(int(part, 16) for part in match.groups())  # type: ignore[return-value]


def contrast_color(hex_color: str) -> str:
    """Black or white, whichever reads better on ``hex_color``."""
    rgb = hex_to_rgb(hex_color)
    if rgb is None:
        return "#000000"
    r, g, b = rgb
    luminance = (0.299 * r + 0.587 * g + 0.114 * b) / 255
    return "#000000" if luminance > 0.5 else "#ffffff"
