"""Advisory brace/bracket balance check.

Independent of the parser, which accepts any input; callers use this to
warn before (or instead of) parsing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

MISMATCHED = "Mismatched brackets or braces"
UNCLOSED_BRACES = "Unclosed braces"
UNCLOSED_BRACKETS = "Unclosed brackets"


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"valid": self.valid}
        if self.error is not None:
            data["error"] = self.error
        return data


def validate(latex: str) -> ValidationResult:
    """Check that ``{}`` and ``[]`` are balanced."""
    braces = 0
    brackets = 0
    for char in latex:
        if char == "{":
            braces += 1
        elif char == "}":
            braces -= 1
        elif char == "[":
            brackets += 1
        elif char == "]":
            brackets -= 1
        if braces < 0 or brackets < 0:
            return ValidationResult(False, MISMATCHED)

    if braces:
        return ValidationResult(False, UNCLOSED_BRACES)
    if brackets:
        return ValidationResult(False, UNCLOSED_BRACKETS)
    return ValidationResult(True)
