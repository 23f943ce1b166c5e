"""Cursor-based scanning primitives for LaTeX math input."""

from __future__ import annotations

_WHITESPACE = frozenset(" \t\n\r\f\v")
_OPERATOR_CHARS = frozenset("+-*/()[],!|<>")


def is_letter(char: str) -> bool:
    return len(char) == 1 and char.isascii() and char.isalpha()


def is_digit(char: str) -> bool:
    return len(char) == 1 and "0" <= char <= "9"


def is_operator(char: str) -> bool:
    return len(char) == 1 and char in _OPERATOR_CHARS


class Scanner:
    """Position cursor over a LaTeX string.

    Every read either consumes at least one character or reports the end
    of input, which is what keeps the parser loop terminating on any text.
    """

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    @property
    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def peek(self) -> str:
        """Character under the cursor, or ``""`` at end of input."""
        if self.pos < len(self.text):
            return self.text[self.pos]
        return ""

    def advance(self, count: int = 1) -> None:
        self.pos = min(self.pos + count, len(self.text))

    def skip_whitespace(self) -> None:
        while self.pos < len(self.text) and self.text[self.pos] in _WHITESPACE:
            self.pos += 1

    def read_letters(self) -> str:
        start = self.pos
        while self.pos < len(self.text) and is_letter(self.text[self.pos]):
            self.pos += 1
        return self.text[start:self.pos]

    def read_number(self) -> str:
        """Maximal run of digits with at most one decimal point."""
        start = self.pos
        seen_point = False
        while self.pos < len(self.text):
            char = self.text[self.pos]
            if char == ".":
                if seen_point:
                    break
                seen_point = True
            elif not is_digit(char):
                break
            self.pos += 1
        return self.text[start:self.pos]

    def capture_balanced(self) -> str:
        """Return text up to the ``}`` matching an already-consumed ``{``.

        The closing brace is consumed. Unterminated input yields whatever
        was collected before the end.
        """
        depth = 1
        start = self.pos
        while self.pos < len(self.text):
            char = self.text[self.pos]
            if char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    content = self.text[start:self.pos]
                    self.pos += 1
                    return content
            self.pos += 1
        return self.text[start:]

    def capture_until(self, closer: str) -> str:
        """Return text up to ``closer``, consuming it if present."""
        end = self.text.find(closer, self.pos)
        if end == -1:
            content = self.text[self.pos:]
            self.pos = len(self.text)
            return content
        content = self.text[self.pos:end]
        self.pos = end + len(closer)
        return content

    def capture_argument(self) -> str:
        """Capture one macro argument: a braced group, a command, or one char."""
        self.skip_whitespace()
        char = self.peek()
        if char == "{":
            self.pos += 1
            return self.capture_balanced()
        if char == "\\":
            start = self.pos
            self.pos += 1
            if not self.read_letters() and self.pos < len(self.text):
                # escaped symbol such as \{ or \,
                self.pos += 1
            return self.text[start:self.pos]
        if char:
            self.pos += 1
        return char
