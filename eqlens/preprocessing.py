"""LaTeX normalization run before parsing.

Brings LaTeX pasted from papers into the command set the parser knows,
via a 4-phase pipeline: strip environments, remove typographical
commands, normalize synonyms, clean whitespace. Operators such as
``\\cdot`` are kept since they are colorable tokens.
"""

from __future__ import annotations

import re

# A command name must not continue into more letters (\right vs \rightarrow)
_END = r"(?![A-Za-z])"

# Phase 1: Environment wrappers to strip
_ENV_PATTERNS = [
    r"\\begin\{equation\*?\}",    r"\\end\{equation\*?\}",
    r"\\begin\{align\*?\}",       r"\\end\{align\*?\}",
    r"\\begin\{gather\*?\}",      r"\\end\{gather\*?\}",
    r"\\begin\{multline\*?\}",    r"\\end\{multline\*?\}",
    r"\\\[",                       r"\\\]",
    r"\\\(",                       r"\\\)",
    r"\$\$",                       r"\$",
]

# Phase 2: Typographical commands to strip
_STRIP_COMMANDS = [
    r"\\left" + _END,  r"\\right" + _END,
    r"\\displaystyle" + _END,  r"\\textstyle" + _END,  r"\\scriptstyle" + _END,
    r"\\[Bb]igg?[lr]?" + _END,
    r"\\,",  r"\\;",  r"\\:",  r"\\!",  r"\\q?quad" + _END,
    r"&",  r"\\\\",  r"\\nonumber" + _END,
    r"\\label\{[^}]*\}",  r"\\tag\{[^}]*\}",
]

# Font commands: keep the content, drop the wrapper
_FONT_COMMANDS = [
    r"\\mathrm\{([^}]*)\}",
    r"\\mathbf\{([^}]*)\}",
    r"\\mathit\{([^}]*)\}",
    r"\\text\{([^}]*)\}",
    r"\\textit\{([^}]*)\}",
    r"\\boldsymbol\{([^}]*)\}",
]

_OPERATORNAME = re.compile(r"\\operatorname\{([A-Za-z]+)\}")

# Phase 3: Synonym mapping onto recognized commands
_SYNONYMS = {
    "dfrac": "frac",
    "tfrac": "frac",
    "dbinom": "binom",
    "tbinom": "binom",
    "gets": "leftarrow",
    "ge": "geq",
    "le": "leq",
    "ne": "neq",
    "varepsilon": "epsilon",
    "vartheta": "theta",
    "varphi": "phi",
    "varrho": "rho",
    "varsigma": "sigma",
    "varpi": "pi",
}
_SYNONYM_RE = re.compile(r"\\(" + "|".join(_SYNONYMS) + r")" + _END)


def strip_environments(latex: str) -> str:
    """Phase 1: Remove math environment wrappers and delimiters."""
    result = latex
    for pattern in _ENV_PATTERNS:
        result = re.sub(pattern, "", result)
    return result


def remove_typographical(latex: str) -> str:
    """Phase 2: Strip sizing/spacing commands and unwrap font commands."""
    result = latex
    for pattern in _STRIP_COMMANDS:
        result = re.sub(pattern, " ", result)
    for pattern in _FONT_COMMANDS:
        result = re.sub(pattern, r"\1", result)
    return _OPERATORNAME.sub(r"\\\1", result)


def normalize_synonyms(latex: str) -> str:
    """Phase 3: Map alternative LaTeX commands to canonical forms."""
    return _SYNONYM_RE.sub(lambda m: "\\" + _SYNONYMS[m.group(1)], latex)


def clean_whitespace(latex: str) -> str:
    """Phase 4: Collapse runs of whitespace."""
    return re.sub(r"\s+", " ", latex).strip()


def preprocess_latex(latex: str) -> str:
    """Full 4-phase normalization pipeline."""
    result = latex
    result = strip_environments(result)
    result = remove_typographical(result)
    result = normalize_synonyms(result)
    result = clean_whitespace(result)
    return result
