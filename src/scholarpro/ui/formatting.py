"""Text formatting utilities for the TUI.

Hides the details of markdown rendering and LaTeX cleanup. Solutions
come back as Markdown with LaTeX math, which terminals cannot typeset.
"""

import re

from rich.markdown import Markdown

# Delimiters stripped, contents kept
_MATH_DELIMITERS = [
    (r"\\\(\s*", ""),
    (r"\s*\\\)", ""),
    (r"\\\[\s*", ""),
    (r"\s*\\\]", ""),
    (r"\$\$\s*", ""),
    # Inline math: no whitespace just inside either $, no digit after the closing one
    (r"(?<!\\)\$(?=\S)([^$\n]*?\S)(?<!\\)\$(?!\d)", r"\1"),
]

# Structural commands, applied before symbol replacement
_COMMANDS = [
    (r"\\frac\{([^}]*)\}\{([^}]*)\}", r"(\1)/(\2)"),
    (r"\\sqrt\{([^}]*)\}", r"√(\1)"),
    (r"\\(?:text|textbf|textit|mathrm|mathbf|operatorname)\{([^}]*)\}", r"\1"),
]

_SYMBOLS = {
    "\\cdots": "…",
    "\\ldots": "…",
    "\\infty": "∞",
    "\\approx": "≈",
    "\\times": "×",
    "\\cdot": "·",
    "\\leq": "≤",
    "\\geq": "≥",
    "\\neq": "≠",
    "\\pm": "±",
    "\\sum": "Σ",
    "\\prod": "Π",
    "\\int": "∫",
    "\\partial": "∂",
    "\\Delta": "Δ",
    "\\alpha": "α",
    "\\beta": "β",
    "\\gamma": "γ",
    "\\delta": "δ",
    "\\theta": "θ",
    "\\lambda": "λ",
    "\\mu": "μ",
    "\\sigma": "σ",
    "\\omega": "ω",
    "\\pi": "π",
    "\\rightarrow": "→",
    "\\to": "→",
    "\\qquad": "  ",
    "\\quad": " ",
    "\\,": " ",
    "\\left": "",
    "\\right": "",
}


def clean_latex(text: str) -> str:
    """Convert LaTeX notation to readable Unicode text.

    Math delimiters are removed, common commands become symbols and
    braces around super/subscripts become parentheses.
    """
    for pattern, replacement in _MATH_DELIMITERS:
        text = re.sub(pattern, replacement, text)
    for pattern, replacement in _COMMANDS:
        text = re.sub(pattern, replacement, text)

    # Longest names first so \cdots wins over \cdot
    for command in sorted(_SYMBOLS, key=len, reverse=True):
        text = text.replace(command, _SYMBOLS[command])

    # Unknown commands with an argument keep the argument
    text = re.sub(r"\\[a-zA-Z]+\{([^}]*)\}", r"\1", text)

    text = re.sub(r"\^\{([^}]*)\}", r"^(\1)", text)
    text = re.sub(r"_\{([^}]*)\}", r"_(\1)", text)
    return text


def render_markdown(text: str) -> Markdown:
    """Render text as markdown with LaTeX cleaned up."""
    return Markdown(clean_latex(text))
