"""Render simplified equations as a Wolfram|Alpha query."""

from __future__ import annotations

import re
from typing import List, Sequence
from urllib.parse import quote

from .parser import GREEK_LETTERS

WOLFRAM_URL = "https://www.wolframalpha.com/input?i="
_GREEK_NAMES = {name for _, name in GREEK_LETTERS}
_LABEL_ASSIGNMENT = re.compile(r"=[a-z]+$")


def clean_equations_for_wolfram(equations: Sequence[str]) -> List[str]:
    """Spell Greek letters out and drop identities and bare label assignments."""

    cleaned: List[str] = []
    for equation in equations:
        for letter, name in GREEK_LETTERS:
            equation = equation.replace(letter, name)
        parts = equation.split("=")
        if len(parts) == 2 and parts[0] == parts[1]:
            continue
        if (
            _LABEL_ASSIGNMENT.search(equation)
            and not any(ch in equation for ch in "+-(")
            and parts[-1] in _GREEK_NAMES
        ):
            continue
        cleaned.append(equation)
    return cleaned


def generate_wolfram_url(equations: Sequence[str], targets: Sequence[str]) -> str:
    cleaned = clean_equations_for_wolfram(equations)
    prefix = f"solve for {', '.join(targets)}:" if targets else "solve"
    query = f"{prefix} {{{', '.join(cleaned)}}}"
    return WOLFRAM_URL + quote(query, safe="-_.!~*'()")


__all__ = ["WOLFRAM_URL", "clean_equations_for_wolfram", "generate_wolfram_url"]
