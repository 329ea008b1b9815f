"""
Snippet rendering - the ColourObj line an operator pastes into a script.
"""

from __future__ import annotations

import re

from ..config import DEFAULT_COLOUR_NAME
from ..params import ParameterState

_WORD_START = re.compile(r"^\w|[A-Z]|\b\w")
_WHITESPACE = re.compile(r"\s+")


def to_camel_case(text: str) -> str:
    """Turn a colour name into a variable name.

    The first character is lowercased, every other capital or word start is
    upper-cased, and whitespace is dropped:

        to_camel_case("dark red")  -> "darkRed"
        to_camel_case("MyColour")  -> "myColour"
    """

    def _case(match: re.Match) -> str:
        word = match.group(0)
        return word.lower() if match.start() == 0 else word.upper()

    return _WHITESPACE.sub("", _WORD_START.sub(_case, text))


def render_snippet(name: str, state: ParameterState) -> str:
    """Render the ColourObj declaration for ``name`` and the current bounds."""
    name = name.strip() or DEFAULT_COLOUR_NAME
    (h_min, s_min, v_min), (h_max, s_max, v_max) = state.bounds()
    return (
        f"ColourObj {to_camel_case(name)} = new ColourObj(\"{name}\", "
        f"new Scalar({h_min}, {s_min}, {v_min}, 0), "
        f"new Scalar({h_max}, {s_max}, {v_max}, 0));"
    )
