"""
Constraint Layer - Keeps every lower bound below its upper bound.

Contains:
- ConstraintEngine: Reconciles slider pairs and tracks their readouts
- render_snippet: Code snippet describing the current colour range
"""

from .engine import ConstraintEngine
from .snippet import render_snippet, to_camel_case

__all__ = ["ConstraintEngine", "render_snippet", "to_camel_case"]
