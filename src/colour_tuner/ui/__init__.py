"""
UI Layer - Operator front ends.

Provides:
- TunerWindow: OpenCV trackbars plus original/modified previews
- TunerConsole: Headless line-based control (no display needed)
"""

from .console import TunerConsole
from .window import TunerWindow

__all__ = ["TunerConsole", "TunerWindow"]
