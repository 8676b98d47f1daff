"""
Core types for lexing.
"""

from collections.abc import Callable

type TokenValue = str
type OriginalLength = int
type Analyser = Callable[[str], float]
