"""
Search Module for Series Engine

Instrument lookup helpers used next to the charting engine.
"""

from .symbols import (
    filter_symbols,
    score_entry,
    SCORE_EXACT_SYMBOL,
    SCORE_SYMBOL_PREFIX,
    SCORE_SYMBOL_SUBSTRING,
    SCORE_NAME_PREFIX,
    SCORE_NAME_SUBSTRING,
)

__all__ = [
    "filter_symbols",
    "score_entry",
    "SCORE_EXACT_SYMBOL",
    "SCORE_SYMBOL_PREFIX",
    "SCORE_SYMBOL_SUBSTRING",
    "SCORE_NAME_PREFIX",
    "SCORE_NAME_SUBSTRING",
]
