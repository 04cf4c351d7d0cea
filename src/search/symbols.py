"""
Symbol Search

Case-insensitive ranking of instruments by how the query matches their
symbol or display name. One full-string match per field, no tokenization.
"""

from typing import List, Optional, Sequence

from ..records import SymbolEntry

# Highest applicable rule wins per entry
SCORE_EXACT_SYMBOL = 100
SCORE_SYMBOL_PREFIX = 80
SCORE_SYMBOL_SUBSTRING = 60
SCORE_NAME_PREFIX = 40
SCORE_NAME_SUBSTRING = 20


def score_entry(entry: SymbolEntry, query: str) -> Optional[int]:
    """
    Relevance of ``entry`` for an already lower-cased ``query``

    Returns:
        Score, or None when neither symbol nor name contains the query
    """
    symbol = entry.symbol.lower()
    name = entry.name.lower()

    if symbol == query:
        return SCORE_EXACT_SYMBOL
    if symbol.startswith(query):
        return SCORE_SYMBOL_PREFIX
    if query in symbol:
        return SCORE_SYMBOL_SUBSTRING
    if name.startswith(query):
        return SCORE_NAME_PREFIX
    if query in name:
        return SCORE_NAME_SUBSTRING
    return None


def filter_symbols(
    entries: Sequence[SymbolEntry],
    query: str,
    max_results: int
) -> List[SymbolEntry]:
    """
    Filter and rank instruments for a search box

    Args:
        entries: Candidate instruments
        query: User input; matched case-insensitively
        max_results: Maximum number of results

    Returns:
        Matching entries by score descending, then symbol ascending. An
        empty query returns the first ``max_results`` entries unranked.
    """
    if max_results <= 0:
        return []

    if not query:
        return list(entries[:max_results])

    q = query.lower()
    scored = []
    for entry in entries:
        score = score_entry(entry, q)
        if score is not None:
            scored.append((score, entry))

    scored.sort(key=lambda item: (-item[0], item[1].symbol))
    return [entry for _, entry in scored[:max_results]]


__all__ = [
    "filter_symbols",
    "score_entry",
]
