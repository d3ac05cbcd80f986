"""Query execution: semantic ranking, ripgrep and rank fusion."""

from codeseek.search.fusion import merge_smart_results
from codeseek.search.ripgrep import RipgrepSearcher, parse_rg_output, rg_score
from codeseek.search.semantic import semantic_search

__all__ = [
    "RipgrepSearcher",
    "merge_smart_results",
    "parse_rg_output",
    "rg_score",
    "semantic_search",
]
