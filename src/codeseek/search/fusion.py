"""Rank fusion of semantic and literal hits."""

import dataclasses

from codeseek.models import SearchHit


def merge_smart_results(
    semantic_hits: list[SearchHit],
    rg_hits: list[SearchHit],
    limit: int,
) -> list[SearchHit]:
    """Fuse two ranked hit lists into one.

    Hits sharing a (path, start_line, end_line) location collapse into the
    first one seen, carrying the larger score and the longer snippet; when
    the two sources differ the fused hit is tagged "hybrid". The result is
    sorted by score, ties kept in first-seen order.
    """
    by_location: dict[tuple[str, int, int], SearchHit] = {}

    for hit in [*semantic_hits, *rg_hits]:
        existing = by_location.get(hit.location)
        if existing is None:
            by_location[hit.location] = hit
            continue

        by_location[hit.location] = dataclasses.replace(
            existing,
            score=max(existing.score, hit.score),
            source=existing.source if existing.source == hit.source else "hybrid",
            snippet=existing.snippet if len(existing.snippet) >= len(hit.snippet) else hit.snippet,
        )

    ranked = sorted(by_location.values(), key=lambda hit: hit.score, reverse=True)
    return ranked[:limit]
