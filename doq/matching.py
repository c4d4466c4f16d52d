from __future__ import annotations

import difflib
from typing import Iterable, Optional


def _unique(candidates: list[str]) -> Optional[str]:
    return candidates[0] if len(candidates) == 1 else None


def resolve_name(query: str, names: Iterable[str], cutoff: float = 0.6) -> Optional[str]:
    """
    Resolve a typed task name against the stored names.

    Tries, in order: exact, case-insensitive exact, unique prefix, unique
    substring, then the closest difflib match. Names that differ only by
    case are ambiguous.
    """
    names = list(names)
    if query in names:
        return query

    q = query.strip().lower()
    if not q:
        return None
    lowered: dict[str, list[str]] = {}
    for n in names:
        lowered.setdefault(n.lower(), []).append(n)
    if q in lowered:
        return _unique(lowered[q])

    hit = _unique([n for n in names if n.lower().startswith(q)])
    if hit:
        return hit
    hit = _unique([n for n in names if q in n.lower()])
    if hit:
        return hit

    close = difflib.get_close_matches(q, list(lowered), n=1, cutoff=cutoff)
    return _unique(lowered[close[0]]) if close else None
