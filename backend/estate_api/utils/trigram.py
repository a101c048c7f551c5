"""Trigram similarity with the same semantics as PostgreSQL's pg_trgm.

PostgreSQL ships ``similarity()`` through the pg_trgm extension. SQLite has
no equivalent, so this module provides one that the engine registers as a
SQL function on every SQLite connection (see ``estate_api.database``).
"""

from __future__ import annotations

import re

_WORD_RE = re.compile(r"[^\W_]+", re.UNICODE)


def trigrams(text: str | None) -> set[str]:
    """Return the set of trigrams of ``text``.

    Each alphanumeric word is lower-cased and padded with two spaces in
    front and one behind before being cut into three-character windows,
    which is how pg_trgm builds its trigram sets.
    """
    if not text:
        return set()
    result: set[str] = set()
    for word in _WORD_RE.findall(text.lower()):
        padded = f"  {word} "
        for i in range(len(padded) - 2):
            result.add(padded[i : i + 3])
    return result


def similarity(left: str | None, right: str | None) -> float:
    """Shared trigrams divided by the size of the union, in ``[0, 1]``."""
    a = trigrams(left)
    b = trigrams(right)
    if not a or not b:
        return 0.0
    shared = len(a & b)
    return shared / float(len(a) + len(b) - shared)
