from __future__ import annotations

import itertools
import re

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]")


def normalize_label(label: str) -> str:
    """Lower-case ``label`` and drop every character outside ``[a-z0-9]``."""
    return _NON_ALNUM_RE.sub("", label.lower())


class IdentityDeriver:
    """
    Produces correlation ids for a single parse pass.

    Each id is the normalized label followed by a counter value, so ids are
    unique within one pass even when two labels normalize identically. They
    are not stable across passes; once the catalog has assigned its own id,
    that one is used instead.
    """

    def __init__(self, start: int = 1) -> None:
        self._counter = itertools.count(start)

    def derive(self, label: str) -> str:
        return f"{normalize_label(label)}{next(self._counter):04d}"
