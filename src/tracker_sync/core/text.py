from __future__ import annotations

import re
import unicodedata

_whitespace_re = re.compile(r"\s+")
_non_alnum_re = re.compile(r"[^a-z0-9\s]")


def normalize_name(value: str) -> str:
    """Normalize a team/player name for stable matching across sources."""

    v = unicodedata.normalize("NFKD", value)
    v = "".join(ch for ch in v if not unicodedata.combining(ch))
    v = v.strip().lower()
    v = _non_alnum_re.sub(" ", v)
    v = _whitespace_re.sub(" ", v)
    return v.strip()


def season_label(year: int) -> str:
    """`2024` -> `2024/25`."""

    return f"{year}/{(year + 1) % 100:02d}"
