"""Age cleaning."""

from __future__ import annotations

from typing import Any

from sqf.common.coerce import safe_int
from sqf.common.constants import AGE_RANGE, AGE_SENTINELS


def clean_age(raw: Any) -> int | None:
    age = safe_int(raw)
    if age is None or age in AGE_SENTINELS:
        return None
    # 99 is in range and kept as a real age.
    minimum, maximum = AGE_RANGE
    if age < minimum or age > maximum:
        return None
    return age
