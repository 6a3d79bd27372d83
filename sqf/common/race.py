"""Race code recoding."""

from __future__ import annotations

from sqf.common.models import Race

RACE_BY_CODE = {
    "W": Race.WHITE,
    "B": Race.BLACK,
    "P": Race.HISPANIC,
    "Q": Race.HISPANIC,
    "A": Race.ASIAN,
    "I": Race.OTHER,
    "Z": Race.OTHER,
}
RACE_LEVELS = tuple(race.value for race in Race)


def recode_race(code: str | None) -> Race | None:
    """Map a raw single-letter race code to its category.

    Matching is exact and case-sensitive. Unknown, empty and missing codes
    all map to None; the validation missing-rate check is what surfaces them.
    """
    if code is None:
        return None
    return RACE_BY_CODE.get(code)
