"""Physical force indicator aggregation."""

from __future__ import annotations

from typing import Iterable

from sqf.common.constants import FORCE_FIELD_PREFIX, FORCE_MARKER
from sqf.common.models import RawRecord


def force_fields(field_names: Iterable[str], prefix: str = FORCE_FIELD_PREFIX) -> frozenset[str]:
    return frozenset(name for name in field_names if name.startswith(prefix))


def police_force_used(record: RawRecord, fields: Iterable[str]) -> bool:
    return any(record.get(name) == FORCE_MARKER for name in fields)
