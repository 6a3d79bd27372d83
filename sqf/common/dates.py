"""Stop date and time parsing under the per-year raw date formats.

Raw files before 2007 write dates as ``YYYY-MM-DD``; later files use a
compact ``MMDDYYYY``. Each layout has its own sentinel for an unknown date.
Times are 24-hour ``HHMM`` values whose leading zeros are often dropped.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import NamedTuple

from sqf.common.constants import MDY_SENTINEL, YMD_SENTINEL
from sqf.common.models import DateFormat

DATE_PATTERNS: dict[DateFormat, tuple[str, ...]] = {
    DateFormat.YMD: ("%Y-%m-%d", "%Y/%m/%d", "%Y%m%d"),
    DateFormat.MDY: ("%m%d%Y", "%m/%d/%Y", "%m-%d-%Y"),
}
DATE_SENTINELS = {
    DateFormat.YMD: YMD_SENTINEL,
    DateFormat.MDY: MDY_SENTINEL,
}
COMPACT_PATTERNS = {"%Y%m%d", "%m%d%Y"}
TIME_PATTERNS = ("%H%M", "%H:%M")


class StopDateTime(NamedTuple):
    date: date | None
    time: datetime | None


def parse_stop_date(raw: str | None, date_format: DateFormat) -> date | None:
    if not isinstance(date_format, DateFormat):
        raise ValueError(f"Unsupported date format policy: {date_format!r}")
    if raw is None:
        return None

    value = raw.strip()
    if not value or value == DATE_SENTINELS[date_format]:
        return None

    for pattern in DATE_PATTERNS[date_format]:
        # strptime accepts unpadded fields, which makes compact values ambiguous.
        if pattern in COMPACT_PATTERNS and not (len(value) == 8 and value.isdigit()):
            continue
        try:
            return datetime.strptime(value, pattern).date()
        except ValueError:
            continue
    return None


def pad_time(raw: str | None) -> str | None:
    if raw is None:
        return None
    value = raw.strip()
    if not value:
        return None
    return value.rjust(4, "0")


def combine_stop_time(stop_date: date | None, raw_time: str | None) -> datetime | None:
    padded = pad_time(raw_time)
    if stop_date is None or padded is None:
        return None
    for pattern in TIME_PATTERNS:
        try:
            parsed = datetime.strptime(padded, pattern)
        except ValueError:
            continue
        return datetime.combine(stop_date, parsed.time())
    return None


def parse_stop_datetime(date_raw: str | None, time_raw: str | None, date_format: DateFormat) -> StopDateTime:
    stop_date = parse_stop_date(date_raw, date_format)
    return StopDateTime(date=stop_date, time=combine_stop_time(stop_date, time_raw))
