"""Per-year recoding of raw stop records into the standardised schema."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Mapping, Sequence

from sqf.common.age import clean_age
from sqf.common.coerce import safe_float, safe_int
from sqf.common.constants import FORCE_FIELD_PREFIX
from sqf.common.dates import parse_stop_datetime
from sqf.common.deterministic import ordered_union, stable_sorted
from sqf.common.errors import ConfigError
from sqf.common.force import force_fields, police_force_used
from sqf.common.ids import record_id
from sqf.common.models import DateFormat, RawRecord, StandardizedRecord
from sqf.common.race import recode_race

DEFAULT_DATE_FORMATS: dict[int, DateFormat] = {
    2006: DateFormat.YMD,
    **{year: DateFormat.MDY for year in range(2007, 2013)},
}


def resolve_date_format(year: int, date_formats: Mapping[int, DateFormat]) -> DateFormat:
    try:
        return date_formats[year]
    except KeyError:
        raise ConfigError(f"No date format policy defined for year {year}") from None


def _female(sex: str | None) -> bool | None:
    if sex is None or not sex.strip():
        return None
    return sex == "F"


def recode_year(
    records: Sequence[RawRecord],
    year: int,
    date_formats: Mapping[int, DateFormat] = DEFAULT_DATE_FORMATS,
    *,
    force_prefix: str = FORCE_FIELD_PREFIX,
) -> list[StandardizedRecord]:
    date_format = resolve_date_format(year, date_formats)
    pf_fields = force_fields(ordered_union(record.field_names for record in records), prefix=force_prefix)

    out: list[StandardizedRecord] = []
    for ordinal, record in enumerate(records, start=1):
        stop = parse_stop_datetime(record.get("datestop"), record.get("timestop"), date_format)
        out.append(
            StandardizedRecord(
                id=record_id(year, ordinal),
                date=stop.date,
                time=stop.time,
                year=int(year),
                race=recode_race(record.get("race")),
                female=_female(record.get("sex")),
                age=clean_age(record.get("age")),
                police_force=police_force_used(record, pf_fields),
                precinct=safe_int(record.get("pct")),
                xcoord=safe_float(record.get("xcoord")),
                ycoord=safe_float(record.get("ycoord")),
            )
        )
    return out


def run_recoding(
    partitions_by_year: Mapping[int, Sequence[RawRecord]],
    date_formats: Mapping[int, DateFormat] = DEFAULT_DATE_FORMATS,
    *,
    force_prefix: str = FORCE_FIELD_PREFIX,
    max_workers: int = 1,
) -> list[StandardizedRecord]:
    """Recode every year partition and concatenate in ascending year order.

    All policies are resolved before any partition is touched, so one year
    without a date format fails the whole run.
    """
    partitions = stable_sorted(partitions_by_year.items(), key=lambda item: item[0])
    for year, _records in partitions:
        resolve_date_format(year, date_formats)

    def _recode(item: tuple[int, Sequence[RawRecord]]) -> list[StandardizedRecord]:
        year, records = item
        return recode_year(records, year, date_formats, force_prefix=force_prefix)

    if max_workers > 1 and len(partitions) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            recoded = list(pool.map(_recode, partitions))
    else:
        recoded = [_recode(item) for item in partitions]

    return [row for rows in recoded for row in rows]
