# slcsp/services/loader.py
from __future__ import annotations

import logging
from itertools import count
from typing import Callable, Iterable, List, Optional, Sequence, TypeVar

from pydantic import BaseModel, ValidationError

from ..errors import LoadError, RowError
from ..schemas import Plan, TargetZip, ZipArea

logger = logging.getLogger(__name__)

PLAN_COLUMNS = ("plan_id", "state", "metal_level", "rate", "rate_area")
ZIP_COLUMNS = ("zipcode", "state", "county_code", "name", "rate_area")

M = TypeVar("M", bound=BaseModel)


def _describe(err: ValidationError) -> str:
    parts = []
    for e in err.errors():
        field = ".".join(str(p) for p in e.get("loc", ()))
        parts.append(f"{field}={e.get('input')!r}: {e.get('msg')}")
    return "; ".join(parts)


def _load_table(
    rows: Iterable[Sequence[str]],
    source: str,
    columns: Sequence[str],
    build: Callable[..., M],
    lines: Optional[Sequence[int]] = None,
) -> List[M]:
    """
    Validate every row, then fail once with all bad rows if any were found.
    Nothing from a source with bad rows is handed downstream.

    `lines` gives the file line of each row for error messages; without it
    rows are numbered 1, 2, ... in the order given.
    """
    records: List[M] = []
    errors: List[RowError] = []
    numbers = lines if lines is not None else count(1)
    for line, row in zip(numbers, rows):
        if len(row) < len(columns):
            errors.append(RowError(line, f"expected {len(columns)} fields, got {len(row)}"))
            continue
        try:
            records.append(build(**dict(zip(columns, row))))
        except ValidationError as e:
            errors.append(RowError(line, _describe(e)))
    if errors:
        raise LoadError(source, errors)
    logger.info(f"Loaded {len(records):,} rows from {source}")
    return records


def load_plans(
    rows: Iterable[Sequence[str]], source: str = "plans", lines: Optional[Sequence[int]] = None
) -> List[Plan]:
    return _load_table(rows, source, PLAN_COLUMNS, Plan, lines)


def load_zip_areas(
    rows: Iterable[Sequence[str]], source: str = "zips", lines: Optional[Sequence[int]] = None
) -> List[ZipArea]:
    return _load_table(rows, source, ZIP_COLUMNS, ZipArea, lines)


def load_targets(rows: Iterable[Sequence[str]], source: str = "slcsp") -> List[TargetZip]:
    """
    Target zip codes in input order, duplicates kept. Only the first field is
    read; a row with a blank zip code counts as a blank line and is skipped.
    """
    targets = [
        TargetZip(zipcode=row[0].strip())
        for row in rows
        if row and row[0].strip()
    ]
    logger.info(f"Loaded {len(targets):,} target zip codes from {source}")
    return targets
