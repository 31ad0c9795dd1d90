# slcsp/services/scratch_store.py
from __future__ import annotations

import logging
from collections import defaultdict
from decimal import Decimal
from pathlib import Path
from typing import Dict, Iterable, List

from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from ..deps import get_engine
from ..errors import StoreError
from ..schemas import SILVER, Plan, ZipArea

logger = logging.getLogger(__name__)

# Rates are kept as TEXT so they come back as the exact decimals that went in
CREATE_TABLES = (
    text("""
    CREATE TABLE plans (
        id INTEGER PRIMARY KEY NOT NULL,
        plan_id TEXT,
        state TEXT,
        metal_level TEXT,
        rate TEXT NOT NULL,
        rate_area INTEGER NOT NULL CHECK (rate_area > 0)
    )
    """),
    text("""
    CREATE TABLE zips (
        id INTEGER PRIMARY KEY NOT NULL,
        zipcode TEXT,
        state TEXT,
        county_code TEXT,
        name TEXT,
        rate_area INTEGER NOT NULL CHECK (rate_area > 0)
    )
    """),
)

INSERT_PLAN = text("""
INSERT INTO plans (id, plan_id, state, metal_level, rate, rate_area)
VALUES (:id, :plan_id, :state, :metal_level, :rate, :rate_area)
""")

INSERT_ZIP = text("""
INSERT INTO zips (id, zipcode, state, county_code, name, rate_area)
VALUES (:id, :zipcode, :state, :county_code, :name, :rate_area)
""")

SELECT_SILVER_BY_ZIP = text("""
SELECT zips.zipcode, plans.rate
FROM plans
JOIN zips
  ON plans.state = zips.state
 AND plans.rate_area = zips.rate_area
WHERE plans.metal_level = :metal
""")


class ScratchStore:
    """
    Transient SQLite copy of the plan and zip tables for a single run.

    Creating a store removes whatever an earlier run left at the same path.
    """

    def __init__(self, engine: Engine, path: Path):
        self.engine = engine
        self.path = path

    @classmethod
    def create(cls, path: Path | str) -> "ScratchStore":
        path = Path(path)
        engine = None
        try:
            path.unlink(missing_ok=True)
            engine = get_engine(path)
            with engine.begin() as conn:
                for ddl in CREATE_TABLES:
                    conn.execute(ddl)
        except (OSError, SQLAlchemyError) as e:
            if engine is not None:
                engine.dispose()
            raise StoreError(f"could not create scratch store at {path}: {e}") from e
        logger.info(f"Created scratch store at {path}")
        return cls(engine, path)

    def close(self) -> None:
        self.engine.dispose()

    def __enter__(self) -> "ScratchStore":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def _insert_rows(self, table: str, statement, rows: Iterable[dict]) -> int:
        """Insert row by row in one transaction; a failing row is logged and skipped."""
        stored = 0
        skipped = 0
        with self.engine.begin() as conn:
            for row in rows:
                try:
                    conn.execute(statement, row)
                    stored += 1
                except SQLAlchemyError as e:
                    skipped += 1
                    cause = getattr(e, "orig", None) or e
                    logger.warning(f"Skipped {table} row {row['id']}: {cause}")
        if skipped:
            logger.warning(f"{skipped:,} {table} row(s) were not stored")
        logger.info(f"Stored {stored:,} {table} rows")
        return stored

    def insert_plans(self, plans: Iterable[Plan]) -> int:
        rows = (
            {
                "id": i,
                "plan_id": p.plan_id,
                "state": p.state,
                "metal_level": p.metal_level,
                "rate": str(p.rate),
                "rate_area": p.rate_area,
            }
            for i, p in enumerate(plans, start=1)
        )
        return self._insert_rows("plans", INSERT_PLAN, rows)

    def insert_zip_areas(self, zip_areas: Iterable[ZipArea]) -> int:
        rows = (
            {
                "id": i,
                "zipcode": z.zipcode,
                "state": z.state,
                "county_code": z.county_code,
                "name": z.name,
                "rate_area": z.rate_area,
            }
            for i, z in enumerate(zip_areas, start=1)
        )
        return self._insert_rows("zips", INSERT_ZIP, rows)

    def silver_rates_by_zipcode(self) -> Dict[str, List[Decimal]]:
        """Silver rates joined onto zip codes through (state, rate_area)."""
        try:
            with self.engine.connect() as conn:
                result = conn.execute(SELECT_SILVER_BY_ZIP, {"metal": SILVER})
                pairs = result.fetchall()
        except SQLAlchemyError as e:
            raise StoreError(f"silver rate join failed: {e}") from e

        out: Dict[str, List[Decimal]] = defaultdict(list)
        for zipcode, rate in pairs:
            out[zipcode].append(Decimal(rate))
        return dict(out)
