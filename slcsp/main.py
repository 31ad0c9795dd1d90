# slcsp/main.py
from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from .deps import OUTPUT_PATH, PLANS_PATH, SCRATCH_DB_PATH, SLCSP_PATH, ZIPS_PATH
from .errors import SLCSPError
from .schemas import Result
from .services.emitter import write_results
from .services.loader import load_plans, load_targets, load_zip_areas
from .services.reader import read_numbered_rows, read_rows
from .services.resolver import multi_area_zipcodes, resolve_targets, silver_rates_by_zipcode
from .services.scratch_store import ScratchStore

logger = logging.getLogger(__name__)


def _read_with_lines(path):
    numbered = read_numbered_rows(path)
    return [row for _, row in numbered], [line for line, _ in numbered]


def run(
    plans_path: Path | str = PLANS_PATH,
    zips_path: Path | str = ZIPS_PATH,
    slcsp_path: Path | str = SLCSP_PATH,
    output_path: Path | str = OUTPUT_PATH,
    store_path: Optional[Path | str] = None,
) -> List[Result]:
    """
    Load the three tables, resolve every target zip code and write the output.

    With `store_path` the (state, rate_area) join runs in a throwaway SQLite
    database instead of in memory; results are the same.
    """
    # 1) load: any bad row stops the run before output is touched
    rows, lines = _read_with_lines(plans_path)
    plans = load_plans(rows, source=str(plans_path), lines=lines)
    rows, lines = _read_with_lines(zips_path)
    zip_areas = load_zip_areas(rows, source=str(zips_path), lines=lines)
    targets = load_targets(read_rows(slcsp_path), source=str(slcsp_path))

    multi = multi_area_zipcodes(zip_areas)
    if multi:
        logger.info(f"{len(multi):,} zip codes span more than one rate area")

    # 2) join
    if store_path is not None:
        with ScratchStore.create(store_path) as store:
            store.insert_plans(plans)
            store.insert_zip_areas(zip_areas)
            rates = store.silver_rates_by_zipcode()
    else:
        rates = silver_rates_by_zipcode(plans, zip_areas)

    # 3) select + emit
    results = resolve_targets(targets, rates)
    write_results(results, output_path)
    return results


# --------- CLI / Main ---------
def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Compute the second lowest cost Silver plan rate for each target zip code.")
    ap.add_argument("--plans", default=str(PLANS_PATH), help="Plans table (plan_id,state,metal_level,rate,rate_area)")
    ap.add_argument("--zips", default=str(ZIPS_PATH), help="Zip table (zipcode,state,county_code,name,rate_area)")
    ap.add_argument("--slcsp", default=str(SLCSP_PATH), help="Target zip codes (zipcode[,rate])")
    ap.add_argument("--out", default=str(OUTPUT_PATH), help="Where to write zipcode,rate")
    ap.add_argument("--store", nargs="?", const=str(SCRATCH_DB_PATH), default=None,
                    help=f"Join through a scratch SQLite file instead of in memory (default path {SCRATCH_DB_PATH})")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        run(args.plans, args.zips, args.slcsp, args.out, store_path=args.store)
    except SLCSPError as e:
        logger.error(f"Run failed: {e}")
        return 1
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
