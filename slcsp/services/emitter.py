# slcsp/services/emitter.py
from __future__ import annotations

import logging
import os
from decimal import ROUND_HALF_UP, Decimal
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

import pandas as pd

from ..errors import OutputError
from ..schemas import Result

logger = logging.getLogger(__name__)

OUTPUT_COLUMNS = ["zipcode", "rate"]
CENTS = Decimal("0.01")


def format_rate(rate: Optional[Decimal]) -> str:
    """Two decimal places always ("200" -> "200.00"); unresolvable -> ""."""
    if rate is None:
        return ""
    return str(rate.quantize(CENTS, rounding=ROUND_HALF_UP))


def render_rows(results: Iterable[Result]) -> List[Tuple[str, str]]:
    return [(r.zipcode, format_rate(r.rate)) for r in results]


def write_results(results: Iterable[Result], path: Path | str) -> Path:
    """
    Write `zipcode,rate` plus one line per result, replacing any previous file.
    The table goes to a hidden sibling first and is renamed into place, so a
    failed write leaves no half-written output behind.
    """
    path = Path(path)
    df = pd.DataFrame(render_rows(results), columns=OUTPUT_COLUMNS)
    tmp = path.with_name(f".{path.name}.tmp")
    try:
        df.to_csv(tmp, index=False, lineterminator="\n")
        os.replace(tmp, path)
    except OSError as e:
        try:
            tmp.unlink(missing_ok=True)
        except OSError:
            logger.warning(f"Could not remove temporary file {tmp}")
        raise OutputError(path, e) from e

    logger.info(f"✅ Wrote {len(df):,} rows → {path}")
    return path
