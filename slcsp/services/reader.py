# slcsp/services/reader.py
from __future__ import annotations

from pathlib import Path
from typing import List, Tuple

import pandas as pd

from ..errors import LoadError


def _load(path: Path) -> pd.DataFrame:
    if not path.exists():
        raise LoadError(str(path), reason="file not found")
    try:
        # Everything stays a string: zip codes keep leading zeros, blanks stay "".
        # index_col=False: a trailing comma on every row must not turn the first
        # column into the index. Blank lines are kept so the index tracks file lines.
        df = pd.read_csv(
            path,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=False,
            index_col=False,
        )
    except (OSError, pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise LoadError(str(path), reason=str(e)) from e
    return df.fillna("")


def read_numbered_rows(path: Path | str) -> List[Tuple[int, List[str]]]:
    """
    Data rows paired with their 1-based line number in the file (header is line 1).

    Short rows are padded with "" up to the header width, fields past the header
    width are dropped, and rows whose fields are all blank (an empty line or a
    bare ",") are skipped.
    """
    df = _load(Path(path))
    return [
        (int(idx) + 2, row)
        for idx, row in zip(df.index, df.values.tolist())
        if any(str(v).strip() for v in row)
    ]


def read_rows(path: Path | str) -> List[List[str]]:
    return [row for _, row in read_numbered_rows(path)]
