# slcsp/services/resolver.py
from __future__ import annotations

import logging
from collections import defaultdict
from decimal import Decimal
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Set

from ..schemas import SILVER, AreaKey, Plan, Result, TargetZip, ZipArea

logger = logging.getLogger(__name__)


def index_silver_rates(plans: Iterable[Plan]) -> Dict[AreaKey, List[Decimal]]:
    """(state, rate_area) -> rates of the Silver plans priced there."""
    index: Dict[AreaKey, List[Decimal]] = defaultdict(list)
    for p in plans:
        if p.metal_level == SILVER:   # exact, case-sensitive
            index[p.area_key].append(p.rate)
    return dict(index)


def index_rate_areas(zip_areas: Iterable[ZipArea]) -> Dict[str, Set[AreaKey]]:
    """zipcode -> every (state, rate_area) pair it falls in."""
    index: Dict[str, Set[AreaKey]] = defaultdict(set)
    for z in zip_areas:
        index[z.zipcode].add(z.area_key)
    return dict(index)


def candidate_rates(
    zipcode: str,
    rate_index: Mapping[AreaKey, List[Decimal]],
    area_index: Mapping[str, Set[AreaKey]],
) -> List[Decimal]:
    rates: List[Decimal] = []
    for key in area_index.get(zipcode, ()):
        rates.extend(rate_index.get(key, ()))
    return rates


def second_lowest(rates: Iterable[Decimal]) -> Optional[Decimal]:
    """
    Second element of the ascending distinct rates, i.e. the smallest rate
    strictly above the minimum. Equal rates are one price point, so fewer than
    two distinct values means there is no answer.
    """
    distinct = sorted(set(rates))
    if len(distinct) < 2:
        return None
    return distinct[1]


def silver_rates_by_zipcode(
    plans: Iterable[Plan], zip_areas: Iterable[ZipArea]
) -> Dict[str, List[Decimal]]:
    """In-memory (state, rate_area) join of Silver plans onto zip codes."""
    rate_index = index_silver_rates(plans)
    area_index = index_rate_areas(zip_areas)
    return {
        zipcode: candidate_rates(zipcode, rate_index, area_index)
        for zipcode in area_index
    }


def multi_area_zipcodes(zip_areas: Iterable[ZipArea]) -> List[str]:
    """
    Zip codes that span more than one (state, rate_area) pair. Reported only;
    such zip codes are still resolved by the distinct-rate rule.
    """
    return sorted(z for z, keys in index_rate_areas(zip_areas).items() if len(keys) > 1)


def resolve_targets(
    targets: Sequence[TargetZip], rates_by_zipcode: Mapping[str, List[Decimal]]
) -> List[Result]:
    """One Result per target, same order; repeated zip codes reuse the first answer."""
    resolved: Dict[str, Optional[Decimal]] = {}
    out: List[Result] = []
    for t in targets:
        if t.zipcode not in resolved:
            resolved[t.zipcode] = second_lowest(rates_by_zipcode.get(t.zipcode, ()))
        out.append(Result(zipcode=t.zipcode, rate=resolved[t.zipcode]))

    unresolved = sum(1 for r in out if r.rate is None)
    logger.info(f"Resolved {len(out) - unresolved:,} of {len(out):,} targets ({unresolved:,} blank)")
    return out


def resolve(
    targets: Sequence[TargetZip], plans: Iterable[Plan], zip_areas: Iterable[ZipArea]
) -> List[Result]:
    return resolve_targets(targets, silver_rates_by_zipcode(plans, zip_areas))
