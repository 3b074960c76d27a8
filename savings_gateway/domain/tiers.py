"""Canonical tier construction and ordering"""

import logging
import math
from typing import Iterable, List, Optional, Tuple

from savings_gateway.domain.models import Tier

logger = logging.getLogger(__name__)


def _finite(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def build_tier(
    min_amount,
    max_amount,
    annual_rate_percent,
    nib=0.0,
    nib_percentage=None,
) -> Optional[Tier]:
    """
    Validate one candidate tier and build it.

    Returns None when the tier must be dropped:
    - rate missing or <= 0
    - lower bound missing or negative
    - bounded upper limit below the lower bound

    An unreadable NIB field only loses the field (NIB falls back to zero),
    never the tier.
    """
    if not _finite(annual_rate_percent) or annual_rate_percent <= 0:
        return None
    if not _finite(min_amount) or min_amount < 0:
        return None
    if max_amount is not None and (not _finite(max_amount) or max_amount < min_amount):
        return None

    if not _finite(nib) or nib < 0:
        logger.debug("Ignoring invalid fixed NIB %r", nib)
        nib = 0.0
    if nib_percentage is not None and (not _finite(nib_percentage) or not 0 < nib_percentage <= 100):
        logger.debug("Ignoring invalid NIB percentage %r", nib_percentage)
        nib_percentage = None

    return Tier(
        min=float(min_amount),
        max=None if max_amount is None else float(max_amount),
        annual_rate_percent=float(annual_rate_percent),
        nib=float(nib),
        nib_percentage=None if nib_percentage is None else float(nib_percentage),
    )


def canonicalize_tiers(tiers: Iterable[Tier]) -> Tuple[Tier, ...]:
    """
    Put adapter output into canonical order.

    - Exact-duplicate ranges keep their first occurrence
    - Stable sort ascending by lower bound
    - An unbounded tier that does not end up last is dropped

    Overlaps and gaps are kept as published; the resolver's scan order
    decides which tier wins.
    """
    seen = set()
    unique: List[Tier] = []
    for tier in tiers:
        key = (tier.min, tier.max)
        if key in seen:
            continue
        seen.add(key)
        unique.append(tier)

    ordered = sorted(unique, key=lambda t: t.min)

    canonical = [
        tier
        for index, tier in enumerate(ordered)
        if not (tier.unbounded and index != len(ordered) - 1)
    ]
    if len(canonical) != len(ordered):
        logger.debug("Dropped %d unbounded tier(s) not in last position", len(ordered) - len(canonical))

    return tuple(canonical)
