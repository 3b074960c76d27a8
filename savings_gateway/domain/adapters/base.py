"""Source adapter contract - one adapter turns one source shape into tiers"""

import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional, Sequence

from savings_gateway.domain.models import NormalizationResult, NormalizationStatus, Tier
from savings_gateway.domain.tiers import canonicalize_tiers

logger = logging.getLogger(__name__)


class SourceAdapter(ABC):
    """
    Base class for all source adapters.

    Subclasses implement `extract`, yielding one entry per candidate tier
    (None for a candidate that failed validation) or returning None when the
    payload does not have the expected structure at all.

    `normalize` and `parse` never raise: anything unexpected inside
    `extract` is logged and reported as a malformed payload.
    """

    kind: str = ""

    def __init__(self, source_id: str, options: Optional[Dict[str, Any]] = None):
        self.source_id = source_id
        self.options = options or {}

    @property
    def id(self) -> str:
        return self.source_id

    def normalize(self, raw: Any) -> List[Tier]:
        """Canonical tiers for a raw payload, empty when nothing usable was found"""
        return self.parse(raw).tiers

    def parse(self, raw: Any) -> NormalizationResult:
        """Normalize with diagnostics distinguishing missing from malformed data"""
        try:
            candidates = self.extract(raw)
        except Exception as e:
            logger.warning(
                f"{self.source_id}: payload could not be parsed: {e}",
                extra={"source_id": self.source_id, "adapter": self.kind},
            )
            return NormalizationResult(status=NormalizationStatus.MALFORMED, reason=str(e))

        if candidates is None:
            return NormalizationResult(status=NormalizationStatus.NO_DATA, reason="expected structure not found")

        accepted: List[Tier] = []
        dropped = 0
        for candidate in candidates:
            if candidate is None:
                dropped += 1
            else:
                accepted.append(candidate)

        if dropped:
            logger.debug(f"{self.source_id}: dropped {dropped} tier candidate(s)")

        tiers = list(canonicalize_tiers(accepted))
        if not tiers:
            return NormalizationResult(
                status=NormalizationStatus.MALFORMED,
                dropped=dropped,
                reason="no valid tier",
            )
        return NormalizationResult(status=NormalizationStatus.OK, tiers=tiers, dropped=dropped)

    @abstractmethod
    def extract(self, raw: Any) -> Optional[Iterable[Optional[Tier]]]:
        """Candidate tiers from the raw payload, or None if the shape is absent"""


def load_json(raw: Any) -> Any:
    """Decode text/bytes payloads; already-decoded JSON passes through"""
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8")
    if isinstance(raw, str):
        return json.loads(raw)
    return raw


def dig(data: Any, path: Sequence[Any]) -> Any:
    """
    Follow a key/index path into decoded JSON.

    String values met along the way that hold JSON are decoded, so paths
    can reach into payloads nested as strings. Returns None on any miss.
    """
    current = data
    for step in path:
        if isinstance(current, str):
            try:
                current = json.loads(current)
            except ValueError:
                return None
        if isinstance(step, int):
            if not isinstance(current, list) or not -len(current) <= step < len(current):
                return None
            current = current[step]
        else:
            if not isinstance(current, dict) or step not in current:
                return None
            current = current[step]
    return current
