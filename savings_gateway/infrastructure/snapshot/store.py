"""Read and write the rates snapshot shared between ingestion and the API"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List

from pydantic import ValidationError

from savings_gateway.domain.exceptions import SnapshotFormatError
from savings_gateway.domain.models import Bank, Tier
from savings_gateway.domain.registry import BankRegistry
from savings_gateway.domain.tiers import build_tier, canonicalize_tiers
from savings_gateway.infrastructure.snapshot.schemas import BankRecord, SnapshotRecord, TierRecord

logger = logging.getLogger(__name__)


def _tiers_from_records(bank_id: str, raw_tiers: List[Any]) -> List[Tier]:
    """Validate stored tiers one by one; a bad tier is dropped, not the bank"""
    tiers: List[Tier] = []
    for raw in raw_tiers:
        try:
            record = TierRecord.model_validate(raw)
        except ValidationError as e:
            logger.debug(f"{bank_id}: dropping unreadable tier: {e.error_count()} error(s)")
            continue
        tier = build_tier(record.min, record.max, record.annual_rate, record.nib or 0.0, record.nib_percentage)
        if tier is None:
            logger.debug(f"{bank_id}: dropping invalid tier {raw!r}")
            continue
        tiers.append(tier)
    return tiers


def registry_from_document(document: Dict[str, Any]) -> BankRegistry:
    """
    Build a registry from a decoded snapshot document.

    Raises:
        SnapshotFormatError: top-level shape is wrong
    """
    try:
        record = SnapshotRecord.model_validate(document)
    except ValidationError as e:
        raise SnapshotFormatError(f"Invalid rates snapshot: {e}") from e

    banks = [
        Bank(
            id=bank.id,
            name=bank.name,
            type=bank.type,
            product_name=bank.product_name,
            website=bank.website or bank.url or "",
            tiers=canonicalize_tiers(_tiers_from_records(bank.id, bank.tiers)),
        )
        for bank in record.banks
    ]

    return BankRegistry(
        banks=tuple(banks),
        last_updated=record.last_updated,
        default_withholding_rate_percent=record.default_withholding_rate_percent,
    )


def _tier_to_document(tier: Tier) -> Dict[str, Any]:
    document: Dict[str, Any] = {
        "min": tier.min,
        "max": tier.max,
        "annualRate": tier.annual_rate_percent,
        "nib": tier.nib,
    }
    if tier.has_percentage_nib:
        document["nibPercentage"] = tier.nib_percentage
    return document


def registry_to_document(registry: BankRegistry) -> Dict[str, Any]:
    """Snapshot document in the exchange format; failed sources keep tiers: []"""
    return {
        "lastUpdated": registry.last_updated.isoformat() if registry.last_updated else None,
        "defaultWithholdingRatePercent": registry.default_withholding_rate_percent,
        "banks": [
            BankRecord(
                id=bank.id,
                name=bank.name,
                type=bank.type,
                product_name=bank.product_name,
                website=bank.website,
                tiers=[_tier_to_document(tier) for tier in bank.tiers],
            ).model_dump(by_alias=True, exclude={"url"})
            for bank in registry.banks
        ],
    }


def load_snapshot(path: str | Path) -> BankRegistry:
    """
    Raises:
        SnapshotFormatError: file missing, not JSON, or wrong shape
    """
    snapshot_path = Path(path)
    try:
        document = json.loads(snapshot_path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise SnapshotFormatError(f"Rates snapshot not found: {snapshot_path}") from e
    except ValueError as e:
        raise SnapshotFormatError(f"Rates snapshot is not valid JSON: {e}") from e
    return registry_from_document(document)


def save_snapshot(registry: BankRegistry, path: str | Path) -> Path:
    snapshot_path = Path(path)
    snapshot_path.parent.mkdir(parents=True, exist_ok=True)
    snapshot_path.write_text(
        json.dumps(registry_to_document(registry), indent=2, ensure_ascii=False),
        encoding="utf-8",
    )
    return snapshot_path
