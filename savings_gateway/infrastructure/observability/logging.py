"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = "savings-gateway"


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_source_outcome(source_id: str, tier_count: int, duration_ms: float, error: str | None = None) -> None:
    """Log structured per-source ingestion outcome"""
    logging.getLogger("savings_gateway.ingestion").info(
        "Source processed",
        extra={
            "source_id": source_id,
            "step": "source_complete",
            "outcome": "ok" if tier_count > 0 else "failed",
            "tier_count": tier_count,
            "duration_ms": duration_ms,
            "error": error,
        },
    )


def log_batch_outcome(succeeded: int, total: int, degraded: bool, duration_ms: float) -> None:
    """Log the batch success ratio; a degraded batch is a warning"""
    logger = logging.getLogger("savings_gateway.ingestion")
    extra = {
        "step": "batch_complete",
        "succeeded": succeeded,
        "total": total,
        "degraded": degraded,
        "duration_ms": duration_ms,
    }
    if degraded:
        logger.warning(f"Less than half of sources produced rates: {succeeded}/{total}", extra=extra)
    else:
        logger.info(f"Ingestion done: {succeeded}/{total} sources", extra=extra)
