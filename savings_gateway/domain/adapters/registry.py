"""Adapter lookup by shape name"""

from typing import Any, Dict, Optional, Type

from savings_gateway.domain.adapters.base import SourceAdapter
from savings_gateway.domain.adapters.html_shapes import HtmlTableAdapter, SingleRateAdapter
from savings_gateway.domain.adapters.json_shapes import (
    HeaderColumnsAdapter,
    LimitRecordsAdapter,
    RangeRecordsAdapter,
)

ADAPTER_TYPES: Dict[str, Type[SourceAdapter]] = {
    adapter.kind: adapter
    for adapter in (
        HeaderColumnsAdapter,
        RangeRecordsAdapter,
        LimitRecordsAdapter,
        HtmlTableAdapter,
        SingleRateAdapter,
    )
}


def build_adapter(kind: str, source_id: str, options: Optional[Dict[str, Any]] = None) -> SourceAdapter:
    """
    Instantiate the adapter registered for a shape.

    Raises:
        KeyError: no adapter handles this shape
    """
    try:
        adapter_type = ADAPTER_TYPES[kind]
    except KeyError:
        raise KeyError(f"No adapter registered for shape '{kind}'") from None
    return adapter_type(source_id, options)
