"""Adapters for JSON rate payloads.

Each class covers one payload shape; a concrete source is an instance with
options naming where its fields live.
"""

import re
from typing import Any, Iterable, List, Optional

from savings_gateway.domain.adapters.base import SourceAdapter, dig, load_json
from savings_gateway.domain.models import Tier
from savings_gateway.domain.parsing import parse_number, parse_range, parse_rate
from savings_gateway.domain.tiers import build_tier

_PERCENT_RE = re.compile(r"%\s*(\d+(?:[.,]\d+)?)")


def _nib_percentage_from_text(text: Any) -> Optional[float]:
    """First "%N" in a free-text description, e.g. "Bakiyenin %10'u faiz almaz" """
    if not isinstance(text, str):
        return None
    match = _PERCENT_RE.search(text)
    if not match:
        return None
    value = parse_number(match.group(1))
    return value if value > 0 else None


class HeaderColumnsAdapter(SourceAdapter):
    """
    Range labels in one list, rates in a parallel list.

    {"Headers": ["0 - 50.000", "50.000 - 250.000", "250.000+"],
     "GrossRates": [{"GRates": [{"Rate": "40,00"}, ...]}]}

    Options:
        headers_path: path to the list of range labels
        rates_path: path to the list of rates (same length as headers)
        rate_key: key of the rate inside each rate item (omit for bare values)
        nib_percentage_path: optional path to text holding a "%N" NIB share
    """

    kind = "header_columns"

    def extract(self, raw: Any) -> Optional[Iterable[Optional[Tier]]]:
        data = load_json(raw)
        headers = dig(data, self.options.get("headers_path", ["Headers"]))
        rates = dig(data, self.options.get("rates_path", ["Rates"]))
        if not isinstance(headers, list) or not isinstance(rates, list) or not headers:
            return None
        if len(rates) != len(headers):
            return None

        rate_key = self.options.get("rate_key")
        nib_percentage = None
        if "nib_percentage_path" in self.options:
            nib_percentage = _nib_percentage_from_text(dig(data, self.options["nib_percentage_path"]))

        candidates: List[Optional[Tier]] = []
        for header, item in zip(headers, rates):
            bounds = parse_range(header)
            rate_value = item.get(rate_key) if rate_key and isinstance(item, dict) else item
            if bounds is None:
                candidates.append(None)
                continue
            candidates.append(
                build_tier(bounds.min, bounds.max, parse_rate(rate_value), nib_percentage=nib_percentage)
            )
        return candidates


class RangeRecordsAdapter(SourceAdapter):
    """
    A list of records, each with a range label and a rate.

    {"Data": [{"PriceRange": "0.00 - 49,999.99", "RateValue": "45.00"},
              {"PriceRange": "50,000.00 +", "RateValue": "47.00"}]}

    Options:
        records_path: path to the record list
        range_key / rate_key: field names inside a record
        nib_key: optional fixed NIB amount field
        nib_percentage_key: optional NIB percentage field
        skip_labels: range labels to ignore, e.g. currency header rows
    """

    kind = "range_records"

    def extract(self, raw: Any) -> Optional[Iterable[Optional[Tier]]]:
        records = dig(load_json(raw), self.options.get("records_path", ["Data"]))
        if not isinstance(records, list) or not records:
            return None

        range_key = self.options.get("range_key", "range")
        rate_key = self.options.get("rate_key", "rate")
        nib_key = self.options.get("nib_key")
        nib_percentage_key = self.options.get("nib_percentage_key")
        skip_labels = {label.upper() for label in self.options.get("skip_labels", [])}

        candidates: List[Optional[Tier]] = []
        for record in records:
            if not isinstance(record, dict):
                candidates.append(None)
                continue
            label = str(record.get(range_key) or "").strip()
            if label.upper() in skip_labels:
                continue
            bounds = parse_range(label)
            if bounds is None:
                candidates.append(None)
                continue
            nib_percentage = None
            if nib_percentage_key and record.get(nib_percentage_key) is not None:
                nib_percentage = parse_rate(record.get(nib_percentage_key))
            candidates.append(
                build_tier(
                    bounds.min,
                    bounds.max,
                    parse_rate(record.get(rate_key)),
                    nib=parse_number(record.get(nib_key)) if nib_key else 0.0,
                    nib_percentage=nib_percentage,
                )
            )
        return candidates


class LimitRecordsAdapter(SourceAdapter):
    """
    A list of records with numeric lower/upper limits.

    [{"altLimit": 0, "ustLimit": 100000, "hosgeldinOran": 48, "tabelaOran": 40,
      "vadesizBakiye": 1000}, ...]

    A missing or zero upper limit means the tier is open-ended.

    Options:
        records_path: path to the record list (default: payload is the list)
        min_key / max_key: limit field names
        rate_keys: rate fields tried in order, first positive one wins
        nib_key: optional fixed NIB amount field
    """

    kind = "limit_records"

    def extract(self, raw: Any) -> Optional[Iterable[Optional[Tier]]]:
        records = dig(load_json(raw), self.options.get("records_path", []))
        if not isinstance(records, list) or not records:
            return None

        min_key = self.options.get("min_key", "min")
        max_key = self.options.get("max_key", "max")
        rate_keys = self.options.get("rate_keys", ["rate"])
        nib_key = self.options.get("nib_key")

        candidates: List[Optional[Tier]] = []
        for record in records:
            if not isinstance(record, dict):
                candidates.append(None)
                continue
            rate = next(
                (value for value in (parse_rate(record.get(key)) for key in rate_keys) if value > 0),
                0.0,
            )
            upper = parse_number(record.get(max_key))
            candidates.append(
                build_tier(
                    parse_number(record.get(min_key)),
                    upper if upper > 0 else None,
                    rate,
                    nib=parse_number(record.get(nib_key)) if nib_key else 0.0,
                )
            )
        return candidates
