"""Locale-tolerant number, rate and range parsing for source payloads.

Sources publish figures in Turkish notation ("1.000.000,50"), sometimes in
English notation ("1,000,000.50"), wrapped in markup and currency symbols.
Every helper here returns a neutral value (0.0 or None) instead of raising,
so a single unreadable cell can only ever cost the tier it belongs to.
"""

import html
import re
from typing import NamedTuple, Optional

_TAG_RE = re.compile(r"<[^>]*>")
_NON_NUMERIC_RE = re.compile(r"[^\d,.]")
_CURRENCY_RE = re.compile(r"TL|TRY|₺", re.IGNORECASE)

# "500.000 TL ve üzeri", "500.000 - üzeri", "500.000 uzeri"
_OPEN_RANGE_RE = re.compile(r"([\d.,]+)\s*[-–]?\s*(?:ve\s+)?[üu]zeri", re.IGNORECASE)
# "500.000+", "500,000.00 +"
_PLUS_RANGE_RE = re.compile(r"([\d.,]+)\s*\+")
# "0 - 50.000", "50.001–250.000"
_CLOSED_RANGE_RE = re.compile(r"([\d.,]+)\s*[-–]\s*([\d.,]+)")


class Range(NamedTuple):
    """Inclusive principal bounds; max of None means open-ended"""

    min: float
    max: Optional[float]


def strip_markup(text: str) -> str:
    """Drop HTML tags and decode entities"""
    return html.unescape(_TAG_RE.sub("", text)).strip()


def parse_number(text) -> float:
    """
    Parse a number written with either Turkish or English separators.

    Rules:
    - Both marks present: whichever comes last is the decimal mark
    - Only commas: a single comma is the decimal mark, several group thousands
    - Only periods: a single period followed by at most two digits is the
      decimal mark, otherwise periods group thousands

    Returns 0.0 when nothing numeric remains.
    """
    if text is None:
        return 0.0
    if isinstance(text, (int, float)) and not isinstance(text, bool):
        return float(text)

    cleaned = _NON_NUMERIC_RE.sub("", str(text))
    if not cleaned:
        return 0.0

    if "," in cleaned and "." in cleaned:
        if cleaned.rfind(",") > cleaned.rfind("."):
            cleaned = cleaned.replace(".", "").replace(",", ".")
        else:
            cleaned = cleaned.replace(",", "")
    elif "," in cleaned:
        if cleaned.count(",") == 1:
            cleaned = cleaned.replace(",", ".")
        else:
            cleaned = cleaned.replace(",", "")
    else:
        dot_parts = cleaned.split(".")
        if not (len(dot_parts) == 2 and len(dot_parts[1]) <= 2):
            cleaned = cleaned.replace(".", "")

    try:
        return float(cleaned)
    except ValueError:
        return 0.0


def parse_rate(text) -> float:
    """Parse an annual percentage such as "%45,50" or "<b>45.5</b> %" """
    if text is None:
        return 0.0
    if isinstance(text, (int, float)) and not isinstance(text, bool):
        return float(text)
    return parse_number(strip_markup(str(text)).replace("%", "").strip())


def parse_range(text) -> Optional[Range]:
    """
    Parse a principal range label.

    Accepts closed ranges ("0 - 50.000 TL") and open-ended ones
    ("1.000.000 TL ve üzeri", "1,000,000+"). Returns None when the label
    cannot be read as a range.
    """
    if not text:
        return None

    label = _CURRENCY_RE.sub("", strip_markup(str(text))).strip()

    open_match = _OPEN_RANGE_RE.search(label) or _PLUS_RANGE_RE.search(label)
    if open_match:
        return Range(parse_number(open_match.group(1)), None)

    closed_match = _CLOSED_RANGE_RE.search(label)
    if not closed_match:
        return None
    return Range(parse_number(closed_match.group(1)), parse_number(closed_match.group(2)))


def parse_amount_input(text: Optional[str]) -> float:
    """
    Parse an amount typed by a user in Turkish notation.

    "100.000" -> 100000.0, "2.500,75 ₺" -> 2500.75. Periods are always
    thousands separators here, unlike parse_number.
    """
    if not text:
        return 0.0
    cleaned = re.sub(r"[₺\s]", "", text).replace(".", "").replace(",", ".", 1)
    try:
        return float(cleaned)
    except ValueError:
        return 0.0
