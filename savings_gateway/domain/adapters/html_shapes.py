"""Adapters for rate tables and rate statements published as HTML"""

import re
from dataclasses import dataclass, field
from html.parser import HTMLParser
from typing import Any, Dict, Iterable, List, Optional

from savings_gateway.domain.adapters.base import SourceAdapter
from savings_gateway.domain.models import Tier
from savings_gateway.domain.parsing import parse_number, parse_range, parse_rate, strip_markup
from savings_gateway.domain.tiers import build_tier

_WHITESPACE_RE = re.compile(r"\s+")
_ROW_GROUP_TAGS = ("thead", "tbody", "tfoot", "caption")


@dataclass
class Cell:
    text: str
    header: bool = False


@dataclass
class Table:
    attrs: Dict[str, str]
    rows: List[List[Cell]] = field(default_factory=list)

    @property
    def classes(self) -> List[str]:
        return self.attrs.get("class", "").split()

    @property
    def text(self) -> str:
        return " ".join(cell.text for row in self.rows for cell in row)


class _TableCollector(HTMLParser):
    """
    Collect every <table> as rows of cell texts; nested tables are kept separately.

    End tags HTML allows authors to omit (</td>, </th>, </tr>) are implied:
    a new cell, row, row group or the end of the table closes whatever
    cell is still open, and a cell outside any open row starts one.
    """

    def __init__(self):
        super().__init__(convert_charrefs=True)
        self.tables: List[Table] = []
        self._stack: List[Table] = []
        self._cell: Optional[List[str]] = None
        self._cell_header = False
        self._row_open = False
        self._skip_depth = 0

    def handle_starttag(self, tag, attrs):
        if tag in ("script", "style"):
            self._skip_depth += 1
        elif tag == "table":
            self._close_cell()
            table = Table(attrs={k: v or "" for k, v in attrs})
            self.tables.append(table)
            self._stack.append(table)
            self._row_open = False
        elif not self._stack:
            return
        elif tag == "tr":
            self._close_cell()
            self._stack[-1].rows.append([])
            self._row_open = True
        elif tag in _ROW_GROUP_TAGS:
            self._close_row()
        elif tag in ("td", "th"):
            self._close_cell()
            if not self._row_open:
                self._stack[-1].rows.append([])
                self._row_open = True
            self._cell = []
            self._cell_header = tag == "th"
        elif tag == "br" and self._cell is not None:
            self._cell.append(" ")

    def handle_endtag(self, tag):
        if tag in ("script", "style"):
            self._skip_depth = max(0, self._skip_depth - 1)
        elif tag in ("td", "th"):
            self._close_cell()
        elif tag == "tr" or tag in _ROW_GROUP_TAGS:
            self._close_row()
        elif tag == "table" and self._stack:
            self._close_row()
            self._stack.pop()
            # Back in the enclosing table's cell, whose row is still open
            self._row_open = bool(self._stack)

    def handle_data(self, data):
        if self._skip_depth == 0 and self._cell is not None:
            self._cell.append(data)

    def _close_cell(self):
        if self._cell is None or not self._stack:
            self._cell = None
            return
        text = _WHITESPACE_RE.sub(" ", "".join(self._cell)).strip()
        self._stack[-1].rows[-1].append(Cell(text=text, header=self._cell_header))
        self._cell = None

    def _close_row(self):
        self._close_cell()
        self._row_open = False


def collect_tables(document: str) -> List[Table]:
    collector = _TableCollector()
    collector.feed(document)
    collector.close()
    return collector.tables


class HtmlTableAdapter(SourceAdapter):
    """
    A rate table in an HTML page.

    The table is the first one matching `table_class` / `table_id` (when
    given) whose text contains every string in `markers`. Each data row
    yields one candidate tier.

    Options:
        table_class, table_id, markers: table selection
        range_column: cell index holding the range label
        range_in_header: range label sits in the row's <th>; data cells
            are then indexed from the first <td>
        min_column / max_column: numeric bounds in separate cells
            (used instead of range_column)
        rate_column: cell index of the rate; a list tries each in order
        nib_column: optional cell index of a fixed NIB amount
        min_cells: rows with fewer data cells are skipped
        currency_column / currency: keep only rows whose cell equals
            the currency code
    """

    kind = "html_table"

    def extract(self, raw: Any) -> Optional[Iterable[Optional[Tier]]]:
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8", errors="replace")
        if not isinstance(raw, str):
            return None

        table = self._find_table(collect_tables(raw))
        if table is None:
            return None

        candidates: List[Optional[Tier]] = []
        for row in table.rows:
            data_cells = [cell.text for cell in row if not cell.header]
            if len(data_cells) < self.options.get("min_cells", 2):
                continue
            if not self._currency_matches(data_cells):
                continue
            candidates.append(self._row_to_tier(row, data_cells))
        return candidates

    def _find_table(self, tables: List[Table]) -> Optional[Table]:
        table_class = self.options.get("table_class")
        table_id = self.options.get("table_id")
        markers = self.options.get("markers", [])
        for table in tables:
            if table_class and table_class not in table.classes:
                continue
            if table_id and table.attrs.get("id") != table_id:
                continue
            text = table.text
            if all(marker in text for marker in markers):
                return table
        return None

    def _currency_matches(self, data_cells: List[str]) -> bool:
        column = self.options.get("currency_column")
        if column is None:
            return True
        return column < len(data_cells) and data_cells[column] == self.options.get("currency", "TL")

    def _cell(self, data_cells: List[str], index: Optional[int]) -> Optional[str]:
        if index is None or index >= len(data_cells):
            return None
        return data_cells[index]

    def _row_to_tier(self, row: List[Cell], data_cells: List[str]) -> Optional[Tier]:
        if self.options.get("range_in_header"):
            header_cells = [cell.text for cell in row if cell.header]
            bounds = parse_range(header_cells[0]) if header_cells else None
        elif "min_column" in self.options:
            upper = parse_number(self._cell(data_cells, self.options.get("max_column")))
            bounds = (parse_number(self._cell(data_cells, self.options["min_column"])), upper if upper > 0 else None)
        else:
            bounds = parse_range(self._cell(data_cells, self.options.get("range_column", 0)))
        if bounds is None:
            return None

        rate_columns = self.options.get("rate_column", 1)
        if not isinstance(rate_columns, list):
            rate_columns = [rate_columns]
        rate = next(
            (value for value in (parse_rate(self._cell(data_cells, c)) for c in rate_columns) if value > 0),
            0.0,
        )

        nib_column = self.options.get("nib_column")
        nib = parse_number(self._cell(data_cells, nib_column)) if nib_column is not None else 0.0

        return build_tier(bounds[0], bounds[1], rate, nib=nib)


class SingleRateAdapter(SourceAdapter):
    """
    One headline rate stated in page text, applying to every principal.

    Options:
        patterns: regexes tried in order; group 1 captures the rate
        nib_percentage: share of the balance that earns no interest
        max: optional upper bound of the single tier
    """

    kind = "single_rate"

    def extract(self, raw: Any) -> Optional[Iterable[Optional[Tier]]]:
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8", errors="replace")
        if not isinstance(raw, str):
            return None

        text = _WHITESPACE_RE.sub(" ", strip_markup(raw))
        for pattern in self.options.get("patterns", []):
            match = re.search(pattern, text, re.IGNORECASE)
            if match:
                return [
                    build_tier(
                        0,
                        self.options.get("max"),
                        parse_rate(match.group(1)),
                        nib_percentage=self.options.get("nib_percentage"),
                    )
                ]
        return None
