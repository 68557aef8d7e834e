"""
Parser for card spreadsheet exports.

Turns CSV text into rows keyed by the header names:
- One logical row per line (quoted fields cannot span lines)
- Double quotes protect delimiters inside a field and are then dropped
- Rows whose field count differs from the header are skipped and counted
"""

import logging
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

CsvRow = dict[str, str]

REQUIRED_HEADERS: tuple[str, ...] = (
    "Set Name",
    "Card Name",
    "Card Number",
    "Rarity",
    "Image URL",
)

DEFAULT_PREVIEW_ROWS = 5


@dataclass
class ParseReport:
    """
    Result of parsing a CSV document.

    Attributes:
        headers: Field names taken from the first non-blank line
        rows: Parsed rows, in source order
        total_lines: Number of non-blank data lines after the header
        skipped_lines: 1-based source line numbers of rows dropped for a
            field count that did not match the header
    """

    headers: list[str] = field(default_factory=list)
    rows: list[CsvRow] = field(default_factory=list)
    total_lines: int = 0
    skipped_lines: list[int] = field(default_factory=list)

    @property
    def skipped(self) -> int:
        return len(self.skipped_lines)


def tokenize_line(line: str, delimiter: str = ",") -> list[str]:
    """
    Split one line into trimmed fields.

    A double quote toggles quoted mode, in which the delimiter is kept as
    text. Quote characters themselves never reach the output.

    >>> tokenize_line('"Name, with comma",5')
    ['Name, with comma', '5']
    """
    fields: list[str] = []
    current: list[str] = []
    in_quotes = False

    for char in line:
        if char == '"':
            in_quotes = not in_quotes
        elif char == delimiter and not in_quotes:
            fields.append("".join(current).strip())
            current = []
        else:
            current.append(char)

    fields.append("".join(current).strip())
    return fields


def parse_csv_report(text: str, delimiter: str = ",") -> ParseReport:
    """
    Parse CSV text and report which lines were dropped.

    Returns an empty report (no headers, no rows) when the text has fewer
    than two non-blank lines.
    """
    # Spreadsheet exports often start with a byte-order mark
    lines = text.removeprefix("\ufeff").split("\n")
    numbered = [(number, line) for number, line in enumerate(lines, start=1) if line.strip()]
    if len(numbered) < 2:
        return ParseReport()

    _, header_line = numbered[0]
    headers = tokenize_line(header_line, delimiter)
    report = ParseReport(headers=headers, total_lines=len(numbered) - 1)

    for number, line in numbered[1:]:
        values = tokenize_line(line, delimiter)
        if len(values) != len(headers):
            report.skipped_lines.append(number)
            continue
        report.rows.append(dict(zip(headers, values, strict=True)))

    if report.skipped_lines:
        logger.warning(
            "Skipped %d of %d CSV rows with a column count other than %d",
            report.skipped,
            report.total_lines,
            len(headers),
        )

    return report


def parse_csv(text: str, delimiter: str = ",") -> list[CsvRow]:
    """
    Parse CSV text into header-keyed rows.

    Example:
        >>> parse_csv("A,B\\n1,2\\n3,4")
        [{'A': '1', 'B': '2'}, {'A': '3', 'B': '4'}]
    """
    return parse_csv_report(text, delimiter).rows


def preview_rows(rows: list[CsvRow], max_rows: int = DEFAULT_PREVIEW_ROWS) -> list[CsvRow]:
    """First ``max_rows`` rows, without re-parsing them."""
    return rows[: max(max_rows, 0)]


def get_csv_preview(text: str, max_rows: int = DEFAULT_PREVIEW_ROWS) -> list[CsvRow]:
    """Parse CSV text and keep only the first ``max_rows`` rows."""
    return preview_rows(parse_csv(text), max_rows)


def missing_headers(headers: list[str]) -> list[str]:
    """Required header names absent from ``headers`` (exact match)."""
    present = set(headers)
    return [name for name in REQUIRED_HEADERS if name not in present]


def validate_csv_headers(headers: list[str]) -> bool:
    """True when every required column is present. Order and extras are ignored."""
    return not missing_headers(headers)
