"""
Map parsed CSV rows to card records ready for insertion.

Required columns are always copied (blank when absent). Optional columns
are only written when the cell has a value, so a missing price stays
NULL in the store instead of becoming an empty string.
"""

import math
import re
from dataclasses import dataclass, field
from typing import Any

from packyadmin.parsers.csv_rows import CsvRow

# CSV header -> card column, always present in the output
REQUIRED_FIELDS: dict[str, str] = {
    "Card Name": "name",
    "Card Number": "number",
    "Rarity": "rarity",
    "Image URL": "image",
}

# CSV header -> card column, only written when the cell is non-blank
OPTIONAL_TEXT_FIELDS: dict[str, str] = {
    "TCGPlayer URL": "tcg_player",
    "Cardmarket URL": "card_market",
    "Variant Type": "variant_type",
    "Variant ID": "variant_id",
    "Base Card ID": "base_card_id",
}

PRICE_FIELDS: dict[str, str] = {
    "USD Price": "usd_price",
    "EUR Price": "euro_price",
}

HP_FIELD = ("HP", "hp")
BASE_CARD_FIELD = ("Is Base Card", "is_base_card")

TRUE_VALUES = frozenset({"true", "yes", "y", "1"})
FALSE_VALUES = frozenset({"false", "no", "n", "0"})

_SLUG_STRIP = re.compile(r"[^a-z0-9\s-]")
_SLUG_SPACES = re.compile(r"\s+")
_SLUG_HYPHENS = re.compile(r"-+")
_PRICE_NOISE = re.compile(r"[$€£,\s]")


class RowMappingError(ValueError):
    """A CSV cell could not be coerced to its column type."""

    def __init__(self, column: str, value: str, expected: str) -> None:
        self.column = column
        self.value = value
        self.expected = expected
        super().__init__(f"Column '{column}' has invalid value '{value}' (expected {expected})")


@dataclass
class RejectedRow:
    """A parsed row the mapper refused."""

    index: int
    reason: str


@dataclass
class MappingReport:
    """Records produced from a batch of rows plus the rows that failed."""

    records: list[dict[str, Any]] = field(default_factory=list)
    rejected: list[RejectedRow] = field(default_factory=list)


def generate_slug(text: str) -> str:
    """
    URL slug for a card name.

    Lower-cases, drops anything but letters, digits, whitespace and hyphens,
    then turns whitespace runs into single hyphens. Distinct names can
    share a slug; no uniqueness is enforced.

    >>> generate_slug("Pikachu V (Full Art)")
    'pikachu-v-full-art'
    """
    slug = _SLUG_STRIP.sub("", text.lower())
    slug = _SLUG_SPACES.sub("-", slug)
    slug = _SLUG_HYPHENS.sub("-", slug)
    return slug.strip()


def _cell(row: CsvRow, column: str) -> str:
    return (row.get(column) or "").strip()


def parse_price(column: str, value: str) -> float:
    """Parse a price cell such as ``12.50``, ``$1,299.00`` or ``€3``."""
    cleaned = _PRICE_NOISE.sub("", value)
    try:
        price = float(cleaned)
    except ValueError:
        raise RowMappingError(column, value, "a number") from None
    if not math.isfinite(price) or price < 0:
        raise RowMappingError(column, value, "a non-negative number")
    return price


def parse_hp(column: str, value: str) -> int:
    try:
        hp = int(value)
    except ValueError:
        raise RowMappingError(column, value, "a whole number") from None
    if hp < 0:
        raise RowMappingError(column, value, "a non-negative whole number")
    return hp


def parse_flag(column: str, value: str) -> bool:
    lowered = value.lower()
    if lowered in TRUE_VALUES:
        return True
    if lowered in FALSE_VALUES:
        return False
    raise RowMappingError(column, value, "true or false")


def convert_row_to_card(row: CsvRow, set_id: str) -> dict[str, Any]:
    """
    Convert one parsed CSV row into a card record for ``set_id``.

    Raises:
        RowMappingError: If an optional numeric or boolean cell cannot be coerced
    """
    card: dict[str, Any] = {"set_id": set_id}
    for column, key in REQUIRED_FIELDS.items():
        card[key] = row.get(column) or ""

    card["slug"] = generate_slug(card["name"] or card["number"])

    for column, key in OPTIONAL_TEXT_FIELDS.items():
        value = _cell(row, column)
        if value:
            card[key] = value

    for column, key in PRICE_FIELDS.items():
        value = _cell(row, column)
        if value:
            card[key] = parse_price(column, value)

    column, key = HP_FIELD
    value = _cell(row, column)
    if value:
        card[key] = parse_hp(column, value)

    column, key = BASE_CARD_FIELD
    value = _cell(row, column)
    if value:
        card[key] = parse_flag(column, value)

    return card


def convert_rows(rows: list[CsvRow], set_id: str) -> MappingReport:
    """
    Convert many rows, collecting failures instead of stopping at the first.

    Rejected rows are identified by their 0-based index in ``rows``.
    """
    report = MappingReport()
    for index, row in enumerate(rows):
        try:
            report.records.append(convert_row_to_card(row, set_id))
        except RowMappingError as e:
            report.rejected.append(RejectedRow(index=index, reason=str(e)))
    return report
