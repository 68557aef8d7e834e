from packyadmin.parsers.card_mapper import (
    RowMappingError,
    convert_row_to_card,
    convert_rows,
    generate_slug,
)
from packyadmin.parsers.csv_rows import (
    REQUIRED_HEADERS,
    ParseReport,
    get_csv_preview,
    parse_csv,
    parse_csv_report,
    tokenize_line,
    validate_csv_headers,
)

__all__ = [
    "REQUIRED_HEADERS",
    "ParseReport",
    "RowMappingError",
    "convert_row_to_card",
    "convert_rows",
    "generate_slug",
    "get_csv_preview",
    "parse_csv",
    "parse_csv_report",
    "tokenize_line",
    "validate_csv_headers",
]
