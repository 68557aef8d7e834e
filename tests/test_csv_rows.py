"""Tests for the CSV row parser."""

from packyadmin.parsers.csv_rows import (
    REQUIRED_HEADERS,
    get_csv_preview,
    missing_headers,
    parse_csv,
    parse_csv_report,
    preview_rows,
    tokenize_line,
    validate_csv_headers,
)


class TestTokenizeLine:
    def test_plain_fields(self) -> None:
        assert tokenize_line("a,b,c") == ["a", "b", "c"]

    def test_quoted_field_keeps_delimiter(self) -> None:
        result = tokenize_line('"Name, with comma",5')

        assert result == ["Name, with comma", "5"]

    def test_fields_are_trimmed(self) -> None:
        assert tokenize_line("  a ,  b  ,c\r") == ["a", "b", "c"]

    def test_empty_fields_preserved(self) -> None:
        assert tokenize_line("a,,c,") == ["a", "", "c", ""]

    def test_empty_line_is_one_field(self) -> None:
        assert tokenize_line("") == [""]

    def test_quotes_are_dropped(self) -> None:
        """Quote characters never reach the output, even doubled ones."""
        assert tokenize_line('"say ""hi""",x') == ["say hi", "x"]

    def test_custom_delimiter(self) -> None:
        assert tokenize_line('a;"b;c";d', delimiter=";") == ["a", "b;c", "d"]


class TestParseCsv:
    def test_two_column_document(self) -> None:
        result = parse_csv("A,B\n1,2\n3,4")

        assert result == [{"A": "1", "B": "2"}, {"A": "3", "B": "4"}]

    def test_fewer_than_two_lines(self) -> None:
        assert parse_csv("") == []
        assert parse_csv("A,B") == []
        assert parse_csv("\n\n  \nA,B\n\n") == []

    def test_blank_lines_ignored(self) -> None:
        result = parse_csv("\nA,B\n\n1,2\n   \n3,4\n")

        assert len(result) == 2

    def test_crlf_line_endings(self) -> None:
        result = parse_csv("A,B\r\n1,2\r\n")

        assert result == [{"A": "1", "B": "2"}]

    def test_header_quotes_stripped(self) -> None:
        result = parse_csv('"Card Name","Rarity"\nPikachu,Common')

        assert result == [{"Card Name": "Pikachu", "Rarity": "Common"}]

    def test_mismatched_rows_dropped(self) -> None:
        text = "A,B\n1,2\n1,2,3\n4\n5,6"
        result = parse_csv(text)

        assert result == [{"A": "1", "B": "2"}, {"A": "5", "B": "6"}]
        assert len(result) <= len(text.split("\n")) - 1

    def test_quoted_comma_keeps_row_shape(self) -> None:
        result = parse_csv('Name,Number\n"Pikachu, Promo",58')

        assert result == [{"Name": "Pikachu, Promo", "Number": "58"}]


class TestParseCsvReport:
    def test_reports_skipped_line_numbers(self) -> None:
        report = parse_csv_report("A,B\n1,2\n\nbad\n3,4,5\n6,7")

        assert report.headers == ["A", "B"]
        assert report.total_lines == 4
        assert report.skipped_lines == [4, 5]
        assert report.skipped == 2
        assert len(report.rows) == 2

    def test_empty_report(self) -> None:
        report = parse_csv_report("only a header")

        assert report.headers == []
        assert report.rows == []
        assert report.skipped == 0


class TestPreview:
    def test_preview_truncates(self) -> None:
        text = "A\n" + "\n".join(str(i) for i in range(10))

        preview = get_csv_preview(text, max_rows=3)

        assert preview == [{"A": "0"}, {"A": "1"}, {"A": "2"}]

    def test_default_preview_size(self) -> None:
        text = "A\n" + "\n".join(str(i) for i in range(10))

        assert len(get_csv_preview(text)) == 5

    def test_preview_rows_does_not_mutate(self) -> None:
        rows = [{"A": "1"}, {"A": "2"}]

        assert preview_rows(rows, 1) == [{"A": "1"}]
        assert preview_rows(rows, 10) == rows
        assert preview_rows(rows, 0) == []
        assert len(rows) == 2


class TestHeaderValidation:
    def test_all_required_present(self) -> None:
        assert validate_csv_headers(list(REQUIRED_HEADERS)) is True

    def test_order_and_extras_ignored(self) -> None:
        headers = ["HP", *reversed(REQUIRED_HEADERS), "USD Price"]

        assert validate_csv_headers(headers) is True

    def test_any_missing_column_fails(self) -> None:
        for name in REQUIRED_HEADERS:
            headers = [h for h in REQUIRED_HEADERS if h != name]
            assert validate_csv_headers(headers) is False

    def test_case_sensitive(self) -> None:
        headers = [h.lower() for h in REQUIRED_HEADERS]

        assert validate_csv_headers(headers) is False

    def test_missing_headers_in_required_order(self) -> None:
        assert missing_headers(["Card Name", "Rarity"]) == ["Set Name", "Card Number", "Image URL"]


class TestCardExport:
    def test_parse_export(self, sample_card_csv: str) -> None:
        report = parse_csv_report(sample_card_csv)

        assert validate_csv_headers(report.headers)
        assert [row["Card Name"] for row in report.rows] == [
            "Charizard",
            "Pikachu, Red Cheeks",
            "Switch",
        ]
        assert report.skipped_lines == [5]
        assert report.rows[1]["USD Price"] == ""
        assert report.rows[2]["HP"] == ""

    def test_byte_order_mark_ignored(self) -> None:
        headers = parse_csv_report("\ufeffSet Name,Card Name\nBase,Pikachu").headers

        assert headers == ["Set Name", "Card Name"]
