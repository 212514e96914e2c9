"""
Tests for the quoted-CSV parser.
"""

from skyboard.ingestion.csv_parser import parse_csv


class TestParseCsv:

    def test_quoted_separator(self):
        assert parse_csv('"A","B,C",D', skip_header=False) == [['A', 'B,C', 'D']]

    def test_header_is_discarded(self):
        assert parse_csv('h1,h2\n"A","B,C"\n') == [['A', 'B,C']]

    def test_quoted_line_break_is_data(self):
        text = 'name,notes\n"X","line one\nline two"\n"Y","z"'
        assert parse_csv(text) == [['X', 'line one\nline two'], ['Y', 'z']]

    def test_carriage_return_ends_a_row(self):
        assert parse_csv('h\rA,B\rC,D') == [['A', 'B'], ['C', 'D']]

    def test_crlf_yields_single_empty_field_rows(self):
        rows = parse_csv('h\r\nA,B\r\nC,D')
        assert [r for r in rows if r != ['']] == [['A', 'B'], ['C', 'D']]
        assert [''] in rows

    def test_empty_fields(self):
        assert parse_csv('A,,B,', skip_header=False) == [['A', '', 'B', '']]

    def test_doubled_quotes_toggle_twice(self):
        assert parse_csv('"a""b",c', skip_header=False) == [['ab', 'c']]

    def test_last_row_without_newline(self):
        assert parse_csv('h\nA,B') == [['A', 'B']]

    def test_trailing_newline_adds_no_row(self):
        assert parse_csv('h\nA,B\n') == [['A', 'B']]

    def test_header_only(self):
        assert parse_csv('id,name') == []
        assert parse_csv('id,name\n') == []

    def test_empty_text(self):
        assert parse_csv('') == []
        assert parse_csv('', skip_header=False) == []

    def test_unterminated_quote_swallows_rest(self):
        assert parse_csv('"A,B\nC', skip_header=False) == [['A,B\nC']]
