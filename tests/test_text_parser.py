"""Tests for the text access log parser."""

import pytest

from traefik_officer.errors import ParseError
from traefik_officer.parsers.text_log import TextLogParser

from tests.conftest import SAMPLE_TEXT_LINES, text_line


class TestTextLogParser:
    def setup_method(self):
        self.parser = TextLogParser()

    def test_all_fields_in_order(self):
        record = self.parser.parse_line(SAMPLE_TEXT_LINES[0])
        assert record.client_host == "192.168.1.100"
        assert record.client_username == "-"
        assert record.start_utc == "17/Feb/2026:10:15:30 +0000"
        assert record.request_method == "GET"
        assert record.request_path == "/api/v1/users/123?x=1"
        assert record.request_protocol == "HTTP/1.1"
        assert record.origin_status == 200
        assert record.origin_content_size == 1234
        assert record.referrer == '"-"'
        assert record.user_agent == '"Mozilla/5.0"'
        assert record.request_count == 42
        assert record.router_name == "users@kubernetes"
        assert record.service_url == '"http://10.0.0.5:8080"'
        assert record.duration == 12.0
        assert record.conversion_errors == []

    def test_integers_are_ints(self):
        record = self.parser.parse_line(SAMPLE_TEXT_LINES[0])
        assert isinstance(record.origin_status, int)
        assert isinstance(record.origin_content_size, int)
        assert isinstance(record.request_count, int)

    def test_overhead_absent(self):
        record = self.parser.parse_line(SAMPLE_TEXT_LINES[0])
        assert record.overhead is None

    def test_dash_content_size_is_zero(self):
        record = self.parser.parse_line(SAMPLE_TEXT_LINES[1])
        assert record.origin_content_size == 0
        assert record.client_username == "admin"
        assert record.conversion_errors == []

    def test_dash_router_name(self):
        line = (
            '10.0.0.1 - - [17/Feb/2026:10:00:00 +0000] "GET / HTTP/1.1" '
            '404 19 "-" "curl/8.0" 3 - - 0ms'
        )
        record = self.parser.parse_line(line)
        assert record.router_name == "-"
        assert record.duration == 0.0

    def test_fractional_duration(self):
        record = self.parser.parse_line(text_line(duration="12.5ms"))
        assert record.duration == 12.5

    def test_non_numeric_duration_is_tolerated(self):
        record = self.parser.parse_line(text_line(duration="-"))
        assert record.duration == 0.0
        assert "Duration" in record.conversion_errors
        assert record.request_path == "/api/items"

    def test_non_numeric_status_is_tolerated(self):
        record = self.parser.parse_line(text_line(status="abc"))
        assert record.origin_status == 0
        assert record.conversion_errors == ["OriginStatus"]

    def test_raw_line_kept(self):
        line = text_line()
        assert self.parser.parse_line(line).raw_line == line

    def test_garbage_raises_parse_error(self):
        with pytest.raises(ParseError):
            self.parser.parse_line("not an access log line")

    def test_empty_raises_parse_error(self):
        with pytest.raises(ParseError):
            self.parser.parse_line("")

    def test_parse_file_skips_bad_lines(self, tmp_path):
        path = tmp_path / "access.log"
        path.write_text("\n".join([SAMPLE_TEXT_LINES[0], "garbage", SAMPLE_TEXT_LINES[2]]) + "\n")
        records = list(self.parser.parse_file(path))
        assert [r.request_path for r in records] == ["/api/v1/users/123?x=1", "/health"]
