"""Tests for LogCollector."""

import re

import pytest

from docker_exporter.collectors.logs import LogCollector, count_lines
from docker_exporter.core.constants import DEFAULT_LOG_CUSTOM_QUERY
from docker_exporter.core.schemas import LogStream
from tests.fakes import DB_ID, WEB_ID

DEFAULT_PATTERN = re.compile(DEFAULT_LOG_CUSTOM_QUERY)


class TestCountLines:
    """Tests for line and match counting of one log buffer."""

    def test_trailing_segment_not_counted(self):
        assert count_lines(b"one\ntwo\nthree\n").lines == 3
        assert count_lines(b"one\ntwo\nunterminated").lines == 2

    def test_empty_buffer(self):
        count = count_lines(b"", DEFAULT_PATTERN)
        assert count.lines == 0
        assert count.matches == 0

    def test_no_pattern_no_matches(self):
        assert count_lines(b'"error"\n"ERR"\n').matches == 0

    def test_default_pattern_matches_quoted_levels(self):
        data = b'{"level":"error"}\n{"level":"ERR"}\nerror without quotes\n{"level":"info"}\n'
        count = count_lines(data, DEFAULT_PATTERN)

        assert count.lines == 4
        assert count.matches == 2

    def test_custom_pattern(self):
        count = count_lines(b"WARN a\nINFO b\nWARN c\n", re.compile(r"^WARN"))
        assert count.matches == 2

    def test_invalid_utf8_is_replaced(self):
        assert count_lines(b"\xff\xfe broken\nok\n").lines == 2


class TestLogCollector:
    """Tests for the log fan-out stage."""

    def test_counts_per_stream(self, gateway, fanout):
        samples = LogCollector(gateway, fanout).collect([WEB_ID, DB_ID])

        web = samples[WEB_ID]
        assert web.stdout_lines == 3
        assert web.stderr_lines == 1
        assert web.total_lines == 4
        assert web.streams == frozenset({LogStream.STDOUT, LogStream.STDERR})

        db = samples[DB_ID]
        assert db.stdout_lines == 1
        assert db.stderr_lines == 0
        assert db.total_lines == 1

    def test_two_queries_per_container(self, gateway, fanout):
        LogCollector(gateway, fanout).collect([WEB_ID])

        assert sorted(gateway.calls_of("logs")) == [(WEB_ID, "stderr"), (WEB_ID, "stdout")]

    def test_matches_per_stream(self, gateway, fanout):
        samples = LogCollector(gateway, fanout, pattern=DEFAULT_PATTERN).collect([WEB_ID])

        web = samples[WEB_ID]
        assert web.stdout_matches == 1
        assert web.stderr_matches == 1
        assert web.total_matches == 2

    def test_matches_disabled(self, gateway, fanout):
        samples = LogCollector(gateway, fanout).collect([WEB_ID])
        assert samples[WEB_ID].total_matches == 0

    def test_one_stream_failing_keeps_the_other(self, gateway, fanout):
        gateway.log_data[(WEB_ID, "stderr")] = TimeoutError("read timed out")
        samples = LogCollector(gateway, fanout).collect([WEB_ID])

        web = samples[WEB_ID]
        assert web.streams == frozenset({LogStream.STDOUT})
        assert web.stdout_lines == 3
        assert web.stderr_lines == 0
        assert web.total_lines == 3

    def test_both_streams_failing_drops_container(self, gateway, fanout):
        del gateway.log_data[(DB_ID, "stdout")]
        del gateway.log_data[(DB_ID, "stderr")]
        samples = LogCollector(gateway, fanout).collect([WEB_ID, DB_ID])

        assert set(samples) == {WEB_ID}


@pytest.mark.parametrize(
    ("stdout", "stderr"),
    [(b"", b""), (b"a\n", b""), (b"a\nb\n", b"c\n"), (b'"err"\n', b'"ERROR"\n"error"\n')],
)
def test_totals_are_stream_sums(gateway, fanout, stdout, stderr):
    """total_lines and total_matches always equal the sum of both streams."""
    gateway.log_data[(WEB_ID, "stdout")] = stdout
    gateway.log_data[(WEB_ID, "stderr")] = stderr
    sample = LogCollector(gateway, fanout, pattern=DEFAULT_PATTERN).collect([WEB_ID])[WEB_ID]

    assert sample.total_lines == sample.stdout_lines + sample.stderr_lines
    assert sample.total_matches == sample.stdout_matches + sample.stderr_matches
