import unittest
from datetime import timedelta

from timed_tags.timestamps import (
    format_line,
    format_timestamp,
    is_timestamp_line,
    parse_line,
    parse_timestamp,
)


def ts(hours=0, minutes=0, seconds=0, ms=0) -> timedelta:
    return timedelta(hours=hours, minutes=minutes, seconds=seconds, milliseconds=ms)


class TestParseTimestamp(unittest.TestCase):
    def test_accepts_every_supported_layout(self) -> None:
        cases = {
            "1:02:03.004": ts(1, 2, 3, 4),
            "01:02.345": ts(minutes=1, seconds=2, ms=345),
            "1:02.500": ts(minutes=1, seconds=2, ms=500),
            "12:02:03": ts(12, 2, 3),
            "59:59": ts(minutes=59, seconds=59),
            "7:05": ts(minutes=7, seconds=5),
        }
        for raw, expected in cases.items():
            with self.subTest(raw=raw):
                self.assertEqual(parse_timestamp(raw), expected)

    def test_legacy_two_digit_fraction_is_hundredths(self) -> None:
        self.assertEqual(parse_timestamp("00:12.34"), ts(seconds=12, ms=340))

    def test_rejects_out_of_range_and_malformed_values(self) -> None:
        for raw in ("00:61.000", "61:00", "1:2", "abc", "", "00:01.0000", "ar:Artist"):
            with self.subTest(raw=raw):
                self.assertIsNone(parse_timestamp(raw))

    def test_hours_are_unbounded(self) -> None:
        self.assertEqual(parse_timestamp("100:00:00.000"), ts(hours=100))


class TestFormatTimestamp(unittest.TestCase):
    def test_short_form_below_one_hour(self) -> None:
        self.assertEqual(format_timestamp(ts(minutes=1, seconds=2, ms=345)), "01:02.345")
        self.assertEqual(format_timestamp(timedelta(0)), "00:00.000")

    def test_hour_form_from_one_hour(self) -> None:
        self.assertEqual(format_timestamp(ts(1, 2, 3, 4)), "1:02:03.004")

    def test_always_hours_is_zero_padded(self) -> None:
        self.assertEqual(format_timestamp(ts(seconds=10), always_hours=True), "00:00:10.000")

    def test_legacy_digits_truncate(self) -> None:
        self.assertEqual(format_timestamp(ts(seconds=2, ms=349), digits=2), "00:02.34")

    def test_sub_millisecond_precision_is_truncated(self) -> None:
        self.assertEqual(format_timestamp(timedelta(microseconds=1999)), "00:00.001")

    def test_negative_values_clamp_to_zero(self) -> None:
        self.assertEqual(format_timestamp(timedelta(seconds=-5)), "00:00.000")

    def test_rejects_unsupported_digit_count(self) -> None:
        with self.assertRaises(ValueError):
            format_timestamp(timedelta(0), digits=4)

    def test_formatted_values_parse_back(self) -> None:
        for value in (ts(minutes=3, seconds=7, ms=250), ts(2, 0, 1, 9)):
            with self.subTest(value=value):
                self.assertEqual(parse_timestamp(format_timestamp(value)), value)


class TestLines(unittest.TestCase):
    def test_parse_line_splits_time_and_text(self) -> None:
        self.assertEqual(parse_line("[00:12.000]Hello there"), (ts(seconds=12), "Hello there"))

    def test_parse_line_allows_empty_text(self) -> None:
        self.assertEqual(parse_line("[00:12.000]"), (ts(seconds=12), ""))

    def test_parse_line_rejects_metadata_tags_and_plain_text(self) -> None:
        self.assertIsNone(parse_line("[ar:Some Artist]"))
        self.assertIsNone(parse_line("just words"))
        self.assertFalse(is_timestamp_line("[]text"))

    def test_canonical_lines_survive_parse_and_format(self) -> None:
        for line in (
            "[00:00.000]",
            "[00:05.250]hello world",
            "[59:59.999]last [bracketed] words",
            "[1:00:00.000]one hour",
            "[12:34:56.789]long",
        ):
            with self.subTest(line=line):
                self.assertEqual(format_line(*parse_line(line)), line)

    def test_legacy_lines_survive_parse_and_format(self) -> None:
        for line in ("[00:00.00]", "[03:07.25]legacy", "[2:00:00.50]very long"):
            with self.subTest(line=line):
                self.assertEqual(format_line(*parse_line(line), digits=2), line)

    def test_fixed_hour_pattern_parses_back(self) -> None:
        cases = {
            timedelta(0): "00:00:00.000",
            ts(minutes=1, seconds=30): "00:01:30.000",
            ts(25, 0, 0, 1): "25:00:00.001",
        }
        for value, rendered in cases.items():
            with self.subTest(rendered=rendered):
                self.assertEqual(format_timestamp(value, always_hours=True), rendered)
                self.assertEqual(parse_timestamp(rendered), value)

    def test_format_line(self) -> None:
        self.assertEqual(format_line(ts(minutes=1, ms=500), "Go"), "[01:00.500]Go")
        self.assertEqual(format_line(ts(minutes=1, ms=500), "Go", digits=2), "[01:00.50]Go")


if __name__ == "__main__":
    unittest.main()
