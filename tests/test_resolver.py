import unittest
from unittest import mock

from timed_tags.resolver import attempt, first_result, is_empty


class TestResolver(unittest.TestCase):
    def test_returns_first_non_empty_result_and_stops(self) -> None:
        later = mock.Mock(return_value="late")
        result = first_result([lambda: None, lambda: [], lambda: "found", later])
        self.assertEqual(result, "found")
        later.assert_not_called()

    def test_returns_none_when_every_source_is_empty(self) -> None:
        self.assertIsNone(first_result([lambda: None, lambda: ""]))
        self.assertIsNone(first_result([]))

    def test_attempt_skips_getter_when_setup_yields_nothing(self) -> None:
        getter = mock.Mock()
        self.assertIsNone(attempt(lambda: None, getter)())
        getter.assert_not_called()

    def test_attempt_feeds_setup_value_to_getter(self) -> None:
        self.assertEqual(attempt(lambda: 20, lambda value: value + 1)(), 21)

    def test_exceptions_propagate(self) -> None:
        def broken():
            raise RuntimeError("boom")

        with self.assertRaises(RuntimeError):
            first_result([broken, lambda: "unused"])

    def test_is_empty(self) -> None:
        self.assertTrue(is_empty(None))
        self.assertTrue(is_empty([]))
        self.assertFalse(is_empty(0))
        self.assertFalse(is_empty(["x"]))


if __name__ == "__main__":
    unittest.main()
