import unittest
from datetime import date, datetime, timedelta, timezone

from inventoria.core.dates import days_until, end_of_day, normalize_date, start_of_day


class NormalizeDateTest(unittest.TestCase):
    def test_formats(self):
        cases = [
            ("25/12/2024", date(2024, 12, 25)),
            ("2024-12-25", date(2024, 12, 25)),
            ("2024-12-25T10:30:00Z", date(2024, 12, 25)),
            ("2024-12-25T10:30:00+02:00", date(2024, 12, 25)),
            (datetime(2024, 12, 25, 8, 0), date(2024, 12, 25)),
            (date(2024, 12, 25), date(2024, 12, 25)),
        ]
        for value, expected in cases:
            with self.subTest(value=value):
                self.assertEqual(normalize_date(value), expected)

    def test_unparseable_values(self):
        for value in (None, "", "   ", "not a date", "31/02/2024", "1/2", 42):
            with self.subTest(value=value):
                self.assertIsNone(normalize_date(value))


class DayBoundaryTest(unittest.TestCase):
    def test_start_of_day_keeps_timezone(self):
        tz = timezone(timedelta(hours=5))
        now = datetime(2024, 3, 10, 17, 45, tzinfo=tz)
        self.assertEqual(start_of_day(now), datetime(2024, 3, 10, tzinfo=tz))

    def test_end_of_day(self):
        self.assertEqual(
            end_of_day("2024-03-10"),
            datetime(2024, 3, 10, 23, 59, 59, 999999),
        )
        self.assertIsNone(end_of_day(None))

    def test_days_until(self):
        today = date(2024, 3, 10)
        self.assertEqual(days_until("2024-03-15", today=today), 5)
        self.assertEqual(days_until(date(2024, 3, 9), today=today), -1)
        self.assertIsNone(days_until("", today=today))


if __name__ == "__main__":
    unittest.main()
