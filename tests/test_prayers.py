"""Tests for the prayers module."""

import datetime
import unittest

import pytz

from namaz.prayers import (
    PrayerInstant,
    PrayerName,
    PrayerSet,
    next_calendar_day,
    seconds_until,
    time_str_to_dt,
)


def at(hour, minute, second=0):
    return pytz.utc.localize(datetime.datetime(2025, 3, 1, hour, minute, second))


class TestPrayerInstant(unittest.TestCase):
    def test_labels_default_to_clock_time(self):
        p = PrayerInstant(PrayerName.MAGHRIB, at(18, 15), at(18, 20))
        self.assertEqual(p.call_time_label, "06:15 PM")
        self.assertEqual(p.congregation_time_label, "06:20 PM")
        self.assertEqual(p.display_name, "Maghrib")

    def test_explicit_label_kept(self):
        p = PrayerInstant(PrayerName.TARAWEEH, at(20, 30), at(20, 30), congregation_time_label="-")
        self.assertEqual(p.congregation_time_label, "-")

    def test_congregation_before_call_rejected(self):
        with self.assertRaises(ValueError):
            PrayerInstant(PrayerName.FAJR, at(5, 0), at(4, 59))


class TestPrayerSet(unittest.TestCase):
    def test_canonical_order_enforced(self):
        fajr = PrayerInstant(PrayerName.FAJR, at(5, 0), at(5, 20))
        dhuhr = PrayerInstant(PrayerName.DHUHR, at(12, 0), at(12, 15))
        PrayerSet((fajr, dhuhr))
        with self.assertRaises(ValueError):
            PrayerSet((dhuhr, fajr))
        with self.assertRaises(ValueError):
            PrayerSet((fajr, fajr))

    def test_get(self):
        fajr = PrayerInstant(PrayerName.FAJR, at(5, 0), at(5, 20))
        prayers = PrayerSet([fajr])
        self.assertIs(prayers.get(PrayerName.FAJR), fajr)
        self.assertIsNone(prayers.get(PrayerName.TARAWEEH))
        self.assertEqual(len(prayers), 1)
        self.assertIsInstance(prayers.prayers, tuple)

    def test_unavailable(self):
        prayers = PrayerSet.unavailable("No Fajr time")
        self.assertFalse(prayers.available)
        self.assertEqual(prayers.error, "No Fajr time")
        self.assertEqual(len(prayers), 0)


class TestTimeHelpers(unittest.TestCase):
    def test_seconds_until_floors(self):
        now = at(10, 0)
        self.assertEqual(seconds_until(now + datetime.timedelta(seconds=300), now), 300)
        self.assertEqual(seconds_until(now + datetime.timedelta(milliseconds=1500), now), 1)
        self.assertEqual(seconds_until(now - datetime.timedelta(milliseconds=500), now), -1)

    def test_next_calendar_day_utc(self):
        self.assertEqual(next_calendar_day(at(5, 0)) - at(5, 0), datetime.timedelta(hours=24))

    def test_next_calendar_day_keeps_wall_clock(self):
        tz = pytz.timezone("Europe/London")
        before = tz.localize(datetime.datetime(2025, 3, 29, 5, 0))
        after = next_calendar_day(before)
        self.assertEqual(after.hour, 5)
        self.assertEqual(after.date(), datetime.date(2025, 3, 30))
        self.assertEqual(after - before, datetime.timedelta(hours=23))

    def test_time_str_to_dt(self):
        tz = pytz.timezone("Asia/Jakarta")
        dt = time_str_to_dt("12:00", datetime.date(2025, 3, 1), tz)
        self.assertEqual((dt.hour, dt.minute), (12, 0))
        self.assertEqual(dt.utcoffset(), datetime.timedelta(hours=7))

    def test_naive_without_tz(self):
        dt = time_str_to_dt("18:15", datetime.date(2025, 3, 1))
        self.assertEqual(dt.hour, 18)
        self.assertIsNone(dt.tzinfo)

    def test_invalid_time_raises(self):
        with self.assertRaises(ValueError):
            time_str_to_dt("--:--", datetime.date(2025, 3, 1))


if __name__ == "__main__":
    unittest.main()
