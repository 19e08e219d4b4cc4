"""Tests for schedule loading and day rollover in the kiosk app."""

import copy
import datetime
import unittest
from unittest.mock import MagicMock, patch

import pytz

from namaz.prayers import PrayerInstant, PrayerName, PrayerSet
from namaz.settings import DEFAULT_SETTINGS

try:
    import namaz_kiosk_app
    from namaz_kiosk_app import DAY_CHECK_MS, NamazKioskApp
    render = NamazKioskApp._render
except ImportError:  # tkinter missing from this interpreter
    namaz_kiosk_app = None


class FakeRoot:
    """Stands in for the Tk root's after/after_cancel."""

    def __init__(self):
        self.pending = {}
        self._next_id = 0

    def after(self, ms, callback):
        self._next_id += 1
        self.pending[self._next_id] = (ms, callback)
        return self._next_id

    def after_cancel(self, handle):
        self.pending.pop(handle, None)

    def fire(self, delay_ms):
        """Run every callback currently waiting with the given delay."""
        due = [h for h, (ms, _) in self.pending.items() if ms == delay_ms]
        for handle in due:
            _, callback = self.pending.pop(handle)
            callback()


class FakeClock:
    def __init__(self, now):
        self.now = now

    def __call__(self, tz=None):
        return self.now.astimezone(tz) if tz else self.now


def utc(*args):
    return pytz.utc.localize(datetime.datetime(*args))


def prayers_for(date):
    call = pytz.utc.localize(datetime.datetime.combine(date, datetime.time(5, 0)))
    return PrayerSet((PrayerInstant(PrayerName.FAJR, call, call + datetime.timedelta(minutes=20)),))


SETTINGS = copy.deepcopy(DEFAULT_SETTINGS)
SETTINGS["location"]["timezone"] = "UTC"

MARCH_1 = datetime.date(2025, 3, 1)
MARCH_2 = datetime.date(2025, 3, 2)


@unittest.skipIf(namaz_kiosk_app is None, "tkinter is not available")
class KioskAppTestCase(unittest.TestCase):
    def setUp(self):
        for name in ("_setup_window", "_build_ui", "_render", "_show_schedule"):
            patcher = patch.object(NamazKioskApp, name)
            patcher.start()
            self.addCleanup(patcher.stop)
        patcher = patch.object(NamazKioskApp, "_start_data_load")
        self.start_load = patcher.start()
        self.addCleanup(patcher.stop)
        patcher = patch("namaz_kiosk_app.load_settings", return_value=SETTINGS)
        patcher.start()
        self.addCleanup(patcher.stop)

        self.root = FakeRoot()
        self.clock = FakeClock(utc(2025, 3, 1, 23, 59, 58))
        self.app = NamazKioskApp(self.root, clock=self.clock)
        self.start_load.reset_mock()

    def deliver(self, date):
        self.app._on_data_loaded(date, SETTINGS, pytz.utc, prayers_for(date), {})


class TestLoadData(KioskAppTestCase):
    def test_load_across_midnight_keeps_fetch_date(self):
        fetched_for = []

        def slow_load(settings, date):
            fetched_for.append(date)
            self.clock.now = utc(2025, 3, 2, 0, 0, 5)
            return prayers_for(date), {"hijri": {}}

        with patch("namaz_kiosk_app.load_schedule", side_effect=slow_load):
            self.app._load_data()
        self.root.fire(0)

        self.assertEqual(fetched_for, [MARCH_1])
        self.assertEqual(self.app._loaded_for, MARCH_1)

        self.app._check_day_rollover()
        self.start_load.assert_called_once()

    def test_result_is_handed_to_ticker(self):
        with patch("namaz_kiosk_app.load_schedule", return_value=(prayers_for(MARCH_1), None)):
            self.app._load_data()
        self.root.fire(0)
        self.assertEqual(self.app.ticker.prayer_set, prayers_for(MARCH_1))
        self.assertIsNotNone(self.app.ticker.state)


class TestOverlappingLoads(KioskAppTestCase):
    def test_older_result_arriving_last_is_dropped(self):
        self.deliver(MARCH_2)
        self.deliver(MARCH_1)
        self.assertEqual(self.app._loaded_for, MARCH_2)
        self.assertEqual(self.app.prayer_set, prayers_for(MARCH_2))
        self.assertEqual(self.app.ticker.prayer_set, prayers_for(MARCH_2))
        self.assertEqual(NamazKioskApp._show_schedule.call_count, 1)

    def test_same_day_refresh_replaces_schedule(self):
        self.deliver(MARCH_1)
        refreshed = PrayerSet.unavailable("fetch failed")
        self.app._on_data_loaded(MARCH_1, SETTINGS, pytz.utc, refreshed, {})
        self.assertIs(self.app.prayer_set, refreshed)


class TestDayRollover(KioskAppTestCase):
    def test_no_reload_on_same_day(self):
        self.deliver(MARCH_1)
        self.app._check_day_rollover()
        self.start_load.assert_not_called()

    def test_reload_once_per_new_day(self):
        self.deliver(MARCH_1)
        self.clock.now = utc(2025, 3, 2, 0, 1)
        self.app._check_day_rollover()
        self.app._check_day_rollover()
        self.start_load.assert_called_once()

    def test_check_rearms_itself(self):
        self.app._check_day_rollover()
        delays = [ms for ms, _ in self.root.pending.values()]
        self.assertIn(DAY_CHECK_MS, delays)


class TestRender(KioskAppTestCase):
    def test_badges_use_ticker_snapshot(self):
        for name in ("lbl_clock", "lbl_date", "lbl_headline", "lbl_hero_name", "lbl_counter", "lbl_caption"):
            setattr(self.app, name, MagicMock())
        self.app.prayer_rows = {}
        self.deliver(MARCH_1)
        ticker = self.app.ticker
        state = ticker.state
        # wall clock has moved on since the ticker evaluated
        self.clock.now = utc(2025, 3, 2, 0, 0, 3)

        with patch("namaz_kiosk_app.list_badges", return_value={}) as mock_badges:
            render(self.app, state)

        mock_badges.assert_called_once_with(
            ticker.prayer_set, state, ticker.logic, ticker.taraweeh, utc(2025, 3, 1, 23, 59, 58)
        )
        self.app.lbl_clock.config.assert_called_with(text="23:59:58")


if __name__ == "__main__":
    unittest.main()
