"""Tests for the notifier module."""

import datetime
import unittest
from unittest.mock import patch

import pytz

from namaz.notifier import StateChangeNotifier, notify_azan, notify_jamat, notify_state_change
from namaz.prayers import PrayerInstant, PrayerName
from namaz.state import CallMoment, CongregationWait, NextPrayer, PreCongregation


def at(hour, minute):
    return pytz.utc.localize(datetime.datetime(2025, 3, 1, hour, minute))


MAGHRIB = PrayerInstant(PrayerName.MAGHRIB, at(18, 15), at(18, 20))
ISHA = PrayerInstant(PrayerName.ISHA, at(19, 30), at(19, 45))


class TestNotifyAzan(unittest.TestCase):
    @patch("namaz.notifier._send_plyer")
    def test_calls_send_plyer(self, mock_plyer):
        notify_azan("Maghrib")
        mock_plyer.assert_called_once()
        args = mock_plyer.call_args[0]
        self.assertIn("Maghrib", args[0])
        self.assertIn("Azan", args[0])


class TestNotifyJamat(unittest.TestCase):
    @patch("namaz.notifier._send_plyer")
    def test_mentions_seconds(self, mock_plyer):
        notify_jamat("Isha", 30)
        args = mock_plyer.call_args[0]
        self.assertIn("Jamat", args[0])
        self.assertIn("30 seconds", args[1])


class TestNotifyStateChange(unittest.TestCase):
    @patch("namaz.notifier._send_plyer")
    def test_entering_call_moment(self, mock_plyer):
        self.assertTrue(notify_state_change(NextPrayer(MAGHRIB, 5), CallMoment(MAGHRIB)))
        mock_plyer.assert_called_once()

    @patch("namaz.notifier._send_plyer")
    def test_staying_in_call_moment_is_silent(self, mock_plyer):
        self.assertFalse(notify_state_change(CallMoment(MAGHRIB), CallMoment(MAGHRIB)))
        mock_plyer.assert_not_called()

    @patch("namaz.notifier._send_plyer")
    def test_pre_congregation_countdown_ticks_are_silent(self, mock_plyer):
        notify_state_change(PreCongregation(ISHA, 30), PreCongregation(ISHA, 29))
        mock_plyer.assert_not_called()

    @patch("namaz.notifier._send_plyer")
    def test_entering_pre_congregation(self, mock_plyer):
        self.assertTrue(notify_state_change(CongregationWait(ISHA, 31), PreCongregation(ISHA, 30)))
        self.assertIn("Isha", mock_plyer.call_args[0][0])

    @patch("namaz.notifier._send_plyer")
    def test_other_states_are_silent(self, mock_plyer):
        self.assertFalse(notify_state_change(CallMoment(ISHA), CongregationWait(ISHA, 600)))
        self.assertFalse(notify_state_change(None, None))
        mock_plyer.assert_not_called()

    @patch("namaz.notifier._send_plyer")
    def test_first_state_can_notify(self, mock_plyer):
        self.assertTrue(notify_state_change(None, CallMoment(ISHA)))


class TestStateChangeNotifier(unittest.TestCase):
    @patch("namaz.notifier._send_plyer")
    def test_notifies_once_per_entry(self, mock_plyer):
        listener = StateChangeNotifier()
        listener(NextPrayer(MAGHRIB, 1))
        listener(CallMoment(MAGHRIB))
        listener(CallMoment(MAGHRIB))
        listener(CongregationWait(MAGHRIB, 200))
        self.assertEqual(mock_plyer.call_count, 1)


if __name__ == "__main__":
    unittest.main()
