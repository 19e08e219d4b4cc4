"""1 Hz re-evaluation loop for the hero display state."""

import datetime
import logging

import pytz

from namaz.prayers import LogicConfig, PrayerSet, TaraweehConfig
from namaz.resolver import resolve_display_state

logger = logging.getLogger(__name__)

REFRESH_MS = 1000  # re-evaluate every second


def utc_now() -> datetime.datetime:
    return datetime.datetime.now(pytz.utc)


class HeroTicker:
    """
    Owns the last computed DisplayState and keeps it current.

    Timers come from an ``after(ms, callback) -> handle`` /
    ``after_cancel(handle)`` pair, e.g. a Tk root's ``after`` and
    ``after_cancel``, so every evaluation runs on the GUI thread.
    Tests pass a fake pair and fire the callbacks by hand.
    """

    def __init__(
        self,
        after,
        after_cancel,
        clock=utc_now,
        logic: LogicConfig | None = None,
        taraweeh: TaraweehConfig | None = None,
        interval_ms: int = REFRESH_MS,
    ):
        self._after = after
        self._after_cancel = after_cancel
        self._clock = clock
        self._interval_ms = interval_ms

        self._prayer_set: PrayerSet | None = None
        self._logic = logic or LogicConfig()
        self._taraweeh = taraweeh or TaraweehConfig()

        self._state = None
        self._evaluated_at = None
        self._timer = None
        self._running = False
        self._listeners: list = []

    @property
    def state(self):
        """Last computed DisplayState, or None while no usable schedule is loaded."""
        return self._state

    @property
    def evaluated_at(self):
        """The clock reading the current state was computed from."""
        return self._evaluated_at

    @property
    def prayer_set(self):
        return self._prayer_set

    @property
    def logic(self) -> LogicConfig:
        return self._logic

    @property
    def taraweeh(self) -> TaraweehConfig:
        return self._taraweeh

    @property
    def running(self) -> bool:
        return self._running

    def subscribe(self, listener):
        """
        Register listener(state), called after every evaluation.
        Listeners read the matching snapshot from ``evaluated_at``,
        ``prayer_set``, ``logic`` and ``taraweeh``.

        Returns a function that removes the listener again.
        """
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def start(self) -> None:
        if self._running:
            return
        self._running = True
        logger.debug("Hero ticker started")
        self._tick()

    def stop(self) -> None:
        if not self._running:
            return
        self._running = False
        if self._timer is not None:
            self._after_cancel(self._timer)
            self._timer = None
        logger.debug("Hero ticker stopped")

    def update(self, prayer_set=None, logic=None, taraweeh=None) -> None:
        """
        Swap in a new schedule and/or settings and re-evaluate immediately,
        outside the one-second cadence.
        """
        if prayer_set is not None:
            self._prayer_set = prayer_set
        if logic is not None:
            self._logic = logic
        if taraweeh is not None:
            self._taraweeh = taraweeh
        if self._running:
            self.evaluate()

    def evaluate(self):
        """Recompute the state from the current snapshot and a fresh clock reading."""
        prayer_set = self._prayer_set
        now = self._clock()
        self._evaluated_at = now
        if prayer_set is None or not prayer_set.available or not len(prayer_set):
            self._state = None
        else:
            self._state = resolve_display_state(
                prayer_set, self._logic, self._taraweeh, now
            )
        self._publish(self._state)
        return self._state

    def _tick(self) -> None:
        self._timer = None
        if not self._running:
            return
        try:
            self.evaluate()
        finally:
            if self._running:
                self._timer = self._after(self._interval_ms, self._tick)

    def _publish(self, state) -> None:
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                logger.exception("Display listener %r failed", listener)
