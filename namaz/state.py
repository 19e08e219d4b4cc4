"""Display states the hero panel can be in. Exactly one is active at a time."""

from dataclasses import dataclass

from namaz.prayers import PrayerInstant


@dataclass(frozen=True)
class DisplayState:
    prayer: PrayerInstant

    kind = "display_state"

    @property
    def countdown_seconds(self) -> int:
        return 0


@dataclass(frozen=True)
class NextPrayer(DisplayState):
    countdown_seconds: int = 0
    next_day: bool = False

    kind = "next_prayer"


@dataclass(frozen=True)
class PreCall(DisplayState):
    countdown_seconds: int = 0

    kind = "pre_call"


@dataclass(frozen=True)
class CallMoment(DisplayState):
    kind = "call_moment"


@dataclass(frozen=True)
class CongregationWait(DisplayState):
    countdown_seconds: int = 0

    kind = "congregation_wait"


@dataclass(frozen=True)
class PreCongregation(DisplayState):
    countdown_seconds: int = 0

    kind = "pre_congregation"


@dataclass(frozen=True)
class PrayerInProgress(DisplayState):
    kind = "prayer_in_progress"
