"""Prayer instants, the day's prayer set and the timing configuration."""

import datetime
import enum
from dataclasses import dataclass, field

ONE_DAY = datetime.timedelta(days=1)
ONE_SECOND = datetime.timedelta(seconds=1)

UNAVAILABLE_LABEL = "-"
DEFAULT_TARAWEEH_DURATION_MINUTES = 60


class PrayerName(enum.Enum):
    FAJR = "Fajr"
    DHUHR = "Dhuhr"
    ASR = "Asr"
    MAGHRIB = "Maghrib"
    ISHA = "Isha"
    TARAWEEH = "Taraweeh"


# Canonical order: tie-break order for the resolver and the fallback.
PRAYER_ORDER = list(PrayerName)
PRAYER_DISPLAY = {
    PrayerName.FAJR: "Fajr",
    PrayerName.DHUHR: "Dhuhr",
    PrayerName.ASR: "Asr",
    PrayerName.MAGHRIB: "Maghrib",
    PrayerName.ISHA: "Isha",
    PrayerName.TARAWEEH: "Taraweeh",
}


class ScheduleUnavailableError(RuntimeError):
    """Raised when a prayer set carrying an upstream error reaches the core."""


class EmptyScheduleError(ValueError):
    """Raised when a prayer set has no prayers to resolve against."""


def format_label(moment: datetime.datetime) -> str:
    """Render an instant the way the prayer list shows it, e.g. '05:20 AM'."""
    return moment.strftime("%I:%M %p")


@dataclass(frozen=True)
class PrayerInstant:
    name: PrayerName
    call_time: datetime.datetime
    congregation_time: datetime.datetime
    call_time_label: str = ""
    congregation_time_label: str = ""

    def __post_init__(self):
        if self.congregation_time < self.call_time:
            raise ValueError(
                f"{self.name.value}: congregation time {self.congregation_time} "
                f"is before call time {self.call_time}"
            )
        if not self.call_time_label:
            object.__setattr__(self, "call_time_label", format_label(self.call_time))
        if not self.congregation_time_label:
            object.__setattr__(
                self, "congregation_time_label", format_label(self.congregation_time)
            )

    @property
    def display_name(self) -> str:
        return PRAYER_DISPLAY[self.name]


@dataclass(frozen=True)
class PrayerSet:
    """
    Today's prayers in canonical order, replaced wholesale on every refresh.

    A set built with ``error`` means the schedule could not be produced;
    it must not be handed to the resolver.
    """

    prayers: tuple = ()
    error: str | None = None

    def __post_init__(self):
        prayers = tuple(self.prayers)
        object.__setattr__(self, "prayers", prayers)
        positions = [PRAYER_ORDER.index(p.name) for p in prayers]
        if positions != sorted(set(positions)):
            raise ValueError(
                "Prayers must be unique and in canonical order, got "
                + ", ".join(p.name.value for p in prayers)
            )

    @classmethod
    def unavailable(cls, message: str) -> "PrayerSet":
        return cls(prayers=(), error=message or "Schedule unavailable")

    @property
    def available(self) -> bool:
        return self.error is None

    def get(self, name: PrayerName) -> PrayerInstant | None:
        for prayer in self.prayers:
            if prayer.name is name:
                return prayer
        return None

    def __iter__(self):
        return iter(self.prayers)

    def __len__(self):
        return len(self.prayers)


@dataclass(frozen=True)
class LogicConfig:
    pre_call_seconds: int = 60
    call_duration_seconds: int = 60
    pre_congregation_seconds: int = 30
    default_prayer_duration_minutes: int = 10


@dataclass(frozen=True)
class TaraweehConfig:
    # The two offsets are read by the schedule builder, not by the resolver.
    normal_offset_minutes: int = 0
    special_offset_minutes: int = 0
    duration_minutes: int | None = DEFAULT_TARAWEEH_DURATION_MINUTES


def seconds_until(target_dt: datetime.datetime, now: datetime.datetime) -> int:
    """Return whole seconds from now until target_dt, floored (negative if past)."""
    return (target_dt - now) // ONE_SECOND


def next_calendar_day(moment: datetime.datetime) -> datetime.datetime:
    """
    Return the same wall-clock time on the following calendar day.

    pytz zones need re-localizing so the UTC offset matches the new date.
    """
    tz = moment.tzinfo
    if tz is not None and hasattr(tz, "localize"):
        return tz.localize(moment.replace(tzinfo=None) + ONE_DAY)
    return moment + ONE_DAY


def time_str_to_dt(time_str: str, date: datetime.date, tz=None) -> datetime.datetime:
    """
    Convert an 'HH:MM' string to a datetime on the given date.

    If tz is None, returns a naive datetime. Raises ValueError on bad input.
    """
    hour, minute = map(int, time_str.strip()[:5].split(":"))
    naive = datetime.datetime.combine(date, datetime.time(hour, minute))
    if tz is None:
        return naive
    return tz.localize(naive)
