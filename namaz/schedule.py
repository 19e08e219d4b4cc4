"""Fetch prayer times from the Aladhan API and build today's PrayerSet."""

import datetime
import logging

import pytz
import requests

from namaz.prayers import (
    PRAYER_ORDER,
    UNAVAILABLE_LABEL,
    PrayerInstant,
    PrayerName,
    PrayerSet,
    TaraweehConfig,
    time_str_to_dt,
)
from namaz.settings import (
    DEFAULT_METHOD,
    congregation_offsets_from,
    taraweeh_config_from,
)

logger = logging.getLogger(__name__)

ALADHAN_BASE = "https://api.aladhan.com/v1"

DAILY_PRAYERS = [name for name in PRAYER_ORDER if name is not PrayerName.TARAWEEH]
RAMADAN_MONTH = 9


def fetch_prayer_times(
    lat: float, lon: float, date: datetime.date = None, method: int = DEFAULT_METHOD
) -> dict:
    """
    Fetch prayer times and Hijri date for given coordinates and date.

    Returns a dict with:
        timings: {prayer_name: "HH:MM"} for the five daily prayers
        hijri: {day, month_number, month_name, month_ar, year}
        gregorian: {date_str, weekday}
    Raises requests.RequestException or ValueError on failure.
    """
    if date is None:
        date = datetime.date.today()
    date_str = date.strftime("%d-%m-%Y")
    url = f"{ALADHAN_BASE}/timings/{date_str}"
    params = {
        "latitude": lat,
        "longitude": lon,
        "method": method,
    }
    resp = requests.get(url, params=params, timeout=10)
    resp.raise_for_status()
    body = resp.json()
    if body.get("code") != 200:
        raise ValueError(f"Aladhan API error: {body.get('status')}")

    data = body["data"]
    raw_timings = data["timings"]

    # Strip timezone suffixes such as "04:30 (PKT)"; a missing prayer stays missing
    timings = {}
    for name in DAILY_PRAYERS:
        raw = raw_timings.get(name.value)
        if raw:
            timings[name.value] = raw[:5]

    hijri_data = data["date"]["hijri"]
    hijri = {
        "day": hijri_data["day"],
        "month_number": int(hijri_data["month"].get("number", 0)),
        "month_name": hijri_data["month"]["en"],
        "month_ar": hijri_data["month"].get("ar", ""),
        "year": hijri_data["year"],
    }

    greg_data = data["date"]["gregorian"]
    gregorian = {
        "date_str": greg_data.get("date", date_str),
        "weekday": greg_data.get("weekday", {}).get("en", ""),
    }

    return {"timings": timings, "hijri": hijri, "gregorian": gregorian}


def is_ramadan(hijri: dict | None, override: bool | None = None) -> bool:
    """Taraweeh is shown during Ramadan; ``override`` forces it on or off."""
    if override is not None:
        return bool(override)
    if not hijri:
        return False
    return hijri.get("month_number") == RAMADAN_MONTH


def build_prayer_set(
    timings: dict,
    date: datetime.date,
    tz,
    congregation_offsets: dict,
    taraweeh: TaraweehConfig = None,
    include_taraweeh: bool = False,
    special_night: bool = False,
) -> PrayerSet:
    """
    Turn 'HH:MM' timings into today's PrayerSet.

    Congregation time is the call time plus the prayer's offset in minutes.
    Taraweeh follows Isha's congregation by the normal (or, on a special
    night, the special) offset and has no separate congregation time.
    A missing or unparsable timing makes the whole set unavailable.
    """
    prayers = []
    for name in DAILY_PRAYERS:
        raw = timings.get(name.value)
        if not raw:
            return PrayerSet.unavailable(f"No {name.value} time for {date.isoformat()}")
        try:
            call_time = time_str_to_dt(raw, date, tz)
        except ValueError:
            return PrayerSet.unavailable(f"Invalid {name.value} time {raw!r}")
        offset = datetime.timedelta(minutes=congregation_offsets.get(name, 0))
        prayers.append(PrayerInstant(name, call_time, call_time + offset))

    if include_taraweeh:
        taraweeh = taraweeh or TaraweehConfig()
        isha = prayers[-1]
        minutes = taraweeh.special_offset_minutes if special_night else taraweeh.normal_offset_minutes
        start = isha.congregation_time + datetime.timedelta(minutes=minutes)
        prayers.append(
            PrayerInstant(
                PrayerName.TARAWEEH,
                start,
                start,
                congregation_time_label=UNAVAILABLE_LABEL,
            )
        )

    return PrayerSet(tuple(prayers))


def load_schedule(settings: dict, date: datetime.date = None) -> tuple:
    """
    Fetch and build the PrayerSet for ``date`` (today in the configured zone by default).

    Returns (prayer_set, fetched) where ``fetched`` is the raw fetch result,
    or None when the fetch failed and the set is marked unavailable.
    """
    location = settings["location"]
    try:
        tz = pytz.timezone(location["timezone"])
    except pytz.UnknownTimeZoneError:
        logger.warning("Unknown timezone %r, falling back to UTC", location["timezone"])
        tz = pytz.utc
    if date is None:
        date = datetime.datetime.now(tz).date()

    try:
        fetched = fetch_prayer_times(location["lat"], location["lon"], date, settings["method"])
    except (requests.RequestException, ValueError, KeyError) as exc:
        logger.error("Could not fetch prayer times for %s: %s", date, exc)
        return PrayerSet.unavailable(f"Could not load prayer times: {exc}"), None

    prayer_set = build_prayer_set(
        fetched["timings"],
        date,
        tz,
        congregation_offsets_from(settings),
        taraweeh_config_from(settings),
        include_taraweeh=is_ramadan(fetched["hijri"], settings.get("ramadan_override")),
        special_night=bool(settings.get("special_taraweeh")),
    )
    if not prayer_set.available:
        logger.error("Prayer schedule unavailable: %s", prayer_set.error)
    else:
        logger.info("Loaded %d prayers for %s", len(prayer_set), date)
    return prayer_set, fetched
