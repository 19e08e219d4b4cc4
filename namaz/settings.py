"""Kiosk settings persisted as JSON in the user's config directory."""

import copy
import json
import logging
import os

from namaz.prayers import PRAYER_ORDER, LogicConfig, PrayerName, TaraweehConfig

logger = logging.getLogger(__name__)


class SettingsError(ValueError):
    """Raised when settings hold values the display cannot run on."""


DEFAULT_LOCATION = {
    "city": "Jakarta",
    "country": "ID",
    "lat": -6.2088,
    "lon": 106.8456,
    "timezone": "Asia/Jakarta",
}

# Calculation method: 11 = Egyptian GAES (common in many countries)
# 2 = ISNA, 3 = MWL, 4 = Mecca, 5 = Karachi, 11 = Egypt, 15 = Dubai, 20 = Turkey
DEFAULT_METHOD = 11

DEFAULT_SETTINGS = {
    "masjid_name": "Masjid",
    "sub_location": DEFAULT_LOCATION["city"],
    "location": DEFAULT_LOCATION,
    "method": DEFAULT_METHOD,
    "logic": {
        "pre_call_seconds": 60,
        "call_duration_seconds": 60,
        "pre_congregation_seconds": 30,
        "default_prayer_duration_minutes": 10,
    },
    "taraweeh": {
        "normal_offset_minutes": 0,
        "special_offset_minutes": 0,
        "duration_minutes": 60,
    },
    # Minutes from adhan to iqama.
    "congregation_offsets": {
        "Fajr": 20,
        "Dhuhr": 15,
        "Asr": 15,
        "Maghrib": 5,
        "Isha": 15,
    },
    "ramadan_override": None,  # None = follow the Hijri month
    "special_taraweeh": False,
}

CONFIG_DIR = os.environ.get(
    "NAMAZ_KIOSK_HOME", os.path.join(os.path.expanduser("~"), ".namazkiosk")
)
CONFIG_FILE = os.path.join(CONFIG_DIR, "settings.json")


def _merge(defaults: dict, overrides: dict) -> dict:
    merged = copy.deepcopy(defaults)
    for key, value in overrides.items():
        if isinstance(merged.get(key), dict) and isinstance(value, dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _check_duration(section: str, key: str, value, allow_none: bool = False) -> None:
    if value is None and allow_none:
        return
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise SettingsError(f"{section}.{key} must be a number, got {value!r}")
    if value < 0:
        raise SettingsError(f"{section}.{key} must not be negative, got {value!r}")


def validate_settings(settings: dict) -> None:
    """
    Reject settings the resolver must never see.

    Raises SettingsError for negative or non-numeric durations and offsets.
    """
    for section in ("location", "logic", "taraweeh", "congregation_offsets"):
        if not isinstance(settings.get(section), dict):
            raise SettingsError(f"{section} must be an object")

    for key in ("masjid_name", "sub_location"):
        if not isinstance(settings.get(key), str):
            raise SettingsError(f"{key} must be text, got {settings.get(key)!r}")

    for key in DEFAULT_SETTINGS["logic"]:
        _check_duration("logic", key, settings["logic"].get(key))

    taraweeh = settings["taraweeh"]
    _check_duration("taraweeh", "normal_offset_minutes", taraweeh.get("normal_offset_minutes"))
    _check_duration("taraweeh", "special_offset_minutes", taraweeh.get("special_offset_minutes"))
    _check_duration("taraweeh", "duration_minutes", taraweeh.get("duration_minutes"), allow_none=True)

    for name, offset in settings["congregation_offsets"].items():
        if name not in DEFAULT_SETTINGS["congregation_offsets"]:
            raise SettingsError(f"Unknown prayer in congregation_offsets: {name!r}")
        _check_duration("congregation_offsets", name, offset)

    location = settings["location"]
    try:
        float(location["lat"])
        float(location["lon"])
    except (KeyError, TypeError, ValueError) as exc:
        raise SettingsError(f"Invalid location coordinates: {location!r}") from exc


def load_settings() -> dict:
    """
    Load saved settings merged over DEFAULT_SETTINGS.

    Missing, unreadable or invalid files fall back to the defaults.
    """
    if not os.path.isfile(CONFIG_FILE):
        return copy.deepcopy(DEFAULT_SETTINGS)
    try:
        with open(CONFIG_FILE, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise SettingsError("Settings file does not hold a JSON object")
        settings = _merge(DEFAULT_SETTINGS, data)
        validate_settings(settings)
        return settings
    except (OSError, ValueError) as exc:
        logger.warning("Ignoring settings file %s: %s", CONFIG_FILE, exc)
    return copy.deepcopy(DEFAULT_SETTINGS)


def save_settings(settings: dict) -> None:
    """Validate and write settings to the config file."""
    merged = _merge(DEFAULT_SETTINGS, settings)
    validate_settings(merged)
    os.makedirs(CONFIG_DIR, exist_ok=True)
    with open(CONFIG_FILE, "w", encoding="utf-8") as f:
        json.dump(merged, f, indent=2)
    logger.info("Saved settings to %s", CONFIG_FILE)


def clear_settings() -> None:
    """Remove the saved settings so the defaults apply again."""
    if os.path.isfile(CONFIG_FILE):
        os.remove(CONFIG_FILE)


def logic_config_from(settings: dict) -> LogicConfig:
    logic = settings["logic"]
    return LogicConfig(**{key: logic[key] for key in DEFAULT_SETTINGS["logic"]})


def taraweeh_config_from(settings: dict) -> TaraweehConfig:
    taraweeh = settings["taraweeh"]
    return TaraweehConfig(**{key: taraweeh[key] for key in DEFAULT_SETTINGS["taraweeh"]})


def congregation_offsets_from(settings: dict) -> dict:
    """Map PrayerName -> minutes from adhan to iqama, for the five daily prayers."""
    offsets = settings["congregation_offsets"]
    return {
        name: offsets.get(name.value, 0)
        for name in PRAYER_ORDER
        if name is not PrayerName.TARAWEEH
    }
