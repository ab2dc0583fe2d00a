"""Per-field value canonicalization for sheet cells.

Every function here is pure and total: unrecognized input falls back to
``None`` or a lowercased passthrough, so one odd cell never aborts its row.
Sentinel strings are resolved only by :func:`clean_value`; the other
normalizers take its ``Optional[str]`` result.
"""
from __future__ import annotations
import re
from datetime import date
from typing import Dict, Optional


SENTINELS = {"-", "—"}

MAX_RANGE = "maximale_reichweite"
STANDARD_RANGE = "standard"
TOW_HITCH_UNAVAILABLE = "nv"

COUNTRY_MAP: Dict[str, str] = {
    "belgien": "be", "belgium": "be", "belgique": "be", "belgie": "be", "belgië": "be",
    "bulgarien": "bg", "bulgaria": "bg",
    "dänemark": "dk", "daenemark": "dk", "denmark": "dk", "danmark": "dk",
    "deutschland": "de", "germany": "de", "allemagne": "de",
    "estland": "ee", "estonia": "ee",
    "finnland": "fi", "finland": "fi", "suomi": "fi",
    "frankreich": "fr", "france": "fr",
    "griechenland": "gr", "greece": "gr",
    "irland": "ie", "ireland": "ie",
    "italien": "it", "italy": "it", "italia": "it",
    "kroatien": "hr", "croatia": "hr", "hrvatska": "hr",
    "lettland": "lv", "latvia": "lv",
    "litauen": "lt", "lithuania": "lt",
    "luxemburg": "lu", "luxembourg": "lu",
    "malta": "mt",
    "niederlande": "nl", "netherlands": "nl", "nederland": "nl", "holland": "nl",
    "norwegen": "no", "norway": "no", "norge": "no",
    "österreich": "at", "oesterreich": "at", "austria": "at",
    "polen": "pl", "poland": "pl", "polska": "pl",
    "portugal": "pt",
    "rumänien": "ro", "rumaenien": "ro", "romania": "ro",
    "schweden": "se", "sweden": "se", "sverige": "se",
    "schweiz": "ch", "switzerland": "ch", "suisse": "ch", "svizzera": "ch",
    "slowakei": "sk", "slovakia": "sk",
    "slowenien": "si", "slovenia": "si",
    "spanien": "es", "spain": "es", "españa": "es", "espana": "es", "spanje": "es",
    "tschechien": "cz", "czechia": "cz", "czech republic": "cz",
    "uk": "uk", "gb": "uk", "großbritannien": "uk", "grossbritannien": "uk",
    "united kingdom": "uk", "vereinigtes königreich": "uk", "england": "uk",
    "ungarn": "hu", "hungary": "hu", "magyarország": "hu",
    "zypern": "cy", "cyprus": "cy",
}

COUNTRY_CODES = set(COUNTRY_MAP.values())

MODEL_MAP: Dict[str, str] = {
    "standard": "standard", "std": "standard",
    "premium": "premium", "long range": "premium",
    "performance": "performance", "perf": "performance",
}

COLOR_MAP: Dict[str, str] = {
    "pearl white": "pearl_white", "perlweiß": "pearl_white", "perlweiss": "pearl_white",
    "weiß": "pearl_white", "weiss": "pearl_white", "white": "pearl_white",
    "solid black": "solid_black", "schwarz": "solid_black", "black": "solid_black",
    "diamond black": "diamond_black", "diamantschwarz": "diamond_black",
    "stealth grey": "stealth_grey", "stealth gray": "stealth_grey", "grau": "stealth_grey",
    "quicksilver": "quicksilver", "silber": "quicksilver",
    "ultra red": "ultra_red", "rot": "ultra_red", "red": "ultra_red",
    "glacier blue": "glacier_blue", "gletscherblau": "glacier_blue",
    "marine blue": "marine_blue", "marineblau": "marine_blue", "blau": "marine_blue",
    "deep blue metallic": "deep_blue", "deep blue": "deep_blue",
    "midnight cherry red": "midnight_cherry", "midnight cherry": "midnight_cherry",
    "midnight silver metallic": "midnight_silver", "midnight silver": "midnight_silver",
    "red multi-coat": "red_multi", "red multi coat": "red_multi",
    "silver metallic": "silver_metallic",
}

DRIVE_MAP: Dict[str, str] = {
    "rwd": "rwd", "hinterradantrieb": "rwd", "heckantrieb": "rwd", "rear-wheel drive": "rwd",
    "awd": "awd", "allradantrieb": "awd", "allrad": "awd", "dual motor": "awd",
    "all-wheel drive": "awd",
}

INTERIOR_MAP: Dict[str, str] = {
    "schwarz": "black", "black": "black", "all black": "black",
    "weiß": "white", "weiss": "white", "white": "white",
}

AUTOPILOT_MAP: Dict[str, str] = {
    "kein": "none", "keiner": "none", "none": "none", "nein": "none", "no": "none",
    "ap": "ap", "autopilot": "ap",
    "eap": "eap", "enhanced autopilot": "eap",
    "eap transfer": "eap_transfer", "eap-transfer": "eap_transfer",
    "fsd": "fsd", "full self-driving": "fsd",
    "fsd transfer": "fsd_transfer", "fsd-transfer": "fsd_transfer",
}

TOW_HITCH_MAP: Dict[str, str] = {
    "ja": "ja", "yes": "ja", "y": "ja",
    "nein": "nein", "no": "nein", "n": "nein",
    "n.v.": TOW_HITCH_UNAVAILABLE, "nv": TOW_HITCH_UNAVAILABLE,
    "nicht verfügbar": TOW_HITCH_UNAVAILABLE,
}

BATTERY_MAP: Dict[str, str] = {
    "max": MAX_RANGE, "maximale reichweite": MAX_RANGE, "long range": MAX_RANGE,
    "std": STANDARD_RANGE, "standard": STANDARD_RANGE,
}

# Trims of the Model 3 line that cannot be ordered with a tow hitch.
MODEL_3_TOW_HITCH_AVAILABLE: Dict[str, bool] = {
    "standard": True,
    "premium": True,
    "performance": False,
}

FLAG_PREFIX_RE = re.compile(r"^[\U0001F1E6-\U0001F1FF]+\s*")
CODE_AND_NAME_RE = re.compile(r"^([a-z]{2})\s+(.+)$")
LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")
WHEELS_RE = re.compile(r"(\d{2})")


def clean_value(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    text = value.strip()
    if not text or text in SENTINELS:
        return None
    return text


def parse_number(value: Optional[str]) -> Optional[int]:
    text = clean_value(value)
    if text is None:
        return None
    m = LEADING_INT_RE.match(text)
    return int(m.group(1)) if m else None


def _lookup(value: Optional[str], table: Dict[str, str]) -> Optional[str]:
    if not value:
        return None
    key = value.strip().lower()
    if not key:
        return None
    return table.get(key, key)


def normalize_country(value: Optional[str]) -> Optional[str]:
    """Map a flag-prefixed or localized country name to its 2-letter code."""
    if not value:
        return None
    key = FLAG_PREFIX_RE.sub("", value.strip()).strip().lower()
    if not key:
        return None
    if key in COUNTRY_MAP:
        return COUNTRY_MAP[key]
    m = CODE_AND_NAME_RE.match(key)
    if m:
        code = COUNTRY_MAP.get(m.group(1), m.group(1))
        if code in COUNTRY_CODES:
            return code
        return COUNTRY_MAP.get(m.group(2), key)
    return key


def normalize_model(value: Optional[str]) -> Optional[str]:
    return _lookup(value, MODEL_MAP)


def normalize_color(value: Optional[str]) -> Optional[str]:
    return _lookup(value, COLOR_MAP)


def normalize_drive(value: Optional[str]) -> Optional[str]:
    return _lookup(value, DRIVE_MAP)


def normalize_interior(value: Optional[str]) -> Optional[str]:
    return _lookup(value, INTERIOR_MAP)


def normalize_autopilot(value: Optional[str]) -> Optional[str]:
    return _lookup(value, AUTOPILOT_MAP)


def normalize_tow_hitch(value: Optional[str]) -> Optional[str]:
    return _lookup(value, TOW_HITCH_MAP)


def normalize_wheels(value: Optional[str]) -> Optional[str]:
    # 18'' / 19 Zoll / 20" -> 18 / 19 / 20
    if not value:
        return None
    m = WHEELS_RE.search(value)
    return m.group(1) if m else value


def _trim_key(model: Optional[str]) -> Optional[str]:
    lower = (model or "").lower()
    for trim in ("performance", "premium", "standard"):
        if trim in lower:
            return trim
    return None


def map_battery_to_range(battery: Optional[str], model: Optional[str]) -> Optional[str]:
    if "performance" in (model or "").lower():
        return MAX_RANGE
    if not battery:
        return None
    return BATTERY_MAP.get(battery.strip().lower())


def map_tow_hitch(
    tow_hitch: Optional[str],
    model: Optional[str],
    availability: Optional[Dict[str, bool]] = None,
) -> Optional[str]:
    table = MODEL_3_TOW_HITCH_AVAILABLE if availability is None else availability
    trim = _trim_key(model)
    if trim is not None and table.get(trim) is False:
        return TOW_HITCH_UNAVAILABLE
    return tow_hitch


def default_range_for_trim(model: Optional[str]) -> str:
    return STANDARD_RANGE if (model or "").strip().lower() == "standard" else MAX_RANGE


def parse_german_date(value: Optional[str]) -> Optional[date]:
    """Parse ``DD.MM.YYYY``; out-of-window years and bad parts give ``None``."""
    text = clean_value(value)
    if text is None:
        return None
    parts = text.split(".")
    if len(parts) != 3:
        return None
    try:
        day, month, year = (int(p) for p in parts)
    except ValueError:
        return None
    if year < 2020 or year > 2030:
        return None
    try:
        return date(year, month, day)
    except ValueError:
        return None


def days_between(start: Optional[str], end: Optional[str]) -> Optional[int]:
    a = parse_german_date(start)
    b = parse_german_date(end)
    if a is None or b is None:
        return None
    diff = (b - a).days
    if diff < 0 or diff > 365:
        return None
    return diff
