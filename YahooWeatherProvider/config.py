"""Environment-driven settings and logging setup."""
import locale
import logging
import os
import sys
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

UNITS = ("metric", "imperial")


@dataclass
class Settings:
    lang: str
    units: str = "metric"
    timeout: int = 10
    max_workers: int = 4


def get_language_code(locale_name: Optional[str] = None) -> str:
    """
    Language tag for API queries, e.g. "en" or "en-US".

    Falls back to the process locale when no name is given.
    """
    if locale_name is None:
        locale_name = locale.getlocale()[0]
    if not locale_name or locale_name in ("C", "POSIX"):
        return "en"

    locale_name = locale_name.split(".")[0].split("@")[0]
    language, _, country = locale_name.replace("-", "_").partition("_")
    if not country:
        return language
    return f"{language}-{country}"


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise SystemExit(f"Invalid {name}: {exc}") from exc
    if value <= 0:
        raise SystemExit(f"Invalid {name}: must be positive")
    return value


def load_settings() -> Settings:
    load_dotenv()
    lang = os.getenv("YAHOO_WEATHER_LANG") or get_language_code()
    units = os.getenv("YAHOO_WEATHER_UNITS", "metric")
    if units not in UNITS:
        raise SystemExit(f"Invalid YAHOO_WEATHER_UNITS: {units} (expected one of {', '.join(UNITS)})")

    settings = Settings(
        lang=lang,
        units=units,
        timeout=_int_env("YAHOO_WEATHER_TIMEOUT", 10),
        max_workers=_int_env("YAHOO_WEATHER_MAX_WORKERS", 4),
    )
    logging.info("Configuration loaded: lang=%s units=%s timeout=%s", settings.lang, settings.units, settings.timeout)
    return settings


def setup_logging(log_file: Optional[str], verbose: bool) -> None:
    log_level = logging.DEBUG if verbose else logging.INFO
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=handlers
    )
