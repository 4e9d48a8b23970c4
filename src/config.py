"""Settings for the bin bot, read from the environment (and a .env file if present)."""

import logging
import os
from dataclasses import dataclass
from datetime import datetime, time, timedelta
from typing import Optional

import pytz
from dotenv import load_dotenv

from .data_fetchers.newport_feed import DEFAULT_UPRN
from .due_classifier import DEFAULT_CUTOFF, parse_cutoff

logger = logging.getLogger(__name__)

DEFAULT_TIMEZONE = "Europe/London"
DEFAULT_MESSAGE_PREFIX = "Bin Bot alert: "
DEFAULT_SOURCE = "newport"
DEFAULT_CACHE_MAX_AGE_HOURS = 12


@dataclass
class Settings:
    uprn: str = DEFAULT_UPRN
    feed_url: Optional[str] = None
    webhook_url: Optional[str] = None
    cutoff: time = DEFAULT_CUTOFF
    timezone: str = DEFAULT_TIMEZONE
    message_prefix: str = DEFAULT_MESSAGE_PREFIX
    source: str = DEFAULT_SOURCE
    cache_max_age: timedelta = timedelta(hours=DEFAULT_CACHE_MAX_AGE_HOURS)

    def now(self) -> datetime:
        """Current local wall-clock time in the configured timezone, without tzinfo."""
        return datetime.now(pytz.timezone(self.timezone)).replace(tzinfo=None)


def load_settings(use_dotenv: bool = True) -> Settings:
    """
    Builds Settings from environment variables.

    Raises:
        ValueError: if a variable is set to something unusable.
    """
    if use_dotenv:
        load_dotenv()

    webhook_url = os.environ.get("WEBHOOK_URL") or None
    if not webhook_url:
        logger.warning("No WEBHOOK_URL provided, unable to send webhook notifications")

    cutoff_raw = os.environ.get("BIN_CUTOFF_TIME")
    cutoff = parse_cutoff(cutoff_raw) if cutoff_raw else DEFAULT_CUTOFF

    timezone = os.environ.get("BIN_TIMEZONE") or DEFAULT_TIMEZONE
    try:
        pytz.timezone(timezone)
    except pytz.UnknownTimeZoneError as e:
        raise ValueError(f"Unknown timezone in BIN_TIMEZONE: {timezone}") from e

    max_age_raw = os.environ.get("BIN_CACHE_MAX_AGE_HOURS", str(DEFAULT_CACHE_MAX_AGE_HOURS))
    try:
        cache_max_age = timedelta(hours=float(max_age_raw))
    except ValueError as e:
        raise ValueError("BIN_CACHE_MAX_AGE_HOURS must be a number") from e

    return Settings(
        uprn=(os.environ.get("BIN_UPRN") or DEFAULT_UPRN).strip(),
        feed_url=(os.environ.get("BIN_FEED_URL") or "").strip() or None,
        webhook_url=webhook_url.strip() if webhook_url else None,
        cutoff=cutoff,
        timezone=timezone,
        message_prefix=os.environ.get("MESSAGE_PREFIX", DEFAULT_MESSAGE_PREFIX),
        source=os.environ.get("FETCHER_SOURCE") or DEFAULT_SOURCE,
        cache_max_age=cache_max_age,
    )
