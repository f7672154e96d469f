"""
Centralized configuration with environment variable overrides.

Payment hold length, customer validation bounds and schedule defaults
live here. Nothing in the scheduling or booking logic hardcodes them.
"""

import logging
import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)


def _safe_int(env_var: str, default: str) -> int:
    """Parse an integer from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return int(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid integer for {env_var}: {raw!r}"
        ) from None


@dataclass(frozen=True)
class BookingConfig:
    """Reservation lifecycle and customer validation settings."""

    payment_hold_minutes: int = _safe_int("PAYMENT_HOLD_MINUTES", "60")
    min_customer_name_length: int = _safe_int("MIN_CUSTOMER_NAME_LENGTH", "3")
    min_party_size: int = _safe_int("MIN_PARTY_SIZE", "1")
    max_party_size: int = _safe_int("MAX_PARTY_SIZE", "100")
    min_phone_digits: int = _safe_int("MIN_PHONE_DIGITS", "10")
    max_phone_digits: int = _safe_int("MAX_PHONE_DIGITS", "13")
    max_notes_length: int = _safe_int("MAX_NOTES_LENGTH", "500")
    transition_retries: int = _safe_int("TRANSITION_RETRIES", "3")


@dataclass(frozen=True)
class ScheduleDefaults:
    """Fallback slot granularity for tenants without a saved schedule."""

    slot_duration_minutes: int = _safe_int("DEFAULT_SLOT_DURATION_MINUTES", "30")
    break_between_slots_minutes: int = _safe_int("DEFAULT_BREAK_MINUTES", "0")


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    booking: BookingConfig = field(default_factory=BookingConfig)
    schedule: ScheduleDefaults = field(default_factory=ScheduleDefaults)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    service_name: str = os.getenv("SERVICE_NAME", "booking-engine")


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    if config.booking.payment_hold_minutes < 1:
        raise ValueError(
            f"PAYMENT_HOLD_MINUTES must be >= 1, got {config.booking.payment_hold_minutes}"
        )
    if config.booking.min_customer_name_length < 1:
        raise ValueError(
            "MIN_CUSTOMER_NAME_LENGTH must be >= 1, "
            f"got {config.booking.min_customer_name_length}"
        )
    if config.booking.min_party_size < 1:
        raise ValueError(
            f"MIN_PARTY_SIZE must be >= 1, got {config.booking.min_party_size}"
        )
    if config.booking.max_party_size < config.booking.min_party_size:
        raise ValueError(
            "MAX_PARTY_SIZE must be >= MIN_PARTY_SIZE, "
            f"got {config.booking.max_party_size} < {config.booking.min_party_size}"
        )
    if config.booking.min_phone_digits < 1:
        raise ValueError(
            f"MIN_PHONE_DIGITS must be >= 1, got {config.booking.min_phone_digits}"
        )
    if config.booking.max_phone_digits < config.booking.min_phone_digits:
        raise ValueError(
            "MAX_PHONE_DIGITS must be >= MIN_PHONE_DIGITS, "
            f"got {config.booking.max_phone_digits} < {config.booking.min_phone_digits}"
        )
    if config.booking.max_notes_length < 0:
        raise ValueError(
            f"MAX_NOTES_LENGTH must be >= 0, got {config.booking.max_notes_length}"
        )
    if config.booking.transition_retries < 1:
        raise ValueError(
            f"TRANSITION_RETRIES must be >= 1, got {config.booking.transition_retries}"
        )
    if config.schedule.slot_duration_minutes < 1:
        raise ValueError(
            "DEFAULT_SLOT_DURATION_MINUTES must be >= 1, "
            f"got {config.schedule.slot_duration_minutes}"
        )
    if config.schedule.break_between_slots_minutes < 0:
        raise ValueError(
            "DEFAULT_BREAK_MINUTES must be >= 0, "
            f"got {config.schedule.break_between_slots_minutes}"
        )


def load_config() -> AppConfig:
    """Load and validate application configuration."""
    config = AppConfig()
    _validate_config(config)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logger.info("Configuration loaded for '%s'", config.service_name)
    return config


# Singleton instance
settings = load_config()
