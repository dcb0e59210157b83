"""Strict schema baselines with forbidden extras by default."""

import re
from datetime import time

from pydantic import BaseModel, ConfigDict

DATE_ONLY_REGEX = re.compile(r"^\d{4}-\d{2}-\d{2}$")
TIME_OF_DAY_REGEX = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)(?::00)?$")


def ensure_date_only(value: object, field_name: str) -> object:
    if isinstance(value, str):
        candidate = value.strip()
        if not DATE_ONLY_REGEX.fullmatch(candidate):
            raise ValueError(f"{field_name} must be a YYYY-MM-DD date-only string")
        return candidate
    return value


def parse_time_of_day(value: object) -> object:
    """Convert ``"HH:MM"`` strings to time objects; seconds, when present, must be zero."""
    if isinstance(value, str):
        match = TIME_OF_DAY_REGEX.fullmatch(value.strip())
        if match is None:
            raise ValueError(f"Invalid time format: {value}. Expected HH:MM format.")
        return time(int(match.group(1)), int(match.group(2)))
    return value


class StrictModel(BaseModel):
    """Neutral strict base for response DTOs."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True)


class StrictRequestModel(StrictModel):
    """Request DTO base that always forbids unexpected fields."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True, str_strip_whitespace=True)
