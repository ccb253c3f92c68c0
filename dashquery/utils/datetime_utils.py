#!/usr/bin/env python3
"""
Datetime Utility Functions

Centralized period and interval calculations used by the payload compiler.

Handles common patterns:
- ISO timestamps with or without 'Z' suffix
- Relative stats periods ("30m", "24h", "14d", "2w")
- Doubling a period so charts can compare with the previous one
- Choosing a rollup interval appropriate to the selected range
"""

import re
from datetime import UTC, datetime

from dashquery.domain.constants import period_config
from dashquery.domain.query import DateTimeSelection

PERIOD_PATTERN = re.compile(r"([0-9]+)([mhdw])")


def parse_iso_timestamp(value: datetime | str | None) -> datetime | None:
    """
    Parse an ISO 8601 timestamp (with or without 'Z' suffix).

    Accepts already-parsed datetimes unchanged.

    Args:
        value: ISO 8601 timestamp string, datetime, or None

    Returns:
        datetime object (timezone-aware if specified), or None if input is None

    Raises:
        ValueError: If timestamp format is invalid

    Examples:
        >>> parse_iso_timestamp("2026-02-10T10:00:00Z")
        datetime.datetime(2026, 2, 10, 10, 0, tzinfo=datetime.timezone.utc)

        >>> parse_iso_timestamp("2026-02-10")
        datetime.datetime(2026, 2, 10, 0, 0)
    """
    if value is None or value == "":
        return None

    if isinstance(value, datetime):
        return value

    if not isinstance(value, str):
        raise ValueError(f"Timestamp must be a string or datetime, got {type(value)}")

    try:
        if value.endswith("Z"):
            return datetime.fromisoformat(value[:-1] + "+00:00")
        return datetime.fromisoformat(value)
    except ValueError as e:
        raise ValueError(f"Invalid ISO timestamp format: {value}") from e


def _as_utc(value: datetime | str) -> datetime:
    parsed = parse_iso_timestamp(value)
    if parsed is None:
        raise ValueError("Timestamp is required")
    # Naive timestamps are already UTC
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def get_utc_date_string(value: datetime | str) -> str:
    """
    Format a timestamp as a UTC date string for the Discover API.

    Examples:
        >>> get_utc_date_string("2026-02-10T12:30:00+02:00")
        '2026-02-10T10:30:00'
    """
    return _as_utc(value).strftime(period_config.UTC_DATE_FORMAT)


def parse_period_to_hours(period: str) -> float:
    """
    Convert a relative stats period to hours.

    Args:
        period: Period string such as "30m", "24h", "14d" or "2w"

    Returns:
        Number of hours, or -1 if the period cannot be parsed

    Examples:
        >>> parse_period_to_hours("15m")
        0.25
        >>> parse_period_to_hours("14d")
        336
    """
    match = PERIOD_PATTERN.search(period or "")
    if not match:
        return -1

    number, unit = int(match.group(1)), match.group(2)
    if unit == "m":
        return number / 60
    if unit == "h":
        return number
    if unit == "d":
        return number * 24
    return number * 24 * 7


def get_diff_in_minutes(selection: DateTimeSelection) -> float:
    """Length of the selected range in minutes (relative period first)"""
    if selection.period:
        return parse_period_to_hours(selection.period) * 60

    start, end = _as_utc(selection.start), _as_utc(selection.end)
    return (end - start).total_seconds() / 60


def get_interval(selection: DateTimeSelection, high_fidelity: bool = False) -> str:
    """
    Pick a chart interval for the selected range.

    Ranges over 24 hours get daily buckets, ranges under an hour get
    five-minute buckets, anything in between gets fifteen minutes.
    ``high_fidelity`` picks finer buckets for each band.

    Examples:
        >>> get_interval(DateTimeSelection(period="14d"))
        '24h'
        >>> get_interval(DateTimeSelection(period="12h"))
        '15m'
    """
    diff_in_minutes = get_diff_in_minutes(selection)

    if diff_in_minutes > period_config.TWENTY_FOUR_HOURS_MINUTES:
        return "30m" if high_fidelity else "24h"

    if diff_in_minutes < period_config.ONE_HOUR_MINUTES:
        return "1m" if high_fidelity else "5m"

    return "5m" if high_fidelity else "15m"


def get_period(selection: DateTimeSelection, should_double_period: bool = False) -> dict[str, str | None]:
    """
    Derive the period parameters for a Discover request.

    A relative period takes precedence over absolute bounds; an empty selection
    falls back to the default stats period.

    Args:
        selection: Datetime part of the global selection
        should_double_period: Double the look-back window (previous-period comparison)

    Returns:
        {"start": ..., "end": ..., "stats_period": ...} with unused members None

    Raises:
        ValueError: If an absolute selection is missing start or end, or a
            relative period cannot be doubled

    Examples:
        >>> get_period(DateTimeSelection(period="24h"), should_double_period=True)
        {'start': None, 'end': None, 'stats_period': '48h'}
    """
    period = selection.period
    if selection.is_empty:
        period = period_config.DEFAULT_STATS_PERIOD

    if period:
        if not should_double_period:
            return {"start": None, "end": None, "stats_period": period}

        match = PERIOD_PATTERN.search(period)
        if not match:
            raise ValueError(f"Invalid stats period: {period}")
        return {"start": None, "end": None, "stats_period": f"{int(match.group(1)) * 2}{match.group(2)}"}

    if not selection.start or not selection.end:
        raise ValueError("start and end required")

    start, end = _as_utc(selection.start), _as_utc(selection.end)
    if should_double_period:
        start = start - (end - start)

    return {
        "start": start.strftime(period_config.UTC_DATE_FORMAT),
        "end": end.strftime(period_config.UTC_DATE_FORMAT),
        "stats_period": None,
    }
