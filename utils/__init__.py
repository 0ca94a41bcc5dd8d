"""Utility modules for cross-cutting concerns."""

from utils.timezone import now_utc, today_utc, today_in, assume_utc, parse_date
