"""Normalization of raw slot values before they are shown or stored."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from dateutil import parser as dateutil_parser

from eventbot.models.category import BRANCH_TARGETS, CONTACTS, EventCategory

log = logging.getLogger("eventbot.normalizer")


class InvalidDate(ValueError):
    """The supplied event date could not be parsed."""


def _reference_now(parsed: datetime, now: Optional[datetime]) -> datetime:
    """Return "now" comparable with ``parsed`` (both naive or both aware)."""
    if now is None:
        return datetime.now(parsed.tzinfo)
    if parsed.tzinfo is not None and now.tzinfo is None:
        return now.replace(tzinfo=parsed.tzinfo)
    if parsed.tzinfo is None and now.tzinfo is not None:
        return now.replace(tzinfo=None)
    return now


def _with_year(value: datetime, year: int) -> datetime:
    try:
        return value.replace(year=year)
    except ValueError:
        # 29 February moved into a non-leap year
        return value.replace(year=year, day=28)


def clean_date(raw: str, now: Optional[datetime] = None) -> str:
    """Repair a date extracted by the NLU and return it as ``YYYY-MM-DD``.

    Relative phrases ("3 days ago") near a year boundary sometimes come back
    with next year's date.  A year later than the current one is rewritten to
    the current year, and a date still in the future is clamped to today.
    """
    try:
        parsed = dateutil_parser.parse(str(raw))
    except (ValueError, OverflowError) as e:
        raise InvalidDate(f"Unrecognized event date: {raw!r}") from e

    reference = _reference_now(parsed, now)
    if parsed.year > reference.year:
        log.info("Event date %s is in a future year, using %d", raw, reference.year)
        parsed = _with_year(parsed, reference.year)
    if parsed > reference:
        parsed = reference

    return parsed.date().isoformat()


def resolve_branch(event_type: Optional[str]) -> tuple[str, str]:
    """Map a sub-program category onto its umbrella type and sub-type code."""
    category = EventCategory.parse(event_type)
    if category in BRANCH_TARGETS:
        umbrella, code = BRANCH_TARGETS[category]
        return umbrella.value, code
    return event_type or "", ""


def contact_for(event_type: Optional[str]) -> str:
    """Program contact email for a category, or "" when there is none."""
    category = EventCategory.parse(event_type)
    if category is None:
        return ""
    return CONTACTS[category]
