"""Screen scrapes the UFMG academic calendar to create JSON and ICS files.

This package exposes the following public symbols:

* :class:`CalendarScraper`: fetches and parses the monthly pages.
* :class:`Exporter`: writes events to JSON or iCalendar files.
* :class:`AcademicEvent` and :class:`Flags`: data classes for events.
* :func:`classify`: derives :class:`Flags` from a title.
"""

from .classify import classify
from .errors import (
    CalendarioError,
    EventParseError,
    ScrapeError,
    UnsupportedFormatError,
)
from .exporter import (
    CalendarSettings,
    CalendarVariant,
    Exporter,
    OutputKind,
    load_events,
)
from .models import AcademicEvent, Flags
from .scraper import CalendarScraper, PageResult, ScrapeReport

__all__ = [
    "AcademicEvent",
    "CalendarScraper",
    "CalendarSettings",
    "CalendarVariant",
    "CalendarioError",
    "EventParseError",
    "Exporter",
    "Flags",
    "OutputKind",
    "PageResult",
    "ScrapeError",
    "ScrapeReport",
    "UnsupportedFormatError",
    "classify",
    "load_events",
]
