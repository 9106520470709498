"""CalendarScraper class module.

Provides the :class:`CalendarScraper` that walks the UFMG academic calendar
month by month, plus the :class:`PageResult` and :class:`ScrapeReport` records
it returns.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date

import requests
from bs4 import BeautifulSoup
from dateutil import parser as dateparser

from .classify import classify
from .errors import EventParseError, ScrapeError
from .models import AcademicEvent

logger = logging.getLogger(__name__)

BASE_URL = "https://ufmg.br/a-universidade/calendario-academico"
"""Calendar page queried with ``ano`` and ``mes`` parameters."""

MONTHS = range(1, 13)


def parse_event_date(value: str | None) -> date:
    """Parse a ``data-info-*-date`` attribute and drop the time of day.

    Accepts ISO-8601 values (``"2025-03-05T08:00:00-03:00"``) as well as
    day-first local strings (``"05/03/2025 08:00"``).

    :param value: The raw attribute value.
    :returns: The calendar date.
    :raises EventParseError: If the value is missing or not a date.
    """
    if not value or not value.strip():
        raise EventParseError("missing date attribute")
    value = value.strip()
    try:
        return dateparser.isoparse(value).date()
    except ValueError:
        pass
    # dayfirst swaps month and day of ISO strings
    try:
        return dateparser.parse(value, dayfirst=True).date()
    except (ValueError, OverflowError) as exc:
        raise EventParseError(f"invalid date {value!r}: {exc}") from exc


@dataclass
class PageResult:
    """Outcome of scraping one monthly page.

    :param year: The requested year.
    :param month: The requested month (1-12).
    :param events: Events found on the page, in document order.
    :param error: The failure, or ``None`` when the page was scraped.
    """

    year: int
    month: int
    events: list[AcademicEvent] = field(default_factory=list)
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class ScrapeReport:
    """All page results of a run, in request order."""

    pages: list[PageResult] = field(default_factory=list)

    @property
    def events(self) -> list[AcademicEvent]:
        """Events of every successful page, years then months then document order."""
        return [ev for page in self.pages for ev in page.events]

    @property
    def failures(self) -> list[PageResult]:
        return [page for page in self.pages if not page.ok]

    @property
    def ok(self) -> bool:
        return not self.failures

    def summary(self) -> str:
        """Return a human readable summary of the run."""
        lines = [
            f"{len(self.events)} events from {len(self.pages) - len(self.failures)}"
            f"/{len(self.pages)} pages"
        ]
        for page in self.failures:
            lines.append(f"  {page.year}-{page.month:02d}: {page.error}")
        return "\n".join(lines)


class CalendarScraper:
    """Screen scrapes the UFMG academic calendar.

    Each monthly page lists its events as anchors such as::

        <a data-info-title="..."
           data-info-init-date="2025-03-05"
           data-info-end-date="2025-03-07">Início do período de ...</a>

    :param base_url: URL of the calendar page.
    :param timeout: Timeout in seconds for each request.

    Example usage::

        scraper = CalendarScraper()
        report = scraper.scrape(range(2025, 2027))
        events = report.events
    """

    def __init__(self, base_url: str = BASE_URL, timeout: float = 30) -> None:
        self.base_url = base_url
        self.timeout = timeout

    def url(self, year: int, month: int) -> str:
        """Return the page URL for *year* and *month*."""
        return f"{self.base_url}?ano={year}&mes={month}"

    def _fetch_html(self, url: str) -> str:
        """Fetch and return the HTML content of a URL.

        :param url: The URL to fetch.
        :returns: The response body as a string.
        :raises requests.HTTPError: If the server returns an error status.
        """
        logger.debug("GET %s", url)
        resp = requests.get(url, timeout=self.timeout)
        resp.raise_for_status()
        return resp.text

    def parse_page(self, html: str) -> list[AcademicEvent]:
        """Extract the events of one calendar page.

        The title is the anchor text as found in the page, with only the
        surrounding whitespace removed. Line breaks inside the text are kept.

        :param html: The page body.
        :returns: Events in document order.
        :raises EventParseError: If an anchor carries an invalid date.
        """
        soup = BeautifulSoup(html, "html.parser")
        events: list[AcademicEvent] = []

        for a in soup.select("a[data-info-title]"):
            if not a["data-info-title"].strip():
                continue

            title = a.get_text().strip()
            events.append(
                AcademicEvent(
                    title=title,
                    start=parse_event_date(a.get("data-info-init-date")),
                    end=parse_event_date(a.get("data-info-end-date")),
                    flags=classify(title),
                )
            )

        return events

    def scrape_page(self, year: int, month: int) -> PageResult:
        """Fetch and parse a single month.

        Fetch and parse errors are returned in the result instead of raised.
        """
        url = self.url(year, month)
        try:
            events = self.parse_page(self._fetch_html(url))
        except (requests.RequestException, EventParseError) as exc:
            logger.warning("Failed to scrape %s: %s", url, exc)
            return PageResult(year, month, error=exc)

        logger.debug("%d events on %d-%02d", len(events), year, month)
        return PageResult(year, month, events=events)

    def scrape(self, years: Iterable[int], fail_fast: bool = False) -> ScrapeReport:
        """Scrape every month of every year in *years*.

        :param years: Years to scrape, in the order they should appear.
        :param fail_fast: Raise on the first failing page instead of
            collecting the failure in the report.
        :returns: The report with one :class:`PageResult` per month.
        :raises ScrapeError: If *fail_fast* is set and a page fails.
        """
        report = ScrapeReport()
        for year in years:
            for month in MONTHS:
                page = self.scrape_page(year, month)
                if fail_fast and page.error is not None:
                    raise ScrapeError(year, month, page.error) from page.error
                report.pages.append(page)

        logger.info(
            "Scraped %d events from %d pages (%d failed)",
            len(report.events),
            len(report.pages),
            len(report.failures),
        )
        return report

    def call(self, years: Iterable[int]) -> list[AcademicEvent]:
        """Scrape *years* and return the events, aborting on any failure."""
        return self.scrape(years, fail_fast=True).events
