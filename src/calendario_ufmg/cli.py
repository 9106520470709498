"""Command line entry point.

Scrapes the academic calendar and writes the requested artifacts::

    calendario-ufmg
    calendario-ufmg --from-year 2025 --to-year 2025 --json out.json --ics out.ics
    calendario-ufmg --legacy --ics calendario.ical

Exit status is 0 when every page was scraped, 1 when some pages failed (the
artifacts still hold every event that was collected) and 2 when the run was
aborted or no page could be scraped, in which case existing files are kept.
"""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import date

from .errors import CalendarioError
from .exporter import CalendarVariant, Exporter, OutputKind
from .scraper import BASE_URL, CalendarScraper

logger = logging.getLogger("calendario_ufmg")

DEFAULT_JSON = "website/data/calendario.json"
DEFAULT_ICS = "website/public/Calendario+Academico+UFMG.ics"
LEGACY_FIRST_YEAR = 2020


def build_parser() -> argparse.ArgumentParser:
    """Return the argument parser of the ``calendario-ufmg`` command."""
    p = argparse.ArgumentParser(
        prog="calendario-ufmg",
        description="Scrape the UFMG academic calendar into JSON and iCalendar files",
    )
    p.add_argument("--from-year", type=int, help="First year to scrape (default: this year)")
    p.add_argument("--to-year", type=int, help="Last year to scrape (default: next year)")
    p.add_argument(
        "--json",
        action="append",
        default=[],
        metavar="PATH",
        help=f"Write a JSON export (default: {DEFAULT_JSON})",
    )
    p.add_argument(
        "--ics",
        action="append",
        default=[],
        metavar="PATH",
        help=f"Write an iCalendar export (default: {DEFAULT_ICS})",
    )
    p.add_argument(
        "-o",
        "--output",
        action="append",
        default=[],
        metavar="PATH",
        help="Write an export whose format is taken from the extension (.json, .ics, .ical)",
    )
    p.add_argument("--base-url", default=BASE_URL, help="Calendar page URL")
    p.add_argument("--timeout", type=float, default=30, help="Request timeout in seconds")
    p.add_argument(
        "--legacy",
        action="store_true",
        help="Generate the first feed layout (no alarms, years from 2020)",
    )
    p.add_argument("--strict", action="store_true", help="Abort on the first failing page")
    p.add_argument("-v", "--verbose", action="store_true", help="Log every request")
    return p


def year_range(args: argparse.Namespace, today: date | None = None) -> range:
    """Return the years selected by *args*."""
    this_year = (today or date.today()).year
    first = args.from_year
    if first is None:
        first = LEGACY_FIRST_YEAR if args.legacy else this_year
    last = args.to_year if args.to_year is not None else this_year + 1
    return range(first, last + 1)


def output_targets(args: argparse.Namespace) -> list[tuple[str, OutputKind]]:
    """Return the (path, kind) pairs to export.

    :raises UnsupportedFormatError: If an ``--output`` extension is unknown.
    """
    targets: list[tuple[str, OutputKind]] = []
    targets += [(path, OutputKind.JSON) for path in args.json]
    targets += [(path, OutputKind.ICS) for path in args.ics]
    targets += [(path, OutputKind.from_path(path)) for path in args.output]
    return targets or [(DEFAULT_JSON, OutputKind.JSON), (DEFAULT_ICS, OutputKind.ICS)]


def main(argv: list[str] | None = None) -> int:
    """Scrape the calendar and write the requested exports.

    Nothing is written when the run is aborted or when no page could be
    scraped, so a network outage never replaces a published feed.

    :param argv: Command line arguments; defaults to ``sys.argv[1:]``.
    :returns: The exit status (0, 1 or 2, see the module docstring).
    """
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    variant = CalendarVariant.LEGACY if args.legacy else CalendarVariant.CURRENT
    scraper = CalendarScraper(base_url=args.base_url, timeout=args.timeout)

    try:
        outputs = output_targets(args)
        report = scraper.scrape(year_range(args), fail_fast=args.strict)
        if report.pages and len(report.failures) == len(report.pages):
            logger.error("Every page failed, keeping existing files:\n%s", report.summary())
            return 2
        exporter = Exporter(report.events, variant=variant)
        for path, kind in outputs:
            exporter.call(path, kind)
    except CalendarioError as exc:
        logger.error("%s", exc)
        return 2

    if not report.ok:
        logger.warning("Some pages failed:\n%s", report.summary())
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
