"""Exceptions raised by the scraper and the exporter."""


class CalendarioError(Exception):
    """Base class for all errors raised by :mod:`calendario_ufmg`."""


class EventParseError(CalendarioError, ValueError):
    """A ``data-info-*`` date attribute is missing or cannot be parsed."""


class ScrapeError(CalendarioError):
    """A monthly calendar page could not be fetched or parsed.

    :param year: Year of the failing page.
    :param month: Month of the failing page.
    :param reason: The underlying exception.
    """

    def __init__(self, year: int, month: int, reason: Exception) -> None:
        super().__init__(f"{year}-{month:02d}: {reason}")
        self.year = year
        self.month = month
        self.reason = reason


class UnsupportedFormatError(CalendarioError, ValueError):
    """The requested output extension has no matching exporter."""

    def __init__(self, extension: str) -> None:
        super().__init__(f"Formato {extension!r} não suportado")
        self.extension = extension
