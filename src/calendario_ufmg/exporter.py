"""Exporter class module.

Writes a collection of :class:`~calendario_ufmg.models.AcademicEvent` to JSON
or iCalendar (RFC 5545) files.
"""

from __future__ import annotations

import enum
import hashlib
import json
import logging
import os
import tempfile
from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, time, timedelta, timezone
from pathlib import Path
from zoneinfo import ZoneInfo

from icalendar import Alarm, Calendar, Event

from .errors import UnsupportedFormatError
from .models import AcademicEvent
from .summary import legacy_summary, subject, summary

logger = logging.getLogger(__name__)

IMPORTANT_ALARMS = (timedelta(days=-6), timedelta(hours=-16, minutes=-30))
"""Extra reminders, relative to the start, for events flagged ``importante``."""


class OutputKind(enum.Enum):
    """Output format of an export."""

    JSON = "json"
    ICS = "ics"

    @classmethod
    def from_path(cls, path: str | Path) -> OutputKind:
        """Infer the output kind from the extension of *path*.

        ``.ical`` is accepted as an alias of ``.ics``.

        :raises UnsupportedFormatError: For any other extension.
        """
        extension = Path(path).suffix.lstrip(".").lower()
        if extension == "ical":
            return cls.ICS
        try:
            return cls(extension)
        except ValueError:
            raise UnsupportedFormatError(extension) from None


class CalendarVariant(enum.Enum):
    """Layout of the generated iCalendar feed.

    ``LEGACY`` reproduces the first feed: no calendar metadata, no alarms and
    ``"<audience>: <kind>"`` summaries.
    """

    CURRENT = "current"
    LEGACY = "legacy"


@dataclass
class CalendarSettings:
    """Calendar-level metadata and reminder configuration.

    :param prodid: ``PRODID`` of the calendar.
    :param name: Display name of the calendar.
    :param color: Color hint (UFMG red by default).
    :param url: Home page of the calendar.
    :param source: Canonical URL the ``.ics`` file is published at.
    :param refresh_interval: ``REFRESH-INTERVAL`` duration for subscribers.
    :param alarm_time: Local wall-clock time of the start-day reminder.
    :param tz: Time zone of :attr:`alarm_time`.
    """

    prodid: str = "-//Ariel//Calendário Acadêmico UFMG//pt-BR"
    name: str = "Calendário Acadêmico UFMG"
    color: str = "#C8102E"
    url: str = "https://ariel-codes.github.io/calendario-ufmg"
    source: str = (
        "https://ariel-codes.github.io/calendario-ufmg/Calendario+Academico+UFMG.ics"
    )
    refresh_interval: timedelta = timedelta(days=30)
    alarm_time: time = time(7, 30)
    tz: str = "America/Sao_Paulo"


def _write_atomic(path: Path, data: bytes) -> None:
    """Write *data* to a temporary file next to *path* and move it in place."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.")
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(data)
        os.chmod(tmp, 0o644)
        os.replace(tmp, path)
    except BaseException:
        os.unlink(tmp)
        raise


def load_events(path: str | Path) -> list[AcademicEvent]:
    """Read a JSON export back into events.

    :param path: File written with :attr:`OutputKind.JSON`.
    :returns: The events in file order.
    """
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    return [AcademicEvent.from_dict(item) for item in data]


class Exporter:
    """Exports scraped events to files.

    :param events: The events to export, in output order.
    :param settings: Calendar metadata; defaults to :class:`CalendarSettings`.
    :param variant: Layout of the iCalendar output.

    Example usage::

        exporter = Exporter(events)
        exporter.call("calendario.json")
        exporter.call("Calendario+Academico+UFMG.ics")
    """

    def __init__(
        self,
        events: Sequence[AcademicEvent],
        settings: CalendarSettings | None = None,
        variant: CalendarVariant = CalendarVariant.CURRENT,
    ) -> None:
        self.events = events
        self.settings = settings or CalendarSettings()
        self.variant = variant

    def call(
        self,
        path: str | Path,
        kind: OutputKind | None = None,
        generated_at: datetime | None = None,
    ) -> None:
        """Write the events to *path*, replacing any existing file.

        :param path: Destination file.
        :param kind: Output format; inferred from the extension when omitted.
        :param generated_at: Timestamp embedded in iCalendar output; defaults
            to now.
        :raises UnsupportedFormatError: If *kind* is omitted and the extension
            is unknown. The destination is left untouched.
        """
        path = Path(path)
        if kind is None:
            kind = OutputKind.from_path(path)

        if kind is OutputKind.JSON:
            data = self.to_json().encode("utf-8")
        else:
            data = self.build_calendar(generated_at).to_ical()

        _write_atomic(path, data)
        logger.info("Wrote %s (%d events)", path, len(self.events))

    def to_json(self) -> str:
        """Return the events as a compact JSON array."""
        return json.dumps(
            [ev.to_dict() for ev in self.events],
            ensure_ascii=False,
            separators=(",", ":"),
        )

    def _start_day_trigger(self, ev: AcademicEvent) -> datetime:
        local = datetime.combine(
            ev.start, self.settings.alarm_time, tzinfo=ZoneInfo(self.settings.tz)
        )
        return local.astimezone(timezone.utc)

    def build_alarms(self, ev: AcademicEvent) -> list[Alarm]:
        """Return the reminders of *ev*.

        Events flagged ``importante`` get one reminder six days and one
        16h30 before the start. Every event gets a reminder at
        :attr:`CalendarSettings.alarm_time` on its first day.
        """
        description = subject(ev)
        triggers: list[timedelta | datetime] = []
        if ev.flags.importante:
            triggers.extend(IMPORTANT_ALARMS)
        triggers.append(self._start_day_trigger(ev))

        alarms = []
        for trigger in triggers:
            alarm = Alarm()
            alarm.add("action", "DISPLAY")
            if isinstance(trigger, datetime):
                alarm.add("trigger", trigger, parameters={"VALUE": "DATE-TIME"})
            else:
                alarm.add("trigger", trigger)
            alarm.add("description", description)
            alarms.append(alarm)
        return alarms

    def build_calendar(self, generated_at: datetime | None = None) -> Calendar:
        """Build an :class:`icalendar.Calendar` holding every event.

        Each event becomes an all-day ``VEVENT`` with date-only
        ``DTSTART``/``DTEND``, the flag summary as ``SUMMARY`` and the full
        title as ``DESCRIPTION``. Date-only ``DTEND`` is exclusive, so it is
        written as the day after :attr:`AcademicEvent.end`.

        :param generated_at: Value of ``LAST-MODIFIED`` and ``DTSTAMP``.
            Pinning it makes the output reproducible.
        :returns: A fully populated :class:`icalendar.Calendar`.
        """
        if generated_at is None:
            generated_at = datetime.now(timezone.utc)
        legacy = self.variant is CalendarVariant.LEGACY
        settings = self.settings

        cal = Calendar()
        cal.add("prodid", settings.prodid)
        cal.add("version", "2.0")
        cal.add("method", "PUBLISH")
        if not legacy:
            cal.add("name", settings.name)
            cal.add("x-wr-calname", settings.name)
            cal.add("color", settings.color)
            cal.add("url", settings.url)
            cal.add("source", settings.source)
            cal.add("last-modified", generated_at)
            cal.add(
                "refresh-interval",
                settings.refresh_interval,
                parameters={"VALUE": "DURATION"},
            )

        seen: Counter[str] = Counter()
        for ev in self.events:
            key = f"{ev.start.isoformat()}/{ev.end.isoformat()}/{ev.title}"
            seen[key] += 1
            digest = hashlib.sha1(key.encode("utf-8")).hexdigest()[:16]

            event = Event()
            event.add("uid", f"{digest}-{seen[key]}@calendario-ufmg")
            event.add("dtstamp", generated_at)
            event.add("dtstart", ev.start)
            # DTEND of a date-only event is exclusive
            event.add("dtend", ev.end + timedelta(days=1))
            event.add("summary", legacy_summary(ev.flags) if legacy else summary(ev.flags))
            event.add("description", ev.title)
            event.add("class", "PUBLIC")
            if not legacy:
                for alarm in self.build_alarms(ev):
                    event.add_component(alarm)
            cal.add_component(event)

        return cal

    def get_ics(self, generated_at: datetime | None = None) -> str:
        """Return the calendar in iCalendar (RFC 5545) format."""
        return self.build_calendar(generated_at).to_ical().decode("utf-8")
