"""Data classes shared by the scraper and the exporter."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date
from typing import Any


@dataclass(frozen=True)
class Flags:
    """Classification derived from an event title.

    :param grad: Mentions undergraduate courses ("graduação").
    :param pos: Mentions graduate courses ("pós-graduação").
    :param matricula: Mentions enrollment ("matrícula").
    :param trancamento: Mentions course withdrawal ("trancamento").
    :param feriado: Mentions a holiday or recess.
    :param importante: Enrollment, withdrawal or a deadline ("data-limite").
    """

    grad: bool = False
    pos: bool = False
    matricula: bool = False
    trancamento: bool = False
    feriado: bool = False
    importante: bool = False


@dataclass(frozen=True)
class AcademicEvent:
    """A single entry of the academic calendar.

    :param title: Descriptive sentence taken from the calendar page.
    :param start: First day of the event.
    :param end: Last day of the event.
    :param flags: Classification of :attr:`title`.
    """

    title: str
    start: date
    end: date
    flags: Flags = Flags()

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serialisable mapping with ISO dates."""
        return {
            "title": self.title,
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "flags": asdict(self.flags),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AcademicEvent:
        """Build an event from the output of :meth:`to_dict`."""
        return cls(
            title=data["title"],
            start=date.fromisoformat(data["start"]),
            end=date.fromisoformat(data["end"]),
            flags=Flags(**data.get("flags", {})),
        )
