"""Calendar-visible labels built from event flags."""

from __future__ import annotations

from .models import AcademicEvent, Flags


def _audience(flags: Flags) -> str | None:
    """Return the audience segment of a summary.

    :param flags: The event flags.
    :returns: The audience label, or ``None`` when no audience is flagged.
    """
    if flags.grad and flags.pos:
        return "Graduação e Pós-Graduação"
    if flags.grad:
        return "Graduação"
    if flags.pos:
        return "Pós-Graduação"
    return None


def _kind(flags: Flags, fallback: str) -> str:
    """Return the kind segment of a summary.

    Matrícula takes priority over trancamento, which takes priority over
    feriado.

    :param flags: The event flags.
    :param fallback: Label used when none of those flags is set.
    :returns: The kind label.
    """
    if flags.matricula:
        return "Matrícula"
    if flags.trancamento:
        return "Trancamento"
    if flags.feriado:
        return "Recesso/Feriado"
    return fallback


def summary(flags: Flags) -> str:
    """Return the event summary, e.g. ``"UFMG: Graduação - Matrícula!"``.

    Without an audience the segment is dropped but both spaces around it
    remain: ``"UFMG:  Recesso/Feriado"``.
    """
    audience = _audience(flags)
    segment = f"{audience} -" if audience else ""
    mark = "!" if flags.importante else ""
    return f"UFMG: {segment} {_kind(flags, 'Outros')}{mark}"


def legacy_summary(flags: Flags) -> str:
    """Return the summary used by the first calendar feed, e.g. ``"Todos: Evento"``."""
    audience = _audience(flags) or "Todos"
    mark = "!" if flags.importante else ""
    return f"{audience}: {_kind(flags, 'Evento')}{mark}"


def subject(event: AcademicEvent) -> str:
    """Return the alarm text, e.g. ``"Alerta 05/03 na UFMG: Graduação - Matrícula!"``."""
    return f"Alerta {event.start.strftime('%d/%m')} na {summary(event.flags)}"
