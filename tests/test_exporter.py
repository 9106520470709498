"""Tests for the JSON and iCalendar exports."""

import json
from datetime import date, datetime, timezone

import pytest
from icalendar import Calendar

from calendario_ufmg import (
    AcademicEvent,
    CalendarVariant,
    Exporter,
    Flags,
    OutputKind,
    UnsupportedFormatError,
    classify,
    load_events,
)

GENERATED_AT = datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc)


def _event(title, start, end=None):
    return AcademicEvent(title=title, start=start, end=end or start, flags=classify(title))


@pytest.fixture()
def events():
    return [
        _event("Recesso escolar - Carnaval", date(2025, 3, 3), date(2025, 3, 4)),
        _event(
            "Início do período de Matrícula para Graduação",
            date(2025, 3, 5),
            date(2025, 3, 7),
        ),
        _event("Semana do Conhecimento", date(2025, 4, 10), date(2025, 4, 12)),
    ]


def _vevents(ics_text):
    """Split the raw ICS text into one chunk per VEVENT."""
    return ics_text.split("BEGIN:VEVENT")[1:]


# --- Output kind ---


@pytest.mark.parametrize(
    "path, kind",
    [
        ("calendario.json", OutputKind.JSON),
        ("website/public/Calendario+Academico+UFMG.ics", OutputKind.ICS),
        ("calendario.ical", OutputKind.ICS),
        ("CALENDARIO.ICS", OutputKind.ICS),
    ],
)
def test_output_kind_from_path(path, kind):
    assert OutputKind.from_path(path) is kind


def test_output_kind_unknown_extension():
    with pytest.raises(UnsupportedFormatError) as excinfo:
        OutputKind.from_path("calendario.xlsx")
    assert excinfo.value.extension == "xlsx"
    assert "xlsx" in str(excinfo.value)


def test_unsupported_extension_creates_no_file(events, tmp_path):
    target = tmp_path / "calendario.xlsx"
    with pytest.raises(UnsupportedFormatError):
        Exporter(events).call(target)
    assert not target.exists()
    assert list(tmp_path.iterdir()) == []


def test_unsupported_extension_keeps_existing_file(events, tmp_path):
    target = tmp_path / "calendario.xlsx"
    target.write_bytes(b"planilha")
    with pytest.raises(UnsupportedFormatError):
        Exporter(events).call(target)
    assert target.read_bytes() == b"planilha"


def test_explicit_kind_overrides_extension(events, tmp_path):
    target = tmp_path / "calendario.txt"
    Exporter(events).call(target, OutputKind.JSON)
    assert len(json.loads(target.read_text(encoding="utf-8"))) == 3


# --- JSON ---


def test_json_document_shape(events, tmp_path):
    target = tmp_path / "calendario.json"
    Exporter(events).call(target)

    data = json.loads(target.read_text(encoding="utf-8"))
    assert list(data[1]) == ["title", "start", "end", "flags"]
    assert data[1]["title"] == "Início do período de Matrícula para Graduação"
    assert data[1]["start"] == "2025-03-05"
    assert data[1]["end"] == "2025-03-07"
    assert data[1]["flags"] == {
        "grad": True,
        "pos": False,
        "matricula": True,
        "trancamento": False,
        "feriado": False,
        "importante": True,
    }


def test_json_keeps_accents(events):
    assert "Matrícula" in Exporter(events).to_json()


def test_json_round_trip(events, tmp_path):
    target = tmp_path / "calendario.json"
    Exporter(events).call(target)
    assert load_events(target) == events


def test_json_overwrites_existing_file(events, tmp_path):
    target = tmp_path / "calendario.json"
    target.write_text("old", encoding="utf-8")
    Exporter(events[:1]).call(target)
    assert len(load_events(target)) == 1


def test_export_creates_parent_directories(events, tmp_path):
    target = tmp_path / "website" / "data" / "calendario.json"
    Exporter(events).call(target)
    assert target.exists()


# --- iCalendar ---


def test_ics_calendar_metadata(events):
    text = Exporter(events).get_ics(GENERATED_AT)
    assert text.startswith("BEGIN:VCALENDAR")
    assert "PRODID:-//Ariel//Calendário Acadêmico UFMG//pt-BR" in text
    assert "VERSION:2.0" in text
    assert "METHOD:PUBLISH" in text
    assert "X-WR-CALNAME:Calendário Acadêmico UFMG" in text
    assert "COLOR:#C8102E" in text
    assert "LAST-MODIFIED:20250115T120000Z" in text
    assert "REFRESH-INTERVAL;VALUE=DURATION:P30D" in text


def test_ics_event_fields(events):
    text = Exporter(events).get_ics(GENERATED_AT)
    vevents = _vevents(text)
    assert len(vevents) == 3

    matricula = vevents[1]
    assert "DTSTART;VALUE=DATE:20250305" in matricula
    assert "DTEND;VALUE=DATE:20250308" in matricula
    assert "SUMMARY:UFMG: Graduação - Matrícula!" in matricula
    assert "CLASS:PUBLIC" in matricula
    assert "DTSTAMP:20250115T120000Z" in matricula


def test_ics_description_is_title(events):
    cal = Calendar.from_ical(Exporter(events).get_ics(GENERATED_AT))
    descriptions = [str(ev["DESCRIPTION"]) for ev in cal.walk("VEVENT")]
    assert descriptions == [ev.title for ev in events]


def test_important_event_has_three_alarms(events):
    alarms = Exporter(events).build_alarms(events[1])
    assert len(alarms) == 3
    assert _vevents(Exporter(events).get_ics(GENERATED_AT))[1].count("BEGIN:VALARM") == 3


def test_regular_event_has_one_alarm(events):
    alarms = Exporter(events).build_alarms(events[0])
    assert len(alarms) == 1
    assert _vevents(Exporter(events).get_ics(GENERATED_AT))[0].count("BEGIN:VALARM") == 1


def test_alarm_triggers(events):
    vevent = _vevents(Exporter(events).get_ics(GENERATED_AT))[1]
    assert "TRIGGER:-P6D" in vevent
    assert "TRIGGER:-PT16H30M" in vevent
    # 07:30 in Belo Horizonte (UTC-3)
    assert "20250305T103000Z" in vevent
    assert vevent.count("ACTION:DISPLAY") == 3


def test_alarm_description_uses_subject(events):
    for alarm in Exporter(events).build_alarms(events[1]):
        assert str(alarm["DESCRIPTION"]) == "Alerta 05/03 na UFMG: Graduação - Matrícula!"


def test_ics_is_reproducible(events, tmp_path):
    first = tmp_path / "a.ics"
    second = tmp_path / "b.ics"
    Exporter(events).call(first, generated_at=GENERATED_AT)
    Exporter(events).call(second, generated_at=GENERATED_AT)
    assert first.read_bytes() == second.read_bytes()


def test_ics_only_timestamps_change_between_runs(events):
    later = datetime(2025, 2, 1, 8, 0, tzinfo=timezone.utc)

    def strip_timestamps(text):
        return [
            line
            for line in text.splitlines()
            if not line.startswith(("LAST-MODIFIED", "DTSTAMP"))
        ]

    first = Exporter(events).get_ics(GENERATED_AT)
    second = Exporter(events).get_ics(later)
    assert first != second
    assert strip_timestamps(first) == strip_timestamps(second)


def test_repeated_events_get_distinct_uids(events):
    cal = Exporter([events[0], events[0]]).build_calendar(GENERATED_AT)
    uids = [str(ev["UID"]) for ev in cal.walk("VEVENT")]
    assert len(set(uids)) == 2


def test_legacy_variant(events):
    text = Exporter(events, variant=CalendarVariant.LEGACY).get_ics(GENERATED_AT)
    assert "BEGIN:VALARM" not in text
    assert "REFRESH-INTERVAL" not in text
    assert "COLOR" not in text
    assert "SUMMARY:Todos: Recesso/Feriado" in text
    assert "SUMMARY:Graduação: Matrícula!" in text
    assert "SUMMARY:Todos: Evento" in text


def test_empty_collection(tmp_path):
    target = tmp_path / "vazio.ics"
    Exporter([]).call(target)
    text = target.read_text(encoding="utf-8")
    assert "BEGIN:VCALENDAR" in text
    assert "BEGIN:VEVENT" not in text


def test_flags_default_to_false():
    ev = AcademicEvent(title="x", start=date(2025, 1, 1), end=date(2025, 1, 1))
    assert ev.flags == Flags()
