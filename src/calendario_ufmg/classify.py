"""Title classification.

Flags are derived from the free-text title through an ordered table of
``(flag, pattern)`` rules. Matching is case-insensitive.
"""

from __future__ import annotations

import re

from .models import Flags

RULES: list[tuple[str, re.Pattern[str]]] = [
    ("grad", re.compile(r"\bgraduação\b", re.IGNORECASE)),
    ("pos", re.compile(r"\bpós-graduação\b", re.IGNORECASE)),
    ("matricula", re.compile(r"\bmatrícula\b", re.IGNORECASE)),
    ("trancamento", re.compile(r"\btrancamento\b", re.IGNORECASE)),
    ("feriado", re.compile(r"\bferiado|recesso\b", re.IGNORECASE)),
    (
        "importante",
        re.compile(r"\bmatrícula|trancamento|data-limite\b", re.IGNORECASE),
    ),
]
"""Classification rules, evaluated in order against each title."""


def classify(title: str) -> Flags:
    """Return the :class:`Flags` for *title*.

    Since ``-`` is a word boundary, a title mentioning "Pós-Graduação" also
    sets :attr:`Flags.grad`.

    :param title: The event title.
    :returns: The flags matched by :data:`RULES`.
    """
    return Flags(**{name: bool(pattern.search(title)) for name, pattern in RULES})
