"""Chord: immutable per-string fret/finger description of a fretted chord."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Final, Sequence

import numpy as np

# ── Fret constants ──────────────────────────────────────────────────────────
STRING_COUNT: Final[int] = 6
MUTED: Final[int] = -1
OPEN: Final[int] = 0

#: Returned by least/largest fret lookups when no string is fretted.
#: Compares lower than any real fret so threshold checks stay inert.
NOT_FOUND: Final[int] = -1

_TOKEN_SPLIT = re.compile(r"[\s,]+")


class InvalidChordShape(ValueError):
    """Raised when fret or finger data cannot describe a chord."""


def _to_tuple(values: Sequence[int], label: str) -> tuple[int, ...]:
    try:
        return tuple(int(v) for v in values)
    except (TypeError, ValueError) as exc:
        raise InvalidChordShape(f"{label} must be a sequence of integers: {values!r}") from exc


@dataclass(frozen=True)
class Chord:
    """
    A chord shape on a six-string fretted instrument.

    Attributes:
        frets:   One value per string, lowest-pitched string first.
                 ``-1`` = muted, ``0`` = open, ``n >= 1`` = fretted at ``n``.
        fingers: Optional finger label per string (same order as *frets*).
                 ``None`` disables finger labels; values ``<= 0`` draw nothing.
    """

    frets: tuple[int, ...]
    fingers: tuple[int, ...] | None = None

    def __post_init__(self) -> None:
        frets = _to_tuple(self.frets, "frets")
        if len(frets) != STRING_COUNT:
            raise InvalidChordShape(
                f"Expected {STRING_COUNT} fret values, got {len(frets)}: {list(frets)}"
            )
        if any(fret < MUTED for fret in frets):
            raise InvalidChordShape(f"Fret values must be >= {MUTED}: {list(frets)}")
        object.__setattr__(self, "frets", frets)

        if self.fingers is not None:
            fingers = _to_tuple(self.fingers, "fingers")
            if len(fingers) != len(frets):
                raise InvalidChordShape(
                    f"Expected {len(frets)} finger values, got {len(fingers)}: {list(fingers)}"
                )
            object.__setattr__(self, "fingers", fingers)

    # ------------------------------------------------------------------
    # Derived queries
    # ------------------------------------------------------------------

    @property
    def has_open_string(self) -> bool:
        """True if any string is played open."""
        return OPEN in self.frets

    @property
    def has_muted_string(self) -> bool:
        """True if any string is muted."""
        return MUTED in self.frets

    @property
    def least_fret(self) -> int:
        """Smallest fretted (>= 1) position, or ``NOT_FOUND``."""
        fretted = self._fretted()
        return int(fretted.min()) if fretted.size else NOT_FOUND

    @property
    def largest_fret(self) -> int:
        """Largest fretted (>= 1) position, or ``NOT_FOUND``."""
        fretted = self._fretted()
        return int(fretted.max()) if fretted.size else NOT_FOUND

    def _fretted(self) -> np.ndarray:
        frets = np.asarray(self.frets)
        return frets[frets >= 1]

    def fret_at(self, string: int) -> int:
        """
        Return the fret on *string*, counted 1-based from the highest string.

        ``fret_at(1)`` is the last entry of :attr:`frets`.
        """
        return self.frets[_slot(string)]

    def finger_at(self, string: int) -> int:
        """Finger label on *string* (1-based from the highest), 0 when unlabelled."""
        if self.fingers is None:
            return 0
        return self.fingers[_slot(string)]

    # ------------------------------------------------------------------
    # Text form
    # ------------------------------------------------------------------

    @classmethod
    def parse(cls, frets_text: str, fingers_text: str | None = None) -> Chord:
        """
        Build a chord from its textual shape.

        Accepts a compact form (``x32010``) or separated values
        (``-1,3,2,0,1,0`` / ``x 3 2 0 1 0``). ``x`` marks a muted string
        and ``o`` an open one.

        Raises:
            InvalidChordShape: If the text does not describe six strings.
        """
        frets = _parse_tokens(frets_text, "frets")
        fingers = _parse_tokens(fingers_text, "fingers") if fingers_text else None
        return cls(frets=frets, fingers=fingers)

    def __str__(self) -> str:
        tokens = ["x" if fret == MUTED else str(fret) for fret in self.frets]
        if all(len(token) == 1 for token in tokens):
            return "".join(tokens)
        return ",".join(tokens)


def _slot(string: int) -> int:
    if not 1 <= string <= STRING_COUNT:
        raise IndexError(f"String number must be in 1..{STRING_COUNT}, got {string}")
    return STRING_COUNT - string


def _parse_tokens(text: str, label: str) -> tuple[int, ...]:
    stripped = text.strip()
    if not stripped:
        raise InvalidChordShape(f"Empty {label} text.")

    if _TOKEN_SPLIT.search(stripped):
        tokens = [token for token in _TOKEN_SPLIT.split(stripped) if token]
    else:
        tokens = list(stripped)

    values: list[int] = []
    for token in tokens:
        lowered = token.lower()
        if lowered == "x":
            values.append(MUTED)
        elif lowered == "o":
            values.append(OPEN)
        else:
            try:
                values.append(int(token))
            except ValueError as exc:
                raise InvalidChordShape(f"Invalid {label} value {token!r} in {text!r}") from exc
    return tuple(values)


#: Open C major, the shape shown when no chord is supplied.
DEFAULT_C: Final[Chord] = Chord(frets=(-1, 3, 2, 0, 1, 0))
