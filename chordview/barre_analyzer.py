"""BarreAnalyzer: decides whether a chord shape is played with a barre."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from chordview.chord_model import MUTED, NOT_FOUND, STRING_COUNT, Chord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BarreSpan:
    """
    One finger pressing *fret* across a contiguous run of strings.

    Attributes:
        fret:        Fret pressed by the barre.
        from_string: First covered string, 1-based from the highest string.
        to_string:   Last covered string (inclusive).
    """

    fret: int
    from_string: int
    to_string: int

    def covers(self, fret: int, string: int) -> bool:
        """True if a note at (*fret*, *string*) lies under the barre."""
        return fret == self.fret and self.from_string <= string <= self.to_string


class BarreAnalyzer:
    """
    Finds the single horizontal bar, if any, implied by a chord shape.

    Algorithm overview
    ------------------
    Strings are numbered from the highest string (string 1) downwards.

    1. **Open strings present** – A bar is only drawn when string 1 holds the
       chord's least fret *and* the strings below it repeat that fret. The bar
       covers string 1 up to the end of that run.

    2. **Muted strings present** (no open string) – The bar covers string 1
       up to the highest string that is not muted.

    3. **Neither** – The bar covers every string at the least fret.

    A chord with no fretted string never yields a bar.
    """

    def analyze(self, chord: Chord) -> BarreSpan | None:
        """
        Return the barre for *chord*, or ``None`` when it is not barred.

        Never raises for a valid :class:`Chord`.
        """
        least = chord.least_fret
        if least == NOT_FOUND:
            return None

        if chord.has_open_string:
            if not self.first_string_least(chord):
                return None
            run = self.run_with_first_string(chord)
            if run <= 1:
                return None
            span = BarreSpan(fret=least, from_string=1, to_string=run)
        elif chord.has_muted_string:
            span = BarreSpan(fret=least, from_string=1, to_string=self.max_unmuted_string(chord))
        else:
            span = BarreSpan(fret=least, from_string=1, to_string=STRING_COUNT)

        logger.debug("Barre for %s: %s", chord, span)
        return span

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def first_string_least(self, chord: Chord) -> bool:
        """True if string 1 is fretted at the chord's least fret."""
        return chord.fret_at(1) == chord.least_fret

    def run_with_first_string(self, chord: Chord) -> int:
        """
        Count the strings, starting at string 1, sharing string 1's fret.

        For ``3, 3, 2, 1, 1, 1`` strings 1-3 are all at fret 1, so 3 is returned.

        When finger labels are present the scan stops after the first
        matching fret: it steps once more if the finger also matches, then
        returns. Finger-labelled shapes therefore never report more than 2.
        """
        # TODO: keep scanning after a finger match once stored chord shapes
        # no longer rely on the single-step result.
        string = 1
        first_fret = chord.fret_at(1)
        while string < STRING_COUNT and chord.fret_at(string + 1) == first_fret:
            if chord.fingers is not None:
                if chord.finger_at(string + 1) == chord.finger_at(1):
                    string += 1
                return string
            string += 1
        return string

    def max_unmuted_string(self, chord: Chord) -> int:
        """
        Highest-numbered string that is not muted.

        For ``-1, 3, 2, 1, 1, 1`` string 6 is muted, so 5 is returned.
        """
        string = STRING_COUNT
        while string > 1 and chord.fret_at(string) == MUTED:
            string -= 1
        return string
