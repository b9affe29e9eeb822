"""Unit tests for BarreAnalyzer."""

import itertools

from chordview.barre_analyzer import BarreAnalyzer, BarreSpan
from chordview.chord_model import Chord


def _analyze(frets: tuple[int, ...], fingers: tuple[int, ...] | None = None) -> BarreSpan | None:
    return BarreAnalyzer().analyze(Chord(frets=frets, fingers=fingers))


# ---------------------------------------------------------------------------
# Open-string branch
# ---------------------------------------------------------------------------


def test_open_c_has_no_barre() -> None:
    assert _analyze((-1, 3, 2, 0, 1, 0)) is None


def test_open_string_with_run_from_first_string() -> None:
    # strings 1-3 share fret 2, string 1 holds the least fret
    assert _analyze((0, 0, 4, 2, 2, 2)) == BarreSpan(fret=2, from_string=1, to_string=3)


def test_open_string_run_of_one_has_no_barre() -> None:
    assert _analyze((0, 2, 2, 1, 3, 1)) is None


def test_open_string_first_string_not_least_has_no_barre() -> None:
    assert _analyze((0, 1, 1, 3, 3, 3)) is None


def test_fully_open_chord_has_no_barre() -> None:
    assert _analyze((0, 0, 0, 0, 0, 0)) is None


def test_open_string_with_matching_fingers_stops_after_one_step() -> None:
    # Fingers present: the scan ends after the first comparison even though
    # strings 1-3 all share fret 2 and finger 1.
    chord = ((0, 0, 4, 2, 2, 2), (0, 0, 3, 1, 1, 1))
    assert _analyze(*chord) == BarreSpan(fret=2, from_string=1, to_string=2)


def test_open_string_with_mismatched_finger_has_no_barre() -> None:
    assert _analyze((0, 0, 4, 2, 2, 2), (0, 0, 3, 1, 2, 1)) is None


def test_run_with_first_string_without_fingers_extends_fully() -> None:
    chord = Chord(frets=(0, 2, 2, 2, 2, 2))
    assert BarreAnalyzer().run_with_first_string(chord) == 5


def test_run_with_first_string_never_passes_string_count() -> None:
    chord = Chord(frets=(0, 0, 0, 0, 0, 0))
    assert BarreAnalyzer().run_with_first_string(chord) == 6


# ---------------------------------------------------------------------------
# Muted-string branch
# ---------------------------------------------------------------------------


def test_muted_lowest_string_barre_stops_at_fifth_string() -> None:
    assert _analyze((-1, 3, 2, 1, 1, 1)) == BarreSpan(fret=1, from_string=1, to_string=5)


def test_two_muted_low_strings() -> None:
    assert _analyze((-1, -1, 5, 5, 5, 7)) == BarreSpan(fret=5, from_string=1, to_string=4)


def test_muted_branch_ignores_run_length() -> None:
    # string 1 is not at the least fret, yet the muted branch still bars
    assert _analyze((-1, 2, 4, 4, 4, 5)) == BarreSpan(fret=2, from_string=1, to_string=5)


def test_open_and_muted_chord_uses_open_branch_only() -> None:
    assert _analyze((-1, 0, 2, 2, 2, 0)) is None


def test_fully_muted_chord_has_no_barre() -> None:
    assert _analyze((-1, -1, -1, -1, -1, -1)) is None


def test_max_unmuted_string() -> None:
    analyzer = BarreAnalyzer()
    assert analyzer.max_unmuted_string(Chord(frets=(-1, 3, 2, 1, 1, 1))) == 5
    assert analyzer.max_unmuted_string(Chord(frets=(3, 3, 2, 1, 1, -1))) == 6


# ---------------------------------------------------------------------------
# No open, no muted strings
# ---------------------------------------------------------------------------


def test_full_barre_f_major() -> None:
    assert _analyze((1, 3, 3, 2, 1, 1)) == BarreSpan(fret=1, from_string=1, to_string=6)


def test_full_barre_ignores_run_length() -> None:
    # Only string 1 sits at fret 1 in its run (run length 1), which would not
    # bar in the open-string branch; with no open or muted strings the bar
    # still covers all six strings.
    chord = Chord(frets=(1, 3, 3, 3, 3, 1))
    analyzer = BarreAnalyzer()
    assert analyzer.run_with_first_string(chord) == 1
    assert analyzer.analyze(chord) == BarreSpan(fret=1, from_string=1, to_string=6)


def test_barre_span_covers() -> None:
    span = BarreSpan(fret=3, from_string=1, to_string=4)
    assert span.covers(3, 1)
    assert span.covers(3, 4)
    assert not span.covers(3, 5)
    assert not span.covers(4, 2)


# ---------------------------------------------------------------------------
# Totality
# ---------------------------------------------------------------------------


def test_analyzer_is_total_over_small_fret_range() -> None:
    analyzer = BarreAnalyzer()
    values = (-1, 0, 1, 2)
    for frets in itertools.product(values, repeat=6):
        span = analyzer.analyze(Chord(frets=frets))
        if span is not None:
            assert 1 <= span.from_string <= span.to_string <= 6
            assert span.fret >= 1


def test_analyzer_is_total_with_fingers() -> None:
    analyzer = BarreAnalyzer()
    for frets in itertools.product((0, 1, 2), repeat=6):
        chord = Chord(frets=frets, fingers=(1, 1, 2, 1, 1, 1))
        span = analyzer.analyze(chord)
        assert span is None or span.to_string <= 6


def test_analyzer_is_deterministic() -> None:
    chord = Chord(frets=(3, 5, 5, 4, 3, 3))
    analyzer = BarreAnalyzer()
    assert analyzer.analyze(chord) == analyzer.analyze(chord)
