"""Unit tests for the Chord model and its derived queries."""

import pytest

from chordview.chord_model import DEFAULT_C, NOT_FOUND, Chord, InvalidChordShape


def test_open_c_derived_properties() -> None:
    chord = Chord(frets=(-1, 3, 2, 0, 1, 0))
    assert chord.has_open_string
    assert chord.has_muted_string
    assert chord.least_fret == 1
    assert chord.largest_fret == 3


def test_fully_muted_chord_has_no_fretted_string() -> None:
    chord = Chord(frets=(-1, -1, -1, -1, -1, -1))
    assert chord.least_fret == NOT_FOUND
    assert chord.largest_fret == NOT_FOUND
    assert chord.has_muted_string
    assert not chord.has_open_string


def test_fully_open_chord_has_no_fretted_string() -> None:
    chord = Chord(frets=(0, 0, 0, 0, 0, 0))
    assert chord.least_fret == NOT_FOUND
    assert chord.largest_fret == NOT_FOUND


@pytest.mark.parametrize(
    "frets",
    [
        (1, 3, 3, 2, 1, 1),
        (-1, 0, 2, 2, 2, 0),
        (5, 7, 7, 6, 5, 5),
        (-1, -1, 0, 9, 12, 10),
    ],
)
def test_least_fret_not_above_largest_fret(frets: tuple[int, ...]) -> None:
    chord = Chord(frets=frets)
    assert chord.least_fret <= chord.largest_fret


def test_fret_at_counts_from_highest_string() -> None:
    chord = Chord(frets=(-1, 3, 2, 0, 1, 0))
    assert chord.fret_at(1) == 0
    assert chord.fret_at(2) == 1
    assert chord.fret_at(6) == -1


@pytest.mark.parametrize("string", [0, 7])
def test_fret_at_rejects_out_of_range_string(string: int) -> None:
    with pytest.raises(IndexError):
        Chord(frets=(1, 1, 1, 1, 1, 1)).fret_at(string)


def test_finger_at_without_fingers_is_zero() -> None:
    assert Chord(frets=(1, 3, 3, 2, 1, 1)).finger_at(3) == 0


def test_finger_at_counts_from_highest_string() -> None:
    chord = Chord(frets=(1, 3, 3, 2, 1, 1), fingers=(1, 3, 4, 2, 1, 1))
    assert chord.finger_at(3) == 2
    assert chord.finger_at(5) == 3


def test_lists_are_stored_as_tuples() -> None:
    chord = Chord(frets=[1, 3, 3, 2, 1, 1], fingers=[1, 3, 4, 2, 1, 1])  # type: ignore[arg-type]
    assert chord.frets == (1, 3, 3, 2, 1, 1)
    assert chord.fingers == (1, 3, 4, 2, 1, 1)


def test_chord_is_immutable() -> None:
    chord = Chord(frets=(1, 3, 3, 2, 1, 1))
    with pytest.raises(AttributeError):
        chord.frets = (0, 0, 0, 0, 0, 0)  # type: ignore[misc]


@pytest.mark.parametrize("frets", [(1, 2, 3), (0, 0, 0, 0, 0, 0, 0), ()])
def test_wrong_fret_count_rejected(frets: tuple[int, ...]) -> None:
    with pytest.raises(InvalidChordShape):
        Chord(frets=frets)


def test_mismatched_fingers_rejected() -> None:
    with pytest.raises(InvalidChordShape):
        Chord(frets=(1, 3, 3, 2, 1, 1), fingers=(1, 3, 4))


def test_fret_below_muted_rejected() -> None:
    with pytest.raises(InvalidChordShape):
        Chord(frets=(-2, 3, 2, 0, 1, 0))


def test_invalid_chord_shape_is_value_error() -> None:
    with pytest.raises(ValueError):
        Chord(frets=(1, 2))


def test_parse_compact_form() -> None:
    assert Chord.parse("x32010").frets == (-1, 3, 2, 0, 1, 0)


def test_parse_separated_form() -> None:
    assert Chord.parse("-1,3,2,0,1,0").frets == (-1, 3, 2, 0, 1, 0)
    assert Chord.parse("x 10 12 12 11 10").frets == (-1, 10, 12, 12, 11, 10)


def test_parse_accepts_o_for_open_string() -> None:
    assert Chord.parse("XO221O").frets == (-1, 0, 2, 2, 1, 0)


def test_parse_with_fingers() -> None:
    chord = Chord.parse("133211", "134211")
    assert chord.fingers == (1, 3, 4, 2, 1, 1)


@pytest.mark.parametrize("text", ["", "x3201", "x3201z", "1,2,3"])
def test_parse_rejects_bad_text(text: str) -> None:
    with pytest.raises(InvalidChordShape):
        Chord.parse(text)


def test_str_uses_compact_form() -> None:
    assert str(DEFAULT_C) == "x32010"


def test_str_falls_back_to_commas_for_high_frets() -> None:
    assert str(Chord(frets=(-1, 10, 12, 12, 11, 10))) == "x,10,12,12,11,10"


def test_str_round_trips_through_parse() -> None:
    chord = Chord(frets=(-1, 10, 12, 12, 11, 10))
    assert Chord.parse(str(chord)) == chord
