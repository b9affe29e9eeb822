"""Text-width measurement used to align fret and finger labels."""

from __future__ import annotations

from typing import Final, Protocol


class TextMeasurer(Protocol):
    """Return the advance width of *text* drawn at *size*."""

    def __call__(self, text: str, size: float) -> float: ...


# Advance widths in em for a typical sans-serif face (tabular digits).
_DIGIT_EM: Final[float] = 0.556
_NARROW_EM: Final[float] = 0.278
_DEFAULT_EM: Final[float] = 0.6
_NARROW_CHARS: Final[frozenset[str]] = frozenset(" .,:;!|ilI'")


def estimate_text_width(text: str, size: float) -> float:
    """
    Deterministic width estimate for *text* at font *size*.

    Labels in a chord diagram are short numbers, so fixed per-character
    advances are close enough for alignment and need no font files.
    """
    total = 0.0
    for char in text:
        if char.isdigit():
            total += _DIGIT_EM
        elif char in _NARROW_CHARS:
            total += _NARROW_EM
        else:
            total += _DEFAULT_EM
    return total * size
