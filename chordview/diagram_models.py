"""Data models shared by the layout engine and diagram renderers."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Literal, Mapping, Union


class ShowMode(Enum):
    """Diagram detail level."""

    NORMAL = "normal"
    #: Compact: three rows for low chords, one fret label, no finger labels.
    SIMPLE = "simple"


@dataclass(frozen=True)
class Glyph:
    """Opaque image handle for the muted/open string markers."""

    name: str
    width: float
    height: float
    href: str | None = None


@dataclass(frozen=True)
class StyleConfig:
    """Named drawing parameters for a chord diagram."""

    show_mode: ShowMode = ShowMode.NORMAL

    muted_glyph: Glyph | None = None
    open_glyph: Glyph | None = None
    glyph_offset_y: float = 0.0

    head_radius: float = 0.0
    head_color: str = "#FFFFFF"

    fret_text_size: float = 40.0
    fret_text_color: str = "#FFFFFF"
    fret_text_offset_x: float = 0.0

    grid_line_width: float = 10.0
    grid_line_color: str = "#FFFFFF"

    note_color: str = "#FFFFFF"
    note_radius: float = 40.0
    note_text_size: float = 40.0
    note_text_color: str = "#000000"
    note_stroke_width: float = 0.0
    note_stroke_color: str = "#FFFFFF"
    note_alpha: int = 255

    barre_color: str = "#FFFFFF"
    barre_alpha: int = 255
    barre_stroke_width: float = 0.0
    barre_stroke_color: str = "#FFFFFF"

    def __post_init__(self) -> None:
        for name in ("note_alpha", "barre_alpha"):
            value = getattr(self, name)
            if not 0 <= value <= 255:
                raise ValueError(f"{name} must be in 0..255, got {value}")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> StyleConfig:
        """
        Build a style from plain data (e.g. a parsed YAML document).

        Glyphs are given as mappings of :class:`Glyph` fields and the show
        mode as ``"normal"`` or ``"simple"``.

        Raises:
            ValueError: On unknown keys or invalid values.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown style keys: {', '.join(unknown)}")

        kwargs: dict[str, Any] = {}
        for key, value in data.items():
            try:
                kwargs[key] = _convert_value(key, value)
            except (TypeError, ValueError) as exc:
                raise ValueError(f"Invalid value for {key}: {value!r} ({exc})") from exc
        return cls(**kwargs)


def _convert_value(key: str, value: Any) -> Any:
    if key == "show_mode":
        return value if isinstance(value, ShowMode) else ShowMode(str(value).lower())
    if key in ("muted_glyph", "open_glyph"):
        return _glyph_from(value)
    if key in ("note_alpha", "barre_alpha"):
        return _number(value, int)
    if key.endswith("_color"):
        if not isinstance(value, str):
            raise TypeError(f"expected a colour string, got {type(value).__name__}")
        return value
    return _number(value, float)


def _number(value: Any, kind: type) -> Any:
    # bool is an int subclass; "yes"/"no" in YAML should not become 1/0
    if value is None or isinstance(value, bool):
        raise TypeError(f"expected a number, got {value!r}")
    return kind(value)


def _glyph_from(value: Any) -> Glyph | None:
    if value is None or isinstance(value, Glyph):
        return value
    if not isinstance(value, Mapping):
        raise ValueError(f"Glyph must be a mapping, got {value!r}")
    missing = [name for name in ("name", "width", "height") if value.get(name) is None]
    if missing:
        raise ValueError(f"Glyph is missing {', '.join(missing)}")
    return Glyph(
        name=str(value["name"]),
        width=_number(value["width"], float),
        height=_number(value["height"], float),
        href=value.get("href"),
    )


# ── Draw commands ────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class DrawLine:
    """Straight stroke from (x1, y1) to (x2, y2)."""

    x1: float
    y1: float
    x2: float
    y2: float
    color: str
    stroke_width: float
    alpha: int = 255
    kind: str = field(default="line", init=False)


@dataclass(frozen=True)
class DrawCircle:
    """Filled disc, or an outline when *fill* is false."""

    cx: float
    cy: float
    radius: float
    color: str
    alpha: int = 255
    fill: bool = True
    stroke_width: float = 0.0
    kind: str = field(default="circle", init=False)


@dataclass(frozen=True)
class DrawRect:
    """
    Axis-aligned rectangle.

    *rounded* selects which corners use *corner_radius*: ``"all"`` or only
    the ``"top"`` pair (used by the nut cap).
    """

    left: float
    top: float
    right: float
    bottom: float
    color: str
    alpha: int = 255
    fill: bool = True
    stroke_width: float = 0.0
    corner_radius: float = 0.0
    rounded: Literal["all", "top"] = "all"
    kind: str = field(default="rect", init=False)


@dataclass(frozen=True)
class DrawText:
    """Text whose left edge is *x* and whose line is vertically centred on *y*."""

    text: str
    x: float
    y: float
    size: float
    color: str
    alpha: int = 255
    kind: str = field(default="text", init=False)


@dataclass(frozen=True)
class DrawGlyph:
    """Glyph image placed with its top-left corner at (left, top)."""

    glyph: Glyph
    left: float
    top: float
    alpha: int = 255
    kind: str = field(default="glyph", init=False)


DrawCommand = Union[DrawLine, DrawCircle, DrawRect, DrawText, DrawGlyph]


@dataclass(frozen=True)
class ChordDiagram:
    """A laid-out chord: the command list plus the canvas it was built for."""

    name: str
    width: float
    height: float
    commands: list[DrawCommand]
