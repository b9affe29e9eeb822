"""DiagramLayoutEngine: turns a chord and a style into ordered draw commands."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from chordview.barre_analyzer import BarreAnalyzer, BarreSpan
from chordview.chord_model import MUTED, NOT_FOUND, OPEN, STRING_COUNT, Chord
from chordview.diagram_models import (
    DrawCircle,
    DrawCommand,
    DrawGlyph,
    DrawLine,
    DrawRect,
    DrawText,
    Glyph,
    ShowMode,
    StyleConfig,
)
from chordview.text_metrics import TextMeasurer, estimate_text_width

logger = logging.getLogger(__name__)

# ── Layout constants ────────────────────────────────────────────────────────
DEFAULT_ROWS = 4  # frets shown by default
SIMPLE_ROWS = 3  # compact window for low chords in simple mode
DEFAULT_FRET_LIMIT = 4  # chords reaching past this fret get side labels
HEAD_FRET_LIMIT = 5  # chords reaching past this fret omit the nut cap


@dataclass(frozen=True, eq=False)
class GridGeometry:
    """
    Fretboard rectangle and the positions of its lines.

    Lines are inset by half the line width at the outer edges so strokes stay
    inside the rectangle. Notes, glyphs and the barre sit on the string lines.
    """

    left: float
    top: float
    width: float
    height: float
    rows: int
    line_width: float

    @property
    def column_width(self) -> float:
        return self.width / (STRING_COUNT - 1)

    @property
    def row_height(self) -> float:
        return self.height / self.rows

    @property
    def string_xs(self) -> np.ndarray:
        half = self.line_width / 2
        return np.linspace(self.left + half, self.left + self.width - half, STRING_COUNT)

    @property
    def fret_ys(self) -> np.ndarray:
        half = self.line_width / 2
        return np.linspace(self.top + half, self.top + self.height - half, self.rows + 1)

    def string_x(self, column: int) -> float:
        """x of the string line in *column* (0 = lowest-pitched string)."""
        return float(self.string_xs[column])

    def row_center_y(self, row: int) -> float:
        """Vertical centre of 1-based *row*."""
        return self.top + self.row_height * row - self.row_height / 2


class DiagramLayoutEngine:
    """
    Computes the draw commands for one chord diagram.

    Commands are emitted back to front: string glyphs, fret labels, nut cap,
    grid lines, barre, notes. The engine keeps no state between calls.
    """

    def __init__(self, barre_analyzer: BarreAnalyzer | None = None) -> None:
        self.barre_analyzer = barre_analyzer or BarreAnalyzer()

    # ------------------------------------------------------------------
    # Decisions
    # ------------------------------------------------------------------

    def row_count(self, chord: Chord, style: StyleConfig) -> int:
        """Three rows for low, narrow chords in simple mode; four otherwise."""
        if style.show_mode is ShowMode.SIMPLE:
            least = chord.least_fret
            if chord.largest_fret - least < 3 and least == 1:
                return SIMPLE_ROWS
        return DEFAULT_ROWS

    def exceeds_default_fret(self, chord: Chord) -> bool:
        """True when the chord reaches past the default fret window."""
        return chord.largest_fret > DEFAULT_FRET_LIMIT

    def draws_head(self, chord: Chord) -> bool:
        """True when the chord sits close enough to the nut to show it."""
        return chord.largest_fret <= HEAD_FRET_LIMIT

    def note_row(self, chord: Chord, fret: int) -> int:
        """Map an absolute *fret* to the 1-based row it is drawn in."""
        if not self.exceeds_default_fret(chord):
            return fret
        least = chord.least_fret
        if fret == least:
            return 1
        remainder = fret % least
        return remainder + 1 if remainder != 0 else fret - least + 1

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def layout(
        self,
        chord: Chord,
        style: StyleConfig,
        width: float,
        height: float,
        measure_text: TextMeasurer = estimate_text_width,
    ) -> list[DrawCommand]:
        """
        Lay out *chord* inside a ``width`` x ``height`` canvas.

        Args:
            chord:        Chord to draw.
            style:        Drawing parameters.
            width:        Canvas width.
            height:       Canvas height (same units as *width*).
            measure_text: ``(text, size) -> width`` capability.

        Returns:
            Draw commands in painting order. Empty when the canvas leaves no
            room for the grid.
        """
        if width <= 0 or height <= 0:
            logger.debug("Zero area canvas %sx%s for %s", width, height, chord)
            return []

        rows = self.row_count(chord, style)
        exceeds = self.exceeds_default_fret(chord)
        label_width = self._label_width(chord, style, rows, measure_text)
        glyph_height = self._glyph_row_height(chord, style)
        head_height = style.head_radius if self.draws_head(chord) else 0.0

        grid = GridGeometry(
            left=label_width,
            top=glyph_height + head_height,
            width=width - label_width - style.note_radius,
            height=height - glyph_height - head_height,
            rows=rows,
            line_width=style.grid_line_width,
        )
        if grid.width <= 0 or grid.height <= 0:
            logger.debug("Zero area grid %.2fx%.2f for %s", grid.width, grid.height, chord)
            return []

        logger.debug(
            "Layout %s: rows=%d exceeds=%s head=%s grid=(%.2f, %.2f, %.2f, %.2f)",
            chord, rows, exceeds, head_height > 0, grid.left, grid.top, grid.width, grid.height,
        )

        barre = self.barre_analyzer.analyze(chord)

        commands: list[DrawCommand] = []
        commands.extend(self._string_glyphs(chord, style, grid, glyph_height))
        if exceeds:
            commands.extend(self._fret_labels(chord, style, grid, label_width, measure_text))
        if head_height > 0:
            commands.append(self._head(style, grid, glyph_height))
        commands.extend(self._grid_lines(style, grid))
        if barre is not None:
            commands.extend(self._barre(chord, style, grid, barre, measure_text))
        commands.extend(self._notes(chord, style, grid, barre, measure_text))
        return commands

    # ------------------------------------------------------------------
    # Sizing
    # ------------------------------------------------------------------

    def _label_width(
        self, chord: Chord, style: StyleConfig, rows: int, measure_text: TextMeasurer
    ) -> float:
        least = chord.least_fret
        base = least if least != NOT_FOUND else 1
        widest = max(measure_text(str(fret), style.fret_text_size) for fret in range(base, base + rows))
        return widest + style.fret_text_offset_x

    def _glyph_row_height(self, chord: Chord, style: StyleConfig) -> float:
        if not (chord.has_muted_string or chord.has_open_string):
            return 0.0
        return _glyph_band(style) + style.glyph_offset_y

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def _string_glyphs(
        self, chord: Chord, style: StyleConfig, grid: GridGeometry, glyph_height: float
    ) -> list[DrawCommand]:
        if glyph_height <= 0:
            return []

        band = _glyph_band(style)
        commands: list[DrawCommand] = []
        for column, fret in enumerate(chord.frets):
            glyph: Glyph | None
            if fret == MUTED:
                glyph = style.muted_glyph
            elif fret == OPEN:
                glyph = style.open_glyph
            else:
                glyph = None
            if glyph is None:
                continue
            commands.append(
                DrawGlyph(
                    glyph=glyph,
                    left=grid.string_x(column) - glyph.width / 2,
                    top=(band - glyph.height) / 2,
                )
            )
        return commands

    def _fret_labels(
        self,
        chord: Chord,
        style: StyleConfig,
        grid: GridGeometry,
        label_width: float,
        measure_text: TextMeasurer,
    ) -> list[DrawCommand]:
        least = chord.least_fret
        commands: list[DrawCommand] = []
        for row in range(1, grid.rows + 1):
            text = str(least + row - 1)
            text_width = measure_text(text, style.fret_text_size)
            commands.append(
                DrawText(
                    text=text,
                    x=label_width - text_width - style.fret_text_offset_x,
                    y=grid.row_center_y(row),
                    size=style.fret_text_size,
                    color=style.fret_text_color,
                )
            )
            # Simple mode labels only the first fret.
            if style.show_mode is ShowMode.SIMPLE:
                break
        return commands

    def _head(self, style: StyleConfig, grid: GridGeometry, glyph_height: float) -> DrawCommand:
        return DrawRect(
            left=grid.left,
            top=glyph_height,
            right=grid.left + grid.width,
            bottom=glyph_height + style.head_radius,
            color=style.head_color,
            corner_radius=style.head_radius,
            rounded="top",
        )

    def _grid_lines(self, style: StyleConfig, grid: GridGeometry) -> list[DrawCommand]:
        line_width = style.grid_line_width
        color = style.grid_line_color
        commands: list[DrawCommand] = [
            DrawLine(
                x1=grid.left,
                y1=float(y),
                x2=grid.left + grid.width,
                y2=float(y),
                color=color,
                stroke_width=line_width,
            )
            for y in grid.fret_ys
        ]
        commands.extend(
            DrawLine(
                x1=float(x),
                y1=grid.top,
                x2=float(x),
                y2=grid.top + grid.height,
                color=color,
                stroke_width=line_width,
            )
            for x in grid.string_xs
        )
        return commands

    def _barre(
        self,
        chord: Chord,
        style: StyleConfig,
        grid: GridGeometry,
        barre: BarreSpan,
        measure_text: TextMeasurer,
    ) -> list[DrawCommand]:
        radius = style.note_radius
        row = 1 if self.exceeds_default_fret(chord) else barre.fret
        cy = grid.row_center_y(row)

        low_column = STRING_COUNT - barre.to_string
        high_column = STRING_COUNT - barre.from_string
        left = grid.string_x(low_column)
        right = grid.string_x(high_column)
        top = cy - radius
        bottom = cy + radius

        commands: list[DrawCommand] = [
            DrawRect(
                left=left,
                top=top,
                right=right,
                bottom=bottom,
                color=style.barre_color,
                alpha=style.barre_alpha,
                corner_radius=radius,
            )
        ]

        stroke = style.barre_stroke_width
        if stroke > 0:
            for y in (top + stroke / 2, bottom - stroke / 2):
                commands.append(
                    DrawLine(
                        x1=left,
                        y1=y,
                        x2=right,
                        y2=y,
                        color=style.barre_stroke_color,
                        stroke_width=stroke,
                    )
                )

        finger = 1 if chord.fingers is not None else 0
        for column in (high_column, low_column):
            commands.extend(
                self._note(
                    style,
                    cx=grid.string_x(column),
                    cy=cy,
                    finger=finger,
                    alpha=255,
                    stroke_width=0.0,
                    measure_text=measure_text,
                )
            )
        return commands

    def _notes(
        self,
        chord: Chord,
        style: StyleConfig,
        grid: GridGeometry,
        barre: BarreSpan | None,
        measure_text: TextMeasurer,
    ) -> list[DrawCommand]:
        commands: list[DrawCommand] = []
        for column, fret in enumerate(chord.frets):
            if fret < 1:
                continue
            string = STRING_COUNT - column
            if barre is not None and barre.covers(fret, string):
                continue
            commands.extend(
                self._note(
                    style,
                    cx=grid.string_x(column),
                    cy=grid.row_center_y(self.note_row(chord, fret)),
                    finger=chord.finger_at(string),
                    alpha=style.note_alpha,
                    stroke_width=style.note_stroke_width,
                    measure_text=measure_text,
                )
            )
        return commands

    def _note(
        self,
        style: StyleConfig,
        *,
        cx: float,
        cy: float,
        finger: int,
        alpha: int,
        stroke_width: float,
        measure_text: TextMeasurer,
    ) -> list[DrawCommand]:
        commands: list[DrawCommand] = [
            DrawCircle(cx=cx, cy=cy, radius=style.note_radius, color=style.note_color, alpha=alpha)
        ]
        if style.show_mode is not ShowMode.SIMPLE and finger > 0:
            text = str(finger)
            commands.append(
                DrawText(
                    text=text,
                    x=cx - measure_text(text, style.note_text_size) / 2,
                    y=cy,
                    size=style.note_text_size,
                    color=style.note_text_color,
                )
            )
        if stroke_width > 0:
            commands.append(
                DrawCircle(
                    cx=cx,
                    cy=cy,
                    radius=style.note_radius,
                    color=style.note_stroke_color,
                    fill=False,
                    stroke_width=stroke_width,
                )
            )
        return commands


def _glyph_band(style: StyleConfig) -> float:
    heights = [g.height for g in (style.muted_glyph, style.open_glyph) if g is not None]
    return max(heights, default=0.0)


_default_engine = DiagramLayoutEngine()


def layout(
    chord: Chord,
    style: StyleConfig,
    width: float,
    height: float,
    measure_text: TextMeasurer = estimate_text_width,
) -> list[DrawCommand]:
    """Lay out *chord* with a shared :class:`DiagramLayoutEngine`."""
    return _default_engine.layout(chord, style, width, height, measure_text)
