"""DiagramExporter: lays out chords and writes SVG, HTML or JSON files."""

from __future__ import annotations

from typing import Final, Sequence

from chordview.chord_model import Chord
from chordview.diagram_models import ChordDiagram, StyleConfig
from chordview.diagram_renderers import (
    DiagramRenderer,
    HtmlSheetRenderer,
    JsonCommandRenderer,
    SvgDiagramRenderer,
)
from chordview.layout_engine import DiagramLayoutEngine
from chordview.text_metrics import TextMeasurer, estimate_text_width

SUPPORTED_FORMATS: Final[set[str]] = {"svg", "html", "json"}

DEFAULT_WIDTH: Final[float] = 300.0
DEFAULT_HEIGHT: Final[float] = 360.0


class DiagramExporter:
    """
    Convert named chords into diagram output via a pluggable renderer.

    Supported formats:
    - ``svg``: a single chord as a standalone SVG document.
    - ``html``: a chord sheet with one inline SVG card per chord.
    - ``json``: the raw draw commands for an external renderer.
    """

    def __init__(
        self,
        title: str = "",
        output_format: str = "svg",
        style: StyleConfig | None = None,
        width: float = DEFAULT_WIDTH,
        height: float = DEFAULT_HEIGHT,
        measure_text: TextMeasurer = estimate_text_width,
    ) -> None:
        self.title = title
        normalized = output_format.strip().lower()
        if normalized not in SUPPORTED_FORMATS:
            supported = ", ".join(sorted(SUPPORTED_FORMATS))
            raise ValueError(f"Unsupported output format '{output_format}'. Use one of: {supported}.")
        self.output_format = normalized
        self.renderer = self._build_renderer(normalized)
        self.style = style or StyleConfig()
        self.width = width
        self.height = height
        self.measure_text = measure_text
        self.engine = DiagramLayoutEngine()

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _build_renderer(self, output_format: str) -> DiagramRenderer:
        if output_format == "svg":
            return SvgDiagramRenderer()
        if output_format == "html":
            return HtmlSheetRenderer()
        return JsonCommandRenderer()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def build_diagram(self, name: str, chord: Chord) -> ChordDiagram:
        """Lay out *chord* on this exporter's canvas."""
        commands = self.engine.layout(chord, self.style, self.width, self.height, self.measure_text)
        return ChordDiagram(name=name, width=self.width, height=self.height, commands=commands)

    def render(self, chords: Sequence[tuple[str, Chord]]) -> str:
        """
        Lay out ``(name, chord)`` pairs and render them in the selected format.

        Raises:
            ValueError: If the renderer cannot hold the given chords.
        """
        diagrams = [self.build_diagram(name, chord) for name, chord in chords]
        return self.renderer.render(title=self.title, diagrams=diagrams)

    def export(self, chords: Sequence[tuple[str, Chord]], output_path: str) -> None:
        """
        Render chords in the selected format and write them to disk.

        Raises:
            ValueError: If rendering fails.
            OSError: If the output file cannot be written.
        """
        content = self.render(chords)
        with open(output_path, "w", encoding="utf-8") as fh:
            fh.write(content)
