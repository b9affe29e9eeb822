"""Unit tests for DiagramExporter."""

import json
from pathlib import Path

import pytest

from chordview.chord_model import DEFAULT_C, Chord
from chordview.diagram_exporter import DEFAULT_HEIGHT, DEFAULT_WIDTH, DiagramExporter
from chordview.diagram_models import DrawCircle, StyleConfig
from chordview.diagram_renderers import HtmlSheetRenderer, JsonCommandRenderer, SvgDiagramRenderer

G_MAJOR = Chord(frets=(3, 2, 0, 0, 0, 3))


def test_default_format_is_svg() -> None:
    exporter = DiagramExporter()
    assert exporter.output_format == "svg"
    assert isinstance(exporter.renderer, SvgDiagramRenderer)


@pytest.mark.parametrize(
    "output_format, renderer_type",
    [("svg", SvgDiagramRenderer), ("HTML", HtmlSheetRenderer), (" json ", JsonCommandRenderer)],
)
def test_format_selects_renderer(output_format: str, renderer_type: type) -> None:
    assert isinstance(DiagramExporter(output_format=output_format).renderer, renderer_type)


def test_unsupported_format_rejected() -> None:
    with pytest.raises(ValueError, match="Unsupported output format 'png'"):
        DiagramExporter(output_format="png")


def test_build_diagram_uses_canvas_size() -> None:
    diagram = DiagramExporter().build_diagram("C", DEFAULT_C)
    assert diagram.name == "C"
    assert (diagram.width, diagram.height) == (DEFAULT_WIDTH, DEFAULT_HEIGHT)
    assert any(isinstance(c, DrawCircle) for c in diagram.commands)


def test_build_diagram_honours_style() -> None:
    style = StyleConfig(note_color="#ABCDEF", note_radius=12.0, grid_line_width=2.0)
    diagram = DiagramExporter(style=style).build_diagram("C", DEFAULT_C)
    circles = [c for c in diagram.commands if isinstance(c, DrawCircle)]
    assert circles and all(c.color == "#ABCDEF" and c.radius == 12.0 for c in circles)


def test_render_svg_single_chord() -> None:
    content = DiagramExporter(title="C").render([("C", DEFAULT_C)])
    assert content.startswith("<svg ")


def test_render_svg_rejects_multiple_chords() -> None:
    with pytest.raises(ValueError):
        DiagramExporter().render([("C", DEFAULT_C), ("G", G_MAJOR)])


def test_render_html_sheet() -> None:
    content = DiagramExporter(title="Campfire", output_format="html").render(
        [("C", DEFAULT_C), ("G", G_MAJOR)]
    )
    assert "<h1>Campfire</h1>" in content
    assert content.count('<figure class="chord">') == 2


def test_render_json_commands() -> None:
    content = DiagramExporter(output_format="json", width=200, height=240).render([("G", G_MAJOR)])
    payload = json.loads(content)
    assert payload["diagrams"][0]["name"] == "G"
    assert payload["diagrams"][0]["width"] == 200
    assert payload["diagrams"][0]["commands"]


def test_export_writes_file(tmp_path: Path) -> None:
    out = tmp_path / "c.svg"
    DiagramExporter(title="C").export([("C", DEFAULT_C)], str(out))
    assert out.exists()
    assert out.read_text(encoding="utf-8").startswith("<svg ")


def test_export_to_missing_directory_raises_oserror(tmp_path: Path) -> None:
    with pytest.raises(OSError):
        DiagramExporter().export([("C", DEFAULT_C)], str(tmp_path / "missing" / "c.svg"))
