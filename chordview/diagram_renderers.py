"""Renderer implementations that replay draw commands into output formats."""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from dataclasses import asdict

import svgwrite
from svgwrite.base import BaseElement

from chordview.diagram_models import (
    ChordDiagram,
    DrawCircle,
    DrawCommand,
    DrawGlyph,
    DrawLine,
    DrawRect,
    DrawText,
)


def _escape_html(text: str) -> str:
    """Escape the characters that are unsafe in HTML text."""
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def _num(value: float) -> float | int:
    """Round to two decimals, dropping the fraction of whole numbers."""
    rounded = round(float(value), 2)
    return int(rounded) if rounded.is_integer() else rounded


def _opacity(alpha: int) -> float | int:
    return _num(alpha / 255)


class DiagramRenderer(ABC):
    """Abstract chord diagram renderer."""

    @property
    @abstractmethod
    def default_extension(self) -> str:
        """Default filename extension for this renderer."""

    @abstractmethod
    def render(self, *, title: str, diagrams: list[ChordDiagram]) -> str:
        """Render laid-out diagrams into a file content string."""


class SvgDiagramRenderer(DiagramRenderer):
    """Render a single diagram as a standalone SVG document using svgwrite."""

    def __init__(self, background: str | None = None, glyph_ink: str = "#333333") -> None:
        """
        Args:
            background: Fill colour painted behind the diagram, or ``None``.
            glyph_ink:  Colour of the built-in ``muted``/``open`` marks used for
                        glyphs without an ``href``.
        """
        self.background = background
        self.glyph_ink = glyph_ink

    @property
    def default_extension(self) -> str:
        return ".svg"

    def render(self, *, title: str, diagrams: list[ChordDiagram]) -> str:
        if len(diagrams) != 1:
            raise ValueError(f"SVG output holds exactly one diagram, got {len(diagrams)}.")
        return self.render_svg(diagrams[0], title=title)

    def render_svg(self, diagram: ChordDiagram, title: str = "") -> str:
        """Replay *diagram*'s commands into an ``<svg>`` document string."""
        width = _num(diagram.width)
        height = _num(diagram.height)
        # debug=False: colours come from user style files and are not limited
        # to the names svgwrite's validator knows.
        dwg = svgwrite.Drawing(size=(width, height), viewBox=f"0 0 {width} {height}", debug=False)

        label = title or diagram.name
        if label:
            dwg.set_desc(title=label)
        if self.background:
            dwg.add(dwg.rect(insert=(0, 0), size=("100%", "100%"), fill=self.background))
        for command in diagram.commands:
            dwg.add(self.build_element(dwg, command))
        return dwg.tostring()

    def render_command(self, command: DrawCommand) -> str:
        """Translate one draw command into a standalone SVG element string."""
        dwg = svgwrite.Drawing(debug=False)
        return self.build_element(dwg, command).tostring()

    def build_element(self, dwg: svgwrite.Drawing, command: DrawCommand) -> BaseElement:
        """Create the svgwrite element for *command* using *dwg*'s factory."""
        if isinstance(command, DrawLine):
            return dwg.line(
                (_num(command.x1), _num(command.y1)),
                (_num(command.x2), _num(command.y2)),
                stroke=command.color,
                stroke_width=_num(command.stroke_width),
                stroke_opacity=_opacity(command.alpha),
            )
        if isinstance(command, DrawCircle):
            return dwg.circle(
                center=(_num(command.cx), _num(command.cy)),
                r=_num(command.radius),
                **self._paint(command.color, command.alpha, command.fill, command.stroke_width),
            )
        if isinstance(command, DrawRect):
            return self._rect(dwg, command)
        if isinstance(command, DrawText):
            return dwg.text(
                command.text,
                insert=(_num(command.x), _num(command.y)),
                font_size=_num(command.size),
                font_family="sans-serif",
                dominant_baseline="central",
                fill=command.color,
                fill_opacity=_opacity(command.alpha),
            )
        if isinstance(command, DrawGlyph):
            return self._glyph(dwg, command)
        raise TypeError(f"Unsupported draw command: {command!r}")

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _paint(self, color: str, alpha: int, fill: bool, stroke_width: float) -> dict[str, object]:
        if fill:
            return {"fill": color, "fill_opacity": _opacity(alpha)}
        return {
            "fill": "none",
            "stroke": color,
            "stroke_width": _num(stroke_width),
            "stroke_opacity": _opacity(alpha),
        }

    def _rect(self, dwg: svgwrite.Drawing, command: DrawRect) -> BaseElement:
        paint = self._paint(command.color, command.alpha, command.fill, command.stroke_width)
        width = command.right - command.left
        height = command.bottom - command.top
        if command.rounded == "top":
            radius = min(command.corner_radius, width / 2, height)
        else:
            radius = min(command.corner_radius, width / 2, height / 2)
        radius = max(radius, 0.0)

        if command.rounded == "top" and radius > 0:
            left, top, right, bottom = (
                _num(command.left),
                _num(command.top),
                _num(command.right),
                _num(command.bottom),
            )
            r = _num(radius)
            path = dwg.path(**paint)
            path.push("M", left, bottom)
            path.push("L", left, _num(top + r))
            path.push("Q", left, top, _num(left + r), top)
            path.push("L", _num(right - r), top)
            path.push("Q", right, top, right, _num(top + r))
            path.push("L", right, bottom)
            path.push("Z")
            return path

        rounding = {"rx": _num(radius), "ry": _num(radius)} if radius > 0 else {}
        return dwg.rect(
            insert=(_num(command.left), _num(command.top)),
            size=(_num(width), _num(height)),
            **rounding,
            **paint,
        )

    def _glyph(self, dwg: svgwrite.Drawing, command: DrawGlyph) -> BaseElement:
        glyph = command.glyph
        x, y, w, h = command.left, command.top, glyph.width, glyph.height
        opacity = _opacity(command.alpha)

        if glyph.href:
            return dwg.image(
                glyph.href,
                insert=(_num(x), _num(y)),
                size=(_num(w), _num(h)),
                opacity=opacity,
            )

        stroke = max(1.0, min(w, h) / 8)
        ink = {"stroke": self.glyph_ink, "stroke_width": _num(stroke), "opacity": opacity}
        if glyph.name == "muted":
            inset = stroke / 2
            mark = dwg.path(fill="none", **ink)
            mark.push("M", _num(x + inset), _num(y + inset))
            mark.push("L", _num(x + w - inset), _num(y + h - inset))
            mark.push("M", _num(x + w - inset), _num(y + inset))
            mark.push("L", _num(x + inset), _num(y + h - inset))
            return mark
        if glyph.name == "open":
            return dwg.circle(
                center=(_num(x + w / 2), _num(y + h / 2)),
                r=_num((min(w, h) - stroke) / 2),
                fill="none",
                **ink,
            )
        return dwg.rect(insert=(_num(x), _num(y)), size=(_num(w), _num(h)), fill="none", **ink)


class HtmlSheetRenderer(DiagramRenderer):
    """Render diagrams into a self-contained HTML chord sheet with inline SVG."""

    def __init__(self, svg_renderer: SvgDiagramRenderer | None = None) -> None:
        self.svg_renderer = svg_renderer or SvgDiagramRenderer()

    @property
    def default_extension(self) -> str:
        return ".html"

    def render(self, *, title: str, diagrams: list[ChordDiagram]) -> str:
        if not diagrams:
            raise ValueError("At least one diagram is required for HTML rendering.")
        cards = [(diagram.name, self.svg_renderer.render_svg(diagram)) for diagram in diagrams]
        return self.build_html(title, cards)

    def build_html(self, title: str, cards: list[tuple[str, str]]) -> str:
        """
        Wrap ``(name, svg)`` pairs in a self-contained HTML document.

        Each SVG is placed in its own ``.chord`` card captioned with the chord
        name. The stylesheet lays cards out in a responsive grid and keeps
        cards whole when printing.
        """
        title_safe = _escape_html(title)
        heading = f"  <h1>{title_safe}</h1>\n" if title else ""
        body = "\n".join(
            f'    <figure class="chord">{svg}<figcaption>{_escape_html(name)}</figcaption></figure>'
            for name, svg in cards
        )

        return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1.0" />
  <title>{title_safe}</title>
  <style>
    *, *::before, *::after {{ box-sizing: border-box; }}
    body {{
      font-family: Georgia, serif;
      background: #f0f0f0;
      margin: 0;
      padding: 2rem;
    }}
    h1 {{
      text-align: center;
      font-size: 1.6rem;
      margin-bottom: 2rem;
      color: #222;
    }}
    .sheet {{
      display: grid;
      grid-template-columns: repeat(auto-fill, minmax(160px, 1fr));
      gap: 1.5rem;
      max-width: 960px;
      margin: 0 auto;
    }}
    .chord {{
      background: #fff;
      box-shadow: 0 2px 8px rgba(0, 0, 0, 0.15);
      margin: 0;
      padding: 1rem;
      text-align: center;
    }}
    .chord svg {{
      display: block;
      width: 100%;
      height: auto;
    }}
    .chord figcaption {{
      margin-top: 0.5rem;
      font-size: 1.2rem;
      color: #222;
    }}
    @media print {{
      body {{
        background: #fff;
        padding: 0;
      }}
      .chord {{
        box-shadow: none;
        break-inside: avoid;
      }}
    }}
  </style>
</head>
<body>
{heading}  <div class="sheet">
{body}
  </div>
</body>
</html>"""


class JsonCommandRenderer(DiagramRenderer):
    """Dump the draw commands as JSON for renderers living outside Python."""

    @property
    def default_extension(self) -> str:
        return ".json"

    def render(self, *, title: str, diagrams: list[ChordDiagram]) -> str:
        payload = {
            "title": title,
            "diagrams": [asdict(diagram) for diagram in diagrams],
        }
        return json.dumps(payload, indent=2)
