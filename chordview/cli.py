"""chordview CLI entry point."""

import dataclasses
import logging
import sys
from pathlib import Path
from typing import Any, Callable

import click
import yaml

from chordview import __version__
from chordview.barre_analyzer import BarreAnalyzer
from chordview.chord_model import NOT_FOUND, Chord, InvalidChordShape
from chordview.diagram_exporter import DEFAULT_HEIGHT, DEFAULT_WIDTH, DiagramExporter
from chordview.diagram_models import ShowMode, StyleConfig
from chordview.style_loader import load_style


def _parse_chord(frets: str, fingers: str | None) -> Chord:
    """Parse CLI chord text, reporting shape errors as bad parameters."""
    try:
        return Chord.parse(frets, fingers)
    except InvalidChordShape as exc:
        raise click.BadParameter(str(exc)) from exc


def _parse_sheet_entry(entry: str) -> tuple[str, Chord]:
    """Split ``NAME=FRETS[:FINGERS]`` into a name and chord."""
    name, sep, shape = entry.partition("=")
    if not sep or not name.strip() or not shape.strip():
        raise click.BadParameter(f"Expected NAME=FRETS[:FINGERS], got '{entry}'.")
    frets, _, fingers = shape.partition(":")
    return name.strip(), _parse_chord(frets, fingers or None)


def _build_style(style_path: str | None, mode: str | None) -> StyleConfig:
    try:
        style = load_style(Path(style_path) if style_path else None)
    except (ValueError, yaml.YAMLError) as exc:
        click.echo(f"  ERROR: Could not load style — {exc}", err=True)
        sys.exit(1)
    if mode is not None:
        style = dataclasses.replace(style, show_mode=ShowMode(mode.lower()))
    return style


def _configure_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )


def _fret_label(fret: int) -> str:
    return "-" if fret == NOT_FOUND else str(fret)


def _layout_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Options shared by every command that lays out diagrams."""
    options = [
        click.option(
            "--mode",
            type=click.Choice(["normal", "simple"], case_sensitive=False),
            default=None,
            help="Show mode. Overrides the style file. simple: fewer rows, no finger labels.",
        ),
        click.option(
            "--width",
            type=click.FloatRange(min=1),
            default=DEFAULT_WIDTH,
            show_default=True,
            help="Diagram canvas width.",
        ),
        click.option(
            "--height",
            type=click.FloatRange(min=1),
            default=DEFAULT_HEIGHT,
            show_default=True,
            help="Diagram canvas height.",
        ),
        click.option(
            "--style",
            "style_path",
            type=click.Path(exists=True, dir_okay=False, readable=True),
            default=None,
            metavar="PATH",
            help="YAML style file merged over the built-in style.",
        ),
        click.option("--verbose", "-v", is_flag=True, help="Log layout decisions to stderr."),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _write(exporter: DiagramExporter, chords: list[tuple[str, Chord]], output: str) -> None:
    try:
        exporter.export(chords, output)
    except OSError as exc:
        click.echo(f"  ERROR: Could not write output file — {exc}", err=True)
        sys.exit(1)
    except ValueError as exc:
        click.echo(f"  ERROR: Could not render diagram — {exc}", err=True)
        sys.exit(1)


# ── CLI group ──────────────────────────────────────────────────────────────────

@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="chordview")
def main() -> None:
    """chordview — chord diagram layout and rendering."""


# ── info subcommand ────────────────────────────────────────────────────────────

@main.command()
@click.argument("frets")
@click.option("--fingers", default=None, metavar="FINGERS", help="Finger label per string.")
def info(frets: str, fingers: str | None) -> None:
    """
    Show the derived properties and barre of a chord shape.

    FRETS lists one value per string, lowest string first
    (x = muted, 0 = open).

    \b
    Examples:
      chordview info x32010
      chordview info 133211 --fingers 134211
    """
    chord = _parse_chord(frets, fingers)
    barre = BarreAnalyzer().analyze(chord)

    click.echo(f"  Chord        : {chord}")
    click.echo(f"  Open string  : {'yes' if chord.has_open_string else 'no'}")
    click.echo(f"  Muted string : {'yes' if chord.has_muted_string else 'no'}")
    click.echo(f"  Least fret   : {_fret_label(chord.least_fret)}")
    click.echo(f"  Largest fret : {_fret_label(chord.largest_fret)}")
    if barre is None:
        click.echo("  Barre        : none")
    else:
        click.echo(
            f"  Barre        : fret {barre.fret}, strings {barre.from_string}-{barre.to_string}"
        )


# ── render subcommand ──────────────────────────────────────────────────────────

@main.command()
@click.argument("frets")
@click.option("--fingers", default=None, metavar="FINGERS", help="Finger label per string.")
@click.option("--name", default=None, metavar="TEXT", help="Chord name. Defaults to the shape.")
@click.option(
    "--output",
    "-o",
    default=None,
    metavar="PATH",
    help="Destination file path. Defaults to <name> plus the format extension.",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["svg", "html", "json"], case_sensitive=False),
    default="svg",
    show_default=True,
    help="Output format: standalone SVG, HTML sheet, or JSON draw commands.",
)
@_layout_options
def render(
    frets: str,
    fingers: str | None,
    name: str | None,
    output: str | None,
    output_format: str,
    mode: str | None,
    width: float,
    height: float,
    style_path: str | None,
    verbose: bool,
) -> None:
    """
    Render one chord diagram.

    \b
    Examples:
      chordview render x32010 --name C
      chordview render 133211 --fingers 134211 --name F -o f.svg
      chordview render x02210 --mode simple --format json
    """
    _configure_logging(verbose)
    chord = _parse_chord(frets, fingers)
    resolved_name = name if name is not None else str(chord)
    normalized_format = output_format.lower()
    stem = "".join(c if c.isalnum() or c in "-_#" else "_" for c in resolved_name) or "chord"
    resolved_output = output if output is not None else f"{stem}.{normalized_format}"

    click.echo(f"chordview v{__version__}")
    click.echo(f"  Chord  : {resolved_name} ({chord})")
    click.echo(f"  Format : {normalized_format}")
    click.echo(f"  Output : {resolved_output}")
    click.echo()

    style = _build_style(style_path, mode)
    exporter = DiagramExporter(
        title=resolved_name,
        output_format=normalized_format,
        style=style,
        width=width,
        height=height,
    )
    click.echo("[1/2] Laying out diagram...")
    click.echo(f"[2/2] Writing {normalized_format} file → '{resolved_output}'...")
    _write(exporter, [(resolved_name, chord)], resolved_output)

    click.echo()
    click.echo(f"Done!  Wrote '{resolved_output}'.")


# ── sheet subcommand ───────────────────────────────────────────────────────────

@main.command()
@click.argument("entries", nargs=-1, required=True, metavar="NAME=FRETS[:FINGERS]...")
@click.option(
    "--output",
    "-o",
    default=None,
    metavar="PATH",
    help="Destination file path. Defaults to chords.<format>.",
)
@click.option("--title", default="", metavar="TEXT", help="Title shown in the sheet header.")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["html", "json"], case_sensitive=False),
    default="html",
    show_default=True,
    help="Sheet output format: HTML with inline SVG cards, or JSON draw commands.",
)
@_layout_options
def sheet(
    entries: tuple[str, ...],
    output: str | None,
    title: str,
    output_format: str,
    mode: str | None,
    width: float,
    height: float,
    style_path: str | None,
    verbose: bool,
) -> None:
    """
    Render several chords onto one chord sheet.

    Each entry is NAME=FRETS, optionally followed by :FINGERS.

    \b
    Examples:
      chordview sheet C=x32010 G=320003 Am=x02210
      chordview sheet "F=133211:134211" "Bm=x24432:013421" --title "Barre chords"
    """
    _configure_logging(verbose)
    chords = [_parse_sheet_entry(entry) for entry in entries]
    normalized_format = output_format.lower()
    resolved_output = output if output is not None else f"chords.{normalized_format}"

    click.echo(f"chordview v{__version__}")
    click.echo(f"  Chords : {', '.join(name for name, _ in chords)}")
    click.echo(f"  Format : {normalized_format}")
    click.echo(f"  Output : {resolved_output}")
    click.echo()

    style = _build_style(style_path, mode)
    exporter = DiagramExporter(
        title=title,
        output_format=normalized_format,
        style=style,
        width=width,
        height=height,
    )
    click.echo(f"[1/2] Laying out {len(chords)} diagram(s)...")
    click.echo(f"[2/2] Writing {normalized_format} file → '{resolved_output}'...")
    _write(exporter, chords, resolved_output)

    click.echo()
    if normalized_format == "html":
        click.echo(f"Done!  Open '{resolved_output}' in any browser. Use Print → Save as PDF.")
    else:
        click.echo(f"Done!  Wrote '{resolved_output}'.")
