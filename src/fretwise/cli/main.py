"""Main CLI entry point for fretwise."""

import logging
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from fretwise import __version__
from fretwise.config import get_settings

console = Console()


@click.group()
@click.version_option(version=__version__, prog_name="fretwise")
@click.option("-v", "--verbose", is_flag=True, help="Show debug logging")
def main(verbose: bool) -> None:
    """fretwise - Turn MIDI into beginner-friendly fingerstyle guitar tabs.

    Picks a melody track, chooses a string and fret for every note with a
    dynamic-programming search that favours low frets, open strings and
    small hand movements, and writes the result as JSON and ASCII tab.
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)],
            force=True,
        )


@main.command()
@click.argument("midi_file", type=click.Path(path_type=Path))
@click.option(
    "-o",
    "--output",
    type=click.Path(path_type=Path),
    help="Output directory (default: ./output/<song_name>)",
)
@click.option("--track", "track_id", type=str, help="Id of the track to map (see `tracks`)")
@click.option("--combined", is_flag=True, help="Map all pitched tracks merged together")
@click.option(
    "--preset",
    type=click.Choice(["default", "melody", "combined"]),
    help="Mapping weight preset",
)
@click.option("--max-fret", type=click.IntRange(min=0), help="Highest fret to aim for")
@click.option(
    "--octave-shifts/--no-octave-shifts",
    default=None,
    help="Allow moving notes by an octave for easier fingering",
)
@click.option("--text-tab/--no-text-tab", default=None, help="Also write tab.txt")
def convert(
    midi_file: Path,
    output: Path | None,
    track_id: str | None,
    combined: bool,
    preset: str | None,
    max_fret: int | None,
    octave_shifts: bool | None,
    text_tab: bool | None,
) -> None:
    """Convert a MIDI file to guitar tablature.

    \b
    1. Load MIDI tracks
    2. Analyze tracks (note count, pitch, polyphony)
    3. Pick the melody track (or use --track / --combined)
    4. Map every note to a string and fret
    5. Write tab.json and tab.txt
    """
    from fretwise.pipeline import create_default_pipeline

    if not midi_file.exists():
        console.print(f"[red]Error: File not found: {midi_file}[/red]")
        raise SystemExit(1)
    if track_id is not None and combined:
        console.print("[red]Error: --track and --combined are mutually exclusive[/red]")
        raise SystemExit(1)

    settings = get_settings()

    # Apply CLI overrides
    if max_fret is not None:
        settings.max_fret = max_fret
    if octave_shifts is not None:
        settings.evaluate_octave_shifts = octave_shifts
    if text_tab is not None:
        settings.write_text_tab = text_tab

    if output is None:
        output = settings.output_dir / midi_file.stem

    console.print(f"[bold blue]fretwise[/bold blue] v{__version__}")
    console.print(f"Processing: [green]{midi_file}[/green]")
    console.print(f"Output: [green]{output}[/green]")
    console.print()

    pipeline = create_default_pipeline(
        settings, track_id=track_id, combined=combined, preset=preset
    )
    result = pipeline.run(midi_file, output)

    if result.success:
        console.print("[bold green]Processing complete![/bold green]")
        console.print(f"Output: {result.output_path}")
        if result.warnings:
            console.print("[yellow]Notes:[/yellow]")
            for warning in result.warnings:
                console.print(f"  - {warning}")
    else:
        console.print("[bold red]Processing failed![/bold red]")
        for error in result.errors:
            console.print(f"[red]Error: {error}[/red]")
        raise SystemExit(1)


@main.command()
@click.argument("midi_file", type=click.Path(path_type=Path))
def tracks(midi_file: Path) -> None:
    """List the tracks of a MIDI file with their statistics."""
    from fretwise.engine.analyzer import analyze_streams
    from fretwise.midi import load_midi
    from fretwise.stages.melody_selection import choose_melody_track

    if not midi_file.exists():
        console.print(f"[red]Error: File not found: {midi_file}[/red]")
        raise SystemExit(1)

    try:
        content = load_midi(midi_file)
    except (OSError, EOFError, ValueError, KeyError) as e:
        console.print(f"[red]Error: Could not parse MIDI file: {e}[/red]")
        raise SystemExit(1)

    summaries = analyze_streams(content.streams)
    suggested = choose_melody_track(summaries)

    table = Table(title=midi_file.name)
    table.add_column("Id", justify="right")
    table.add_column("Name")
    table.add_column("Prog", justify="right")
    table.add_column("Notes", justify="right")
    table.add_column("Pitch", justify="right")
    table.add_column("Vel", justify="right")
    table.add_column("Poly", justify="right")
    table.add_column("Melody")

    for summary in summaries:
        stream, stats = summary.stream, summary.statistics
        if summary is suggested:
            marker = "[bold green]suggested[/bold green]"
        elif summary.is_melody_candidate:
            marker = "yes"
        else:
            marker = "[dim]drums[/dim]" if stream.is_percussion else "[dim]empty[/dim]"
        table.add_row(
            stream.id,
            stream.label,
            "-" if stream.program is None else str(stream.program),
            str(stats.note_count),
            f"{stats.mean_pitch:.1f}",
            f"{stats.mean_velocity:.2f}",
            f"{stats.mean_concurrency:.2f}",
            marker,
        )

    console.print(table)
    if content.tempo_bpm:
        console.print(f"Tempo: {content.tempo_bpm:.1f} BPM, duration {content.duration:.2f}s")


@main.command()
def info() -> None:
    """Show current configuration."""
    settings = get_settings()
    mapping = settings.mapping_config()

    console.print("[bold]Configuration[/bold]")
    console.print(f"  Output directory: {settings.output_dir}")
    console.print(f"  Write text tab: {settings.write_text_tab}")
    console.print(f"  Tab line width: {settings.tab_line_width}")
    console.print(f"  Mapping preset: {settings.mapping_preset}")
    console.print()

    console.print("[bold]Mapping weights[/bold]")
    for key, value in mapping.as_dict().items():
        console.print(f"  {key}: {value}")


if __name__ == "__main__":
    main()
