"""Command-line interface for Chromatic Tuner.

Provides commands for:
- listen: Live tuner on the microphone
- analyze: Per-frame pitch readings for an audio file
- note: Map a single frequency to a note
- tone: Play or export a reference tone
- table: Show note frequencies for a reference pitch
"""

import typer
import time
from pathlib import Path
from typing import Optional, List
from rich.console import Console
from rich.live import Live
from rich.table import Table
from rich.text import Text

from .core.constants import (
    DEFAULT_REFERENCE_A4,
    REFERENCE_PITCHES,
    DEFAULT_FRAME_SIZE,
    DEFAULT_HOP_LENGTH,
    DEFAULT_SAMPLE_RATE,
    DEFAULT_TONE_DURATION,
)

app = typer.Typer(
    name="chromatic-tuner",
    help="Real-time chromatic instrument tuner",
    rich_markup_mode="markdown",
)
console = Console()

STATUS_STYLES = {
    "In Tune!": "green",
    "Almost": "yellow",
    "Too Sharp": "red",
    "Too Flat": "red",
}


def _reference_option():
    return typer.Option(
        DEFAULT_REFERENCE_A4,
        "-r",
        "--reference",
        help=f"Reference A4 in Hz (usual values: {', '.join(f'{p:g}' for p in REFERENCE_PITCHES)})",
    )


def _table_for(reference: float):
    from .tuning import NoteTable

    try:
        return NoteTable.for_reference(reference)
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)


def _reading_text(reading) -> Text:
    """Single status line for the live display."""
    meter_width = 12
    filled = int(round(reading.volume * meter_width))
    meter = "#" * filled + "." * (meter_width - filled)

    if reading.note is None:
        return Text(f"[{meter}]  listening...", style="dim")

    note = reading.note
    label = reading.status.label if reading.status else ""
    text = Text(f"[{meter}]  ")
    text.append(f"{note.full_name:<4}", style="bold cyan")
    text.append(f" {note.cents:+3d} cents  {note.frequency:7.2f} Hz  ")
    text.append(label, style=STATUS_STYLES.get(label, ""))
    if reading.held:
        text.append("  (held)", style="dim")
    return text


@app.command()
def listen(
    reference: float = _reference_option(),
    device: Optional[int] = typer.Option(
        None, "-d", "--device", help="Input device index (see --list-devices)"
    ),
    sample_rate: int = typer.Option(
        DEFAULT_SAMPLE_RATE, "--sample-rate", help="Capture sample rate in Hz"
    ),
    frame_size: int = typer.Option(
        DEFAULT_FRAME_SIZE, "--frame-size", help="Samples per analysis frame"
    ),
    list_devices: bool = typer.Option(
        False, "--list-devices", help="List audio devices and exit"
    ),
):
    """Tune live from the microphone. Press Ctrl+C to stop.

    **Examples:**

        chromatic-tuner listen

        chromatic-tuner listen -r 442 --device 2
    """
    from .acquisition import TunerSession
    from .input import MicrophoneSource
    from .tuning import NoteMapper

    if list_devices:
        import sounddevice as sd

        console.print(sd.query_devices())
        return

    session = TunerSession(mapper=NoteMapper(_table_for(reference)), hold_last=True)

    try:
        source = MicrophoneSource(
            sample_rate=sample_rate,
            frame_size=frame_size,
            hop_length=frame_size // 2,
            device=device,
        )
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    console.print(f"[blue]Listening[/blue] (A4 = {reference:g} Hz). Press Ctrl+C to quit.")
    try:
        with source, Live(Text("listening...", style="dim"), console=console) as live:
            for reading in session.run(source.frames()):
                live.update(_reading_text(reading))
    except KeyboardInterrupt:
        console.print("[yellow]Stopped[/yellow]")
    except Exception as e:
        console.print(f"[red]Audio input failed: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def analyze(
    input_file: Path = typer.Argument(..., help="Input audio file"),
    reference: float = _reference_option(),
    frame_size: int = typer.Option(
        DEFAULT_FRAME_SIZE, "--frame-size", help="Samples per analysis frame"
    ),
    hop_length: int = typer.Option(
        DEFAULT_HOP_LENGTH, "--hop", help="Samples between frames"
    ),
    show_silent: bool = typer.Option(
        False, "--all", help="Include frames without a detected note"
    ),
    json_output: bool = typer.Option(
        False, "--json", help="Output results as JSON (for scripting)"
    ),
    verbose: bool = typer.Option(
        False, "-v", "--verbose", help="Verbose output"
    ),
):
    """Estimate pitch frame by frame for an audio file.

    **Examples:**

        chromatic-tuner analyze string_e2.wav

        chromatic-tuner analyze take.flac -r 442 --json
    """
    from .acquisition import TunerSession
    from .input import AudioLoader
    from .tuning import NoteMapper

    if not input_file.exists():
        console.print(f"[red]Error: File not found: {input_file}[/red]")
        raise typer.Exit(1)

    session = TunerSession(mapper=NoteMapper(_table_for(reference)))

    try:
        loader = AudioLoader(frame_size=frame_size, hop_length=hop_length)
        audio, sr = loader.load(str(input_file))
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    if not json_output:
        console.print(f"[blue]Analyzing:[/blue] {input_file}")
        if verbose:
            console.print(
                f"  Duration: {loader.get_duration(audio, sr):.2f}s, Sample rate: {sr}Hz"
            )

    rows = []
    start = time.time()
    for t, frame in loader.split_frames(audio, sr):
        reading = session.process(frame)
        if reading.has_note or show_silent:
            rows.append((t, reading))
    elapsed = time.time() - start

    if json_output:
        results = {
            "file": str(input_file),
            "reference_a4": reference,
            "sample_rate": sr,
            "frame_size": frame_size,
            "hop_length": hop_length,
            "readings": [dict(time=t, **r.to_dict()) for t, r in rows],
        }
        console.print_json(data=results)
        return

    if not rows:
        console.print("[yellow]No pitched frames found[/yellow]")
        return

    _show_readings_table(rows)
    if verbose:
        console.print(f"  Analysis time: {elapsed:.2f}s")


@app.command()
def note(
    frequency: float = typer.Argument(..., help="Frequency in Hz"),
    reference: float = _reference_option(),
    json_output: bool = typer.Option(False, "--json", help="Output result as JSON"),
):
    """Show the nearest note and cents deviation for a frequency."""
    from .tuning import NoteMapper, TuningStatus

    estimate = NoteMapper(_table_for(reference)).map(frequency)

    if json_output:
        console.print_json(data=estimate.to_dict() if estimate else None)
        return

    if estimate is None:
        console.print(f"[yellow]{frequency:g} Hz is outside the tunable range[/yellow]")
        raise typer.Exit(1)

    status = TuningStatus.from_cents(estimate.cents)
    console.print(
        f"[bold cyan]{estimate.full_name}[/bold cyan] {estimate.cents:+d} cents "
        f"(target {estimate.target_frequency:.2f} Hz) "
        f"[{STATUS_STYLES[status.label]}]{status.label}[/]"
    )


@app.command()
def tone(
    note_name: str = typer.Argument(..., help="Note to play, e.g. E2, A#4, Bb3"),
    reference: float = _reference_option(),
    duration: float = typer.Option(
        DEFAULT_TONE_DURATION, "-t", "--duration", help="Tone length in seconds"
    ),
    output: Optional[Path] = typer.Option(
        None, "-o", "--output", help="Write a WAV file instead of playing"
    ),
    sample_rate: int = typer.Option(
        DEFAULT_SAMPLE_RATE, "--sample-rate", help="Output sample rate in Hz"
    ),
):
    """Play (or export) a reference tone for a note."""
    from .synthesis import ToneSynthesizer, TonePlayer, write_tone

    synthesizer = ToneSynthesizer(sample_rate=sample_rate, table=_table_for(reference))
    try:
        frequency = synthesizer.table.frequency_of(note_name)
        wave = synthesizer.synthesize(frequency, duration)
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    if output is not None:
        path = write_tone(output, wave, sample_rate)
        console.print(f"[green]Saved {note_name} ({frequency:.2f} Hz):[/green] {path}")
        return

    console.print(f"[blue]Playing {note_name}[/blue] ({frequency:.2f} Hz)")
    try:
        with TonePlayer(synthesizer) as player:
            player.play(frequency, duration, blocking=True)
    except Exception as e:
        console.print(f"[red]Playback failed: {e}[/red]")
        raise typer.Exit(1)


@app.command(name="table")
def show_table(
    reference: float = _reference_option(),
    low: str = typer.Option("C2", "--from", help="Lowest note"),
    high: str = typer.Option("C6", "--to", help="Highest note"),
):
    """List note frequencies for a reference pitch."""
    from .core import Pitch

    note_table = _table_for(reference)
    try:
        lowest, highest = Pitch.parse(low), Pitch.parse(high)
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    entries = [e for e in note_table if lowest <= e.pitch <= highest]
    _show_note_table(entries, reference)


def _show_readings_table(rows):
    """Display tuner readings in a table."""
    table = Table(title="Tuner Readings")
    table.add_column("Time (s)", style="green")
    table.add_column("Frequency (Hz)", style="yellow")
    table.add_column("Note", style="cyan")
    table.add_column("Cents", style="magenta")
    table.add_column("Status")

    for t, reading in rows:
        if reading.note is None:
            freq = f"{reading.frequency:.2f}" if reading.frequency else "-"
            table.add_row(f"{t:.3f}", freq, "-", "-", "")
            continue
        label = reading.status.label
        table.add_row(
            f"{t:.3f}",
            f"{reading.frequency:.2f}",
            reading.note.full_name,
            f"{reading.note.cents:+d}",
            f"[{STATUS_STYLES[label]}]{label}[/]",
        )

    console.print(table)


def _show_note_table(entries: List, reference: float):
    """Display note frequencies in a table."""
    table = Table(title=f"Equal Temperament (A4 = {reference:g} Hz)")
    table.add_column("Note", style="cyan")
    table.add_column("Frequency (Hz)", style="yellow")
    table.add_column("Semitones from A4", style="magenta")

    for entry in entries:
        table.add_row(
            entry.pitch.name,
            f"{entry.frequency:.2f}",
            f"{entry.semitones_from_a4:+d}",
        )

    console.print(table)


def main():
    """Entry point."""
    app()


if __name__ == "__main__":
    main()
