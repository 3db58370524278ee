"""Load stage - reads a MIDI file into per-track note streams using mido."""

from pathlib import Path

from fretwise.midi import MidiContent, load_midi
from fretwise.models.pipeline import ProcessingContext, StageResult
from fretwise.pipeline.base import PipelineStage


class LoadMidiStage(PipelineStage):
    """Stage 1: Load MIDI.

    Produces one NoteStream per MIDI track, with notes sorted by onset and
    velocities scaled to 0.0-1.0. Tempo and total duration are recorded for
    the final output.
    """

    SUPPORTED_EXTENSIONS = {".mid", ".midi", ".smf", ".kar"}

    @property
    def name(self) -> str:
        return "load_midi"

    def execute(self, context: ProcessingContext) -> StageResult:
        """Parse the source MIDI file."""
        warnings: list[str] = []
        path = context.source_path

        if not path.exists():
            return self._fail(f"File not found: {path}")

        if path.suffix.lower() not in self.SUPPORTED_EXTENSIONS:
            warnings.append(f"Unexpected extension {path.suffix!r}, trying to parse as MIDI")

        try:
            content = self._load(path)
        except (OSError, EOFError, ValueError, KeyError) as e:
            return self._fail(f"Could not parse MIDI file: {e}")

        context.streams = content.streams
        context.duration = content.duration
        context.tempo_bpm = content.tempo_bpm

        note_total = sum(len(s) for s in content.streams)
        if note_total == 0:
            return self._fail("MIDI file contains no notes")

        warnings.append(f"Loaded {len(content.streams)} tracks, {note_total} notes")

        return StageResult(
            success=True,
            stage_name=self.name,
            duration_seconds=0,
            warnings=warnings,
        )

    def _load(self, path: Path) -> MidiContent:
        return load_midi(path)
