"""Pytest fixtures for fretwise tests."""

from pathlib import Path

import mido
import pytest

from fretwise.config import configure
from fretwise.models import Note, NoteStream

TICKS_PER_BEAT = 480  # 480 ticks = 0.5s at 120 bpm


@pytest.fixture(autouse=True)
def fresh_settings(tmp_path: Path):
    """Give each test its own global settings instance."""
    return configure(output_dir=tmp_path / "default-output")


@pytest.fixture
def temp_output_dir(tmp_path: Path) -> Path:
    """Return a temporary output directory."""
    output_dir = tmp_path / "output"
    output_dir.mkdir()
    return output_dir


def make_notes(pitches: list[int], step: float = 0.5, velocity: float = 0.8) -> list[Note]:
    """Back-to-back notes, one every ``step`` seconds."""
    return [
        Note(onset=i * step, duration=step, pitch=p, velocity=velocity)
        for i, p in enumerate(pitches)
    ]


@pytest.fixture
def melody_stream() -> NoteStream:
    return NoteStream(
        id="1",
        name="Melody",
        channel=0,
        program=0,
        notes=tuple(make_notes([60, 62, 64, 65])),
    )


@pytest.fixture
def drum_stream() -> NoteStream:
    return NoteStream(
        id="3",
        name="Drums",
        channel=9,
        is_percussion=True,
        notes=tuple(make_notes([36, 38, 36, 38], step=0.25)),
    )


def _note(track: mido.MidiTrack, channel: int, pitch: int, length: int, delay: int = 0) -> None:
    track.append(mido.Message("note_on", channel=channel, note=pitch, velocity=100, time=delay))
    track.append(mido.Message("note_off", channel=channel, note=pitch, velocity=0, time=length))


def _chord(track: mido.MidiTrack, channel: int, pitches: list[int], length: int) -> None:
    for p in pitches:
        track.append(mido.Message("note_on", channel=channel, note=p, velocity=90, time=0))
    for i, p in enumerate(pitches):
        track.append(
            mido.Message("note_off", channel=channel, note=p, velocity=0, time=length if i == 0 else 0)
        )


@pytest.fixture
def midi_file(tmp_path: Path) -> Path:
    """A type 1 file at 120 bpm: tempo track, melody, chords and drums.

    Track 1 "Melody" plays 60 62 64 65, half a second each.
    Track 2 "Chords" plays two three-note chords, one second each.
    Track 3 "Drums" sits on channel 10.
    """
    mid = mido.MidiFile(type=1, ticks_per_beat=TICKS_PER_BEAT)

    tempo = mido.MidiTrack()
    tempo.append(mido.MetaMessage("track_name", name="Tempo", time=0))
    tempo.append(mido.MetaMessage("set_tempo", tempo=500000, time=0))
    mid.tracks.append(tempo)

    melody = mido.MidiTrack()
    melody.append(mido.MetaMessage("track_name", name="Melody", time=0))
    melody.append(mido.Message("program_change", channel=0, program=0, time=0))
    for pitch in (60, 62, 64, 65):
        _note(melody, 0, pitch, TICKS_PER_BEAT)
    mid.tracks.append(melody)

    chords = mido.MidiTrack()
    chords.append(mido.MetaMessage("track_name", name="Chords", time=0))
    chords.append(mido.Message("program_change", channel=1, program=24, time=0))
    _chord(chords, 1, [48, 52, 55], 2 * TICKS_PER_BEAT)
    _chord(chords, 1, [47, 50, 55], 2 * TICKS_PER_BEAT)
    mid.tracks.append(chords)

    drums = mido.MidiTrack()
    drums.append(mido.MetaMessage("track_name", name="Drums", time=0))
    for pitch in (36, 38, 36, 38):
        _note(drums, 9, pitch, TICKS_PER_BEAT // 2)
    mid.tracks.append(drums)

    path = tmp_path / "song.mid"
    mid.save(str(path))
    return path
