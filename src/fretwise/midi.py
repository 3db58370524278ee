"""MIDI file loading: one NoteStream per track."""

import logging
from dataclasses import dataclass, field
from pathlib import Path

import mido

from fretwise.models.notes import Note, NoteStream

logger = logging.getLogger(__name__)

DEFAULT_TEMPO = 500000  # microseconds per beat, 120 bpm
PERCUSSION_CHANNEL = 9  # channel 10 in General MIDI numbering


@dataclass
class MidiContent:
    """Notes and timing extracted from a MIDI file."""

    streams: list[NoteStream] = field(default_factory=list)
    duration: float = 0.0  # seconds
    tempo_bpm: float | None = None


@dataclass
class _TrackState:
    """Accumulates one track's notes while messages are walked."""

    name: str | None = None
    channel: int | None = None
    program: int | None = None
    notes: list[Note] = field(default_factory=list)
    # (channel, pitch) -> open (onset seconds, velocity) pairs, oldest first
    active: dict[tuple[int, int], list[tuple[float, float]]] = field(default_factory=dict)


def load_midi(path: Path | str) -> MidiContent:
    """Parse a MIDI file into per-track note streams.

    Tempo changes from any track apply to all tracks. A track's channel is the
    channel of its first note. Each stream's notes are sorted by onset, then
    pitch.

    Raises:
        OSError: If the file cannot be read.
        ValueError: If the file is not a valid MIDI file (from mido).
    """
    mid = mido.MidiFile(str(path))
    tpb = mid.ticks_per_beat

    # Absolute ticks for every message, ordered across tracks
    timeline: list[tuple[int, int, int, mido.Message]] = []
    for track_index, track in enumerate(mid.tracks):
        tick = 0
        for order, msg in enumerate(track):
            tick += msg.time
            timeline.append((tick, track_index, order, msg))
    timeline.sort(key=lambda item: (item[0], item[1], item[2]))

    states = [_TrackState(name=track.name or None) for track in mid.tracks]
    tempo = DEFAULT_TEMPO
    first_tempo: int | None = None
    last_tick = 0
    time_sec = 0.0

    for tick, track_index, _, msg in timeline:
        time_sec += mido.tick2second(tick - last_tick, tpb, tempo)
        last_tick = tick
        state = states[track_index]

        if msg.is_meta:
            if msg.type == "set_tempo":
                tempo = msg.tempo
                if first_tempo is None:
                    first_tempo = msg.tempo
            continue

        if msg.type == "program_change" and state.program is None:
            state.program = msg.program
        elif msg.type == "note_on" and msg.velocity > 0:
            if state.channel is None:
                state.channel = msg.channel
            pending = state.active.setdefault((msg.channel, msg.note), [])
            pending.append((time_sec, msg.velocity / 127))
        elif msg.type == "note_off" or (msg.type == "note_on" and msg.velocity == 0):
            # A note-off closes the earliest still-sounding note of that pitch
            pending = state.active.get((msg.channel, msg.note))
            if pending:
                onset, velocity = pending.pop(0)
                state.notes.append(_make_note(msg.note, onset, time_sec, velocity))

    # Close notes left hanging at the end of the file
    for state in states:
        for (_, pitch), pending in state.active.items():
            for onset, velocity in pending:
                state.notes.append(_make_note(pitch, onset, time_sec, velocity))
        state.active.clear()

    streams = []
    for index, state in enumerate(states):
        notes = sorted(state.notes, key=lambda n: (n.onset, n.pitch))
        streams.append(
            NoteStream(
                id=str(index),
                notes=tuple(notes),
                name=state.name,
                channel=state.channel,
                program=state.program,
                is_percussion=state.channel == PERCUSSION_CHANNEL,
            )
        )
        logger.debug("Track %d (%s): %d notes", index, state.name, len(notes))

    duration = max((n.end for s in streams for n in s.notes), default=0.0)
    tempo_bpm = mido.tempo2bpm(first_tempo) if first_tempo is not None else None

    return MidiContent(streams=streams, duration=duration, tempo_bpm=tempo_bpm)


def _make_note(pitch: int, onset: float, end: float, velocity: float) -> Note:
    return Note(onset=onset, duration=max(0.0, end - onset), pitch=pitch, velocity=velocity)
