"""Track analyzer: per-stream statistics and melody candidacy.

Each stream is analyzed on its own; nothing is shared between streams.
All functions are total over well-formed streams, including empty ones.
"""

from typing import Iterable

import numpy as np

from fretwise.models.notes import Note, NoteStream, StreamStatistics, TrackSummary


def mean_concurrency(notes: Iterable[Note]) -> float:
    """Time-weighted average number of simultaneously sounding notes.

    Each note is the interval ``[onset, onset + duration)``. A sweep line over
    the interval boundaries integrates the active count from the first
    boundary to the last one, gaps included, and divides by that extent.

    Returns:
        0.0 for no notes, 1.0 when the notes span no time at all.
    """
    edges: list[tuple[float, int]] = []
    for note in notes:
        edges.append((note.onset, 1))
        edges.append((note.end, -1))

    if not edges:
        return 0.0

    # Exits sort before entries at the same instant
    edges.sort()

    active = 0
    weighted_sum = 0.0
    extent = 0.0
    last_time = edges[0][0]
    for time, delta in edges:
        dt = time - last_time
        if dt > 0:
            weighted_sum += active * dt
            extent += dt
        last_time = time
        active += delta

    if extent == 0:
        return 1.0
    return weighted_sum / extent


def analyze_stream(stream: NoteStream) -> StreamStatistics:
    """Compute decision-support statistics for one stream."""
    notes = stream.notes
    if not notes:
        return StreamStatistics(
            note_count=0,
            mean_pitch=0.0,
            mean_velocity=0.0,
            mean_concurrency=0.0,
            total_duration=0.0,
        )

    return StreamStatistics(
        note_count=len(notes),
        mean_pitch=float(np.mean([n.pitch for n in notes])),
        mean_velocity=float(np.mean([n.velocity for n in notes])),
        mean_concurrency=mean_concurrency(notes),
        total_duration=max(n.end for n in notes),
    )


def is_melody_candidate(stream: NoteStream, stats: StreamStatistics | None = None) -> bool:
    """Whether a stream is worth offering as the melody to map."""
    note_count = stats.note_count if stats is not None else len(stream.notes)
    return not stream.is_percussion and note_count > 0


def summarize_stream(stream: NoteStream) -> TrackSummary:
    stats = analyze_stream(stream)
    return TrackSummary(
        stream=stream,
        statistics=stats,
        is_melody_candidate=is_melody_candidate(stream, stats),
    )


def analyze_streams(streams: Iterable[NoteStream]) -> list[TrackSummary]:
    """Summarize every stream, preserving input order."""
    return [summarize_stream(stream) for stream in streams]


def merge_streams(streams: Iterable[NoteStream], stream_id: str = "combined") -> NoteStream:
    """Merge the notes of all pitched streams into one onset-ordered stream.

    Percussion streams are left out. The sort is stable, so notes sharing an
    onset keep their track order.
    """
    notes = [note for stream in streams if not stream.is_percussion for note in stream.notes]
    notes.sort(key=lambda n: n.onset)
    return NoteStream(id=stream_id, notes=tuple(notes), name="All tracks")
