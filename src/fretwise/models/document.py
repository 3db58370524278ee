"""Output document models, serialized to tab.json."""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class TabNote:
    """One mapped note as written to tab.json."""

    onset: float  # seconds
    duration: float  # seconds
    pitch: int  # written MIDI pitch
    velocity: float  # 0.0-1.0
    string_index: int  # 0 = low E
    string_label: int  # 6 = low E, 1 = high E
    fret: int
    octave_shift: int = 0
    is_fallback: bool = False


@dataclass
class TrackInfo:
    """A track of the source file with its statistics."""

    id: str
    name: str | None
    channel: int | None
    program: int | None
    is_percussion: bool
    is_melody_candidate: bool
    note_count: int
    mean_pitch: float
    mean_velocity: float
    mean_concurrency: float
    total_duration: float


@dataclass
class TabDocument:
    """Root output object."""

    source_file: str
    processing_date: str  # ISO format
    converter_version: str
    duration: float  # seconds
    tempo_bpm: float | None = None
    tuning: list[int] = field(default_factory=list)

    selected_track: str | None = None
    selection_reason: str = ""
    mapping: dict[str, Any] = field(default_factory=dict)
    total_cost: float = 0.0

    tracks: list[TrackInfo] = field(default_factory=list)
    notes: list[TabNote] = field(default_factory=list)
