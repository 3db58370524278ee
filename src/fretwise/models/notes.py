"""Note-level data models for fretwise.

These are produced once by the MIDI loader (or by a caller) and consumed
read-only by the track analyzer and the tab mapping engine.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Note:
    """A timed note."""

    onset: float  # seconds
    duration: float  # seconds
    pitch: int  # MIDI note number (0-127)
    velocity: float  # 0.0-1.0

    @property
    def end(self) -> float:
        """Time the note stops sounding, in seconds."""
        return self.onset + self.duration


@dataclass(frozen=True)
class NoteStream:
    """An ordered sequence of notes with track identity.

    Notes keep the order they were authored in, which for streams produced
    by the MIDI loader is ascending onset.
    """

    id: str
    notes: tuple[Note, ...] = ()
    name: str | None = None
    channel: int | None = None
    program: int | None = None  # General MIDI program 0-127
    is_percussion: bool = False

    def __post_init__(self) -> None:
        # Accept any sequence but store an immutable tuple
        if not isinstance(self.notes, tuple):
            object.__setattr__(self, "notes", tuple(self.notes))

    def __len__(self) -> int:
        return len(self.notes)

    @property
    def label(self) -> str:
        """Human readable name for listings."""
        return self.name or f"Track {self.id}"


@dataclass(frozen=True)
class StreamStatistics:
    """Decision-support statistics for one note stream."""

    note_count: int
    mean_pitch: float
    mean_velocity: float
    mean_concurrency: float  # 1.0 = monophonic, >1.0 = polyphonic
    total_duration: float  # seconds, end of the last sounding note


@dataclass(frozen=True)
class TrackSummary:
    """A stream paired with its statistics and melody candidacy."""

    stream: NoteStream
    statistics: StreamStatistics
    is_melody_candidate: bool = field(default=False)
