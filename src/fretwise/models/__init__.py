"""Data models for fretwise."""

from fretwise.models.document import TabDocument, TabNote, TrackInfo
from fretwise.models.notes import Note, NoteStream, StreamStatistics, TrackSummary
from fretwise.models.pipeline import ProcessingContext, ProcessingResult, StageResult
from fretwise.models.tab import (
    COMBINED_PRESET,
    MELODY_PRESET,
    PRESETS,
    STANDARD_TUNING,
    FingeringChoice,
    MappingConfig,
    MappingResult,
    TabEvent,
    TuningLayout,
    string_label,
)

__all__ = [
    "COMBINED_PRESET",
    "FingeringChoice",
    "MELODY_PRESET",
    "MappingConfig",
    "MappingResult",
    "Note",
    "NoteStream",
    "PRESETS",
    "ProcessingContext",
    "ProcessingResult",
    "STANDARD_TUNING",
    "StageResult",
    "StreamStatistics",
    "TabDocument",
    "TabEvent",
    "TabNote",
    "TrackInfo",
    "TrackSummary",
    "TuningLayout",
    "string_label",
]
