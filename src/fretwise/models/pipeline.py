"""Pipeline processing models for fretwise.

These models track state as a MIDI file moves through the processing pipeline.
"""

from dataclasses import dataclass, field
from pathlib import Path

from fretwise.models.notes import NoteStream, TrackSummary
from fretwise.models.tab import MappingConfig, MappingResult


@dataclass
class ProcessingContext:
    """Mutable state passed through pipeline stages."""

    # Input
    source_path: Path

    # Directories
    output_dir: Path = field(default_factory=lambda: Path("./output"))

    # Parsed MIDI (load_midi)
    streams: list[NoteStream] = field(default_factory=list)
    duration: float | None = None
    tempo_bpm: float | None = None

    # Per-track statistics (track_analysis)
    summaries: list[TrackSummary] = field(default_factory=list)

    # Stream chosen for mapping (melody_selection)
    selected_stream: NoteStream | None = None
    selection_reason: str = ""

    # Mapping (tab_mapping)
    mapping_config: MappingConfig | None = None
    mapping: MappingResult | None = None

    # Final output
    tab_json_path: Path | None = None
    tab_text_path: Path | None = None


@dataclass
class StageResult:
    """Result of a pipeline stage execution."""

    success: bool
    stage_name: str
    duration_seconds: float
    error_message: str | None = None
    warnings: list[str] = field(default_factory=list)


@dataclass
class ProcessingResult:
    """Final result of the complete pipeline execution."""

    success: bool
    output_path: Path | None = None
    stages_completed: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    total_duration: float = 0.0
