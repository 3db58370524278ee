"""Pipeline stages for fretwise."""

from fretwise.stages.finalize import FinalizeStage
from fretwise.stages.load_midi import LoadMidiStage
from fretwise.stages.melody_selection import MelodySelectionStage
from fretwise.stages.tab_mapping import TabMappingStage
from fretwise.stages.track_analysis import TrackAnalysisStage

__all__ = [
    "FinalizeStage",
    "LoadMidiStage",
    "MelodySelectionStage",
    "TabMappingStage",
    "TrackAnalysisStage",
]
