"""fretwise - beginner-friendly fingerstyle guitar tablature from MIDI notes."""

__version__ = "0.1.0"

from fretwise.engine import analyze_stream, is_melody_candidate, map_notes, map_stream
from fretwise.errors import InvalidNoteError
from fretwise.models import MappingConfig, Note, NoteStream, TabEvent

__all__ = [
    "InvalidNoteError",
    "MappingConfig",
    "Note",
    "NoteStream",
    "TabEvent",
    "__version__",
    "analyze_stream",
    "is_melody_candidate",
    "map_notes",
    "map_stream",
]
