"""Input contract checks for the mapping engine."""

from typing import Sequence

from fretwise.errors import InvalidNoteError
from fretwise.models.notes import Note

MIDI_MIN = 0
MIDI_MAX = 127


def validate_notes(notes: Sequence[Note]) -> None:
    """Reject notes that break the type contract.

    Sortedness is not checked: an unsorted sequence still maps, only with
    less meaningful continuity costs.

    Raises:
        InvalidNoteError: For the first offending note, naming its index and field.
    """
    for index, note in enumerate(notes):
        pitch = note.pitch
        if isinstance(pitch, bool) or not isinstance(pitch, int):
            raise InvalidNoteError(index, "pitch", pitch, "must be an integer MIDI note number")
        if not MIDI_MIN <= pitch <= MIDI_MAX:
            raise InvalidNoteError(index, "pitch", pitch, f"must be in [{MIDI_MIN}, {MIDI_MAX}]")
        # Written as negated comparisons so NaN is rejected too
        if not note.onset >= 0:
            raise InvalidNoteError(index, "onset", note.onset, "must be >= 0")
        if not note.duration >= 0:
            raise InvalidNoteError(index, "duration", note.duration, "must be >= 0")
        if not 0.0 <= note.velocity <= 1.0:
            raise InvalidNoteError(index, "velocity", note.velocity, "must be in [0, 1]")
