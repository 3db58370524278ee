"""Tablature data models: tuning, fingering choices, mapping configuration.

All of these are immutable. A MappingConfig is passed explicitly to every
engine call, so two mappings never share mutable state.
"""

from dataclasses import dataclass, field, fields, replace
from typing import Any, Mapping

from fretwise.models.notes import Note


@dataclass(frozen=True)
class TuningLayout:
    """Open-string pitches from lowest (index 0) to highest (index 5)."""

    open_pitches: tuple[int, ...]
    string_names: tuple[str, ...]

    def __post_init__(self) -> None:
        if len(self.open_pitches) != 6 or len(self.string_names) != 6:
            raise ValueError("A tuning layout needs exactly 6 strings")
        for lower, upper in zip(self.open_pitches, self.open_pitches[1:]):
            if upper <= lower:
                raise ValueError(
                    f"Open-string pitches must be strictly ascending: {self.open_pitches}"
                )

    @property
    def string_count(self) -> int:
        return len(self.open_pitches)

    def open_pitch(self, string_index: int) -> int:
        return self.open_pitches[string_index]


# E2 A2 D3 G3 B3 E4
STANDARD_TUNING = TuningLayout(
    open_pitches=(40, 45, 50, 55, 59, 64),
    string_names=("E2", "A2", "D3", "G3", "B3", "E4"),
)


def string_label(string_index: int) -> int:
    """Guitarist's string number: 6 for the low E (index 0), 1 for the high E."""
    return 6 - string_index


@dataclass(frozen=True)
class FingeringChoice:
    """One way to play a pitch: a string and a fret."""

    string_index: int  # 0 = low E, 5 = high E
    fret: int
    octave_shift: int = 0  # -12, 0 or +12 semitones from the written pitch
    is_fallback: bool = False  # no playable position existed for the note

    @property
    def key(self) -> tuple[int, int]:
        """Identity used to deduplicate candidates."""
        return (self.string_index, self.fret)


@dataclass(frozen=True)
class TabEvent:
    """A note with its assigned string and fret."""

    note: Note
    string_index: int
    fret: int
    octave_shift: int = 0
    is_fallback: bool = False

    @property
    def sounding_pitch(self) -> int:
        return STANDARD_TUNING.open_pitch(self.string_index) + self.fret

    @property
    def string_name(self) -> str:
        return STANDARD_TUNING.string_names[self.string_index]

    @property
    def string_label(self) -> int:
        return string_label(self.string_index)


# camelCase names used by the original browser tool's option objects
_CAMEL_CASE_ALIASES = {
    "maxFret": "max_fret",
    "continuityWeight": "continuity_weight",
    "preferMelodyHighStrings": "prefer_melody_high_strings",
    "openStringBonus": "open_string_bonus",
    "fretCostWeight": "fret_cost_weight",
    "continuityFretWeight": "continuity_fret_weight",
    "continuityStringWeight": "continuity_string_weight",
    "tieBreakPreferLowerString": "tie_break_prefer_lower_string",
    "evaluateOctaveShifts": "evaluate_octave_shifts",
}


@dataclass(frozen=True)
class MappingConfig:
    """Tunable weights for the tab mapping cost model.

    Every field has a default; partial configurations are built with
    :meth:`from_overrides` or :meth:`with_overrides`.
    """

    max_fret: int = 12
    continuity_weight: float = 0.4
    prefer_melody_high_strings: bool = True
    open_string_bonus: float = 0.5
    fret_cost_weight: float = 1.0
    continuity_fret_weight: float = 1.0
    continuity_string_weight: float = 1.5
    tie_break_prefer_lower_string: bool = True
    evaluate_octave_shifts: bool = True

    def __post_init__(self) -> None:
        if self.max_fret < 0:
            raise ValueError(f"max_fret must be >= 0, got {self.max_fret}")

    @property
    def fret_limit(self) -> int:
        """Highest fret a candidate may use.

        Two frets above max_fret are kept so continuity can pull a near miss
        back into play through cost instead of discarding it.
        """
        return self.max_fret + 2

    @classmethod
    def from_overrides(cls, overrides: Mapping[str, Any] | None = None) -> "MappingConfig":
        """Build a config by merging a partial mapping over the defaults."""
        return cls().with_overrides(overrides)

    def with_overrides(self, overrides: Mapping[str, Any] | None = None) -> "MappingConfig":
        """Return a copy with the non-None entries of ``overrides`` applied.

        Keys may be snake_case field names or the camelCase option names.

        Raises:
            ValueError: If a key is not a known configuration field.
        """
        if not overrides:
            return self

        known = {f.name for f in fields(self)}
        changes: dict[str, Any] = {}
        for key, value in overrides.items():
            name = _CAMEL_CASE_ALIASES.get(key, key)
            if name not in known:
                raise ValueError(f"Unknown mapping option: {key}")
            if value is not None:
                changes[name] = value

        return replace(self, **changes)

    def as_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


# Weights the original tool used once a single melody track was picked
MELODY_PRESET = MappingConfig(
    continuity_weight=0.7,
    open_string_bonus=0.6,
    continuity_string_weight=1.6,
)

# Weights used when every track is merged into one busy stream
COMBINED_PRESET = MappingConfig(continuity_weight=0.5)

PRESETS: dict[str, MappingConfig] = {
    "default": MappingConfig(),
    "melody": MELODY_PRESET,
    "combined": COMBINED_PRESET,
}


@dataclass(frozen=True)
class MappingResult:
    """Output of one mapping call: events 1:1 with the input notes."""

    events: tuple[TabEvent, ...] = field(default_factory=tuple)
    total_cost: float = 0.0

    def __len__(self) -> int:
        return len(self.events)

    @property
    def fallback_count(self) -> int:
        return sum(1 for event in self.events if event.is_fallback)
