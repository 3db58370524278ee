"""Tests for the tab mapping engine."""

import itertools
import math
import random
from concurrent.futures import ThreadPoolExecutor

import pytest

from conftest import make_notes
from fretwise.engine.candidates import candidate_layer, generate_candidates
from fretwise.engine.cost import path_cost, solo_cost
from fretwise.engine.mapper import map_notes, map_stream
from fretwise.errors import InvalidNoteError
from fretwise.models import STANDARD_TUNING, FingeringChoice, MappingConfig, Note, NoteStream


def positions(result):
    return [(e.string_index, e.fret) for e in result.events]


def random_notes(seed: int, count: int, low: int = 40, high: int = 84) -> list[Note]:
    rng = random.Random(seed)
    return [
        Note(onset=i * 0.25, duration=0.25, pitch=rng.randint(low, high), velocity=0.8)
        for i in range(count)
    ]


def event_choices(result):
    return [
        FingeringChoice(e.string_index, e.fret, e.octave_shift, e.is_fallback)
        for e in result.events
    ]


class TestScenarios:
    """Fixed inputs with known optimal answers."""

    def test_low_e_then_octave(self):
        """Open low E twice: the second note drops an octave onto the open string."""
        notes = [
            Note(onset=0.0, duration=1.0, pitch=40, velocity=0.8),
            Note(onset=1.0, duration=1.0, pitch=52, velocity=0.8),
        ]
        result = map_notes(notes)

        assert positions(result) == [(0, 0), (0, 0)]
        assert [e.octave_shift for e in result.events] == [0, -12]
        assert result.total_cost == pytest.approx(-1.0)

    def test_low_e_then_octave_without_shifts(self):
        """Without octave shifts the second note lands on D string fret 2."""
        notes = [
            Note(onset=0.0, duration=1.0, pitch=40, velocity=0.8),
            Note(onset=1.0, duration=1.0, pitch=52, velocity=0.8),
        ]
        result = map_notes(notes, MappingConfig(evaluate_octave_shifts=False))

        assert positions(result) == [(0, 0), (2, 2)]
        assert result.total_cost == pytest.approx(-0.5 + 2.44 + 2.0)

    def test_single_note_takes_cheapest_solo_candidate(self):
        """High E pitch maps to the open first string."""
        result = map_notes([Note(onset=0.0, duration=1.0, pitch=64, velocity=0.8)])
        assert positions(result) == [(5, 0)]

    @pytest.mark.parametrize("pitch", [30, 45, 57, 60, 71, 88])
    def test_single_note_matches_solo_minimum(self, pitch: int):
        config = MappingConfig()
        result = map_notes([Note(onset=0.0, duration=0.5, pitch=pitch, velocity=0.5)], config)
        candidates = generate_candidates(pitch, config)
        costs = [solo_cost(c, config) for c in candidates]
        best = candidates[costs.index(min(costs))]
        assert positions(result) == [best.key]
        assert result.total_cost == min(costs)

    def test_ties_go_to_first_generated_candidate(self):
        """With every cost zero, each note takes its first candidate."""
        config = MappingConfig(
            continuity_weight=0.0,
            fret_cost_weight=0.0,
            open_string_bonus=0.0,
            prefer_melody_high_strings=False,
            tie_break_prefer_lower_string=False,
        )
        pitches = [52, 60, 67, 45]
        result = map_notes(make_notes(pitches), config)
        assert positions(result) == [generate_candidates(p, config)[0].key for p in pitches]


class TestDegenerateInputs:
    """Edge cases that must map without errors."""

    def test_empty_input(self):
        result = map_notes([])
        assert result.events == ()
        assert result.total_cost == 0.0

    def test_zero_duration_notes(self):
        notes = [Note(onset=0.0, duration=0.0, pitch=60, velocity=0.5)] * 3
        assert len(map_notes(notes)) == 3

    def test_out_of_range_note_gets_fallback(self):
        notes = make_notes([60, 127, 62])
        result = map_notes(notes)

        assert len(result) == 3
        middle = result.events[1]
        assert (middle.string_index, middle.fret) == (0, 0)
        assert middle.is_fallback is True
        assert not result.events[0].is_fallback
        assert not result.events[2].is_fallback
        assert result.fallback_count == 1

    def test_all_notes_out_of_range(self):
        result = map_notes(make_notes([0, 1, 127]))
        assert positions(result) == [(0, 0)] * 3
        assert all(e.is_fallback for e in result.events)

    def test_unsorted_input_still_maps(self):
        notes = list(reversed(make_notes([60, 64, 67, 72])))
        result = map_notes(notes)
        assert [e.note for e in result.events] == notes


class TestInvariants:
    """Properties that hold for any input."""

    @pytest.mark.parametrize("seed", range(5))
    def test_deterministic(self, seed: int):
        notes = random_notes(seed, 60)
        first = map_notes(notes)
        for _ in range(3):
            assert map_notes(notes) == first

    @pytest.mark.parametrize("seed", range(5))
    def test_order_and_count_preserved(self, seed: int):
        notes = random_notes(seed, 40, low=20, high=110)
        result = map_notes(notes)
        assert len(result) == len(notes)
        assert [e.note for e in result.events] == notes

    @pytest.mark.parametrize("octave_shifts", [True, False])
    @pytest.mark.parametrize("seed", range(5))
    def test_playability(self, seed: int, octave_shifts: bool):
        config = MappingConfig(evaluate_octave_shifts=octave_shifts)
        allowed_shifts = {-12, 0, 12} if octave_shifts else {0}
        result = map_notes(random_notes(seed, 50, low=28, high=90), config)

        for event in result.events:
            if event.is_fallback:
                continue
            sounding = STANDARD_TUNING.open_pitch(event.string_index) + event.fret
            assert sounding - event.note.pitch in allowed_shifts
            assert sounding == event.sounding_pitch
            assert 0 <= event.fret <= config.max_fret + 2

    @pytest.mark.parametrize("seed", range(8))
    def test_globally_optimal(self, seed: int):
        """The result matches an exhaustive search over every path."""
        config = MappingConfig()
        notes = random_notes(seed, 3)
        result = map_notes(notes, config)

        layers = [candidate_layer(n.pitch, config) for n in notes]
        best = min(path_cost(path, config) for path in itertools.product(*layers))

        assert result.total_cost == pytest.approx(best)
        assert path_cost(event_choices(result), config) == pytest.approx(result.total_cost)

    @pytest.mark.parametrize("seed", range(5))
    def test_higher_max_fret_never_costs_more(self, seed: int):
        notes = random_notes(seed, 40, low=40, high=76)
        low = map_notes(notes, MappingConfig(max_fret=12))
        high = map_notes(notes, MappingConfig(max_fret=24))
        assert high.total_cost <= low.total_cost + 1e-9

    def test_config_is_not_mutated(self):
        config = MappingConfig(max_fret=9)
        map_notes(random_notes(1, 20), config)
        assert config == MappingConfig(max_fret=9)

    def test_concurrent_calls_match_sequential(self):
        sequences = [random_notes(seed, 80) for seed in range(8)]
        expected = [map_notes(s) for s in sequences]
        with ThreadPoolExecutor(max_workers=4) as pool:
            actual = list(pool.map(map_notes, sequences))
        assert actual == expected


class TestInvalidNotes:
    """Notes that break the type contract are rejected, not clamped."""

    @pytest.mark.parametrize(
        "note, field",
        [
            (Note(onset=0.0, duration=1.0, pitch=128, velocity=0.5), "pitch"),
            (Note(onset=0.0, duration=1.0, pitch=-1, velocity=0.5), "pitch"),
            (Note(onset=0.0, duration=1.0, pitch=60.0, velocity=0.5), "pitch"),  # type: ignore[arg-type]
            (Note(onset=-0.1, duration=1.0, pitch=60, velocity=0.5), "onset"),
            (Note(onset=math.nan, duration=1.0, pitch=60, velocity=0.5), "onset"),
            (Note(onset=0.0, duration=-1.0, pitch=60, velocity=0.5), "duration"),
            (Note(onset=0.0, duration=1.0, pitch=60, velocity=1.5), "velocity"),
        ],
    )
    def test_rejected(self, note: Note, field: str):
        notes = make_notes([60, 62]) + [note]
        with pytest.raises(InvalidNoteError) as exc_info:
            map_notes(notes)
        assert exc_info.value.index == 2
        assert exc_info.value.field == field
        assert "Note 2" in str(exc_info.value)

    def test_invalid_note_error_is_value_error(self):
        with pytest.raises(ValueError):
            map_notes([Note(onset=0.0, duration=1.0, pitch=200, velocity=0.5)])


def test_map_stream(melody_stream: NoteStream):
    result = map_stream(melody_stream)
    assert len(result) == len(melody_stream)
    assert result == map_notes(melody_stream.notes)


@pytest.mark.slow
def test_long_performance():
    """Thousands of notes map in one call."""
    notes = random_notes(42, 3000, low=35, high=95)
    result = map_notes(notes)
    assert len(result) == 3000
    assert math.isfinite(result.total_cost)
