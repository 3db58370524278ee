"""Candidate string/fret positions for a pitch."""

from fretwise.models.tab import STANDARD_TUNING, FingeringChoice, MappingConfig, TuningLayout

OCTAVE = 12


def pitch_variants(pitch: int, config: MappingConfig) -> list[int]:
    """Pitches worth trying for a note, in generation order."""
    if config.evaluate_octave_shifts:
        return [pitch, pitch + OCTAVE, pitch - OCTAVE]
    return [pitch]


def generate_candidates(
    pitch: int,
    config: MappingConfig,
    tuning: TuningLayout = STANDARD_TUNING,
) -> list[FingeringChoice]:
    """All playable positions for ``pitch``.

    Candidates are generated variant by variant (written pitch, octave up,
    octave down), and within a variant from the lowest string to the highest.
    The first candidate generated for a (string, fret) pair wins, which keeps
    tie-breaking independent of any container's iteration order.

    May return an empty list when the pitch is out of reach everywhere.
    """
    candidates: list[FingeringChoice] = []
    seen: set[tuple[int, int]] = set()

    for variant in pitch_variants(pitch, config):
        for string_index, open_pitch in enumerate(tuning.open_pitches):
            fret = variant - open_pitch
            if fret < 0 or fret > config.fret_limit:
                continue
            choice = FingeringChoice(
                string_index=string_index,
                fret=fret,
                octave_shift=variant - pitch,
            )
            if choice.key in seen:
                continue
            seen.add(choice.key)
            candidates.append(choice)

    return candidates


def fallback_choice() -> FingeringChoice:
    """Deterministic position for a note nothing else can play: low E, open."""
    return FingeringChoice(string_index=0, fret=0, is_fallback=True)


def candidate_layer(
    pitch: int,
    config: MappingConfig,
    tuning: TuningLayout = STANDARD_TUNING,
) -> list[FingeringChoice]:
    """Candidates for one DP layer; never empty."""
    return generate_candidates(pitch, config, tuning) or [fallback_choice()]
