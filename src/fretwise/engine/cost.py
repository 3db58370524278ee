"""Cost model for fingering choices. Lower is better."""

from typing import Sequence

import numpy as np

from fretwise.models.tab import FingeringChoice, MappingConfig

# Per-string tie-break toward the bass strings
STRING_BIAS_STEP = 0.1
# Scale of the nudge toward treble strings for melodies
MELODY_BIAS_SCALE = 0.6
# Added to a fallback position so any real position is preferred
FALLBACK_PENALTY = 1000.0


def solo_cost(choice: FingeringChoice, config: MappingConfig) -> float:
    """Cost of a choice on its own, without a predecessor.

    The terms are summed in a fixed order so results are reproducible to the bit.
    """
    score = 0.0

    # Higher frets mean harder stretches
    score += config.fret_cost_weight * choice.fret

    if config.tie_break_prefer_lower_string:
        score += choice.string_index * STRING_BIAS_STEP

    if config.prefer_melody_high_strings:
        highness = (5 - choice.string_index) / 5
        score += (1 - highness) * MELODY_BIAS_SCALE

    if choice.fret == 0:
        score -= config.open_string_bonus

    if choice.is_fallback:
        score += FALLBACK_PENALTY

    return score


def continuity_cost(
    choice: FingeringChoice, previous: FingeringChoice, config: MappingConfig
) -> float:
    """Penalty for the hand jump from ``previous`` to ``choice``."""
    fret_delta = abs(choice.fret - previous.fret)
    string_delta = abs(choice.string_index - previous.string_index)
    return config.continuity_weight * (
        config.continuity_fret_weight * fret_delta
        + config.continuity_string_weight * string_delta
    )


def transition_cost(
    choice: FingeringChoice,
    previous: FingeringChoice | None,
    config: MappingConfig,
) -> float:
    """Full cost of playing ``choice`` right after ``previous``."""
    score = solo_cost(choice, config)
    if previous is not None:
        score += continuity_cost(choice, previous, config)
    return score


def continuity_matrix(
    previous_layer: Sequence[FingeringChoice],
    layer: Sequence[FingeringChoice],
    config: MappingConfig,
) -> np.ndarray:
    """Continuity penalties between two layers.

    Returns:
        Array of shape (len(previous_layer), len(layer)).
    """
    prev_frets = np.array([c.fret for c in previous_layer])
    prev_strings = np.array([c.string_index for c in previous_layer])
    frets = np.array([c.fret for c in layer])
    strings = np.array([c.string_index for c in layer])

    fret_delta = np.abs(frets[np.newaxis, :] - prev_frets[:, np.newaxis])
    string_delta = np.abs(strings[np.newaxis, :] - prev_strings[:, np.newaxis])
    return config.continuity_weight * (
        config.continuity_fret_weight * fret_delta
        + config.continuity_string_weight * string_delta
    )


def path_cost(choices: Sequence[FingeringChoice], config: MappingConfig) -> float:
    """Total additive cost of a complete path of choices."""
    total = 0.0
    previous: FingeringChoice | None = None
    for choice in choices:
        total += transition_cost(choice, previous, config)
        previous = choice
    return total
