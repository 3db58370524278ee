"""Tab mapping engine: globally optimal string/fret assignment.

The note sequence forms a layered graph. Layer ``i`` holds the candidate
positions for note ``i`` and every candidate in layer ``i - 1`` connects to
every candidate in layer ``i`` with the transition cost from
:mod:`fretwise.engine.cost`. The cheapest path through the graph is found
with a Viterbi-style dynamic program in ``O(N * K^2)`` time, where ``K`` is
at most 18 (6 strings times 3 octave variants).

The engine is a pure function of its inputs. Every call allocates its own
tables, so independent sequences may be mapped concurrently.
"""

import logging
from typing import Sequence

import numpy as np

from fretwise.engine.candidates import candidate_layer
from fretwise.engine.cost import continuity_matrix, solo_cost
from fretwise.engine.validation import validate_notes
from fretwise.models.notes import Note, NoteStream
from fretwise.models.tab import (
    STANDARD_TUNING,
    FingeringChoice,
    MappingConfig,
    MappingResult,
    TabEvent,
)

logger = logging.getLogger(__name__)


def map_notes(notes: Sequence[Note], config: MappingConfig | None = None) -> MappingResult:
    """Assign a string and fret to every note.

    Args:
        notes: Notes in playing order (ascending onset).
        config: Cost weights. Defaults to ``MappingConfig()``.

    Returns:
        MappingResult whose events match the input notes one to one, in order.

    Raises:
        InvalidNoteError: If a note breaks the type contract.
    """
    config = config or MappingConfig()
    notes = list(notes)
    validate_notes(notes)

    if not notes:
        return MappingResult()

    layers = [candidate_layer(note.pitch, config, STANDARD_TUNING) for note in notes]
    path, total_cost = _best_path(layers, config)

    events = tuple(
        TabEvent(
            note=note,
            string_index=choice.string_index,
            fret=choice.fret,
            octave_shift=choice.octave_shift,
            is_fallback=choice.is_fallback,
        )
        for note, choice in zip(notes, path)
    )

    result = MappingResult(events=events, total_cost=total_cost)
    if result.fallback_count:
        logger.debug("%d note(s) had no playable position", result.fallback_count)
    logger.debug("Mapped %d notes, total cost %.3f", len(events), total_cost)
    return result


def map_stream(stream: NoteStream, config: MappingConfig | None = None) -> MappingResult:
    """Map every note of a stream."""
    return map_notes(stream.notes, config)


def _best_path(
    layers: list[list[FingeringChoice]], config: MappingConfig
) -> tuple[list[FingeringChoice], float]:
    """Run the dynamic program and backtrack the cheapest path.

    ``best_cost[i, j]`` is the cheapest cost of any path ending in candidate
    ``j`` of layer ``i``; ``predecessor[i, j]`` is the candidate of layer
    ``i - 1`` on that path. Unused cells past a layer's width stay at +inf.
    """
    n = len(layers)
    widths = [len(layer) for layer in layers]
    width = max(widths)

    best_cost = np.full((n, width), np.inf)
    predecessor = np.full((n, width), -1, dtype=np.intp)

    solo = [np.array([solo_cost(choice, config) for choice in layer]) for layer in layers]
    best_cost[0, : widths[0]] = solo[0]

    for i in range(1, n):
        k_prev, k_cur = widths[i - 1], widths[i]
        edges = solo[i][np.newaxis, :] + continuity_matrix(layers[i - 1], layers[i], config)
        totals = best_cost[i - 1, :k_prev, np.newaxis] + edges

        # argmin returns the first minimum, so the earliest generated
        # predecessor wins ties
        best_k = np.argmin(totals, axis=0)
        predecessor[i, :k_cur] = best_k
        best_cost[i, :k_cur] = totals[best_k, np.arange(k_cur)]

    j = int(np.argmin(best_cost[n - 1, : widths[n - 1]]))
    total_cost = float(best_cost[n - 1, j])

    path: list[FingeringChoice] = [layers[n - 1][j]]
    for i in range(n - 1, 0, -1):
        j = int(predecessor[i, j])
        path.append(layers[i - 1][j])
    path.reverse()

    return path, total_cost
