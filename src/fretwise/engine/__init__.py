"""Tab mapping engine and track analyzer."""

from fretwise.engine.analyzer import (
    analyze_stream,
    analyze_streams,
    is_melody_candidate,
    mean_concurrency,
    merge_streams,
    summarize_stream,
)
from fretwise.engine.candidates import candidate_layer, fallback_choice, generate_candidates
from fretwise.engine.cost import path_cost, solo_cost, transition_cost
from fretwise.engine.mapper import map_notes, map_stream
from fretwise.engine.validation import validate_notes

__all__ = [
    "analyze_stream",
    "analyze_streams",
    "candidate_layer",
    "fallback_choice",
    "generate_candidates",
    "is_melody_candidate",
    "map_notes",
    "map_stream",
    "mean_concurrency",
    "merge_streams",
    "path_cost",
    "solo_cost",
    "summarize_stream",
    "transition_cost",
    "validate_notes",
]
