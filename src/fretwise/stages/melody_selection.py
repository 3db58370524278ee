"""Melody selection stage - picks the note stream to turn into tablature."""

import logging

from fretwise.engine.analyzer import merge_streams
from fretwise.models.notes import TrackSummary
from fretwise.models.pipeline import ProcessingContext, StageResult
from fretwise.pipeline.base import PipelineStage

logger = logging.getLogger(__name__)


def choose_melody_track(summaries: list[TrackSummary]) -> TrackSummary | None:
    """Default policy for picking a melody among candidate tracks.

    Prefers the most monophonic track (mean concurrency closest to 1), then
    the higher mean pitch, then more notes. Remaining ties go to the earlier
    track.
    """
    candidates = [s for s in summaries if s.is_melody_candidate]
    if not candidates:
        return None

    def rank(item: tuple[int, TrackSummary]) -> tuple[float, float, int, int]:
        index, summary = item
        stats = summary.statistics
        return (
            abs(stats.mean_concurrency - 1.0),
            -stats.mean_pitch,
            -stats.note_count,
            index,
        )

    return min(enumerate(candidates), key=rank)[1]


class MelodySelectionStage(PipelineStage):
    """Stage 3: Melody Selection.

    Uses, in order of precedence: an explicit track id, the merged stream of
    all pitched tracks, or :func:`choose_melody_track`.
    """

    def __init__(self, track_id: str | None = None, combined: bool = False) -> None:
        self.track_id = track_id
        self.combined = combined

    @property
    def name(self) -> str:
        return "melody_selection"

    def execute(self, context: ProcessingContext) -> StageResult:
        warnings: list[str] = []

        if self.track_id is not None:
            summary = next(
                (s for s in context.summaries if s.stream.id == self.track_id), None
            )
            if summary is None:
                return self._fail(f"No track with id {self.track_id}")
            if not summary.is_melody_candidate:
                return self._fail(
                    f"Track {self.track_id} ({summary.stream.label}) is percussion or empty"
                )
            context.selected_stream = summary.stream
            context.selection_reason = "requested"

        elif self.combined:
            merged = merge_streams(context.streams)
            if not merged.notes:
                return self._fail("No pitched notes to merge")
            context.selected_stream = merged
            context.selection_reason = "combined"

        else:
            summary = choose_melody_track(context.summaries)
            if summary is None:
                return self._fail("No melody candidate track found")
            context.selected_stream = summary.stream
            context.selection_reason = "auto"

        stream = context.selected_stream
        logger.debug("Selected stream %s (%s)", stream.id, context.selection_reason)
        warnings.append(f"Mapping {stream.label}: {len(stream)} notes ({context.selection_reason})")

        return StageResult(
            success=True,
            stage_name=self.name,
            duration_seconds=0,
            warnings=warnings,
        )
