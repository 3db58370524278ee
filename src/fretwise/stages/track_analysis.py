"""Track analysis stage - per-track statistics and melody candidacy."""

from fretwise.engine.analyzer import analyze_streams
from fretwise.models.pipeline import ProcessingContext, StageResult
from fretwise.pipeline.base import PipelineStage


class TrackAnalysisStage(PipelineStage):
    """Stage 2: Track Analysis.

    Summarizes every loaded stream (note count, mean pitch and velocity,
    mean concurrency) and flags which ones can serve as the melody.
    """

    @property
    def name(self) -> str:
        return "track_analysis"

    def execute(self, context: ProcessingContext) -> StageResult:
        if not context.streams:
            return self._fail("No tracks loaded")

        context.summaries = analyze_streams(context.streams)

        candidates = [s for s in context.summaries if s.is_melody_candidate]
        warnings = [f"{len(candidates)} of {len(context.summaries)} tracks are melody candidates"]
        skipped_drums = sum(1 for s in context.summaries if s.stream.is_percussion)
        if skipped_drums:
            warnings.append(f"Skipping {skipped_drums} percussion track(s)")

        return StageResult(
            success=True,
            stage_name=self.name,
            duration_seconds=0,
            warnings=warnings,
        )
