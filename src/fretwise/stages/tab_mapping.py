"""Tab mapping stage - assigns a string and fret to every selected note."""

from fretwise.engine.mapper import map_stream
from fretwise.errors import InvalidNoteError
from fretwise.models.pipeline import ProcessingContext, StageResult
from fretwise.models.tab import MappingConfig
from fretwise.pipeline.base import PipelineStage


class TabMappingStage(PipelineStage):
    """Stage 4: Tab Mapping.

    Runs the dynamic-programming mapper over the selected stream with the
    configured weights.
    """

    def __init__(self, config: MappingConfig | None = None) -> None:
        self.config = config or MappingConfig()

    @property
    def name(self) -> str:
        return "tab_mapping"

    def execute(self, context: ProcessingContext) -> StageResult:
        warnings: list[str] = []

        stream = context.selected_stream
        if stream is None:
            return self._fail("No stream selected for mapping")

        try:
            mapping = map_stream(stream, self.config)
        except InvalidNoteError as e:
            return self._fail(str(e))

        context.mapping_config = self.config
        context.mapping = mapping

        if mapping.fallback_count:
            warnings.append(
                f"{mapping.fallback_count} note(s) out of guitar range, placed on open low E"
            )
        shifted = sum(1 for e in mapping.events if e.octave_shift)
        if shifted:
            warnings.append(f"{shifted} note(s) moved by an octave for playability")
        warnings.append(f"Total fingering cost: {mapping.total_cost:.2f}")

        return StageResult(
            success=True,
            stage_name=self.name,
            duration_seconds=0,
            warnings=warnings,
        )
