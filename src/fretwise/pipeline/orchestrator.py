"""Pipeline orchestrator for fretwise."""

import time
from pathlib import Path

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn

from fretwise.config import Settings
from fretwise.models.pipeline import ProcessingContext, ProcessingResult
from fretwise.pipeline.base import PipelineStage

console = Console()


class Pipeline:
    """Orchestrates the execution of pipeline stages."""

    def __init__(self, stages: list[PipelineStage], settings: Settings) -> None:
        """Initialize the pipeline.

        Args:
            stages: Ordered list of stages to execute.
            settings: Application settings.
        """
        self.stages = stages
        self.settings = settings

    def run(self, source_path: Path, output_dir: Path) -> ProcessingResult:
        """Run every stage on a MIDI file, stopping at the first failure.

        Args:
            source_path: Path to the input MIDI file.
            output_dir: Directory for output files.

        Returns:
            ProcessingResult with success status and details.
        """
        start_time = time.time()
        context = ProcessingContext(source_path=source_path, output_dir=output_dir)
        result = self.run_context(context)
        result.total_duration = time.time() - start_time
        return result

    def run_context(self, context: ProcessingContext) -> ProcessingResult:
        """Run every stage on an already initialized context."""
        result = ProcessingResult(success=True)

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            TimeElapsedColumn(),
            console=console,
        ) as progress:
            for stage in self.stages:
                task = progress.add_task(f"[cyan]{stage.name}[/cyan]...", total=None)

                stage_result = stage.run(context)

                progress.remove_task(task)

                if stage_result.success:
                    result.stages_completed.append(stage.name)
                    result.warnings.extend(stage_result.warnings)
                    console.print(
                        f"  [green]{stage.name}[/green] "
                        f"({stage_result.duration_seconds:.1f}s)"
                    )
                else:
                    result.success = False
                    result.errors.append(f"{stage.name}: {stage_result.error_message}")
                    console.print(
                        f"  [red]{stage.name}[/red] failed: "
                        f"{stage_result.error_message}"
                    )
                    break

        if result.success:
            result.output_path = context.tab_json_path or context.output_dir

        return result


def create_default_pipeline(
    settings: Settings,
    track_id: str | None = None,
    combined: bool = False,
    preset: str | None = None,
) -> Pipeline:
    """Create a pipeline with all default stages.

    Args:
        settings: Application settings.
        track_id: Map this track instead of letting the selection policy pick.
        combined: Map all pitched tracks merged into one stream.
        preset: Mapping preset name; by default "combined" for merged streams
            and the settings' preset otherwise.

    Returns:
        Configured Pipeline instance.
    """
    from fretwise.stages import (
        FinalizeStage,
        LoadMidiStage,
        MelodySelectionStage,
        TabMappingStage,
        TrackAnalysisStage,
    )

    if preset is None and combined:
        preset = "combined"

    stages: list[PipelineStage] = [
        LoadMidiStage(),
        TrackAnalysisStage(),
        MelodySelectionStage(track_id=track_id, combined=combined),
        TabMappingStage(settings.mapping_config(preset)),
        FinalizeStage(settings),
    ]

    return Pipeline(stages, settings)
