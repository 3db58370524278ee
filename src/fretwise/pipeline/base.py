"""Base classes for pipeline stages."""

from abc import ABC, abstractmethod
import logging
import time

from fretwise.models.pipeline import ProcessingContext, StageResult

logger = logging.getLogger(__name__)


class PipelineStage(ABC):
    """Abstract base class for pipeline stages.

    A stage reads what earlier stages left on the ProcessingContext, adds its
    own results to it and reports through a StageResult. Stages do not raise.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique name for this stage."""
        ...

    @abstractmethod
    def execute(self, context: ProcessingContext) -> StageResult:
        """Execute this stage.

        Args:
            context: Mutable processing context that accumulates results.

        Returns:
            StageResult indicating success/failure and any warnings.
        """
        ...

    def run(self, context: ProcessingContext) -> StageResult:
        """Run the stage with timing, turning unexpected errors into a failed result."""
        start_time = time.time()
        try:
            result = self.execute(context)
        except Exception as e:
            logger.debug("Stage %s raised", self.name, exc_info=True)
            return StageResult(
                success=False,
                stage_name=self.name,
                duration_seconds=time.time() - start_time,
                error_message=f"Unexpected error: {e}",
            )
        result.duration_seconds = time.time() - start_time
        return result

    def _fail(self, message: str) -> StageResult:
        return StageResult(
            success=False,
            stage_name=self.name,
            duration_seconds=0,
            error_message=message,
        )
