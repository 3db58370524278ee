"""Pipeline module for fretwise."""

from fretwise.pipeline.base import PipelineStage
from fretwise.pipeline.orchestrator import Pipeline, create_default_pipeline

__all__ = ["Pipeline", "PipelineStage", "create_default_pipeline"]
