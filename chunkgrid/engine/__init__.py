"""Chunk grid stage engine."""

from chunkgrid.engine.registry import stage, Layer, get_registry
from chunkgrid.engine.config import PipelineConfig, Placement, WidthMode
from chunkgrid.engine.context import PipelineContext
from chunkgrid.engine.pipeline import Pipeline, create_pipeline

__all__ = [
    "stage",
    "Layer",
    "get_registry",
    "PipelineConfig",
    "Placement",
    "WidthMode",
    "PipelineContext",
    "Pipeline",
    "create_pipeline",
]
