"""Schematic metadata and run summary models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class SchematicMetadata(BaseModel):
    name: str | None = None
    author: str | None = None
    description: str | None = None


class RegionSummary(BaseModel):
    name: str
    position: tuple[int, int, int]
    size: tuple[int, int, int]
    palette: list[str] = Field(default_factory=list)
    bit_width: int
    block_count: int


class RunSummary(BaseModel):
    """What one pipeline run produced."""

    cluster_size: int
    scanned_columns: int
    scan_width: int
    tree_weight: int
    classified_cells: int
    connector_cells: int
    anomalies: list[tuple[int, int]] = Field(default_factory=list)
    regions: list[RegionSummary] = Field(default_factory=list)
    raster_path: str | None = None
    schematic_path: str | None = None
