"""Chunk grid: rare-chunk clusters, spanning-tree pathways and schematic export."""

__version__ = "0.1.0"
