"""Exception hierarchy for the chunk grid pipeline."""

from __future__ import annotations


class ChunkGridError(Exception):
    """Base class for all pipeline errors."""


class ConfigurationError(ChunkGridError, ValueError):
    """A tunable is out of range; raised before any output is produced."""


class UnsatisfiableClusterError(ConfigurationError):
    """The requested cluster size cannot be reached within the scan bound."""

    def __init__(self, cluster_size: int, accepted: int, max_scan_area: int) -> None:
        super().__init__(
            f"Unsatisfiable cluster size {cluster_size}: only {accepted} cells "
            f"accepted within a scan area of {max_scan_area}"
        )
        self.cluster_size = cluster_size
        self.accepted = accepted
        self.max_scan_area = max_scan_area


class StageError(ChunkGridError):
    """An unexpected failure inside a pipeline stage."""

    def __init__(self, stage_id: str, cause: Exception) -> None:
        super().__init__(f"Stage {stage_id} failed: {cause}")
        self.stage_id = stage_id
        self.cause = cause
