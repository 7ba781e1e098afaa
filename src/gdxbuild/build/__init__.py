"""Build matrix, orchestration and reporting.

Only the matrix axes are re-exported here; platform descriptors import them
and the orchestrator imports the platform descriptors.
"""

from .build_modes import Architecture, BuildMode

__all__ = ["Architecture", "BuildMode"]
