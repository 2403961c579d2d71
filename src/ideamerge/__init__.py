"""IdeaMerge - suggestion conflict detection and merging for ideas."""

__version__ = "0.1.0"

from ideamerge.core.config import MergeConfig
from ideamerge.merging.service import MergeService, create_service

__all__ = ["MergeConfig", "MergeService", "create_service", "__version__"]
