"""Conflict detection, grouping, strategies and merge orchestration."""

from ideamerge.merging.detector import ConflictDetector
from ideamerge.merging.grouper import SimilarityGrouper
from ideamerge.merging.orchestrator import MergeOrchestrator
from ideamerge.merging.points import PointsService
from ideamerge.merging.recommender import MergeRecommender
from ideamerge.merging.resolver import ConflictResolver
from ideamerge.merging.service import MergeService, create_service
from ideamerge.merging.similarity import similarity, tokenize
from ideamerge.merging.store import MergeStore
from ideamerge.merging.strategies import MergeStrategySelector

__all__ = [
    "ConflictDetector",
    "ConflictResolver",
    "MergeOrchestrator",
    "MergeRecommender",
    "MergeService",
    "MergeStore",
    "MergeStrategySelector",
    "PointsService",
    "SimilarityGrouper",
    "create_service",
    "similarity",
    "tokenize",
]
