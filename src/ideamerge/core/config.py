"""Engine configuration loading and validation."""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Self

from ideamerge.core.constants import (
    CONTENT_OVERLAP_THRESHOLD,
    DEFAULT_STRATEGY,
    GROUPING_THRESHOLD,
    HIGH_REPUTATION_POINTS,
    LATEST_TOP_N,
    MERGE_DB,
    MIN_CONSENSUS_GROUP_SIZE,
    MIN_HIGH_REPUTATION_SUGGESTIONS,
    MIN_SUGGESTIONS_FOR_RECOMMENDATION,
    NEGATIVE_WORDS,
    POINT_EVENTS,
    POSITIVE_WORDS,
    PRIORITY_TOP_N,
    get_config_path,
)
from ideamerge.core.exceptions import ConfigurationError


@dataclass(frozen=True)
class DetectionConfig:
    """Conflict detection configuration."""

    overlap_threshold: float = CONTENT_OVERLAP_THRESHOLD
    positive_words: tuple[str, ...] = POSITIVE_WORDS
    negative_words: tuple[str, ...] = NEGATIVE_WORDS


@dataclass(frozen=True)
class GroupingConfig:
    """Consensus grouping configuration."""

    threshold: float = GROUPING_THRESHOLD
    min_group_size: int = MIN_CONSENSUS_GROUP_SIZE


@dataclass(frozen=True)
class StrategyConfig:
    """Merge strategy configuration."""

    default_strategy: str = DEFAULT_STRATEGY
    priority_top_n: int = PRIORITY_TOP_N
    latest_top_n: int = LATEST_TOP_N


@dataclass(frozen=True)
class RecommendationConfig:
    """Merge recommendation configuration."""

    min_suggestions: int = MIN_SUGGESTIONS_FOR_RECOMMENDATION
    high_reputation_points: int = HIGH_REPUTATION_POINTS
    min_high_reputation_suggestions: int = MIN_HIGH_REPUTATION_SUGGESTIONS


@dataclass(frozen=True)
class PointsConfig:
    """Points awarded per event."""

    events: dict[str, int] = field(default_factory=lambda: dict(POINT_EVENTS))


@dataclass(frozen=True)
class StorageConfig:
    """Storage paths configuration, relative to the .ideamerge directory."""

    merge_db: str = MERGE_DB


@dataclass(frozen=True)
class MergeConfig:
    """Complete engine configuration."""

    version: str = "1.0"
    detection: DetectionConfig = field(default_factory=DetectionConfig)
    grouping: GroupingConfig = field(default_factory=GroupingConfig)
    strategy: StrategyConfig = field(default_factory=StrategyConfig)
    recommendation: RecommendationConfig = field(default_factory=RecommendationConfig)
    points: PointsConfig = field(default_factory=PointsConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Create config from dictionary."""
        detection = dict(data.get("detection", {}))
        for key in ("positive_words", "negative_words"):
            if key in detection:
                detection[key] = tuple(detection[key])

        points = data.get("points", {})
        events = dict(POINT_EVENTS)
        events.update(points.get("events", {}))

        return cls(
            version=data.get("version", "1.0"),
            detection=DetectionConfig(**detection),
            grouping=GroupingConfig(**data.get("grouping", {})),
            strategy=StrategyConfig(**data.get("strategy", {})),
            recommendation=RecommendationConfig(**data.get("recommendation", {})),
            points=PointsConfig(events=events),
            storage=StorageConfig(**data.get("storage", {})),
        )

    @classmethod
    def load(cls, base_path: Path | None = None) -> Self:
        """Load configuration from file or use defaults."""
        config_path = get_config_path(base_path)

        if not config_path.exists():
            return cls()

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = json.load(f)
            return cls.from_dict(data)
        except json.JSONDecodeError as e:
            raise ConfigurationError(
                f"Invalid JSON in config file: {e}",
                details={"path": str(config_path)},
            ) from e
        except (TypeError, ValueError) as e:
            raise ConfigurationError(
                f"Invalid configuration values: {e}",
                details={"path": str(config_path)},
            ) from e

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary."""
        return {
            "version": self.version,
            "detection": {
                "overlap_threshold": self.detection.overlap_threshold,
                "positive_words": list(self.detection.positive_words),
                "negative_words": list(self.detection.negative_words),
            },
            "grouping": {
                "threshold": self.grouping.threshold,
                "min_group_size": self.grouping.min_group_size,
            },
            "strategy": {
                "default_strategy": self.strategy.default_strategy,
                "priority_top_n": self.strategy.priority_top_n,
                "latest_top_n": self.strategy.latest_top_n,
            },
            "recommendation": {
                "min_suggestions": self.recommendation.min_suggestions,
                "high_reputation_points": self.recommendation.high_reputation_points,
                "min_high_reputation_suggestions": self.recommendation.min_high_reputation_suggestions,
            },
            "points": {
                "events": dict(self.points.events),
            },
            "storage": {
                "merge_db": self.storage.merge_db,
            },
        }

    def save(self, base_path: Path | None = None) -> None:
        """Save configuration to file."""
        config_path = get_config_path(base_path)
        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2)
