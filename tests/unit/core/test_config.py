"""Unit tests for MergeConfig."""

import pytest

from ideamerge.core.config import MergeConfig
from ideamerge.core.exceptions import ConfigurationError


class TestMergeConfig:
    """Tests for configuration loading."""

    def test_defaults(self, config):
        """Test default thresholds and amounts."""
        assert config.detection.overlap_threshold == 0.70
        assert config.grouping.threshold == 0.60
        assert config.strategy.default_strategy == "consensus"
        assert config.strategy.priority_top_n == 3
        assert config.strategy.latest_top_n == 5
        assert config.recommendation.high_reputation_points == 100
        assert config.points.events == {
            "suggestion_accepted": 10,
            "merge_performed": 15,
            "conflict_resolved": 5,
        }

    def test_from_dict_merges_point_events(self):
        """Test partial point tables keep the other defaults."""
        config = MergeConfig.from_dict({"points": {"events": {"merge_performed": 25}}})

        assert config.points.events["merge_performed"] == 25
        assert config.points.events["conflict_resolved"] == 5

    def test_from_dict_word_lists(self):
        """Test lexicons load as tuples."""
        config = MergeConfig.from_dict({"detection": {"positive_words": ["more"]}})

        assert config.detection.positive_words == ("more",)

    def test_missing_file_uses_defaults(self, temp_dir):
        """Test loading without a file gives defaults."""
        assert MergeConfig.load(temp_dir) == MergeConfig()

    def test_save_and_load(self, temp_dir):
        """Test saved configuration loads back."""
        config = MergeConfig.from_dict({
            "grouping": {"threshold": 0.5},
            "strategy": {"default_strategy": "latest"},
        })

        config.save(temp_dir)

        assert MergeConfig.load(temp_dir) == config

    def test_invalid_json(self, temp_dir):
        """Test malformed files raise ConfigurationError."""
        path = temp_dir / ".ideamerge" / "merge.config.json"
        path.parent.mkdir(parents=True)
        path.write_text("{not json")

        with pytest.raises(ConfigurationError):
            MergeConfig.load(temp_dir)

    def test_unknown_key(self, temp_dir):
        """Test unknown settings raise ConfigurationError."""
        path = temp_dir / ".ideamerge" / "merge.config.json"
        path.parent.mkdir(parents=True)
        path.write_text('{"grouping": {"cutoff": 0.5}}')

        with pytest.raises(ConfigurationError):
            MergeConfig.load(temp_dir)
