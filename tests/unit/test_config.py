"""
Unit tests for settings loading and component config mapping.
"""

import pytest
from pydantic import ValidationError

from config import Settings, get_settings
from facet.core.models import Dimension, DimensionMastery, Variant, complete_profile
from facet.delivery.scheduler import SM2Config
from facet.delivery.variant_selector import SelectionConfig, VariantSelector, weakness_boost
from facet.learning.mastery_tracker import MasteryConfig, MasteryTracker
from facet.learning.weakness_analyzer import WeaknessAnalyzer, WeaknessConfig


class TestSettings:
    def test_defaults(self):
        settings = Settings()
        assert settings.ewma_alpha == 0.15
        assert settings.min_ease_factor == 1.3
        assert settings.session_dimension_cap == 0.7
        assert settings.log_level == "INFO"

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("EWMA_ALPHA", "0.25")
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        settings = Settings()
        assert settings.ewma_alpha == 0.25
        assert settings.log_level == "DEBUG"

    def test_alpha_out_of_range_rejected(self):
        with pytest.raises(ValidationError):
            Settings(ewma_alpha=1.5)

    def test_unknown_log_level_rejected(self):
        with pytest.raises(ValidationError):
            Settings(log_level="TRACE")

    def test_get_settings_cached(self):
        assert get_settings() is get_settings()


class TestComponentConfigs:
    def test_mapping(self):
        settings = Settings(
            ewma_alpha=0.2,
            critical_threshold=0.3,
            max_ease_factor=3.0,
            maintenance_min_cards=8,
        )
        assert MasteryConfig.from_settings(settings).alpha == 0.2
        assert WeaknessConfig.from_settings(settings).critical_threshold == 0.3
        assert SM2Config.from_settings(settings).maximum_easiness == 3.0
        assert SelectionConfig.from_settings(settings).maintenance_min_cards == 8

    def test_defaults_agree(self):
        settings = Settings()
        assert SM2Config.from_settings(settings) == SM2Config()
        assert SelectionConfig.from_settings(settings) == SelectionConfig()
        assert WeaknessConfig.from_settings(settings) == WeaknessConfig()
        assert MasteryConfig.from_settings(settings) == MasteryConfig()


class TestComponentAgreement:
    """Every component built from the same Settings scores mastery the same way."""

    @pytest.fixture
    def balanced_settings(self):
        return Settings(accuracy_weight=0.5, speed_weight=0.5)

    def test_weights_shared_across_components(self, balanced_settings):
        # combined is 0.65 at 0.5/0.5 but 0.75 at the default 0.7/0.3
        mastery = DimensionMastery(accuracy_ewma=0.9, speed_ewma=0.4, recent_count=10)
        profile = complete_profile({Dimension.CLOZE_FILL: mastery})

        tracker = MasteryTracker(MasteryConfig.from_settings(balanced_settings))
        analyzer = WeaknessAnalyzer(WeaknessConfig.from_settings(balanced_settings))
        selector = VariantSelector(SelectionConfig.from_settings(balanced_settings))

        assert tracker.is_weak(mastery)
        assert analyzer.combined(mastery) == pytest.approx(tracker.combined(mastery))
        assert [w.dimension for w in analyzer.detect_weak_dimensions(profile)] == [Dimension.CLOZE_FILL]
        assert Dimension.CLOZE_FILL not in selector.strong_dimensions(profile)

        cloze = Variant(id="v", concept_id="c", dimension=Dimension.CLOZE_FILL, difficulty=3)
        (weight,) = selector.weights([cloze], profile, 0)
        assert weight == pytest.approx(1.1 * 2.0)

    def test_weakness_threshold_reaches_selector(self):
        settings = Settings(weakness_threshold=0.5)
        selector = VariantSelector(SelectionConfig.from_settings(settings))
        analyzer = WeaknessAnalyzer(WeaknessConfig.from_settings(settings))
        neutral = DimensionMastery(0.5, 0.5, 10)

        assert selector.config.weakness_threshold == 0.5
        assert weakness_boost(neutral, selector.config.weakness_threshold) == pytest.approx(0.9)
        assert analyzer.detect_weak_dimensions({Dimension.CLOZE_FILL: neutral}) == []
