"""
Weakness Analyzer for mastery profiles.

Identifies areas needing practice:
- Weak dimensions, classified critical / moderate / mild
- Fragile confidence (accurate but slow)
- Dodging pattern (strong rote recall masking weak deeper dimensions)
- Overall health bucket

Produces a single human-readable suggestion per profile. All results are
derived values recomputed on demand; nothing here is stored.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from statistics import fmean
from typing import TYPE_CHECKING

from loguru import logger

from facet.core.dimensions import ALL_DIMENSIONS, display_name
from facet.core.models import Dimension, DimensionMastery, MasteryProfile, complete_profile
from facet.learning.mastery_tracker import (
    ACCURACY_WEIGHT,
    SPEED_WEIGHT,
    combined_mastery,
    is_fragile_confidence,
)

if TYPE_CHECKING:
    from config import Settings


class Severity(str, Enum):
    """Weakness severity. Declaration order is sort order (worst first)."""

    CRITICAL = "critical"
    MODERATE = "moderate"
    MILD = "mild"

    @property
    def rank(self) -> int:
        return list(Severity).index(self)


class OverallHealth(str, Enum):
    """Bucket for the mean combined mastery across all six dimensions."""

    POOR = "poor"  # < 0.5
    FAIR = "fair"  # 0.5 - 0.7
    GOOD = "good"  # 0.7 - 0.85
    EXCELLENT = "excellent"  # >= 0.85

    @property
    def color(self) -> str:
        """Rich color for CLI display."""
        return {
            OverallHealth.POOR: "red",
            OverallHealth.FAIR: "yellow",
            OverallHealth.GOOD: "cyan",
            OverallHealth.EXCELLENT: "green",
        }[self]


@dataclass(frozen=True)
class Weakness:
    """A detected weakness in one dimension."""

    dimension: Dimension
    severity: Severity
    combined_score: float
    reason: str


@dataclass(frozen=True)
class WeaknessProfile:
    """Complete weakness analysis for a mastery profile."""

    weaknesses: tuple[Weakness, ...]
    primary_weakness: Weakness | None
    fragile_dimensions: tuple[Dimension, ...]
    is_dodging_pattern: bool
    overall_health: OverallHealth


@dataclass
class WeaknessConfig:
    """Thresholds for weakness detection."""

    accuracy_weight: float = ACCURACY_WEIGHT
    speed_weight: float = SPEED_WEIGHT
    weakness_threshold: float = 0.7
    critical_threshold: float = 0.4
    moderate_threshold: float = 0.55
    min_sample_size: int = 5
    dodging_definition_threshold: float = 0.8
    dodging_others_threshold: float = 0.6
    fragile_accuracy_threshold: float = 0.7
    fragile_speed_threshold: float = 0.5
    fair_health: float = 0.5
    good_health: float = 0.7
    excellent_health: float = 0.85

    @classmethod
    def from_settings(cls, settings: Settings) -> WeaknessConfig:
        return cls(
            accuracy_weight=settings.accuracy_weight,
            speed_weight=settings.speed_weight,
            weakness_threshold=settings.weakness_threshold,
            critical_threshold=settings.critical_threshold,
            moderate_threshold=settings.moderate_threshold,
            min_sample_size=settings.min_sample_size,
            dodging_definition_threshold=settings.dodging_definition_threshold,
            dodging_others_threshold=settings.dodging_others_threshold,
            fragile_accuracy_threshold=settings.fragile_accuracy_threshold,
            fragile_speed_threshold=settings.fragile_speed_threshold,
        )


class WeaknessAnalyzer:
    """
    Analyze a mastery profile for weaknesses and learning patterns.

    Thresholds:
    - Weak: combined < 0.7 (with at least min_sample_size reviews)
    - Critical: combined < 0.4
    - Moderate: combined < 0.55
    - Dodging: definition recall >= 0.8 AND mean of others < 0.6
    """

    def __init__(self, config: WeaknessConfig | None = None):
        self.config = config or WeaknessConfig()

    # ------------------------------------------------------------------
    # Detection
    # ------------------------------------------------------------------

    def classify_severity(self, score: float) -> Severity:
        if score < self.config.critical_threshold:
            return Severity.CRITICAL
        if score < self.config.moderate_threshold:
            return Severity.MODERATE
        return Severity.MILD

    def detect_weak_dimensions(
        self,
        profile: MasteryProfile,
        min_samples: int | None = None,
    ) -> list[Weakness]:
        """
        Find weak dimensions with enough data to be trusted.

        Args:
            profile: Mastery profile to analyze
            min_samples: Reviews required before flagging (default from config)

        Returns:
            Weaknesses sorted critical first, then by ascending score
        """
        if min_samples is None:
            min_samples = self.config.min_sample_size
        profile = complete_profile(profile)

        weaknesses = []
        for dimension in ALL_DIMENSIONS:
            mastery = profile[dimension]
            if mastery.recent_count < min_samples:
                continue

            score = self.combined(mastery)
            if score < self.config.weakness_threshold:
                severity = self.classify_severity(score)
                weaknesses.append(
                    Weakness(
                        dimension=dimension,
                        severity=severity,
                        combined_score=score,
                        reason=weakness_reason(dimension, mastery, severity),
                    )
                )

        weaknesses.sort(key=lambda w: (w.severity.rank, w.combined_score))
        return weaknesses

    def detect_fragile_confidence(self, profile: MasteryProfile) -> list[Dimension]:
        profile = complete_profile(profile)
        return [d for d in ALL_DIMENSIONS if self._is_fragile(profile[d])]

    def detect_dodging_pattern(self, profile: MasteryProfile) -> bool:
        """
        Detect reliance on rote recall.

        True when definition recall is strong but the unweighted mean of the
        other five dimensions is weak.
        """
        profile = complete_profile(profile)
        definition_score = self.combined(profile[Dimension.DEFINITION_RECALL])
        if definition_score < self.config.dodging_definition_threshold:
            return False

        others = [
            self.combined(profile[d]) for d in ALL_DIMENSIONS if d is not Dimension.DEFINITION_RECALL
        ]
        return fmean(others) < self.config.dodging_others_threshold

    def combined(self, mastery: DimensionMastery) -> float:
        return combined_mastery(mastery, self.config.accuracy_weight, self.config.speed_weight)

    def _is_fragile(self, mastery: DimensionMastery) -> bool:
        return is_fragile_confidence(
            mastery,
            self.config.fragile_accuracy_threshold,
            self.config.fragile_speed_threshold,
        )

    def overall_health(self, profile: MasteryProfile) -> OverallHealth:
        profile = complete_profile(profile)
        average = fmean(self.combined(profile[d]) for d in ALL_DIMENSIONS)
        if average >= self.config.excellent_health:
            return OverallHealth.EXCELLENT
        if average >= self.config.good_health:
            return OverallHealth.GOOD
        if average >= self.config.fair_health:
            return OverallHealth.FAIR
        return OverallHealth.POOR

    def should_prioritize_dimension(self, profile: MasteryProfile, dimension: Dimension) -> bool:
        """Quick check: weak, fragile, or not yet practiced enough."""
        mastery = complete_profile(profile)[dimension]
        return (
            self.combined(mastery) < self.config.weakness_threshold
            or self._is_fragile(mastery)
            or mastery.recent_count < self.config.min_sample_size
        )

    # ------------------------------------------------------------------
    # Analysis
    # ------------------------------------------------------------------

    def analyze(self, profile: MasteryProfile) -> WeaknessProfile:
        """Bundle every detector into a single WeaknessProfile."""
        weaknesses = self.detect_weak_dimensions(profile)
        result = WeaknessProfile(
            weaknesses=tuple(weaknesses),
            primary_weakness=weaknesses[0] if weaknesses else None,
            fragile_dimensions=tuple(self.detect_fragile_confidence(profile)),
            is_dodging_pattern=self.detect_dodging_pattern(profile),
            overall_health=self.overall_health(profile),
        )
        logger.debug(
            f"Weakness analysis: {len(result.weaknesses)} weak, "
            f"{len(result.fragile_dimensions)} fragile, "
            f"dodging={result.is_dodging_pattern}, health={result.overall_health.value}"
        )
        return result

    @staticmethod
    def suggestion(analysis: WeaknessProfile) -> str:
        """
        One actionable message for the learner.

        Priority: dodging pattern, fragile confidence, primary weakness by
        severity, then a generic message for the overall health bucket.
        """
        primary = analysis.primary_weakness

        if analysis.is_dodging_pattern:
            focus = display_name(primary.dimension) if primary else "applying concepts"
            return (
                f"Focus on {focus} - you're strong on definitions but need more "
                "practice with application and discrimination"
            )

        if analysis.fragile_dimensions:
            name = display_name(analysis.fragile_dimensions[0])
            return f"Work on speed for {name} - you know the material but need to build automaticity"

        if primary is not None:
            name = display_name(primary.dimension)
            match primary.severity:
                case Severity.CRITICAL:
                    return f"Prioritize {name} practice - this area needs significant improvement"
                case Severity.MODERATE:
                    return f"Continue practicing {name} - you're making progress but need more work"
                case Severity.MILD:
                    return f"Polish your {name} skills - nearly there, just needs some reinforcement"

        match analysis.overall_health:
            case OverallHealth.EXCELLENT:
                return (
                    "Excellent mastery across all dimensions! "
                    "Consider increasing difficulty or reviewing less frequently"
                )
            case OverallHealth.GOOD:
                return "Good progress overall. Maintain your practice routine for continued improvement"
            case OverallHealth.FAIR:
                return "Keep practicing consistently. Focus on building stronger foundations"
            case _:
                return "Continue regular practice to build your understanding across all dimensions"


def weakness_reason(dimension: Dimension, mastery: DimensionMastery, severity: Severity) -> str:
    """Explain why a dimension was flagged."""
    name = display_name(dimension)
    low_accuracy = mastery.accuracy_ewma < 0.5
    low_speed = mastery.speed_ewma < 0.5

    if low_accuracy and low_speed:
        return f"{name} needs significant practice - both accuracy and speed are low"
    if low_accuracy:
        return f"{name} accuracy is low - focus on understanding the concept"
    if low_speed:
        return f"{name} speed is slow - practice for faster recall"

    description = {
        Severity.CRITICAL: "urgently needs attention",
        Severity.MODERATE: "needs more practice",
        Severity.MILD: "could use some reinforcement",
    }[severity]
    return f"{name} {description}"


_default_analyzer = WeaknessAnalyzer()


def analyze_weaknesses(profile: MasteryProfile) -> WeaknessProfile:
    """Analyze with default thresholds."""
    return _default_analyzer.analyze(profile)


def get_suggestion(profile: MasteryProfile) -> str:
    """Analyze with default thresholds and return the suggestion."""
    return WeaknessAnalyzer.suggestion(analyze_weaknesses(profile))
