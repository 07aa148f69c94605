"""
Display metadata and fixed lookup tables for the six dimensions.

These tables are process-wide constants; they are wrapped in
MappingProxyType so nothing can mutate them after import.
"""

from __future__ import annotations

from types import MappingProxyType

from facet.core.models import Dimension

ALL_DIMENSIONS: tuple[Dimension, ...] = tuple(Dimension)

ALL_DIFFICULTY_LEVELS: tuple[int, ...] = (1, 2, 3, 4, 5)

DEFAULT_DIFFICULTY = 2

DIMENSION_DISPLAY_NAMES = MappingProxyType(
    {
        Dimension.DEFINITION_RECALL: "Definition Recall",
        Dimension.PARAPHRASE_RECOGNITION: "Paraphrase Recognition",
        Dimension.EXAMPLE_CLASSIFICATION: "Example Classification",
        Dimension.SCENARIO_APPLICATION: "Scenario Application",
        Dimension.DISCRIMINATION: "Discrimination",
        Dimension.CLOZE_FILL: "Cloze Fill",
    }
)

DIMENSION_DESCRIPTIONS = MappingProxyType(
    {
        Dimension.DEFINITION_RECALL: (
            "Tests whether you can recall the definition when shown the term. "
            "This is the most basic level of knowledge."
        ),
        Dimension.PARAPHRASE_RECOGNITION: (
            "Tests whether you can recognize correct restatements of the definition in different words."
        ),
        Dimension.EXAMPLE_CLASSIFICATION: (
            "Tests whether you can correctly identify examples and non-examples of the concept."
        ),
        Dimension.SCENARIO_APPLICATION: (
            "Tests whether you can apply the concept to novel real-world scenarios and situations."
        ),
        Dimension.DISCRIMINATION: (
            "Tests whether you can distinguish this concept from similar or related concepts."
        ),
        Dimension.CLOZE_FILL: (
            "Tests whether you can complete sentences with missing key terms from the definition."
        ),
    }
)

DIMENSION_ACTION_VERBS = MappingProxyType(
    {
        Dimension.DEFINITION_RECALL: "Recall",
        Dimension.PARAPHRASE_RECOGNITION: "Recognize",
        Dimension.EXAMPLE_CLASSIFICATION: "Classify",
        Dimension.SCENARIO_APPLICATION: "Apply",
        Dimension.DISCRIMINATION: "Distinguish",
        Dimension.CLOZE_FILL: "Complete",
    }
)

DIFFICULTY_LABELS = MappingProxyType(
    {
        1: "Very Easy",
        2: "Easy",
        3: "Medium",
        4: "Hard",
        5: "Very Hard",
    }
)

# Target response time per difficulty, in milliseconds.
# A response at exactly the target scores 0.5 on speed.
DIFFICULTY_TARGET_TIMES_MS = MappingProxyType(
    {
        1: 5000,  # basic recall
        2: 10000,  # simple recognition
        3: 20000,  # moderate application
        4: 40000,  # complex reasoning
        5: 60000,  # deep analysis
    }
)


def display_name(dimension: Dimension) -> str:
    """Lower-case name for use inside sentences ("scenario application")."""
    return DIMENSION_DISPLAY_NAMES[dimension].lower()
