"""
Delivery: scheduling, variant selection and session orchestration.
"""

from facet.delivery.scheduler import SM2Config, SM2Scheduler, default_scheduler
from facet.delivery.session import (
    CardSelection,
    ReviewMismatchError,
    ReviewReceipt,
    ReviewSession,
    SessionCoordinator,
    UnknownConceptError,
    UnknownVariantError,
)
from facet.delivery.variant_selector import (
    SelectionConfig,
    VariantSelector,
    anti_frustration_penalty,
    difficulty_alignment,
    novelty_boost,
    variant_weight,
    weakness_boost,
    weighted_random_select,
)

__all__ = [
    # Scheduling
    "SM2Config",
    "SM2Scheduler",
    "default_scheduler",
    # Selection
    "SelectionConfig",
    "VariantSelector",
    "anti_frustration_penalty",
    "difficulty_alignment",
    "novelty_boost",
    "variant_weight",
    "weakness_boost",
    "weighted_random_select",
    # Session
    "CardSelection",
    "ReviewMismatchError",
    "ReviewReceipt",
    "ReviewSession",
    "SessionCoordinator",
    "UnknownConceptError",
    "UnknownVariantError",
]
