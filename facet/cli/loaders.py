"""
Input file models for the facet CLI.

JSON files are validated with Pydantic and converted to domain models.

Profile file:
    {"definition_recall": {"accuracy_ewma": 0.9, "speed_ewma": 0.8, "recent_count": 12}, ...}

Deck file:
    {
      "concept": {"id": "c1", "name": "Opportunity cost"},
      "variants": [{"id": "v1", "dimension": "definition", "difficulty": 2, "front": "..."}],
      "profile": {...},                      # optional, same shape as a profile file
      "session_dimensions": ["cloze", ...],  # optional
      "consecutive_failures": 0              # optional
    }
"""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path

from pydantic import BaseModel, Field, RootModel, field_validator

from facet.core.dimensions import ALL_DIFFICULTY_LEVELS, DEFAULT_DIFFICULTY
from facet.core.models import (
    Concept,
    Dimension,
    DimensionMastery,
    Variant,
    complete_profile,
)


class DimensionMasteryModel(BaseModel):
    """Mastery entry for one dimension."""

    accuracy_ewma: float = Field(default=0.5, ge=0.0, le=1.0)
    speed_ewma: float = Field(default=0.5, ge=0.0, le=1.0)
    recent_count: int = Field(default=0, ge=0)

    def to_domain(self) -> DimensionMastery:
        return DimensionMastery(
            accuracy_ewma=self.accuracy_ewma,
            speed_ewma=self.speed_ewma,
            recent_count=self.recent_count,
        )


class ProfileModel(RootModel[dict[str, DimensionMasteryModel]]):
    """Mastery profile keyed by dimension name or short alias."""

    @field_validator("root")
    @classmethod
    def _known_dimensions(cls, value: dict[str, DimensionMasteryModel]) -> dict[str, DimensionMasteryModel]:
        for key in value:
            Dimension.from_string(key)
        return value

    def to_domain(self) -> dict[Dimension, DimensionMastery]:
        return complete_profile(
            {Dimension.from_string(key): entry.to_domain() for key, entry in self.root.items()}
        )


class ConceptModel(BaseModel):
    id: str
    name: str
    definition: str = ""
    facts: list[str] = Field(default_factory=list)

    def to_domain(self) -> Concept:
        return Concept(id=self.id, name=self.name, definition=self.definition, facts=tuple(self.facts))


class VariantModel(BaseModel):
    id: str
    dimension: str
    difficulty: int = Field(
        default=DEFAULT_DIFFICULTY, ge=ALL_DIFFICULTY_LEVELS[0], le=ALL_DIFFICULTY_LEVELS[-1]
    )
    front: str = ""
    back: str = ""
    hints: list[str] = Field(default_factory=list)
    last_shown_at: datetime | None = None

    @field_validator("dimension")
    @classmethod
    def _known_dimension(cls, value: str) -> str:
        return Dimension.from_string(value).value

    def to_domain(self, concept_id: str) -> Variant:
        return Variant(
            id=self.id,
            concept_id=concept_id,
            dimension=Dimension(self.dimension),
            difficulty=self.difficulty,
            front=self.front,
            back=self.back,
            hints=tuple(self.hints),
            last_shown_at=self.last_shown_at,
        )


class DeckModel(BaseModel):
    """A concept, its variants, and optional session context."""

    concept: ConceptModel
    variants: list[VariantModel]
    profile: ProfileModel | None = None
    session_dimensions: list[str] = Field(default_factory=list)
    consecutive_failures: int = Field(default=0, ge=0)

    @field_validator("session_dimensions")
    @classmethod
    def _known_session_dimensions(cls, value: list[str]) -> list[str]:
        return [Dimension.from_string(d).value for d in value]

    def domain_variants(self) -> list[Variant]:
        return [v.to_domain(self.concept.id) for v in self.variants]

    def domain_profile(self) -> dict[Dimension, DimensionMastery]:
        return self.profile.to_domain() if self.profile else complete_profile({})

    def domain_session_dimensions(self) -> list[Dimension]:
        return [Dimension(d) for d in self.session_dimensions]


def load_profile(path: Path) -> dict[Dimension, DimensionMastery]:
    data = json.loads(path.read_text(encoding="utf-8"))
    return ProfileModel.model_validate(data).to_domain()


def load_deck(path: Path) -> DeckModel:
    data = json.loads(path.read_text(encoding="utf-8"))
    return DeckModel.model_validate(data)
