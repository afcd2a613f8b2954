"""
Data Transfer Objects (DTOs) for results in the recommendation system.
"""
from dataclasses import dataclass, field
from typing import List

from spots.models import Spot


@dataclass
class FactorScore:
    """Contribution of one scoring factor and the reasons it applied"""
    score: float = 0.0
    reasons: List[str] = field(default_factory=list)

    def add(self, points: float, reason: str = "") -> None:
        self.score += points
        if reason:
            self.reasons.append(reason)


@dataclass
class RecommendationScore:
    """
    A candidate spot with its computed recommendation score.
    Returned by RecommendationService.get_personalized_recommendations().
    Computed per request, never persisted.
    """
    spot: Spot  # owner loaded
    score: float
    reasons: List[str] = field(default_factory=list)
