"""
Data access for the recommendation engine.
RecommendationService only talks to storage through RecommendationRepository,
so tests can inject an in-memory implementation.
"""
import uuid
from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from django.db import transaction
from django.db.models import Count, Sum
from spots.models import Spot
from user.models import FollowRelation
from recommendations.models import Interaction, UserPreferences


class RecommendationRepository(ABC):
    """Read/write contract the recommendation engine depends on"""

    @abstractmethod
    def list_spots_excluding_owner(self, user_id: uuid.UUID) -> List[Spot]:
        """All spots not owned by user_id, owner loaded, ordered by id"""
        pass

    @abstractmethod
    def is_following(self, follower_id: uuid.UUID, followee_id: uuid.UUID) -> bool:
        pass

    @abstractmethod
    def count_interactions_by_spot_from_followed_users(self, user_id: uuid.UUID, spot_id: int) -> int:
        """Number of interactions on spot_id made by any user that user_id follows"""
        pass

    @abstractmethod
    def get_user_preferences(self, user_id: uuid.UUID) -> Optional[UserPreferences]:
        pass

    @abstractmethod
    def get_users_own_spots(self, user_id: uuid.UUID) -> List[Spot]:
        """Spots owned by user_id, ordered by id"""
        pass

    @abstractmethod
    def get_interaction_counts_by_list_name(self, user_id: uuid.UUID) -> List[Tuple[str, int]]:
        """
        (list_name, interaction count) pairs for the spots user_id interacted with,
        ranked by count descending then list_name.
        """
        pass

    @abstractmethod
    def get_region_weights(self, user_id: uuid.UUID) -> List[Tuple[str, int]]:
        """
        (region, summed interaction weight) pairs for user_id, ranked by
        weight descending then region. Null regions are left out.
        """
        pass

    @abstractmethod
    def insert_interaction(self, user_id: uuid.UUID, spot_id: int, interaction_type: str, weight: int) -> None:
        pass

    @abstractmethod
    def upsert_preferences(self, user_id: uuid.UUID, preferred_regions: List[str]) -> None:
        """
        Update preferred_regions of the existing row, or insert a new row
        with empty categories and interest tags.
        """
        pass


class DjangoRecommendationRepository(RecommendationRepository):
    """RecommendationRepository backed by the Django ORM"""

    def list_spots_excluding_owner(self, user_id: uuid.UUID) -> List[Spot]:
        return list(
            Spot.objects.select_related('owner__user')
            .exclude(owner_id=user_id)
            .order_by('id')
        )

    def is_following(self, follower_id: uuid.UUID, followee_id: uuid.UUID) -> bool:
        return FollowRelation.objects.filter(follower_id=follower_id, following_id=followee_id).exists()

    def count_interactions_by_spot_from_followed_users(self, user_id: uuid.UUID, spot_id: int) -> int:
        return Interaction.objects.filter(
            spot_id=spot_id,
            user__follower_relation__follower_id=user_id,
        ).count()

    def get_user_preferences(self, user_id: uuid.UUID) -> Optional[UserPreferences]:
        return UserPreferences.objects.filter(user_id=user_id).first()

    def get_users_own_spots(self, user_id: uuid.UUID) -> List[Spot]:
        return list(Spot.objects.filter(owner_id=user_id).order_by('id'))

    def get_interaction_counts_by_list_name(self, user_id: uuid.UUID) -> List[Tuple[str, int]]:
        rows = (
            Interaction.objects.filter(user_id=user_id)
            .values('spot__list_name')
            .annotate(count=Count('id'))
            .order_by('-count', 'spot__list_name')
        )
        return [(row['spot__list_name'], row['count']) for row in rows]

    def get_region_weights(self, user_id: uuid.UUID) -> List[Tuple[str, int]]:
        rows = (
            Interaction.objects.filter(user_id=user_id, spot__region__isnull=False)
            .values('spot__region')
            .annotate(total_weight=Sum('weight'))
            .order_by('-total_weight', 'spot__region')
        )
        return [(row['spot__region'], row['total_weight']) for row in rows]

    def insert_interaction(self, user_id: uuid.UUID, spot_id: int, interaction_type: str, weight: int) -> None:
        Interaction.objects.create(
            user_id=user_id,
            spot_id=spot_id,
            interaction_type=interaction_type,
            weight=weight,
        )

    def upsert_preferences(self, user_id: uuid.UUID, preferred_regions: List[str]) -> None:
        with transaction.atomic():
            preferences, created = UserPreferences.objects.select_for_update().get_or_create(
                user_id=user_id,
                defaults={
                    'preferred_regions': preferred_regions,
                    'preferred_categories': [],
                    'interest_tags': [],
                },
            )
            if not created:
                preferences.preferred_regions = preferred_regions
                preferences.save(update_fields=['preferred_regions', 'updated_at'])
