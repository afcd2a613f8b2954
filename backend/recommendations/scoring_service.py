"""
RecommendationService: the scoring engine behind personalized spot recommendations.
Ranks other users' spots with five additive rules, each of which carries a
human-readable reason shown to the user ("why recommended").
"""
import logging
import uuid
from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, List, Optional, Set

from django.conf import settings
from django.db import connections
from django.utils import timezone
from spots.models import Spot
from recommendations.dtos import FactorScore, RecommendationScore
from recommendations.repository import DjangoRecommendationRepository, RecommendationRepository

logger = logging.getLogger(__name__)


class RecommendationService:
    """
    Algorithm Service: ranks candidate spots for a user as the sum of
    1. Social score (followed owner, interactions of followed users)
    2. Regional score (stored preferred regions, user's most frequent region)
    3. Interaction pattern score (user's most interacted list names)
    4. Content score (shared place-type keywords)
    5. Recency score (age of the spot)
    """

    # Social
    FOLLOWED_OWNER_POINTS = 30
    FOLLOWED_INTERACTION_POINTS = 5
    FOLLOWED_INTERACTION_CAP = 20

    # Regional
    PREFERRED_REGION_POINTS = 25
    FREQUENT_REGION_POINTS = 15

    # Interaction pattern
    LIST_NAME_POINTS = 20
    TOP_LIST_NAMES = 3

    # Content
    KEYWORD_POINTS = 10
    KEYWORD_CAP = 25

    # Recency (age in whole days -> points)
    RECENT_DAYS = 7
    RECENT_POINTS = 10
    FRESH_DAYS = 30
    FRESH_POINTS = 5

    # Preferences
    PREFERRED_REGIONS_LIMIT = 5

    INTERACTION_WEIGHTS = {
        'view': 1,
        'like': 3,
        'save': 5,
        'share': 7,
        'visit': 10,
    }
    DEFAULT_INTERACTION_WEIGHT = 1

    # Place-type vocabulary for the content rule (substring match)
    PLACE_KEYWORDS = [
        'カフェ', 'レストラン', '公園', '美術館', '博物館',
        'ラーメン', '寿司', '焼肉', 'パン', 'スイーツ',
        '景色', '夜景', '桜', '紅葉', '海', '山', '川',
        'ショッピング', '買い物', '温泉', 'ホテル',
    ]

    REASON_FOLLOWED_OWNER = "フォローしているユーザーのスポット"
    REASON_FOLLOWED_INTERACTIONS = "フォローしているユーザーがよく見ているスポット"
    REASON_PREFERRED_REGION = "好みの地域: {region}"
    REASON_FREQUENT_REGION = "よく訪れている地域のスポット"
    REASON_LIST_NAME = "興味のあるリストタイプ"
    REASON_CONTENT = "似た興味の内容"
    REASON_RECENT = "新しく追加されたスポット"

    def __init__(self, repository: Optional[RecommendationRepository] = None, max_workers: Optional[int] = None):
        """
        Args:
            repository: data access used for every read and write
            max_workers: bound of the per-candidate scoring pool; 1 scores in
                the calling thread. Defaults to settings.RECOMMENDATION_MAX_WORKERS.
        """
        self.repository = repository or DjangoRecommendationRepository()
        if max_workers is None:
            max_workers = getattr(settings, 'RECOMMENDATION_MAX_WORKERS', 1)
        self.max_workers = max(1, int(max_workers))

    def get_personalized_recommendations(self, user_id: uuid.UUID, limit: int = 10) -> List[RecommendationScore]:
        """
        Scores every spot not owned by the user and returns the best `limit`.

        Ordering is by score descending, then spot id ascending.
        Storage errors propagate; no partial result is returned.

        Args:
            user_id: UserProfile id of the user receiving recommendations
            limit: number of results to return

        Returns:
            List[RecommendationScore]: top `limit` candidates
        """
        candidates = self.repository.list_spots_excluding_owner(user_id)
        if not candidates:
            logger.debug(f"No candidate spots for user {user_id}")
            return []

        if self.max_workers > 1 and len(candidates) > 1:
            recommendations = self._score_concurrently(user_id, candidates)
        else:
            recommendations = [self.calculate_recommendation_score(user_id, spot) for spot in candidates]

        recommendations.sort(key=lambda r: (-r.score, r.spot.id))
        logger.debug(
            f"Scored {len(candidates)} candidate spots for user {user_id}, returning {min(limit, len(recommendations))}"
        )
        return recommendations[:limit]

    def calculate_recommendation_score(self, user_id: uuid.UUID, spot: Spot) -> RecommendationScore:
        """
        Sum of the five factor scores for one candidate spot.
        Reasons keep factor order: social, regional, interaction, content, recency.
        """
        factors = [
            self.calculate_social_score(user_id, spot),
            self.calculate_regional_score(user_id, spot),
            self.calculate_interaction_score(user_id, spot),
            self.calculate_content_score(user_id, spot),
            self.calculate_recency_score(spot),
        ]

        score = sum(factor.score for factor in factors)
        reasons = [reason for factor in factors for reason in factor.reasons if reason]
        return RecommendationScore(spot=spot, score=round(score, 2), reasons=reasons)

    def calculate_social_score(self, user_id: uuid.UUID, spot: Spot) -> FactorScore:
        result = FactorScore()

        if self.repository.is_following(user_id, spot.owner_id):
            result.add(self.FOLLOWED_OWNER_POINTS, self.REASON_FOLLOWED_OWNER)

        interaction_count = self.repository.count_interactions_by_spot_from_followed_users(user_id, spot.id)
        if interaction_count > 0:
            result.add(
                min(interaction_count * self.FOLLOWED_INTERACTION_POINTS, self.FOLLOWED_INTERACTION_CAP),
                self.REASON_FOLLOWED_INTERACTIONS,
            )

        return result

    def calculate_regional_score(self, user_id: uuid.UUID, spot: Spot) -> FactorScore:
        result = FactorScore()

        # A missing preferences row means no preferred region, not an error
        preferences = self.repository.get_user_preferences(user_id)
        if preferences is not None and spot.region in (preferences.preferred_regions or []):
            result.add(self.PREFERRED_REGION_POINTS, self.REASON_PREFERRED_REGION.format(region=spot.region))

        top_region = self.most_frequent_region(self.repository.get_users_own_spots(user_id))
        if top_region is not None and spot.region == top_region:
            result.add(self.FREQUENT_REGION_POINTS, self.REASON_FREQUENT_REGION)

        return result

    def calculate_interaction_score(self, user_id: uuid.UUID, spot: Spot) -> FactorScore:
        result = FactorScore()

        ranked = self.repository.get_interaction_counts_by_list_name(user_id)
        top_list_names = [list_name for list_name, _ in ranked[:self.TOP_LIST_NAMES]]
        if spot.list_name in top_list_names:
            result.add(self.LIST_NAME_POINTS, self.REASON_LIST_NAME)

        return result

    def calculate_content_score(self, user_id: uuid.UUID, spot: Spot) -> FactorScore:
        result = FactorScore()

        own_spots = self.repository.get_users_own_spots(user_id)
        if not own_spots:
            return result

        common = self.extract_keywords(own_spots) & self.extract_keywords([spot])
        if common:
            result.add(min(len(common) * self.KEYWORD_POINTS, self.KEYWORD_CAP), self.REASON_CONTENT)

        return result

    def calculate_recency_score(self, spot: Spot) -> FactorScore:
        """
        Boosts newer spots. Age is counted in whole days against the current time;
        a spot without created_at counts as created now.
        """
        result = FactorScore()

        now = timezone.now()
        days = (now - (spot.created_at or now)).days

        if days <= self.RECENT_DAYS:
            result.add(self.RECENT_POINTS, self.REASON_RECENT)
        elif days <= self.FRESH_DAYS:
            result.add(self.FRESH_POINTS)

        return result

    def extract_keywords(self, spots: Iterable[Spot]) -> Set[str]:
        """
        Place-type keywords found in the comment and place name of the given spots.
        Heuristic substring match, case-insensitive.
        """
        keywords = set()
        for spot in spots:
            text = f"{spot.comment or ''} {spot.place_name or ''}".lower()
            for keyword in self.PLACE_KEYWORDS:
                if keyword.lower() in text:
                    keywords.add(keyword)
        return keywords

    @staticmethod
    def most_frequent_region(spots: Iterable[Spot]) -> Optional[str]:
        """
        Mode of the regions of the given spots. Ties go to the region seen first.
        """
        counts = Counter(spot.region for spot in spots if spot.region)
        if not counts:
            return None
        return counts.most_common(1)[0][0]

    def record_interaction(self, user_id: uuid.UUID, spot_id: int, interaction_type: str) -> None:
        """
        Appends an interaction to the log. Unknown interaction types are stored
        as given with the default weight.
        """
        weight = self.get_interaction_weight(interaction_type)
        self.repository.insert_interaction(user_id, spot_id, interaction_type, weight)
        logger.debug(f"Recorded {interaction_type} (weight {weight}) by user {user_id} on spot {spot_id}")

    def get_interaction_weight(self, interaction_type: str) -> int:
        return self.INTERACTION_WEIGHTS.get(interaction_type, self.DEFAULT_INTERACTION_WEIGHT)

    def update_user_preferences(self, user_id: uuid.UUID) -> None:
        """
        Recomputes preferred_regions as the top regions by summed interaction
        weight and upserts the user's preferences row.
        Concurrent calls for one user: last write wins.
        """
        region_weights = self.repository.get_region_weights(user_id)
        preferred_regions = [
            region for region, _ in region_weights if region is not None
        ][:self.PREFERRED_REGIONS_LIMIT]

        self.repository.upsert_preferences(user_id, preferred_regions)
        logger.info(f"Updated preferred regions for user {user_id}: {preferred_regions}")

    def _score_concurrently(self, user_id: uuid.UUID, candidates: List[Spot]) -> List[RecommendationScore]:
        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(candidates))) as executor:
            futures = [executor.submit(self._score_in_worker, user_id, spot) for spot in candidates]
            # result() re-raises the first storage failure
            return [future.result() for future in futures]

    def _score_in_worker(self, user_id: uuid.UUID, spot: Spot) -> RecommendationScore:
        try:
            return self.calculate_recommendation_score(user_id, spot)
        finally:
            # Django connections are per thread
            connections.close_all()
