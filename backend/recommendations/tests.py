"""
Tests for the recommendations module.
"""
import uuid
from collections import Counter, defaultdict
from datetime import timedelta
from unittest.mock import patch

from django.contrib.auth.models import User
from django.db import DatabaseError
from django.test import SimpleTestCase, TestCase
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase
from spots.models import Spot
from user.models import UserProfile
from recommendations.dtos import RecommendationScore
from recommendations.models import Interaction, UserPreferences
from recommendations.repository import DjangoRecommendationRepository, RecommendationRepository
from recommendations.scoring_service import RecommendationService


class InMemoryRecommendationRepository(RecommendationRepository):
    """RecommendationRepository over plain Python collections"""

    def __init__(self):
        self.spots = []
        self.follows = set()
        self.interactions = []
        self.preferences = {}
        self.fail_on_spot_id = None

    # Fixtures
    def add_spot(self, owner_id, region='東京都', list_name='お気に入り', place_name='Somewhere',
                 comment='', days_old=100):
        spot = Spot(
            id=len(self.spots) + 1,
            owner_id=owner_id,
            list_name=list_name,
            region=region,
            place_name=place_name,
            comment=comment,
            created_at=timezone.now() - timedelta(days=days_old),
        )
        self.spots.append(spot)
        return spot

    def follow(self, follower_id, followee_id):
        self.follows.add((follower_id, followee_id))

    def interact(self, user_id, spot, weight=1):
        self.interactions.append({'user_id': user_id, 'spot_id': spot.id, 'type': 'view', 'weight': weight})

    # Contract
    def list_spots_excluding_owner(self, user_id):
        return [spot for spot in self.spots if spot.owner_id != user_id]

    def is_following(self, follower_id, followee_id):
        return (follower_id, followee_id) in self.follows

    def count_interactions_by_spot_from_followed_users(self, user_id, spot_id):
        if spot_id == self.fail_on_spot_id:
            raise DatabaseError("connection lost")
        return sum(
            1 for i in self.interactions
            if i['spot_id'] == spot_id and (user_id, i['user_id']) in self.follows
        )

    def get_user_preferences(self, user_id):
        return self.preferences.get(user_id)

    def get_users_own_spots(self, user_id):
        return [spot for spot in self.spots if spot.owner_id == user_id]

    def _spot(self, spot_id):
        return next((spot for spot in self.spots if spot.id == spot_id), None)

    def get_interaction_counts_by_list_name(self, user_id):
        counts = Counter(
            self._spot(i['spot_id']).list_name
            for i in self.interactions if i['user_id'] == user_id
        )
        return sorted(counts.items(), key=lambda item: (-item[1], item[0]))

    def get_region_weights(self, user_id):
        weights = defaultdict(int)
        for i in self.interactions:
            spot = self._spot(i['spot_id'])
            if i['user_id'] == user_id and spot is not None and spot.region is not None:
                weights[spot.region] += i['weight']
        return sorted(weights.items(), key=lambda item: (-item[1], item[0]))

    def insert_interaction(self, user_id, spot_id, interaction_type, weight):
        self.interactions.append({'user_id': user_id, 'spot_id': spot_id, 'type': interaction_type, 'weight': weight})

    def upsert_preferences(self, user_id, preferred_regions):
        existing = self.preferences.get(user_id)
        if existing is not None:
            existing.preferred_regions = preferred_regions
        else:
            self.preferences[user_id] = UserPreferences(
                user_id=user_id,
                preferred_regions=preferred_regions,
                preferred_categories=[],
                interest_tags=[],
            )


class ScoringRulesTestCase(SimpleTestCase):
    """Each factor in isolation, against the in-memory repository"""

    def setUp(self):
        self.repo = InMemoryRecommendationRepository()
        self.service = RecommendationService(repository=self.repo, max_workers=1)
        self.user_id = uuid.uuid4()
        self.other_id = uuid.uuid4()
        self.third_id = uuid.uuid4()

    def test_social_followed_owner(self):
        spot = self.repo.add_spot(self.other_id)
        self.repo.follow(self.user_id, self.other_id)

        result = self.service.calculate_social_score(self.user_id, spot)

        self.assertEqual(result.score, 30)
        self.assertEqual(result.reasons, ["フォローしているユーザーのスポット"])

    def test_social_followed_owner_plus_interactions(self):
        spot = self.repo.add_spot(self.other_id)
        self.repo.follow(self.user_id, self.other_id)
        self.repo.follow(self.user_id, self.third_id)
        self.repo.interact(self.third_id, spot)
        self.repo.interact(self.third_id, spot)

        result = self.service.calculate_social_score(self.user_id, spot)

        self.assertEqual(result.score, 30 + 10)
        self.assertEqual(
            result.reasons,
            ["フォローしているユーザーのスポット", "フォローしているユーザーがよく見ているスポット"],
        )

    def test_social_interaction_bonus_is_capped(self):
        spot = self.repo.add_spot(self.other_id)
        self.repo.follow(self.user_id, self.third_id)
        for _ in range(7):
            self.repo.interact(self.third_id, spot)

        result = self.service.calculate_social_score(self.user_id, spot)

        self.assertEqual(result.score, 20)

    def test_social_ignores_interactions_of_unfollowed_users(self):
        spot = self.repo.add_spot(self.other_id)
        self.repo.interact(self.third_id, spot)

        result = self.service.calculate_social_score(self.user_id, spot)

        self.assertEqual(result.score, 0)
        self.assertEqual(result.reasons, [])

    def test_regional_preferred_region(self):
        spot = self.repo.add_spot(self.other_id, region='京都府')
        self.repo.upsert_preferences(self.user_id, ['東京都', '京都府'])

        result = self.service.calculate_regional_score(self.user_id, spot)

        self.assertEqual(result.score, 25)
        self.assertEqual(result.reasons, ["好みの地域: 京都府"])

    def test_regional_most_frequent_own_region(self):
        self.repo.add_spot(self.user_id, region='大阪府')
        self.repo.add_spot(self.user_id, region='大阪府')
        self.repo.add_spot(self.user_id, region='京都府')
        spot = self.repo.add_spot(self.other_id, region='大阪府')

        result = self.service.calculate_regional_score(self.user_id, spot)

        self.assertEqual(result.score, 15)
        self.assertEqual(result.reasons, ["よく訪れている地域のスポット"])

    def test_regional_both_rules(self):
        self.repo.add_spot(self.user_id, region='大阪府')
        self.repo.upsert_preferences(self.user_id, ['大阪府'])
        spot = self.repo.add_spot(self.other_id, region='大阪府')

        result = self.service.calculate_regional_score(self.user_id, spot)

        self.assertEqual(result.score, 40)

    def test_regional_without_preferences_or_history(self):
        spot = self.repo.add_spot(self.other_id, region='大阪府')

        result = self.service.calculate_regional_score(self.user_id, spot)

        self.assertEqual(result.score, 0)
        self.assertEqual(result.reasons, [])

    def test_most_frequent_region_tie_goes_to_first_seen(self):
        self.repo.add_spot(self.user_id, region='京都府')
        self.repo.add_spot(self.user_id, region='大阪府')
        self.repo.add_spot(self.user_id, region='大阪府')
        self.repo.add_spot(self.user_id, region='京都府')

        region = RecommendationService.most_frequent_region(self.repo.get_users_own_spots(self.user_id))

        self.assertEqual(region, '京都府')

    def test_interaction_top_three_list_names(self):
        lists = {'A': 4, 'B': 3, 'C': 2, 'D': 1}
        for list_name, count in lists.items():
            spot = self.repo.add_spot(self.third_id, list_name=list_name)
            for _ in range(count):
                self.repo.interact(self.user_id, spot)

        in_top = self.repo.add_spot(self.other_id, list_name='C')
        not_in_top = self.repo.add_spot(self.other_id, list_name='D')

        result = self.service.calculate_interaction_score(self.user_id, in_top)
        self.assertEqual(result.score, 20)
        self.assertEqual(result.reasons, ["興味のあるリストタイプ"])

        self.assertEqual(self.service.calculate_interaction_score(self.user_id, not_in_top).score, 0)

    def test_interaction_ranks_by_count_not_weight(self):
        heavy = self.repo.add_spot(self.third_id, list_name='heavy')
        self.repo.interact(self.user_id, heavy, weight=10)
        for list_name in ('x', 'y', 'z'):
            spot = self.repo.add_spot(self.third_id, list_name=list_name)
            self.repo.interact(self.user_id, spot, weight=1)
            self.repo.interact(self.user_id, spot, weight=1)

        candidate = self.repo.add_spot(self.other_id, list_name='heavy')

        self.assertEqual(self.service.calculate_interaction_score(self.user_id, candidate).score, 0)

    def test_content_single_keyword(self):
        self.repo.add_spot(self.user_id, place_name='駅前のカフェ', comment='静か')
        spot = self.repo.add_spot(self.other_id, place_name='Cafe Example', comment='好きなカフェ')

        result = self.service.calculate_content_score(self.user_id, spot)

        self.assertEqual(result.score, 10)
        self.assertEqual(result.reasons, ["似た興味の内容"])

    def test_content_bonus_is_capped(self):
        self.repo.add_spot(self.user_id, place_name='寿司とラーメン', comment='温泉の後に')
        self.repo.add_spot(self.user_id, place_name='公園', comment='')
        spot = self.repo.add_spot(self.other_id, place_name='温泉宿', comment='寿司 ラーメン 公園')

        result = self.service.calculate_content_score(self.user_id, spot)

        self.assertEqual(result.score, 25)

    def test_content_without_own_spots(self):
        spot = self.repo.add_spot(self.other_id, comment='好きなカフェ')

        result = self.service.calculate_content_score(self.user_id, spot)

        self.assertEqual(result.score, 0)
        self.assertEqual(result.reasons, [])

    def test_extract_keywords(self):
        spot = self.repo.add_spot(self.other_id, place_name='海辺のホテル', comment='夜景がきれい')

        self.assertEqual(self.service.extract_keywords([spot]), {'海', 'ホテル', '夜景'})

    def test_recency_tiers(self):
        today = self.repo.add_spot(self.other_id, days_old=0)
        ten_days = self.repo.add_spot(self.other_id, days_old=10)
        forty_days = self.repo.add_spot(self.other_id, days_old=40)

        result = self.service.calculate_recency_score(today)
        self.assertEqual(result.score, 10)
        self.assertEqual(result.reasons, ["新しく追加されたスポット"])

        result = self.service.calculate_recency_score(ten_days)
        self.assertEqual(result.score, 5)
        self.assertEqual(result.reasons, [])

        self.assertEqual(self.service.calculate_recency_score(forty_days).score, 0)

    def test_recency_boundaries(self):
        seven_days = self.repo.add_spot(self.other_id, days_old=7)
        thirty_days = self.repo.add_spot(self.other_id, days_old=30)

        self.assertEqual(self.service.calculate_recency_score(seven_days).score, 10)
        self.assertEqual(self.service.calculate_recency_score(thirty_days).score, 5)

    def test_recency_without_created_at_counts_as_new(self):
        spot = self.repo.add_spot(self.other_id)
        spot.created_at = None

        self.assertEqual(self.service.calculate_recency_score(spot).score, 10)


class RecommendationRankingTestCase(SimpleTestCase):
    """get_personalized_recommendations against the in-memory repository"""

    def setUp(self):
        self.repo = InMemoryRecommendationRepository()
        self.service = RecommendationService(repository=self.repo, max_workers=1)
        self.user_a = uuid.uuid4()
        self.user_b = uuid.uuid4()

    def test_followed_new_cafe_scenario(self):
        """A follows B; B's new café spot scores social + recency only."""
        self.repo.follow(self.user_a, self.user_b)
        self.repo.add_spot(
            self.user_b, region='東京都', place_name='Cafe Example', comment='好きなカフェ', days_old=0
        )

        results = self.service.get_personalized_recommendations(self.user_a)

        self.assertEqual(len(results), 1)
        self.assertIsInstance(results[0], RecommendationScore)
        self.assertEqual(results[0].score, 40.0)
        self.assertEqual(
            results[0].reasons,
            ["フォローしているユーザーのスポット", "新しく追加されたスポット"],
        )

    def test_empty_candidate_set(self):
        self.repo.add_spot(self.user_a)

        self.assertEqual(self.service.get_personalized_recommendations(self.user_a), [])

    def test_own_spots_are_excluded(self):
        own = self.repo.add_spot(self.user_a)
        other = self.repo.add_spot(self.user_b)

        results = self.service.get_personalized_recommendations(self.user_a)

        self.assertEqual([r.spot.id for r in results], [other.id])
        self.assertNotIn(own.id, [r.spot.id for r in results])

    def test_result_size_is_min_of_limit_and_pool(self):
        for _ in range(4):
            self.repo.add_spot(self.user_b)

        self.assertEqual(len(self.service.get_personalized_recommendations(self.user_a, limit=10)), 4)
        results = self.service.get_personalized_recommendations(self.user_a, limit=3)
        self.assertEqual(len(results), 3)
        self.assertTrue(all(r.score >= 0 for r in results))

    def test_sorted_by_score_then_spot_id(self):
        old = self.repo.add_spot(self.user_b, days_old=100)
        fresh = self.repo.add_spot(self.user_b, days_old=1)
        old_twin = self.repo.add_spot(self.user_b, days_old=100)
        recent = self.repo.add_spot(self.user_b, days_old=20)

        results = self.service.get_personalized_recommendations(self.user_a)

        self.assertEqual([r.spot.id for r in results], [fresh.id, recent.id, old.id, old_twin.id])
        self.assertEqual([r.score for r in results], [10.0, 5.0, 0.0, 0.0])

    def test_unknown_user_gets_all_spots(self):
        self.repo.add_spot(self.user_b)
        self.repo.add_spot(self.user_a)

        self.assertEqual(len(self.service.get_personalized_recommendations(uuid.uuid4())), 2)

    def test_all_factors_add_up(self):
        third = uuid.uuid4()
        self.repo.follow(self.user_a, self.user_b)
        self.repo.follow(self.user_a, third)
        self.repo.upsert_preferences(self.user_a, ['北海道'])
        self.repo.add_spot(self.user_a, region='北海道', list_name='海鮮', place_name='寿司屋')
        candidate = self.repo.add_spot(
            self.user_b, region='北海道', list_name='海鮮', place_name='回転寿司', days_old=3
        )
        self.repo.interact(third, candidate)
        self.repo.interact(self.user_a, candidate)

        result = self.service.calculate_recommendation_score(self.user_a, candidate)

        # 30 + 5 social, 25 + 15 regional, 20 interaction, 10 content, 10 recency
        self.assertEqual(result.score, 115.0)
        self.assertEqual(result.reasons, [
            "フォローしているユーザーのスポット",
            "フォローしているユーザーがよく見ているスポット",
            "好みの地域: 北海道",
            "よく訪れている地域のスポット",
            "興味のあるリストタイプ",
            "似た興味の内容",
            "新しく追加されたスポット",
        ])

    def test_worker_pool_matches_sequential(self):
        self.repo.follow(self.user_a, self.user_b)
        for days in (1, 15, 45, 2, 60):
            self.repo.add_spot(self.user_b, days_old=days)
            self.repo.add_spot(uuid.uuid4(), days_old=days)

        sequential = self.service.get_personalized_recommendations(self.user_a, limit=10)
        pooled = RecommendationService(repository=self.repo, max_workers=4).get_personalized_recommendations(
            self.user_a, limit=10
        )

        self.assertEqual(
            [(r.spot.id, r.score, r.reasons) for r in sequential],
            [(r.spot.id, r.score, r.reasons) for r in pooled],
        )

    def test_storage_failure_is_fatal(self):
        self.repo.add_spot(self.user_b)
        failing = self.repo.add_spot(self.user_b)
        self.repo.fail_on_spot_id = failing.id

        with self.assertRaises(DatabaseError):
            self.service.get_personalized_recommendations(self.user_a)

    def test_storage_failure_is_fatal_in_worker_pool(self):
        for _ in range(3):
            self.repo.add_spot(self.user_b)
        self.repo.fail_on_spot_id = 2

        service = RecommendationService(repository=self.repo, max_workers=3)
        with self.assertRaises(DatabaseError):
            service.get_personalized_recommendations(self.user_a)


class InteractionAndPreferencesTestCase(SimpleTestCase):
    """record_interaction and update_user_preferences against the in-memory repository"""

    def setUp(self):
        self.repo = InMemoryRecommendationRepository()
        self.service = RecommendationService(repository=self.repo, max_workers=1)
        self.user_id = uuid.uuid4()
        self.owner_id = uuid.uuid4()

    def test_interaction_weights(self):
        spot = self.repo.add_spot(self.owner_id)
        expected = {'view': 1, 'like': 3, 'save': 5, 'share': 7, 'visit': 10, 'unknown-type': 1}

        for interaction_type in expected:
            self.service.record_interaction(self.user_id, spot.id, interaction_type)

        stored = {i['type']: i['weight'] for i in self.repo.interactions}
        self.assertEqual(stored, expected)

    def test_preferences_single_region(self):
        spot = self.repo.add_spot(self.owner_id, region='沖縄県')
        self.service.record_interaction(self.user_id, spot.id, 'like')
        self.service.record_interaction(self.user_id, spot.id, 'visit')

        self.service.update_user_preferences(self.user_id)

        preferences = self.repo.get_user_preferences(self.user_id)
        self.assertEqual(preferences.preferred_regions, ['沖縄県'])
        self.assertEqual(preferences.preferred_categories, [])
        self.assertEqual(preferences.interest_tags, [])

    def test_preferences_top_five_by_weight(self):
        weights = {'A': 1, 'B': 10, 'C': 3, 'D': 7, 'E': 5, 'F': 2}
        for region, weight in weights.items():
            spot = self.repo.add_spot(self.owner_id, region=region)
            self.repo.interact(self.user_id, spot, weight=weight)

        self.service.update_user_preferences(self.user_id)

        self.assertEqual(self.repo.get_user_preferences(self.user_id).preferred_regions, ['B', 'D', 'E', 'C', 'F'])

    def test_preferences_are_idempotent(self):
        for region in ('東京都', '東京都', '神奈川県'):
            spot = self.repo.add_spot(self.owner_id, region=region)
            self.service.record_interaction(self.user_id, spot.id, 'save')

        self.service.update_user_preferences(self.user_id)
        first = list(self.repo.get_user_preferences(self.user_id).preferred_regions)
        self.service.update_user_preferences(self.user_id)
        second = list(self.repo.get_user_preferences(self.user_id).preferred_regions)

        self.assertEqual(first, ['東京都', '神奈川県'])
        self.assertEqual(first, second)

    def test_preferences_without_interactions(self):
        self.service.update_user_preferences(self.user_id)

        self.assertEqual(self.repo.get_user_preferences(self.user_id).preferred_regions, [])


def make_profile(username):
    user = User.objects.create_user(username=username, password='testpass123')
    return UserProfile.objects.create(user=user)


class DjangoRepositoryTestCase(TestCase):
    """DjangoRecommendationRepository and the service end to end on the ORM"""

    def setUp(self):
        self.user_a = make_profile('user_a')
        self.user_b = make_profile('user_b')
        self.user_c = make_profile('user_c')
        self.repo = DjangoRecommendationRepository()
        self.service = RecommendationService(repository=self.repo, max_workers=1)

    def make_spot(self, owner, days_old=0, **fields):
        defaults = {'list_name': 'お気に入り', 'region': '東京都', 'place_name': 'Somewhere'}
        defaults.update(fields)
        spot = Spot.objects.create(owner=owner, **defaults)
        if days_old:
            Spot.objects.filter(id=spot.id).update(created_at=timezone.now() - timedelta(days=days_old))
            spot.refresh_from_db()
        return spot

    def test_list_spots_excluding_owner(self):
        own = self.make_spot(self.user_a)
        other = self.make_spot(self.user_b)

        spots = self.repo.list_spots_excluding_owner(self.user_a.id)

        self.assertEqual([s.id for s in spots], [other.id])
        self.assertNotIn(own.id, [s.id for s in spots])
        self.assertEqual(spots[0].owner.user.username, 'user_b')

    def test_is_following(self):
        self.user_a.follow(self.user_b)

        self.assertTrue(self.repo.is_following(self.user_a.id, self.user_b.id))
        self.assertFalse(self.repo.is_following(self.user_b.id, self.user_a.id))

    def test_count_interactions_from_followed_users(self):
        spot = self.make_spot(self.user_b)
        self.user_a.follow(self.user_c)
        Interaction.objects.create(user=self.user_c, spot=spot, interaction_type='view', weight=1)
        Interaction.objects.create(user=self.user_c, spot=spot, interaction_type='like', weight=3)
        # user_b is not followed by user_a
        Interaction.objects.create(user=self.user_b, spot=spot, interaction_type='view', weight=1)

        self.assertEqual(self.repo.count_interactions_by_spot_from_followed_users(self.user_a.id, spot.id), 2)

    def test_interaction_counts_by_list_name(self):
        cafe = self.make_spot(self.user_b, list_name='カフェ')
        ramen = self.make_spot(self.user_b, list_name='ラーメン')
        for _ in range(2):
            Interaction.objects.create(user=self.user_a, spot=ramen, interaction_type='view', weight=1)
        Interaction.objects.create(user=self.user_a, spot=cafe, interaction_type='visit', weight=10)

        self.assertEqual(
            self.repo.get_interaction_counts_by_list_name(self.user_a.id),
            [('ラーメン', 2), ('カフェ', 1)],
        )

    def test_region_weights(self):
        tokyo = self.make_spot(self.user_b, region='東京都')
        kyoto = self.make_spot(self.user_b, region='京都府')
        Interaction.objects.create(user=self.user_a, spot=tokyo, interaction_type='view', weight=1)
        Interaction.objects.create(user=self.user_a, spot=tokyo, interaction_type='like', weight=3)
        Interaction.objects.create(user=self.user_a, spot=kyoto, interaction_type='visit', weight=10)

        self.assertEqual(self.repo.get_region_weights(self.user_a.id), [('京都府', 10), ('東京都', 4)])

    def test_record_interaction_persists_weight(self):
        spot = self.make_spot(self.user_b)

        self.service.record_interaction(self.user_a.id, spot.id, 'visit')
        self.service.record_interaction(self.user_a.id, spot.id, 'unknown-type')

        stored = dict(Interaction.objects.filter(user=self.user_a).values_list('interaction_type', 'weight'))
        self.assertEqual(stored, {'visit': 10, 'unknown-type': 1})

    def test_update_user_preferences_upserts(self):
        spot = self.make_spot(self.user_b, region='福岡県')
        self.service.record_interaction(self.user_a.id, spot.id, 'save')

        self.service.update_user_preferences(self.user_a.id)
        preferences = UserPreferences.objects.get(user=self.user_a)
        self.assertEqual(preferences.preferred_regions, ['福岡県'])
        self.assertEqual(preferences.preferred_categories, [])
        self.assertEqual(preferences.interest_tags, [])

        other = self.make_spot(self.user_b, region='長崎県')
        self.service.record_interaction(self.user_a.id, other.id, 'visit')
        self.service.update_user_preferences(self.user_a.id)

        self.assertEqual(UserPreferences.objects.filter(user=self.user_a).count(), 1)
        preferences.refresh_from_db()
        self.assertEqual(preferences.preferred_regions, ['長崎県', '福岡県'])

    def test_followed_new_cafe_scenario(self):
        self.user_a.follow(self.user_b)
        self.make_spot(self.user_b, region='東京都', place_name='Cafe Example', comment='好きなカフェ')

        results = self.service.get_personalized_recommendations(self.user_a.id)

        self.assertEqual(len(results), 1)
        self.assertEqual(results[0].score, 40.0)
        self.assertEqual(
            results[0].reasons,
            ["フォローしているユーザーのスポット", "新しく追加されたスポット"],
        )

    def test_preferences_feed_regional_score(self):
        seen = self.make_spot(self.user_c, region='北海道', days_old=100)
        candidate = self.make_spot(self.user_b, region='北海道', list_name='別のリスト', days_old=100)
        self.service.record_interaction(self.user_a.id, seen.id, 'visit')
        self.service.update_user_preferences(self.user_a.id)

        result = self.service.calculate_recommendation_score(self.user_a.id, candidate)

        self.assertEqual(result.score, 25.0)
        self.assertEqual(result.reasons, ["好みの地域: 北海道"])


class RecommendationAPITestCase(APITestCase):
    """Integration tests for the recommendations endpoints"""

    def setUp(self):
        self.user = User.objects.create_user(username='reco_tester', password='password')
        self.profile = UserProfile.objects.create(user=self.user)
        self.other = make_profile('reco_other')
        self.client.force_authenticate(user=self.user)

    def test_get_recommendations(self):
        self.profile.follow(self.other)
        Spot.objects.create(owner=self.other, list_name='カフェ', region='東京都', place_name='Cafe Example',
                            comment='好きなカフェ')
        Spot.objects.create(owner=self.profile, list_name='mine', region='大阪府', place_name='Own spot')

        response = self.client.get(reverse('recommendations:personalized'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        recommendations = response.data['recommendations']
        self.assertEqual(len(recommendations), 1)
        self.assertEqual(recommendations[0]['spot']['place_name'], 'Cafe Example')
        self.assertEqual(recommendations[0]['spot']['owner']['username'], 'reco_other')
        self.assertEqual(recommendations[0]['score'], 40.0)

    def test_limit(self):
        for i in range(3):
            Spot.objects.create(owner=self.other, list_name='a', region='東京都', place_name=f'Spot {i}')

        response = self.client.get(reverse('recommendations:personalized'), {'limit': 2})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['recommendations']), 2)

    def test_invalid_limit(self):
        for limit in ('0', 'abc', '1000'):
            response = self.client.get(reverse('recommendations:personalized'), {'limit': limit})
            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_storage_failure_returns_500(self):
        with patch.object(
            DjangoRecommendationRepository, 'list_spots_excluding_owner', side_effect=DatabaseError("down")
        ):
            response = self.client.get(reverse('recommendations:personalized'))

        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertIn('error', response.data)

    def test_record_interaction_updates_preferences(self):
        spot = Spot.objects.create(owner=self.other, list_name='a', region='京都府', place_name='Temple')

        response = self.client.post(
            reverse('recommendations:record_interaction'),
            {'spot_id': spot.id, 'interaction_type': 'visit'},
            format='json',
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['weight'], 10)
        self.assertEqual(Interaction.objects.get(user=self.profile).weight, 10)
        self.assertEqual(UserPreferences.objects.get(user=self.profile).preferred_regions, ['京都府'])

    def test_record_unknown_interaction_type(self):
        spot = Spot.objects.create(owner=self.other, list_name='a', region='京都府', place_name='Temple')

        response = self.client.post(
            reverse('recommendations:record_interaction'),
            {'spot_id': spot.id, 'interaction_type': 'bookmark'},
            format='json',
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['weight'], 1)

    def test_record_interaction_unknown_spot(self):
        response = self.client.post(
            reverse('recommendations:record_interaction'),
            {'spot_id': 999999, 'interaction_type': 'like'},
            format='json',
        )

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertFalse(Interaction.objects.exists())

    def test_preferences_default_to_empty(self):
        response = self.client.get(reverse('recommendations:preferences'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['preferred_regions'], [])

    def test_refresh_preferences(self):
        spot = Spot.objects.create(owner=self.other, list_name='a', region='兵庫県', place_name='Port')
        Interaction.objects.create(user=self.profile, spot=spot, interaction_type='like', weight=3)

        response = self.client.post(reverse('recommendations:refresh_preferences'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['preferred_regions'], ['兵庫県'])

    def test_requires_authentication(self):
        self.client.force_authenticate(user=None)
        response = self.client.get(reverse('recommendations:personalized'))
        self.assertIn(response.status_code, (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN))
