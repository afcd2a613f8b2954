import uuid

from django.test import TestCase
from django.urls import reverse
from django.contrib.auth import get_user_model
from rest_framework import status
from rest_framework.test import APITestCase
from user.models import UserProfile
from .models import Spot

User = get_user_model()


def make_profile(username):
    user = User.objects.create_user(username=username, password='password123')
    return UserProfile.objects.create(user=user)


class SpotModelTests(TestCase):
    def setUp(self):
        self.owner = make_profile('owner')
        self.other = make_profile('other')
        Spot.objects.create(owner=self.owner, list_name='カフェ巡り', region='東京都', place_name='Cafe A')
        Spot.objects.create(owner=self.owner, list_name='カフェ巡り', region='東京都', place_name='Cafe B')
        Spot.objects.create(owner=self.owner, list_name='温泉', region='大分県', place_name='Onsen')
        Spot.objects.create(owner=self.other, list_name='寿司', region='北海道', place_name='Sushi')

    def test_create_spot(self):
        """A spot gets defaults for the optional fields."""
        spot = Spot.objects.get(place_name='Cafe A')
        self.assertEqual(spot.url, '')
        self.assertEqual(spot.comment, '')
        self.assertIsNotNone(spot.created_at)

    def test_region_counts(self):
        self.assertEqual(
            Spot.region_counts(),
            {'東京都': 2, '大分県': 1, '北海道': 1},
        )

    def test_region_counts_for_owner(self):
        self.assertEqual(Spot.region_counts(owner=self.other), {'北海道': 1})


class SpotAPITests(APITestCase):
    def setUp(self):
        self.user = User.objects.create_user(username='spot_user', password='password123')
        self.profile = UserProfile.objects.create(user=self.user)
        self.other = make_profile('other_user')
        self.client.force_authenticate(user=self.user)

    def test_create_spot_sets_owner(self):
        data = {
            'list_name': 'カフェ巡り',
            'region': '東京都',
            'place_name': 'Cafe Example',
            'url': 'https://example.com/cafe',
            'comment': '好きなカフェ',
        }
        response = self.client.post(reverse('spots:spot-list'), data, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['owner']['username'], 'spot_user')
        spot = Spot.objects.get(id=response.data['id'])
        self.assertEqual(spot.owner, self.profile)

    def test_create_spot_requires_fields(self):
        response = self.client.post(reverse('spots:spot-list'), {'place_name': 'No list'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('list_name', response.data)
        self.assertIn('region', response.data)

    def test_list_filters_by_region(self):
        Spot.objects.create(owner=self.other, list_name='a', region='東京都', place_name='Tokyo spot')
        Spot.objects.create(owner=self.other, list_name='a', region='京都府', place_name='Kyoto spot')

        response = self.client.get(reverse('spots:spot-list'), {'region': '京都府'})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([s['place_name'] for s in response.data], ['Kyoto spot'])

    def test_delete_own_spot(self):
        spot = Spot.objects.create(owner=self.profile, list_name='a', region='東京都', place_name='Mine')
        response = self.client.delete(reverse('spots:spot-detail', args=[spot.id]))

        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Spot.objects.filter(id=spot.id).exists())

    def test_cannot_delete_others_spot(self):
        spot = Spot.objects.create(owner=self.other, list_name='a', region='東京都', place_name='Theirs')
        response = self.client.delete(reverse('spots:spot-detail', args=[spot.id]))

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertTrue(Spot.objects.filter(id=spot.id).exists())

    def test_mine_and_following(self):
        Spot.objects.create(owner=self.profile, list_name='a', region='東京都', place_name='Mine')
        Spot.objects.create(owner=self.other, list_name='a', region='東京都', place_name='Followed')
        stranger = make_profile('stranger')
        Spot.objects.create(owner=stranger, list_name='a', region='東京都', place_name='Stranger')
        self.profile.follow(self.other)

        response = self.client.get(reverse('spots:spot-mine'))
        self.assertEqual([s['place_name'] for s in response.data], ['Mine'])

        response = self.client.get(reverse('spots:spot-following'))
        self.assertEqual([s['place_name'] for s in response.data], ['Followed'])

    def test_region_counts_endpoint(self):
        Spot.objects.create(owner=self.profile, list_name='a', region='東京都', place_name='One')
        Spot.objects.create(owner=self.profile, list_name='a', region='東京都', place_name='Two')
        Spot.objects.create(owner=self.other, list_name='a', region='沖縄県', place_name='Three')

        response = self.client.get(reverse('spots:spot-region-counts'), {'owner': str(self.profile.id)})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['regions'], [{'region': '東京都', 'count': 2}])

    def test_list_rejects_malformed_owner(self):
        response = self.client.get(reverse('spots:spot-list'), {'owner': 'not-a-uuid'})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('owner', response.data)

    def test_region_counts_rejects_malformed_owner(self):
        response = self.client.get(reverse('spots:spot-region-counts'), {'owner': 'not-a-uuid'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_region_counts_unknown_owner(self):
        response = self.client.get(reverse('spots:spot-region-counts'), {'owner': str(uuid.uuid4())})
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_list_hides_private_profiles(self):
        self.other.is_public = False
        self.other.save()
        self.profile.is_public = False
        self.profile.save()
        Spot.objects.create(owner=self.other, list_name='a', region='東京都', place_name='Private')
        Spot.objects.create(owner=self.profile, list_name='a', region='東京都', place_name='Mine')
        public = make_profile('public_user')
        Spot.objects.create(owner=public, list_name='a', region='東京都', place_name='Public')

        response = self.client.get(reverse('spots:spot-list'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(sorted(s['place_name'] for s in response.data), ['Mine', 'Public'])

    def test_private_spot_is_not_retrievable_by_others(self):
        self.other.is_public = False
        self.other.save()
        spot = Spot.objects.create(owner=self.other, list_name='a', region='東京都', place_name='Private')

        response = self.client.get(reverse('spots:spot-detail', args=[spot.id]))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_following_includes_private_followed_profiles(self):
        self.other.is_public = False
        self.other.save()
        Spot.objects.create(owner=self.other, list_name='a', region='東京都', place_name='Followed')
        self.profile.follow(self.other)

        response = self.client.get(reverse('spots:spot-following'))
        self.assertEqual([s['place_name'] for s in response.data], ['Followed'])

    def test_update_own_spot(self):
        spot = Spot.objects.create(owner=self.profile, list_name='a', region='東京都', place_name='Old name')
        data = {'place_name': 'New name', 'url': 'https://example.com/new', 'comment': '更新しました'}

        response = self.client.put(reverse('spots:spot-detail', args=[spot.id]), data, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['place_name'], 'New name')
        self.assertEqual(response.data['owner']['username'], 'spot_user')
        spot.refresh_from_db()
        self.assertEqual(spot.comment, '更新しました')
        self.assertEqual(spot.list_name, 'a')

    def test_partial_update_keeps_list_membership(self):
        spot = Spot.objects.create(owner=self.profile, list_name='a', region='東京都', place_name='Cafe')

        response = self.client.patch(
            reverse('spots:spot-detail', args=[spot.id]),
            {'comment': 'また行きたい', 'list_name': 'b', 'region': '大阪府'},
            format='json',
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        spot.refresh_from_db()
        self.assertEqual(spot.comment, 'また行きたい')
        self.assertEqual((spot.list_name, spot.region), ('a', '東京都'))

    def test_cannot_update_others_spot(self):
        spot = Spot.objects.create(owner=self.other, list_name='a', region='東京都', place_name='Theirs')

        response = self.client.patch(
            reverse('spots:spot-detail', args=[spot.id]), {'comment': 'hijacked'}, format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        spot.refresh_from_db()
        self.assertEqual(spot.comment, '')

    def test_rename_list(self):
        Spot.objects.create(owner=self.profile, list_name='カフェ', region='東京都', place_name='One')
        Spot.objects.create(owner=self.profile, list_name='カフェ', region='東京都', place_name='Two')
        Spot.objects.create(owner=self.profile, list_name='カフェ', region='京都府', place_name='Kyoto')
        Spot.objects.create(owner=self.other, list_name='カフェ', region='東京都', place_name='Theirs')

        data = {'region': '東京都', 'old_list_name': 'カフェ', 'new_list_name': 'カフェ巡り'}
        response = self.client.put(reverse('spots:spot-rename-list'), data, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['updated'], 2)
        self.assertEqual(
            Spot.objects.filter(owner=self.profile, list_name='カフェ巡り').count(), 2
        )
        self.assertEqual(Spot.objects.get(place_name='Kyoto').list_name, 'カフェ')
        self.assertEqual(Spot.objects.get(place_name='Theirs').list_name, 'カフェ')

    def test_rename_unknown_list(self):
        data = {'region': '東京都', 'old_list_name': 'missing', 'new_list_name': 'new'}
        response = self.client.put(reverse('spots:spot-rename-list'), data, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_rename_list_requires_new_name(self):
        data = {'region': '東京都', 'old_list_name': 'a', 'new_list_name': '  '}
        response = self.client.put(reverse('spots:spot-rename-list'), data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_search_by_list_name(self):
        Spot.objects.create(owner=self.other, list_name='Tokyo Cafe', region='東京都', place_name='Match')
        Spot.objects.create(owner=self.other, list_name='ラーメン', region='東京都', place_name='Other')
        hidden = make_profile('hidden')
        hidden.is_public = False
        hidden.save()
        Spot.objects.create(owner=hidden, list_name='cafe hopping', region='東京都', place_name='Hidden')

        response = self.client.get(reverse('spots:spot-search'), {'q': 'cafe'})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([s['place_name'] for s in response.data], ['Match'])

    def test_search_requires_query(self):
        response = self.client.get(reverse('spots:spot-search'))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
