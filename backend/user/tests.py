from django.test import TestCase, RequestFactory
from django.urls import reverse
from django.contrib.auth import get_user_model
from django.contrib.auth.models import AnonymousUser
from rest_framework import status
from rest_framework.exceptions import NotAuthenticated, PermissionDenied
from rest_framework.test import APITestCase
from .models import UserProfile, FollowRelation
from .session import AuthenticatedSession

User = get_user_model()

class UserProfileTests(TestCase):
    def setUp(self):
        # Create two users for testing interactions
        self.user1 = User.objects.create_user(username='user1', password='password123')
        self.user2 = User.objects.create_user(username='user2', password='password123')

        self.profile1 = UserProfile.objects.create(user=self.user1)
        self.profile2 = UserProfile.objects.create(user=self.user2)

    def test_follow_success(self):
        """Test that one user can successfully follow another."""
        self.profile1.follow(self.profile2)

        # Refresh from DB to get updated F() expression values
        self.profile1.refresh_from_db()
        self.profile2.refresh_from_db()

        self.assertEqual(self.profile1.following_count, 1)
        self.assertEqual(self.profile2.followers_count, 1)
        self.assertTrue(self.profile1.is_following(self.profile2))
        self.assertFalse(self.profile2.is_following(self.profile1))

    def test_unfollow_success(self):
        """Test that one user can successfully unfollow another."""
        self.profile1.follow(self.profile2)
        self.profile1.unfollow(self.profile2)

        self.profile1.refresh_from_db()
        self.profile2.refresh_from_db()

        self.assertEqual(self.profile1.following_count, 0)
        self.assertEqual(self.profile2.followers_count, 0)
        self.assertFalse(FollowRelation.objects.filter(follower=self.profile1, following=self.profile2).exists())

    def test_cannot_follow_self(self):
        """Test that a user cannot follow themselves."""
        self.profile1.follow(self.profile1)

        self.profile1.refresh_from_db()
        self.assertEqual(self.profile1.following_count, 0)
        self.assertEqual(FollowRelation.objects.count(), 0)

    def test_follow_twice_keeps_one_edge(self):
        """Following the same user twice does not duplicate the edge or the counts."""
        self.profile1.follow(self.profile2)
        self.profile1.follow(self.profile2)

        self.profile1.refresh_from_db()
        self.profile2.refresh_from_db()

        self.assertEqual(self.profile1.following_count, 1)
        self.assertEqual(self.profile2.followers_count, 1)
        self.assertEqual(FollowRelation.objects.count(), 1)

    def test_unfollow_not_following(self):
        """Unfollowing someone you don't follow does nothing."""
        self.profile1.unfollow(self.profile2)

        self.profile1.refresh_from_db()
        self.assertEqual(self.profile1.following_count, 0)


class AuthenticatedSessionTests(TestCase):
    def setUp(self):
        self.factory = RequestFactory()
        self.user = User.objects.create_user(username='session_user', password='password123')

    def test_from_request_with_profile(self):
        profile = UserProfile.objects.create(user=self.user)
        request = self.factory.get('/')
        request.user = self.user

        session = AuthenticatedSession.from_request(request)

        self.assertEqual(session.user_id, profile.id)
        self.assertEqual(session.username, 'session_user')
        self.assertEqual(session.get_profile(), profile)

    def test_anonymous_request_is_rejected(self):
        request = self.factory.get('/')
        request.user = AnonymousUser()

        with self.assertRaises(NotAuthenticated):
            AuthenticatedSession.from_request(request)

    def test_user_without_profile_is_rejected(self):
        request = self.factory.get('/')
        request.user = self.user

        with self.assertRaises(PermissionDenied):
            AuthenticatedSession.from_request(request)


class UserAPITests(APITestCase):
    def setUp(self):
        self.user1 = User.objects.create_user(username='api_user1', password='password123')
        self.profile1 = UserProfile.objects.create(user=self.user1)

        self.user2 = User.objects.create_user(username='api_user2', password='password123', first_name='Hanako')
        self.profile2 = UserProfile.objects.create(user=self.user2)

        self.client.force_authenticate(user=self.user1)

    def test_get_me(self):
        """Test retrieving the current user's profile via API."""
        response = self.client.get(reverse('me'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['username'], self.user1.username)

    def test_get_me_requires_authentication(self):
        self.client.force_authenticate(user=None)
        response = self.client.get(reverse('me'))
        self.assertIn(response.status_code, (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN))

    def test_follow_endpoint(self):
        """Test the follow API endpoint."""
        response = self.client.post(reverse('follow', args=[self.profile2.id]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(self.profile1.is_following(self.profile2))

    def test_follow_self_is_rejected(self):
        response = self.client.post(reverse('follow', args=[self.profile1.id]))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_follow_already_followed_is_rejected(self):
        self.profile1.follow(self.profile2)
        response = self.client.post(reverse('follow', args=[self.profile2.id]))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_unfollow_endpoint(self):
        """Test the unfollow API endpoint."""
        self.profile1.follow(self.profile2)

        response = self.client.post(reverse('unfollow', args=[self.profile2.id]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(self.profile1.is_following(self.profile2))

    def test_unfollow_not_followed_is_rejected(self):
        response = self.client.post(reverse('unfollow', args=[self.profile2.id]))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_followers_and_following(self):
        self.profile1.follow(self.profile2)

        response = self.client.get(reverse('followers', args=[self.profile2.id]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([p['username'] for p in response.data], ['api_user1'])

        response = self.client.get(reverse('following', args=[self.profile1.id]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([p['username'] for p in response.data], ['api_user2'])

    def test_search_profiles(self):
        response = self.client.get(reverse('profile-search'), {'q': 'hana'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([p['username'] for p in response.data], ['api_user2'])

    def test_search_skips_private_profiles(self):
        self.profile2.is_public = False
        self.profile2.save()

        response = self.client.get(reverse('profile-search'), {'q': 'api_user'})
        self.assertEqual([p['username'] for p in response.data], ['api_user1'])

    def test_search_requires_query(self):
        response = self.client.get(reverse('profile-search'))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_update_me(self):
        """Test editing the current user's profile via API."""
        data = {'bio': '旅行が好き', 'location': '京都', 'is_public': False}
        response = self.client.patch(reverse('me'), data, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['bio'], '旅行が好き')
        self.assertFalse(response.data['is_public'])

        self.profile1.refresh_from_db()
        self.assertEqual(self.profile1.location, '京都')
        self.assertFalse(self.profile1.is_public)

    def test_update_me_ignores_read_only_fields(self):
        response = self.client.patch(reverse('me'), {'followers_count': 99, 'is_verified': True}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.profile1.refresh_from_db()
        self.assertEqual(self.profile1.followers_count, 0)
        self.assertFalse(self.profile1.is_verified)

    def test_update_me_rejects_invalid_avatar_url(self):
        response = self.client.patch(reverse('me'), {'avatar_url': 'not a url'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
