from django.db.models import Q
from rest_framework import status
from rest_framework.generics import get_object_or_404
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from .models import UserProfile
from .serializers import UserProfileSerializer
from .session import AuthenticatedSession


class MeView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self,request):
        session = AuthenticatedSession.from_request(request)
        serializer = UserProfileSerializer(session.get_profile())
        return Response(serializer.data)

    def patch(self,request):
        """Partial update of bio, location, avatar_url and is_public"""
        session = AuthenticatedSession.from_request(request)
        serializer = UserProfileSerializer(session.get_profile(), data=request.data, partial=True)
        if not serializer.is_valid():
            return Response(
                {"error": serializer.errors},
                status=status.HTTP_400_BAD_REQUEST,
            )
        serializer.save()
        return Response(serializer.data)

class ProfileView(APIView):
    permission_classes = [AllowAny]

    def get(self,request,id):
        profile = get_object_or_404(UserProfile,id=id)
        serializer = UserProfileSerializer(profile)
        return Response(serializer.data)

class ProfileSearchView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self,request):
        query = request.query_params.get('q', '').strip()
        if not query:
            return Response(
                {'error': 'q parameter is required'},
                status=status.HTTP_400_BAD_REQUEST
            )

        profiles = UserProfile.objects.select_related('user').filter(
            Q(user__username__icontains=query) |
            Q(user__first_name__icontains=query) |
            Q(user__last_name__icontains=query),
            is_public=True,
        ).order_by('user__username')[:20]
        serializer = UserProfileSerializer(profiles, many=True)
        return Response(serializer.data)

class FollowView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self,request,id):
        follower = AuthenticatedSession.from_request(request).get_profile()
        followed_profile = get_object_or_404(UserProfile,id=id)

        if follower == followed_profile:
            return Response(
                {"success":False,"message":"An account can not follow itself"},
                status =status.HTTP_400_BAD_REQUEST,

            )
        if follower.is_following(followed_profile):
            return Response(
                {"success":False,"message":"Followed account is already followed"},
                status = status.HTTP_400_BAD_REQUEST,
            )

        follower.follow(followed_profile)
        return Response(
            {"success":True,"message":"Successfully followed"},
            status = status.HTTP_200_OK

        )

class UnfollowView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self,request,id):
        follower = AuthenticatedSession.from_request(request).get_profile()
        followed = get_object_or_404(UserProfile,id=id)

        if follower == followed:
            return Response(
                {"success": False, "message": "An account can not unfollow itself"},
                status=status.HTTP_400_BAD_REQUEST,

            )
        if not follower.is_following(followed):
            return Response(
                {"success": False, "message": "Account is not followed"},
                status=status.HTTP_400_BAD_REQUEST,
            )

        follower.unfollow(followed)
        return Response(
            {"success": True, "message": "Successfully unfollowed"},
            status=status.HTTP_200_OK

        )

class FollowersView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self,request,id):
        profile = get_object_or_404(UserProfile,id=id)
        followers = UserProfile.objects.select_related('user').filter(
            following_relation__following=profile
        ).order_by('user__username')
        return Response(UserProfileSerializer(followers, many=True).data)

class FollowingView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self,request,id):
        profile = get_object_or_404(UserProfile,id=id)
        following = UserProfile.objects.select_related('user').filter(
            follower_relation__follower=profile
        ).order_by('user__username')
        return Response(UserProfileSerializer(following, many=True).data)
