"""
Views for the recommendations module.
"""
import logging

from django.conf import settings
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from spots.models import Spot
from user.session import AuthenticatedSession
from recommendations.models import UserPreferences
from recommendations.serializers import (
    RecommendationQuerySerializer, RecommendationScoreSerializer,
    RecordInteractionSerializer, UserPreferencesSerializer,
)
from recommendations.scoring_service import RecommendationService

logger = logging.getLogger(__name__)


class RecommendationsView(APIView):
    """
    API endpoint for personalized recommendations of the current user.

    GET /api/recommendations/?limit=10
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        """Ranked spots with score and reasons"""
        session = AuthenticatedSession.from_request(request)

        query_serializer = RecommendationQuerySerializer(data=request.query_params)
        if not query_serializer.is_valid():
            return Response(
                {'error': query_serializer.errors},
                status=status.HTTP_400_BAD_REQUEST
            )
        limit = query_serializer.validated_data.get(
            'limit', getattr(settings, 'RECOMMENDATION_DEFAULT_LIMIT', 10)
        )

        try:
            service = RecommendationService()
            recommendations = service.get_personalized_recommendations(session.user_id, limit=limit)
        except Exception:
            logger.exception(f"Failed to generate recommendations for user {session.user_id}")
            return Response(
                {'error': 'Failed to generate recommendations'},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR
            )

        serializer = RecommendationScoreSerializer(recommendations, many=True)
        return Response(
            {'recommendations': serializer.data},
            status=status.HTTP_200_OK
        )


class RecordInteractionView(APIView):
    """
    API endpoint for recording an interaction of the current user with a spot.
    The user's preferred regions are refreshed afterwards.

    POST /api/recommendations/interactions/
    Body:
    {
        "spot_id": 12,
        "interaction_type": "like"
    }
    """
    permission_classes = [IsAuthenticated]

    def post(self, request):
        session = AuthenticatedSession.from_request(request)

        serializer = RecordInteractionSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(
                {'error': serializer.errors},
                status=status.HTTP_400_BAD_REQUEST
            )

        spot = get_object_or_404(Spot, id=serializer.validated_data['spot_id'])
        interaction_type = serializer.validated_data['interaction_type']

        try:
            service = RecommendationService()
            service.record_interaction(session.user_id, spot.id, interaction_type)
            service.update_user_preferences(session.user_id)
        except Exception:
            logger.exception(f"Failed to record {interaction_type} by user {session.user_id} on spot {spot.id}")
            return Response(
                {'error': 'Failed to record interaction'},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR
            )

        return Response(
            {
                'spot_id': spot.id,
                'interaction_type': interaction_type,
                'weight': service.get_interaction_weight(interaction_type),
            },
            status=status.HTTP_201_CREATED
        )


class UserPreferencesView(APIView):
    """
    API endpoint for the stored preferences of the current user.

    GET /api/recommendations/preferences/
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        session = AuthenticatedSession.from_request(request)
        preferences = UserPreferences.objects.filter(user_id=session.user_id).first()
        if preferences is None:
            return Response(
                {'preferred_regions': [], 'preferred_categories': [], 'interest_tags': [], 'updated_at': None},
                status=status.HTTP_200_OK
            )
        return Response(UserPreferencesSerializer(preferences).data, status=status.HTTP_200_OK)


class RefreshPreferencesView(APIView):
    """
    API endpoint for recomputing the preferences of the current user
    from their interaction history.

    POST /api/recommendations/preferences/refresh/
    """
    permission_classes = [IsAuthenticated]

    def post(self, request):
        session = AuthenticatedSession.from_request(request)

        try:
            RecommendationService().update_user_preferences(session.user_id)
        except Exception:
            logger.exception(f"Failed to refresh preferences for user {session.user_id}")
            return Response(
                {'error': 'Failed to refresh preferences'},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR
            )

        preferences = UserPreferences.objects.get(user_id=session.user_id)
        return Response(UserPreferencesSerializer(preferences).data, status=status.HTTP_200_OK)
