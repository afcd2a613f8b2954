"""
API views for spots app endpoints.
"""
from django.db.models import Q
from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.exceptions import PermissionDenied
from rest_framework.generics import get_object_or_404
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from user.models import UserProfile
from user.session import AuthenticatedSession
from .models import Spot
from .serializers import (
    SpotSerializer, SpotUpdateSerializer, SpotQuerySerializer,
    SpotSearchQuerySerializer, ListRenameSerializer, RegionCountSerializer,
)


class SpotViewSet(viewsets.ModelViewSet):
    """
    ViewSet for Spot create/list/retrieve/update/delete and list views.

    Spots of private profiles are only listed to their owner.

    Supported Query Parameters for LIST endpoint:
    - region: Filter by region (exact match)
    - list_name: Filter by list name (exact match)
    - owner: Filter by owner profile id

    Example: GET /api/spots/spots/?region=東京都&list_name=カフェ巡り
    """
    serializer_class = SpotSerializer
    permission_classes = [IsAuthenticated]
    http_method_names = ['get', 'post', 'put', 'patch', 'delete', 'head', 'options']

    def filtered_queryset(self):
        """All spots newest first, with the owner loaded and query parameters applied"""
        query_serializer = SpotQuerySerializer(data=self.request.query_params)
        query_serializer.is_valid(raise_exception=True)
        params = query_serializer.validated_data

        queryset = Spot.objects.select_related('owner__user').order_by('-created_at', '-id')

        if 'region' in params:
            queryset = queryset.filter(region=params['region'])

        if 'list_name' in params:
            queryset = queryset.filter(list_name=params['list_name'])

        if 'owner' in params:
            queryset = queryset.filter(owner_id=params['owner'])

        return queryset

    def get_queryset(self):
        session = AuthenticatedSession.from_request(self.request)
        return self.filtered_queryset().filter(
            Q(owner__is_public=True) | Q(owner_id=session.user_id)
        )

    def ensure_owner(self, instance, verb):
        session = AuthenticatedSession.from_request(self.request)
        if instance.owner_id != session.user_id:
            raise PermissionDenied(f"You can only {verb} your own spots")

    def perform_create(self, serializer):
        """Automatically set the owner to the current user"""
        session = AuthenticatedSession.from_request(self.request)
        serializer.save(owner_id=session.user_id)

    def update(self, request, *args, **kwargs):
        """Owner only; place name, url and comment are editable"""
        partial = kwargs.pop('partial', False)
        instance = self.get_object()
        self.ensure_owner(instance, "edit")

        serializer = SpotUpdateSerializer(instance, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(SpotSerializer(instance).data)

    def perform_destroy(self, instance):
        """Only allow owner to delete"""
        self.ensure_owner(instance, "delete")
        instance.delete()

    @action(detail=False, methods=['get'])
    def mine(self, request):
        """Spots saved by the current user"""
        session = AuthenticatedSession.from_request(request)
        queryset = self.filtered_queryset().filter(owner_id=session.user_id)
        serializer = self.get_serializer(queryset, many=True)
        return Response(serializer.data)

    @action(detail=False, methods=['get'])
    def following(self, request):
        """Spots saved by users the current user follows"""
        session = AuthenticatedSession.from_request(request)
        queryset = self.filtered_queryset().filter(
            owner__follower_relation__follower_id=session.user_id
        )
        serializer = self.get_serializer(queryset, many=True)
        return Response(serializer.data)

    @action(detail=False, methods=['get'])
    def search(self, request):
        """
        Spots of public profiles whose list name contains q (case-insensitive).

        Query parameters:
        - q: search text (required)
        """
        query_serializer = SpotSearchQuerySerializer(data=request.query_params)
        if not query_serializer.is_valid():
            return Response(
                {'error': query_serializer.errors},
                status=status.HTTP_400_BAD_REQUEST
            )

        queryset = Spot.objects.select_related('owner__user').filter(
            list_name__icontains=query_serializer.validated_data['q'],
            owner__is_public=True,
        ).order_by('-created_at', '-id')
        serializer = self.get_serializer(queryset, many=True)
        return Response(serializer.data)

    @action(detail=False, methods=['put'], url_path='rename-list')
    def rename_list(self, request):
        """
        Renames one of the current user's lists within a region.

        Body:
        {
            "region": "東京都",
            "old_list_name": "カフェ",
            "new_list_name": "カフェ巡り"
        }
        """
        session = AuthenticatedSession.from_request(request)
        serializer = ListRenameSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(
                {'error': serializer.errors},
                status=status.HTTP_400_BAD_REQUEST
            )
        data = serializer.validated_data

        updated = Spot.objects.filter(
            owner_id=session.user_id,
            region=data['region'],
            list_name=data['old_list_name'],
        ).update(list_name=data['new_list_name'])

        if not updated:
            return Response(
                {'error': 'List not found'},
                status=status.HTTP_404_NOT_FOUND
            )

        return Response(
            {'region': data['region'], 'list_name': data['new_list_name'], 'updated': updated},
            status=status.HTTP_200_OK
        )

    @action(detail=False, methods=['get'], url_path='region-counts')
    def region_counts(self, request):
        """
        Number of spots per region, for the map view.

        Query parameters:
        - owner: profile id (optional)
        """
        query_serializer = SpotQuerySerializer(data=request.query_params)
        query_serializer.is_valid(raise_exception=True)

        owner = None
        owner_id = query_serializer.validated_data.get('owner')
        if owner_id is not None:
            owner = get_object_or_404(UserProfile, id=owner_id)

        counts = Spot.region_counts(owner=owner)
        rows = [
            {'region': region, 'count': count}
            for region, count in sorted(counts.items(), key=lambda item: (-item[1], item[0]))
        ]
        serializer = RegionCountSerializer(rows, many=True)
        return Response({'regions': serializer.data}, status=status.HTTP_200_OK)
