"""
DRF Serializers for Spot model.
"""
from rest_framework import serializers
from user.serializers import UserProfileSerializer
from .models import Spot


class SpotSerializer(serializers.ModelSerializer):
    """Serializer for Spot model with the owning user embedded"""
    owner = UserProfileSerializer(read_only=True)

    class Meta:
        model = Spot
        fields = [
            'id',
            'owner',
            'list_name',
            'region',
            'place_name',
            'url',
            'comment',
            'created_at',
        ]
        read_only_fields = ['id', 'owner', 'created_at']

    def validate_list_name(self, value):
        if not value.strip():
            raise serializers.ValidationError("List name must not be blank")
        return value.strip()

    def validate_region(self, value):
        if not value.strip():
            raise serializers.ValidationError("Region must not be blank")
        return value.strip()


class RegionCountSerializer(serializers.Serializer):
    """Serializer for per-region spot counts"""
    region = serializers.CharField()
    count = serializers.IntegerField()


class SpotUpdateSerializer(serializers.ModelSerializer):
    """Editable fields of a spot; list membership changes through rename-list"""

    class Meta:
        model = Spot
        fields = ['place_name', 'url', 'comment']


class SpotQuerySerializer(serializers.Serializer):
    """Query parameters of the spot list and region-counts endpoints"""
    region = serializers.CharField(required=False)
    list_name = serializers.CharField(required=False)
    owner = serializers.UUIDField(required=False)


class SpotSearchQuerySerializer(serializers.Serializer):
    """Query parameters of GET /api/spots/spots/search/"""
    q = serializers.CharField(max_length=100)


class ListRenameSerializer(serializers.Serializer):
    """Input of PUT /api/spots/spots/rename-list/"""
    region = serializers.CharField(max_length=50)
    old_list_name = serializers.CharField(max_length=100)
    new_list_name = serializers.CharField(max_length=100)
