"""
Serializers for the recommendations module.
"""
from django.conf import settings
from rest_framework import serializers
from recommendations.models import UserPreferences
from spots.serializers import SpotSerializer


class RecordInteractionSerializer(serializers.Serializer):
    """Input of POST /api/recommendations/interactions/"""
    spot_id = serializers.IntegerField(min_value=1)
    # Free text: unknown types are recorded with the default weight
    interaction_type = serializers.CharField(max_length=20)


class UserPreferencesSerializer(serializers.ModelSerializer):
    class Meta:
        model = UserPreferences
        fields = ['preferred_regions', 'preferred_categories', 'interest_tags', 'updated_at']
        read_only_fields = fields


class RecommendationQuerySerializer(serializers.Serializer):
    """Query parameters of GET /api/recommendations/"""
    limit = serializers.IntegerField(required=False, min_value=1)

    def validate_limit(self, value):
        max_limit = getattr(settings, 'RECOMMENDATION_MAX_LIMIT', 100)
        if value > max_limit:
            raise serializers.ValidationError(f"limit must be at most {max_limit}")
        return value


class RecommendationScoreSerializer(serializers.Serializer):
    """Serializer for RecommendationScore DTO"""
    spot = SpotSerializer()
    score = serializers.FloatField()
    reasons = serializers.ListField(child=serializers.CharField(), allow_empty=True)
