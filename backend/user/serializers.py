from rest_framework import serializers
from .models import UserProfile
class UserProfileSerializer(serializers.ModelSerializer):
    username= serializers.CharField(source="user.username",read_only=True)
    first_name = serializers.CharField(source="user.first_name",read_only=True)
    last_name = serializers.CharField(source="user.last_name",read_only=True)

    class Meta:
        model = UserProfile
        fields = [
            "id",
            "username",
            "first_name",
            "last_name",
            "avatar_url",
            "bio",
            "location",
            "is_public",
            "followers_count",
            "following_count",
            "is_verified",
        ]
        read_only_fields = ["followers_count", "following_count", "is_verified"]
