from django.db import models
from spots.models import Spot
from user.models import UserProfile


class InteractionType(models.TextChoices):
    """Enumeration for user interaction types"""
    VIEW = 'view', 'View'
    LIKE = 'like', 'Like'
    SAVE = 'save', 'Save'
    SHARE = 'share', 'Share'
    VISIT = 'visit', 'Visit'


class Interaction(models.Model):
    """
    Append-only log of user interactions with spots.
    Used by RecommendationService for the social and interaction-pattern
    factors and to derive UserPreferences.preferred_regions.
    """
    user = models.ForeignKey(UserProfile, on_delete=models.CASCADE, related_name='interactions')
    spot = models.ForeignKey(Spot, on_delete=models.CASCADE, related_name='interactions')
    interaction_type = models.CharField(
        max_length=20,
        help_text="view, like, save, share or visit; other values are stored with weight 1"
    )
    weight = models.IntegerField(default=1)
    timestamp = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'recommendations_interaction'
        indexes = [
            models.Index(fields=['user', 'timestamp'], name='interaction_user_ts_idx'),
            models.Index(fields=['spot', 'timestamp'], name='interaction_spot_ts_idx'),
        ]

    def __str__(self):
        return f"{self.user_id} - {self.interaction_type} - {self.spot_id}"


class UserPreferences(models.Model):
    """
    Stored preferences of a user, one row per user.
    preferred_regions is recomputed from the interaction log by
    RecommendationService.update_user_preferences().
    """
    user = models.OneToOneField(UserProfile, on_delete=models.CASCADE, related_name='preferences')
    preferred_regions = models.JSONField(
        default=list,
        blank=True,
        help_text="Region names ordered by summed interaction weight"
    )
    preferred_categories = models.JSONField(default=list, blank=True)
    interest_tags = models.JSONField(default=list, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'recommendations_user_preferences'
        verbose_name_plural = 'user preferences'

    def __str__(self):
        return f"Preferences of {self.user_id}"
