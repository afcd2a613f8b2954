import uuid

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models, transaction
from django.db.models import F


class UserProfile(models.Model):
    """
    Public profile of an account. Its id is the user id used by spots,
    follows, interactions and recommendations.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="profile"
    )
    avatar_url = models.URLField(max_length=500, blank=True, null=True)
    bio = models.TextField(max_length=200, blank=True, default="")
    location = models.CharField(max_length=100, blank=True, default="")
    is_public = models.BooleanField(default=True, help_text="Private profiles are hidden from search and spot lists")

    # Denormalized follow counters, kept in step by follow()/unfollow()
    followers_count = models.IntegerField(validators=[MinValueValidator(0)], default=0)
    following_count = models.IntegerField(validators=[MinValueValidator(0)], default=0)
    is_verified = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    following = models.ManyToManyField(
        'self',
        through='FollowRelation',
        through_fields=('follower', 'following'),
        symmetrical=False,
        related_name='followers'
    )

    def __str__(self):
        return self.user.username

    def follow(self, target_profile: "UserProfile") -> None:
        """Adds the edge self -> target. Self-follow and repeat follows are no-ops."""
        if self == target_profile or self.is_following(target_profile):
            return

        with transaction.atomic():
            FollowRelation.objects.create(follower=self, following=target_profile)
            UserProfile.objects.filter(id=self.id).update(following_count=F('following_count') + 1)
            UserProfile.objects.filter(id=target_profile.id).update(followers_count=F('followers_count') + 1)

    def unfollow(self, target_profile: "UserProfile") -> None:
        """Removes the edge self -> target if it exists."""
        if self == target_profile or not self.is_following(target_profile):
            return

        with transaction.atomic():
            FollowRelation.objects.filter(follower=self, following=target_profile).delete()
            UserProfile.objects.filter(id=self.id).update(following_count=F('following_count') - 1)
            UserProfile.objects.filter(id=target_profile.id).update(followers_count=F('followers_count') - 1)

    def is_following(self, target_profile: "UserProfile") -> bool:
        return FollowRelation.objects.filter(follower=self, following=target_profile).exists()


class FollowRelation(models.Model):
    """Directed follow edge; unique per (follower, following)"""
    follower = models.ForeignKey(UserProfile, on_delete=models.CASCADE, related_name="following_relation")
    following = models.ForeignKey(UserProfile, on_delete=models.CASCADE, related_name="follower_relation")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        unique_together = ('follower', 'following')
        indexes = [
            models.Index(fields=['follower'], name='follows_follower_idx'),
            models.Index(fields=['following'], name='follows_following_idx'),
        ]

    def __str__(self):
        return f"{self.follower_id} -> {self.following_id}"
