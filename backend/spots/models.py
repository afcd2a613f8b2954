from typing import Dict, Optional

from django.db import models
from django.db.models import Count
from user.models import UserProfile


class Spot(models.Model):
    """
    A place a user saved into one of their lists.
    A list is the set of an owner's spots sharing the same list_name;
    region is the prefecture the list is tagged with (e.g. 東京都).
    """

    owner = models.ForeignKey(
        UserProfile,
        on_delete=models.CASCADE,
        related_name='spots',
        help_text="User who saved the spot"
    )

    # List membership
    list_name = models.CharField(max_length=100, help_text="Name of the list this spot belongs to")
    region = models.CharField(max_length=50, help_text="Prefecture the list is tagged with")

    # Place information
    place_name = models.CharField(max_length=255)
    url = models.URLField(max_length=1000, blank=True, default="")
    comment = models.TextField(blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'spots_spot'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['owner'], name='spots_owner_idx'),
            models.Index(fields=['region'], name='spots_region_idx'),
        ]

    def __str__(self):
        return f"{self.place_name} ({self.list_name} / {self.region})"

    @classmethod
    def region_counts(cls, owner: Optional[UserProfile] = None) -> Dict[str, int]:
        """Number of spots per region, optionally restricted to one owner."""
        queryset = cls.objects.all()
        if owner is not None:
            queryset = queryset.filter(owner=owner)

        rows = queryset.order_by().values('region').annotate(count=Count('id'))
        return {row['region']: row['count'] for row in rows}
