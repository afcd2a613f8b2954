"""
Authenticated session structure shared by the API views.
"""
import uuid
from dataclasses import dataclass

from rest_framework.exceptions import NotAuthenticated, PermissionDenied

from .models import UserProfile


@dataclass(frozen=True)
class AuthenticatedSession:
    """
    The caller of a request, resolved once at the view boundary.
    user_id is the UserProfile id used by spots and recommendations.
    """
    user_id: uuid.UUID
    username: str

    @classmethod
    def from_request(cls, request) -> "AuthenticatedSession":
        user = getattr(request, 'user', None)
        if user is None or not user.is_authenticated:
            raise NotAuthenticated()

        try:
            profile = user.profile
        except UserProfile.DoesNotExist:
            raise PermissionDenied("Authenticated user has no profile")

        return cls(user_id=profile.id, username=user.get_username())

    def get_profile(self) -> UserProfile:
        return UserProfile.objects.select_related('user').get(id=self.user_id)
