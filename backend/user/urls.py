from django.urls import path
from .views import (
    MeView, ProfileView, ProfileSearchView, FollowView, UnfollowView,
    FollowersView, FollowingView,
)

urlpatterns = [
    path("me/", MeView.as_view(), name="me"),
    path("search/", ProfileSearchView.as_view(), name="profile-search"),
    path("<uuid:id>/", ProfileView.as_view(), name="profile"),
    path("<uuid:id>/follow/", FollowView.as_view(), name="follow"),
    path("<uuid:id>/unfollow/", UnfollowView.as_view(), name="unfollow"),
    path("<uuid:id>/followers/", FollowersView.as_view(), name="followers"),
    path("<uuid:id>/following/", FollowingView.as_view(), name="following"),
]
