"""
URL configuration for the recommendations module.
"""
from django.urls import path
from recommendations.views import (
    RecommendationsView, RecordInteractionView,
    UserPreferencesView, RefreshPreferencesView,
)

app_name = 'recommendations'

urlpatterns = [
    path('', RecommendationsView.as_view(), name='personalized'),
    path('interactions/', RecordInteractionView.as_view(), name='record_interaction'),
    path('preferences/', UserPreferencesView.as_view(), name='preferences'),
    path('preferences/refresh/', RefreshPreferencesView.as_view(), name='refresh_preferences'),
]
