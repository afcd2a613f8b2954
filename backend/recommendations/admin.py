"""
Django admin configuration for recommendations models.
"""
from django.contrib import admin
from recommendations.models import Interaction, UserPreferences


@admin.register(Interaction)
class InteractionAdmin(admin.ModelAdmin):
    list_display = ['id', 'user', 'spot', 'interaction_type', 'weight', 'timestamp']
    list_filter = ['interaction_type', 'timestamp']
    search_fields = ['user__user__username', 'spot__place_name']
    readonly_fields = ['id', 'timestamp']


@admin.register(UserPreferences)
class UserPreferencesAdmin(admin.ModelAdmin):
    list_display = ['id', 'user', 'preferred_regions', 'updated_at']
    search_fields = ['user__user__username']
    readonly_fields = ['id', 'created_at', 'updated_at']
