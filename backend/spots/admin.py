from django.contrib import admin
from .models import Spot


@admin.register(Spot)
class SpotAdmin(admin.ModelAdmin):
    """
    Admin interface for Spot.
    """
    list_display = ['place_name', 'owner', 'list_name', 'region', 'created_at']
    list_filter = ['region', 'created_at']
    search_fields = ['place_name', 'list_name', 'comment', 'owner__user__username']
    readonly_fields = ['id', 'created_at']

    fieldsets = (
        ('Owner', {
            'fields': ('id', 'owner')
        }),
        ('List', {
            'fields': ('list_name', 'region')
        }),
        ('Place', {
            'fields': ('place_name', 'url', 'comment')
        }),
        ('Timestamps', {
            'fields': ('created_at',),
            'classes': ('collapse',)
        }),
    )

    def get_queryset(self, request):
        """Optimize queryset with select_related"""
        queryset = super().get_queryset(request)
        return queryset.select_related('owner__user')
