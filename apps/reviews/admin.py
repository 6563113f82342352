from django.contrib import admin
from .models import Review


@admin.register(Review)
class ReviewAdmin(admin.ModelAdmin):
    """Admin interface for Reviews."""

    list_display = [
        'get_coffee_name',
        'user',
        'rating',
        'brewing_method',
        'created_at'
    ]
    list_filter = [
        'rating',
        'created_at',
    ]
    search_fields = [
        'coffee__name',
        'coffee__roastery__name',
        'user__email',
        'content'
    ]
    readonly_fields = ['created_at', 'updated_at']
    date_hierarchy = 'created_at'
    ordering = ['-created_at']
    list_select_related = ['coffee', 'user']
    raw_id_fields = ['coffee', 'user']

    fieldsets = (
        ('Basic Information', {
            'fields': ('coffee', 'user', 'rating')
        }),
        ('Review', {
            'fields': ('content', 'brewing_method', 'brewing_description')
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    def get_coffee_name(self, obj):
        return obj.coffee.name
    get_coffee_name.short_description = 'Coffee'
    get_coffee_name.admin_order_field = 'coffee__name'
