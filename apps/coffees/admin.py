from django.contrib import admin
from .models import Coffee, Roastery


class CoffeeInline(admin.TabularInline):
    model = Coffee
    extra = 0
    fields = ['name', 'country_of_origin', 'roast_level', 'is_active']
    show_change_link = True


@admin.register(Roastery)
class RoasteryAdmin(admin.ModelAdmin):
    list_display = ['name', 'location', 'founding_year', 'coffee_count']
    search_fields = ['name', 'location']
    inlines = [CoffeeInline]

    def coffee_count(self, obj):
        return obj.coffees.count()
    coffee_count.short_description = 'Coffees'


@admin.register(Coffee)
class CoffeeAdmin(admin.ModelAdmin):
    list_display = [
        'name',
        'roastery',
        'country_of_origin',
        'roast_level',
        'review_count',
        'is_active',
    ]
    list_filter = ['is_active', 'roast_level', 'region', 'flavor_profile']
    search_fields = ['name', 'roastery__name', 'country_of_origin']
    list_select_related = ['roastery']
    readonly_fields = ['created_at', 'updated_at']

    fieldsets = (
        ('Basic Information', {
            'fields': ('name', 'roastery', 'image_url', 'is_active')
        }),
        ('Origin & Processing', {
            'fields': ('country_of_origin', 'region', 'processing_method', 'production_year'),
        }),
        ('Taste', {
            'fields': ('roast_level', 'flavor_profile', 'flavor_notes'),
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',),
        }),
    )

    def review_count(self, obj):
        return obj.reviews.count()
    review_count.short_description = 'Reviews'
