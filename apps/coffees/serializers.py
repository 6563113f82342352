from rest_framework import serializers

from coffeetica.ratings import average
from apps.reviews.serializers import ReviewSerializer
from .models import Coffee, Roastery


class RoasterySerializer(serializers.ModelSerializer):
    foundingYear = serializers.IntegerField(source='founding_year', read_only=True)
    websiteUrl = serializers.CharField(source='website_url', read_only=True)
    imageUrl = serializers.CharField(source='image_url', read_only=True)

    class Meta:
        model = Roastery
        fields = ['id', 'name', 'location', 'foundingYear', 'websiteUrl', 'imageUrl']
        read_only_fields = fields


class CoffeeSerializer(serializers.ModelSerializer):
    """Catalog entry. Expects ``reviews`` to be prefetched."""

    roastery = RoasterySerializer(read_only=True)
    countryOfOrigin = serializers.CharField(source='country_of_origin', read_only=True)
    roastLevel = serializers.CharField(source='get_roast_level_display', read_only=True)
    flavorProfile = serializers.CharField(source='get_flavor_profile_display', read_only=True)
    flavorNotes = serializers.ListField(source='flavor_notes', child=serializers.CharField(), read_only=True)
    processingMethod = serializers.CharField(source='processing_method', read_only=True)
    productionYear = serializers.IntegerField(source='production_year', read_only=True)
    imageUrl = serializers.CharField(source='image_url', read_only=True)
    averageRating = serializers.SerializerMethodField()
    totalReviewsCount = serializers.SerializerMethodField()

    class Meta:
        model = Coffee
        fields = [
            'id',
            'name',
            'roastery',
            'countryOfOrigin',
            'region',
            'roastLevel',
            'flavorProfile',
            'flavorNotes',
            'processingMethod',
            'productionYear',
            'imageUrl',
            'averageRating',
            'totalReviewsCount',
        ]
        read_only_fields = fields

    def get_averageRating(self, obj) -> float:
        return average(review.rating for review in obj.reviews.all())

    def get_totalReviewsCount(self, obj) -> int:
        return len(obj.reviews.all())


class CoffeeDetailSerializer(CoffeeSerializer):
    """Coffee with the aggregate attached by services.get_coffee_details."""

    latestReviews = ReviewSerializer(source='latest_reviews', many=True, read_only=True)

    class Meta(CoffeeSerializer.Meta):
        fields = CoffeeSerializer.Meta.fields + ['latestReviews']
        read_only_fields = fields

    def get_averageRating(self, obj) -> float:
        return obj.average_rating

    def get_totalReviewsCount(self, obj) -> int:
        return obj.total_reviews_count
