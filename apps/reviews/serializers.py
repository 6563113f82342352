from django.conf import settings
from rest_framework import serializers

from coffeetica.ratings import is_half_star
from .models import Review


class ReviewSerializer(serializers.ModelSerializer):
    """Review as the client sees it (camelCase, flat ids and names)."""

    coffeeId = serializers.UUIDField(source='coffee_id', read_only=True)
    coffeeName = serializers.CharField(source='coffee.name', read_only=True)
    userId = serializers.UUIDField(source='user_id', read_only=True)
    userName = serializers.CharField(source='user.get_display_name', read_only=True)
    rating = serializers.FloatField(read_only=True)
    brewingMethod = serializers.CharField(source='brewing_method', read_only=True)
    brewingDescription = serializers.CharField(source='brewing_description', read_only=True, allow_null=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = Review
        fields = [
            'id',
            'coffeeId',
            'coffeeName',
            'userId',
            'userName',
            'rating',
            'content',
            'brewingMethod',
            'brewingDescription',
            'createdAt',
        ]
        read_only_fields = fields


class ReviewRequestSerializer(serializers.Serializer):
    """Body of POST /reviews/ and PUT /reviews/{id}/."""

    coffeeId = serializers.UUIDField()
    rating = serializers.DecimalField(max_digits=2, decimal_places=1)
    content = serializers.CharField()
    brewingMethod = serializers.CharField(max_length=50)
    brewingDescription = serializers.CharField(
        max_length=200,
        required=False,
        allow_blank=True,
        allow_null=True,
    )

    def validate_rating(self, value):
        if not is_half_star(value):
            raise serializers.ValidationError('Rating must be between 0.5 and 5 in steps of 0.5.')
        return value

    def to_service_kwargs(self):
        data = self.validated_data
        return {
            'coffee_id': data['coffeeId'],
            'rating': data['rating'],
            'content': data['content'],
            'brewing_method': data['brewingMethod'],
            'brewing_description': data.get('brewingDescription') or None,
        }


class ReviewFeedQuerySerializer(serializers.Serializer):
    """Query string of GET /reviews/."""

    coffeeId = serializers.UUIDField(required=False)
    userId = serializers.UUIDField(required=False)
    page = serializers.IntegerField(required=False, min_value=0, default=0)
    size = serializers.IntegerField(required=False, min_value=1)
    sortBy = serializers.ChoiceField(choices=['createdAt', 'rating'], required=False, default='createdAt')
    direction = serializers.ChoiceField(choices=['asc', 'desc'], required=False, default='desc')

    def validate_size(self, value):
        if value > settings.REVIEW_FEED_MAX_SIZE:
            raise serializers.ValidationError(
                f'Ensure this value is less than or equal to {settings.REVIEW_FEED_MAX_SIZE}.'
            )
        return value

    def validate(self, attrs):
        if attrs.get('coffeeId') and attrs.get('userId'):
            raise serializers.ValidationError('Filter by coffeeId or userId, not both.')
        return attrs


class UserReviewQuerySerializer(serializers.Serializer):
    coffeeId = serializers.UUIDField()


class ReviewPageSerializer(serializers.Serializer):
    content = ReviewSerializer(many=True)
    totalElements = serializers.IntegerField(source='total_elements')
    totalPages = serializers.IntegerField(source='total_pages')
    number = serializers.IntegerField()
    size = serializers.IntegerField()
