from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models
import uuid

from coffeetica.ratings import MAX_RATING, MIN_RATING, is_half_star


def validate_half_star(value):
    if not is_half_star(value):
        raise ValidationError(
            '%(value)s is not a half-star rating between 0.5 and 5.',
            params={'value': value},
        )


class Review(models.Model):
    """One user's rating and tasting notes for one coffee."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    coffee = models.ForeignKey('coffees.Coffee', on_delete=models.CASCADE, related_name='reviews')
    user = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='reviews')
    rating = models.DecimalField(
        max_digits=2,
        decimal_places=1,
        validators=[
            MinValueValidator(MIN_RATING),
            MaxValueValidator(MAX_RATING),
            validate_half_star,
        ],
    )
    content = models.TextField()
    brewing_method = models.CharField(max_length=50)
    brewing_description = models.CharField(max_length=200, null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'reviews'
        unique_together = [['user', 'coffee']]
        indexes = [
            models.Index(fields=['coffee', 'created_at']),
            models.Index(fields=['coffee', 'rating']),
            models.Index(fields=['user', 'created_at']),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.user.get_display_name()} - {self.coffee.name} ({self.rating}★)"
