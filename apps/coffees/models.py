from django.db import models
import uuid


class Region(models.TextChoices):
    AFRICA = 'africa', 'Africa'
    ASIA = 'asia', 'Asia'
    SOUTH_AMERICA = 'south_america', 'South America'
    CENTRAL_AMERICA = 'central_america', 'Central America'


class RoastLevel(models.TextChoices):
    LIGHT = 'light', 'Light'
    MEDIUM = 'medium', 'Medium'
    DARK = 'dark', 'Dark'


class FlavorProfile(models.TextChoices):
    BERRY = 'berry', 'Berry'
    CHOCOLATE = 'chocolate', 'Chocolate'
    CITRUS = 'citrus', 'Citrus'
    DRIED_FRUIT = 'dried_fruit', 'Dried Fruit'
    EARTHY = 'earthy', 'Earthy'
    FLORAL = 'floral', 'Floral'
    HERBAL = 'herbal', 'Herbal'
    NUTTY = 'nutty', 'Nutty'
    SMOKY = 'smoky', 'Smoky'
    SPICE = 'spice', 'Spice'
    TROPICAL = 'tropical', 'Tropical'
    WINE = 'wine', 'Wine'


class Roastery(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200, unique=True)
    location = models.CharField(max_length=200)
    founding_year = models.PositiveIntegerField(null=True, blank=True)
    website_url = models.URLField(blank=True, max_length=500)
    image_url = models.CharField(max_length=500, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'roasteries'
        verbose_name_plural = 'roasteries'
        ordering = ['name']

    def __str__(self):
        return self.name


class Coffee(models.Model):
    """Catalog coffee. Ratings are not stored here; see services.rating_aggregation."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200, db_index=True)
    roastery = models.ForeignKey(Roastery, on_delete=models.CASCADE, related_name='coffees')
    country_of_origin = models.CharField(max_length=100)
    region = models.CharField(max_length=50, choices=Region.choices, blank=True)
    roast_level = models.CharField(max_length=50, choices=RoastLevel.choices, default=RoastLevel.MEDIUM)
    flavor_profile = models.CharField(max_length=50, choices=FlavorProfile.choices, blank=True)
    flavor_notes = models.JSONField(default=list, blank=True)
    processing_method = models.CharField(max_length=100)
    production_year = models.PositiveIntegerField(null=True, blank=True)
    image_url = models.CharField(max_length=500, blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'coffees'
        unique_together = [['roastery', 'name']]
        indexes = [
            models.Index(fields=['name']),
            models.Index(fields=['created_at']),
        ]
        ordering = ['name']

    def __str__(self):
        return f"{self.roastery.name} - {self.name}"
