from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'coffees'

router = DefaultRouter()
router.register(r'', views.CoffeeViewSet, basename='coffee')

urlpatterns = [
    # GET    /api/coffees/         - Catalog with averageRating/totalReviewsCount
    # GET    /api/coffees/{id}/    - Details with latestReviews
    path('', include(router.urls)),
]
