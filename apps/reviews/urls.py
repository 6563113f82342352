from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'reviews'

router = DefaultRouter()
router.register(r'', views.ReviewViewSet, basename='review')

urlpatterns = [
    # GET    /api/reviews/?coffeeId=|userId=&page=&size=&sortBy=&direction=
    # POST   /api/reviews/              - Create review (409 if one exists)
    # GET    /api/reviews/user/?coffeeId=  - Caller's own review (204 if none)
    # GET    /api/reviews/{id}/         - Get review
    # PUT    /api/reviews/{id}/         - Update review (author)
    # DELETE /api/reviews/{id}/         - Delete review (author or Admin)
    path('', include(router.urls)),
]
