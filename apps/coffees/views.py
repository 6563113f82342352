from rest_framework import viewsets, status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema
from .models import Coffee
from .serializers import CoffeeSerializer, CoffeeDetailSerializer
from .services import get_coffee_details, CoffeeNotFoundError


class CoffeePagination(PageNumberPagination):
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class CoffeeViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Read-only coffee catalog.

    list: Active coffees with their average rating and review count
    retrieve: One coffee with average rating, review count and latest reviews
    """

    queryset = (
        Coffee.objects
        .filter(is_active=True)
        .select_related('roastery')
        .prefetch_related('reviews')
    )
    serializer_class = CoffeeSerializer
    permission_classes = [AllowAny]
    pagination_class = CoffeePagination

    def get_queryset(self):
        queryset = super().get_queryset()

        search = self.request.query_params.get('search')
        if search:
            queryset = queryset.filter(name__icontains=search)

        roastery = self.request.query_params.get('roastery')
        if roastery:
            queryset = queryset.filter(roastery__name__iexact=roastery)

        return queryset

    @extend_schema(responses={200: CoffeeDetailSerializer})
    def retrieve(self, request, *args, **kwargs):
        try:
            coffee = get_coffee_details(coffee_id=kwargs.get('pk'))
        except CoffeeNotFoundError as e:
            return Response(
                {'error': str(e)},
                status=status.HTTP_404_NOT_FOUND
            )

        return Response(CoffeeDetailSerializer(coffee).data)
