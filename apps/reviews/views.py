from rest_framework import status, viewsets, serializers as drf_serializers
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated, IsAuthenticatedOrReadOnly
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes
from .models import Review
from .permissions import IsReviewOwnerOrAdmin
from .serializers import (
    ReviewSerializer,
    ReviewRequestSerializer,
    ReviewFeedQuerySerializer,
    ReviewPageSerializer,
    UserReviewQuerySerializer,
)
from .services import (
    create_review,
    update_review,
    delete_review,
    get_user_review_for_coffee,
    get_review_feed,
    ReviewNotFoundError,
    DuplicateReviewError,
    InvalidRatingError,
    InvalidReviewError,
    CoffeeNotFoundError,
    CoffeeMismatchError,
    UnauthorizedReviewActionError,
    InvalidFeedQueryError,
)


class ErrorResponseSerializer(drf_serializers.Serializer):
    error = drf_serializers.CharField()


class ReviewViewSet(viewsets.ModelViewSet):
    """
    Reviews. One review per user per coffee.

    list: One page of a coffee's or a user's reviews
    create: Review a coffee (409 if already reviewed)
    retrieve: Get a specific review
    update: Replace rating and text (author only)
    destroy: Delete a review (author or Admin/SuperAdmin)
    mine: The caller's own review of a coffee at /user/ (204 if none)
    """

    queryset = Review.objects.select_related('user', 'coffee')
    serializer_class = ReviewSerializer
    permission_classes = [IsAuthenticatedOrReadOnly, IsReviewOwnerOrAdmin]
    http_method_names = ['get', 'post', 'put', 'delete', 'head', 'options']

    @extend_schema(
        parameters=[
            OpenApiParameter('coffeeId', OpenApiTypes.UUID, description='Reviews of this coffee'),
            OpenApiParameter('userId', OpenApiTypes.UUID, description='Reviews by this user'),
            OpenApiParameter('page', OpenApiTypes.INT, description='0-based page number', default=0),
            OpenApiParameter('size', OpenApiTypes.INT, description='Page size'),
            OpenApiParameter('sortBy', OpenApiTypes.STR, enum=['createdAt', 'rating'], default='createdAt'),
            OpenApiParameter('direction', OpenApiTypes.STR, enum=['asc', 'desc'], default='desc'),
        ],
        responses={200: ReviewPageSerializer, 400: ErrorResponseSerializer},
    )
    def list(self, request, *args, **kwargs):
        query = ReviewFeedQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        params = query.validated_data

        try:
            page = get_review_feed(
                coffee_id=params.get('coffeeId'),
                user_id=params.get('userId'),
                page=params['page'],
                size=params.get('size'),
                sort_by=params['sortBy'],
                direction=params['direction'],
            )
        except InvalidFeedQueryError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(ReviewPageSerializer(page).data)

    @extend_schema(
        request=ReviewRequestSerializer,
        responses={
            201: ReviewSerializer,
            400: ErrorResponseSerializer,
            404: ErrorResponseSerializer,
            409: ErrorResponseSerializer,
        },
    )
    def create(self, request, *args, **kwargs):
        serializer = ReviewRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            review = create_review(user=request.user, **serializer.to_service_kwargs())
        except CoffeeNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except DuplicateReviewError as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)
        except (InvalidRatingError, InvalidReviewError) as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(ReviewSerializer(review).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        request=ReviewRequestSerializer,
        responses={
            200: ReviewSerializer,
            400: ErrorResponseSerializer,
            403: ErrorResponseSerializer,
            404: ErrorResponseSerializer,
        },
    )
    def update(self, request, *args, **kwargs):
        review = self.get_object()
        serializer = ReviewRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            review = update_review(
                review_id=review.id,
                user=request.user,
                **serializer.to_service_kwargs()
            )
        except ReviewNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except UnauthorizedReviewActionError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        except (CoffeeMismatchError, InvalidRatingError, InvalidReviewError) as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(ReviewSerializer(review).data)

    def destroy(self, request, *args, **kwargs):
        review = self.get_object()

        try:
            delete_review(review_id=review.id, user=request.user)
        except ReviewNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except UnauthorizedReviewActionError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        parameters=[
            OpenApiParameter('coffeeId', OpenApiTypes.UUID, required=True),
        ],
        responses={200: ReviewSerializer, 204: None, 400: ErrorResponseSerializer},
    )
    @action(detail=False, methods=['get'], url_path='user', url_name='user', permission_classes=[IsAuthenticated])
    def mine(self, request):
        """The caller's review of a coffee; 204 when they have not reviewed it."""
        query = UserReviewQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        review = get_user_review_for_coffee(
            user=request.user,
            coffee_id=query.validated_data['coffeeId'],
        )
        if review is None:
            return Response(status=status.HTTP_204_NO_CONTENT)

        return Response(ReviewSerializer(review).data)
