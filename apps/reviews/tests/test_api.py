import pytest
from uuid import uuid4
from django.urls import reverse
from rest_framework import status
from apps.reviews.models import Review


def review_payload(coffee, **overrides):
    data = {
        'coffeeId': str(coffee.id),
        'rating': 4.5,
        'content': 'Bright and citrusy',
        'brewingMethod': 'Pour Over',
        'brewingDescription': '3min bloom',
    }
    data.update(overrides)
    return data


# =============================================================================
# Own Review Tests
# =============================================================================

@pytest.mark.django_db
class TestUserReview:
    """Tests for GET /api/reviews/user/?coffeeId="""

    def test_returns_own_review(self, review_auth_client, review, coffee):
        url = reverse('reviews:review-user')
        response = review_auth_client.get(url, {'coffeeId': str(coffee.id)})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['id'] == str(review.id)
        assert response.data['rating'] == 4.5
        assert response.data['userName'] == 'Coffee Reviewer'
        assert response.data['coffeeName'] == coffee.name

    def test_no_content_when_not_reviewed(self, review_other_client, review, coffee):
        url = reverse('reviews:review-user')
        response = review_other_client.get(url, {'coffeeId': str(coffee.id)})

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not response.content

    def test_requires_authentication(self, api_client, coffee):
        url = reverse('reviews:review-user')
        response = api_client.get(url, {'coffeeId': str(coffee.id)})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_coffee_id_required(self, review_auth_client):
        url = reverse('reviews:review-user')
        response = review_auth_client.get(url)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'coffeeId' in response.data


# =============================================================================
# Create Tests
# =============================================================================

@pytest.mark.django_db
class TestReviewCreate:
    """Tests for POST /api/reviews/"""

    def test_create_review(self, review_auth_client, review_user, coffee):
        url = reverse('reviews:review-list')
        response = review_auth_client.post(url, review_payload(coffee), format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['coffeeId'] == str(coffee.id)
        assert response.data['userId'] == str(review_user.id)
        assert response.data['rating'] == 4.5
        assert response.data['brewingMethod'] == 'Pour Over'
        assert response.data['brewingDescription'] == '3min bloom'
        assert response.data['createdAt']
        assert Review.objects.filter(user=review_user, coffee=coffee).count() == 1

    def test_create_without_description(self, review_auth_client, coffee):
        url = reverse('reviews:review-list')
        payload = review_payload(coffee)
        del payload['brewingDescription']

        response = review_auth_client.post(url, payload, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['brewingDescription'] is None

    def test_create_duplicate_conflict(self, review_auth_client, review, coffee):
        url = reverse('reviews:review-list')
        response = review_auth_client.post(url, review_payload(coffee, rating=2), format='json')

        assert response.status_code == status.HTTP_409_CONFLICT
        assert 'error' in response.data
        assert Review.objects.filter(coffee=coffee).count() == 1

    def test_create_unauthenticated(self, api_client, coffee):
        url = reverse('reviews:review-list')
        response = api_client.post(url, review_payload(coffee), format='json')

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_create_unknown_coffee(self, review_auth_client, coffee):
        url = reverse('reviews:review-list')
        payload = review_payload(coffee, coffeeId=str(uuid4()))

        response = review_auth_client.post(url, payload, format='json')

        assert response.status_code == status.HTTP_404_NOT_FOUND

    @pytest.mark.parametrize('rating', [0, 0.3, 5.5, 6, -1])
    def test_create_invalid_rating(self, review_auth_client, coffee, rating):
        url = reverse('reviews:review-list')
        response = review_auth_client.post(url, review_payload(coffee, rating=rating), format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'rating' in response.data

    def test_create_missing_fields(self, review_auth_client, coffee):
        url = reverse('reviews:review-list')
        response = review_auth_client.post(url, {'coffeeId': str(coffee.id)}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'rating' in response.data
        assert 'content' in response.data
        assert 'brewingMethod' in response.data

    def test_create_brewing_method_too_long(self, review_auth_client, coffee):
        url = reverse('reviews:review-list')
        payload = review_payload(coffee, brewingMethod='x' * 51)

        response = review_auth_client.post(url, payload, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'brewingMethod' in response.data


# =============================================================================
# Update Tests
# =============================================================================

@pytest.mark.django_db
class TestReviewUpdate:
    """Tests for PUT /api/reviews/{id}/"""

    def test_update_own_review(self, review_auth_client, review, coffee):
        url = reverse('reviews:review-detail', kwargs={'pk': review.id})
        payload = review_payload(coffee, rating=3, content='Faded', brewingDescription=None)

        response = review_auth_client.put(url, payload, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['id'] == str(review.id)
        assert response.data['rating'] == 3.0
        assert response.data['content'] == 'Faded'
        assert response.data['brewingDescription'] is None

    def test_update_other_users_review(self, review_other_client, review, coffee):
        url = reverse('reviews:review-detail', kwargs={'pk': review.id})
        response = review_other_client.put(url, review_payload(coffee, content='Hijack'), format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN
        review.refresh_from_db()
        assert review.content == 'Bright and citrusy'

    def test_admin_cannot_rewrite_review(self, review_admin_client, review, coffee):
        url = reverse('reviews:review-detail', kwargs={'pk': review.id})
        response = review_admin_client.put(url, review_payload(coffee, content='Edited'), format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_update_coffee_mismatch(self, review_auth_client, review, another_coffee):
        url = reverse('reviews:review-detail', kwargs={'pk': review.id})
        response = review_auth_client.put(url, review_payload(another_coffee), format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'error' in response.data

    def test_update_not_found(self, review_auth_client, coffee):
        url = reverse('reviews:review-detail', kwargs={'pk': uuid4()})
        response = review_auth_client.put(url, review_payload(coffee), format='json')

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_patch_not_allowed(self, review_auth_client, review):
        url = reverse('reviews:review-detail', kwargs={'pk': review.id})
        response = review_auth_client.patch(url, {'content': 'Partial'}, format='json')

        assert response.status_code == status.HTTP_405_METHOD_NOT_ALLOWED


# =============================================================================
# Delete Tests
# =============================================================================

@pytest.mark.django_db
class TestReviewDelete:
    """Tests for DELETE /api/reviews/{id}/"""

    def test_delete_own_review(self, review_auth_client, review, coffee):
        url = reverse('reviews:review-detail', kwargs={'pk': review.id})
        response = review_auth_client.delete(url)

        assert response.status_code == status.HTTP_204_NO_CONTENT

        mine = review_auth_client.get(reverse('reviews:review-user'), {'coffeeId': str(coffee.id)})
        assert mine.status_code == status.HTTP_204_NO_CONTENT

    def test_delete_other_users_review(self, review_other_client, review):
        url = reverse('reviews:review-detail', kwargs={'pk': review.id})
        response = review_other_client.delete(url)

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert Review.objects.filter(id=review.id).exists()

    def test_admin_deletes_any_review(self, review_admin_client, review):
        url = reverse('reviews:review-detail', kwargs={'pk': review.id})
        response = review_admin_client.delete(url)

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not Review.objects.filter(id=review.id).exists()

    def test_delete_unauthenticated(self, api_client, review):
        url = reverse('reviews:review-detail', kwargs={'pk': review.id})
        response = api_client.delete(url)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


# =============================================================================
# Feed Tests
# =============================================================================

@pytest.mark.django_db
class TestReviewFeed:
    """Tests for GET /api/reviews/"""

    def test_coffee_feed_page_shape(self, api_client, coffee, make_reviews):
        make_reviews(coffee, [3, 5, 4, 2])

        url = reverse('reviews:review-list')
        response = api_client.get(url, {'coffeeId': str(coffee.id), 'page': 0, 'size': 3})

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data['content']) == 3
        assert response.data['totalElements'] == 4
        assert response.data['totalPages'] == 2
        assert response.data['number'] == 0
        assert response.data['size'] == 3

    def test_sort_by_rating(self, api_client, coffee, make_reviews):
        make_reviews(coffee, [3, 5, 4])

        url = reverse('reviews:review-list')
        response = api_client.get(url, {
            'coffeeId': str(coffee.id),
            'sortBy': 'rating',
            'direction': 'asc',
        })

        assert [item['rating'] for item in response.data['content']] == [3.0, 4.0, 5.0]

    def test_user_feed(self, api_client, review, review_user):
        url = reverse('reviews:review-list')
        response = api_client.get(url, {'userId': str(review_user.id)})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['totalElements'] == 1
        assert response.data['content'][0]['coffeeName'] == review.coffee.name

    def test_no_subject_gives_empty_page(self, api_client, review):
        url = reverse('reviews:review-list')
        response = api_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['content'] == []
        assert response.data['totalElements'] == 0

    def test_both_subjects_rejected(self, api_client, coffee, review_user):
        url = reverse('reviews:review-list')
        response = api_client.get(url, {'coffeeId': str(coffee.id), 'userId': str(review_user.id)})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_page_past_end(self, api_client, review, coffee):
        url = reverse('reviews:review-list')
        response = api_client.get(url, {'coffeeId': str(coffee.id), 'page': 4})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['content'] == []
        assert response.data['totalElements'] == 1

    def test_invalid_sort(self, api_client, coffee):
        url = reverse('reviews:review-list')
        response = api_client.get(url, {'coffeeId': str(coffee.id), 'sortBy': 'content'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_size_above_maximum(self, api_client, coffee, settings):
        settings.REVIEW_FEED_MAX_SIZE = 5

        url = reverse('reviews:review-list')
        response = api_client.get(url, {'coffeeId': str(coffee.id), 'size': 6})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'size' in response.data

    def test_retrieve_single_review(self, api_client, review):
        url = reverse('reviews:review-detail', kwargs={'pk': review.id})
        response = api_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['content'] == 'Bright and citrusy'
