import pytest
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient


@pytest.mark.django_db
class TestProjectViews:

    def test_health_check(self):
        response = APIClient().get(reverse('health-check'))

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {'status': 'ok'}

    def test_unknown_url_returns_json_error(self):
        response = APIClient().get('/api/no-such-endpoint/')

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json() == {'error': 'Not found: /api/no-such-endpoint/'}

