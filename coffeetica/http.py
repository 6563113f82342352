"""Thin JSON-over-HTTP transport for the Coffeetica API."""

import asyncio
from typing import Optional

import requests
import structlog

from . import conf
from .exceptions import (
    AuthError,
    ConflictError,
    NotFoundError,
    TransientError,
    ValidationError,
)

logger = structlog.get_logger(__name__)


def extract_error_detail(response: requests.Response) -> tuple[str, dict]:
    """
    Pull a human-readable message and per-field errors out of an error response.

    Handles the two shapes the backend produces:
    - Domain errors: {"error": "msg"}
    - DRF validation / auth errors: {"field": ["msg", ...]} or {"detail": "msg"}
    """
    try:
        body = response.json()
    except ValueError:
        text = response.text or ''
        return text[:300] or f'HTTP {response.status_code}', {}

    if not isinstance(body, dict):
        return str(body)[:300], {}

    if 'error' in body:
        return str(body['error']), {}

    if 'detail' in body:
        return str(body['detail']), {}

    errors = {}
    for key, value in body.items():
        if isinstance(value, list):
            errors[key] = [str(v) for v in value]
        else:
            errors[key] = [str(value)]
    message = ' | '.join(f'{k}: {", ".join(v)}' for k, v in errors.items())
    return message or f'HTTP {response.status_code}', errors


class ApiClient:
    """
    Blocking ``requests`` transport with an awaitable wrapper.

    Maps HTTP failures onto the client error taxonomy; never retries.
    """

    def __init__(self, base_url: Optional[str] = None, *, timeout: Optional[float] = None,
                 http: Optional[requests.Session] = None):
        self.base_url = (base_url or conf.API_URL).rstrip('/')
        self.timeout = conf.REQUEST_TIMEOUT if timeout is None else timeout
        self.http = http or requests.Session()
        self.http.headers.update({'Accept': 'application/json'})

    def request(self, method: str, path: str, *, credential: Optional[str] = None,
                params: Optional[dict] = None, json: Optional[dict] = None):
        url = f'{self.base_url}/{path.lstrip("/")}'
        headers = {}
        if credential:
            headers['Authorization'] = f'Bearer {credential}'

        try:
            response = self.http.request(
                method,
                url,
                params=params,
                json=json,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.warning('api_request_failed', method=method, path=path, error=str(exc))
            raise TransientError(f'Could not reach the server: {exc}') from exc

        return self._handle_response(method, path, response)

    async def arequest(self, method: str, path: str, **kwargs):
        """Run ``request`` off the event loop thread."""
        return await asyncio.to_thread(self.request, method, path, **kwargs)

    def _handle_response(self, method: str, path: str, response: requests.Response):
        status = response.status_code

        if status == 204:
            return None
        if 200 <= status < 300:
            if not response.content:
                return None
            return response.json()

        message, errors = extract_error_detail(response)
        logger.info('api_error_response', method=method, path=path, status=status, detail=message)

        if status == 400:
            raise ValidationError(message, errors=errors, status_code=status)
        if status in (401, 403):
            raise AuthError(message, status_code=status)
        if status == 404:
            raise NotFoundError(message, status_code=status)
        if status == 409:
            raise ConflictError(message, status_code=status)
        raise TransientError(message, status_code=status)
