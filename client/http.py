import logging
import os

import requests

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = 'http://localhost:8000'


class ApiError(Exception):
    """A request failed; `message` is what the server said, ready to show to a user."""

    def __init__(self, message, status_code=None, payload=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload or {}


class ApiClient:
    """
    Thin wrapper over a requests session for the WorkJunction API.

    Every response is expected to be a {success, data, message} envelope.
    Non-2xx responses and envelopes with success=false raise ApiError.
    """

    def __init__(self, base_url=None, token=None, timeout=10, session=None):
        self.base_url = (base_url or os.environ.get('WORKJUNCTION_API_URL') or DEFAULT_BASE_URL).rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()
        if token:
            self.set_token(token)

    def set_token(self, token):
        if token:
            self.session.headers['Authorization'] = f'Token {token}'
        else:
            self.session.headers.pop('Authorization', None)

    def login(self, identifier, password):
        response = self.post('/api/auth/login/', json={'identifier': identifier, 'password': password})
        self.set_token(response['data']['token'])
        return response['data']['user']

    def request(self, method, path, **kwargs):
        url = f"{self.base_url}{path}"
        kwargs.setdefault('timeout', self.timeout)
        try:
            response = self.session.request(method, url, **kwargs)
        except requests.exceptions.RequestException as e:
            logger.error(f"{method} {path} failed: {str(e)}")
            raise ApiError('Network error. Please check your connection.') from e

        try:
            payload = response.json()
        except ValueError:
            payload = {}
        if not isinstance(payload, dict):
            payload = {'data': payload}

        if not response.ok or payload.get('success') is False:
            message = payload.get('message') or payload.get('detail') or response.reason or 'Request failed'
            logger.warning(f"{method} {path} returned {response.status_code}: {message}")
            raise ApiError(message, response.status_code, payload)
        return payload

    def get(self, path, params=None):
        return self.request('GET', path, params=params)

    def post(self, path, json=None, files=None, data=None):
        return self.request('POST', path, json=json, files=files, data=data)

    def put(self, path, json=None):
        return self.request('PUT', path, json=json)

    def patch(self, path, json=None):
        return self.request('PATCH', path, json=json)

    def delete(self, path):
        return self.request('DELETE', path)
