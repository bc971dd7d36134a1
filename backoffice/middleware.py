"""
HTTP basic authentication for the admin namespace.

Every request under ADMIN_GATE_PATH_PREFIX must carry the configured
username/password pair. Anything else gets a 401 with a fresh challenge.
The credentials live in settings (read from the environment), never in code.
"""

import base64
import binascii
import logging

from django.conf import settings
from django.http import HttpResponse
from django.utils.crypto import constant_time_compare

logger = logging.getLogger(__name__)


def parse_basic_auth(header):
    """
    Decode an ``Authorization: Basic ...`` header.

    Returns (username, password), or None when the header is missing,
    uses another scheme, or is not valid base64 "user:pass".
    """
    if not header:
        return None
    scheme, _, encoded = header.partition(' ')
    if scheme.lower() != 'basic' or not encoded.strip():
        return None
    try:
        decoded = base64.b64decode(encoded.strip(), validate=True).decode('utf-8')
    except (binascii.Error, UnicodeDecodeError):
        return None
    username, sep, password = decoded.partition(':')
    if not sep:
        return None
    return username, password


class AdminBasicAuthMiddleware:
    """Gate the admin namespace behind a single configured credential pair."""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        if self.is_protected(request.path_info) and not self.is_authorized(request):
            logger.warning(
                'Refused admin request to %s from %s',
                request.path_info, request.META.get('REMOTE_ADDR', 'unknown'),
            )
            return self.challenge()
        return self.get_response(request)

    @staticmethod
    def is_protected(path):
        """True for the prefix itself (with or without the slash) and anything under it."""
        prefix = settings.ADMIN_GATE_PATH_PREFIX
        return path == prefix.rstrip('/') or path.startswith(prefix)

    @staticmethod
    def is_authorized(request):
        expected_password = settings.ADMIN_BASIC_AUTH_PASSWORD
        if not expected_password:
            logger.error('ADMIN_BASIC_AUTH_PASSWORD is not set; refusing all admin requests.')
            return False

        credentials = parse_basic_auth(request.META.get('HTTP_AUTHORIZATION', ''))
        if credentials is None:
            return False
        username, password = credentials
        # Compare both halves so a wrong username costs the same as a wrong password
        username_ok = constant_time_compare(username, settings.ADMIN_BASIC_AUTH_USERNAME)
        password_ok = constant_time_compare(password, expected_password)
        return username_ok and password_ok

    @staticmethod
    def challenge():
        response = HttpResponse('Authentication required.', status=401, content_type='text/plain')
        response['WWW-Authenticate'] = (
            f'Basic realm="{settings.ADMIN_BASIC_AUTH_REALM}", charset="UTF-8"'
        )
        return response
