"""
Tests for the backoffice app.

Covers:
- AdminBasicAuthMiddleware (401 challenge, correct pair passes, fails closed)
- parse_basic_auth header decoding
- DashboardView counts
- Post editing through the Django admin behind the gate
"""

import base64

from django.contrib.auth import get_user_model
from django.test import Client, SimpleTestCase, TestCase, override_settings
from django.urls import reverse

from blog.models import Post

from .middleware import parse_basic_auth

User = get_user_model()

_TEST_STORAGES = {
    'default': {'BACKEND': 'django.core.files.storage.FileSystemStorage'},
    'staticfiles': {'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage'},
}

_GATE_SETTINGS = {
    'ADMIN_GATE_PATH_PREFIX': '/admin/',
    'ADMIN_BASIC_AUTH_USERNAME': 'editor',
    'ADMIN_BASIC_AUTH_PASSWORD': 'let-me-in',
    'ADMIN_BASIC_AUTH_REALM': 'Pressroom Admin',
}


def _basic(username, password):
    """Build the extra kwargs for an Authorization header."""
    token = base64.b64encode(f'{username}:{password}'.encode('utf-8')).decode('ascii')
    return {'HTTP_AUTHORIZATION': f'Basic {token}'}


class ParseBasicAuthTest(SimpleTestCase):
    """Unit tests for the header parser."""

    def test_valid_header(self):
        """A well-formed header yields the pair."""
        header = _basic('editor', 'let-me-in')['HTTP_AUTHORIZATION']
        self.assertEqual(parse_basic_auth(header), ('editor', 'let-me-in'))

    def test_password_may_contain_colons(self):
        """Only the first colon separates username from password."""
        header = _basic('editor', 'a:b:c')['HTTP_AUTHORIZATION']
        self.assertEqual(parse_basic_auth(header), ('editor', 'a:b:c'))

    def test_rejects_bad_headers(self):
        """Missing, foreign-scheme, non-base64 and colon-less headers give None."""
        no_colon = base64.b64encode(b'editor').decode('ascii')
        for header in ('', 'Basic', 'Bearer abc', 'Basic !!!not-base64', f'Basic {no_colon}'):
            with self.subTest(header=header):
                self.assertIsNone(parse_basic_auth(header))


@override_settings(STORAGES=_TEST_STORAGES, **_GATE_SETTINGS)
class AdminGateTest(TestCase):
    """The admin namespace is only reachable with the configured pair."""

    def setUp(self):
        """Create a published post and a draft for the dashboard counts."""
        self.client = Client()
        Post.objects.create(title='Live', content='c', summary='s', published=True)
        Post.objects.create(title='Draft', content='c', summary='s')

    def test_no_credentials_challenged(self):
        """No Authorization header gives 401 and a Basic challenge."""
        with self.assertLogs('backoffice.middleware', level='WARNING'):
            response = self.client.get('/admin/anything')
        self.assertEqual(response.status_code, 401)
        self.assertEqual(
            response['WWW-Authenticate'], 'Basic realm="Pressroom Admin", charset="UTF-8"',
        )

    def test_prefix_without_trailing_slash_challenged(self):
        """/admin itself is gated too."""
        response = self.client.get('/admin')
        self.assertEqual(response.status_code, 401)

    def test_wrong_password_challenged(self):
        """A wrong password is refused."""
        response = self.client.get('/admin/', **_basic('editor', 'nope'))
        self.assertEqual(response.status_code, 401)

    def test_wrong_username_challenged(self):
        """A wrong username is refused."""
        response = self.client.get('/admin/', **_basic('someone', 'let-me-in'))
        self.assertEqual(response.status_code, 401)

    def test_correct_credentials_reach_dashboard(self):
        """The right pair reaches the dashboard."""
        response = self.client.get(reverse('backoffice:dashboard'), **_basic('editor', 'let-me-in'))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.context['total_count'], 2)
        self.assertEqual(response.context['published_count'], 1)
        self.assertEqual(response.context['draft_count'], 1)

    def test_correct_credentials_pass_through(self):
        """Authorised requests are handed on untouched, so unknown pages 404."""
        response = self.client.get('/admin/anything', **_basic('editor', 'let-me-in'))
        self.assertEqual(response.status_code, 404)

    def test_public_pages_not_gated(self):
        """The gate leaves the rest of the site alone."""
        self.assertEqual(self.client.get(reverse('blog:post_list')).status_code, 200)
        self.assertEqual(self.client.get(reverse('api:post_list')).status_code, 200)

    @override_settings(ADMIN_BASIC_AUTH_PASSWORD='')
    def test_fails_closed_without_password(self):
        """With no password configured nobody gets in."""
        with self.assertLogs('backoffice.middleware', level='ERROR'):
            response = self.client.get('/admin/', **_basic('editor', ''))
        self.assertEqual(response.status_code, 401)


@override_settings(STORAGES=_TEST_STORAGES, **_GATE_SETTINGS)
class AdminPostEditingTest(TestCase):
    """Creating posts through the Django admin inside the gate."""

    def setUp(self):
        """Log a superuser in; every request also carries the gate credentials."""
        self.client = Client()
        self.user = User.objects.create_superuser(
            username='staff', email='staff@example.com', password='testpass123',
        )
        self.client.login(username='staff', password='testpass123')
        self.auth = _basic('editor', 'let-me-in')

    def test_admin_site_needs_gate_credentials(self):
        """Even a logged-in superuser hits the gate first."""
        response = self.client.get(reverse('admin:blog_post_changelist'))
        self.assertEqual(response.status_code, 401)

    def test_changelist_ok(self):
        """Post changelist renders behind the gate."""
        response = self.client.get(reverse('admin:blog_post_changelist'), **self.auth)
        self.assertEqual(response.status_code, 200)

    def test_create_post(self):
        """A valid form creates a post with a derived slug."""
        response = self.client.post(
            reverse('admin:blog_post_add'),
            {'title': 'From the Admin', 'summary': 'Short', 'content': 'Long', 'published': 'on'},
            **self.auth,
        )
        self.assertEqual(response.status_code, 302)
        post = Post.objects.get()
        self.assertEqual(post.slug, 'from-the-admin')
        self.assertTrue(post.published)

    def test_create_post_validation_errors(self):
        """Blank fields come back as form errors, nothing is saved."""
        response = self.client.post(
            reverse('admin:blog_post_add'),
            {'title': '!!!', 'summary': '   ', 'content': 'Long'},
            **self.auth,
        )
        self.assertEqual(response.status_code, 200)
        form = response.context['adminform'].form
        self.assertIn('summary', form.errors)
        self.assertEqual(Post.objects.count(), 0)
