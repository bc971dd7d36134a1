"""
Tests for the api app.

Covers:
- GET /api/posts (drafts included by default, hidden when configured off)
- GET /api/posts/<id> (200 / 404)
- GET /api/posts/new scaffold
- 405 for the write verbs
"""

from django.test import Client, TestCase, override_settings
from django.urls import reverse

from blog.models import Post

_TEST_STORAGES = {
    'default': {'BACKEND': 'django.core.files.storage.FileSystemStorage'},
    'staticfiles': {'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage'},
}


@override_settings(BLOG_API_INCLUDE_UNPUBLISHED=True)
class PostApiTest(TestCase):
    """JSON endpoints for posts."""

    def setUp(self):
        """One published post and one draft."""
        self.client = Client()
        self.post = Post.objects.create(
            title='Hello', content='World', summary='Hi', published=True,
        )
        self.draft = Post.objects.create(
            title='Work in progress', content='Soon', summary='Later',
        )

    def test_list_returns_all_posts(self):
        """The list is a JSON array including drafts, in id order."""
        response = self.client.get(reverse('api:post_list'))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response['Content-Type'], 'application/json')
        data = response.json()
        self.assertEqual([item['id'] for item in data], [self.post.pk, self.draft.pk])
        self.assertEqual(data[0]['slug'], 'hello')
        self.assertFalse(data[1]['published'])

    def test_list_json_suffix(self):
        """/api/posts.json is an alias for /api/posts."""
        response = self.client.get('/api/posts.json')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.json()), 2)

    @override_settings(BLOG_API_INCLUDE_UNPUBLISHED=False)
    def test_list_hides_drafts_when_configured(self):
        """Drafts drop out when the API is limited to published posts."""
        response = self.client.get(reverse('api:post_list'))
        self.assertEqual([item['id'] for item in response.json()], [self.post.pk])

    def test_list_empty(self):
        """No posts gives an empty array."""
        Post.objects.all().delete()
        response = self.client.get(reverse('api:post_list'))
        self.assertEqual(response.json(), [])

    def test_detail_ok(self):
        """A single post is returned with every public field."""
        response = self.client.get(reverse('api:post_detail', kwargs={'pk': self.post.pk}))
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data['title'], 'Hello')
        self.assertEqual(data['content'], 'World')
        self.assertEqual(data['summary'], 'Hi')
        self.assertEqual(data['slug'], 'hello')
        self.assertTrue(data['published'])
        self.assertIsNotNone(data['created_at'])

    def test_trailing_slash_variants(self):
        """Routes answer with or without a trailing slash."""
        for url in ('/api/posts/', f'/api/posts/{self.post.pk}/', '/api/posts/new/'):
            with self.subTest(url=url):
                self.assertEqual(self.client.get(url).status_code, 200)

    def test_detail_json_suffix(self):
        """/api/posts/<id>.json works too."""
        response = self.client.get(f'/api/posts/{self.post.pk}.json')
        self.assertEqual(response.status_code, 200)

    def test_detail_404(self):
        """Unknown ids return a JSON 404."""
        response = self.client.get(reverse('api:post_detail', kwargs={'pk': 99999}))
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json(), {'error': 'Post not found.'})

    @override_settings(BLOG_API_INCLUDE_UNPUBLISHED=False)
    def test_detail_404_for_draft_when_hidden(self):
        """Hidden drafts cannot be fetched by id either."""
        response = self.client.get(reverse('api:post_detail', kwargs={'pk': self.draft.pk}))
        self.assertEqual(response.status_code, 404)

    def test_new_returns_scaffold(self):
        """/api/posts/new returns default values and saves nothing."""
        response = self.client.get(reverse('api:post_new'))
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertIsNone(data['id'])
        self.assertEqual(data['title'], '')
        self.assertEqual(data['slug'], '')
        self.assertFalse(data['published'])
        self.assertIsNone(data['created_at'])
        self.assertEqual(Post.objects.count(), 2)

    def test_write_methods_not_allowed(self):
        """Create, update and delete are not implemented."""
        cases = [
            ('post', reverse('api:post_list')),
            ('put', reverse('api:post_detail', kwargs={'pk': self.post.pk})),
            ('patch', reverse('api:post_detail', kwargs={'pk': self.post.pk})),
            ('delete', reverse('api:post_detail', kwargs={'pk': self.post.pk})),
        ]
        for method, url in cases:
            with self.subTest(method=method):
                response = getattr(self.client, method)(url)
                self.assertEqual(response.status_code, 405)
                self.assertIn('GET', response['Allow'])
                self.assertIn('error', response.json())
        self.assertEqual(Post.objects.count(), 2)


@override_settings(STORAGES=_TEST_STORAGES)
class PublishFlowTest(TestCase):
    """A post created in the store shows up on the blog and in the API."""

    def test_created_post_is_visible_everywhere(self):
        """Create → /blog/hello/ → /api/posts."""
        post = Post.objects.create(title='Hello', content='World', summary='Hi', published=True)
        self.assertEqual(post.slug, 'hello')

        page = self.client.get('/blog/hello/')
        self.assertEqual(page.status_code, 200)
        self.assertEqual(page.context['post'], post)

        listing = self.client.get('/api/posts')
        self.assertIn('hello', [item['slug'] for item in listing.json()])
