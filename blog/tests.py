"""
Tests for the blog app.

Covers:
- Post model validation and slug derivation (collisions, regeneration, source field)
- PostQuerySet scopes and lenient paging
- PostListView / PostDetailView (published-only, pagination, 404s)
- AllPostsView front-page shell
- seed_blog management command
"""

from io import StringIO
from unittest import mock

from django.contrib.staticfiles import finders
from django.core.exceptions import ValidationError
from django.core.management import call_command
from django.test import Client, TestCase, override_settings
from django.urls import reverse

from .models import Post, coerce_page_number

# Use plain static files storage in tests: WhiteNoise's manifest storage
# requires `collectstatic` to have been run, which is not appropriate in tests.
_TEST_STORAGES = {
    'default': {'BACKEND': 'django.core.files.storage.FileSystemStorage'},
    'staticfiles': {'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage'},
}


def _make_post(title='Hello', content='World', summary='Hi', published=True):
    """Create and return a post."""
    return Post.objects.create(
        title=title, content=content, summary=summary, published=published,
    )


# ---------------------------------------------------------------------------
# Model tests
# ---------------------------------------------------------------------------

@override_settings(BLOG_SLUG_SOURCE_FIELD='title', BLOG_REGENERATE_SLUG_ON_SAVE=True)
class PostModelTest(TestCase):
    """Validation and slug behaviour of Post."""

    def test_slug_generated_from_title(self):
        """Slug is derived from the title on create."""
        post = _make_post(title='Hello')
        self.assertEqual(post.slug, 'hello')

    @override_settings(BLOG_SLUG_SOURCE_FIELD='summary')
    def test_slug_generated_from_summary_when_configured(self):
        """With the summary as source, the slug follows the summary."""
        post = _make_post(title='Hello', summary='Hi')
        self.assertEqual(post.slug, 'hi')

    def test_duplicate_titles_get_numbered_slugs(self):
        """Colliding slugs get -1, -2 suffixes."""
        first = _make_post(title='Hello')
        second = _make_post(title='Hello')
        third = _make_post(title='Hello!')
        self.assertEqual(first.slug, 'hello')
        self.assertEqual(second.slug, 'hello-1')
        self.assertEqual(third.slug, 'hello-2')

    def test_slugs_are_unique_and_non_empty(self):
        """Every stored post has its own non-empty slug."""
        for _ in range(5):
            _make_post(title='Same Title')
        slugs = list(Post.objects.values_list('slug', flat=True))
        self.assertEqual(len(slugs), len(set(slugs)))
        self.assertTrue(all(slugs))

    def test_resave_keeps_own_slug(self):
        """Saving a post again does not make it collide with itself."""
        post = _make_post(title='Hello')
        post.content = 'Updated'
        post.save()
        post.refresh_from_db()
        self.assertEqual(post.slug, 'hello')

    def test_resave_keeps_suffixed_slug_after_original_deleted(self):
        """A numbered slug survives a re-save once the bare slug frees up."""
        first = _make_post(title='Hello')
        second = _make_post(title='Hello')
        self.assertEqual(second.slug, 'hello-1')
        first.delete()
        second.save()
        second.refresh_from_db()
        self.assertEqual(second.slug, 'hello-1')

    def test_slug_derived_once_per_save(self):
        """Saving derives the slug a single time."""
        with mock.patch.object(
            Post, 'build_slug', autospec=True, side_effect=Post.build_slug,
        ) as build_slug:
            _make_post(title='Hello')
        self.assertEqual(build_slug.call_count, 1)

    def test_concurrent_slug_collision_raises_validation_error(self):
        """A unique-constraint clash at write time becomes a ValidationError."""
        _make_post(title='Hello')
        # Another writer grabbed the slug after it was derived
        with mock.patch.object(Post, 'build_slug', return_value='hello'):
            with self.assertRaises(ValidationError) as ctx:
                _make_post(title='Hello')
        self.assertIn('slug', ctx.exception.message_dict)
        self.assertEqual(Post.objects.count(), 1)

    def test_slug_regenerated_on_update(self):
        """Changing the title moves the slug along with it."""
        post = _make_post(title='Hello')
        post.title = 'Goodbye'
        post.save()
        post.refresh_from_db()
        self.assertEqual(post.slug, 'goodbye')

    @override_settings(BLOG_REGENERATE_SLUG_ON_SAVE=False)
    def test_slug_kept_on_update_when_regeneration_off(self):
        """With regeneration off the original slug sticks."""
        post = _make_post(title='Hello')
        post.title = 'Goodbye'
        post.save()
        post.refresh_from_db()
        self.assertEqual(post.slug, 'hello')

    def test_missing_fields_rejected(self):
        """Empty title, content or summary raise ValidationError and nothing is saved."""
        for field in ('title', 'content', 'summary'):
            data = {'title': 'Hello', 'content': 'World', 'summary': 'Hi', field: ''}
            with self.subTest(field=field):
                with self.assertRaises(ValidationError) as ctx:
                    Post.objects.create(**data)
                self.assertIn(field, ctx.exception.message_dict)
        self.assertEqual(Post.objects.count(), 0)

    def test_whitespace_only_fields_rejected(self):
        """Whitespace does not count as content."""
        with self.assertRaises(ValidationError) as ctx:
            Post.objects.create(title='Hello', content='World', summary='   ')
        self.assertIn('summary', ctx.exception.message_dict)

    def test_title_without_slug_characters_rejected(self):
        """A title that slugifies to nothing cannot be saved."""
        with self.assertRaises(ValidationError) as ctx:
            Post.objects.create(title='!!!', content='World', summary='Hi')
        self.assertIn('title', ctx.exception.message_dict)
        self.assertEqual(Post.objects.count(), 0)

    def test_published_defaults_to_false(self):
        """New posts are drafts unless told otherwise."""
        post = Post.objects.create(title='Hello', content='World', summary='Hi')
        self.assertFalse(post.published)

    def test_get_absolute_url(self):
        """Canonical URL is /blog/<slug>/."""
        post = _make_post(title='Hello')
        self.assertEqual(post.get_absolute_url(), '/blog/hello/')

    def test_as_json_fields(self):
        """as_json exposes the public fields."""
        post = _make_post(title='Hello')
        data = post.as_json()
        self.assertEqual(data['id'], post.pk)
        self.assertEqual(data['slug'], 'hello')
        self.assertTrue(data['published'])
        self.assertEqual(
            set(data),
            {'id', 'title', 'content', 'summary', 'slug', 'published', 'created_at', 'updated_at'},
        )

    def test_str(self):
        """__str__ returns the title."""
        self.assertEqual(str(Post(title='Hello')), 'Hello')


# ---------------------------------------------------------------------------
# QuerySet tests
# ---------------------------------------------------------------------------

@override_settings(BLOG_POSTS_PER_PAGE=6)
class PostQuerySetTest(TestCase):
    """Scopes, lookups and paging on Post.objects."""

    def setUp(self):
        """Eight published posts and two drafts."""
        self.published = [_make_post(title=f'Post {i}') for i in range(8)]
        self.drafts = [_make_post(title=f'Draft {i}', published=False) for i in range(2)]

    def test_list_published_first_page(self):
        """Page 1 holds at most six posts, all published."""
        page = Post.objects.list_published(1)
        self.assertEqual(len(page.object_list), 6)
        self.assertTrue(all(post.published for post in page.object_list))

    def test_list_published_second_page(self):
        """The remainder spills onto page 2 in insertion order."""
        page = Post.objects.list_published(2)
        self.assertEqual(list(page.object_list), self.published[6:])

    def test_list_published_custom_page_size(self):
        """per_page overrides the configured page size."""
        page = Post.objects.list_published(1, per_page=3)
        self.assertEqual(len(page.object_list), 3)

    def test_invalid_page_numbers_fall_back_to_first(self):
        """Missing, garbage and non-positive page numbers mean page 1."""
        for raw in (None, '', 'abc', '0', '-2'):
            with self.subTest(raw=raw):
                page = Post.objects.list_published(raw)
                self.assertEqual(page.number, 1)
                self.assertEqual(list(page.object_list), self.published[:6])

    def test_page_past_the_end_is_empty(self):
        """Asking beyond the last page returns an empty page, not an error."""
        page = Post.objects.list_published(99)
        self.assertEqual(page.number, 99)
        self.assertEqual(list(page.object_list), [])

    def test_list_all_includes_drafts(self):
        """list_all ignores the published flag."""
        self.assertEqual(Post.objects.list_all().count(), 10)

    def test_find_by_slug(self):
        """A published post is found by its slug."""
        post = Post.objects.published().find_by_slug('post-3')
        self.assertEqual(post, self.published[3])

    def test_find_by_slug_excludes_drafts(self):
        """Drafts are invisible through the published scope."""
        with self.assertRaises(Post.DoesNotExist):
            Post.objects.published().find_by_slug(self.drafts[0].slug)

    def test_find_by_slug_falls_back_to_id(self):
        """An all-digit value that is not a slug is tried as a primary key."""
        target = self.published[0]
        self.assertEqual(Post.objects.published().find_by_slug(str(target.pk)), target)

    def test_find_by_slug_missing(self):
        """Unknown slugs raise DoesNotExist."""
        with self.assertRaises(Post.DoesNotExist):
            Post.objects.find_by_slug('does-not-exist')

    def test_coerce_page_number(self):
        """coerce_page_number keeps positive integers only."""
        self.assertEqual(coerce_page_number('3'), 3)
        self.assertEqual(coerce_page_number(2), 2)
        self.assertEqual(coerce_page_number('x'), 1)
        self.assertEqual(coerce_page_number(-1), 1)


# ---------------------------------------------------------------------------
# View tests
# ---------------------------------------------------------------------------

@override_settings(STORAGES=_TEST_STORAGES, BLOG_POSTS_PER_PAGE=6)
class PostListViewTest(TestCase):
    """Test the public blog index."""

    def setUp(self):
        """Seven published posts and one draft."""
        self.client = Client()
        for i in range(7):
            _make_post(title=f'Post {i}')
        self.draft = _make_post(title='Secret Draft', published=False)

    def test_list_ok(self):
        """Blog index returns 200 with six posts."""
        response = self.client.get(reverse('blog:post_list'))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.context['posts']), 6)
        self.assertTrue(response.context['is_paginated'])

    def test_drafts_excluded(self):
        """Drafts never appear in the listing."""
        response = self.client.get(reverse('blog:post_list'), {'page': 2})
        titles = [post.title for post in response.context['posts']]
        self.assertEqual(titles, ['Post 6'])
        self.assertNotContains(response, 'Secret Draft')

    def test_invalid_page_shows_first_page(self):
        """A non-numeric page parameter shows page 1 instead of a 404."""
        response = self.client.get(reverse('blog:post_list'), {'page': 'nope'})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.context['page_obj'].number, 1)

    def test_page_past_the_end(self):
        """Out-of-range pages render an empty list."""
        response = self.client.get(reverse('blog:post_list'), {'page': 50})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.context['posts']), 0)

    def test_page_past_the_end_links_to_last_page(self):
        """The pager on an out-of-range page points back to the last real page."""
        response = self.client.get(reverse('blog:post_list'), {'page': 99})
        self.assertContains(response, 'href="?page=2"')
        self.assertNotContains(response, '?page=98')
        self.assertNotContains(response, 'Page 99 of 2')

    def test_empty_blog(self):
        """An empty blog still renders."""
        Post.objects.all().delete()
        response = self.client.get(reverse('blog:post_list'))
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, 'No posts yet.')


@override_settings(STORAGES=_TEST_STORAGES)
class PostDetailViewTest(TestCase):
    """Test the public post page."""

    def setUp(self):
        """One published post and one draft."""
        self.client = Client()
        self.post = _make_post(title='Hello', content='World', summary='Hi')
        self.draft = _make_post(title='Unfinished', published=False)

    def test_detail_ok(self):
        """Published post renders by slug."""
        response = self.client.get(reverse('blog:post_detail', kwargs={'slug': 'hello'}))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.context['post'], self.post)
        self.assertContains(response, 'World')

    def test_detail_by_id(self):
        """The numeric id works as a fallback."""
        response = self.client.get(
            reverse('blog:post_detail', kwargs={'slug': str(self.post.pk)})
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.context['post'], self.post)

    def test_detail_404_for_draft(self):
        """Drafts return 404."""
        response = self.client.get(
            reverse('blog:post_detail', kwargs={'slug': self.draft.slug})
        )
        self.assertEqual(response.status_code, 404)

    def test_detail_404_for_bad_slug(self):
        """Non-existent slug returns 404."""
        response = self.client.get(
            reverse('blog:post_detail', kwargs={'slug': 'does-not-exist'})
        )
        self.assertEqual(response.status_code, 404)


@override_settings(STORAGES=_TEST_STORAGES)
class AllPostsViewTest(TestCase):
    """Test the front page that hosts the client-side list."""

    def test_home_mounts_post_list(self):
        """Home page points the list script at the JSON API."""
        response = self.client.get(reverse('home'))
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, 'id="all-posts"')
        self.assertContains(response, 'data-source="/api/posts"')
        self.assertContains(response, 'js/all_posts.js')

    def test_list_script_only_links_published_posts(self):
        """Drafts from the API are listed without a link to a 404 page."""
        path = finders.find('js/all_posts.js')
        self.assertIsNotNone(path)
        with open(path, encoding='utf-8') as fh:
            source = fh.read()
        self.assertIn('if (post.published)', source)


# ---------------------------------------------------------------------------
# Management command tests
# ---------------------------------------------------------------------------

class SeedBlogCommandTest(TestCase):
    """Test the seed_blog management command."""

    def test_seed_creates_posts(self):
        """Seeding creates posts with slugs and a mix of published states."""
        out = StringIO()
        call_command('seed_blog', stdout=out)
        self.assertEqual(Post.objects.count(), 4)
        self.assertTrue(Post.objects.filter(slug='hello-pressroom', published=True).exists())
        self.assertEqual(Post.objects.filter(published=False).count(), 1)
        self.assertIn('Created: 4', out.getvalue())

    def test_seed_is_idempotent(self):
        """A second run skips everything."""
        call_command('seed_blog', stdout=StringIO())
        out = StringIO()
        call_command('seed_blog', stdout=out)
        self.assertEqual(Post.objects.count(), 4)
        self.assertIn('Skipped: 4', out.getvalue())
