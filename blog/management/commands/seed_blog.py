"""
Management command to seed a handful of sample blog posts.

Run this on any environment (local or production) to populate the blog:
    python manage.py seed_blog
"""

from django.core.exceptions import ValidationError
from django.core.management.base import BaseCommand, CommandError

from blog.models import Post


POSTS = [
    {
        'title': 'Hello, Pressroom',
        'summary': 'A first post to prove the blog works end to end.',
        'content': (
            'Pressroom is a deliberately small blog: posts, pages of six, '
            'friendly URLs and a JSON feed for the front page.'
        ),
        'published': True,
    },
    {
        'title': 'Writing a Good Summary',
        'summary': 'Summaries show up on the list page, so keep them short.',
        'content': (
            'One or two sentences is plenty. The summary is what readers see '
            'before deciding to open the full post.'
        ),
        'published': True,
    },
    {
        'title': 'How Slugs Are Built',
        'summary': 'Every post gets a readable, unique URL.',
        'content': (
            'The slug comes from the title. If another post already uses it, '
            'a number is appended: how-slugs-are-built-1, -2 and so on.'
        ),
        'published': True,
    },
    {
        'title': 'Draft: Upcoming Features',
        'summary': 'Notes on what might come next.',
        'content': 'This post stays unpublished, so only the admin and the API can see it.',
        'published': False,
    },
]


class Command(BaseCommand):
    """Seed sample blog posts into the database."""

    help = 'Seeds sample Pressroom blog posts. Safe to re-run; skips existing titles.'

    def handle(self, *args, **options):
        """Create posts whose titles do not exist yet."""
        created_count = 0
        skipped_count = 0

        for post_data in POSTS:
            if Post.objects.filter(title=post_data['title']).exists():
                self.stdout.write(f"  [skip]  {post_data['title']}")
                skipped_count += 1
                continue

            try:
                post = Post.objects.create(**post_data)
            except ValidationError as exc:
                raise CommandError(f"Invalid seed post {post_data['title']!r}: {exc}") from exc

            self.stdout.write(f"  [new]   {post.title} -> /blog/{post.slug}/")
            created_count += 1

        self.stdout.write(
            self.style.SUCCESS(
                f'\nDone! Created: {created_count}  |  Skipped: {skipped_count}'
            )
        )
