"""
Migration: add summary, published flag and slug to posts.

Changes made:
- Post: add summary (backfilled from the title for existing rows)
- Post: add published, default False
- Post: add slug, backfilled from the title, then made unique
"""

from django.db import migrations, models
from django.utils.text import slugify

import blog.models


def backfill_slugs(apps, schema_editor):
    """Give every existing post a summary and a unique slug."""
    Post = apps.get_model('blog', 'Post')
    taken = set()
    for post in Post.objects.order_by('id'):
        base = slugify(post.title)[:245].strip('-') or f'post-{post.pk}'
        slug = base
        counter = 1
        while slug in taken:
            slug = f'{base}-{counter}'
            counter += 1
        taken.add(slug)
        post.slug = slug
        if not post.summary:
            post.summary = post.title
        post.save(update_fields=['slug', 'summary'])


class Migration(migrations.Migration):

    dependencies = [
        ('blog', '0001_initial'),
    ]

    operations = [
        migrations.AddField(
            model_name='post',
            name='summary',
            field=models.TextField(
                default='',
                help_text='Short blurb shown on the list page.',
                validators=[blog.models.validate_not_blank],
            ),
            preserve_default=False,
        ),
        migrations.AddField(
            model_name='post',
            name='published',
            field=models.BooleanField(db_index=True, default=False),
        ),
        # Nullable first so existing rows survive until they are backfilled
        migrations.AddField(
            model_name='post',
            name='slug',
            field=models.SlugField(editable=False, max_length=255, null=True),
        ),
        migrations.RunPython(backfill_slugs, migrations.RunPython.noop),
        migrations.AlterField(
            model_name='post',
            name='slug',
            field=models.SlugField(
                editable=False,
                help_text='URL slug, generated automatically.',
                max_length=255,
                unique=True,
            ),
        ),
    ]
