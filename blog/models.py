"""
Models for the Pressroom blog.

A single Post table backs the public reader, the JSON API and the admin.
Posts are hidden from readers until ``published`` is switched on.
"""

import logging
import re

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.paginator import EmptyPage, Page, Paginator
from django.db import IntegrityError, models, transaction
from django.urls import reverse
from django.utils.text import slugify

logger = logging.getLogger(__name__)

SLUG_MAX_LENGTH = 255
SLUG_SOURCE_FIELDS = ('title', 'summary')


def validate_not_blank(value):
    """Reject values made only of whitespace."""
    if not str(value).strip():
        raise ValidationError('This field cannot be blank.', code='blank')


def coerce_page_number(value):
    """Turn a raw ?page= value into a page number, defaulting to 1."""
    try:
        number = int(value)
    except (TypeError, ValueError):
        return 1
    return number if number >= 1 else 1


def slug_source_field():
    """Return the configured slug source field name."""
    field = getattr(settings, 'BLOG_SLUG_SOURCE_FIELD', 'title')
    if field not in SLUG_SOURCE_FIELDS:
        raise ValueError(
            f'BLOG_SLUG_SOURCE_FIELD must be one of {SLUG_SOURCE_FIELDS}, got {field!r}'
        )
    return field


class PostQuerySet(models.QuerySet):
    """Query scopes used by the reader and the API."""

    def published(self):
        """Posts visible to the public."""
        return self.filter(published=True)

    def list_published(self, page=1, per_page=None):
        """One page of published posts."""
        return self.published().page(page, per_page)

    def list_all(self):
        """Every post, drafts included."""
        return self.all()

    def find_by_slug(self, slug_or_id):
        """
        Look a post up by slug, falling back to the primary key for
        all-digit values.

        Raises Post.DoesNotExist when neither matches.
        """
        value = str(slug_or_id)
        try:
            return self.get(slug=value)
        except self.model.DoesNotExist:
            if not (value.isascii() and value.isdigit()):
                raise
        return self.get(pk=int(value))

    def page(self, number=1, per_page=None):
        """
        Slice the queryset into a Page.

        Missing or garbage page numbers mean page 1. Asking past the last
        page gives an empty page instead of an error.
        """
        if per_page is None:
            per_page = settings.BLOG_POSTS_PER_PAGE
        paginator = Paginator(self, per_page)
        number = coerce_page_number(number)
        try:
            return paginator.page(number)
        except EmptyPage:
            return Page([], number, paginator)


class Post(models.Model):
    """
    A single blog post.

    The slug is never typed in by hand: it is derived from the title (or the
    summary, see BLOG_SLUG_SOURCE_FIELD) and de-duplicated with a numeric
    suffix. Every save runs full model validation, so a persisted post always
    has a non-blank title, content, summary and a unique slug.
    """

    title = models.CharField(max_length=255, validators=[validate_not_blank])
    content = models.TextField(validators=[validate_not_blank])
    summary = models.TextField(
        validators=[validate_not_blank],
        help_text='Short blurb shown on the list page.',
    )
    slug = models.SlugField(
        max_length=SLUG_MAX_LENGTH,
        unique=True,
        editable=False,
        help_text='URL slug, generated automatically.',
    )
    published = models.BooleanField(default=False, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = PostQuerySet.as_manager()

    class Meta:
        db_table = 'posts'
        ordering = ['id']

    def __str__(self):
        return self.title

    def build_slug(self):
        """Return a slug for the source field that no other post is using."""
        source = getattr(self, slug_source_field()) or ''
        # Leave room for a "-NN" suffix
        base = slugify(source)[:SLUG_MAX_LENGTH - 10].strip('-')
        if not base:
            return ''
        others = Post.objects.exclude(pk=self.pk) if self.pk else Post.objects.all()
        # An existing "base" or "base-N" slug stays put while nobody else holds it
        if self.slug and re.fullmatch(rf"{re.escape(base)}(-\d+)?", self.slug):
            if not others.filter(slug=self.slug).exists():
                return self.slug
        slug = base
        counter = 1
        while others.filter(slug=slug).exists():
            slug = f'{base}-{counter}'
            counter += 1
        return slug

    def assign_slug(self):
        """Derive the slug on create, and on every save when regeneration is on."""
        if not self.slug or settings.BLOG_REGENERATE_SLUG_ON_SAVE:
            self.slug = self.build_slug()

    def clean(self):
        """Derive the slug and make sure the source field produced one."""
        super().clean()
        self.assign_slug()
        if not self.slug:
            field = slug_source_field()
            raise ValidationError({
                field: 'Must contain at least one letter or digit to build a URL slug.',
            })

    def save(self, *args, **kwargs):
        """Validate (clean() derives the slug), then write."""
        # The slug is still blank before clean() runs; its uniqueness is
        # settled by build_slug and the unique constraint.
        self.full_clean(exclude=['slug'])
        try:
            with transaction.atomic():
                super().save(*args, **kwargs)
        except IntegrityError as exc:
            # Two writers raced for the same slug
            logger.warning('Slug collision while saving post %r: %s', self.slug, exc)
            raise ValidationError(
                {'slug': 'Post with this slug already exists.'}, code='unique',
            ) from exc

    def get_absolute_url(self):
        """Return the canonical URL for this post."""
        return reverse('blog:post_detail', kwargs={'slug': self.slug})

    def as_json(self):
        """Serialise the post for the JSON API."""
        return {
            'id': self.pk,
            'title': self.title,
            'content': self.content,
            'summary': self.summary,
            'slug': self.slug,
            'published': self.published,
            'created_at': self.created_at,
            'updated_at': self.updated_at,
        }
