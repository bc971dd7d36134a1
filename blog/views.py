"""
Views for the Pressroom blog.

Provides:
- PostListView: paginated list of published posts
- PostDetailView: a single published post, looked up by slug (or id)
- AllPostsView: page shell for the client-side post list
"""

from django.conf import settings
from django.http import Http404
from django.urls import reverse
from django.views.generic import DetailView, ListView, TemplateView

from .models import Post


class PostListView(ListView):
    """
    Paginated list of published blog posts.

    ?page= falls back to page 1 when it is missing or not a positive number.
    """

    template_name = 'blog/post_list.html'
    context_object_name = 'posts'

    def get_paginate_by(self, queryset):
        return settings.BLOG_POSTS_PER_PAGE

    def get_queryset(self):
        """Only published posts are listed."""
        return Post.objects.published()

    def paginate_queryset(self, queryset, page_size):
        """Use the store's lenient paging instead of 404ing on bad page numbers."""
        page = queryset.page(self.request.GET.get(self.page_kwarg), page_size)
        return page.paginator, page, page.object_list, page.has_other_pages()


class PostDetailView(DetailView):
    """
    Full blog post page.

    Drafts return 404 so they cannot be previewed by guessing the slug.
    """

    template_name = 'blog/post_detail.html'
    context_object_name = 'post'

    def get_queryset(self):
        """Only allow access to published posts."""
        return Post.objects.published()

    def get_object(self, queryset=None):
        if queryset is None:
            queryset = self.get_queryset()
        try:
            return queryset.find_by_slug(self.kwargs['slug'])
        except Post.DoesNotExist:
            raise Http404('No published post matches the given slug.')


class AllPostsView(TemplateView):
    """Home page: mounts the script that loads every post from the JSON API."""

    template_name = 'home.html'

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context['posts_api_url'] = reverse('api:post_list')
        return context
