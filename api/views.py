"""
JSON API for blog posts, consumed by the front-page post list.

Provides:
- PostListView: every post as a JSON array
- PostDetailView: one post by id
- NewPostView: an unsaved, default post as a form scaffold

Only GET is implemented; the other verbs answer 405.
"""

import logging

from django.conf import settings
from django.http import JsonResponse
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt

from blog.models import Post

logger = logging.getLogger(__name__)


@method_decorator(csrf_exempt, name='dispatch')
class ApiView(View):
    """Base class for API endpoints: JSON errors instead of HTML pages."""

    def get_queryset(self):
        """All posts, or just the published ones if drafts are hidden."""
        if settings.BLOG_API_INCLUDE_UNPUBLISHED:
            return Post.objects.list_all()
        return Post.objects.published()

    def http_method_not_allowed(self, request, *args, **kwargs):
        logger.info('Method %s not allowed on %s', request.method, request.path)
        response = JsonResponse({'error': f'Method {request.method} not allowed.'}, status=405)
        response['Allow'] = ', '.join(self._allowed_methods())
        return response


class PostListView(ApiView):
    """GET /api/posts: every post."""

    def get(self, request, *args, **kwargs):
        posts = [post.as_json() for post in self.get_queryset()]
        return JsonResponse(posts, safe=False)


class PostDetailView(ApiView):
    """GET /api/posts/<id>: a single post."""

    def get(self, request, pk, *args, **kwargs):
        try:
            post = self.get_queryset().get(pk=pk)
        except Post.DoesNotExist:
            return JsonResponse({'error': 'Post not found.'}, status=404)
        return JsonResponse(post.as_json())


class NewPostView(ApiView):
    """GET /api/posts/new: default field values for a new post. Nothing is saved."""

    def get(self, request, *args, **kwargs):
        return JsonResponse(Post().as_json())
