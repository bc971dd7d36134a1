"""
Views for the admin namespace.

Access control is done by AdminBasicAuthMiddleware before any of these run.
"""

from django.views.generic import TemplateView

from blog.models import Post


class DashboardView(TemplateView):
    """Landing page for the admin namespace: post counts and a link to the editor."""

    template_name = 'backoffice/dashboard.html'

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        total = Post.objects.count()
        published = Post.objects.published().count()
        context.update({
            'total_count': total,
            'published_count': published,
            'draft_count': total - published,
        })
        return context
