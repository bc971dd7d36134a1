"""
Django admin configuration for the blog app.

Staff write and publish posts here. The slug is derived on save and shown
read-only; anything that fails model validation comes back as a form error.
"""

from django.contrib import admin

from .models import Post


@admin.register(Post)
class PostAdmin(admin.ModelAdmin):
    """
    Admin for blog posts.

    Workflow: write the post as a draft, then tick "published" to make it live.
    """

    list_display = ('title', 'slug', 'published', 'created_at')
    list_filter = ('published',)
    list_editable = ('published',)
    readonly_fields = ('slug', 'created_at', 'updated_at')
    list_per_page = 25

    fieldsets = (
        (None, {
            'fields': ('title', 'slug', 'published'),
        }),
        ('Content', {
            'fields': ('summary', 'content'),
            'description': (
                'summary: shown on the list page. '
                'content: full post body.'
            ),
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',),
        }),
    )
