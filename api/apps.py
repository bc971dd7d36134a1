"""App configuration for the api app."""

from django.apps import AppConfig


class ApiConfig(AppConfig):
    """Configuration for the JSON post API."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'api'
    verbose_name = 'JSON API'
