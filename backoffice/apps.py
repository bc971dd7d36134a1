"""App configuration for the backoffice app."""

from django.apps import AppConfig


class BackofficeConfig(AppConfig):
    """Configuration for the basic-auth gated admin namespace."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'backoffice'
    verbose_name = 'Backoffice'
