from django.apps import AppConfig


class CoreConfig(AppConfig):
    """Shared booking infrastructure: tokens, rate limiting, errors."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'core'
    verbose_name = 'Core'
