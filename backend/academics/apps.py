from django.apps import AppConfig


class AcademicsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'academics'
    verbose_name = 'Academic Records'

    def ready(self):
        # import signals to ensure receivers are registered
        from . import signals  # noqa: F401
