from django.apps import AppConfig


class ActivityConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'activity'
    verbose_name = 'Activity'

    def ready(self):
        from .bus import init_activity_bus

        init_activity_bus()
