from django.apps import AppConfig


class VisitsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'visits'
    verbose_name = 'Farm Visits'

    def ready(self):
        """Import signals when app is ready."""
        import visits.signals  # noqa
