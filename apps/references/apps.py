from django.apps import AppConfig


class ReferencesConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.references'
    verbose_name = 'Reference data'

    def ready(self):
        from . import signals
        signals.connect()
