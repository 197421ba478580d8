from django.apps import AppConfig


class LodgingConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'lodging'
    verbose_name = 'Lodging & Stay Pricing'

    def ready(self):
        """Import signals when app is ready."""
        import lodging.signals  # noqa
