from django.apps import AppConfig


class RepricerConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'repricer'
    verbose_name = 'Takealot repricer'
