from django.apps import AppConfig


class GateConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'backend.gate'
