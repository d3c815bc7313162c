from django.apps import AppConfig


class AudienceConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "audience"
    verbose_name = "Audience (participants & responses)"
