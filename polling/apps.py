"""
App configuration for the polling app.

Owns sessions and questions and the lifecycle around them.  Signal
receivers are imported on startup so session changes are pushed to
connected clients.
"""

from django.apps import AppConfig


class PollingConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "polling"
    verbose_name = "Polling (sessions & questions)"

    def ready(self):
        # import signals so receivers register
        from . import signals  # noqa
