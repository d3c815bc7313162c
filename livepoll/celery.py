"""
Celery configuration for the live polling backend.

This module defines and exposes a Celery application instance.  Celery
discovers tasks by inspecting any `tasks.py` modules in installed apps;
the cascade delete/reset steps and the stale-session sweep live in
`polling.tasks`.
"""
import os
from celery import Celery

# Set default Django settings for Celery to pick configuration from settings
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "livepoll.settings.dev")

app = Celery("livepoll")

# Namespacing Celery settings with the "CELERY_" prefix in Django settings
app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()
