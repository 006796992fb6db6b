"""
Celery configuration for the bookshop project.

DJANGO_SETTINGS_MODULE is set before the app is instantiated so Celery
reads the Django settings (CELERY_ prefix).
"""

import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

app = Celery("bookshop")

app.config_from_object("django.conf:settings", namespace="CELERY")

# Picks up tasks.py from every installed app (core, orders)
app.autodiscover_tasks()
