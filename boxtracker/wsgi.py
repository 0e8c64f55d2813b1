"""
WSGI config for boxtracker.

The box-number backfill runs in the gunicorn master (see gunicorn.conf.py),
so workers importing this module only serve traffic.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "boxtracker.settings")

application = get_wsgi_application()
