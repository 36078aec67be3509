"""
Deployment settings for running the relay as a standalone service.

Relay options come from ``sendgrid-rt.yaml`` (searched in /, /etc and the
working directory) and SGRT_* environment variables; see
``sendgrid_rt.conf``.
"""

import os

from dotenv import load_dotenv

from sendgrid_rt.conf import build_logging_config, get_verbosity, load_config_file

load_dotenv()

SENDGRID_RT = load_config_file()

SECRET_KEY = os.getenv("DJANGO_SECRET_KEY", "sendgrid-rt-has-no-sessions")

DEBUG = os.getenv("DJANGO_DEBUG", "false").lower() == "true"

ALLOWED_HOSTS = [
    host.strip()
    for host in os.getenv("DJANGO_ALLOWED_HOSTS", "*").split(",")
    if host.strip()
]

INSTALLED_APPS = [
    "sendgrid_rt",
]

MIDDLEWARE = [
    "sendgrid_rt.middleware.SharedKeyMiddleware",
]

ROOT_URLCONF = "sendgrid_rt.urls"

# /parse without the slash is a 404; a redirect would turn the POST into a GET
APPEND_SLASH = False

WSGI_APPLICATION = "sendgrid_rt.wsgi.application"

DATABASES = {}

# Raw messages are posted as a single form field
DATA_UPLOAD_MAX_MEMORY_SIZE = 64 * 1024 * 1024

USE_TZ = True

LOGGING = build_logging_config(get_verbosity(SENDGRID_RT))
