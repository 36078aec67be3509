import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "sendgrid_rt.settings")

application = get_wsgi_application()

from sendgrid_rt.services.relay_service import get_relay_service  # noqa: E402

# Build the relay at load time so bad RULES or DEFAULT stop the server from starting
get_relay_service()
