import logging

from django.core.exceptions import ImproperlyConfigured
from django.core.management import call_command
from django.core.management.base import BaseCommand, CommandError

from sendgrid_rt.conf import get_setting

logger = logging.getLogger("sendgrid_rt")


class Command(BaseCommand):
    help = (
        "Serve the SendGrid Inbound Parse webhook and relay messages to the "
        "RT mail gateway."
    )

    def add_arguments(self, parser):
        parser.add_argument(
            "--address",
            default=None,
            help="Address to bind (default: SENDGRID_RT['ADDRESS']).",
        )
        parser.add_argument(
            "--port",
            type=int,
            default=None,
            help="Port to bind (default: SENDGRID_RT['PORT']).",
        )

    def handle(self, *args, **options):
        from sendgrid_rt.services.relay_service import get_relay_service

        if options["verbosity"] >= 2 or get_setting("VERBOSE"):
            logger.setLevel(logging.DEBUG)

        address = options["address"] or get_setting("ADDRESS")
        port = options["port"] or get_setting("PORT")

        try:
            relay = get_relay_service()
        except ImproperlyConfigured as exc:
            raise CommandError(f"Invalid relay configuration: {exc}") from exc

        logger.info(f"Server start: address={address} port={port}")
        logger.info(f"RT endpoint: {relay.endpoint}")

        call_command(
            "runserver",
            f"{address}:{port}",
            use_reloader=False,
            use_threading=True,
        )
