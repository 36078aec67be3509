import logging

from django.apps import AppConfig

logger = logging.getLogger("sendgrid_rt")


class SendgridRtConfig(AppConfig):
    name = "sendgrid_rt"
    verbose_name = "SendGrid to RT relay"

    def ready(self):
        from sendgrid_rt.conf import get_setting

        if not get_setting("KEY"):
            logger.warning(
                "No shared key configured; the relay accepts any request. "
                "Set SENDGRID_RT['KEY'] or SGRT_KEY."
            )
