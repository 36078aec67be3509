import hmac
import logging

from django.http import HttpResponseForbidden

from sendgrid_rt.conf import get_setting

logger = logging.getLogger("sendgrid_rt")


class SharedKeyMiddleware:
    """
    Middleware that gates every relay URL behind a shared key.

    The key is passed as the ``key`` query parameter, which is how the
    SendGrid Inbound Parse destination URL carries it. An empty configured
    key admits all requests.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        return self.get_response(request)

    def process_view(self, request, view_func, view_args, view_kwargs):
        expected = get_setting("KEY") or ""
        provided = request.GET.get("key", "")

        if hmac.compare_digest(provided.encode("utf-8"), expected.encode("utf-8")):
            return None

        logger.warning(
            f"Rejected request with invalid key "
            f"(path={request.path}, ip={_get_client_ip(request)})"
        )
        return HttpResponseForbidden("Forbidden", content_type="text/plain")


def _get_client_ip(request):
    """Extract the client IP from the request."""
    x_forwarded_for = request.META.get("HTTP_X_FORWARDED_FOR")
    if x_forwarded_for:
        return x_forwarded_for.split(",")[0].strip()
    return request.META.get("REMOTE_ADDR", "")
