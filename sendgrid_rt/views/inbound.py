import logging

from django.http import HttpResponse, HttpResponseBadRequest
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_POST

from sendgrid_rt.drivers.rt_client import ForwardError
from sendgrid_rt.mail.decoder import DecodeError, decode
from sendgrid_rt.services.relay_service import get_relay_service

logger = logging.getLogger("sendgrid_rt")


@require_GET
def index(request):
    """Liveness check."""
    return HttpResponse("Hello!\n", content_type="text/plain")


@csrf_exempt
@require_POST
def parse_webhook(request):
    """
    Receive a SendGrid Inbound Parse webhook and forward it to RT.

    The shared-key check runs in SharedKeyMiddleware before this view.

    URL pattern: /parse/

    Returns:
        400 if the payload cannot be decoded, 502 if RT is unreachable,
        200 once a forward was attempted, whatever status RT answered.
    """
    content_type = request.META.get("CONTENT_TYPE", "")

    try:
        message = decode(content_type, request.body)
    except DecodeError as exc:
        logger.warning(f"Failed to decode inbound webhook: {exc.reason}")
        return HttpResponseBadRequest(
            f"Failed to parse request: {exc.reason}", content_type="text/plain"
        )

    logger.info(
        f"Received email: from={message.from_header!r} to={message.to_header!r} "
        f"cc={message.cc!r} subject={message.subject!r} "
        f"envelope_to={list(message.envelope.recipients)} "
        f"envelope_from={message.envelope.sender!r}"
    )

    relay = get_relay_service()
    try:
        result = relay.process(message)
    except ForwardError as exc:
        logger.error(f"Failed to post data to RT: {exc}")
        return HttpResponse(
            "Bad Gateway", status=502, content_type="text/plain"
        )

    logger.info(f"Forwarded to RT (status={result.status_code})")
    return HttpResponse("OK", status=200, content_type="text/plain")
