import json
import logging
import re
from io import BytesIO

from django.core.exceptions import SuspiciousOperation
from django.core.files.uploadhandler import MemoryFileUploadHandler
from django.http import QueryDict
from django.http.multipartparser import MultiPartParser, MultiPartParserError
from django.utils.http import parse_header_parameters

from sendgrid_rt.mail.inbound_message import InboundEnvelope, InboundMessage

logger = logging.getLogger("sendgrid_rt")

MEDIA_TYPE_PATTERN = re.compile(r"^[\w.+-]+/[\w.+-]+$")

URLENCODED = "application/x-www-form-urlencoded"


class DecodeError(ValueError):
    """Raised when an inbound webhook payload cannot be decoded."""

    def __init__(self, reason):
        super().__init__(reason)
        self.reason = reason


def decode(content_type: str, raw_body: bytes) -> InboundMessage:
    """
    Decode a SendGrid Inbound Parse submission.

    Args:
        content_type: The request's Content-Type header, parameters included.
        raw_body: The fully buffered request body.

    Returns:
        InboundMessage built from the ``email``, ``envelope``, ``to``,
        ``cc``, ``from`` and ``subject`` fields. Other fields are ignored.

    Raises:
        DecodeError: If the content type is malformed or not a form
            encoding, the form body cannot be parsed, or the ``envelope``
            field is missing or is not valid envelope JSON.
    """
    fields = parse_form(content_type, raw_body)

    envelope_json = fields.get("envelope")
    if envelope_json is None:
        raise DecodeError("Missing 'envelope' field.")

    return InboundMessage(
        raw_body=fields.get("email", ""),
        envelope=parse_envelope(envelope_json),
        subject=fields.get("subject", ""),
        cc=fields.get("cc", ""),
        from_header=fields.get("from", ""),
        to_header=fields.get("to", ""),
    )


def parse_form(content_type: str, raw_body: bytes) -> QueryDict:
    """Parse a multipart or urlencoded body into its text fields."""
    media_type, params = parse_header_parameters(content_type or "")
    if not MEDIA_TYPE_PATTERN.match(media_type):
        raise DecodeError(f"Malformed Content-Type header: {content_type!r}")

    logger.debug(f"Decoding {media_type} body ({len(raw_body)} bytes) {params}")

    try:
        if media_type.startswith("multipart/"):
            meta = {
                "CONTENT_TYPE": content_type,
                "CONTENT_LENGTH": str(len(raw_body)),
            }
            parser = MultiPartParser(
                meta,
                BytesIO(raw_body),
                [MemoryFileUploadHandler()],
                encoding=params.get("charset"),
            )
            fields, _files = parser.parse()
            return fields
        if media_type == URLENCODED:
            return QueryDict(raw_body, encoding=params.get("charset"))
    except MultiPartParserError as exc:
        raise DecodeError(f"Invalid multipart body: {exc}") from exc
    except SuspiciousOperation as exc:
        raise DecodeError(f"Rejected form body: {exc}") from exc
    except LookupError as exc:
        raise DecodeError(f"Unknown charset: {params.get('charset')}") from exc

    raise DecodeError(f"Unsupported Content-Type: {media_type}")


def parse_envelope(text: str) -> InboundEnvelope:
    """
    Parse the JSON ``envelope`` field: ``{"to": [str, ...], "from": str}``.

    A missing or null ``to`` gives an empty recipient list.
    """
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, TypeError) as exc:
        raise DecodeError(f"Invalid envelope JSON: {exc}") from exc

    if not isinstance(data, dict):
        raise DecodeError("Envelope must be a JSON object.")

    recipients = data.get("to")
    if recipients is None:
        recipients = []
    if not isinstance(recipients, list) or not all(
        isinstance(address, str) for address in recipients
    ):
        raise DecodeError("Envelope 'to' must be a list of strings.")

    sender = data.get("from")
    if sender is None:
        sender = ""
    if not isinstance(sender, str):
        raise DecodeError("Envelope 'from' must be a string.")

    return InboundEnvelope(recipients=tuple(recipients), sender=sender)
