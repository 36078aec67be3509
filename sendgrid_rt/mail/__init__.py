from sendgrid_rt.mail.decoder import DecodeError, decode
from sendgrid_rt.mail.inbound_message import InboundEnvelope, InboundMessage

__all__ = [
    "DecodeError",
    "InboundEnvelope",
    "InboundMessage",
    "decode",
]
