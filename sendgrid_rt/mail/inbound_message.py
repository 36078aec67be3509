from dataclasses import dataclass, field


@dataclass(frozen=True)
class InboundEnvelope:
    """
    SMTP envelope reported by SendGrid in the ``envelope`` form field.

    ``recipients`` is the authoritative delivery list; it can differ from
    the ``To`` header (BCC, header rewriting, aliases).
    """

    recipients: tuple = ()
    sender: str = ""


@dataclass(frozen=True)
class InboundMessage:
    """
    One inbound email as posted by SendGrid Inbound Parse (raw mode).

    Only ``raw_body`` and ``envelope`` take part in routing; the header
    fields are kept for logging.
    """

    raw_body: str
    envelope: InboundEnvelope = field(default_factory=InboundEnvelope)
    subject: str = ""
    cc: str = ""
    from_header: str = ""
    to_header: str = ""

    @property
    def recipients(self) -> tuple:
        return self.envelope.recipients
