import logging
from dataclasses import dataclass

from sendgrid_rt.mail.inbound_message import InboundEnvelope
from sendgrid_rt.rules import Rule, RuleTable

logger = logging.getLogger("sendgrid_rt")


@dataclass(frozen=True)
class RoutedTicket:
    """A message bound for one RT queue with one mail-gateway action."""

    queue: str
    action: str
    message: str

    @classmethod
    def from_rule(cls, rule: Rule, message: str) -> "RoutedTicket":
        return cls(queue=rule.queue, action=rule.action, message=message)

    def as_form(self) -> dict:
        """Form fields expected by the RT mail gateway."""
        return {
            "action": self.action,
            "queue": self.queue,
            "message": self.message,
        }


class Router:
    """
    Picks the RT queue and action for an inbound message.

    The first envelope recipient present in the rule table decides the
    route. Recipient order matters: an earlier match always wins over a
    later one. With no match the default rule applies.
    """

    def __init__(self, table: RuleTable, default: Rule):
        self.table = table
        self.default = default

    def route(self, envelope: InboundEnvelope, body: str) -> RoutedTicket:
        for address in envelope.recipients:
            rule = self.table.resolve(address)
            if rule is not None:
                logger.info(
                    f"Calculated route: address={address} "
                    f"queue={rule.queue} action={rule.action}"
                )
                return RoutedTicket.from_rule(rule, body)

        logger.info(
            f"No rule for recipients {list(envelope.recipients)}, using default "
            f"queue={self.default.queue} action={self.default.action}"
        )
        return RoutedTicket.from_rule(self.default, body)
