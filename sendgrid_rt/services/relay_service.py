import functools
import logging

from sendgrid_rt.conf import get_rt_endpoint, get_setting
from sendgrid_rt.drivers.rt_client import ForwardResult, TicketForwarder
from sendgrid_rt.mail.inbound_message import InboundMessage
from sendgrid_rt.rules import (
    Rule,
    RuleTable,
    default_rule_from_config,
    rules_from_config,
)
from sendgrid_rt.services.routing_service import RoutedTicket, Router

logger = logging.getLogger("sendgrid_rt")


class RelayService:
    """
    Routes inbound messages to RT queues and forwards them.

    Holds the process-wide, read-only relay context: rule table, default
    rule, router and forwarder. Safe to share between request threads.

    Processing flow:
    1. Route on the envelope recipients (first match, else default)
    2. POST the routed ticket to the RT mail gateway
    """

    def __init__(self, table: RuleTable, default: Rule, forwarder: TicketForwarder):
        self.table = table
        self.default = default
        self.router = Router(table, default)
        self.forwarder = forwarder

    @classmethod
    def from_settings(cls) -> "RelayService":
        """
        Build the relay context from SENDGRID_RT settings.

        Raises ImproperlyConfigured if the rule list or default is malformed.
        """
        table = RuleTable.build(rules_from_config(get_setting("RULES")))
        default = default_rule_from_config(get_setting("DEFAULT"))
        forwarder = TicketForwarder(
            get_rt_endpoint(),
            connect_timeout=get_setting("CONNECT_TIMEOUT"),
            timeout=get_setting("TIMEOUT"),
        )
        logger.debug(f"Rules: {table!r}")
        logger.debug(f"Default rule: {default!r}")
        return cls(table, default, forwarder)

    @property
    def endpoint(self) -> str:
        return self.forwarder.endpoint

    def route(self, message: InboundMessage) -> RoutedTicket:
        return self.router.route(message.envelope, message.raw_body)

    def process(self, message: InboundMessage) -> ForwardResult:
        """
        Route and forward one message.

        Returns the RT ForwardResult, whatever its status code. Raises
        ForwardError if RT could not be reached.
        """
        ticket = self.route(message)
        logger.debug(
            f"Posting to RT: queue={ticket.queue} action={ticket.action}"
        )
        result = self.forwarder.forward(ticket)
        if not result.ok:
            logger.warning(
                f"RT answered {result.status_code} for queue={ticket.queue}"
            )
        return result


@functools.lru_cache(maxsize=None)
def get_relay_service() -> RelayService:
    """Return the process-wide RelayService, building it on first use."""
    return RelayService.from_settings()
