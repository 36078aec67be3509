from sendgrid_rt.drivers.rt_client import (
    ForwardError,
    ForwardResult,
    TicketForwarder,
    build_rt_endpoint,
)

__all__ = [
    "ForwardError",
    "ForwardResult",
    "TicketForwarder",
    "build_rt_endpoint",
]
