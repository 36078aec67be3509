import logging
import time
from dataclasses import dataclass
from http.cookiejar import DefaultCookiePolicy

import requests

from sendgrid_rt import __version__

logger = logging.getLogger("sendgrid_rt")

# Body is read one byte per chunk so the deadline is checked between bytes
READ_CHUNK_SIZE = 1


def build_rt_endpoint(base_url, path="REST/1.0/NoAuth/mail-gateway"):
    """Join the RT base URL and the mail-gateway path with a single slash."""
    return f"{base_url.rstrip('/')}/{path.lstrip('/')}"


@dataclass(frozen=True)
class ForwardResult:
    """Outcome of a completed HTTP exchange with RT, whatever its status."""

    status_code: int
    body: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class TicketForwarder:
    """
    HTTP client for the RT NoAuth mail gateway.

    Posts one routed ticket per call as a urlencoded form. Never retries.
    A non-2xx answer from RT is returned as a ForwardResult; only transport
    failures, including running past ``timeout``, raise ForwardError.

    ``timeout`` bounds the whole exchange, not just the gap between socket
    reads: the body is streamed and the call is abandoned once the deadline
    passes. A session created here keeps no cookies.
    """

    def __init__(self, endpoint, connect_timeout=5, timeout=20, session=None):
        self.endpoint = endpoint
        self.connect_timeout = connect_timeout
        self.timeout = timeout
        if session is None:
            session = requests.Session()
            session.cookies.set_policy(DefaultCookiePolicy(allowed_domains=[]))
        self.session = session
        self.session.headers.setdefault(
            "User-Agent", f"sendgrid-rt/{__version__}"
        )

    def forward(self, ticket) -> ForwardResult:
        """
        POST ``action``, ``queue`` and ``message`` to the gateway.

        Raises ForwardError on connection failure, timeout, TLS error, or
        when the full response takes longer than ``timeout`` seconds.
        """
        deadline = time.monotonic() + self.timeout
        try:
            with self.session.post(
                self.endpoint,
                data=ticket.as_form(),
                timeout=(self.connect_timeout, self.timeout),
                stream=True,
            ) as response:
                result = ForwardResult(
                    status_code=response.status_code,
                    body=self._read_body(response, deadline),
                )
        except requests.exceptions.Timeout as e:
            logger.error(f"RT request timed out: POST {self.endpoint}: {e}")
            raise ForwardError(
                f"RT request timed out: {e}",
                cause=e,
                endpoint=self.endpoint,
            ) from e
        except requests.exceptions.RequestException as e:
            logger.error(f"RT post failed: POST {self.endpoint}: {e}")
            raise ForwardError(
                f"Post failed: {e}", cause=e, endpoint=self.endpoint
            ) from e

        logger.info(f"RT response: status={result.status_code} body={result.body!r}")
        return result

    def _read_body(self, response, deadline):
        """Drain the streamed body, giving up once ``deadline`` has passed."""
        chunks = []
        if time.monotonic() > deadline:
            raise requests.exceptions.ReadTimeout(
                f"RT request exceeded {self.timeout}s"
            )
        for chunk in response.iter_content(chunk_size=READ_CHUNK_SIZE):
            chunks.append(chunk)
            if time.monotonic() > deadline:
                raise requests.exceptions.ReadTimeout(
                    f"RT request exceeded {self.timeout}s"
                )

        content = b"".join(chunks)
        encoding = response.encoding or response.apparent_encoding or "utf-8"
        try:
            return content.decode(encoding, errors="replace")
        except LookupError:
            return content.decode("utf-8", errors="replace")

    def close(self):
        self.session.close()


class ForwardError(Exception):
    """Raised when a ticket could not be delivered to RT at transport level."""

    def __init__(self, message, cause=None, endpoint=None):
        super().__init__(message)
        self.cause = cause
        self.endpoint = endpoint