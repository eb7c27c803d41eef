"""
HTTP transport for CardDAV requests.

Two variants exist and are chosen once, when the transport is built:

- SessionTransport sends every request through one long-lived
  requests.Session. Delta listings ask for address-data inline.
- FactoryTransport calls a factory for a fresh sender per request. Delta
  listings ask for etags only and changed cards are fetched with a single
  addressbook-multiget.

Both expose the same send()/request() methods, so callers never inspect
the sender's shape themselves.
"""

from __future__ import annotations

import abc
import contextlib
import logging
import threading
from collections.abc import Callable
from enum import Enum
from typing import TYPE_CHECKING, Optional, Union

import requests
from requests.exceptions import RequestException

from carddav_sync import __version__
from carddav_sync.dav.builders import DavRequest
from carddav_sync.dav.multistatus import MultiStatus, parse_multistatus
from carddav_sync.exceptions import TransportError

if TYPE_CHECKING:
    from carddav_sync.sync.models import Credentials

# HTTP timeout configuration
DEFAULT_TIMEOUT = 30.0  # seconds

USER_AGENT = f"carddav-sync/{__version__}"

logger = logging.getLogger(__name__)


class ListingMode(str, Enum):
    """How a transport variant performs the incremental delta listing."""

    INLINE = "inline"  # etag + address-data in the listing itself
    TWO_PHASE = "two_phase"  # etag-only listing, then one multiget


class Transport(abc.ABC):
    """
    Base transport: executes DavRequests and parses multi-status replies.

    Attributes:
        listing_mode: Delta listing variant used by incremental sync
        credentials: Optional basic-auth credentials
        timeout: Per-request timeout in seconds
    """

    listing_mode: ListingMode

    def __init__(
        self,
        credentials: Optional[Credentials] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.credentials = credentials
        self.timeout = timeout

    def _exclusive(self) -> contextlib.AbstractContextManager:
        """Context held around each request; a no-op unless the sender is shared."""
        return contextlib.nullcontext()

    @abc.abstractmethod
    def _session(self) -> requests.Session:
        """Return the sender to use for the next request."""

    def _release(self, session: requests.Session) -> None:
        """Hook called after each request with the sender that was used."""

    @property
    def auth(self) -> Optional[tuple[str, str]]:
        if self.credentials is None:
            return None
        return (self.credentials.username, self.credentials.password)

    def request(self, request: DavRequest, url: str) -> requests.Response:
        """
        Execute a request and return the raw response.

        Args:
            request: Request to send
            url: Absolute target URL

        Returns:
            The successful (2xx) response

        Raises:
            TransportError: On network failure, timeout or non-2xx status
        """
        headers = {"User-Agent": USER_AGENT, **request.headers}
        body = request.body.encode("utf-8") if request.body is not None else None

        logger.debug(f"{request.method} {url}")
        session = self._session()
        try:
            with self._exclusive():
                response = session.request(
                    request.method,
                    url,
                    data=body,
                    headers=headers,
                    auth=self.auth,
                    timeout=self.timeout,
                )
        except RequestException as e:
            raise TransportError(f"{request.method} {url} failed: {e}") from e
        finally:
            self._release(session)

        if not 200 <= response.status_code < 300:
            raise TransportError(
                f"{request.method} {url} returned {response.status_code}",
                status_code=response.status_code,
                body=response.text,
            )

        return response

    def send(self, request: DavRequest, url: str) -> MultiStatus:
        """
        Send a PROPFIND/REPORT and parse the multi-status reply.

        Raises:
            TransportError: If the request fails or the reply is not a
                multistatus document
        """
        response = self.request(request, url)
        result = parse_multistatus(response.content)
        logger.debug(f"{request.method} {url} -> {len(result)} responses")
        return result


class SessionTransport(Transport):
    """
    Transport that reuses a single requests.Session.

    requests does not promise that a Session is thread-safe, so requests
    from concurrent address book syncs take turns on it.
    """

    listing_mode = ListingMode.INLINE

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        credentials: Optional[Credentials] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        super().__init__(credentials=credentials, timeout=timeout)
        self.session = session if session is not None else requests.Session()
        self._lock = threading.Lock()

    def _exclusive(self) -> contextlib.AbstractContextManager:
        return self._lock

    def _session(self) -> requests.Session:
        return self.session

    def close(self) -> None:
        self.session.close()


class FactoryTransport(Transport):
    """Transport that asks a factory for a fresh sender on every request."""

    listing_mode = ListingMode.TWO_PHASE

    def __init__(
        self,
        factory: Callable[[], requests.Session] = requests.Session,
        credentials: Optional[Credentials] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        super().__init__(credentials=credentials, timeout=timeout)
        self.factory = factory

    def _session(self) -> requests.Session:
        return self.factory()

    def _release(self, session: requests.Session) -> None:
        session.close()

    def close(self) -> None:
        pass


Sender = Union[requests.Session, Callable[[], requests.Session], Transport]


def make_transport(
    sender: Optional[Sender] = None,
    credentials: Optional[Credentials] = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> Transport:
    """
    Build the transport variant matching the given sender.

    Args:
        sender: A requests.Session, a zero-argument callable returning a
            fresh session, or an existing Transport (returned unchanged).
            None creates a FactoryTransport over requests.Session.
        credentials: Optional basic-auth credentials
        timeout: Per-request timeout in seconds

    Returns:
        A Transport instance
    """
    if isinstance(sender, Transport):
        return sender
    if sender is None:
        return FactoryTransport(credentials=credentials, timeout=timeout)
    if not isinstance(sender, requests.Session) and callable(sender):
        return FactoryTransport(
            factory=sender, credentials=credentials, timeout=timeout
        )
    return SessionTransport(session=sender, credentials=credentials, timeout=timeout)
