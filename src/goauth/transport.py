"""HTTP transport used by the flow engines.

The flows only need "send this request, give me the body". Transports never
raise: a failed round trip yields the error response body when the server
sent one, and an empty string otherwise.
"""

from collections.abc import Mapping
from types import TracebackType
from typing import Protocol, runtime_checkable

import httpx
from structlog import get_logger

from goauth.config import OAuthSettings, get_settings


logger = get_logger(__name__)

PREVIEW_HEAD = 100
PREVIEW_TAIL = 50


@runtime_checkable
class Transport(Protocol):
    """Blocking HTTP collaborator for the flow engines."""

    def fetch(self, url: str, headers: Mapping[str, str] | None = None) -> str:
        """GET ``url`` and return the response body."""
        ...

    def post_form(
        self,
        url: str,
        data: Mapping[str, str],
        headers: Mapping[str, str] | None = None,
    ) -> str:
        """POST ``data`` as a form body and return the response body."""
        ...


def truncate_response_text(response_text: str) -> str:
    """Shorten an error body from a token endpoint for a single log line.

    Google's error pages can be large HTML documents; the head usually names
    the problem and the tail sometimes carries a request id.
    """
    if len(response_text) <= PREVIEW_HEAD:
        return response_text
    head = response_text[:PREVIEW_HEAD]
    if len(response_text) <= PREVIEW_HEAD + 2 * PREVIEW_TAIL:
        return f"{head}..."
    return f"{head}...{response_text[-PREVIEW_TAIL:]}"


def _redact_url(url: str) -> str:
    # Query strings carry nonces, tokens and signatures
    return url.split("?", 1)[0]


class HttpxTransport:
    """Transport backed by a synchronous ``httpx.Client``.

    Each flow instance should own its transport; the underlying client is
    not shared unless one is passed in explicitly.
    """

    def __init__(
        self,
        settings: OAuthSettings | None = None,
        http_client: httpx.Client | None = None,
    ):
        """Initialize the transport.

        Args:
            settings: Timeout, user agent and logging settings
            http_client: Optional externally managed httpx client

        """
        self.settings = settings or get_settings()
        self._owns_client = http_client is None
        self._client = http_client or httpx.Client(
            timeout=self.settings.request_timeout,
            headers={"User-Agent": self.settings.user_agent},
        )

    def __enter__(self) -> "HttpxTransport":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying client if this transport created it."""
        if self._owns_client:
            self._client.close()

    def fetch(self, url: str, headers: Mapping[str, str] | None = None) -> str:
        return self._send("GET", url, headers=headers)

    def post_form(
        self,
        url: str,
        data: Mapping[str, str],
        headers: Mapping[str, str] | None = None,
    ) -> str:
        return self._send("POST", url, headers=headers, data=data)

    def _send(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        data: Mapping[str, str] | None = None,
    ) -> str:
        try:
            response = self._client.request(
                method,
                url,
                headers=dict(headers) if headers else None,
                data=dict(data) if data is not None else None,
                timeout=self.settings.request_timeout,
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning(
                "oauth_http_request_failed",
                method=method,
                url=_redact_url(url),
                error=str(e),
                error_type=type(e).__name__,
            )
            return ""

        if response.is_error:
            self._log_error_response(method, url, response)
        else:
            logger.debug(
                "oauth_http_request_completed",
                method=method,
                url=_redact_url(url),
                status_code=response.status_code,
            )
        return response.text

    def _log_error_response(
        self, method: str, url: str, response: httpx.Response
    ) -> None:
        if self.settings.verbose_errors:
            logger.error(
                "oauth_http_error_response",
                method=method,
                url=_redact_url(url),
                status_code=response.status_code,
                response_text=response.text,
            )
        else:
            logger.error(
                "oauth_http_error_response_compact",
                method=method,
                url=_redact_url(url),
                status_code=response.status_code,
                response_preview=truncate_response_text(response.text),
                verbose_hint="set GOAUTH_VERBOSE_ERRORS=true for full response",
            )
