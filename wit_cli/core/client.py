"""
Core HTTP client for the Wit.ai API.

Handles configuration, the transport seam, status checking and JSON
(de)serialization. Every call is a single request/response round trip.
"""

import http.client
import json
import logging
import os
import urllib.error
import urllib.request
from dataclasses import dataclass
from typing import Any, Protocol

logger = logging.getLogger(__name__)

# Configuration
DEFAULT_BASE_URL = "https://api.wit.ai"
DEFAULT_TIMEOUT = 60


class CLIError(Exception):
    """Base error class for CLI errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for JSON output."""
        result: dict[str, Any] = {"error": self.message}
        if self.details:
            result["details"] = self.details
        return result


class APIError(CLIError):
    """API error with status code and message."""

    def __init__(self, message: str, status: int = 0, details: dict | None = None):
        super().__init__(message, details)
        self.status = status

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for JSON output."""
        result = super().to_dict()
        if self.status:
            result["status"] = self.status
        return result


class SerializationError(APIError):
    """A domain object could not be encoded as a request body."""


class TransportError(APIError):
    """The HTTP call failed outright (connection, DNS, TLS, timeout)."""


class UnexpectedStatusError(APIError):
    """The API answered with a status other than 200."""

    def __init__(self, status: int, body: bytes = b""):
        details: dict[str, Any] = {}
        if body:
            try:
                details["response"] = json.loads(body)
            except (ValueError, UnicodeDecodeError):
                details["response"] = body.decode("utf-8", errors="replace")
        super().__init__(f"Unexpected status {status}", status=status, details=details)
        self.body = body


class DeserializationError(APIError):
    """A 200 response body did not parse into the expected type."""


class ValidationError(CLIError):
    """Validation error for local input/data issues (not API errors)."""


# =============================================================================
# Transport
# =============================================================================


@dataclass(frozen=True)
class Response:
    """Raw HTTP response: body bytes plus status code."""

    body: bytes
    status: int


class Transport(Protocol):
    """
    Four-verb HTTP capability used by APIClient.

    Implementations return a Response for any status code and raise
    TransportError only when no response was received.
    """

    def get(self, url: str) -> Response: ...

    def post(self, url: str, body: bytes, content_type: str = "application/json") -> Response: ...

    def put(self, url: str, body: bytes, content_type: str = "application/json") -> Response: ...

    def delete(self, url: str) -> Response: ...


class UrllibTransport:
    """Transport built on urllib.request."""

    def __init__(
        self,
        access_token: str | None = None,
        api_version: str | None = None,
        timeout: int = DEFAULT_TIMEOUT,
    ):
        self.access_token = access_token
        self.api_version = api_version
        self.timeout = timeout

    def _headers(self, content_type: str | None = None) -> dict[str, str]:
        if self.api_version:
            accept = f"application/vnd.wit.{self.api_version}+json"
        else:
            accept = "application/json"
        headers = {"Accept": accept}
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        if content_type:
            headers["Content-Type"] = content_type
        return headers

    def _send(
        self,
        method: str,
        url: str,
        body: bytes | None = None,
        content_type: str | None = None,
    ) -> Response:
        logger.debug("%s %s", method, url)
        req = urllib.request.Request(url, data=body, headers=self._headers(content_type), method=method)

        try:
            with urllib.request.urlopen(req, timeout=self.timeout) as response:
                result = Response(body=response.read(), status=response.status)

        except urllib.error.HTTPError as e:
            # A non-2xx reply is still a response; status handling belongs to the caller
            result = Response(body=e.read() or b"", status=e.code)

        except urllib.error.URLError as e:
            logger.warning("%s %s failed: %s", method, url, e.reason)
            raise TransportError(f"Connection error: {e.reason}") from e

        except TimeoutError as e:
            logger.warning("%s %s timed out", method, url)
            raise TransportError(f"Request timed out after {self.timeout} seconds") from e

        except (http.client.HTTPException, ConnectionError, OSError) as e:
            logger.warning("%s %s failed: %r", method, url, e)
            raise TransportError(f"Connection error: {e!r}") from e

        logger.debug("%s %s -> %d", method, url, result.status)
        return result

    def get(self, url: str) -> Response:
        """Make a GET request."""
        return self._send("GET", url)

    def post(self, url: str, body: bytes, content_type: str = "application/json") -> Response:
        """Make a POST request."""
        return self._send("POST", url, body, content_type)

    def put(self, url: str, body: bytes, content_type: str = "application/json") -> Response:
        """Make a PUT request."""
        return self._send("PUT", url, body, content_type)

    def delete(self, url: str) -> Response:
        """Make a DELETE request."""
        return self._send("DELETE", url)


# =============================================================================
# API Client
# =============================================================================


class APIClient:
    """
    Low-level HTTP client for the Wit.ai API.

    Handles:
    - Configuration from arguments or environment
    - HTTP methods (GET, POST, PUT, DELETE) through a Transport
    - Status checking and JSON encoding/decoding
    """

    def __init__(
        self,
        access_token: str | None = None,
        base_url: str | None = None,
        api_version: str | None = None,
        timeout: int = DEFAULT_TIMEOUT,
        transport: Transport | None = None,
    ):
        """
        Initialize the API client.

        Args:
            access_token: Wit access token (or WIT_ACCESS_TOKEN env var)
            base_url: API base URL (or WIT_BASE_URL env var)
            api_version: API version for the Accept header (or WIT_API_VERSION env var)
            timeout: Request timeout in seconds
            transport: Transport override, mainly for tests

        """
        self.access_token = access_token or os.environ.get("WIT_ACCESS_TOKEN")
        env_base_url = os.environ.get("WIT_BASE_URL", DEFAULT_BASE_URL)
        self.base_url = (base_url or env_base_url).rstrip("/")
        self.api_version = api_version or os.environ.get("WIT_API_VERSION")
        self.timeout = timeout
        self.transport: Transport = transport or UrllibTransport(
            access_token=self.access_token,
            api_version=self.api_version,
            timeout=timeout,
        )

    def _build_url(self, path: str) -> str:
        """Build full URL from path."""
        return f"{self.base_url}{path}"

    @staticmethod
    def _check(response: Response) -> bytes:
        if response.status != 200:
            raise UnexpectedStatusError(response.status, response.body)
        return response.body

    @staticmethod
    def encode(data: Any) -> bytes:
        """Encode a request payload as JSON bytes."""
        try:
            return json.dumps(data).encode("utf-8")
        except (TypeError, ValueError) as e:
            raise SerializationError(f"Cannot encode request body: {e}") from e

    @staticmethod
    def decode(body: bytes) -> Any:
        """Decode a JSON response body."""
        try:
            return json.loads(body)
        except (ValueError, UnicodeDecodeError) as e:
            raise DeserializationError(f"Invalid JSON response: {e}") from e

    # =========================================================================
    # HTTP Methods
    # =========================================================================

    def get(self, path: str) -> bytes:
        """Make a GET request and return the body of a 200 response."""
        return self._check(self.transport.get(self._build_url(path)))

    def post(self, path: str, body: bytes, content_type: str = "application/json") -> bytes:
        """Make a POST request and return the body of a 200 response."""
        return self._check(self.transport.post(self._build_url(path), body, content_type))

    def put(self, path: str, body: bytes, content_type: str = "application/json") -> bytes:
        """Make a PUT request and return the body of a 200 response."""
        return self._check(self.transport.put(self._build_url(path), body, content_type))

    def delete(self, path: str) -> bytes:
        """Make a DELETE request and return the body of a 200 response."""
        return self._check(self.transport.delete(self._build_url(path)))

    def get_json(self, path: str) -> Any:
        """Make a GET request and decode the JSON body."""
        return self.decode(self.get(path))

    def post_json(self, path: str, data: Any) -> Any:
        """POST a JSON payload and decode the JSON body."""
        return self.decode(self.post(path, self.encode(data)))
