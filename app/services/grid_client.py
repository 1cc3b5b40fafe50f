"""
Grid client.

Thin asynchronous HTTP client for the StorageGRID tenant management API.
Every request is sent relative to `{address}/api/v4`, carries the bearer
token obtained through `authorize()` (or configured up front) and is
checked against an expected status code.

Handled responsibilities:
    - Exchange of tenant credentials for a bearer token
    - Sending JSON requests and returning the raw response body
    - Reporting status code mismatches and network failures as `TransportError`
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import httpx

from app.core.errors import TransportError
from app.util.grid_helpers import API_AUTHORIZE, REQUEST_TIMEOUT, get_base_url

logger = logging.getLogger(__name__)


@dataclass
class GridResponse:
    body: bytes
    status_code: int
    headers: Dict[str, str] = field(default_factory=dict)

    def json(self) -> Any:
        return json.loads(self.body)


class GridClient:
    """
    Client bound to a single grid tenant.

    Args:
        address (str): Base address of the grid (e.g. `https://grid.example.com`).
        token (str, optional): Bearer token; can be obtained later with `authorize()`.
        insecure (bool): Disable TLS certificate verification.
        timeout (float): Per-request timeout in seconds.
        transport (httpx.AsyncBaseTransport, optional): Custom transport, mostly for tests.

    Example:
        >>> client = GridClient("https://grid.example.com")
        >>> await client.authorize("root", "secret", "27733035335563454172")
        >>> response = await client.send_request("GET", "/org/containers/photos/region")
    """

    def __init__(
        self,
        address: str,
        token: Optional[str] = None,
        insecure: bool = False,
        timeout: float = REQUEST_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = get_base_url(address)
        self.token = token
        self.insecure = insecure
        self.timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(verify=not self.insecure, timeout=self.timeout, transport=self._transport)

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def send_request(self, method: str, path: str, payload: Any = None, expected_status: int = 200) -> GridResponse:
        """
        Sends a request to the management API.

        Args:
            method (str): HTTP method.
            path (str): Path relative to `/api/v4` (e.g. `/org/containers`).
            payload (Any, optional): JSON-compatible body, or already encoded bytes.
            expected_status (int): Status code the call must return; 0 accepts any.

        Raises:
            TransportError: On network failure (status 502) or when the grid
                answers with another status code than `expected_status`.

        Returns:
            GridResponse: Raw body, status code and headers of the response.
        """

        url = f"{self.base_url}{path}"
        if isinstance(payload, bytes):
            content = payload
        elif payload is not None or method in ("POST", "PUT"):
            content = json.dumps(payload).encode("utf-8")
        else:
            content = None

        logger.debug("%s %s", method, url)

        try:
            async with self._client() as client:
                response = await client.request(method, url, content=content, headers=self._headers())
        except httpx.RequestError as e:
            logger.error("Request %s %s failed: %s", method, url, e)
            raise TransportError(status_code=502, detail=str(e))

        if expected_status and response.status_code != expected_status:
            logger.debug("%s %s returned %s (expected %s)", method, url, response.status_code, expected_status)
            raise TransportError(status_code=response.status_code, detail=response.text, expected=expected_status)

        return GridResponse(body=response.content, status_code=response.status_code, headers=dict(response.headers))

    async def authorize(self, username: str, password: str, account_id: Optional[str] = None) -> str:
        """
        Exchanges tenant credentials for a bearer token and stores it on the client.

        Args:
            username (str): Tenant user name.
            password (str): Tenant user password.
            account_id (str, optional): Tenant account identifier.

        Raises:
            TransportError: If the grid refuses the credentials or answers
                without a token.

        Returns:
            str: The bearer token.
        """

        payload = {
            "accountId": account_id,
            "username": username,
            "password": password,
            "cookie": True,
            "csrfToken": False,
        }

        self.token = None
        response = await self.send_request("POST", API_AUTHORIZE, payload, 200)

        try:
            token = response.json().get("data")
        except (ValueError, AttributeError):
            token = None
        if not isinstance(token, str) or not token:
            raise TransportError(status_code=response.status_code, detail="authorization response did not contain a token")

        self.token = token
        logger.info("Authorized against %s as %s", self.base_url, username)
        return token
