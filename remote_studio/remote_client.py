"""
Remote Workspace Client

Bridge to the remote host that owns the files and the coding agent.
Every call is a single JSON POST; failures surface as RemoteError.
"""

import httpx
from typing import Any, Dict, List, Optional
import logging

from .models import CodesRequest, NamesResponse, PromptRequest, PromptResponse

logger = logging.getLogger(__name__)

NAMES_ENDPOINT = "/pedir-nomes"
CODES_ENDPOINT = "/pedir-codigos"
PROMPT_ENDPOINT = "/send-prompt"

DEFAULT_HEADERS = {
    "Accept": "application/json",
    # Tunnelled hosts answer with an HTML interstitial unless this is set
    "ngrok-skip-browser-warning": "69420",
}


class RemoteError(RuntimeError):
    """A remote call failed: unreachable host, non-success status or bad JSON."""


class RemoteClient:
    """
    Client for the remote workspace endpoints.

    Abstracts the transport so the viewer state never touches httpx directly.
    """

    def __init__(
        self,
        base_url: str,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the remote client.

        Args:
            base_url: Remote host root (e.g., 'https://example.ngrok-free.dev')
            timeout: Request timeout in seconds; None waits indefinitely
            transport: Optional httpx transport, used to stub the network in tests
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            headers=DEFAULT_HEADERS,
            transport=transport,
        )

        logger.info(f"Remote client initialized with endpoint: {self.base_url}")

    async def _post(self, endpoint: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        POST a JSON payload and return the decoded JSON object.

        Raises:
            RemoteError: If the request fails or the body is not a JSON object
        """
        url = f"{self.base_url}{endpoint}"
        try:
            response = await self.client.post(url, json=payload)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(f"Remote request {endpoint} failed: {e}")
            raise RemoteError(f"Status {e.response.status_code}") from e
        except httpx.HTTPError as e:
            logger.error(f"Remote request {endpoint} failed: {e}")
            raise RemoteError(str(e) or e.__class__.__name__) from e

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"Remote request {endpoint} returned invalid JSON: {e}")
            raise RemoteError(f"Invalid JSON from {endpoint}") from e

        if not isinstance(data, dict):
            raise RemoteError(f"Unexpected response from {endpoint}: expected a JSON object")
        return data

    async def list_names(self) -> NamesResponse:
        """
        Ask the remote host for its flat list of file paths.

        Also serves as the connectivity probe.
        """
        data = await self._post(NAMES_ENDPOINT, {})
        names = data.get("names")
        if not isinstance(names, list) or not all(isinstance(n, str) for n in names):
            return NamesResponse(names=None)
        return NamesResponse(names=names)

    async def fetch_codes(self, names: List[str]) -> Dict[str, Any]:
        """
        Fetch the contents of several files in one request.

        Returns the raw JSON object; its shape (positional ``codes`` and/or
        named ``files``) is reconciled by the content cache.
        """
        request = CodesRequest(names=names)
        return await self._post(CODES_ENDPOINT, request.dict())

    async def send_prompt(self, prompt: str) -> PromptResponse:
        """Forward a free-text instruction to the remote agent."""
        request = PromptRequest(prompt=prompt)
        data = await self._post(PROMPT_ENDPOINT, request.dict())
        status = data.get("status")
        return PromptResponse(status=status if isinstance(status, str) else None)

    async def close(self):
        """Close the HTTP client."""
        if self.client:
            await self.client.aclose()

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()
