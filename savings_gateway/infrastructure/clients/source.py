"""Rate source HTTP client for fetching raw payloads"""

from typing import Any, Dict, Optional
from urllib.parse import urlsplit

import httpx
from savings_gateway.domain.exceptions import SourceUnavailableError
from savings_gateway.config import settings


class SourceClient:
    """Client for external rate pages and rate APIs"""

    def __init__(self, timeout: float | None = None, transport: httpx.AsyncBaseTransport | None = None):
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    def _headers(self, extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        headers = {
            "User-Agent": settings.http_user_agent,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "Accept-Language": settings.http_accept_language,
        }
        headers.update(extra or {})
        return headers

    async def fetch(
        self,
        url: str,
        method: str = "GET",
        body: str | None = None,
        content_type: str | None = None,
        expect_json: bool = False,
    ) -> Any:
        """
        Fetch one source payload.

        GET requests return the page text (or decoded JSON with
        expect_json). POST requests send `body` as-is with `content_type`
        and always decode JSON, mimicking the XHR calls the sites make.

        Raises:
            SourceUnavailableError: On timeout, HTTP errors, or invalid JSON
        """
        extra: Dict[str, str] = {}
        if method.upper() == "POST":
            parts = urlsplit(url)
            origin = f"{parts.scheme}://{parts.netloc}"
            extra = {
                "Content-Type": content_type or "application/json; charset=utf-8",
                "Accept": "application/json, text/javascript, */*; q=0.01",
                "X-Requested-With": "XMLHttpRequest",
                "Origin": origin,
                "Referer": origin + "/",
            }
            expect_json = True
        elif expect_json:
            extra = {"Accept": "application/json, */*"}

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport, follow_redirects=True) as client:
            try:
                response = await client.request(
                    method.upper(),
                    url,
                    content=body,
                    headers=self._headers(extra),
                )
                response.raise_for_status()
                return response.json() if expect_json else response.text

            except httpx.TimeoutException as e:
                raise SourceUnavailableError(f"Source timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                raise SourceUnavailableError(f"Source error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                raise SourceUnavailableError(f"Source unreachable: {e}") from e
            except ValueError as e:
                raise SourceUnavailableError(f"Invalid JSON from source: {e}") from e
