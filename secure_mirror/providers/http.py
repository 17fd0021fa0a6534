"""
Provider HTTP — Read-only REST access shared by the provider clients.

Wraps httpx with the error mapping the hook relies on: anything other than
a successful (or explicitly expected "absent") response becomes a
ProviderAPIError. httpx honors HTTP_PROXY / HTTPS_PROXY / NO_PROXY.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

import httpx

from ..config.models import ProviderSettings
from ..errors import ProviderAPIError

logger = logging.getLogger(__name__)

PER_PAGE = 100
_HTTP_ERROR_STATUS_THRESHOLD = 400
_RATE_LIMIT_STATUSES = (403, 429)


class ProviderHTTPClient:
    """Base for provider REST clients."""

    provider = "provider"
    default_api_url = ""

    def __init__(
        self,
        settings: ProviderSettings,
        http_client: Optional[httpx.Client] = None,
    ):
        self.settings = settings
        self.api_url = (settings.api_url or self.default_api_url).rstrip("/")
        self._client = http_client or httpx.Client(timeout=settings.timeout_s)

    def headers(self, purpose: str) -> Dict[str, str]:
        """Request headers, including auth for ``purpose``."""
        return {"User-Agent": "secure-mirror"}

    def close(self) -> None:
        self._client.close()

    def _url(self, path: str) -> str:
        if path.startswith(("http://", "https://")):
            return path
        return f"{self.api_url}{path}"

    def _get(self, path: str, purpose: str, params: Optional[Dict[str, Any]] = None) -> httpx.Response:
        url = self._url(path)
        logger.debug(f"[{self.provider}] GET {url}")
        try:
            return self._client.get(url, headers=self.headers(purpose), params=params)
        except httpx.HTTPError as e:
            raise ProviderAPIError.transport(self.provider, url, e) from e

    def _check(self, resp: httpx.Response) -> None:
        if resp.status_code < _HTTP_ERROR_STATUS_THRESHOLD:
            return
        if (
            resp.status_code in _RATE_LIMIT_STATUSES
            and resp.headers.get("x-ratelimit-remaining") == "0"
        ):
            raise ProviderAPIError(
                f"{self.provider} API rate limit exceeded for {resp.request.url}",
                status_code=resp.status_code,
            )
        raise ProviderAPIError.http_error(self.provider, str(resp.request.url), resp.status_code)

    def _json(self, resp: httpx.Response) -> Any:
        try:
            return resp.json()
        except ValueError as e:
            raise ProviderAPIError(
                f"{self.provider} API returned invalid JSON for {resp.request.url}",
                status_code=resp.status_code,
            ) from e

    def get_json(
        self,
        path: str,
        purpose: str,
        params: Optional[Dict[str, Any]] = None,
        absent: Sequence[int] = (404,),
    ) -> Any:
        """GET one resource. Returns None when the status is in ``absent``."""
        resp = self._get(path, purpose, params)
        if resp.status_code in absent:
            return None
        self._check(resp)
        return self._json(resp)

    def get_paginated(
        self,
        path: str,
        purpose: str,
        params: Optional[Dict[str, Any]] = None,
    ) -> List[Any]:
        """GET every page of a list resource, following ``Link: rel=next``."""
        items: List[Any] = []
        url: Optional[str] = path
        page_params: Optional[Dict[str, Any]] = {"per_page": PER_PAGE, **(params or {})}

        while url:
            resp = self._get(url, purpose, page_params)
            self._check(resp)
            page = self._json(resp)
            if not isinstance(page, list):
                raise ProviderAPIError(
                    f"{self.provider} API returned {type(page).__name__} "
                    f"for list resource {resp.request.url}"
                )
            items.extend(page)

            next_link = resp.links.get("next")
            url = next_link.get("url") if next_link else None
            # The next link already carries the query string
            page_params = None

        return items
