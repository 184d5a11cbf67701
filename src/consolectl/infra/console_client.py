"""httpx backed implementation of :class:`~consolectl.core.protocols.RemoteDirectory`.

This module is the **only** place in the codebase that talks HTTP.
Service-side failures never raise: every response, transport error or
undecodable body is folded into an :class:`~consolectl.core.models.Err`
envelope so the core can treat all directory calls uniformly.
"""

from __future__ import annotations

from typing import Any

import httpx
from loguru import logger

from consolectl.core.models import Envelope, Err, Ok


class HttpConsoleDirectory:
    """Concrete :class:`RemoteDirectory` for the console REST API.

    Usage::

        with HttpConsoleDirectory(token, api_key, base_url) as directory:
            envelope = directory.list_organizations()

    Parameters
    ----------
    access_token:
        Bearer token sent with every request.
    api_key:
        Client id sent as ``x-api-key``.
    base_url:
        Service root, e.g. ``https://developers.adobe.io/console``.
    timeout:
        Per-request timeout in seconds.
    transport:
        Optional httpx transport; tests pass an ``httpx.MockTransport``.
    """

    def __init__(
        self,
        access_token: str,
        api_key: str,
        base_url: str,
        *,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._client: httpx.Client = httpx.Client(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
            headers={
                "Authorization": f"Bearer {access_token}",
                "x-api-key": api_key,
                "Accept": "application/json",
            },
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def __enter__(self) -> HttpConsoleDirectory:
        return self

    def __exit__(self, *_args: object) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    # ------------------------------------------------------------------
    # Protocol methods
    # ------------------------------------------------------------------

    def list_organizations(self) -> Envelope[list[dict[str, Any]]]:
        return self._get("/organizations")

    def list_projects(self, org_id: str) -> Envelope[list[dict[str, Any]]]:
        return self._get(f"/organizations/{org_id}/projects")

    def list_workspaces(
        self,
        org_id: str,
        project_id: str,
    ) -> Envelope[list[dict[str, Any]]]:
        return self._get(f"/organizations/{org_id}/projects/{project_id}/workspaces")

    def download_workspace_bundle(
        self,
        org_id: str,
        project_id: str,
        workspace_id: str,
    ) -> Envelope[Any]:
        return self._get(
            f"/organizations/{org_id}/projects/{project_id}/workspaces/{workspace_id}/download",
        )

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _get(self, path: str) -> Envelope[Any]:
        """Issue one GET and fold the outcome into an envelope.  No retries."""
        logger.debug("GET {}", path)
        try:
            response = self._client.get(path)
        except httpx.TimeoutException:
            return Err(f"Request to {path} timed out")
        except httpx.HTTPError as exc:
            return Err(f"Request to {path} failed: {exc}")

        if response.is_error:
            logger.debug("GET {} returned {}", path, response.status_code)
            return Err(
                f"{response.status_code} {response.reason_phrase}: {response.text[:200]}",
                status=response.status_code,
            )

        try:
            body = response.json()
        except ValueError:
            return Err(f"Response from {path} is not valid JSON", status=response.status_code)
        return Ok(body)
