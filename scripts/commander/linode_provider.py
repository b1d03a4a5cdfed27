"""
ResourceProvider implementation backed by the Linode v4 REST API.
"""

from __future__ import annotations

import logging
from typing import Any

import requests

from commander.errors import AuthenticationError, NotFoundError, TransportError
from commander.providers import (
    AccountSummary,
    InstanceStatus,
    Notification,
    ResourceInstance,
)

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.linode.com/v4"
PAGE_SIZE = 100


def _instance_from_dict(data: dict) -> ResourceInstance:
    """Convert an instance payload to ResourceInstance."""
    return ResourceInstance(
        id=data.get("id", 0),
        label=data.get("label", ""),
        status=InstanceStatus.parse(data.get("status")),
        type=data.get("type") or "",
        region=data.get("region") or "",
        ipv4=tuple(data.get("ipv4") or ()),
    )


def _notification_from_dict(data: dict) -> Notification:
    return Notification(
        label=data.get("label") or "",
        message=data.get("message") or "",
    )


class LinodeProvider:
    """
    ResourceProvider for the Linode API.

    Usage:
        provider = LinodeProvider(token='your-token')
        instances = provider.list_instances()

    The token is injected by the caller; this class never reads the
    process environment.
    """

    def __init__(self, token: str, api_url: str = DEFAULT_API_URL, timeout: int = 30):
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers["Authorization"] = f"Bearer {token}"
        self.session.headers["User-Agent"] = "linode-commander"

    def _request(
        self,
        method: str,
        path: str,
        params: dict | None = None,
        json: dict | None = None,
    ) -> Any:
        """Make HTTP request to API"""
        url = f"{self.api_url}{path}"
        logger.debug("%s %s", method, url)

        try:
            response = self.session.request(
                method,
                url,
                params=params,
                json=json,
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.Timeout as e:
            raise TransportError(f"Request to {url} timed out after {self.timeout}s") from e
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            if status == 401:
                raise AuthenticationError(f"Token rejected by {url}") from e
            if status == 404:
                raise NotFoundError(f"Not found: {url}") from e
            raise TransportError(f"{method} {url} failed: {e}", status_code=status) from e
        except requests.RequestException as e:
            raise TransportError(f"{method} {url} failed: {e}") from e

        if response.status_code == 204 or not response.content:
            return None

        try:
            return response.json()
        except ValueError as e:
            raise TransportError(f"Invalid JSON from {url}") from e

    def _paginate(self, path: str) -> list[dict]:
        """Collect every page of a paginated collection."""
        items: list[dict] = []
        page = 1
        while True:
            body = self._request("GET", path, params={"page": page, "page_size": PAGE_SIZE}) or {}
            items.extend(body.get("data", []))
            if page >= body.get("pages", 1):
                return items
            page += 1

    def list_instances(self) -> list[ResourceInstance]:
        return [_instance_from_dict(d) for d in self._paginate("/linode/instances")]

    def get_instance(self, instance_id: int) -> ResourceInstance:
        return _instance_from_dict(self._request("GET", f"/linode/instances/{instance_id}") or {})

    def list_notifications(self) -> list[Notification]:
        return [_notification_from_dict(d) for d in self._paginate("/account/notifications")]

    def get_account(self) -> AccountSummary:
        data = self._request("GET", "/account") or {}
        return AccountSummary(
            first_name=data.get("first_name") or "",
            last_name=data.get("last_name") or "",
            email=data.get("email") or "",
        )

    def boot_instance(self, instance_id: int) -> None:
        self._request("POST", f"/linode/instances/{instance_id}/boot", json={})

    def shutdown_instance(self, instance_id: int) -> None:
        self._request("POST", f"/linode/instances/{instance_id}/shutdown")

    def close(self) -> None:
        """Close the session"""
        self.session.close()

    def __enter__(self) -> "LinodeProvider":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
