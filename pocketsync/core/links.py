"""Pocket link records and the link-listing call."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from pocketsync.config.models import Credentials
from pocketsync.core.api import LINKS_ENDPOINT, DecodeError, PocketClient

logger = logging.getLogger(__name__)


def _as_str(value: Any) -> str:
    return "" if value is None else str(value)


def _as_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


@dataclass
class LinkRecord:
    """A saved link as returned by the Pocket API."""

    item_id: str
    resolved_id: str = ""
    given_url: str = ""
    given_title: str = ""
    resolved_title: str | None = None  # Absent when Pocket could not resolve the URL
    resolved_url: str | None = None
    excerpt: str = ""
    favorite: str = "0"
    status: str = "0"
    time_added: str = ""
    time_updated: str = ""
    time_read: str = ""
    time_favorited: str = ""
    word_count: str = ""
    lang: str = ""
    listen_duration_estimate: int = 0
    sort_id: int = 0

    @classmethod
    def from_api_response(cls, data: dict[str, Any]) -> LinkRecord:
        """Create a LinkRecord from one entry of the API's ``list`` object.

        Raises:
            DecodeError: If the entry is not an object or has no item_id
        """
        if not isinstance(data, dict):
            raise DecodeError("Link entry is not a JSON object")
        item_id = data.get("item_id")
        if item_id is None or item_id == "":
            raise DecodeError("Link entry has no item_id")

        return cls(
            item_id=str(item_id),
            resolved_id=_as_str(data.get("resolved_id")),
            given_url=_as_str(data.get("given_url")),
            given_title=_as_str(data.get("given_title")),
            resolved_title=data.get("resolved_title") or None,
            resolved_url=data.get("resolved_url") or None,
            excerpt=_as_str(data.get("excerpt")),
            favorite=_as_str(data.get("favorite", "0")),
            status=_as_str(data.get("status", "0")),
            time_added=_as_str(data.get("time_added")),
            time_updated=_as_str(data.get("time_updated")),
            time_read=_as_str(data.get("time_read")),
            time_favorited=_as_str(data.get("time_favorited")),
            word_count=_as_str(data.get("word_count")),
            lang=_as_str(data.get("lang")),
            listen_duration_estimate=_as_int(data.get("listen_duration_estimate")),
            sort_id=_as_int(data.get("sort_id")),
        )

    @property
    def url(self) -> str:
        """Resolved URL when Pocket has one, otherwise the URL as saved."""
        return self.resolved_url or self.given_url


def parse_link_list(data: dict[str, Any]) -> list[LinkRecord]:
    """Parse a link-listing response into records, ordered by sort_id.

    Pocket encodes "no items" as an empty JSON array instead of an object.

    Raises:
        DecodeError: If the response has no usable ``list``
    """
    if "list" not in data:
        raise DecodeError(f"Response from {LINKS_ENDPOINT} has no 'list'")

    raw = data["list"]
    if raw == []:
        return []
    if not isinstance(raw, dict):
        raise DecodeError(f"Response from {LINKS_ENDPOINT} has a malformed 'list'")

    records = [LinkRecord.from_api_response(entry) for entry in raw.values()]
    records.sort(key=lambda r: r.sort_id)
    return records


def fetch_links(client: PocketClient, credentials: Credentials) -> list[LinkRecord]:
    """Fetch every saved link in a single request.

    Raises:
        TransportError: If the request fails
        DecodeError: If the response cannot be parsed
    """
    if credentials.token is None:
        raise ValueError("Cannot fetch links without an access token")

    data = client.post(
        LINKS_ENDPOINT,
        {
            "consumer_key": credentials.consumer_key,
            "access_token": credentials.token,
            "state": "all",
            "detailType": "simple",
            "sort": "oldest",
        },
    )
    records = parse_link_list(data)
    logger.info("Fetched %d links", len(records))
    return records
