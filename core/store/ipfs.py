"""
IPFS Proof Store

Publishes JSON documents through a pinning endpoint and fetches them back
through an HTTP gateway (``<gateway_url>/<cid>``).
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from core.http import HttpClient, HttpError
from core.schemas.errors import ProofNotFound, StoreUnavailable

from .base import ProofStore

logger = logging.getLogger(__name__)

# Response keys that carry the new content id, by pinning service
_CID_KEYS = ("IpfsHash", "cid", "Hash", "hash")


class IPFSProofStore(ProofStore):
    """
    HTTP-backed content-addressed store.

    Args:
        gateway_url: Gateway prefix used for reads
        publish_url: Pinning endpoint accepting a JSON body; without one the
            store is read-only
        api_key: Bearer token for the pinning endpoint
        http: Shared HTTP client
    """

    name = "ipfs"

    def __init__(
        self,
        gateway_url: str,
        *,
        publish_url: Optional[str] = None,
        api_key: Optional[str] = None,
        http: Optional[HttpClient] = None,
    ) -> None:
        self.gateway_url = gateway_url.rstrip("/")
        self.publish_url = publish_url
        self.api_key = api_key
        self.http = http or HttpClient()

    def publish(self, document: dict[str, Any]) -> str:
        if not self.publish_url:
            raise StoreUnavailable("IPFS store has no publish_url configured")

        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        try:
            response = self.http.post(self.publish_url, json=document, headers=headers)
        except HttpError as e:
            raise StoreUnavailable(f"IPFS publish failed: {e}") from e

        if not response.ok:
            raise StoreUnavailable(
                f"IPFS publish returned HTTP {response.status_code}",
                details={"status_code": response.status_code, "body": response.text[:200]},
            )

        try:
            body = response.json()
        except ValueError as e:
            raise StoreUnavailable("IPFS publish returned a non-JSON body") from e

        cid = _extract_cid(body)
        if not cid:
            raise StoreUnavailable(
                "IPFS publish response carried no content id",
                details={"keys": sorted(body) if isinstance(body, dict) else []},
            )
        logger.debug(f"Published document to IPFS: {cid}")
        return cid

    def fetch(self, cid: str) -> Any:
        url = f"{self.gateway_url}/{cid}"
        try:
            response = self.http.get(url)
        except HttpError as e:
            raise StoreUnavailable(f"IPFS fetch of {cid} failed: {e}", details={"cid": cid}) from e

        if response.status_code == 404:
            raise ProofNotFound(f"IPFS gateway has no content for {cid}", cid=cid)
        if not response.ok:
            raise StoreUnavailable(
                f"IPFS fetch of {cid} returned HTTP {response.status_code}",
                details={"cid": cid, "status_code": response.status_code},
            )

        try:
            return response.json()
        except ValueError:
            # Non-JSON content is surfaced as a string for the caller to reject
            return response.text


def _extract_cid(body: Any) -> Optional[str]:
    if isinstance(body, str):
        return body.strip() or None
    if not isinstance(body, dict):
        return None
    for key in _CID_KEYS:
        if body.get(key):
            return str(body[key])
    data = body.get("data")
    if isinstance(data, dict):
        return _extract_cid(data)
    return None
