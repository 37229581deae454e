"""
Portfolio Backend — Cloudinary Media Store
============================================

What:  MediaStore backed by Cloudinary's REST upload API.
How:   Signed multipart uploads and signed destroy calls over HTTPS with
       httpx. A request signature is the SHA-1 hex digest of the sorted
       `key=value` pairs joined by `&`, followed by the API secret.
Who:   Built by create_app() when MEDIA_BACKEND=cloudinary.

Endpoints used:
    POST {base}/{cloud}/image/upload    → {"public_id", "secure_url", ...}
    POST {base}/{cloud}/image/destroy   → {"result": "ok" | "not found"}
    GET  {base}/{cloud}/ping            → Admin API liveness (basic auth)

No retries and no cancellation: a failed call raises MediaStoreError and the
calling request fails.
"""

import hashlib
import logging
import time
from typing import Any, Dict, Optional

import httpx

from app.exceptions import MediaStoreError
from app.services.media_store import MediaStore, StoredMedia

logger = logging.getLogger(__name__)

API_BASE_URL = "https://api.cloudinary.com/v1_1"


def sign_params(params: Dict[str, Any], api_secret: str) -> str:
    """
    Cloudinary request signature.

    Example:
        sign_params({"timestamp": 1315060510, "public_id": "sample"}, "abcd")
        == sha1("public_id=sample&timestamp=1315060510abcd").hexdigest()
    """
    to_sign = "&".join(
        f"{key}={params[key]}" for key in sorted(params) if params[key] not in (None, "")
    )
    return hashlib.sha1(f"{to_sign}{api_secret}".encode("utf-8")).hexdigest()


class CloudinaryMediaStore(MediaStore):
    name = "cloudinary"

    def __init__(
        self,
        cloud_name: str,
        api_key: str,
        api_secret: str,
        timeout: float = 60.0,
        base_url: str = API_BASE_URL,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.cloud_name = cloud_name
        self.api_key = api_key
        self._api_secret = api_secret
        self._timeout = timeout
        self._base_url = f"{base_url.rstrip('/')}/{cloud_name}"
        # Tests inject httpx.MockTransport here
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self._timeout, transport=self._transport)

    def _signed(self, params: Dict[str, Any]) -> Dict[str, Any]:
        params = {key: value for key, value in params.items() if value not in (None, "")}
        params["timestamp"] = int(time.time())
        params["signature"] = sign_params(params, self._api_secret)
        params["api_key"] = self.api_key
        return params

    async def upload(
        self,
        content: bytes,
        filename: str,
        content_type: str,
        folder: str,
    ) -> StoredMedia:
        data = self._signed({"folder": folder})
        files = {"file": (filename, content, content_type)}

        started = time.perf_counter()
        try:
            async with self._client() as http:
                response = await http.post(f"{self._base_url}/image/upload", data=data, files=files)
        except httpx.HTTPError as e:
            logger.error("Cloudinary upload failed to connect: %s", type(e).__name__)
            raise MediaStoreError(context={"operation": "upload", "error_type": type(e).__name__})

        body = self._json(response, "upload")
        if response.status_code >= 400 or "public_id" not in body:
            logger.error(
                "Cloudinary upload rejected: status=%d error=%s",
                response.status_code,
                (body.get("error") or {}).get("message", "unknown"),
            )
            raise MediaStoreError(
                context={"operation": "upload", "status": response.status_code},
            )

        url = body.get("secure_url") or body.get("url")
        if not url:
            raise MediaStoreError(context={"operation": "upload", "reason": "no url in response"})

        logger.info(
            "Cloudinary upload stored %s (%d bytes) in %.0fms",
            body["public_id"],
            len(content),
            (time.perf_counter() - started) * 1000,
        )
        return StoredMedia(media_id=body["public_id"], url=url)

    async def delete(self, media_id: str) -> None:
        data = self._signed({"public_id": media_id})
        try:
            async with self._client() as http:
                response = await http.post(f"{self._base_url}/image/destroy", data=data)
        except httpx.HTTPError as e:
            logger.error("Cloudinary destroy failed to connect: %s", type(e).__name__)
            raise MediaStoreError(
                context={"operation": "delete", "media_id": media_id, "error_type": type(e).__name__},
            )

        body = self._json(response, "delete")
        result = body.get("result")
        if response.status_code >= 400 or result not in ("ok", "not found"):
            raise MediaStoreError(
                context={"operation": "delete", "media_id": media_id, "status": response.status_code},
            )
        if result == "not found":
            logger.info("Cloudinary object %s was already gone", media_id)
        else:
            logger.info("Cloudinary object %s deleted", media_id)

    async def health_check(self) -> bool:
        try:
            async with self._client() as http:
                response = await http.get(
                    f"{self._base_url}/ping",
                    auth=(self.api_key, self._api_secret),
                )
            return response.status_code == 200
        except httpx.HTTPError as e:
            logger.warning("Cloudinary health check failed: %s", type(e).__name__)
            return False

    @staticmethod
    def _json(response: httpx.Response, operation: str) -> Dict[str, Any]:
        try:
            body = response.json()
        except ValueError:
            raise MediaStoreError(
                context={"operation": operation, "status": response.status_code, "reason": "non-JSON body"},
            )
        if not isinstance(body, dict):
            raise MediaStoreError(context={"operation": operation, "reason": "unexpected body"})
        return body
