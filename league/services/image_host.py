import logging
from typing import Optional

import httpx

from league.core.config import settings
from league.core.exceptions import UploadFailed

logger = logging.getLogger(__name__)


class ImageHostClient:
    """Uploads avatars and result screenshots to ImgBB and returns their public URL."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        upload_url: Optional[str] = None,
        timeout: Optional[float] = None,
        max_bytes: Optional[int] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.IMGBB_API_KEY
        self.upload_url = upload_url or settings.IMGBB_UPLOAD_URL
        self.timeout = timeout or settings.IMGBB_TIMEOUT_SECONDS
        self.max_bytes = max_bytes or settings.MAX_UPLOAD_BYTES
        self.transport = transport

    async def upload(self, content: bytes, filename: str = "image.png") -> str:
        if not content:
            raise UploadFailed("No image was provided.")
        if len(content) > self.max_bytes:
            raise UploadFailed(f"Image is larger than {self.max_bytes} bytes.")
        if not self.api_key:
            raise UploadFailed("Image uploads are not configured (missing API key).")

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(
                    self.upload_url,
                    params={"key": self.api_key},
                    files={"image": (filename, content)},
                )
        except httpx.HTTPError as e:
            logger.warning("Image upload request failed: %s", e)
            raise UploadFailed(f"Image upload failed: {e}") from e

        try:
            payload = response.json()
        except ValueError:
            logger.warning("Image host answered %s with a non-JSON body", response.status_code)
            raise UploadFailed(f"Image host returned an unreadable response (HTTP {response.status_code}).")

        if not isinstance(payload, dict):
            raise UploadFailed("Image host returned an unexpected response.")
        if not payload.get("success"):
            message = (payload.get("error") or {}).get("message") or f"HTTP {response.status_code}"
            logger.warning("Image host rejected upload: %s", message)
            raise UploadFailed(f"Image upload rejected: {message}")

        url = (payload.get("data") or {}).get("url")
        if not url:
            raise UploadFailed("Image host did not return a URL.")
        return url
