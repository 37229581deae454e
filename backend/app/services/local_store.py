"""
Portfolio Backend — Local Disk Media Store
============================================

What:  MediaStore that writes images below a local directory.
How:   UUID filenames under `<root>/<folder>/`, written with aiofiles;
       the URL points at the `/uploads` mount registered by create_app().
Who:   Built by create_app() when MEDIA_BACKEND=local (development setups).

Directory Structure:
    uploads/
    └── portfolio/
        ├── 0b6c...e1.jpg
        └── 9f2a...44.png

media_id is the path relative to the root ("portfolio/0b6c...e1.jpg").
No user input reaches the filename; only the validated extension is kept.
"""

import logging
import os
import uuid
from pathlib import Path

import aiofiles

from app.exceptions import MediaStoreError
from app.services.media_store import MediaStore, StoredMedia

logger = logging.getLogger(__name__)


class LocalMediaStore(MediaStore):
    name = "local"

    def __init__(self, root: str, public_base_url: str, url_prefix: str = "/uploads"):
        self.root = Path(root).resolve()
        self.root.mkdir(parents=True, exist_ok=True)
        self.public_base_url = public_base_url.rstrip("/")
        self.url_prefix = "/" + url_prefix.strip("/")
        logger.info("LocalMediaStore initialized with root=%s", self.root)

    def _resolve(self, media_id: str) -> Path:
        path = (self.root / media_id).resolve()
        # media_id must stay inside the root
        if self.root not in path.parents:
            raise MediaStoreError(
                message="Invalid media reference",
                context={"media_id": media_id},
            )
        return path

    async def upload(
        self,
        content: bytes,
        filename: str,
        content_type: str,
        folder: str,
    ) -> StoredMedia:
        extension = Path(filename).suffix.lower()
        media_id = f"{folder.strip('/')}/{uuid.uuid4()}{extension}"
        path = self._resolve(media_id)

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(path, "wb") as f:
                await f.write(content)
        except OSError as e:
            logger.error("Failed to store file at %s: %s", path, str(e))
            raise MediaStoreError(
                message="Failed to save uploaded image. Please try again.",
                context={"path": str(path), "os_error": str(e)},
            )

        logger.info("File stored: %s (%d bytes)", media_id, len(content))
        return StoredMedia(
            media_id=media_id,
            url=f"{self.public_base_url}{self.url_prefix}/{media_id}",
        )

    async def delete(self, media_id: str) -> None:
        path = self._resolve(media_id)
        try:
            if path.exists():
                os.remove(path)
                logger.info("Deleted file: %s", media_id)
            else:
                logger.debug("Delete: file already gone: %s", media_id)
        except OSError as e:
            raise MediaStoreError(
                message="Failed to delete image file",
                context={"path": str(path), "os_error": str(e)},
            )

    async def health_check(self) -> bool:
        return self.root.is_dir() and os.access(self.root, os.W_OK)
