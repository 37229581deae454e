"""
Portfolio Backend — Upload Validation
=======================================

What:  Checks an uploaded file before any byte leaves the server.
How:   Presence, extension, declared MIME type and size, cheapest first.
Who:   Called by PhotoService.create_photo() before the media store upload.

Both the extension and the declared Content-Type must name an accepted
raster image type; either one alone is trivially spoofed by renaming or by
a client sending a generic type.
"""

import logging
from pathlib import Path
from typing import Optional

from app.exceptions import FileTooLargeError, NoFileError, UnsupportedFileTypeError

logger = logging.getLogger(__name__)

# ── Allowed File Types ────────────────────────────────────────────────────
# MIME type → canonical extension
ALLOWED_MIME_TYPES = {
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
    "image/pjpeg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
}

ALLOWED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp"}


class ImageValidator:
    """
    Validation order:
        1. Presence   — NoFileError when the upload is missing or empty
        2. Extension  — UnsupportedFileTypeError
        3. MIME type  — UnsupportedFileTypeError (declared Content-Type)
        4. Size       — FileTooLargeError above max_file_size
    """

    def __init__(self, max_file_size: int):
        self.max_file_size = max_file_size

    def validate_extension(self, filename: str) -> str:
        """Returns the normalized extension (lowercase with dot)."""
        ext = Path(filename).suffix.lower()
        if ext not in ALLOWED_EXTENSIONS:
            raise UnsupportedFileTypeError(
                message=(
                    f"File type '{ext or filename}' is not supported. "
                    f"Allowed types: {', '.join(sorted(ALLOWED_EXTENSIONS))}"
                ),
                context={"extension": ext, "allowed": sorted(ALLOWED_EXTENSIONS)},
            )
        return ext

    def validate_content_type(self, content_type: Optional[str]) -> str:
        # "image/jpeg; charset=binary" → "image/jpeg"
        mime_type = (content_type or "").split(";")[0].strip().lower()
        if mime_type not in ALLOWED_MIME_TYPES:
            raise UnsupportedFileTypeError(
                message=(
                    f"Content type '{mime_type or 'unknown'}' is not supported. "
                    "Only image files are allowed (JPEG, PNG, GIF, WebP)."
                ),
                context={"declared_mime": mime_type, "allowed": sorted(ALLOWED_MIME_TYPES)},
            )
        return mime_type

    def validate_size(self, size: int) -> None:
        if size > self.max_file_size:
            max_mb = self.max_file_size / (1024 * 1024)
            raise FileTooLargeError(
                message=f"File size ({size / (1024 * 1024):.1f}MB) exceeds maximum of {max_mb:.0f}MB.",
                context={"max_size": self.max_file_size, "actual_size": size},
            )

    def validate(
        self,
        filename: Optional[str],
        content_type: Optional[str],
        content: Optional[bytes],
    ) -> str:
        """
        Full check. Returns the validated MIME type.

        Raises:
            NoFileError, UnsupportedFileTypeError, FileTooLargeError
        """
        if not filename or not content:
            raise NoFileError()

        self.validate_extension(filename)
        mime_type = self.validate_content_type(content_type)
        self.validate_size(len(content))

        logger.debug("Upload accepted: %s (%s, %d bytes)", filename, mime_type, len(content))
        return mime_type
