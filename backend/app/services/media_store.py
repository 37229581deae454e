"""
Portfolio Backend — Abstract Media Store Interface
====================================================

What:  Abstract base class defining the contract for image storage backends.
How:   Concrete implementations inherit from MediaStore and implement
       upload(), delete() and health_check().
Who:   Called by PhotoService during create and delete.

Implementations:
    - CloudinaryMediaStore: hosted image CDN over HTTPS (production)
    - LocalMediaStore: files on local disk served at /uploads (development)
    - tests use an in-memory recording fake
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class StoredMedia:
    """
    What the store returns for an accepted upload.

    media_id: opaque identifier the same store needs to delete the object
    url:      absolute, stable URL clients can display
    """
    media_id: str
    url: str


class MediaStore(ABC):
    """
    Contract:
        - upload() is the first side effect of a photo upload; on failure it
          raises MediaStoreError and nothing has been stored
        - delete() of an object that is already gone is not an error
        - all backend-specific errors are wrapped in MediaStoreError
        - no retries: every failure is terminal for the calling request
    """

    name: str = "media"

    @abstractmethod
    async def upload(
        self,
        content: bytes,
        filename: str,
        content_type: str,
        folder: str,
    ) -> StoredMedia:
        """
        Store `content` under the logical `folder`.

        Args:
            content: Raw image bytes (already validated by ImageValidator)
            filename: Original client filename (used for the extension only)
            content_type: Declared MIME type
            folder: Logical folder, e.g. "portfolio"

        Returns:
            StoredMedia with the new object's identifier and URL.

        Raises:
            MediaStoreError: the backend rejected or could not receive the bytes.
        """
        ...

    @abstractmethod
    async def delete(self, media_id: str) -> None:
        """
        Remove the object identified by `media_id`.

        Raises:
            MediaStoreError: the backend could not be reached or refused.
        """
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        """
        True when the backend is reachable and credentials are accepted.
        Must not raise.
        """
        ...
